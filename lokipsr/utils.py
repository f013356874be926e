"""Numerical helpers and a per-thread random number source."""

from __future__ import annotations

import bisect
import os
import threading
from collections.abc import Sequence

import numpy as np

SPEED_OF_LIGHT = 299792458.0


def next_power_of_two(n: int) -> int:
    """Return the smallest power of two that is >= ``n`` (``n`` >= 1)."""
    if n < 1:
        raise ValueError("n must be a positive integer")
    return 1 << (int(n) - 1).bit_length()


def diff_max(x: Sequence[float], y: Sequence[float]) -> float:
    """Return max(x[i] - y[i]); -inf for empty input."""
    xa = np.asarray(x, dtype=np.float32)
    ya = np.asarray(y, dtype=np.float32)
    if xa.shape != ya.shape:
        raise ValueError("x and y must have the same size")
    if xa.size == 0:
        return float("-inf")
    return float(np.max(xa - ya))


def circular_prefix_sum(x: Sequence[float], nsum: int) -> np.ndarray:
    """Prefix sum of ``x`` repeated cyclically, ``nsum`` values long.

    Element k equals sum(x[:k % n + 1]) + (k // n) * sum(x).
    """
    xa = np.asarray(x, dtype=np.float32)
    nbins = xa.size
    out = np.zeros(nsum, dtype=np.float32)
    if nbins == 0 or nsum == 0:
        return out
    base = np.cumsum(xa[: min(nbins, nsum)], dtype=np.float32)
    if nsum <= nbins:
        return base
    last_sum = base[nbins - 1]
    positions = np.arange(nsum)
    wraps = (positions // nbins).astype(np.float32)
    return (base[positions % nbins] + wraps * last_sum).astype(np.float32)


def find_nearest_sorted_idx(arr_sorted: Sequence[float], val: float) -> int:
    """Index of the value nearest ``val`` in a sorted sequence; ties go lower."""
    if len(arr_sorted) == 0:
        raise ValueError("Array is empty")
    idx = bisect.bisect_left(arr_sorted, val)
    if idx == len(arr_sorted):
        return len(arr_sorted) - 1
    if idx > 0 and val - arr_sorted[idx - 1] <= arr_sorted[idx] - val:
        return idx - 1
    return idx


def find_neighbouring_indices(
    indices: Sequence[int], target_idx: int, num: int
) -> list[int]:
    """Return a window of up to ``num`` sorted indices centred on ``target_idx``."""
    if len(indices) == 0:
        raise ValueError("indices cannot be empty")
    if num <= 0:
        raise ValueError("num must be greater than 0")
    pos = bisect.bisect_left(indices, target_idx)
    half = num // 2
    left = pos - half if pos > half else 0
    right = min(len(indices), left + num)
    left = right - num if right > num else 0
    return list(indices[left:right])


class ThreadSafeRNG:
    """Independent random streams, one per thread, derived from a base seed."""

    def __init__(self, base_seed: int | None = None, nstreams: int | None = None) -> None:
        if nstreams is None:
            nstreams = os.cpu_count() or 1
        if nstreams <= 0:
            raise ValueError("Invalid stream count")
        seeds = np.random.SeedSequence(base_seed).spawn(nstreams)
        self._engines = [np.random.Generator(np.random.MT19937(s)) for s in seeds]
        self._local = threading.local()
        self._lock = threading.Lock()
        self._assigned = 0

    def engine(self) -> np.random.Generator:
        """Return the generator belonging to the calling thread."""
        index = getattr(self._local, "index", None)
        if index is None:
            with self._lock:
                if self._assigned >= len(self._engines):
                    raise IndexError("No random stream left for this thread")
                index = self._assigned
                self._assigned += 1
            self._local.index = index
        return self._engines[index]

    def integers(self) -> int:
        """Return a uniformly random 32-bit unsigned integer."""
        return int(self.engine().integers(0, 2**32, dtype=np.uint64))

    def normal(
        self, loc: float = 0.0, scale: float = 1.0, size: int | tuple[int, ...] | None = None
    ) -> float | np.ndarray:
        """Draw normally distributed float32 samples."""
        samples = self.engine().normal(loc, scale, size)
        if size is None:
            return float(np.float32(samples))
        return np.asarray(samples, dtype=np.float32)