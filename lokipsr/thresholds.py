"""Monte-Carlo building blocks for dynamic pruning-threshold schemes."""

from __future__ import annotations

import bisect
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import numpy as np


class _NormalSource(Protocol):
    def normal(self, loc: float, scale: float, size: tuple[int, ...]) -> np.ndarray: ...


@dataclass
class State:
    """Statistics of one pruning stage reached with a given threshold."""

    success_h0: float = 1.0
    success_h1: float = 1.0
    complexity: float = 1.0
    complexity_cumul: float = 1.0
    success_h1_cumul: float = 1.0
    nbranches: float = 1.0
    threshold: float = -1.0
    cost: float = 1.0
    threshold_prev: float = -1.0
    success_h1_cumul_prev: float = 1.0
    is_empty: bool = True


class FoldVector:
    """A batch of folded profiles, shape (ntrials, nbins), with their noise variance."""

    def __init__(self, data: np.ndarray | Sequence[Sequence[float]], variance: float = 0.0) -> None:
        array = np.asarray(data, dtype=np.float32)
        if array.ndim != 2:
            raise ValueError("Fold data must be 2-dimensional (ntrials, nbins)")
        self.data = array
        self.variance = float(variance)

    @property
    def ntrials(self) -> int:
        """Number of simulated trials."""
        return int(self.data.shape[0])

    @property
    def nbins(self) -> int:
        """Number of phase bins per trial."""
        return int(self.data.shape[1])

    def is_empty(self) -> bool:
        """True if no trials are held."""
        return self.data.size == 0

    def normalized(self) -> np.ndarray:
        """Folds divided by the noise standard deviation."""
        std = np.float32(math.sqrt(self.variance))
        return (self.data / std).astype(np.float32)


def find_bin_index(bins: Sequence[float], value: float) -> int:
    """Index of the last bin edge <= ``value``; -1 if ``value`` is below all edges."""
    return bisect.bisect_right(list(bins), value) - 1


def simulate_folds(
    folds_in: FoldVector,
    profile: Sequence[float],
    rng: _NormalSource,
    bias_snr: float = 0.0,
    var_add: float = 1.0,
    ntrials_min: int = 1024,
) -> FoldVector:
    """Repeat the input trials to at least ``ntrials_min``, then add noise and a signal."""
    ntrials_in = folds_in.ntrials
    if ntrials_in == 0:
        raise ValueError("No trials in the input folds")
    nbins = folds_in.nbins
    profile_arr = np.asarray(profile, dtype=np.float32)
    if profile_arr.size != nbins:
        raise ValueError("Profile length must match the number of bins")
    repeat_factor = math.ceil(float(np.float32(ntrials_min) / np.float32(ntrials_in)))
    ntrials = repeat_factor * ntrials_in
    noise = np.asarray(
        rng.normal(0.0, math.sqrt(var_add), (ntrials, nbins)), dtype=np.float32
    ).reshape(ntrials, nbins)
    data = np.tile(folds_in.data, (repeat_factor, 1)) + noise + profile_arr * np.float32(bias_snr)
    return FoldVector(data.astype(np.float32), folds_in.variance + var_add)


def compute_threshold_survival(scores: Sequence[float], survive_prob: float) -> float:
    """Score that lets the top ``survive_prob`` fraction (at least one) survive."""
    values = np.asarray(scores, dtype=np.float32)
    if values.size == 0:
        raise ValueError("Scores array is empty")
    n_surviving = int(np.float32(survive_prob) * np.float32(values.size))
    n_surviving = max(1, min(n_surviving, values.size))
    top = np.sort(values)[::-1][:n_surviving]
    return float(top[-1])


def prune_folds(folds_in: FoldVector, scores: Sequence[float], threshold: float) -> FoldVector:
    """Keep the trials whose score is strictly above ``threshold``."""
    values = np.asarray(scores, dtype=np.float32)
    if values.size != folds_in.ntrials:
        raise ValueError("Scores size does not match")
    mask = values > np.float32(threshold)
    return FoldVector(folds_in.data[mask], folds_in.variance)


def gen_next_state(
    state_cur: State,
    threshold: float,
    success_h0: float,
    success_h1: float,
    nbranches: float,
) -> State:
    """State reached from ``state_cur`` by branching and pruning at ``threshold``."""
    nleaves_next = state_cur.complexity * nbranches
    nleaves_surv = nleaves_next * success_h0
    complexity_cumul = state_cur.complexity_cumul + nleaves_next
    success_h1_cumul = state_cur.success_h1_cumul * success_h1
    cost = complexity_cumul / success_h1_cumul if success_h1_cumul != 0 else math.inf
    return State(
        success_h0=success_h0,
        success_h1=success_h1,
        complexity=nleaves_surv,
        complexity_cumul=complexity_cumul,
        success_h1_cumul=success_h1_cumul,
        nbranches=nbranches,
        threshold=threshold,
        cost=cost,
        threshold_prev=state_cur.threshold,
        success_h1_cumul_prev=state_cur.success_h1_cumul,
        is_empty=False,
    )