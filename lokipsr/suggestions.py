"""Fixed-capacity store of candidate suggestions with score-based pruning."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np


def _round_key(value: float) -> int:
    """Round ``value * 1e9`` half away from zero to an integer key."""
    scaled = float(value) * 1e9
    return int(math.copysign(math.floor(abs(scaled) + 0.5), scaled))


def get_unique_indices(params: np.ndarray) -> list[int]:
    """Indices of the first suggestion for each distinct last-parameter value."""
    arr = np.asarray(params, dtype=np.float64)
    if arr.ndim != 3:
        raise ValueError("params must be 3-dimensional")
    seen: set[int] = set()
    unique: list[int] = []
    if arr.shape[1] == 0:
        return unique
    for i, value in enumerate(arr[:, -1, 0]):
        key = _round_key(value)
        if key not in seen:
            seen.add(key)
            unique.append(i)
    return unique


def get_unique_indices_scores(params: np.ndarray, scores: Sequence[float]) -> list[int]:
    """Indices of the best-scoring suggestion for each distinct key.

    The key is the sum of the first values of the last two parameters.
    Entries keep the position at which their key first appeared.
    """
    arr = np.asarray(params, dtype=np.float64)
    if arr.ndim != 3:
        raise ValueError("params must be 3-dimensional")
    score_arr = np.asarray(scores, dtype=np.float32)
    if arr.shape[1] < 2:
        return []
    if score_arr.size < arr.shape[0]:
        raise ValueError("scores must cover every parameter set")
    best: dict[int, tuple[int, float]] = {}
    unique: list[int] = []
    for i, (val1, val2) in enumerate(zip(arr[:, -2, 0], arr[:, -1, 0])):
        key = _round_key(val1 + val2)
        score = float(score_arr[i])
        if key in best:
            slot, best_score = best[key]
            if score > best_score:
                best[key] = (slot, score)
                unique[slot] = i
        else:
            best[key] = (len(unique), score)
            unique.append(i)
    return unique


class SuggestionStruct:
    """Parameter sets, folds, scores and backtracks for up to ``size`` suggestions.

    Only the first ``valid_size`` entries hold live data.
    """

    def __init__(
        self,
        param_sets: np.ndarray,
        folds: np.ndarray,
        scores: Sequence[float],
        backtracks: np.ndarray,
    ) -> None:
        self.param_sets = np.array(param_sets, dtype=np.float64)
        folds_arr = np.asarray(folds)
        fold_dtype = np.complex64 if np.iscomplexobj(folds_arr) else np.float32
        self.folds = np.array(folds_arr, dtype=fold_dtype)
        self.scores = np.array(scores, dtype=np.float32).reshape(-1)
        self.backtracks = np.array(backtracks, dtype=np.int64)
        if self.param_sets.ndim != 3 or self.folds.ndim != 3 or self.backtracks.ndim != 2:
            raise ValueError("param_sets and folds must be 3-D, backtracks 2-D")
        n = self.param_sets.shape[0]
        if self.folds.shape[0] != n or self.scores.size != n or self.backtracks.shape[0] != n:
            raise ValueError("All inputs must hold the same number of suggestions")
        self.valid_size = n

    @property
    def size(self) -> int:
        """Capacity of the store."""
        return int(self.param_sets.shape[0])

    @property
    def nparams(self) -> int:
        """Number of parameters per suggestion."""
        return int(self.param_sets.shape[1])

    @property
    def size_lb(self) -> float:
        """log2 of the number of valid suggestions, 0 when empty."""
        if self.valid_size == 0:
            return 0.0
        return float(np.log2(np.float32(self.valid_size)))

    @property
    def score_max(self) -> float:
        """Highest valid score, 0 when empty."""
        if self.valid_size == 0:
            return 0.0
        return float(np.max(self.scores[: self.valid_size]))

    @property
    def score_min(self) -> float:
        """Lowest valid score, 0 when empty."""
        if self.valid_size == 0:
            return 0.0
        return float(np.min(self.scores[: self.valid_size]))

    @property
    def score_median(self) -> float:
        """Upper median of the valid scores, 0 when empty."""
        if self.valid_size == 0:
            return 0.0
        mid = self.valid_size // 2
        return float(np.partition(self.scores[: self.valid_size], mid)[mid])

    def get_best(self) -> tuple[np.ndarray, np.ndarray, float]:
        """Copies of the best parameter set and fold, and its score."""
        if self.valid_size == 0:
            empty_params = np.zeros(self.param_sets.shape[1:], dtype=np.float64)
            empty_folds = np.zeros(self.folds.shape[1:], dtype=self.folds.dtype)
            return empty_params, empty_folds, 0.0
        idx = int(np.argmax(self.scores[: self.valid_size]))
        return (
            self.param_sets[idx].copy(),
            self.folds[idx].copy(),
            float(self.scores[idx]),
        )

    def get_transformed(self, delta_t: float) -> np.ndarray:
        """Valid parameter sets without their last two parameters.

        ``delta_t`` is accepted for the reference-time shift; no shift is applied.
        """
        if self.nparams <= 2:
            return np.zeros((0, 0, 0), dtype=np.float64)
        return self.param_sets[: self.valid_size, :-2, :].copy()

    def add(
        self,
        param_set: np.ndarray,
        fold: np.ndarray,
        score: float,
        backtrack: Sequence[int],
    ) -> bool:
        """Append one suggestion; False if the store is full."""
        if self.valid_size >= self.size:
            return False
        pos = self.valid_size
        self.param_sets[pos] = param_set
        self.folds[pos] = fold
        self.scores[pos] = score
        bt = np.asarray(backtrack, dtype=np.int64)
        self.backtracks[pos, : bt.size] = bt
        self.valid_size += 1
        return True

    def add_batch(
        self,
        param_sets_batch: np.ndarray,
        folds_batch: np.ndarray,
        scores_batch: Sequence[float],
        backtracks_batch: np.ndarray,
        current_threshold: float,
    ) -> float:
        """Add every batch entry scoring at least the threshold.

        When the store fills up it is trimmed at the median score, which
        raises the threshold. Returns the threshold finally in effect.
        """
        batch_scores = np.asarray(scores_batch, dtype=np.float32).reshape(-1)
        if batch_scores.size == 0:
            return current_threshold
        params = np.asarray(param_sets_batch)
        folds = np.asarray(folds_batch)
        backtracks = np.asarray(backtracks_batch)
        threshold = current_threshold
        candidates = np.flatnonzero(batch_scores >= np.float32(threshold))

        while candidates.size:
            space_left = self.size - self.valid_size
            if space_left == 0:
                before = self.valid_size
                threshold = max(threshold, self.trim_threshold())
                candidates = np.flatnonzero(batch_scores >= np.float32(threshold))
                if self.valid_size == before:
                    # Trimming freed nothing; no further entries can be stored.
                    break
                continue
            chosen = candidates[:space_left]
            pos = self.valid_size
            end = pos + chosen.size
            self.param_sets[pos:end] = params[chosen]
            self.folds[pos:end] = folds[chosen]
            self.scores[pos:end] = batch_scores[chosen]
            self.backtracks[pos:end] = backtracks[chosen]
            self.valid_size = end
            candidates = candidates[chosen.size :]
        return threshold

    def trim_threshold(self) -> float:
        """Keep suggestions scoring at least the median; return the median."""
        if self.valid_size == 0:
            return 0.0
        threshold = self.score_median
        self._keep(self.scores[: self.valid_size] >= np.float32(threshold))
        return threshold

    def trim_repeats(self) -> None:
        """Keep only the best-scoring suggestion among repeated keys."""
        if self.valid_size == 0:
            return
        self._keep(self._unique_mask())

    def trim_repeats_threshold(self) -> float:
        """Drop repeats and suggestions below the median; return the median."""
        if self.valid_size == 0:
            return 0.0
        threshold = self.score_median
        mask = self._unique_mask() & (self.scores[: self.valid_size] >= np.float32(threshold))
        self._keep(mask)
        return threshold

    def get_new(self, max_sugg: int) -> SuggestionStruct:
        """An empty store of capacity ``max_sugg`` with the same entry shapes."""
        result = SuggestionStruct(
            np.zeros((max_sugg, *self.param_sets.shape[1:]), dtype=np.float64),
            np.zeros((max_sugg, *self.folds.shape[1:]), dtype=self.folds.dtype),
            np.zeros(max_sugg, dtype=np.float32),
            np.zeros((max_sugg, self.backtracks.shape[1]), dtype=np.int64),
        )
        result.valid_size = 0
        return result

    def trim_empty(self) -> SuggestionStruct:
        """A new store holding exactly the valid suggestions."""
        n = self.valid_size
        return SuggestionStruct(
            self.param_sets[:n].copy(),
            self.folds[:n].copy(),
            self.scores[:n].copy(),
            self.backtracks[:n].copy(),
        )

    def _unique_mask(self) -> np.ndarray:
        mask = np.zeros(self.valid_size, dtype=bool)
        unique = get_unique_indices_scores(
            self.param_sets[: self.valid_size], self.scores[: self.valid_size]
        )
        mask[unique] = True
        return mask

    def _keep(self, mask: np.ndarray) -> None:
        idx = np.flatnonzero(mask)
        count = idx.size
        if count:
            self.param_sets[:count] = self.param_sets[idx]
            self.folds[:count] = self.folds[idx]
            self.backtracks[:count] = self.backtracks[idx]
            self.scores[:count] = self.scores[idx]
        self.valid_size = int(count)