"""Threshold grids, probability grids and initial threshold guesses."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from lokipsr.stats import norm_isf


def compute_thresholds(snr_start: float, snr_final: float, nthresholds: int) -> np.ndarray:
    """Evenly spaced thresholds from ``snr_start`` to ``snr_final``."""
    if nthresholds < 2:
        raise ValueError("Number of thresholds must be > 1")
    step = np.float32((snr_final - snr_start) / np.float32(nthresholds - 1))
    return (np.arange(nthresholds, dtype=np.float32) * step + np.float32(snr_start)).astype(
        np.float32
    )


def compute_probs(nprobs: int, prob_min: float = 0.05) -> np.ndarray:
    """Logarithmically spaced probabilities from ``prob_min`` to 1."""
    if nprobs <= 1:
        raise ValueError("Number of probabilities must be > 1")
    if prob_min <= 0.0 or prob_min >= 1.0:
        raise ValueError("Probability must be in the range (0, 1)")
    log_min = np.float32(np.log10(np.float32(prob_min)))
    step = np.float32(-log_min / np.float32(nprobs - 1))
    exponents = log_min + step * np.arange(nprobs, dtype=np.float32)
    return np.power(np.float32(10.0), exponents).astype(np.float32)


def compute_probs_linear(nprobs: int, prob_min: float = 0.05) -> np.ndarray:
    """Linearly spaced probabilities from ``prob_min`` to 1."""
    if nprobs <= 1:
        raise ValueError("Number of probabilities must be > 1")
    step = np.float32((1.0 - prob_min) / np.float32(nprobs - 1))
    return (np.float32(prob_min) + step * np.arange(nprobs, dtype=np.float32)).astype(np.float32)


def bound_scheme(nstages: int, snr_bound: float) -> np.ndarray:
    """Thresholds that grow as the square root of the accumulated segments."""
    nsegments = nstages + 1
    stage = np.arange(nstages, dtype=np.float32) + np.float32(2)
    return np.sqrt(stage * np.float32(snr_bound) ** 2 / np.float32(nsegments)).astype(np.float32)


def trials_scheme(
    branching_pattern: Sequence[float],
    trials_start: int = 1,
    min_trials: float = 1e10,
) -> np.ndarray:
    """Thresholds from the normal tail for the cumulative number of trials."""
    pattern = np.asarray(branching_pattern, dtype=np.float32)
    log2_trials = np.float32(np.log2(np.float32(trials_start))) + np.cumsum(
        np.log2(pattern), dtype=np.float32
    )
    trials = np.exp2(log2_trials)
    effective = np.maximum(trials, np.float32(min_trials))
    return np.array([norm_isf(1.0 / float(t)) for t in effective], dtype=np.float32)


def guess_scheme(
    nstages: int,
    snr_bound: float,
    branching_pattern: Sequence[float],
    trials_start: int = 1,
    min_trials: float = 1e10,
) -> np.ndarray:
    """Element-wise minimum of the bound and trials schemes."""
    if len(branching_pattern) != nstages:
        raise ValueError("Branching pattern length must match the number of stages")
    bound = bound_scheme(nstages, snr_bound)
    trials = trials_scheme(branching_pattern, trials_start, min_trials)
    return np.minimum(bound, trials).astype(np.float32)


def current_threshold_indices(
    thresholds: Sequence[float], guess: float, beam_width: float
) -> list[int]:
    """Indices of thresholds within ``beam_width`` of ``guess``.

    The window is clipped below at 0 and above at the last threshold.
    """
    values = np.asarray(thresholds, dtype=np.float32)
    if values.size == 0:
        return []
    lower = max(np.float32(0.0), np.float32(guess) - np.float32(beam_width))
    upper = min(values[-1], np.float32(guess) + np.float32(beam_width))
    return [int(i) for i in np.flatnonzero((values >= lower) & (values <= upper))]