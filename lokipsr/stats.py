"""Statistical helpers: factorials, normal and chi-squared tail functions."""

from __future__ import annotations

import math

import numpy as np
from scipy import stats as _sps


def factorial(n: int | float) -> int | float:
    """Return n! for integers, or gamma(n + 1) for floating-point input."""
    if n < 0:
        raise ValueError("Factorial is not defined for negative numbers.")
    if isinstance(n, (int, np.integer)):
        return math.factorial(int(n))
    return math.gamma(float(n) + 1.0)


def norm_isf(p: float) -> float:
    """Inverse survival function of the standard normal distribution."""
    return float(_sps.norm.isf(p))


def exact_norm_isf(minus_logsf: float) -> float:
    """Normal quantile whose survival probability is exp(-minus_logsf)."""
    return float(_sps.norm.isf(np.exp(-minus_logsf)))


def exact_chi_sq_minus_logsf(chi_sq_score: float, df: int) -> float:
    """Return -log of the chi-squared survival function at ``chi_sq_score``."""
    if df == 0:
        raise ValueError("Degrees of freedom must be greater than 0")
    return float(-_sps.chi2.logsf(chi_sq_score, df))


def is_power_of_two(n: int) -> bool:
    """True if ``n`` is a positive power of two."""
    return n != 0 and (n & (n - 1)) == 0


def _lerp(a: float, b: float, t: float) -> float:
    if t == 0.0:
        return a
    return (1.0 - t) * a + t * b


class StatLookupTables:
    """Interpolating lookup tables for the normal ISF and chi-squared tail."""

    MAX_MINUS_LOGSF = 400.0
    MINUS_LOGSF_RES = 0.1
    CHI_SQ_MAX = 300.0
    CHI_SQ_RES = 0.5
    CHI_SQ_MAX_DF = 64

    NORM_TABLE_SIZE = int(MAX_MINUS_LOGSF / MINUS_LOGSF_RES) + 1
    CHI_SQ_TABLE_SIZE = int(CHI_SQ_MAX / CHI_SQ_RES) + 1

    def __init__(self) -> None:
        minus_logsf = np.arange(self.NORM_TABLE_SIZE, dtype=np.float64) * self.MINUS_LOGSF_RES
        self._norm_isf_table = _sps.norm.isf(np.exp(-minus_logsf)).astype(np.float32)

        scores = np.arange(self.CHI_SQ_TABLE_SIZE, dtype=np.float64) * self.CHI_SQ_RES
        dfs = np.arange(1, self.CHI_SQ_MAX_DF + 1, dtype=np.float64)[:, np.newaxis]
        self._chi_sq_table = (-_sps.chi2.logsf(scores[np.newaxis, :], dfs)).astype(np.float32)

    def norm_isf(self, minus_logsf: float) -> float:
        """Interpolated normal quantile for a survival probability exp(-minus_logsf)."""
        if minus_logsf < 0:
            raise ValueError("minus_logsf must be non-negative")
        table = self._norm_isf_table
        if minus_logsf < self.MAX_MINUS_LOGSF:
            pos = minus_logsf / self.MINUS_LOGSF_RES
            pos_int = min(int(pos), len(table) - 2)
            frac = pos - pos_int
            return float(np.float32(_lerp(float(table[pos_int]), float(table[pos_int + 1]), frac)))
        return float(np.float32(float(table[-1]) * math.sqrt(minus_logsf / self.MAX_MINUS_LOGSF)))

    def chi_sq_minus_logsf(self, chi_sq_score: float, df: int) -> float:
        """Interpolated -log survival function of the chi-squared distribution."""
        if df == 0 or df > self.CHI_SQ_MAX_DF:
            raise ValueError("Degrees of freedom out of valid range")
        if chi_sq_score < 0:
            raise ValueError("chi_sq_score must be non-negative")
        row = self._chi_sq_table[df - 1]
        if chi_sq_score < self.CHI_SQ_MAX:
            pos = chi_sq_score / self.CHI_SQ_RES
            pos_int = min(int(pos), len(row) - 2)
            frac = pos - pos_int
            return float(np.float32(_lerp(float(row[pos_int]), float(row[pos_int + 1]), frac)))
        return float(np.float32(float(row[-1]) * chi_sq_score / self.CHI_SQ_MAX))