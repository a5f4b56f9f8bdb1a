"""Numba JIT-compiled kernels for lawkit analyzers.

This module contains the per-value inner loops that would otherwise run
in pure Python over every element of large datasets. All functions use
`@njit(cache=True)` to cache compiled code to disk, avoiding recompilation
overhead.
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit


# =============================================================================
# SIGNIFICANT DIGIT EXTRACTION
# =============================================================================


@njit(cache=True)
def leading_digits_numba(values: np.ndarray, base: int, n_digits: int) -> np.ndarray:
    """
    Extract the leading `n_digits` significant digits of each value.

    The sign is ignored. For base 10 and n_digits=2, 0.0347 -> 34 and
    -9150 -> 91. Zero, non-finite and subnormal values whose decade
    scale underflows have no usable significant digit and map to -1.

    Args:
        values: 1D float64 array
        base: Numeral base (>= 2)
        n_digits: Number of leading digits to keep (1 or 2)

    Returns:
        int64 array of the same length; entries in [base^(n-1), base^n - 1]
        or -1 for skipped values
    """
    n = values.shape[0]
    out = np.empty(n, dtype=np.int64)
    log_base = math.log(base)
    low = base ** (n_digits - 1)
    high = base**n_digits - 1

    for i in range(n):
        x = abs(values[i])
        if x == 0.0 or not math.isfinite(x):
            out[i] = -1
            continue

        exponent = math.floor(math.log(x) / log_base)
        scale = math.pow(base, exponent)
        if scale == 0.0 or not math.isfinite(scale):
            # subnormal input, or overflow at the top of the range
            out[i] = -1
            continue
        mantissa = x / scale
        # log rounding can leave the mantissa one place off
        if mantissa >= base:
            mantissa /= base
        elif mantissa < 1.0:
            mantissa *= base

        digits = int(math.floor(mantissa * low + 1e-9))
        if digits > high:
            # mantissa rounded up to the next decade
            digits = low
        elif digits < low:
            digits = low
        out[i] = digits

    return out


# =============================================================================
# CONCENTRATION
# =============================================================================


@njit(cache=True)
def gini_sorted_numba(sorted_values: np.ndarray) -> float:
    """
    Gini coefficient of non-negative values sorted ascending.

        G = 2 * sum(i * x_i) / (n * sum(x)) - (n + 1) / n,  i = 1..n

    Returns 0.0 for an empty array or a zero total.
    """
    n = sorted_values.shape[0]
    total = 0.0
    weighted = 0.0
    for i in range(n):
        total += sorted_values[i]
        weighted += (i + 1) * sorted_values[i]

    if n == 0 or total <= 0.0:
        return 0.0
    gini = 2.0 * weighted / (n * total) - (n + 1.0) / n
    if gini < 0.0:
        return 0.0
    return gini
