"""Benford's law conformity analysis.

Benford's law predicts that the leading significant digit d of many
naturally occurring datasets appears with probability

    P(d) = log_b(1 + 1/d),  d = 1..b-1

so that in base 10 about 30.1% of values start with 1 and only 4.6% with 9.
Fabricated or manipulated numbers tend to flatten this distribution, which
makes it a standard screening test in forensic accounting.
"""

from __future__ import annotations

import time
import warnings
from typing import Any

import numpy as np
from scipy import stats

from lawkit._kernels import leading_digits_numba
from lawkit.core.dataset import Dataset, as_dataset
from lawkit.core.exceptions import DataQualityWarning, InsufficientDataError
from lawkit.core.options import LawkitOptions, parse_options
from lawkit.core.result import BenfordResult
from lawkit.core.risk import RiskLevel, classify_deviation, classify_p_value
from lawkit.core.types import FloatArray

# Nigrini's MAD conformity bounds (close, acceptable, marginal) for base 10.
# Anything above the last bound is nonconformity.
MAD_THRESHOLDS: dict[str, tuple[float, float, float]] = {
    "first": (0.006, 0.012, 0.015),
    "second": (0.008, 0.010, 0.012),
    "both": (0.0012, 0.0018, 0.0022),
}


def analyze_benford(
    data: Dataset | Any,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "data",
) -> BenfordResult:
    """
    Test whether the significant digits of a dataset follow Benford's law.

    The digit mode selects which digits are tested:
    - "first": leading digit, bins 1..b-1
    - "second": second digit, bins 0..b-1
    - "both": first two digits together, bins b..b^2-1 (10..99 in base 10)

    Zero and non-finite values have no significant digit and are skipped;
    the sign is ignored.

    Risk is the less severe of two tiers: the chi-square p-value against the
    significance level, and Nigrini's MAD bounds (scaled by
    analysis_threshold). Large samples make chi-square reject tiny,
    practically irrelevant deviations, which MAD does not.

    Args:
        data: Dataset or raw input (sequence, array, mapping, text)
        options: Resolved LawkitOptions or a flat option mapping
        path: Source identifier when `data` is raw input

    Returns:
        BenfordResult with observed/expected distributions and risk level

    Raises:
        InsufficientDataError: If no value has an extractable digit

    Example:
        >>> import numpy as np
        >>> from lawkit import analyze_benford
        >>> rng = np.random.default_rng(0)
        >>> values = 10 ** rng.uniform(0, 5, size=5000)
        >>> result = analyze_benford(values)
        >>> result.risk_level
        <RiskLevel.LOW: 'LOW'>
    """
    start_time = time.perf_counter()
    options = parse_options(options)
    dataset = as_dataset(data, options, path)
    law = options.law
    mode = law.benford_digits
    base = law.benford_base

    digits, expected = benford_expected(mode, base)
    counts = _count_digits(dataset.values, mode, base, _batch_size(dataset.values, options))
    total = int(counts.sum())

    if total == 0:
        raise InsufficientDataError(
            "No valid numbers found in input data. Benford analysis needs at least "
            "one non-zero finite value."
        )

    observed = counts / total
    if counts.size > 1:
        chi_square, p_value = stats.chisquare(counts, f_exp=expected * total)
        chi_square = float(chi_square)
        p_value = float(p_value)
    else:
        # base 2 has a single first-digit bin: every value conforms
        chi_square, p_value = 0.0, 1.0
    mad = float(np.mean(np.abs(observed - expected)))

    mad_risk = classify_deviation(
        mad, _mad_thresholds(mode, base), scale=law.analysis_threshold
    )
    p_risk = classify_p_value(p_value, law.significance_level)
    risk_level = min(mad_risk, p_risk)

    min_sample = law.min_sample_size_for("benf")
    low_reliability = total < min_sample
    if low_reliability:
        warnings.warn(
            f"Benford analysis of {total} numbers is below the minimum sample size "
            f"of {min_sample}; results have low reliability.",
            DataQualityWarning,
            stacklevel=2,
        )

    analysis_summary = _summarize(
        total, mode, base, chi_square, p_value, mad, risk_level,
        low_reliability, min_sample, digits, observed, expected, options.show_details,
    )

    computation_time = (time.perf_counter() - start_time) * 1000

    return BenfordResult(
        path=dataset.path,
        observed_distribution=observed,
        expected_distribution=expected,
        digits=digits,
        chi_square=chi_square,
        p_value=p_value,
        mad=mad,
        risk_level=risk_level,
        total_numbers=total,
        digit_mode=mode,
        base=base,
        low_reliability=low_reliability,
        analysis_summary=analysis_summary,
        computation_time_ms=computation_time,
    )


def benford_expected(mode: str, base: int = 10) -> tuple[tuple[int, ...], FloatArray]:
    """
    Theoretical Benford distribution for a digit mode and base.

    Args:
        mode: "first", "second" or "both"
        base: Numeral base (>= 2)

    Returns:
        Tuple of (digit value per bin, probability per bin)
    """
    log_base = np.log(base)
    if mode == "first":
        bins = np.arange(1, base, dtype=np.float64)
        probs = np.log1p(1.0 / bins) / log_base
    elif mode == "second":
        bins = np.arange(0, base, dtype=np.float64)
        first = np.arange(1, base, dtype=np.float64)
        # P(d2) = sum over first digits d1 of log_b(1 + 1/(d1*b + d2))
        probs = (np.log1p(1.0 / (first[:, None] * base + bins[None, :])) / log_base).sum(axis=0)
    elif mode == "both":
        bins = np.arange(base, base * base, dtype=np.float64)
        probs = np.log1p(1.0 / bins) / log_base
    else:
        raise ValueError(f"Unknown Benford digit mode '{mode}'")

    probs = probs / probs.sum()
    return tuple(int(b) for b in bins), probs


def _count_digits(values: FloatArray, mode: str, base: int, batch_size: int) -> np.ndarray:
    """Histogram of significant digits, counted in chunks of `batch_size`."""
    n_digits = 1 if mode == "first" else 2
    if mode == "first":
        offset, n_bins = 1, base - 1
    elif mode == "second":
        offset, n_bins = 0, base
    else:
        offset, n_bins = base, base * base - base

    counts = np.zeros(n_bins, dtype=np.int64)
    for start in range(0, values.shape[0], batch_size):
        chunk = np.ascontiguousarray(values[start:start + batch_size], dtype=np.float64)
        extracted = leading_digits_numba(chunk, base, n_digits)
        extracted = extracted[extracted >= 0]
        if mode == "second":
            extracted = extracted % base
        counts += np.bincount(extracted - offset, minlength=n_bins)[:n_bins]
    return counts


def _batch_size(values: FloatArray, options: LawkitOptions) -> int:
    """Chunk size for digit counting; the whole array unless memory-limited."""
    n = max(int(values.shape[0]), 1)
    limit_mb = options.law.memory_limit_mb
    # float64 input plus int64 digits per value
    footprint_mb = values.shape[0] * 16 / (1024 * 1024)
    if options.use_memory_optimization or (limit_mb and footprint_mb > limit_mb):
        return min(options.batch_size, n)
    return n


def _mad_thresholds(mode: str, base: int) -> tuple[float, float, float]:
    """Nigrini bounds, rescaled by bin count for bases other than 10."""
    bounds = MAD_THRESHOLDS[mode]
    if base == 10:
        return bounds
    bins_10 = {"first": 9, "second": 10, "both": 90}[mode]
    bins_b = {"first": base - 1, "second": base, "both": base * base - base}[mode]
    factor = bins_10 / bins_b
    return (bounds[0] * factor, bounds[1] * factor, bounds[2] * factor)


def _summarize(
    total: int,
    mode: str,
    base: int,
    chi_square: float,
    p_value: float,
    mad: float,
    risk_level: RiskLevel,
    low_reliability: bool,
    min_sample: int,
    digits: tuple[int, ...],
    observed: FloatArray,
    expected: FloatArray,
    show_details: bool,
) -> str:
    text = (
        f"Benford's law analysis of {total} numbers ({mode} digit, base {base}): "
        f"MAD {mad:.4f}, chi-square {chi_square:.2f} (p={p_value:.4f}). "
        f"Risk level {risk_level.value}."
    )
    if low_reliability:
        text += (
            f" Sample is below the minimum of {min_sample} numbers; "
            "results have low reliability."
        )
    if show_details:
        worst = int(np.argmax(np.abs(observed - expected)))
        text += (
            f" Largest deviation at digit {digits[worst]}: observed "
            f"{observed[worst] * 100:.2f}% vs expected {expected[worst] * 100:.2f}%."
        )
    return text
