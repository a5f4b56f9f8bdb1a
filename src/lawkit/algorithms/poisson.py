"""Poisson process analysis of event counts."""

from __future__ import annotations

import time
import warnings
from typing import Any

import numpy as np
from scipy import stats

from lawkit.core.dataset import Dataset, as_dataset
from lawkit.core.exceptions import (
    ComputationError,
    DataQualityWarning,
    InsufficientDataError,
)
from lawkit.core.options import LawkitOptions, parse_options
from lawkit.core.result import PoissonResult
from lawkit.core.risk import classify_p_value
from lawkit.core.types import FloatArray

# Variance/mean band treated as equidispersed, before analysis_threshold scaling
DISPERSION_BAND: tuple[float, float] = (0.8, 1.25)

MIN_EXPECTED_PER_BIN = 5.0

INT64_LIMIT = float(2**63)


def analyze_poisson(
    data: Dataset | Any,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "data",
) -> PoissonResult:
    """
    Test whether event counts follow a Poisson distribution.

    lambda is estimated by the sample mean. Goodness of fit uses a
    chi-square test over count bins, merging neighbours until every bin
    expects at least 5 observations (one degree of freedom is spent on
    lambda). When fewer than 3 bins survive, the index-of-dispersion test

        D = (n - 1) * s^2 / lambda ~ chi2(n - 1)

    is used instead (two-sided).

    Only non-negative integers are event counts; other values are excluded
    with a DataQualityWarning.

    Args:
        data: Dataset or raw input of event counts
        options: Resolved LawkitOptions or a flat option mapping
        path: Source identifier when `data` is raw input

    Returns:
        PoissonResult

    Raises:
        InsufficientDataError: If fewer than 2 counts remain
        ComputationError: If every count is zero (lambda = 0)
            or a count exceeds the 64-bit integer range
    """
    start_time = time.perf_counter()
    options = parse_options(options)
    dataset = as_dataset(data, options, path)
    law = options.law

    x = dataset.values
    is_count = (x >= 0) & (x == np.floor(x))
    excluded = int(x.size - np.count_nonzero(is_count))
    if excluded:
        warnings.warn(
            f"Excluded {excluded} values that are not non-negative integer counts "
            "from Poisson analysis.",
            DataQualityWarning,
            stacklevel=2,
        )
        x = x[is_count]

    n = int(x.size)
    if n < 2:
        raise InsufficientDataError(
            f"Insufficient data points: Poisson analysis needs at least 2 event "
            f"counts, got {n}."
        )

    if float(x.max()) >= INT64_LIMIT:
        raise ComputationError(
            f"Counts up to {float(x.max()):.6g} exceed the 64-bit integer range.",
            analyzer="poisson",
            statistic="counts",
        )

    lam = float(np.mean(x))
    if lam == 0.0:
        raise ComputationError(
            "All counts are zero; the dispersion ratio is undefined.",
            analyzer="poisson",
            statistic="lambda",
        )
    variance = float(np.var(x, ddof=1))
    variance_ratio = variance / lam

    counts = x.astype(np.int64)
    observed, expected = _merged_bins(counts, lam)
    if observed.size >= 3:
        test_name = "chi_square"
        chi2_stat = float(((observed - expected) ** 2 / expected).sum())
        p_value = float(stats.chi2.sf(chi2_stat, observed.size - 2))
    else:
        test_name = "dispersion"
        dispersion_stat = (n - 1) * variance / lam
        p_value = float(
            min(1.0, 2 * min(stats.chi2.cdf(dispersion_stat, n - 1),
                             stats.chi2.sf(dispersion_stat, n - 1)))
        )

    scale = law.analysis_threshold
    lower_band = 1.0 - (1.0 - DISPERSION_BAND[0]) * scale
    upper_band = 1.0 + (DISPERSION_BAND[1] - 1.0) * scale
    if variance_ratio > upper_band:
        dispersion = "over"
    elif variance_ratio < lower_band:
        dispersion = "under"
    else:
        dispersion = "none"

    confidence_interval = lambda_interval(int(x.sum()), n, law.confidence_level)
    risk_level = classify_p_value(p_value, law.significance_level)

    min_sample = law.min_sample_size_for("poisson")
    if n < min_sample:
        warnings.warn(
            f"Poisson analysis of {n} counts is below the minimum sample size of "
            f"{min_sample}; results have low reliability.",
            DataQualityWarning,
            stacklevel=2,
        )

    analysis_summary = (
        f"Event counts over {n} intervals: lambda {lam:.4f}, variance/mean ratio "
        f"{variance_ratio:.3f} ({_describe_dispersion(dispersion)}), "
        f"{test_name} p={p_value:.4f}. Risk level {risk_level.value}."
    )
    if options.show_details:
        analysis_summary += (
            f" {law.confidence_level * 100:.0f}% CI for lambda "
            f"[{confidence_interval[0]:.4f}, {confidence_interval[1]:.4f}]."
        )

    computation_time = (time.perf_counter() - start_time) * 1000

    return PoissonResult(
        path=dataset.path,
        lambda_=lam,
        variance_ratio=variance_ratio,
        poisson_test_p=p_value,
        test_name=test_name,
        dispersion=dispersion,
        confidence_interval=confidence_interval,
        risk_level=risk_level,
        total_events=n,
        analysis_summary=analysis_summary,
        computation_time_ms=computation_time,
    )


def lambda_interval(event_sum: int, n: int, confidence_level: float) -> tuple[float, float]:
    """
    Exact (Garwood) confidence interval for a Poisson rate.

    Args:
        event_sum: Total number of events observed
        n: Number of intervals
        confidence_level: Coverage in (0, 1)
    """
    alpha = 1.0 - confidence_level
    lower = 0.0 if event_sum == 0 else stats.chi2.ppf(alpha / 2, 2 * event_sum) / (2 * n)
    upper = stats.chi2.ppf(1 - alpha / 2, 2 * event_sum + 2) / (2 * n)
    return float(lower), float(upper)


def _merged_bins(counts: np.ndarray, lam: float) -> tuple[FloatArray, FloatArray]:
    """
    Observed and expected frequencies over count intervals, merged left to
    right until each interval expects at least MIN_EXPECTED_PER_BIN. The
    last interval is open-ended and absorbs the upper tail, along with any
    remainder too small to stand alone.

    Interval edges come from the Poisson quantile function and observed
    counts are binned per distinct value, so the work is bounded by the
    number of intervals and distinct counts rather than by max(counts).
    """
    n = counts.size
    step = MIN_EXPECTED_PER_BIN / n
    edges: list[float] = []
    cdf_edge = 0.0
    for _ in range(int(n // MIN_EXPECTED_PER_BIN)):
        if cdf_edge + step >= 1.0:
            break
        edge = float(stats.poisson.ppf(cdf_edge + step, lam))
        if edges and edge <= edges[-1]:
            edge = edges[-1] + 1.0
        if n * float(stats.poisson.sf(edge, lam)) < MIN_EXPECTED_PER_BIN:
            break
        edges.append(edge)
        cdf_edge = float(stats.poisson.cdf(edge, lam))

    upper = np.array(edges, dtype=np.float64)
    cdf = stats.poisson.cdf(upper, lam)
    expected = n * np.diff(np.concatenate(([0.0], cdf, [1.0])))
    if edges:
        expected[-1] = n * stats.poisson.sf(upper[-1], lam)

    values, frequency = np.unique(counts, return_counts=True)
    bins = np.searchsorted(upper, values.astype(np.float64), side="left")
    observed = np.bincount(bins, weights=frequency, minlength=upper.size + 1)
    return observed.astype(np.float64), expected


def _describe_dispersion(dispersion: str) -> str:
    return {
        "over": "overdispersed",
        "under": "underdispersed",
        "none": "equidispersed",
    }[dispersion]

