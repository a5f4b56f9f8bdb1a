"""Normality analysis."""

from __future__ import annotations

import math
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
from lawkit.core.result import NormalResult
from lawkit.core.risk import classify_p_value

# Shapiro-Wilk p-values are unreliable above this size; D'Agostino-Pearson is used instead
SHAPIRO_MAX_N = 5000

OUTLIER_Z = 3.0


def analyze_normal(
    data: Dataset | Any,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "data",
) -> NormalResult:
    """
    Test whether a sample is consistent with a normal distribution.

    Reports the moments of the sample, a normality p-value (Shapiro-Wilk for
    n <= 5000, D'Agostino-Pearson K^2 otherwise) and a t-interval for the
    mean at the configured confidence level. Risk tiers follow the p-value:
    p >= alpha is LOW, then MEDIUM down to alpha/5, HIGH down to alpha/50,
    CRITICAL below.

    When outlier detection is enabled, values with |z| > 3 are counted.

    Args:
        data: Dataset or raw input
        options: Resolved LawkitOptions or a flat option mapping
        path: Source identifier when `data` is raw input

    Returns:
        NormalResult

    Raises:
        InsufficientDataError: If fewer than 3 values are available
        ComputationError: If all values are identical
    """
    start_time = time.perf_counter()
    options = parse_options(options)
    dataset = as_dataset(data, options, path)
    law = options.law

    x = dataset.values
    n = int(x.size)
    if n < 3:
        raise InsufficientDataError(
            f"Insufficient data points: normal analysis needs at least 3 values, got {n}."
        )

    mean = float(np.mean(x))
    std_dev = float(np.std(x, ddof=1))
    if std_dev == 0.0 or not math.isfinite(std_dev):
        raise ComputationError(
            "All values are identical; normality is undefined for zero variance.",
            analyzer="normal",
            statistic="std_dev",
        )

    skewness = float(stats.skew(x))
    kurtosis = float(stats.kurtosis(x))

    if n <= SHAPIRO_MAX_N:
        test_name = "shapiro"
        p_value = float(stats.shapiro(x).pvalue)
    else:
        test_name = "dagostino"
        p_value = float(stats.normaltest(x).pvalue)

    low, high = stats.t.interval(
        law.confidence_level, n - 1, loc=mean, scale=std_dev / math.sqrt(n)
    )

    outlier_count = None
    if law.enable_outlier_detection:
        z = (x - mean) / std_dev
        outlier_count = int(np.count_nonzero(np.abs(z) > OUTLIER_Z))

    risk_level = classify_p_value(p_value, law.significance_level)

    min_sample = law.min_sample_size_for("normal")
    if n < min_sample:
        warnings.warn(
            f"Normality test on {n} values is below the minimum sample size of "
            f"{min_sample}; results have low reliability.",
            DataQualityWarning,
            stacklevel=2,
        )

    verdict = "consistent with" if p_value >= law.significance_level else "deviates from"
    analysis_summary = (
        f"Sample of {n} values (mean {mean:.4f}, std dev {std_dev:.4f}) {verdict} a "
        f"normal distribution ({test_name} p={p_value:.4f}). Risk level {risk_level.value}."
    )
    if options.show_details:
        analysis_summary += (
            f" Skewness {skewness:.3f}, excess kurtosis {kurtosis:.3f}; "
            f"{law.confidence_level * 100:.0f}% CI for the mean [{low:.4f}, {high:.4f}]."
        )
    if outlier_count:
        analysis_summary += f" {outlier_count} values lie more than 3 standard deviations from the mean."

    computation_time = (time.perf_counter() - start_time) * 1000

    return NormalResult(
        path=dataset.path,
        mean=mean,
        std_dev=std_dev,
        skewness=skewness,
        kurtosis=kurtosis,
        normality_test_p=p_value,
        test_name=test_name,
        confidence_interval=(float(low), float(high)),
        outlier_count=outlier_count,
        risk_level=risk_level,
        total_numbers=n,
        analysis_summary=analysis_summary,
        computation_time_ms=computation_time,
    )
