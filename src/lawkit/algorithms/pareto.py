"""Pareto concentration analysis (the 80/20 rule)."""

from __future__ import annotations

import math
import time
import warnings
from typing import Any

import numpy as np

from lawkit._kernels import gini_sorted_numba
from lawkit.core.dataset import Dataset, as_dataset
from lawkit.core.exceptions import (
    ComputationError,
    DataQualityWarning,
    InsufficientDataError,
)
from lawkit.core.options import LawkitOptions, parse_options
from lawkit.core.result import ParetoResult
from lawkit.core.risk import classify_deviation
from lawkit.core.types import FloatArray

# Bounds on |observed top share - expected ratio| for LOW, MEDIUM, HIGH
RISK_THRESHOLDS: tuple[float, float, float] = (0.10, 0.20, 0.30)


def analyze_pareto(
    data: Dataset | Any,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "data",
) -> ParetoResult:
    """
    Measure how concentrated a set of magnitudes is.

    With pareto_ratio = r (0.8 for the 80/20 rule), the "top" group is the
    largest ceil(n * (1 - r)) items (at least one). The analysis reports:

    - top_20_percent_contribution: percent of the total held by the top group
    - pareto_ratio: the share a Pareto distribution fitted to the data
      assigns to the same top fraction p = 1 - r. With tail index alpha
      estimated by maximum likelihood, the top fraction p holds
      p^(1 - 1/alpha) of the total (1.0 when alpha <= 1, infinite mean)
    - concentration_index: Gini coefficient (0 = equal, 1 = one item holds all)

    Risk comes from how far the observed top share is from r.

    Args:
        data: Dataset or raw input of non-negative magnitudes
        options: Resolved LawkitOptions or a flat option mapping
        path: Source identifier when `data` is raw input

    Returns:
        ParetoResult

    Raises:
        InsufficientDataError: If no non-negative value remains
        ComputationError: If all magnitudes are zero

    Example:
        >>> from lawkit import analyze_pareto
        >>> result = analyze_pareto([100, 200, 300, 1000, 2000])
        >>> round(result.top_20_percent_contribution, 2)
        55.56
    """
    start_time = time.perf_counter()
    options = parse_options(options)
    dataset = as_dataset(data, options, path)
    law = options.law
    ratio = law.pareto_ratio

    values = dataset.values
    negative = values < 0
    if negative.any():
        warnings.warn(
            f"Excluded {int(negative.sum())} negative values from Pareto analysis.",
            DataQualityWarning,
            stacklevel=2,
        )
        values = values[~negative]

    if values.size == 0:
        raise InsufficientDataError(
            "No valid numbers found in input data. Pareto analysis needs "
            "non-negative magnitudes."
        )

    ordered = np.sort(values)[::-1]
    if law.pareto_category_limit:
        ordered = ordered[: law.pareto_category_limit]

    total = float(ordered.sum())
    if total <= 0.0:
        raise ComputationError(
            "Total magnitude is zero; concentration is undefined.",
            analyzer="pareto",
            statistic="total",
        )

    n = ordered.size
    top_fraction = 1.0 - ratio
    top_items = max(1, math.ceil(round(n * top_fraction, 9)))
    top_share = float(ordered[:top_items].sum()) / total

    tail_index = fit_tail_index(ordered)
    fitted_share = implied_top_share(top_fraction, tail_index)
    gini = float(gini_sorted_numba(np.ascontiguousarray(ordered[::-1])))

    deviation = abs(top_share - ratio)
    risk_level = classify_deviation(deviation, RISK_THRESHOLDS, scale=law.analysis_threshold)

    min_sample = law.min_sample_size_for("pareto")
    if n < min_sample:
        warnings.warn(
            f"Pareto analysis of {n} items is below the minimum sample size of "
            f"{min_sample}; results have low reliability.",
            DataQualityWarning,
            stacklevel=2,
        )

    analysis_summary = (
        f"Top {top_items} of {n} items ({top_fraction * 100:.0f}%) contribute "
        f"{top_share * 100:.2f}% of the total (expected {ratio * 100:.0f}%). "
        f"Gini coefficient {gini:.3f}. Risk level {risk_level.value}."
    )
    if options.show_details:
        if tail_index is None:
            analysis_summary += " Tail index undefined (all values equal)."
        else:
            analysis_summary += (
                f" Fitted tail index alpha={tail_index:.3f} implies a top share of "
                f"{fitted_share * 100:.2f}%."
            )

    computation_time = (time.perf_counter() - start_time) * 1000

    return ParetoResult(
        path=dataset.path,
        top_20_percent_contribution=top_share * 100,
        pareto_ratio=fitted_share,
        concentration_index=gini,
        risk_level=risk_level,
        total_items=n,
        top_items=top_items,
        tail_index=tail_index,
        analysis_summary=analysis_summary,
        computation_time_ms=computation_time,
    )


def fit_tail_index(values: FloatArray) -> float | None:
    """
    Maximum-likelihood Pareto tail index over the positive values.

        alpha = m / sum(ln(x_i / x_min))

    Returns None if fewer than two positive values exist or all are equal.
    """
    positive = values[values > 0]
    if positive.size < 2:
        return None
    log_ratio = np.log(positive / positive.min()).sum()
    if log_ratio <= 0.0:
        return None
    return float(positive.size / log_ratio)


def implied_top_share(top_fraction: float, tail_index: float | None) -> float:
    """
    Share of the total held by the top `top_fraction` of a Pareto population.

    Equal magnitudes (undefined tail index) hold exactly their own fraction.
    """
    if tail_index is None:
        return top_fraction
    if tail_index <= 1.0:
        return 1.0
    return float(top_fraction ** (1.0 - 1.0 / tail_index))
