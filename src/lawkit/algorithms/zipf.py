"""Zipf's law rank-frequency analysis."""

from __future__ import annotations

import math
import time
import warnings
from collections import Counter
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
from lawkit.core.result import ZipfResult
from lawkit.core.risk import classify_deviation
from lawkit.core.types import FloatArray

# Bounds on the deviation score for LOW, MEDIUM, HIGH
RISK_THRESHOLDS: tuple[float, float, float] = (0.10, 0.25, 0.50)


def analyze_zipf(
    data: Dataset | Any,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "data",
) -> ZipfResult:
    """
    Fit frequency ~ rank^(-s) and measure the distance from ideal Zipf (s = 1).

    Input is a set of frequencies (any order), or text, in which case the
    frequencies are the word counts of the text. Frequencies that are zero
    or below zipf_frequency_cutoff are dropped, the rest are sorted
    descending and truncated to zipf_rank_limit before fitting

        log(f) = c - s * log(rank)

    by least squares. The deviation score |s - 1| + (1 - |r|) is zero for a
    perfect Zipf distribution and grows with both a wrong exponent and a
    poor power-law fit.

    Args:
        data: Dataset, frequencies, or text
        options: Resolved LawkitOptions or a flat option mapping
        path: Source identifier when `data` is raw input

    Returns:
        ZipfResult

    Raises:
        InsufficientDataError: If fewer than 2 ranks remain after cutoffs
        ComputationError: If the log-log fit is not finite
    """
    start_time = time.perf_counter()
    options = parse_options(options)
    dataset = as_dataset(data, options, path)
    law = options.law

    frequencies = _frequencies(dataset)
    keep = frequencies > 0
    if law.zipf_frequency_cutoff > 0:
        keep &= frequencies >= law.zipf_frequency_cutoff
    ranked = np.sort(frequencies[keep])[::-1]
    if law.zipf_rank_limit:
        ranked = ranked[: law.zipf_rank_limit]

    if ranked.size < 2:
        raise InsufficientDataError(
            f"Insufficient data points: Zipf analysis needs at least 2 ranked "
            f"frequencies after cutoffs, got {ranked.size}."
        )

    ranks = np.arange(1, ranked.size + 1, dtype=np.float64)
    fit = stats.linregress(np.log(ranks), np.log(ranked))
    exponent = -float(fit.slope)
    correlation = abs(float(fit.rvalue))
    if not (math.isfinite(exponent) and math.isfinite(correlation)):
        raise ComputationError(
            "Log-log regression did not produce a finite fit.",
            analyzer="zipf",
            statistic="zipf_coefficient",
        )

    deviation = abs(exponent - 1.0) + (1.0 - correlation)
    risk_level = classify_deviation(deviation, RISK_THRESHOLDS, scale=law.analysis_threshold)

    min_sample = law.min_sample_size_for("zipf")
    if ranked.size < min_sample:
        warnings.warn(
            f"Zipf analysis of {ranked.size} ranks is below the minimum sample size "
            f"of {min_sample}; results have low reliability.",
            DataQualityWarning,
            stacklevel=2,
        )

    analysis_summary = (
        f"Zipf fit over {ranked.size} ranks: exponent s={exponent:.3f}, "
        f"log-log correlation {correlation:.3f}, deviation score {deviation:.3f}. "
        f"Risk level {risk_level.value}."
    )
    if options.show_details:
        top_share = float(ranked[0] / ranked.sum())
        analysis_summary += f" The top-ranked item accounts for {top_share * 100:.2f}% of occurrences."

    computation_time = (time.perf_counter() - start_time) * 1000

    return ZipfResult(
        path=dataset.path,
        zipf_coefficient=exponent,
        correlation_coefficient=correlation,
        deviation_score=deviation,
        risk_level=risk_level,
        total_items=int(ranked.size),
        analysis_summary=analysis_summary,
        computation_time_ms=computation_time,
    )


def _frequencies(dataset: Dataset) -> FloatArray:
    """Numeric frequencies, or word counts when the input is mostly text."""
    if dataset.tokens and len(dataset.tokens) >= dataset.size:
        counts = Counter(dataset.tokens)
        return np.fromiter(counts.values(), dtype=np.float64, count=len(counts))
    return dataset.values
