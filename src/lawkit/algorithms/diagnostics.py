"""Dataset diagnostics: what kind of data is this, and which laws apply?"""

from __future__ import annotations

import math
import time
from typing import Any

import numpy as np
from scipy import stats

from lawkit.algorithms.validation import count_modified_z_outliers
from lawkit.core.dataset import Dataset, as_dataset
from lawkit.core.exceptions import InsufficientDataError
from lawkit.core.options import LawkitOptions, parse_options
from lawkit.core.result import DiagnosticResult, DiagnosticType
from lawkit.core.types import FloatArray

OUTLIER_FRACTION = 0.05
SKEW_THRESHOLD = 1.0
EXCESS_KURTOSIS_THRESHOLD = 3.0


def diagnose_data(
    data: Dataset | Any,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "data",
) -> DiagnosticResult:
    """
    Categorize a dataset and report which statistical laws it can support.

    The diagnostic type is the first matching category:
        Degenerate > SmallSample > OutlierDominated > HeavyTailed > Skewed > General

    Confidence grows with sample size as n / (n + min_sample_size).

    Args:
        data: Dataset or raw input
        options: Resolved LawkitOptions or a flat option mapping
        path: Source identifier when `data` is raw input

    Returns:
        DiagnosticResult

    Raises:
        InsufficientDataError: If the dataset has no usable values
    """
    start_time = time.perf_counter()
    options = parse_options(options)
    dataset = as_dataset(data, options, path)
    law = options.law

    x = dataset.values
    n = int(x.size)
    if n == 0:
        raise InsufficientDataError(
            "No valid numbers found in input data; nothing to diagnose."
        )

    min_sample = law.min_sample_size_for("diagnose")
    confidence = n / (n + min_sample) if min_sample else 1.0

    findings: list[str] = []
    findings.append(
        f"{n} values: mean {np.mean(x):.4g}, median {np.median(x):.4g}, "
        f"min {np.min(x):.4g}, max {np.max(x):.4g}"
    )
    dropped = dataset.missing_count + dataset.non_numeric_count + dataset.non_finite_count
    if dropped:
        findings.append(f"{dropped} of {dataset.total_count} entries were not usable numbers")

    degenerate = float(np.ptp(x)) == 0.0
    skewness = kurtosis = 0.0
    outliers = 0
    if not degenerate and n >= 3:
        skewness = float(stats.skew(x))
        kurtosis = float(stats.kurtosis(x))
        outliers = count_modified_z_outliers(x)
        findings.append(f"skewness {skewness:.3f}, excess kurtosis {kurtosis:.3f}")
        if outliers:
            findings.append(f"{outliers} outliers by modified z-score")

    span = _magnitude_span(x)
    if span is not None:
        findings.append(f"values span {span:.1f} orders of magnitude")

    findings.extend(_law_suitability(x, span, degenerate))

    if degenerate:
        diagnostic_type = DiagnosticType.DEGENERATE
    elif n < min_sample:
        diagnostic_type = DiagnosticType.SMALL_SAMPLE
    elif outliers / n > OUTLIER_FRACTION:
        diagnostic_type = DiagnosticType.OUTLIER_DOMINATED
    elif kurtosis > EXCESS_KURTOSIS_THRESHOLD:
        diagnostic_type = DiagnosticType.HEAVY_TAILED
    elif abs(skewness) > SKEW_THRESHOLD:
        diagnostic_type = DiagnosticType.SKEWED
    else:
        diagnostic_type = DiagnosticType.GENERAL

    analysis_summary = (
        f"Diagnosis {diagnostic_type.value} for {n} values "
        f"(confidence {confidence:.2f})."
    )
    if options.show_details:
        analysis_summary += " " + "; ".join(findings) + "."

    computation_time = (time.perf_counter() - start_time) * 1000

    return DiagnosticResult(
        path=dataset.path,
        diagnostic_type=diagnostic_type,
        findings=tuple(findings),
        confidence_level=confidence,
        analysis_summary=analysis_summary,
        computation_time_ms=computation_time,
    )


def _magnitude_span(x: FloatArray) -> float | None:
    """Orders of magnitude between the smallest and largest non-zero |x|."""
    nonzero = np.abs(x[x != 0])
    if nonzero.size == 0:
        return None
    return math.log10(float(nonzero.max())) - math.log10(float(nonzero.min()))


def _law_suitability(x: FloatArray, span: float | None, degenerate: bool) -> list[str]:
    n = x.size
    non_negative = bool(np.all(x >= 0))
    integers = bool(np.all(x == np.floor(x)))
    positive = int(np.count_nonzero(x > 0))

    checks = [
        ("benf", span is not None and span >= 2.0,
         "needs values spanning at least 2 orders of magnitude"),
        ("pareto", non_negative and positive > 0,
         "needs non-negative magnitudes with a positive total"),
        ("zipf", positive >= 2, "needs at least 2 positive frequencies"),
        ("normal", n >= 3 and not degenerate, "needs at least 3 values that are not all equal"),
        ("poisson", non_negative and integers and positive > 0,
         "needs non-negative integer counts"),
    ]
    findings = []
    for name, ok, requirement in checks:
        if ok:
            findings.append(f"{name}: preconditions hold")
        else:
            findings.append(f"{name}: {requirement}")
    return findings
