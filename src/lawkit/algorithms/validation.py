"""Data-quality validation ahead of statistical law analysis."""

from __future__ import annotations

import time
from typing import Any

import numpy as np

from lawkit.core.dataset import Dataset, as_dataset
from lawkit.core.options import LawkitOptions, parse_options
from lawkit.core.result import ValidationIssue, ValidationResult
from lawkit.core.types import FloatArray

# Magnitude treated as out of range when no explicit range is configured
MAX_ABS_VALUE = 1e15

# Share of repeated values above which duplicates are reported
DUPLICATE_FRACTION = 0.5

MODIFIED_Z_THRESHOLD = 3.5


def validate_data(
    data: Dataset | Any,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "data",
) -> ValidationResult:
    """
    Run structural and statistical sanity checks on a dataset.

    Checks (each failing check adds one issue):
    - missing values (None / NaN)
    - non-numeric values
    - non-finite values (+/-Inf)
    - out-of-range values: outside [value_range_min, value_range_max], or
      |x| > 1e15 when no range is configured
    - duplicates: more than half of the values are repeats
    - insufficient sample: fewer than min_sample_size values (default 10)
    - zero variance: two or more values, all identical
    - outliers (only with enable_outlier_detection): modified z-score
      0.6745 * (x - median) / MAD above 3.5

    The quality score starts from the share of usable entries and is reduced
    in proportion to how many values each remaining issue affects.

    Args:
        data: Dataset or raw input
        options: Resolved LawkitOptions or a flat option mapping
        path: Source identifier when `data` is raw input

    Returns:
        ValidationResult; empty input yields a failed validation, not an error
    """
    start_time = time.perf_counter()
    options = parse_options(options)
    dataset = as_dataset(data, options, path)
    law = options.law

    x = dataset.values
    n = int(x.size)
    issues: list[tuple[ValidationIssue, str]] = []
    penalty = 0.0

    if dataset.missing_count:
        issues.append((ValidationIssue.MISSING_VALUES, f"{dataset.missing_count} missing values"))
    if dataset.non_numeric_count:
        issues.append(
            (ValidationIssue.NON_NUMERIC, f"{dataset.non_numeric_count} non-numeric values")
        )
    if dataset.non_finite_count:
        issues.append(
            (ValidationIssue.NON_FINITE, f"{dataset.non_finite_count} infinite values")
        )

    out_of_range, range_text = _out_of_range(x, law.value_range_min, law.value_range_max)
    if out_of_range:
        issues.append(
            (ValidationIssue.OUT_OF_RANGE, f"{out_of_range} values outside {range_text}")
        )
        penalty += out_of_range / n

    if n > 1:
        repeated = n - int(np.unique(x).size)
        repeated_fraction = repeated / n
        if repeated_fraction > DUPLICATE_FRACTION:
            issues.append(
                (ValidationIssue.DUPLICATES,
                 f"{repeated} of {n} values repeat an earlier value")
            )
            penalty += 0.5 * repeated_fraction

    min_sample = law.min_sample_size_for("validate")
    if n < min_sample:
        issues.append(
            (ValidationIssue.INSUFFICIENT_SAMPLE,
             f"{n} usable values, at least {min_sample} required")
        )
        penalty += 0.5 * (1.0 - n / min_sample)

    if n > 1 and float(np.ptp(x)) == 0.0:
        issues.append((ValidationIssue.ZERO_VARIANCE, f"all {n} values are identical"))
        penalty += 0.25

    if law.enable_outlier_detection and n >= 3:
        outliers = count_modified_z_outliers(x)
        if outliers:
            issues.append(
                (ValidationIssue.OUTLIERS,
                 f"{outliers} outliers (modified z-score > {MODIFIED_Z_THRESHOLD})")
            )
            penalty += 0.5 * outliers / n

    score = float(np.clip(dataset.usable_fraction - penalty, 0.0, 1.0))
    passed = not issues
    issues_found = tuple(f"{category.value}: {text}" for category, text in issues)

    if passed:
        analysis_summary = f"All checks passed for {n} values (quality score {score:.3f})."
    else:
        categories = ", ".join(category.value for category, _ in issues)
        analysis_summary = (
            f"Validation failed with {len(issues)} issue(s) ({categories}); "
            f"quality score {score:.3f}."
        )
    if options.show_details:
        analysis_summary += (
            f" {n} of {dataset.total_count} entries usable."
        )

    computation_time = (time.perf_counter() - start_time) * 1000

    return ValidationResult(
        path=dataset.path,
        validation_passed=passed,
        issues_found=issues_found,
        issue_categories=tuple(category for category, _ in issues),
        data_quality_score=score,
        total_values=dataset.total_count,
        valid_values=n,
        analysis_summary=analysis_summary,
        computation_time_ms=computation_time,
    )


def modified_z_scores(x: FloatArray) -> FloatArray:
    """
    Iglewicz-Hoaglin modified z-scores, 0.6745 * (x - median) / MAD.

    Returns all zeros when the MAD is zero (more than half the values equal).
    """
    median = np.median(x)
    mad = np.median(np.abs(x - median))
    if mad == 0:
        return np.zeros_like(x)
    return 0.6745 * (x - median) / mad


def count_modified_z_outliers(x: FloatArray) -> int:
    """Number of values whose |modified z-score| exceeds 3.5."""
    return int(np.count_nonzero(np.abs(modified_z_scores(x)) > MODIFIED_Z_THRESHOLD))


def _out_of_range(
    x: FloatArray, low: float | None, high: float | None
) -> tuple[int, str]:
    if low is None and high is None:
        return int(np.count_nonzero(np.abs(x) > MAX_ABS_VALUE)), f"+/-{MAX_ABS_VALUE:g}"
    mask = np.zeros(x.shape, dtype=bool)
    if low is not None:
        mask |= x < low
    if high is not None:
        mask |= x > high
    lo_text = "-inf" if low is None else f"{low:g}"
    hi_text = "inf" if high is None else f"{high:g}"
    return int(np.count_nonzero(mask)), f"[{lo_text}, {hi_text}]"
