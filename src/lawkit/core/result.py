"""Result dataclasses for statistical law analysis.

Every analysis returns exactly one of nine frozen result types. Each type
carries a class-level ``result_type`` tag, the ``path`` of the analyzed
source and only the statistics that belong to it, so code handling a
LawkitResult can dispatch on the concrete class (or on the tag after
``to_dict()``) without ever seeing fields of another variant.

Result types (tag in parentheses):
    - BenfordResult (BenfordAnalysis)
    - ParetoResult (ParetoAnalysis)
    - ZipfResult (ZipfAnalysis)
    - NormalResult (NormalAnalysis)
    - PoissonResult (PoissonAnalysis)
    - IntegrationResult (IntegrationAnalysis)
    - ValidationResult (ValidationResult)
    - DiagnosticResult (DiagnosticResult)
    - GeneratedResult (GeneratedData)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

import numpy as np
from numpy.typing import NDArray

from lawkit.core.mixins import ResultDictMixin, ResultSummaryMixin
from lawkit.core.risk import RiskLevel


class ValidationIssue(Enum):
    """Categories of problems reported by the validator."""

    MISSING_VALUES = "missing_values"
    NON_NUMERIC = "non_numeric"
    NON_FINITE = "non_finite"
    OUT_OF_RANGE = "out_of_range"
    DUPLICATES = "duplicates"
    INSUFFICIENT_SAMPLE = "insufficient_sample"
    ZERO_VARIANCE = "zero_variance"
    OUTLIERS = "outliers"


class DiagnosticType(Enum):
    """Root-cause categories reported by the diagnoser."""

    GENERAL = "General"
    DEGENERATE = "Degenerate"
    SMALL_SAMPLE = "SmallSample"
    OUTLIER_DOMINATED = "OutlierDominated"
    SKEWED = "Skewed"
    HEAVY_TAILED = "HeavyTailed"


def _risk_interpretation(risk_level: RiskLevel) -> str:
    return {
        RiskLevel.LOW: "Data conforms to the law; no action needed.",
        RiskLevel.MEDIUM: "Minor deviation; worth a second look.",
        RiskLevel.HIGH: "Significant deviation; investigate the data source.",
        RiskLevel.CRITICAL: "Severe deviation; data is unlikely to follow the law.",
    }[risk_level]


# =============================================================================
# SINGLE-LAW RESULTS
# =============================================================================


@dataclass(frozen=True)
class BenfordResult(ResultDictMixin):
    """
    Result of Benford's law conformity analysis.

    Attributes:
        path: Source identifier
        observed_distribution: Observed proportion per digit bin
        expected_distribution: Benford proportion per digit bin
        digits: Digit value of each bin (e.g. 1..9 for first digits)
        chi_square: Pearson chi-square statistic over the bins
        p_value: Chi-square p-value
        mad: Mean absolute deviation between observed and expected proportions
        risk_level: Risk derived from MAD and p-value
        total_numbers: Number of values with an extractable digit
        digit_mode: "first", "second" or "both"
        base: Numeral base used for digit extraction
        low_reliability: True if total_numbers is below the minimum sample size
        analysis_summary: One-paragraph interpretation
        computation_time_ms: Time taken in milliseconds
    """

    result_type: ClassVar[str] = "BenfordAnalysis"

    path: str
    observed_distribution: NDArray[np.float64]
    expected_distribution: NDArray[np.float64]
    digits: tuple[int, ...]
    chi_square: float
    p_value: float
    mad: float
    risk_level: RiskLevel
    total_numbers: int
    digit_mode: str
    base: int
    low_reliability: bool
    analysis_summary: str
    computation_time_ms: float

    @property
    def is_conforming(self) -> bool:
        """True if the risk level is LOW."""
        return self.risk_level == RiskLevel.LOW

    @property
    def most_deviant_digit(self) -> int:
        """Digit whose observed proportion is furthest from expectation."""
        deviation = np.abs(self.observed_distribution - self.expected_distribution)
        return self.digits[int(np.argmax(deviation))]

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("BENFORD'S LAW REPORT")]
        lines.append(f"\nRisk Level: {self.risk_level.value}")

        lines.append(m._format_section("Metrics"))
        lines.append(m._format_metric("Numbers Analyzed", self.total_numbers))
        lines.append(m._format_metric("Digit Mode", f"{self.digit_mode} (base {self.base})"))
        lines.append(m._format_metric("Chi-Square", self.chi_square))
        lines.append(m._format_metric("P-Value", self.p_value))
        lines.append(m._format_metric("MAD", self.mad))
        lines.append(m._format_metric("Low Reliability", self.low_reliability))

        if len(self.digits) <= 16:
            lines.append(m._format_section("Distribution (observed / expected)"))
            for digit, obs, exp in zip(
                self.digits, self.observed_distribution, self.expected_distribution
            ):
                lines.append(f"  {digit:>3}: {obs * 100:6.2f}% / {exp * 100:6.2f}%")

        lines.append(m._format_section("Interpretation"))
        lines.append(f"  {_risk_interpretation(self.risk_level)}")
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"BenfordResult(risk={self.risk_level.value}, mad={self.mad:.4f}, "
            f"p={self.p_value:.4f}, n={self.total_numbers})"
        )


@dataclass(frozen=True)
class ParetoResult(ResultDictMixin):
    """
    Result of Pareto concentration analysis.

    Attributes:
        path: Source identifier
        top_20_percent_contribution: Percent of the total contributed by the
            top (1 - pareto_ratio) share of items (top 20% for 80/20)
        pareto_ratio: Share of the total the fitted Pareto model assigns to
            the same top fraction of items
        concentration_index: Gini coefficient of the magnitudes in [0, 1]
        risk_level: Risk from the deviation of the observed top share
            from the expected ratio
        total_items: Number of items analyzed (after category limit)
        top_items: Number of items in the top group
        tail_index: Fitted Pareto tail index alpha (None if undefined)
        analysis_summary: One-paragraph interpretation
        computation_time_ms: Time taken in milliseconds
    """

    result_type: ClassVar[str] = "ParetoAnalysis"

    path: str
    top_20_percent_contribution: float
    pareto_ratio: float
    concentration_index: float
    risk_level: RiskLevel
    total_items: int
    top_items: int
    tail_index: float | None
    analysis_summary: str
    computation_time_ms: float

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("PARETO CONCENTRATION REPORT")]
        lines.append(f"\nRisk Level: {self.risk_level.value}")

        lines.append(m._format_section("Metrics"))
        lines.append(m._format_metric("Items Analyzed", self.total_items))
        lines.append(m._format_metric("Top Items", self.top_items))
        lines.append(m._format_metric("Top Contribution (%)", self.top_20_percent_contribution))
        lines.append(m._format_metric("Fitted Ratio", self.pareto_ratio))
        lines.append(m._format_metric("Gini Coefficient", self.concentration_index))
        lines.append(m._format_metric("Tail Index", self.tail_index))

        lines.append(m._format_section("Interpretation"))
        lines.append(f"  {_risk_interpretation(self.risk_level)}")
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ParetoResult(risk={self.risk_level.value}, "
            f"top={self.top_20_percent_contribution:.1f}%, gini={self.concentration_index:.3f})"
        )


@dataclass(frozen=True)
class ZipfResult(ResultDictMixin):
    """
    Result of Zipf rank-frequency analysis.

    Fits log(frequency) = c - s * log(rank).

    Attributes:
        path: Source identifier
        zipf_coefficient: Fitted exponent s (1.0 for ideal Zipf)
        correlation_coefficient: Pearson r of the log-log fit
        deviation_score: |s - 1| + (1 - |r|), 0 for ideal Zipf
        risk_level: Risk from the deviation score
        total_items: Number of ranks fitted
        analysis_summary: One-paragraph interpretation
        computation_time_ms: Time taken in milliseconds
    """

    result_type: ClassVar[str] = "ZipfAnalysis"

    path: str
    zipf_coefficient: float
    correlation_coefficient: float
    deviation_score: float
    risk_level: RiskLevel
    total_items: int
    analysis_summary: str
    computation_time_ms: float

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("ZIPF'S LAW REPORT")]
        lines.append(f"\nRisk Level: {self.risk_level.value}")

        lines.append(m._format_section("Metrics"))
        lines.append(m._format_metric("Ranks Fitted", self.total_items))
        lines.append(m._format_metric("Zipf Exponent (s)", self.zipf_coefficient))
        lines.append(m._format_metric("Log-Log Correlation", self.correlation_coefficient))
        lines.append(m._format_metric("Deviation Score", self.deviation_score))

        lines.append(m._format_section("Interpretation"))
        lines.append(f"  {_risk_interpretation(self.risk_level)}")
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ZipfResult(risk={self.risk_level.value}, s={self.zipf_coefficient:.3f}, "
            f"r={self.correlation_coefficient:.3f})"
        )


@dataclass(frozen=True)
class NormalResult(ResultDictMixin):
    """
    Result of normality analysis.

    Attributes:
        path: Source identifier
        mean: Sample mean
        std_dev: Sample standard deviation (ddof=1)
        skewness: Sample skewness
        kurtosis: Excess kurtosis (0 for a normal distribution)
        normality_test_p: p-value of the normality test
        test_name: "shapiro" (n <= 5000) or "dagostino"
        confidence_interval: Interval for the mean at the configured
            confidence level
        outlier_count: Values with |z| > 3, or None if outlier detection
            was not enabled
        risk_level: Risk from the normality p-value
        total_numbers: Sample size
        analysis_summary: One-paragraph interpretation
        computation_time_ms: Time taken in milliseconds
    """

    result_type: ClassVar[str] = "NormalAnalysis"

    path: str
    mean: float
    std_dev: float
    skewness: float
    kurtosis: float
    normality_test_p: float
    test_name: str
    confidence_interval: tuple[float, float]
    outlier_count: int | None
    risk_level: RiskLevel
    total_numbers: int
    analysis_summary: str
    computation_time_ms: float

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("NORMAL DISTRIBUTION REPORT")]
        lines.append(f"\nRisk Level: {self.risk_level.value}")

        lines.append(m._format_section("Metrics"))
        lines.append(m._format_metric("Sample Size", self.total_numbers))
        lines.append(m._format_metric("Mean", self.mean))
        lines.append(m._format_metric("Std Dev", self.std_dev))
        lines.append(m._format_metric("Skewness", self.skewness))
        lines.append(m._format_metric("Excess Kurtosis", self.kurtosis))
        lines.append(m._format_metric(f"Normality p ({self.test_name})", self.normality_test_p))
        low, high = self.confidence_interval
        lines.append(m._format_metric("Mean CI", f"[{low:.4f}, {high:.4f}]"))
        if self.outlier_count is not None:
            lines.append(m._format_metric("Outliers (|z| > 3)", self.outlier_count))

        lines.append(m._format_section("Interpretation"))
        lines.append(f"  {_risk_interpretation(self.risk_level)}")
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"NormalResult(risk={self.risk_level.value}, mean={self.mean:.4f}, "
            f"sd={self.std_dev:.4f}, p={self.normality_test_p:.4f})"
        )


@dataclass(frozen=True)
class PoissonResult(ResultDictMixin):
    """
    Result of Poisson process analysis.

    Attributes:
        path: Source identifier
        lambda_: Estimated rate (sample mean); exported as "lambda"
        variance_ratio: Variance-to-mean ratio (1.0 for Poisson)
        poisson_test_p: Goodness-of-fit p-value
        test_name: "chi_square" (binned goodness of fit) or "dispersion"
        dispersion: "over", "under" or "none"
        confidence_interval: Exact interval for lambda at the configured
            confidence level
        risk_level: Risk from the goodness-of-fit p-value
        total_events: Number of observations (event counts) analyzed
        analysis_summary: One-paragraph interpretation
        computation_time_ms: Time taken in milliseconds
    """

    result_type: ClassVar[str] = "PoissonAnalysis"

    path: str
    lambda_: float
    variance_ratio: float
    poisson_test_p: float
    test_name: str
    dispersion: str
    confidence_interval: tuple[float, float]
    risk_level: RiskLevel
    total_events: int
    analysis_summary: str
    computation_time_ms: float

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["lambda"] = data.pop("lambda_")
        return data

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("POISSON PROCESS REPORT")]
        lines.append(f"\nRisk Level: {self.risk_level.value}")

        lines.append(m._format_section("Metrics"))
        lines.append(m._format_metric("Observations", self.total_events))
        lines.append(m._format_metric("Lambda", self.lambda_))
        low, high = self.confidence_interval
        lines.append(m._format_metric("Lambda CI", f"[{low:.4f}, {high:.4f}]"))
        lines.append(m._format_metric("Variance/Mean", self.variance_ratio))
        lines.append(m._format_metric("Dispersion", self.dispersion))
        lines.append(m._format_metric(f"Fit p ({self.test_name})", self.poisson_test_p))

        lines.append(m._format_section("Interpretation"))
        lines.append(f"  {_risk_interpretation(self.risk_level)}")
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"PoissonResult(risk={self.risk_level.value}, lambda={self.lambda_:.4f}, "
            f"ratio={self.variance_ratio:.3f})"
        )


# =============================================================================
# CROSS-LAW AND UTILITY RESULTS
# =============================================================================


@dataclass(frozen=True)
class IntegrationResult(ResultDictMixin):
    """
    Result of cross-checking several laws on the same dataset.

    Attributes:
        path: Source identifier
        laws_analyzed: Laws that produced a result, in configured order
        law_risks: Risk level per analyzed law
        overall_risk: Most severe individual risk
        dominant_law: Law that determined overall_risk (ties go to the
            law with the stronger statistical evidence)
        conflicting_results: Descriptions of law pairs that disagree
        recommendations: Rule-based follow-up suggestions
        failed_laws: Law name -> reason for laws that could not be evaluated
        analysis_summary: One-paragraph interpretation
        computation_time_ms: Time taken in milliseconds
    """

    result_type: ClassVar[str] = "IntegrationAnalysis"

    path: str
    laws_analyzed: tuple[str, ...]
    law_risks: dict[str, RiskLevel]
    overall_risk: RiskLevel
    dominant_law: str | None
    conflicting_results: tuple[str, ...]
    recommendations: tuple[str, ...]
    failed_laws: dict[str, str]
    analysis_summary: str
    computation_time_ms: float

    @property
    def has_conflicts(self) -> bool:
        return len(self.conflicting_results) > 0

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("INTEGRATED LAW ANALYSIS REPORT")]
        lines.append(f"\nOverall Risk: {self.overall_risk.value}")

        lines.append(m._format_section("Risk by Law"))
        for name in self.laws_analyzed:
            lines.append(m._format_metric(name, self.law_risks[name]))
        for name, reason in self.failed_laws.items():
            lines.append(m._format_metric(name, f"not evaluated ({reason})"))

        lines.append(m._format_section("Conflicts"))
        lines.append(m._format_list(list(self.conflicting_results), item_name="conflict"))

        lines.append(m._format_section("Recommendations"))
        lines.append(
            m._format_list(list(self.recommendations), max_items=10, item_name="recommendation")
        )
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"IntegrationResult(overall={self.overall_risk.value}, "
            f"laws={len(self.laws_analyzed)}, conflicts={len(self.conflicting_results)})"
        )


@dataclass(frozen=True)
class ValidationResult(ResultDictMixin):
    """
    Result of data-quality validation.

    Attributes:
        path: Source identifier
        validation_passed: True if no issue was found
        issues_found: Human-readable issue descriptions, each prefixed with
            its category value
        issue_categories: Category of each entry in issues_found
        data_quality_score: Continuous quality score in [0, 1]
        total_values: Leaf entries examined
        valid_values: Entries that produced a usable number
        analysis_summary: One-paragraph interpretation
        computation_time_ms: Time taken in milliseconds
    """

    result_type: ClassVar[str] = "ValidationResult"

    path: str
    validation_passed: bool
    issues_found: tuple[str, ...]
    issue_categories: tuple[ValidationIssue, ...]
    data_quality_score: float
    total_values: int
    valid_values: int
    analysis_summary: str
    computation_time_ms: float

    def score(self) -> float:
        """Return scikit-learn style score in [0, 1]. Higher is better."""
        return self.data_quality_score

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("DATA VALIDATION REPORT")]
        status = "PASSED" if self.validation_passed else "FAILED"
        lines.append(f"\nStatus: {status}")

        lines.append(m._format_section("Metrics"))
        lines.append(m._format_metric("Values Examined", self.total_values))
        lines.append(m._format_metric("Valid Values", self.valid_values))
        lines.append(m._format_metric("Quality Score", self.data_quality_score))

        lines.append(m._format_section("Issues"))
        lines.append(m._format_list(list(self.issues_found), max_items=10, item_name="issue"))
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        status = "passed" if self.validation_passed else f"{len(self.issues_found)} issues"
        return f"ValidationResult({status}, score={self.data_quality_score:.3f})"


@dataclass(frozen=True)
class DiagnosticResult(ResultDictMixin):
    """
    Result of dataset diagnostics.

    Attributes:
        path: Source identifier
        diagnostic_type: Root-cause category
        findings: Textual findings, most important first
        confidence_level: Confidence in the diagnosis in (0, 1]
        analysis_summary: One-paragraph interpretation
        computation_time_ms: Time taken in milliseconds
    """

    result_type: ClassVar[str] = "DiagnosticResult"

    path: str
    diagnostic_type: DiagnosticType
    findings: tuple[str, ...]
    confidence_level: float
    analysis_summary: str
    computation_time_ms: float

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("DIAGNOSTIC REPORT")]
        lines.append(f"\nDiagnosis: {self.diagnostic_type.value}")
        lines.append(m._format_metric("Confidence", self.confidence_level))
        lines.append(m._format_section("Findings"))
        lines.append(m._format_list(list(self.findings), max_items=20, item_name="finding"))
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"DiagnosticResult({self.diagnostic_type.value}, "
            f"confidence={self.confidence_level:.2f}, findings={len(self.findings)})"
        )


@dataclass(frozen=True)
class GeneratedResult(ResultDictMixin):
    """
    Synthetic data generated to follow a statistical law.

    Attributes:
        path: Source identifier ("generated")
        data_type: Law the sample follows
        count: Number of generated values
        parameters: Distribution parameters actually used (including seed)
        sample_data: Generated values
        computation_time_ms: Time taken in milliseconds
    """

    result_type: ClassVar[str] = "GeneratedData"

    path: str
    data_type: str
    count: int
    parameters: dict[str, Any]
    sample_data: NDArray[np.float64]
    computation_time_ms: float

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("GENERATED DATA")]
        lines.append(m._format_metric("Law", self.data_type))
        lines.append(m._format_metric("Count", self.count))
        lines.append(m._format_section("Parameters"))
        for key, value in self.parameters.items():
            lines.append(m._format_metric(key, value))
        if self.count:
            preview = ", ".join(f"{v:.4g}" for v in self.sample_data[:5])
            lines.append(f"\nSample: [{preview}{', ...' if self.count > 5 else ''}]")
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"GeneratedResult({self.data_type}, count={self.count})"


LawkitResult = Union[
    BenfordResult,
    ParetoResult,
    ZipfResult,
    NormalResult,
    PoissonResult,
    IntegrationResult,
    ValidationResult,
    DiagnosticResult,
    GeneratedResult,
]

RESULT_TYPES: tuple[type, ...] = (
    BenfordResult,
    ParetoResult,
    ZipfResult,
    NormalResult,
    PoissonResult,
    IntegrationResult,
    ValidationResult,
    DiagnosticResult,
    GeneratedResult,
)
