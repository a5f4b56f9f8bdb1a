"""Custom exceptions and warnings for lawkit.

This module provides a hierarchy of exceptions for specific error types,
all inheriting from ValueError so that callers catching ValueError keep
working.

Exception Hierarchy:
    LawkitError (ValueError)
    ├── InvalidConfigurationError
    ├── UnknownLawError
    ├── InsufficientDataError
    └── ComputationError

Warning Classes:
    DataQualityWarning (UserWarning)
    ConfigurationWarning (UserWarning)
"""

from __future__ import annotations


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class LawkitError(ValueError):
    """Base exception for all lawkit errors.

    Inherits from ValueError - code that catches ValueError will also
    catch every lawkit error.

    Example:
        >>> try:
        ...     results = law("benf", [])
        ... except LawkitError as e:
        ...     print(f"lawkit error: {e}")
    """

    pass


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================


class InvalidConfigurationError(LawkitError):
    """Raised when a supplied option fails validation.

    Always raised before any analysis runs; options are never partially
    applied.

    Common causes:
        - ignore_keys_regex that does not compile
        - Unknown output format identifier
        - Numeric option outside its domain (e.g. pareto_ratio = 1.5)
        - Unknown option name

    Attributes:
        field: Name of the offending option (None when not tied to a field)

    Example:
        >>> resolve_options({"output_format": "docx"})
        InvalidConfigurationError: Invalid value for 'output_format': 'docx'...
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class UnknownLawError(LawkitError):
    """Raised when the dispatcher receives an unrecognized law identifier.

    No analyzer is invoked when this error is raised.

    Example:
        >>> law("not_a_law", [1, 2, 3])
        UnknownLawError: Unknown subcommand 'not_a_law'...
    """

    def __init__(self, subcommand: str, known: tuple[str, ...] = ()) -> None:
        message = f"Unknown subcommand '{subcommand}'."
        if known:
            message += f" Expected one of: {', '.join(known)}."
        super().__init__(message)
        self.subcommand = subcommand


# =============================================================================
# DATA / COMPUTATION EXCEPTIONS
# =============================================================================


class InsufficientDataError(LawkitError):
    """Raised when there is not enough data for the requested law.

    Minimum requirements differ per analyzer:
        - Benford: at least one value with an extractable significant digit
        - Normal: at least 3 values
        - Poisson: at least 2 non-negative integer counts
        - Zipf: at least 2 ranks after cutoffs

    Inside an integration run this error is recorded for the failing law and
    the remaining laws still run.

    Example:
        >>> law("benf", [])
        InsufficientDataError: No valid numbers found in input data...
    """

    pass


class ComputationError(LawkitError):
    """Raised when a numeric failure occurs while fitting a statistic.

    Common causes:
        - Zero variance (all values identical) in normality tests
        - Zero total magnitude in concentration analysis
        - Zero mean in dispersion ratios

    Attributes:
        analyzer: Name of the analyzer that failed (e.g. "normal")
        statistic: Name of the statistic being computed (e.g. "std_dev")

    Suggested fixes:
        1. Check the data for degenerate cases (all same value, all zeros)
        2. Run law("diagnose", data) to inspect the dataset
    """

    def __init__(self, message: str, analyzer: str, statistic: str) -> None:
        super().__init__(f"[{analyzer}:{statistic}] {message}")
        self.analyzer = analyzer
        self.statistic = statistic


# =============================================================================
# WARNINGS
# =============================================================================


class DataQualityWarning(UserWarning):
    """Warning for data quality issues that don't prevent computation.

    Emitted when:
        - The sample is smaller than the minimum sample size (low reliability)
        - Values are excluded because they don't fit the law's domain
          (negative magnitudes, non-integer event counts)

    Example:
        >>> import warnings
        >>> warnings.filterwarnings('ignore', category=DataQualityWarning)
    """

    pass


class ConfigurationWarning(UserWarning):
    """Warning for options that were accepted but could not be honored.

    Emitted when a generation seed cannot be parsed as a non-negative
    integer; the seed is ignored and generation is unseeded.
    """

    pass
