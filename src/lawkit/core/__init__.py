"""Core data structures for lawkit."""

from lawkit.core.dataset import Dataset, as_dataset, extract_dataset
from lawkit.core.exceptions import (
    LawkitError,
    InvalidConfigurationError,
    UnknownLawError,
    InsufficientDataError,
    ComputationError,
    DataQualityWarning,
    ConfigurationWarning,
)
from lawkit.core.options import (
    LawkitOptions,
    LawSpecificOptions,
    OutputFormat,
    parse_options,
    resolve_options,
)
from lawkit.core.result import (
    BenfordResult,
    ParetoResult,
    ZipfResult,
    NormalResult,
    PoissonResult,
    IntegrationResult,
    ValidationResult,
    DiagnosticResult,
    GeneratedResult,
    LawkitResult,
    ValidationIssue,
    DiagnosticType,
)
from lawkit.core.risk import RiskLevel

__all__ = [
    "Dataset",
    "as_dataset",
    "extract_dataset",
    # Options
    "LawkitOptions",
    "LawSpecificOptions",
    "OutputFormat",
    "parse_options",
    "resolve_options",
    "RiskLevel",
    # Results
    "BenfordResult",
    "ParetoResult",
    "ZipfResult",
    "NormalResult",
    "PoissonResult",
    "IntegrationResult",
    "ValidationResult",
    "DiagnosticResult",
    "GeneratedResult",
    "LawkitResult",
    "ValidationIssue",
    "DiagnosticType",
    # Exceptions
    "LawkitError",
    "InvalidConfigurationError",
    "UnknownLawError",
    "InsufficientDataError",
    "ComputationError",
    # Warnings
    "DataQualityWarning",
    "ConfigurationWarning",
]
