"""
lawkit: Statistical law conformity analysis.

Checks whether numeric data follows Benford's law, Pareto concentration,
Zipf's law, a normal distribution or a Poisson process, cross-checks laws
against each other, validates data quality and generates synthetic data.
"""

import logging

from lawkit.dispatcher import ANALYZERS, law
from lawkit.core.options import (
    LawkitOptions,
    LawSpecificOptions,
    OutputFormat,
    parse_options,
    resolve_options,
)
from lawkit.core.risk import RiskLevel
from lawkit.core.numerals import normalize_numeral, normalize_numerals
from lawkit.core.dataset import Dataset, extract_dataset
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
from lawkit.core.exceptions import (
    LawkitError,
    InvalidConfigurationError,
    UnknownLawError,
    InsufficientDataError,
    ComputationError,
    DataQualityWarning,
    ConfigurationWarning,
)
from lawkit.algorithms.benford import analyze_benford
from lawkit.algorithms.pareto import analyze_pareto
from lawkit.algorithms.zipf import analyze_zipf
from lawkit.algorithms.normal import analyze_normal
from lawkit.algorithms.poisson import analyze_poisson
from lawkit.algorithms.integration import analyze_integration
from lawkit.algorithms.validation import validate_data
from lawkit.algorithms.diagnostics import diagnose_data
from lawkit.algorithms.generator import generate_data

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Entry point
    "law",
    "ANALYZERS",
    # Options
    "LawkitOptions",
    "LawSpecificOptions",
    "OutputFormat",
    "parse_options",
    "resolve_options",
    "RiskLevel",
    # Input handling
    "normalize_numeral",
    "normalize_numerals",
    "Dataset",
    "extract_dataset",
    # Result types
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
    # Analyzers
    "analyze_benford",
    "analyze_pareto",
    "analyze_zipf",
    "analyze_normal",
    "analyze_poisson",
    "analyze_integration",
    "validate_data",
    "diagnose_data",
    "generate_data",
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
