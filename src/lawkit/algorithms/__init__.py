"""Statistical law analyzers."""

from lawkit.algorithms.benford import analyze_benford, benford_expected
from lawkit.algorithms.pareto import analyze_pareto, fit_tail_index, implied_top_share
from lawkit.algorithms.zipf import analyze_zipf
from lawkit.algorithms.normal import analyze_normal
from lawkit.algorithms.poisson import analyze_poisson, lambda_interval
from lawkit.algorithms.integration import analyze_integration, run_integration
from lawkit.algorithms.validation import validate_data, modified_z_scores
from lawkit.algorithms.diagnostics import diagnose_data
from lawkit.algorithms.generator import generate_data

__all__ = [
    # Single laws
    "analyze_benford",
    "benford_expected",
    "analyze_pareto",
    "fit_tail_index",
    "implied_top_share",
    "analyze_zipf",
    "analyze_normal",
    "analyze_poisson",
    "lambda_interval",
    # Cross-law
    "analyze_integration",
    "run_integration",
    # Utilities
    "validate_data",
    "modified_z_scores",
    "diagnose_data",
    "generate_data",
]
