"""Single entry point mapping law identifiers to analyzers."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from lawkit.algorithms.benford import analyze_benford
from lawkit.algorithms.diagnostics import diagnose_data
from lawkit.algorithms.generator import generate_data
from lawkit.algorithms.integration import run_integration
from lawkit.algorithms.normal import analyze_normal
from lawkit.algorithms.pareto import analyze_pareto
from lawkit.algorithms.poisson import analyze_poisson
from lawkit.algorithms.validation import validate_data
from lawkit.algorithms.zipf import analyze_zipf
from lawkit.core.dataset import extract_dataset
from lawkit.core.exceptions import UnknownLawError
from lawkit.core.options import LawkitOptions, parse_options
from lawkit.core.result import LawkitResult

logger = logging.getLogger(__name__)

Analyzer = Callable[[Any, LawkitOptions, str], list[LawkitResult]]


def _on_dataset(analyzer: Callable[..., LawkitResult]) -> Analyzer:
    def run(data: Any, options: LawkitOptions, path: str) -> list[LawkitResult]:
        return [analyzer(extract_dataset(data, options, path), options)]

    run.__name__ = analyzer.__name__
    return run


def _integrate(data: Any, options: LawkitOptions, path: str) -> list[LawkitResult]:
    results, integration = run_integration(extract_dataset(data, options, path), options)
    return [*results, integration]


def _generate(data: Any, options: LawkitOptions, path: str) -> list[LawkitResult]:
    return [generate_data(data, options, path=path)]


ANALYZERS: dict[str, Analyzer] = {
    "benf": _on_dataset(analyze_benford),
    "pareto": _on_dataset(analyze_pareto),
    "zipf": _on_dataset(analyze_zipf),
    "normal": _on_dataset(analyze_normal),
    "poisson": _on_dataset(analyze_poisson),
    "analyze": _integrate,
    "validate": _on_dataset(validate_data),
    "diagnose": _on_dataset(diagnose_data),
    "generate": _generate,
}


def law(
    subcommand: str,
    data: Any,
    options: Mapping[str, Any] | LawkitOptions | None = None,
    *,
    path: str = "data",
) -> list[LawkitResult]:
    """
    Run one lawkit command and return its results.

    Recognized commands: benf, pareto, zipf, normal, poisson (single laws),
    analyze (all configured laws plus a cross-law summary), validate,
    diagnose and generate.

    The command is checked before anything else, so an unknown command
    never resolves options or touches the data.

    Args:
        subcommand: Command identifier (exact, lower-case)
        data: Numbers as a sequence or array, a mapping of sequences, text,
            or for "generate" a generation spec
        options: Flat option mapping (snake_case or camelCase keys) or
            resolved LawkitOptions
        path: Source identifier attached to every result

    Returns:
        List of results. Single-law and utility commands return one result;
        "analyze" returns each law's result in configured order followed by
        the IntegrationResult.

    Raises:
        UnknownLawError: If `subcommand` is not recognized
        InvalidConfigurationError: If an option is invalid
        InsufficientDataError: If the data cannot support the analysis
        ComputationError: If a statistic cannot be computed

    Example:
        >>> from lawkit import law
        >>> [result] = law("pareto", [100, 200, 300, 1000, 2000])
        >>> result.result_type
        'ParetoAnalysis'
    """
    analyzer = ANALYZERS.get(subcommand) if isinstance(subcommand, str) else None
    if analyzer is None:
        raise UnknownLawError(str(subcommand), known=tuple(ANALYZERS))

    resolved = parse_options(options)
    logger.debug("Running %s on %s", subcommand, path)
    results = analyzer(data, resolved, path)
    logger.debug("%s produced %d result(s)", subcommand, len(results))
    return results
