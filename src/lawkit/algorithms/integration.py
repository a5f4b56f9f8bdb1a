"""Cross-law integration analysis.

Runs several single-law analyzers over the same dataset and combines their
verdicts: the overall risk, the law responsible for it, pairs of laws that
reach opposite conclusions and rule-based recommendations.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from itertools import combinations
from typing import Any, Callable, Union

from lawkit.algorithms.benford import analyze_benford
from lawkit.algorithms.normal import analyze_normal
from lawkit.algorithms.pareto import RISK_THRESHOLDS as PARETO_THRESHOLDS
from lawkit.algorithms.pareto import analyze_pareto
from lawkit.algorithms.poisson import analyze_poisson
from lawkit.algorithms.zipf import RISK_THRESHOLDS as ZIPF_THRESHOLDS
from lawkit.algorithms.zipf import analyze_zipf
from lawkit.core.dataset import Dataset, as_dataset
from lawkit.core.exceptions import ComputationError, InsufficientDataError
from lawkit.core.options import LawkitOptions, parse_options
from lawkit.core.result import (
    BenfordResult,
    IntegrationResult,
    NormalResult,
    ParetoResult,
    PoissonResult,
    ZipfResult,
)
from lawkit.core.risk import RiskLevel, most_severe

logger = logging.getLogger(__name__)

SingleLawResult = Union[BenfordResult, ParetoResult, ZipfResult, NormalResult, PoissonResult]

LAW_ANALYZERS: dict[str, Callable[[Dataset, LawkitOptions], SingleLawResult]] = {
    "benf": analyze_benford,
    "pareto": analyze_pareto,
    "zipf": analyze_zipf,
    "normal": analyze_normal,
    "poisson": analyze_poisson,
}

LAW_NAMES: dict[str, str] = {
    "benf": "Benford's law",
    "pareto": "Pareto concentration",
    "zipf": "Zipf's law",
    "normal": "normal distribution",
    "poisson": "Poisson process",
}

_FOLLOW_UP: dict[str, str] = {
    "benf": "Audit the records behind the most deviant leading digits for fabrication or rounding.",
    "pareto": "Review the largest contributors; concentration differs from the expected ratio.",
    "zipf": "Check the rank-frequency data for truncation, deduplication or synthetic entries.",
    "normal": "Inspect skewness and outliers before applying methods that assume normality.",
    "poisson": "Look for clustering or rate changes; event counts are not a homogeneous Poisson process.",
}


def analyze_integration(
    data: Dataset | Any,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "data",
) -> IntegrationResult:
    """
    Cross-check several statistical laws on one dataset.

    See run_integration() for the algorithm; this returns only the combined
    result.
    """
    _, result = run_integration(data, options, path=path)
    return result


def run_integration(
    data: Dataset | Any,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "data",
) -> tuple[list[SingleLawResult], IntegrationResult]:
    """
    Run the configured laws and combine their verdicts.

    Each law in laws_to_check is analyzed independently (on worker threads
    when enable_parallel_processing is set). Results are merged by law name
    in configured order, so the outcome never depends on which worker
    finishes first. A law failing with InsufficientDataError or
    ComputationError is recorded in failed_laws and the others continue.

    Combination rules:
    - overall_risk is the most severe individual risk
    - dominant_law is the law at overall_risk with the strongest evidence,
      measured as distance past its LOW boundary (alpha / p for tested laws,
      deviation / LOW bound for Pareto and Zipf); earlier laws win exact ties
    - a conflict is a pair where one law is at or above risk_threshold and
      the other is LOW

    Args:
        data: Dataset or raw input
        options: Resolved LawkitOptions or a flat option mapping
        path: Source identifier when `data` is raw input

    Returns:
        Tuple of (individual law results in configured order, IntegrationResult)

    Raises:
        InsufficientDataError: If no law could be evaluated
    """
    start_time = time.perf_counter()
    options = parse_options(options)
    dataset = as_dataset(data, options, path)
    law_options = options.law
    laws = law_options.laws_to_check

    outcomes = _run_laws(laws, dataset, options, law_options.enable_parallel_processing)

    results: dict[str, SingleLawResult] = {}
    failed_laws: dict[str, str] = {}
    for name in laws:
        outcome = outcomes[name]
        if isinstance(outcome, Exception):
            failed_laws[name] = str(outcome)
        else:
            results[name] = outcome

    if not results:
        reasons = "; ".join(f"{name}: {reason}" for name, reason in failed_laws.items())
        raise InsufficientDataError(f"No law could be evaluated on this dataset ({reasons}).")

    laws_analyzed = tuple(results)
    law_risks = {name: result.risk_level for name, result in results.items()}
    overall_risk = most_severe(law_risks.values())
    dominant_law = _dominant_law(results, overall_risk, options)
    conflicts = _find_conflicts(law_risks, law_options.risk_threshold)
    recommendations = (
        _recommend(law_risks, conflicts, failed_laws, law_options.risk_threshold)
        if options.show_recommendations
        else ()
    )

    analysis_summary = (
        f"Analyzed {len(laws_analyzed)} of {len(laws)} laws. Overall risk "
        f"{overall_risk.value}"
        + (f", driven by {LAW_NAMES[dominant_law]}" if dominant_law else "")
        + f". {len(conflicts)} conflicting conclusion(s)."
    )
    if failed_laws:
        analysis_summary += f" Not evaluated: {', '.join(failed_laws)}."
    if options.show_details:
        analysis_summary += " " + ", ".join(
            f"{name}={risk.value}" for name, risk in law_risks.items()
        ) + "."

    computation_time = (time.perf_counter() - start_time) * 1000

    integration = IntegrationResult(
        path=dataset.path,
        laws_analyzed=laws_analyzed,
        law_risks=law_risks,
        overall_risk=overall_risk,
        dominant_law=dominant_law,
        conflicting_results=conflicts,
        recommendations=recommendations,
        failed_laws=failed_laws,
        analysis_summary=analysis_summary,
        computation_time_ms=computation_time,
    )
    return [results[name] for name in laws_analyzed], integration


def _run_laws(
    laws: tuple[str, ...],
    dataset: Dataset,
    options: LawkitOptions,
    parallel: bool,
) -> dict[str, SingleLawResult | Exception]:
    """Evaluate each law, capturing per-law data and computation failures."""

    def run_one(name: str) -> SingleLawResult | Exception:
        try:
            return LAW_ANALYZERS[name](dataset, options)
        except (InsufficientDataError, ComputationError) as e:
            logger.info("Law %s not evaluated for %s: %s", name, dataset.path, e)
            return e

    if parallel and len(laws) > 1:
        logger.debug("Running %d laws on worker threads", len(laws))
        with ThreadPoolExecutor(max_workers=len(laws)) as executor:
            futures = {name: executor.submit(run_one, name) for name in laws}
            return {name: future.result() for name, future in futures.items()}

    return {name: run_one(name) for name in laws}


def _evidence(name: str, result: SingleLawResult, options: LawkitOptions) -> float:
    """Strength of the evidence against a law; 1.0 sits on its LOW boundary."""
    law = options.law
    if isinstance(result, BenfordResult):
        return law.significance_level / max(result.p_value, 1e-300)
    if isinstance(result, NormalResult):
        return law.significance_level / max(result.normality_test_p, 1e-300)
    if isinstance(result, PoissonResult):
        return law.significance_level / max(result.poisson_test_p, 1e-300)
    if isinstance(result, ParetoResult):
        deviation = abs(result.top_20_percent_contribution / 100 - law.pareto_ratio)
        return deviation / (PARETO_THRESHOLDS[0] * law.analysis_threshold)
    if isinstance(result, ZipfResult):
        return result.deviation_score / (ZIPF_THRESHOLDS[0] * law.analysis_threshold)
    raise TypeError(f"Unexpected result type for law '{name}'")


def _dominant_law(
    results: dict[str, SingleLawResult],
    overall_risk: RiskLevel,
    options: LawkitOptions,
) -> str | None:
    if overall_risk == RiskLevel.LOW:
        return None
    candidates = [name for name, r in results.items() if r.risk_level == overall_risk]
    # max() keeps the first of equal keys, i.e. configured order
    return max(candidates, key=lambda name: _evidence(name, results[name], options))


def _find_conflicts(
    law_risks: dict[str, RiskLevel],
    risk_threshold: RiskLevel,
) -> tuple[str, ...]:
    conflicts = []
    for a, b in combinations(law_risks, 2):
        risk_a, risk_b = law_risks[a], law_risks[b]
        if risk_a >= risk_threshold and risk_b == RiskLevel.LOW:
            flagged, clean = a, b
        elif risk_b >= risk_threshold and risk_a == RiskLevel.LOW:
            flagged, clean = b, a
        else:
            continue
        conflicts.append(
            f"{LAW_NAMES[flagged]} signals {law_risks[flagged].value} risk while "
            f"{LAW_NAMES[clean]} signals LOW risk ({flagged} vs {clean})"
        )
    return tuple(conflicts)


def _recommend(
    law_risks: dict[str, RiskLevel],
    conflicts: tuple[str, ...],
    failed_laws: dict[str, str],
    risk_threshold: RiskLevel,
) -> tuple[str, ...]:
    recommendations = []
    for name, risk in law_risks.items():
        if risk >= risk_threshold:
            recommendations.append(f"{LAW_NAMES[name]} ({risk.value}): {_FOLLOW_UP[name]}")
    if conflicts:
        recommendations.append(
            "Laws disagree on this dataset; confirm that each law's assumptions fit "
            "the data type before acting on a single result."
        )
    for name in failed_laws:
        recommendations.append(
            f"{LAW_NAMES[name]} could not be evaluated; collect more data or check "
            "that the values suit this law."
        )
    if not recommendations:
        recommendations.append("No law reached the risk threshold; no follow-up required.")
    return tuple(recommendations)
