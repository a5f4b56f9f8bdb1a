"""Tests for cross-law integration analysis."""

import numpy as np
import pytest

from lawkit import (
    BenfordResult,
    InsufficientDataError,
    IntegrationResult,
    NormalResult,
    RiskLevel,
    analyze_integration,
    resolve_options,
)
from lawkit.algorithms.integration import run_integration


@pytest.fixture
def benford_vs_normal():
    """Options comparing only Benford and Normal."""
    return resolve_options(law_specific={"laws_to_check": ["benf", "normal"]})


class TestConflicts:
    """Normal data around 1000 conforms to Normal but not to Benford."""

    def test_conflict_reported(self, normal_quantile_sample, benford_vs_normal):
        result = analyze_integration(normal_quantile_sample, benford_vs_normal)
        assert isinstance(result, IntegrationResult)
        assert result.law_risks["normal"] == RiskLevel.LOW
        assert result.law_risks["benf"] >= RiskLevel.HIGH
        assert result.has_conflicts
        assert len(result.conflicting_results) == 1
        assert "benf vs normal" in result.conflicting_results[0]

    def test_overall_risk_is_most_severe(self, normal_quantile_sample, benford_vs_normal):
        result = analyze_integration(normal_quantile_sample, benford_vs_normal)
        assert result.overall_risk == result.law_risks["benf"]
        assert result.dominant_law == "benf"

    def test_medium_risk_is_not_a_conflict(self, normal_quantile_sample):
        # Pareto on near-equal magnitudes is far from 80/20 while Normal is LOW;
        # scaling the tiers by 4 drops Pareto to MEDIUM, below risk_threshold
        opts = resolve_options(law_specific={"laws_to_check": ["pareto", "normal"]})
        flagged = analyze_integration(normal_quantile_sample, opts)
        assert flagged.law_risks["pareto"] == RiskLevel.CRITICAL
        assert flagged.has_conflicts

        lenient = resolve_options(
            law_specific={"laws_to_check": ["pareto", "normal"], "analysis_threshold": 4.0}
        )
        relaxed = analyze_integration(normal_quantile_sample, lenient)
        assert relaxed.law_risks["pareto"] == RiskLevel.MEDIUM
        assert not relaxed.has_conflicts

    def test_agreeing_laws_have_no_conflict(self, perfect_benford_values):
        opts = resolve_options(law_specific={"laws_to_check": ["benf"]})
        result = analyze_integration(perfect_benford_values, opts)
        assert result.conflicting_results == ()
        assert result.overall_risk == RiskLevel.LOW
        assert result.dominant_law is None


class TestOrderingAndParallelism:

    def test_results_follow_configured_order(self, normal_quantile_sample):
        opts = resolve_options(law_specific={"laws_to_check": ["normal", "benf"]})
        singles, integration = run_integration(normal_quantile_sample, opts)
        assert isinstance(singles[0], NormalResult)
        assert isinstance(singles[1], BenfordResult)
        assert integration.laws_analyzed == ("normal", "benf")

    def test_parallel_matches_serial(self, normal_quantile_sample):
        laws = ["benf", "pareto", "zipf", "normal", "poisson"]
        serial = analyze_integration(
            normal_quantile_sample, {"laws_to_check": laws}
        )
        parallel = analyze_integration(
            normal_quantile_sample,
            {"laws_to_check": laws, "enable_parallel_processing": True},
        )
        assert parallel.laws_analyzed == serial.laws_analyzed
        assert parallel.law_risks == serial.law_risks
        assert parallel.overall_risk == serial.overall_risk
        assert parallel.dominant_law == serial.dominant_law
        assert parallel.conflicting_results == serial.conflicting_results
        assert parallel.failed_laws == serial.failed_laws


class TestPartialFailure:

    def test_failing_law_recorded(self, normal_quantile_sample):
        # Quantile values are not integer counts, so Poisson has nothing to analyze
        opts = resolve_options(law_specific={"laws_to_check": ["normal", "poisson"]})
        with pytest.warns(UserWarning):
            result = analyze_integration(normal_quantile_sample, opts)
        assert result.laws_analyzed == ("normal",)
        assert "poisson" in result.failed_laws
        assert any("Poisson process could not be evaluated" in r for r in result.recommendations)

    def test_all_laws_failing_raises(self):
        opts = resolve_options(law_specific={"laws_to_check": ["normal", "zipf"]})
        with pytest.raises(InsufficientDataError, match="No law could be evaluated"):
            analyze_integration([1.0], opts)


class TestRecommendations:

    def test_recommendations_for_flagged_law(self, normal_quantile_sample, benford_vs_normal):
        result = analyze_integration(normal_quantile_sample, benford_vs_normal)
        assert any(r.startswith("Benford's law") for r in result.recommendations)

    def test_recommendations_disabled(self, normal_quantile_sample):
        opts = resolve_options(
            {"show_recommendations": False}, {"laws_to_check": ["benf", "normal"]}
        )
        result = analyze_integration(normal_quantile_sample, opts)
        assert result.recommendations == ()

    def test_clean_data_recommendation(self, perfect_benford_values):
        result = analyze_integration(perfect_benford_values, {"laws_to_check": ["benf"]})
        assert result.recommendations == (
            "No law reached the risk threshold; no follow-up required.",
        )


class TestSummary:

    def test_summary_lists_laws(self, normal_quantile_sample, benford_vs_normal):
        text = analyze_integration(normal_quantile_sample, benford_vs_normal).summary()
        assert "INTEGRATED LAW ANALYSIS REPORT" in text
        assert "benf" in text and "normal" in text

    def test_to_dict_serializes_risks(self, normal_quantile_sample, benford_vs_normal):
        data = analyze_integration(normal_quantile_sample, benford_vs_normal).to_dict()
        assert data["result_type"] == "IntegrationAnalysis"
        assert data["law_risks"]["normal"] == "LOW"
        assert isinstance(data["laws_analyzed"], list)


def test_integration_does_not_mutate_input(normal_quantile_sample, benford_vs_normal):
    before = normal_quantile_sample.copy()
    analyze_integration(normal_quantile_sample, benford_vs_normal)
    np.testing.assert_array_equal(normal_quantile_sample, before)
