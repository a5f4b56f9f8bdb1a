"""
EVAL: Degenerate datasets (all zeros, constants, empty containers).

Every analyzer must either produce a result or raise a typed LawkitError.
"""

import pytest

from lawkit import (
    ComputationError,
    DiagnosticType,
    InsufficientDataError,
    RiskLevel,
    ValidationIssue,
    law,
)


class TestAllZeros:
    """EVAL: zeros have no significant digit and no magnitude."""

    def test_benford_has_no_digits(self, all_zeros):
        with pytest.raises(InsufficientDataError, match="No valid numbers found"):
            law("benf", all_zeros)

    def test_pareto_zero_total(self, all_zeros):
        with pytest.raises(ComputationError) as exc_info:
            law("pareto", all_zeros)
        assert exc_info.value.statistic == "total"

    def test_zipf_drops_zero_frequencies(self, all_zeros):
        with pytest.raises(InsufficientDataError):
            law("zipf", all_zeros)

    def test_normal_zero_variance(self, all_zeros):
        with pytest.raises(ComputationError) as exc_info:
            law("normal", all_zeros)
        assert exc_info.value.statistic == "std_dev"

    def test_poisson_zero_rate(self, all_zeros):
        with pytest.raises(ComputationError) as exc_info:
            law("poisson", all_zeros)
        assert exc_info.value.statistic == "lambda"

    def test_analyze_fails_when_every_law_fails(self, all_zeros):
        with pytest.raises(InsufficientDataError, match="No law could be evaluated"):
            law("analyze", all_zeros)

    def test_validate_reports_instead_of_raising(self, all_zeros):
        [result] = law("validate", all_zeros)
        assert not result.validation_passed
        assert ValidationIssue.ZERO_VARIANCE in result.issue_categories
        assert ValidationIssue.DUPLICATES in result.issue_categories

    def test_diagnose_degenerate(self, all_zeros):
        [result] = law("diagnose", all_zeros)
        assert result.diagnostic_type == DiagnosticType.DEGENERATE


class TestConstantValues:
    """EVAL: constant data is maximally un-Benford and perfectly equal."""

    def test_benford_single_digit(self, constant_sevens):
        [result] = law("benf", constant_sevens)
        assert result.risk_level == RiskLevel.CRITICAL
        assert result.most_deviant_digit == 7

    def test_pareto_equal_shares(self, constant_sevens):
        [result] = law("pareto", constant_sevens, {"show_details": True})
        assert result.top_20_percent_contribution == pytest.approx(20.0)
        assert result.concentration_index == pytest.approx(0.0, abs=1e-12)
        assert result.tail_index is None
        assert result.risk_level == RiskLevel.CRITICAL

    def test_analyze_partial(self, constant_sevens):
        [*singles, integration] = law("analyze", constant_sevens)
        assert "normal" in integration.failed_laws
        assert "benf" in integration.laws_analyzed
        assert len(singles) == len(integration.laws_analyzed)


class TestEmptyContainers:
    """EVAL: empty list, empty mapping, None."""

    @pytest.mark.parametrize("data", [[], {}, None, ""])
    @pytest.mark.parametrize("command", ["benf", "pareto", "zipf", "normal", "poisson", "diagnose"])
    def test_analyzers_raise_insufficient_data(self, command, data):
        with pytest.raises(InsufficientDataError):
            law(command, data)

    def test_validate_empty_mapping(self):
        [result] = law("validate", {})
        assert not result.validation_passed
        assert result.data_quality_score == 0.0


class TestSingleValue:
    """EVAL: n = 1 is below every minimum sample size."""

    def test_pareto_single_item(self):
        with pytest.warns(UserWarning, match="minimum sample size"):
            [result] = law("pareto", [5.0])
        assert result.top_items == 1
        assert result.top_20_percent_contribution == pytest.approx(100.0)
        assert result.risk_level == RiskLevel.MEDIUM

    def test_benford_single_value_low_reliability(self):
        with pytest.warns(UserWarning):
            [result] = law("benf", [5.0])
        assert result.low_reliability
        assert result.total_numbers == 1
