"""Tests for dataset diagnostics."""

import numpy as np
import pytest
from scipy import stats

from lawkit import DiagnosticResult, DiagnosticType, InsufficientDataError, diagnose_data


class TestDiagnosticType:

    def test_general(self, normal_quantile_sample):
        result = diagnose_data(normal_quantile_sample)
        assert isinstance(result, DiagnosticResult)
        assert result.diagnostic_type == DiagnosticType.GENERAL

    def test_degenerate(self):
        result = diagnose_data([3.0] * 50)
        assert result.diagnostic_type == DiagnosticType.DEGENERATE

    def test_small_sample(self):
        result = diagnose_data([1.0, 5.0, 2.0])
        assert result.diagnostic_type == DiagnosticType.SMALL_SAMPLE

    def test_outlier_dominated(self, normal_quantile_sample):
        data = np.concatenate([normal_quantile_sample, np.full(40, 1e6)])
        result = diagnose_data(data)
        assert result.diagnostic_type == DiagnosticType.OUTLIER_DOMINATED

    def test_skewed(self):
        # Gamma(2) quantiles: skewness about 1.4, few modified-z outliers
        probs = (np.arange(400) + 0.5) / 400
        data = stats.gamma.ppf(probs, 2.0)
        result = diagnose_data(data)
        assert result.diagnostic_type in (DiagnosticType.SKEWED, DiagnosticType.HEAVY_TAILED)

    def test_type_value_names(self):
        assert DiagnosticType.GENERAL.value == "General"
        assert DiagnosticType.SMALL_SAMPLE.value == "SmallSample"


class TestFindings:

    def test_law_preconditions_reported(self, poisson_profile_counts):
        result = diagnose_data(poisson_profile_counts)
        assert "poisson: preconditions hold" in result.findings
        assert "normal: preconditions hold" in result.findings

    def test_negative_values_fail_pareto(self):
        result = diagnose_data(np.linspace(-10, 10, 30))
        assert any(f.startswith("pareto: needs") for f in result.findings)

    def test_dropped_entries_reported(self):
        result = diagnose_data([1.0, 2.0, None, "x"] * 5)
        assert any("not usable" in f for f in result.findings)

    def test_magnitude_span(self):
        result = diagnose_data([1.0, 10.0, 100.0, 1000.0] * 5)
        assert "values span 3.0 orders of magnitude" in result.findings


class TestConfidence:

    def test_confidence_formula(self, normal_quantile_sample):
        result = diagnose_data(normal_quantile_sample)
        assert result.confidence_level == pytest.approx(500 / 510)

    def test_confidence_grows_with_n(self):
        small = diagnose_data(np.arange(1.0, 6.0))
        large = diagnose_data(np.arange(1.0, 101.0))
        assert 0.0 < small.confidence_level < large.confidence_level <= 1.0


def test_empty_raises():
    with pytest.raises(InsufficientDataError):
        diagnose_data([])
