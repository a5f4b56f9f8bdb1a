"""Tests for Benford's law analysis."""

import warnings

import numpy as np
import pytest

from lawkit import (
    BenfordResult,
    DataQualityWarning,
    InsufficientDataError,
    RiskLevel,
    analyze_benford,
    resolve_options,
)
from lawkit._kernels import leading_digits_numba
from lawkit.algorithms.benford import benford_expected


class TestExpectedDistribution:
    """Theoretical distributions sum to one and have the right shape."""

    def test_first_digit_base_10(self):
        digits, probs = benford_expected("first")
        assert digits == tuple(range(1, 10))
        assert probs[0] == pytest.approx(np.log10(2))
        assert probs.sum() == pytest.approx(1.0)

    def test_second_digit_base_10(self):
        digits, probs = benford_expected("second")
        assert digits == tuple(range(10))
        assert probs[0] == pytest.approx(0.11968, abs=1e-5)
        assert probs[9] == pytest.approx(0.08500, abs=1e-5)

    def test_first_two_digits(self):
        digits, probs = benford_expected("both")
        assert digits[0] == 10 and digits[-1] == 99
        assert probs[0] == pytest.approx(np.log10(1 + 1 / 10))

    def test_other_base(self):
        digits, probs = benford_expected("first", base=16)
        assert len(digits) == 15
        assert probs.sum() == pytest.approx(1.0)
        assert np.all(np.diff(probs) < 0)


class TestDigitKernel:
    """Significant-digit extraction handles decades and float rounding."""

    def test_leading_digits(self):
        values = np.array([1.0, 1000.0, 0.3, -9150.0, 0.0, np.inf, 123.45])
        out = leading_digits_numba(values, 10, 1)
        np.testing.assert_array_equal(out, [1, 1, 3, 9, -1, -1, 1])

    def test_first_two_digits(self):
        values = np.array([0.0347, 9150.0, 5.0, 1000.0])
        out = leading_digits_numba(values, 10, 2)
        np.testing.assert_array_equal(out, [34, 91, 50, 10])

    def test_base_2(self):
        out = leading_digits_numba(np.array([1.0, 6.0, 1024.0]), 2, 1)
        np.testing.assert_array_equal(out, [1, 1, 1])


class TestConformity:
    """Conforming data is LOW risk; flat digit data is not."""

    def test_perfect_benford_low_risk(self, perfect_benford_values):
        result = analyze_benford(perfect_benford_values)
        assert isinstance(result, BenfordResult)
        assert result.chi_square == pytest.approx(0.0, abs=0.05)
        assert result.p_value > 0.99
        assert result.risk_level == RiskLevel.LOW
        assert result.is_conforming
        assert result.total_numbers == 10_000

    def test_uniform_digits_flagged(self, uniform_digit_values):
        result = analyze_benford(uniform_digit_values)
        assert result.risk_level == RiskLevel.CRITICAL
        assert result.mad > 0.015
        assert not result.is_conforming
        assert result.most_deviant_digit == 1

    def test_observed_distribution_sums_to_one(self, uniform_digit_values):
        result = analyze_benford(uniform_digit_values)
        assert result.observed_distribution.sum() == pytest.approx(1.0)
        np.testing.assert_allclose(result.observed_distribution, 1 / 9)

    def test_log_uniform_sample(self, rng):
        values = 10 ** rng.uniform(0, 6, size=20_000)
        result = analyze_benford(values)
        assert result.risk_level == RiskLevel.LOW

    def test_sign_and_zero_ignored(self, perfect_benford_values):
        mixed = np.concatenate([-perfect_benford_values, np.zeros(50)])
        result = analyze_benford(mixed)
        assert result.total_numbers == 10_000
        assert result.risk_level == RiskLevel.LOW


class TestOptions:

    def test_second_digit_mode(self, rng):
        values = 10 ** rng.uniform(0, 6, size=20_000)
        result = analyze_benford(values, {"benford_digits": "second"})
        assert result.digit_mode == "second"
        assert result.digits == tuple(range(10))
        assert result.risk_level == RiskLevel.LOW

    def test_both_mode_bins(self, perfect_benford_values):
        result = analyze_benford(perfect_benford_values, {"benford_digits": "both"})
        assert len(result.digits) == 90
        assert result.observed_distribution.shape == (90,)

    def test_base_option(self, rng):
        values = 16 ** rng.uniform(0, 4, size=20_000)
        result = analyze_benford(values, {"benford_base": 16})
        assert result.base == 16
        assert len(result.digits) == 15
        assert result.risk_level == RiskLevel.LOW

    def test_memory_optimization_gives_same_counts(self, perfect_benford_values):
        plain = analyze_benford(perfect_benford_values)
        opts = resolve_options({"use_memory_optimization": True, "batch_size": 333})
        batched = analyze_benford(perfect_benford_values, opts)
        np.testing.assert_array_equal(
            plain.observed_distribution, batched.observed_distribution
        )
        assert plain.chi_square == batched.chi_square

    def test_show_details_mentions_digit(self, uniform_digit_values):
        result = analyze_benford(uniform_digit_values, {"show_details": True})
        assert "Largest deviation at digit 1" in result.analysis_summary

    def test_path_propagates(self, perfect_benford_values):
        assert analyze_benford(perfect_benford_values, path="ledger.csv").path == "ledger.csv"


class TestSmallSamples:

    def test_low_reliability_flagged(self):
        with pytest.warns(DataQualityWarning):
            result = analyze_benford([1, 2, 3, 15, 170])
        assert result.low_reliability
        assert "low reliability" in result.analysis_summary
        assert result.total_numbers == 5

    def test_no_warning_above_minimum(self, perfect_benford_values):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DataQualityWarning)
            result = analyze_benford(perfect_benford_values)
        assert not result.low_reliability

    def test_no_digits_raises(self):
        with pytest.raises(InsufficientDataError, match="No valid numbers"):
            analyze_benford([0, 0.0, "x"])

    def test_empty_raises(self):
        with pytest.raises(InsufficientDataError):
            analyze_benford([])
