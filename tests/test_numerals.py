"""Tests for locale-aware numeral normalization."""

import math

import pytest

from lawkit import normalize_numeral, normalize_numerals


class TestPlainNumbers:
    """ASCII numbers and numeric types are always accepted."""

    @pytest.mark.parametrize(
        "value,expected",
        [(42, 42.0), (3.5, 3.5), ("17", 17.0), ("-2.5e3", -2500.0), ("  8  ", 8.0)],
    )
    def test_accepted(self, value, expected):
        assert normalize_numeral(value) == expected

    def test_bool_rejected(self):
        assert normalize_numeral(True) is None

    def test_underscore_grouping_rejected(self):
        assert normalize_numeral("1_000") is None

    def test_garbage_rejected(self):
        assert normalize_numeral("abc") is None
        assert normalize_numeral("") is None
        assert normalize_numeral(None) is None

    def test_nan_passes_through(self):
        assert math.isnan(normalize_numeral(float("nan")))


class TestJapanese:
    """Full-width digits and kanji numerals."""

    def test_disabled_by_default(self):
        assert normalize_numeral("１２３") is None
        assert normalize_numeral("三百") is None

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("１２３", 123.0),
            ("１，２３４．５", 1234.5),
            ("一千二百三十四", 1234.0),
            ("十", 10.0),
            ("二十五", 25.0),
            ("三億", 3e8),
            ("2万5千", 25000.0),
            ("一億二千万", 1.2e8),
            ("壱萬", 10000.0),
            ("－５", -5.0),
        ],
    )
    def test_parsed(self, text, expected):
        assert normalize_numeral(text, japanese=True) == expected

    def test_invalid_kanji_sequence(self):
        assert normalize_numeral("三百円", japanese=True) is None


class TestInternational:
    """Unicode digits, currency symbols and locale separators."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("١٢٣", 123.0),
            ("١٢٣٫٤", 123.4),
            ("१२३४", 1234.0),
            ("€1.234,50", 1234.5),
            ("$1,234.50", 1234.5),
            ("1,234", 1234.0),
            ("3,5", 3.5),
            ("1.234.567", 1234567.0),
            ("1'234.5", 1234.5),
            ("(1,200)", -1200.0),
        ],
    )
    def test_parsed(self, text, expected):
        assert normalize_numeral(text, international=True) == pytest.approx(expected)

    def test_disabled_by_default(self):
        assert normalize_numeral("١٢٣") is None

    def test_ambiguous_separators_rejected(self):
        assert normalize_numeral("1,2,3", international=True) is None


class TestHelpers:

    def test_normalize_numerals(self):
        assert normalize_numerals(["1", "x", 2]) == [1.0, None, 2.0]
