"""Tests for option resolution."""

import re
import warnings

import pytest

from lawkit import (
    ConfigurationWarning,
    InvalidConfigurationError,
    LawkitOptions,
    LawSpecificOptions,
    OutputFormat,
    RiskLevel,
    parse_options,
    resolve_options,
)
from lawkit.core.options import parse_seed


class TestDefaults:
    """Unset options resolve to the documented defaults."""

    def test_empty_resolution(self):
        opts = resolve_options()
        assert opts.output_format == OutputFormat.TEXT
        assert opts.ignore_keys_regex is None
        assert opts.path_filter is None
        assert opts.show_details is False
        assert opts.show_recommendations is True
        assert opts.batch_size == 10_000
        assert opts.law_options is None
        assert not opts.has_law_options

    def test_law_fallback_uses_defaults(self):
        opts = resolve_options()
        assert opts.law == LawSpecificOptions()
        assert opts.law.pareto_ratio == 0.8
        assert opts.law.risk_threshold == RiskLevel.HIGH

    def test_per_law_minimum_sample_sizes(self):
        law = LawSpecificOptions()
        assert law.min_sample_size_for("benf") == 50
        assert law.min_sample_size_for("validate") == 10
        assert LawSpecificOptions(min_sample_size=3).min_sample_size_for("benf") == 3


class TestLawSubRecord:
    """The law-specific sub-record exists only when a law field is given."""

    def test_single_law_field_populates_record(self):
        opts = resolve_options(law_specific={"pareto_ratio": 0.9})
        assert opts.has_law_options
        assert opts.law_options.pareto_ratio == 0.9
        # Every other field carries its default
        assert opts.law_options.confidence_level == 0.95
        assert opts.law_options.benford_digits == "first"

    def test_none_values_count_as_unset(self):
        opts = resolve_options({"output_format": None}, {"pareto_ratio": None})
        assert opts.law_options is None
        assert opts.output_format == OutputFormat.TEXT

    def test_generic_only_leaves_record_absent(self):
        opts = resolve_options({"show_details": True})
        assert opts.show_details is True
        assert opts.law_options is None


class TestValidation:
    """Invalid options are rejected before any analysis."""

    def test_bad_regex_names_field(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            resolve_options({"ignore_keys_regex": "([unclosed"})
        assert exc_info.value.field == "ignore_keys_regex"
        assert "ignore_keys_regex" in str(exc_info.value)

    def test_regex_is_compiled(self):
        opts = resolve_options({"ignore_keys_regex": "^_"})
        assert isinstance(opts.ignore_keys_regex, re.Pattern)
        assert opts.ignore_keys_regex.search("_id")

    def test_unknown_output_format(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            resolve_options({"output_format": "docx"})
        assert exc_info.value.field == "output_format"

    @pytest.mark.parametrize("fmt", ["text", "JSON", "csv", "yaml", "toml", "xml"])
    def test_known_output_formats(self, fmt):
        assert resolve_options({"output_format": fmt}).output_format.value == fmt.lower()

    @pytest.mark.parametrize(
        "field,value",
        [
            ("pareto_ratio", 0.0),
            ("pareto_ratio", 1.5),
            ("confidence_level", 1.0),
            ("significance_level", 0.0),
            ("analysis_threshold", 0.0),
            ("benford_base", 1),
            ("benford_base", 37),
            ("benford_digits", "third"),
            ("min_sample_size", -1),
            ("zipf_frequency_cutoff", -0.5),
            ("confidence_level", float("nan")),
            ("risk_threshold", "severe"),
            ("laws_to_check", ["benf", "lognormal"]),
        ],
    )
    def test_out_of_domain_values(self, field, value):
        with pytest.raises(InvalidConfigurationError):
            resolve_options(law_specific={field: value})

    def test_pareto_ratio_upper_bound_inclusive(self):
        assert resolve_options(law_specific={"pareto_ratio": 1.0}).law.pareto_ratio == 1.0

    def test_bool_is_not_a_count(self):
        with pytest.raises(InvalidConfigurationError):
            resolve_options({"batch_size": True})

    def test_batch_size_must_be_positive(self):
        with pytest.raises(InvalidConfigurationError):
            resolve_options({"batch_size": 0})

    def test_flag_requires_bool(self):
        with pytest.raises(InvalidConfigurationError):
            resolve_options({"show_details": "yes"})

    def test_unknown_option(self):
        with pytest.raises(InvalidConfigurationError):
            resolve_options(law_specific={"not_an_option": 1})

    def test_inverted_value_range(self):
        with pytest.raises(InvalidConfigurationError):
            resolve_options(law_specific={"value_range_min": 10, "value_range_max": 1})

    def test_risk_threshold_parsed(self):
        opts = resolve_options(law_specific={"risk_threshold": "medium"})
        assert opts.law.risk_threshold == RiskLevel.MEDIUM

    def test_laws_to_check_from_string(self):
        opts = resolve_options(law_specific={"laws_to_check": "benf, normal"})
        assert opts.law.laws_to_check == ("benf", "normal")

    def test_benford_alias_in_laws_to_check(self):
        opts = resolve_options(law_specific={"laws_to_check": ["benford", "pareto", "benf"]})
        assert opts.law.laws_to_check == ("benf", "pareto")
        opts = parse_options({"lawsToCheck": "benford, normal"})
        assert opts.law.laws_to_check == ("benf", "normal")


class TestSeed:
    """Seeds accept non-negative integer text; anything else is ignored."""

    def test_numeric_string(self):
        assert parse_seed("42") == 42

    def test_integer(self):
        assert parse_seed(7) == 7

    def test_unparseable_string_is_ignored_with_warning(self):
        with pytest.warns(ConfigurationWarning):
            assert parse_seed("forty-two") is None

    def test_ignored_seed_does_not_create_law_record(self):
        with pytest.warns(ConfigurationWarning):
            opts = resolve_options(law_specific={"generate_seed": "abc"})
        assert opts.law_options is None

    def test_negative_integer_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            parse_seed(-1)

    def test_float_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            parse_seed(1.5)

    def test_valid_seed_no_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            opts = resolve_options(law_specific={"generate_seed": "123"})
        assert opts.law.generate_seed == 123

    def test_invalid_seed_names_field(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            resolve_options(law_specific={"generate_seed": -3})
        assert exc_info.value.field == "generate_seed"


class TestIdempotence:
    """Resolving the same inputs twice gives identical records."""

    def test_equal_records(self):
        generic = {"output_format": "json", "ignore_keys_regex": "^meta", "batch_size": 500}
        law_specific = {"pareto_ratio": 0.7, "benford_digits": "both", "generate_seed": "9"}
        first = resolve_options(generic, law_specific)
        second = resolve_options(generic, law_specific)
        assert first == second

    def test_resolved_record_passes_through(self):
        opts = resolve_options({"show_details": True})
        assert resolve_options(opts) is opts

    def test_records_are_frozen(self):
        opts = resolve_options()
        with pytest.raises(AttributeError):
            opts.show_details = True  # type: ignore[misc]


class TestParseOptions:
    """Flat boundary records are split into generic and law-specific parts."""

    def test_camel_case_keys(self):
        opts = parse_options({"outputFormat": "yaml", "confidenceLevel": 0.99})
        assert opts.output_format == OutputFormat.YAML
        assert opts.law.confidence_level == 0.99

    def test_snake_case_keys(self):
        opts = parse_options({"show_recommendations": False, "benford_base": 16})
        assert opts.show_recommendations is False
        assert opts.law.benford_base == 16

    def test_none_gives_defaults(self):
        assert parse_options(None) == LawkitOptions()

    def test_unknown_key(self):
        with pytest.raises(InvalidConfigurationError):
            parse_options({"colour": "blue"})

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            parse_options(["benf"])  # type: ignore[arg-type]
