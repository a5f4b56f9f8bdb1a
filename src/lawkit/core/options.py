"""Option resolution for lawkit analyses.

Options arrive as two partial records - generic options (output format,
key filtering, memory hints) and law-specific options (thresholds, ranges,
seeds). resolve_options() validates every present value, applies the
documented defaults and returns one immutable LawkitOptions record.

The law-specific sub-record only exists when at least one law-specific
option was supplied, so "no law tuning requested" (``law_options is None``)
stays distinguishable from "law tuning with all-default values".

Example:
    >>> opts = resolve_options({"output_format": "json"}, {"pareto_ratio": 0.9})
    >>> opts.output_format
    <OutputFormat.JSON: 'json'>
    >>> opts.law.pareto_ratio
    0.9
    >>> parse_options({"confidenceLevel": 0.99}).law.confidence_level
    0.99
"""

from __future__ import annotations

import math
import numbers
import re
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from lawkit.core.exceptions import ConfigurationWarning, InvalidConfigurationError
from lawkit.core.risk import RiskLevel


# =============================================================================
# CONSTANTS
# =============================================================================

SINGLE_LAWS: tuple[str, ...] = ("benf", "pareto", "zipf", "normal", "poisson")

_LAW_NAME_ALIASES = {"benford": "benf"}

BENFORD_DIGIT_MODES: tuple[str, ...] = ("first", "second", "both")

# Minimum sample sizes used when min_sample_size is not configured
DEFAULT_MIN_SAMPLE_SIZES: dict[str, int] = {
    "benf": 50,
    "pareto": 5,
    "zipf": 5,
    "normal": 8,
    "poisson": 10,
    "validate": 10,
    "diagnose": 10,
}

DEFAULT_BATCH_SIZE = 10_000


class OutputFormat(Enum):
    """Output formats understood by the rendering layer."""

    TEXT = "text"
    JSON = "json"
    CSV = "csv"
    YAML = "yaml"
    TOML = "toml"
    XML = "xml"

    @classmethod
    def parse(cls, text: str) -> "OutputFormat":
        """Parse a case-insensitive format identifier."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            valid = ", ".join(fmt.value for fmt in cls)
            raise ValueError(f"expected one of: {valid}") from None


# =============================================================================
# RESOLVED RECORDS
# =============================================================================


@dataclass(frozen=True)
class LawSpecificOptions:
    """
    Law-specific tuning with every default applied.

    Attributes:
        risk_threshold: Level at or above which a law counts as anomalous
            when comparing laws in an integration run
        confidence_level: Confidence level for reported intervals (0, 1)
        analysis_threshold: Multiplier applied to every default risk
            threshold (< 1 is stricter, > 1 more lenient)
        significance_level: Alpha for goodness-of-fit tests (0, 1)
        min_sample_size: Minimum reliable sample size; None uses the
            per-law default from DEFAULT_MIN_SAMPLE_SIZES
        enable_outlier_detection: Report outliers in normal/validation runs
        benford_digits: "first", "second" or "both" (first-two digits)
        benford_base: Numeral base for digit extraction (2-36)
        pareto_ratio: Expected share of the top items, 0.8 for 80/20
        pareto_category_limit: Only analyze the top-N categories
        zipf_rank_limit: Only fit the first N ranks
        zipf_frequency_cutoff: Drop frequencies below this value
        generate_count: Number of generated samples
        generate_range_min: Lower bound of generated values
        generate_range_max: Upper bound of generated values
        generate_seed: Seed for reproducible generation
        enable_japanese_numerals: Parse full-width digits and kanji numerals
        enable_international_numerals: Parse Unicode digits and locale formats
        enable_parallel_processing: Run integration sub-analyses on threads
        memory_limit_mb: Advisory memory budget; 0 or None means unlimited
        laws_to_check: Laws evaluated by the integration analyzer
        value_range_min: Lower bound for the validator's range check
        value_range_max: Upper bound for the validator's range check
    """

    risk_threshold: RiskLevel = RiskLevel.HIGH
    confidence_level: float = 0.95
    analysis_threshold: float = 1.0
    significance_level: float = 0.05
    min_sample_size: int | None = None
    enable_outlier_detection: bool = False
    benford_digits: str = "first"
    benford_base: int = 10
    pareto_ratio: float = 0.8
    pareto_category_limit: int | None = None
    zipf_rank_limit: int | None = None
    zipf_frequency_cutoff: float = 0.0
    generate_count: int | None = None
    generate_range_min: float | None = None
    generate_range_max: float | None = None
    generate_seed: int | None = None
    enable_japanese_numerals: bool = False
    enable_international_numerals: bool = False
    enable_parallel_processing: bool = False
    memory_limit_mb: int | None = None
    laws_to_check: tuple[str, ...] = SINGLE_LAWS
    value_range_min: float | None = None
    value_range_max: float | None = None

    def min_sample_size_for(self, law: str) -> int:
        """Configured minimum sample size, or the default for `law`."""
        if self.min_sample_size is not None:
            return self.min_sample_size
        return DEFAULT_MIN_SAMPLE_SIZES.get(law, 10)


DEFAULT_LAW_OPTIONS = LawSpecificOptions()


@dataclass(frozen=True)
class LawkitOptions:
    """
    Fully resolved configuration for one analysis call.

    Attributes:
        output_format: Format requested from the rendering layer
        ignore_keys_regex: Mapping keys matching this pattern are skipped
            when extracting values from structured input
        path_filter: Only values whose path contains this string are used
        show_details: Add detail sentences to analysis summaries
        show_recommendations: Produce recommendations in integration runs
        use_memory_optimization: Process large inputs in batches
        batch_size: Batch size used by memory optimization
        law_options: Law-specific tuning, or None if none was requested
    """

    output_format: OutputFormat = OutputFormat.TEXT
    ignore_keys_regex: re.Pattern[str] | None = None
    path_filter: str | None = None
    show_details: bool = False
    show_recommendations: bool = True
    use_memory_optimization: bool = False
    batch_size: int = DEFAULT_BATCH_SIZE
    law_options: LawSpecificOptions | None = None

    @property
    def law(self) -> LawSpecificOptions:
        """Law-specific options, falling back to the defaults."""
        return self.law_options if self.law_options is not None else DEFAULT_LAW_OPTIONS

    @property
    def has_law_options(self) -> bool:
        """True if any law-specific option was supplied."""
        return self.law_options is not None


# =============================================================================
# FIELD VALIDATORS
# =============================================================================


def _fail(field: str, value: Any, reason: str) -> InvalidConfigurationError:
    return InvalidConfigurationError(
        f"Invalid value for '{field}': {value!r} ({reason}).", field=field
    )


def _as_bool(field: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise _fail(field, value, "expected a boolean")
    return value


def _count(minimum: int) -> Callable[[str, Any], int]:
    def check(field: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise _fail(field, value, "expected an integer")
        if value < minimum:
            raise _fail(field, value, f"must be >= {minimum}")
        return int(value)

    return check


def _real(
    low: float = -math.inf,
    high: float = math.inf,
    low_open: bool = False,
    high_open: bool = False,
) -> Callable[[str, Any], float]:
    def check(field: str, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise _fail(field, value, "expected a number")
        number = float(value)
        if not math.isfinite(number):
            raise _fail(field, value, "must be finite")
        below = number <= low if low_open else number < low
        above = number >= high if high_open else number > high
        if below or above:
            left = "(" if low_open else "["
            right = ")" if high_open else "]"
            raise _fail(field, value, f"must be in {left}{low}, {high}{right}")
        return number

    return check


def _as_output_format(field: str, value: Any) -> OutputFormat:
    if isinstance(value, OutputFormat):
        return value
    if not isinstance(value, str):
        raise _fail(field, value, "expected a string")
    try:
        return OutputFormat.parse(value)
    except ValueError as e:
        raise _fail(field, value, str(e)) from None


def _as_regex(field: str, value: Any) -> re.Pattern[str]:
    if isinstance(value, re.Pattern):
        return value
    if not isinstance(value, str):
        raise _fail(field, value, "expected a regular expression string")
    try:
        return re.compile(value)
    except re.error as e:
        raise InvalidConfigurationError(
            f"Invalid regex for '{field}': {value!r} ({e}).", field=field
        ) from e


def _as_str(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise _fail(field, value, "expected a string")
    return value


def _as_risk_level(field: str, value: Any) -> RiskLevel:
    if isinstance(value, RiskLevel):
        return value
    if not isinstance(value, str):
        raise _fail(field, value, "expected a risk level name")
    try:
        return RiskLevel.parse(value)
    except ValueError as e:
        raise _fail(field, value, str(e)) from None


def _as_digit_mode(field: str, value: Any) -> str:
    if not isinstance(value, str) or value.strip().lower() not in BENFORD_DIGIT_MODES:
        raise _fail(field, value, f"expected one of: {', '.join(BENFORD_DIGIT_MODES)}")
    return value.strip().lower()


def _as_laws(field: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        items = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise _fail(field, value, "expected a list of law names")

    laws: list[str] = []
    for item in items:
        if isinstance(item, str):
            item = _LAW_NAME_ALIASES.get(item, item)
        if not isinstance(item, str) or item not in SINGLE_LAWS:
            raise _fail(field, item, f"expected law names from: {', '.join(SINGLE_LAWS)}")
        if item not in laws:
            laws.append(item)
    if not laws:
        raise _fail(field, value, "at least one law is required")
    return tuple(laws)


def _as_seed(field: str, value: Any) -> int | None:
    return parse_seed(value, field)


_GENERIC_FIELDS: dict[str, Callable[[str, Any], Any]] = {
    "output_format": _as_output_format,
    "ignore_keys_regex": _as_regex,
    "path_filter": _as_str,
    "show_details": _as_bool,
    "show_recommendations": _as_bool,
    "use_memory_optimization": _as_bool,
    "batch_size": _count(1),
}

_LAW_FIELDS: dict[str, Callable[[str, Any], Any]] = {
    "risk_threshold": _as_risk_level,
    "confidence_level": _real(0.0, 1.0, low_open=True, high_open=True),
    "analysis_threshold": _real(0.0, low_open=True),
    "significance_level": _real(0.0, 1.0, low_open=True, high_open=True),
    "min_sample_size": _count(0),
    "enable_outlier_detection": _as_bool,
    "benford_digits": _as_digit_mode,
    "benford_base": _count(2),
    "pareto_ratio": _real(0.0, 1.0, low_open=True),
    "pareto_category_limit": _count(0),
    "zipf_rank_limit": _count(0),
    "zipf_frequency_cutoff": _real(0.0),
    "generate_count": _count(0),
    "generate_range_min": _real(),
    "generate_range_max": _real(),
    "generate_seed": _as_seed,
    "enable_japanese_numerals": _as_bool,
    "enable_international_numerals": _as_bool,
    "enable_parallel_processing": _as_bool,
    "memory_limit_mb": _count(0),
    "laws_to_check": _as_laws,
    "value_range_min": _real(),
    "value_range_max": _real(),
}

_MAX_BENFORD_BASE = 36
_SEED_PATTERN = re.compile(r"\+?[0-9]+")


def parse_seed(value: Any, field: str = "generate_seed") -> int | None:
    """
    Parse a generation seed.

    Integers must be non-negative. Strings are accepted only when they are a
    non-negative integer literal; any other string is ignored (returns None)
    with a ConfigurationWarning, matching the permissive behavior callers
    already rely on.

    Raises:
        InvalidConfigurationError: For negative integers or non-string,
            non-integer values
    """
    if isinstance(value, bool):
        raise _fail(field, value, "expected a non-negative integer or integer string")
    if isinstance(value, numbers.Integral):
        if value < 0:
            raise _fail(field, value, "must be >= 0")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if _SEED_PATTERN.fullmatch(text):
            return int(text)
        warnings.warn(
            f"Ignoring unparseable seed {value!r}; generation will not be reproducible.",
            ConfigurationWarning,
            stacklevel=3,
        )
        return None
    raise _fail(field, value, "expected a non-negative integer or integer string")


# =============================================================================
# RESOLUTION
# =============================================================================


def resolve_options(
    generic: Mapping[str, Any] | LawkitOptions | None = None,
    law_specific: Mapping[str, Any] | None = None,
) -> LawkitOptions:
    """
    Merge generic and law-specific options into one resolved record.

    Present values override defaults; None values count as unset. Every
    value is validated before the record is built, so an invalid option
    never yields a partially applied configuration.

    Args:
        generic: Generic options (output_format, ignore_keys_regex,
            path_filter, show_details, show_recommendations,
            use_memory_optimization, batch_size), or an already resolved
            LawkitOptions which is returned unchanged
        law_specific: Law-specific options (see LawSpecificOptions)

    Returns:
        Immutable LawkitOptions

    Raises:
        InvalidConfigurationError: Unknown option names, bad regex, unknown
            output format or out-of-domain values
    """
    if isinstance(generic, LawkitOptions):
        if law_specific:
            raise InvalidConfigurationError(
                "Cannot combine a resolved LawkitOptions with extra law-specific options."
            )
        return generic

    generic_values = _validate_fields(generic or {}, _GENERIC_FIELDS, "generic")
    law_values = _validate_fields(law_specific or {}, _LAW_FIELDS, "law-specific")

    if "benford_base" in law_values and law_values["benford_base"] > _MAX_BENFORD_BASE:
        raise _fail("benford_base", law_values["benford_base"], f"must be <= {_MAX_BENFORD_BASE}")
    for low, high in (
        ("value_range_min", "value_range_max"),
        ("generate_range_min", "generate_range_max"),
    ):
        if low in law_values and high in law_values and law_values[low] > law_values[high]:
            raise _fail(low, law_values[low], f"must not exceed {high}")

    law_options = LawSpecificOptions(**law_values) if law_values else None
    return LawkitOptions(**generic_values, law_options=law_options)


def parse_options(record: Mapping[str, Any] | LawkitOptions | None) -> LawkitOptions:
    """
    Resolve a flat option record as received at the system boundary.

    Keys may be snake_case or camelCase. Each key is routed to the generic or
    law-specific part and the result is passed through resolve_options().

    Raises:
        InvalidConfigurationError: For unknown keys or invalid values
    """
    if record is None:
        return LawkitOptions()
    if isinstance(record, LawkitOptions):
        return record
    if not isinstance(record, Mapping):
        raise InvalidConfigurationError(
            f"Options must be a mapping, got {type(record).__name__}."
        )

    generic: dict[str, Any] = {}
    law_specific: dict[str, Any] = {}
    for key, value in record.items():
        name = _snake_case(str(key))
        if name in _GENERIC_FIELDS:
            generic[name] = value
        elif name in _LAW_FIELDS:
            law_specific[name] = value
        else:
            raise InvalidConfigurationError(f"Unknown option '{key}'.", field=str(key))
    return resolve_options(generic, law_specific)


def _validate_fields(
    values: Mapping[str, Any],
    fields: dict[str, Callable[[str, Any], Any]],
    kind: str,
) -> dict[str, Any]:
    resolved: dict[str, Any] = {}
    for name, value in values.items():
        if name not in fields:
            raise InvalidConfigurationError(f"Unknown {kind} option '{name}'.", field=name)
        if value is None:
            continue
        parsed = fields[name](name, value)
        # None leaves the default in place (an ignored seed)
        if parsed is not None:
            resolved[name] = parsed
    return resolved


def _snake_case(key: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()
