"""Synthetic data generation for each statistical law.

Generated samples give analyzers a known ground truth: data generated for a
law, fed back into that law's analyzer, should come out LOW risk.
"""

from __future__ import annotations

import math
import numbers
import time
import warnings
from typing import Any, Mapping

import numpy as np
from scipy import stats
from scipy.optimize import brentq

from lawkit.core.exceptions import ConfigurationWarning, InvalidConfigurationError
from lawkit.core.options import LawkitOptions, parse_options, parse_seed
from lawkit.core.result import GeneratedResult

DEFAULT_COUNT = 1000

DEFAULT_RANGES: dict[str, tuple[float, float]] = {
    "benf": (1.0, 1e6),
    "pareto": (1.0, math.inf),
    "normal": (0.0, 100.0),
}

DEFAULT_PARAMETERS: dict[str, dict[str, float]] = {
    "zipf": {"s": 1.0, "scale": 1000.0, "noise": 0.05},
    "poisson": {"lambda": 5.0},
}

# log(5) / log(4): the 80/20 tail index of an infinite population
DEFAULT_PARETO_ALPHA = 1.16

ALPHA_BRACKET: tuple[float, float] = (0.1, 50.0)

_LAW_ALIASES = {
    "benf": "benf",
    "benford": "benf",
    "pareto": "pareto",
    "zipf": "zipf",
    "normal": "normal",
    "poisson": "poisson",
}

_PARAMETER_KEYS = ("mean", "std_dev", "lambda", "alpha", "s", "scale", "base", "noise")

_CONFIG_KEYS = {"type", "law", "count", "seed", "range", "range_min", "range_max", "parameters"}


def generate_data(
    spec: Mapping[str, Any] | str | None,
    options: LawkitOptions | dict[str, Any] | None = None,
    *,
    path: str = "generated",
) -> GeneratedResult:
    """
    Generate a sample that follows a statistical law.

    `spec` names the law ("type" or "law": benf/benford, pareto, zipf,
    normal, poisson) and may set count, seed, range ([min, max] or
    range_min/range_max) and law parameters, either at the top level or
    under "parameters". A bare string is taken as the law name. Values in
    `spec` take precedence over the generate_* options, which take
    precedence over the defaults.

    Per law:
    - benf: log-uniform over [min, max] in the configured base
    - pareto: classical Pareto with x_min = range min, truncated at range max
      when it is finite. Without an explicit alpha the tail index is
      calibrated so the sample puts pareto_ratio of its total in the top
      (1 - pareto_ratio) of items
    - zipf: rank frequencies scale / rank^s with multiplicative log-normal noise
    - normal: mean and std_dev, defaulting to the range midpoint and range / 6;
      truncated to the range only when the caller sets one
    - poisson: counts with rate lambda

    Zipf and Poisson take no range; an explicit one is ignored with a
    ConfigurationWarning. parameters["range"] holds the bounds actually
    applied (None for unbounded sides or laws without a range).

    Values are drawn by stratified inverse-CDF sampling: one draw per
    equal-probability stratum, then shuffled, so every value is marginally
    distributed as the law while the sample as a whole tracks it closely.
    The same seed and parameters always produce the same array.

    Args:
        spec: Generation spec mapping or law name
        options: Resolved LawkitOptions or a flat option mapping
        path: Source identifier reported on the result

    Returns:
        GeneratedResult with the sample and every parameter actually used

    Raises:
        InvalidConfigurationError: Unknown law, unknown spec key or invalid
            parameter value

    Example:
        >>> from lawkit import generate_data
        >>> a = generate_data({"law": "normal", "count": 10, "seed": "42"})
        >>> b = generate_data({"law": "normal", "count": 10, "seed": "42"})
        >>> bool((a.sample_data == b.sample_data).all())
        True
    """
    start_time = time.perf_counter()
    options = parse_options(options)
    law_options = options.law
    config = _normalize_spec(spec)

    data_type = _law_name(config)
    count = _resolve_count(config, law_options.generate_count)
    seed = parse_seed(config["seed"], "seed") if config.get("seed") is not None else None
    if seed is None:
        seed = law_options.generate_seed

    params = dict(DEFAULT_PARAMETERS.get(data_type, {}))
    nested = config.get("parameters") or {}
    if not isinstance(nested, Mapping):
        raise InvalidConfigurationError("'parameters' must be a mapping.", field="parameters")
    for key, value in {**nested, **{k: config[k] for k in _PARAMETER_KEYS if k in config}}.items():
        if key not in _PARAMETER_KEYS:
            raise InvalidConfigurationError(f"Unknown generation parameter '{key}'.", field=key)
        params[key] = _positive_or_real(key, value)

    low, high, explicit = _resolve_range(config, law_options, data_type)

    rng = np.random.default_rng(seed)
    generate = _GENERATORS[data_type]
    sample, used = generate(rng, count, low, high, explicit, params, law_options)

    parameters: dict[str, Any] = {"seed": seed, **used}
    computation_time = (time.perf_counter() - start_time) * 1000

    return GeneratedResult(
        path=path,
        data_type=data_type,
        count=count,
        parameters=parameters,
        sample_data=sample,
        computation_time_ms=computation_time,
    )


# =============================================================================
# CONFIG RESOLUTION
# =============================================================================


def _normalize_spec(spec: Mapping[str, Any] | str | None) -> dict[str, Any]:
    if spec is None:
        raise InvalidConfigurationError(
            "Generation needs a spec naming the law, e.g. {'law': 'normal'}.", field="type"
        )
    if isinstance(spec, str):
        return {"type": spec}
    if not isinstance(spec, Mapping):
        raise InvalidConfigurationError(
            f"Generation spec must be a mapping or a law name, got {type(spec).__name__}."
        )
    config = dict(spec)
    for key in config:
        if key not in _CONFIG_KEYS and key not in _PARAMETER_KEYS:
            raise InvalidConfigurationError(f"Unknown generation key '{key}'.", field=str(key))
    return config


def _law_name(config: Mapping[str, Any]) -> str:
    name = config.get("type", config.get("law"))
    if not isinstance(name, str) or name.strip().lower() not in _LAW_ALIASES:
        valid = ", ".join(_LAW_ALIASES)
        raise InvalidConfigurationError(
            f"Unknown generation law {name!r}. Expected one of: {valid}.", field="type"
        )
    return _LAW_ALIASES[name.strip().lower()]


def _resolve_count(config: Mapping[str, Any], option_count: int | None) -> int:
    value = config.get("count")
    if value is None:
        return option_count if option_count is not None else DEFAULT_COUNT
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
        raise InvalidConfigurationError(
            f"Invalid generation count {value!r} (expected a non-negative integer).",
            field="count",
        )
    return int(value)


def _resolve_range(
    config: Mapping[str, Any], law_options: Any, data_type: str
) -> tuple[float, float, bool]:
    """Resolved (min, max) and whether either bound was set by the caller."""
    default_low, default_high = DEFAULT_RANGES.get(data_type, (math.nan, math.nan))
    option_bounds = (law_options.generate_range_min, law_options.generate_range_max)
    spec_bounds = (config.get(k) for k in ("range", "range_min", "range_max"))
    explicit = any(b is not None for b in (*option_bounds, *spec_bounds))
    low = law_options.generate_range_min if law_options.generate_range_min is not None else default_low
    high = law_options.generate_range_max if law_options.generate_range_max is not None else default_high

    if config.get("range") is not None:
        bounds = config["range"]
        if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
            raise InvalidConfigurationError(
                f"'range' must be a [min, max] pair, got {bounds!r}.", field="range"
            )
        low, high = (_real("range", v) for v in bounds)
    if config.get("range_min") is not None:
        low = _real("range_min", config["range_min"])
    if config.get("range_max") is not None:
        high = _real("range_max", config["range_max"])

    if low >= high:
        raise InvalidConfigurationError(
            f"Generation range min ({low}) must be below max ({high}).", field="range"
        )
    return low, high, explicit


def _real(field: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise InvalidConfigurationError(
            f"Invalid value for '{field}': {value!r} (expected a finite number).", field=field
        )
    return float(value)


def _positive_or_real(key: str, value: Any) -> float:
    number = _real(key, value)
    if key != "mean" and number <= 0 and not (key == "noise" and number == 0):
        raise InvalidConfigurationError(
            f"Invalid value for '{key}': {value!r} (must be positive).", field=key
        )
    return number


# =============================================================================
# PER-LAW GENERATORS
# =============================================================================


def _stratified(rng: np.random.Generator, count: int) -> np.ndarray:
    """One uniform draw from each of `count` equal-width strata of (0, 1), ascending."""
    positions = (np.arange(count) + rng.uniform(0.0, 1.0, size=count)) / count
    return np.maximum(positions, np.finfo(np.float64).tiny)


def _generate_benford(rng, count, low, high, explicit, params, law_options):
    if low <= 0:
        raise InvalidConfigurationError(
            f"Benford generation needs a positive range, got min {low}.", field="range"
        )
    base = int(params.get("base", law_options.benford_base))
    if base < 2:
        raise InvalidConfigurationError("'base' must be at least 2.", field="base")
    log_low, log_high = math.log(low, base), math.log(high, base)
    exponents = log_low + _stratified(rng, count) * (log_high - log_low)
    sample = rng.permutation(np.power(float(base), exponents))
    return sample, {"range": [low, high], "base": base}


def _generate_pareto(rng, count, low, high, explicit, params, law_options):
    if low <= 0:
        raise InvalidConfigurationError(
            f"Pareto generation needs a positive minimum, got {low}.", field="range"
        )
    survival = _stratified(rng, count)
    alpha = params.get("alpha")
    calibrated = alpha is None
    if calibrated:
        alpha = _calibrate_alpha(survival, low, high, law_options.pareto_ratio)
    log_sample = _pareto_log_quantiles(survival, alpha, low, high)
    sample = rng.permutation(np.clip(low * np.exp(log_sample), low, high))
    applied = [low, high] if math.isfinite(high) else [low, None]
    return sample, {"alpha": alpha, "x_min": low, "calibrated": calibrated, "range": applied}


def _pareto_log_quantiles(survival, alpha, low, high):
    """log(x / x_min) at the given survival probabilities, truncated at `high`."""
    if not math.isfinite(high):
        return -np.log(survival) / alpha
    tail = (low / high) ** alpha
    return -np.log(survival + (1.0 - survival) * tail) / alpha


def _calibrate_alpha(survival, low, high, ratio):
    """
    Tail index whose quantiles at `survival` put exactly `ratio` of the total
    in the top (1 - ratio) of items, counted the way analyze_pareto counts them.

    The infinite-population index puts much of its mass beyond the largest
    draw of a finite sample, so finite samples need a heavier tail to reach
    the same share. Falls back to DEFAULT_PARETO_ALPHA when no index in
    ALPHA_BRACKET reaches the ratio.
    """
    count = survival.size
    if count < 2:
        return DEFAULT_PARETO_ALPHA
    top_items = max(1, math.ceil(round(count * (1.0 - ratio), 9)))

    def excess_share(alpha):
        log_x = _pareto_log_quantiles(survival, alpha, low, high)
        weights = np.exp(log_x - log_x[0])
        return float(weights[:top_items].sum() / weights.sum()) - ratio

    lo, hi = ALPHA_BRACKET
    if excess_share(lo) < 0.0 or excess_share(hi) > 0.0:
        return DEFAULT_PARETO_ALPHA
    return float(brentq(excess_share, lo, hi, xtol=1e-10))


def _generate_zipf(rng, count, low, high, explicit, params, law_options):
    _warn_range_ignored("zipf", explicit)
    s, scale, noise = params["s"], params["scale"], params["noise"]
    ranks = np.arange(1, count + 1, dtype=np.float64)
    sample = scale / ranks**s * np.exp(rng.normal(0.0, noise, size=count))
    return sample, {"s": s, "scale": scale, "noise": noise, "range": None}


def _generate_normal(rng, count, low, high, explicit, params, law_options):
    mean = params.get("mean")
    std_dev = params.get("std_dev")
    if mean is None:
        mean = (low + high) / 2 if math.isfinite(low) else 0.0
    if std_dev is None:
        std_dev = (high - low) / 6 if math.isfinite(low) else 1.0
    positions = _stratified(rng, count)
    if explicit:
        a, b = (low - mean) / std_dev, (high - mean) / std_dev
        sample = stats.truncnorm.ppf(positions, a, b, loc=mean, scale=std_dev)
        # ppf rounding can land a hair outside the bounds
        sample = np.clip(sample, low, high)
        applied = [low, high]
    else:
        sample = stats.norm.ppf(positions, loc=mean, scale=std_dev)
        applied = None
    return rng.permutation(sample), {"mean": mean, "std_dev": std_dev, "range": applied}


def _generate_poisson(rng, count, low, high, explicit, params, law_options):
    _warn_range_ignored("poisson", explicit)
    lam = params["lambda"]
    sample = stats.poisson.ppf(_stratified(rng, count), lam)
    return rng.permutation(sample.astype(np.float64)), {"lambda": lam, "range": None}


def _warn_range_ignored(data_type: str, explicit: bool) -> None:
    if explicit:
        warnings.warn(
            f"Range bounds do not apply to {data_type} generation and were ignored.",
            ConfigurationWarning,
            stacklevel=4,
        )


_GENERATORS = {
    "benf": _generate_benford,
    "pareto": _generate_pareto,
    "zipf": _generate_zipf,
    "normal": _generate_normal,
    "poisson": _generate_poisson,
}
