"""Pytest fixtures for lawkit tests."""

import numpy as np
import pytest
from scipy import stats

from lawkit.algorithms.benford import benford_expected


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture
def perfect_benford_values() -> np.ndarray:
    """
    10,000 values whose leading digits match Benford's law to rounding.

    Digit d appears round(P(d) * 10000) times, spread over several decades
    (d, 10d, 100d, ...) so the values themselves look natural.
    """
    digits, probs = benford_expected("first")
    values = []
    for digit, p in zip(digits, probs):
        count = int(round(p * 10_000))
        values.extend(digit * 10.0 ** (i % 5) for i in range(count))
    return np.array(values)


@pytest.fixture
def uniform_digit_values() -> np.ndarray:
    """Values 100..999 with equally likely leading digits (fabricated-looking)."""
    return np.tile(np.arange(100, 1000, dtype=np.float64), 3)


@pytest.fixture
def pareto_example() -> list[int]:
    """Five magnitudes; the top 20% (one item) holds 2000 / 3600 of the total."""
    return [100, 200, 300, 1000, 2000]


@pytest.fixture
def zipf_frequencies() -> np.ndarray:
    """Exact Zipf frequencies 1000 / rank for ranks 1..100."""
    return 1000.0 / np.arange(1, 101)


@pytest.fixture
def normal_quantile_sample() -> np.ndarray:
    """
    500 values at the normal quantiles of (i + 0.5) / n, mean 1000, sd 50.

    Deterministic and as close to a normal sample as a finite set gets.
    """
    n = 500
    probs = (np.arange(n) + 0.5) / n
    return 1000.0 + 50.0 * stats.norm.ppf(probs)


@pytest.fixture
def poisson_profile_counts() -> np.ndarray:
    """Event counts whose histogram matches Poisson(4) frequencies for n = 1000."""
    lam, n = 4.0, 1000
    counts = []
    for k in range(20):
        counts.extend([k] * int(round(n * stats.poisson.pmf(k, lam))))
    return np.array(counts, dtype=np.float64)
