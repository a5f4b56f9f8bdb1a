"""
Pathological fixtures for EVALs.

Each fixture creates data that targets a specific numerical or parsing
weakness of the analyzers.
"""

import numpy as np
import pytest


@pytest.fixture
def all_zeros():
    """Every magnitude is zero - no significant digits, zero total, zero variance."""
    return np.zeros(100)


@pytest.fixture
def constant_sevens():
    """Constant non-zero values - one leading digit, perfect equality."""
    return np.full(100, 7.0)


@pytest.fixture
def extreme_magnitudes():
    """Subnormal, near-overflow and ordinary values side by side."""
    return np.array([5e-324, 1e-310, 1.7e308, -1e-300, 42.0])


@pytest.fixture
def dirty_array():
    """Ordinary values interleaved with NaN and infinities."""
    values = np.linspace(1.0, 100.0, 40)
    values[::10] = np.nan
    values[5] = np.inf
    values[15] = -np.inf
    return values


@pytest.fixture
def japanese_sales():
    """Pareto example magnitudes written as kanji and full-width numerals."""
    return ["百", "二百", "三百", "一千", "２０００"]
