"""Ordered risk levels and the tiering rules shared by all analyzers."""

from __future__ import annotations

from enum import Enum
from functools import total_ordering
from typing import Iterable


@total_ordering
class RiskLevel(Enum):
    """
    Ordered severity of a deviation from a statistical law.

    LOW < MEDIUM < HIGH < CRITICAL. Comparison operators follow severity,
    not the alphabetical order of the values.
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def severity(self) -> int:
        """Position in the severity order (0 = LOW)."""
        return _ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity < other.severity

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "RiskLevel":
        """Parse a case-insensitive level name ("low", "High", ...)."""
        try:
            return cls(text.strip().upper())
        except ValueError:
            valid = ", ".join(level.value.lower() for level in _ORDER)
            raise ValueError(f"Unknown risk level '{text}'. Expected one of: {valid}") from None


_ORDER = (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL)


def classify_deviation(
    deviation: float,
    thresholds: tuple[float, float, float],
    scale: float = 1.0,
) -> RiskLevel:
    """
    Map a non-negative deviation onto a risk level.

    Args:
        deviation: Distance from the law's ideal (larger is worse)
        thresholds: Upper bounds for LOW, MEDIUM and HIGH
        scale: Multiplier applied to every bound (analysis_threshold)

    Returns:
        RiskLevel for the deviation
    """
    low, medium, high = (t * scale for t in thresholds)
    if deviation <= low:
        return RiskLevel.LOW
    if deviation <= medium:
        return RiskLevel.MEDIUM
    if deviation <= high:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def classify_p_value(p_value: float, significance_level: float) -> RiskLevel:
    """
    Map a goodness-of-fit p-value onto a risk level.

    p >= alpha is LOW; each further tier requires a p-value one
    order of evidence smaller (alpha/5, alpha/50).
    """
    if p_value >= significance_level:
        return RiskLevel.LOW
    if p_value >= significance_level / 5:
        return RiskLevel.MEDIUM
    if p_value >= significance_level / 50:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def most_severe(levels: Iterable[RiskLevel]) -> RiskLevel:
    """Return the most severe level (LOW for an empty iterable)."""
    return max(levels, default=RiskLevel.LOW)
