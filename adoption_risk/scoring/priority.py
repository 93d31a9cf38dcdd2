# adoption_risk/scoring/priority.py
"""
Risk Priority Number (RPN) arithmetic and severity tiers.

RPN = likelihood * impact * detectability, each scored 1-5, so the
result always lies in 1..125. Tiers use inclusive lower bounds checked
from the highest tier down.
"""

import math
from enum import Enum

NEUTRAL_SCORE = 3
MIN_SCORE = 1
MAX_SCORE = 5
MAX_RPN = MAX_SCORE ** 3


class RiskLevel(Enum):
    """Severity tier derived from an RPN."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


# Highest tier first
RPN_THRESHOLDS: tuple[tuple[int, RiskLevel], ...] = (
    (75, RiskLevel.CRITICAL),
    (40, RiskLevel.HIGH),
    (15, RiskLevel.MODERATE),
)

LEVEL_RANK = {
    RiskLevel.LOW: 0,
    RiskLevel.MODERATE: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


def normalize_score(value: object) -> int | None:
    """
    Coerce a raw 1-5 score, returning None when it is unusable.

    Accepts ints, integral floats (4.0) and numeric strings. Booleans,
    fractions and anything outside 1..5 count as missing.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int):
        return None
    if MIN_SCORE <= value <= MAX_SCORE:
        return value
    return None


def effective_score(value: int | None) -> int:
    """Return the score to use in arithmetic, substituting the neutral default."""
    return NEUTRAL_SCORE if value is None else value


def compute_rpn(
    likelihood: int | None, impact: int | None, detectability: int | None
) -> int:
    """
    Compute the Risk Priority Number.

    Each score is normalized first; missing or out-of-range scores are
    replaced by the neutral score 3.

    Returns:
        Integer RPN in 1..125
    """
    return (
        effective_score(normalize_score(likelihood))
        * effective_score(normalize_score(impact))
        * effective_score(normalize_score(detectability))
    )


def classify_rpn(rpn: int | float) -> RiskLevel:
    """Map an RPN to its severity tier."""
    for lower_bound, level in RPN_THRESHOLDS:
        if rpn >= lower_bound:
            return level
    return RiskLevel.LOW


def highest_level(levels) -> RiskLevel:
    """Return the most severe level in an iterable (LOW when empty)."""
    return max(levels, key=LEVEL_RANK.__getitem__, default=RiskLevel.LOW)


def round_half_up(value: float) -> int:
    """Round halves upward (2.5 -> 3), unlike the builtin round()."""
    return math.floor(value + 0.5)
