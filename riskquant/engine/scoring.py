"""
Normalised Risk Scoring.

Maps a (probability, monetary impact) pair onto a 1-10 scale:

    n     = min(impact / IMPACT_CAP, 1)
    score = clamp((probability × 0.4 + n × 0.6) × 10, 1, 10)

This is a different model from the integer 1-25 probability × impact
register score; the two must not be mixed.
"""

from riskquant.config import IMPACT_CAP

# ── Configuration ─────────────────────────────────────────────────────────

PROBABILITY_WEIGHT: float = 0.4
IMPACT_WEIGHT: float = 0.6
SCORE_SCALE: float = 10.0
MIN_RISK_SCORE: float = 1.0
MAX_RISK_SCORE: float = 10.0


def clamp(value: float, low: float, high: float) -> float:
    """Bound value to [low, high]."""
    return max(low, min(high, value))


def clamp_probability(value: float) -> float:
    return clamp(value, 0.0, 1.0)


def clamp_non_negative(value: float) -> float:
    return max(0.0, value)


def normalize_impact(impact: float, impact_cap: float = IMPACT_CAP) -> float:
    """Impact as a fraction of the cap, saturating at 1."""
    return min(impact / impact_cap, 1.0)


def calculate_risk_score(
    probability: float,
    impact: float,
    impact_cap: float = IMPACT_CAP,
) -> float:
    """
    Composite risk score on the 1-10 scale.

    Args:
        probability: Event probability, normally in [0, 1]
        impact: Monetary impact if the event occurs
        impact_cap: Impact that saturates the impact term

    Returns:
        Score clamped to [MIN_RISK_SCORE, MAX_RISK_SCORE]
    """
    normalized = normalize_impact(impact, impact_cap)
    raw = (probability * PROBABILITY_WEIGHT + normalized * IMPACT_WEIGHT) * SCORE_SCALE
    return clamp(raw, MIN_RISK_SCORE, MAX_RISK_SCORE)


def expected_loss(probability: float, impact: float) -> float:
    return probability * impact
