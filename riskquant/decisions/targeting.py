"""
Target Effectiveness Search.

Finds how effective a control must be to bring a risk's score down to a
target, by bisecting effectiveness over [0, 1] for a fixed number of steps.

The cost attached to the answer comes from estimate_investment_cost, a
linear placeholder (impact × effectiveness × 0.1) kept in one function so a
calibrated cost curve can replace it.
"""

import structlog

from riskquant.config import COST_PER_EFFECTIVENESS, IMPACT_CAP, TARGET_SEARCH_ITERATIONS
from riskquant.decisions.schemas import EffectivenessTarget
from riskquant.engine.scoring import calculate_risk_score
from riskquant.schemas.profile import RiskProfile

logger = structlog.get_logger(__name__)


def estimate_investment_cost(
    impact: float,
    effectiveness: float,
    cost_per_effectiveness: float = COST_PER_EFFECTIVENESS,
) -> float:
    """Placeholder cost model: a fixed share of impact per unit of effectiveness."""
    return impact * effectiveness * cost_per_effectiveness


def mitigated_risk_score(
    profile: RiskProfile,
    effectiveness: float,
    impact_cap: float = IMPACT_CAP,
) -> float:
    """Score of the profile once its probability is cut by effectiveness."""
    return calculate_risk_score(
        profile.probability * (1 - effectiveness),
        profile.impact,
        impact_cap,
    )


def find_required_effectiveness(
    profile: RiskProfile,
    target_risk_score: float,
    iterations: int = TARGET_SEARCH_ITERATIONS,
    impact_cap: float = IMPACT_CAP,
    cost_per_effectiveness: float = COST_PER_EFFECTIVENESS,
) -> EffectivenessTarget:
    """
    Bisect effectiveness until the mitigated score meets the target.

    A midpoint whose mitigated score is <= target is feasible: it is
    recorded and becomes the new upper bound; otherwise it becomes the new
    lower bound. The last feasible midpoint is returned, or 0 if none was.

    Args:
        profile: Risk to mitigate
        target_risk_score: Desired score on the 1-10 scale
        iterations: Bisection steps
        impact_cap: Impact normalisation cap for scoring
        cost_per_effectiveness: Share of impact used by the cost estimate

    Returns:
        EffectivenessTarget with the effectiveness and estimated cost
    """
    current = calculate_risk_score(profile.probability, profile.impact, impact_cap)

    if current <= target_risk_score:
        return EffectivenessTarget(
            target_risk_score=target_risk_score,
            current_risk_score=current,
            required_effectiveness=0.0,
            required_investment_cost=0.0,
            achievable=True,
        )

    low, high = 0.0, 1.0
    required = 0.0
    feasible_found = False

    for _ in range(iterations):
        mid = (low + high) / 2
        if mitigated_risk_score(profile, mid, impact_cap) <= target_risk_score:
            required = mid
            feasible_found = True
            high = mid
        else:
            low = mid

    if not feasible_found:
        logger.warning(
            "target_risk_score_unreachable",
            risk_id=profile.risk_id,
            current_risk_score=round(current, 4),
            target_risk_score=target_risk_score,
        )

    return EffectivenessTarget(
        target_risk_score=target_risk_score,
        current_risk_score=current,
        required_effectiveness=required,
        required_investment_cost=estimate_investment_cost(
            profile.impact, required, cost_per_effectiveness
        ),
        achievable=feasible_found,
    )
