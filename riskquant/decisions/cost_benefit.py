"""
Cost/Benefit Analysis — lifecycle totals and criterion-based selection.

For each investment:
- benefit = annual risk reduction × lifecycle
- cost    = annual cost × lifecycle
- net     = benefit - cost
- ratio   = benefit / cost

Selection is a left-to-right reduction, so ties go to the earliest candidate.
"""

from typing import Optional, Sequence, Union

import structlog

from riskquant.decisions.schemas import (
    CostBenefitEntry,
    RecommendationCriterion,
    ROICalculation,
)
from riskquant.exceptions import UnknownCriterionError
from riskquant.schemas.investment import SecurityInvestment

logger = structlog.get_logger(__name__)


def build_cost_benefit_table(rois: Sequence[ROICalculation]) -> list[CostBenefitEntry]:
    """One entry per ROI calculation, in the same order."""
    table: list[CostBenefitEntry] = []
    for calc in rois:
        lifecycle = calc.investment.lifecycle
        benefit = calc.risk_reduction * lifecycle
        cost = calc.investment.cost * lifecycle
        table.append(CostBenefitEntry(
            investment=calc.investment,
            cost=cost,
            benefit=benefit,
            net=benefit - cost,
            ratio=benefit / cost,
        ))
    return table


def _is_better(
    current: ROICalculation,
    best: ROICalculation,
    criterion: RecommendationCriterion,
) -> bool:
    if criterion == RecommendationCriterion.ROI:
        return current.roi > best.roi
    if criterion == RecommendationCriterion.PAYBACK:
        return current.payback_period < best.payback_period
    return current.risk_reduction > best.risk_reduction


def parse_criterion(criterion: Union[RecommendationCriterion, str]) -> RecommendationCriterion:
    try:
        return RecommendationCriterion(str(criterion).lower())
    except ValueError:
        raise UnknownCriterionError(
            str(criterion), tuple(c.value for c in RecommendationCriterion)
        ) from None


def select_investment(
    rois: Sequence[ROICalculation],
    criterion: Union[RecommendationCriterion, str] = RecommendationCriterion.ROI,
) -> Optional[SecurityInvestment]:
    """
    Pick the investment that ranks best on one criterion.

    Args:
        rois: Evaluated candidates
        criterion: "roi" and "risk_reduction" maximise, "payback" minimises

    Returns:
        The winning investment, or None when there are no candidates
    """
    criterion = parse_criterion(criterion)

    if not rois:
        logger.info("investment_recommendation_empty", criterion=criterion.value)
        return None

    best = rois[0]
    for current in rois[1:]:
        if _is_better(current, best, criterion):
            best = current

    logger.debug(
        "investment_recommended",
        criterion=criterion.value,
        investment_id=best.investment.id,
        roi=round(best.roi, 2),
    )

    return best.investment
