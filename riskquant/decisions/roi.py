"""
Security Investment ROI — financial return of controls against a risk.

For one investment with effectiveness e, annual cost c and lifecycle L:

    risk_reduction = p × i - p × (1 - e) × i          (annual)
    net_benefit    = risk_reduction × L - c × L
    roi            = net_benefit / (c × L) × 100
    annual_net     = risk_reduction - c
    payback_period = c × L / (annual_net × L)          (inf if annual_net <= 0)
    breakeven_time = c / annual_net                    (inf if annual_net <= 0)

Several investments combine as independent layers:
    cumulative = cumulative + e × (1 - cumulative)
so two 50% controls give 75%, not 100%.
"""

import math
from typing import Optional, Sequence, Union

import structlog

from riskquant.config import EngineSettings, get_settings
from riskquant.decisions.cost_benefit import build_cost_benefit_table, select_investment
from riskquant.decisions.schemas import (
    CostBenefitEntry,
    EffectivenessTarget,
    RecommendationCriterion,
    RiskMitigationResult,
    ROICalculation,
)
from riskquant.decisions.targeting import find_required_effectiveness
from riskquant.engine.scoring import calculate_risk_score
from riskquant.exceptions import InvalidInputError
from riskquant.schemas.investment import SecurityInvestment
from riskquant.schemas.profile import RiskProfile

logger = structlog.get_logger(__name__)

COMBINED_INVESTMENT_ID = "combined"
COMBINED_INVESTMENT_NAME = "Combined Investments"


def cumulative_effectiveness(investments: Sequence[SecurityInvestment]) -> float:
    """Compound effectiveness of independent layers, applied in input order."""
    cumulative = 0.0
    for investment in investments:
        cumulative = cumulative + investment.effectiveness * (1 - cumulative)
    return cumulative


def combine_investments(investments: Sequence[SecurityInvestment]) -> SecurityInvestment:
    """
    Synthetic investment standing for a bundle.

    Costs add up, effectiveness compounds, implementation takes as long as
    the slowest item and the lifecycle is the shortest one.
    """
    if not investments:
        raise InvalidInputError(
            "at least one investment is required to combine",
            field="investments",
        )
    return SecurityInvestment(
        id=COMBINED_INVESTMENT_ID,
        name=COMBINED_INVESTMENT_NAME,
        cost=sum(inv.cost for inv in investments),
        effectiveness=cumulative_effectiveness(investments),
        implementation_time=max(inv.implementation_time for inv in investments),
        lifecycle=min(inv.lifecycle for inv in investments),
    )


class ROICalculator:
    """
    Evaluate security investments against a risk profile.

    Stateless apart from settings; results are recomputed on every call.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()
        self.impact_cap = self.settings.impact_cap

    def calculate_roi(
        self,
        profile: RiskProfile,
        investment: SecurityInvestment,
    ) -> ROICalculation:
        """ROI of a single investment against the profile."""
        original_loss = profile.probability * profile.impact
        mitigated_probability = profile.probability * (1 - investment.effectiveness)
        new_loss = mitigated_probability * profile.impact

        risk_reduction = original_loss - new_loss
        total_cost = investment.total_cost
        net_benefit = risk_reduction * investment.lifecycle - total_cost
        roi = net_benefit / total_cost * 100

        annual_net_benefit = risk_reduction - investment.cost
        if annual_net_benefit > 0:
            payback_period = total_cost / (annual_net_benefit * investment.lifecycle)
            breakeven_time = investment.cost / annual_net_benefit
        else:
            payback_period = math.inf
            breakeven_time = math.inf

        return ROICalculation(
            investment=investment,
            risk_reduction=risk_reduction,
            cost_avoidance=risk_reduction,
            net_benefit=net_benefit,
            roi=roi,
            payback_period=payback_period,
            breakeven_time=breakeven_time,
        )

    def calculate_rois(
        self,
        profile: RiskProfile,
        investments: Sequence[SecurityInvestment],
    ) -> list[ROICalculation]:
        """ROI of each investment, in input order."""
        return [self.calculate_roi(profile, inv) for inv in investments]

    def find_optimal_investment(
        self,
        profile: RiskProfile,
        investments: Sequence[SecurityInvestment],
    ) -> Optional[ROICalculation]:
        """
        Highest-ROI investment among those with a positive ROI.

        Returns None when no investment has roi > 0; ties go to the first.
        """
        positive = [c for c in self.calculate_rois(profile, investments) if c.roi > 0]

        if not positive:
            logger.warning(
                "no_positive_roi_investment",
                risk_id=profile.risk_id,
                candidates=len(investments),
            )
            return None

        best = positive[0]
        for current in positive[1:]:
            if current.roi > best.roi:
                best = current

        logger.info(
            "optimal_investment_found",
            risk_id=profile.risk_id,
            investment_id=best.investment.id,
            roi=round(best.roi, 2),
        )

        return best

    def calculate_combined_roi(
        self,
        profile: RiskProfile,
        investments: Sequence[SecurityInvestment],
    ) -> ROICalculation:
        """ROI of deploying every investment together."""
        combined = combine_investments(investments)

        logger.debug(
            "combined_investment_built",
            risk_id=profile.risk_id,
            investments=len(investments),
            cumulative_effectiveness=round(combined.effectiveness, 4),
            total_annual_cost=combined.cost,
        )

        return self.calculate_roi(profile, combined)

    def generate_mitigation_plan(
        self,
        profile: RiskProfile,
        investments: Sequence[SecurityInvestment],
    ) -> list[RiskMitigationResult]:
        """Per investment: its ROI and the mitigated copy of the profile."""
        plan: list[RiskMitigationResult] = []
        for investment in investments:
            probability = profile.probability * (1 - investment.effectiveness)
            mitigated = profile.with_overrides(
                probability=probability,
                risk_score=calculate_risk_score(probability, profile.impact, self.impact_cap),
            )
            plan.append(RiskMitigationResult(
                original_risk=profile,
                mitigated_risk=mitigated,
                investment=investment,
                roi=self.calculate_roi(profile, investment),
            ))
        return plan

    def perform_cost_benefit_analysis(
        self,
        profile: RiskProfile,
        investments: Sequence[SecurityInvestment],
    ) -> list[CostBenefitEntry]:
        """Lifecycle cost, benefit, net and ratio per investment."""
        return build_cost_benefit_table(self.calculate_rois(profile, investments))

    def recommend_investment(
        self,
        profile: RiskProfile,
        investments: Sequence[SecurityInvestment],
        criterion: Union[RecommendationCriterion, str] = RecommendationCriterion.ROI,
    ) -> Optional[SecurityInvestment]:
        """Best investment on the given criterion, or None for no candidates."""
        return select_investment(self.calculate_rois(profile, investments), criterion)

    def calculate_required_effectiveness(
        self,
        profile: RiskProfile,
        target_risk_score: float,
        iterations: Optional[int] = None,
    ) -> EffectivenessTarget:
        """Effectiveness (and placeholder cost) needed to reach a target score."""
        if iterations is None:
            iterations = self.settings.target_search_iterations
        return find_required_effectiveness(
            profile,
            target_risk_score,
            iterations=iterations,
            impact_cap=self.impact_cap,
            cost_per_effectiveness=self.settings.cost_per_effectiveness,
        )


# ============================================================================
# FACTORY
# ============================================================================


def create_roi_calculator(settings: Optional[EngineSettings] = None) -> ROICalculator:
    """
    Factory function to create ROICalculator.

    Args:
        settings: Engine defaults (cached environment settings if None)

    Returns:
        Configured ROICalculator
    """
    return ROICalculator(settings=settings)
