"""
Investment Decision Schemas — typed results of the ROI engine.

Every figure is recomputed on demand from a RiskProfile and one or more
SecurityInvestments; nothing here is cached or persisted.
"""

import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from riskquant.schemas.investment import SecurityInvestment
from riskquant.schemas.profile import RiskProfile


class RecommendationCriterion(StrEnum):
    ROI = "roi"
    PAYBACK = "payback"
    RISK_REDUCTION = "risk_reduction"


class ROICalculation(BaseModel):
    """
    Financial evaluation of one investment against one risk.

    payback_period and breakeven_time are math.inf when the investment never
    pays for itself (annual net benefit <= 0).
    """
    model_config = ConfigDict(frozen=True)

    investment: SecurityInvestment
    risk_reduction: float        # Annual expected-loss reduction
    cost_avoidance: float        # Same as risk_reduction, annualised
    net_benefit: float           # Lifecycle benefit - lifecycle cost
    roi: float                   # Percent
    payback_period: float        # Years, may be inf
    breakeven_time: float        # Years, may be inf

    @property
    def annual_net_benefit(self) -> float:
        return self.cost_avoidance - self.investment.cost

    @property
    def pays_back(self) -> bool:
        """Whether the payback period is finite."""
        return math.isfinite(self.payback_period)


class RiskMitigationResult(BaseModel):
    """An investment, its ROI and the risk as it would look once in place."""
    model_config = ConfigDict(frozen=True)

    original_risk: RiskProfile
    mitigated_risk: RiskProfile
    investment: SecurityInvestment
    roi: ROICalculation


class CostBenefitEntry(BaseModel):
    """Lifecycle totals for one investment."""
    model_config = ConfigDict(frozen=True)

    investment: SecurityInvestment
    cost: float                  # cost × lifecycle
    benefit: float               # risk_reduction × lifecycle
    net: float                   # benefit - cost
    ratio: float                 # benefit / cost


class EffectivenessTarget(BaseModel):
    """Effectiveness needed to bring a risk down to a target score."""
    model_config = ConfigDict(frozen=True)

    target_risk_score: float
    current_risk_score: float
    required_effectiveness: float    # 0 when already at or below target, or unreachable
    required_investment_cost: float  # Placeholder linear estimate
    achievable: bool
