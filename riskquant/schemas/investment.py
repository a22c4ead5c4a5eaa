"""Pydantic schema for candidate security investments."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from riskquant.engine.scoring import clamp_probability


class SecurityInvestment(BaseModel):
    """
    A candidate control evaluated against a risk profile.

    cost and lifecycle must be positive so the lifecycle cost used as the ROI
    denominator is never zero; effectiveness is clamped to [0, 1].
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    cost: float = Field(gt=0, description="Annual cost of the investment")
    effectiveness: float = Field(description="Fractional reduction in risk probability")
    implementation_time: float = Field(default=0.0, ge=0, description="Months")
    lifecycle: float = Field(gt=0, description="Years over which cost and benefit accrue")

    @field_validator("effectiveness")
    @classmethod
    def _clamp_effectiveness(cls, v: float) -> float:
        return clamp_probability(v)

    @property
    def total_cost(self) -> float:
        """Cost over the whole lifecycle."""
        return self.cost * self.lifecycle
