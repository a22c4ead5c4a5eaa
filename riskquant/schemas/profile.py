"""Pydantic schema for the risk profile fed into the engine."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from riskquant.engine.scoring import (
    MAX_RISK_SCORE,
    MIN_RISK_SCORE,
    calculate_risk_score,
    clamp,
    clamp_non_negative,
    clamp_probability,
)


class RiskProfile(BaseModel):
    """
    A risk as loaded from the register.

    probability and impact are silently clamped; risk_score is derived from
    them when not supplied. Metadata fields are carried through untouched.

    The derived risk_score always uses the library IMPACT_CAP. Scores
    produced by ScenarioSimulator and ROICalculator use settings.impact_cap,
    so with a non-default cap compare engine output against engine output
    rather than against this field.
    """

    model_config = ConfigDict(frozen=True)

    risk_id: str = ""
    risk_name: str = ""
    probability: float                   # 0-1
    impact: float                        # monetary, >= 0
    risk_score: Optional[float] = Field(default=None, validate_default=True)  # 1-10
    threat_actor: Optional[str] = None
    vulnerability: Optional[str] = None
    affected_assets: list[str] = Field(default_factory=list)
    business_unit: Optional[str] = None

    @field_validator("probability")
    @classmethod
    def _clamp_probability(cls, v: float) -> float:
        return clamp_probability(v)

    @field_validator("impact")
    @classmethod
    def _clamp_impact(cls, v: float) -> float:
        return clamp_non_negative(v)

    @field_validator("risk_score")
    @classmethod
    def _derive_risk_score(cls, v: Optional[float], info: ValidationInfo) -> Optional[float]:
        if v is not None:
            return clamp(v, MIN_RISK_SCORE, MAX_RISK_SCORE)
        probability = info.data.get("probability")
        impact = info.data.get("impact")
        if probability is None or impact is None:
            return None
        return calculate_risk_score(probability, impact)

    @property
    def expected_loss(self) -> float:
        return self.probability * self.impact

    def with_overrides(self, **changes: Any) -> "RiskProfile":
        """
        New, re-validated profile with the given fields replaced.

        risk_score is re-derived unless it is part of the changes.
        """
        data = self.model_dump(exclude={"risk_score"})
        data.update(changes)
        return RiskProfile.model_validate(data)
