"""Pydantic input records for the simulation and ROI engine."""

from riskquant.schemas.investment import SecurityInvestment
from riskquant.schemas.profile import RiskProfile
from riskquant.schemas.scenario import (
    RiskParameter,
    SensitivityParameter,
    ThreatLevel,
    WhatIfChange,
)

__all__ = [
    "RiskProfile",
    "SecurityInvestment",
    "RiskParameter",
    "SensitivityParameter",
    "ThreatLevel",
    "WhatIfChange",
]
