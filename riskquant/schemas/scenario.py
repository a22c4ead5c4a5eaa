"""Scenario request schemas: what-if changes, sensitivity sweeps, threat levels."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class RiskParameter(StrEnum):
    PROBABILITY = "probability"
    IMPACT = "impact"


class ThreatLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class WhatIfChange(BaseModel):
    """Override of one risk parameter; new_value is not clamped."""

    model_config = ConfigDict(frozen=True)

    parameter: RiskParameter
    new_value: float
    description: str


class SensitivityParameter(BaseModel):
    """
    One parameter sweep: steps + 1 evenly spaced values from range[0] to range[1].

    A descending range sweeps downwards with a negative step.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    range: tuple[float, float]
    steps: int = Field(ge=1)

    @property
    def step_size(self) -> float:
        start, end = self.range
        return (end - start) / self.steps

    def values(self) -> list[float]:
        """Swept values; the last one is exactly range[1]."""
        start, end = self.range
        values = [start + i * self.step_size for i in range(self.steps)]
        values.append(end)
        return values
