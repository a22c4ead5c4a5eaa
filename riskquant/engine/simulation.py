"""
Scenario Simulation Engine.

Produces SimulationResult batches from a RiskProfile:

1. Monte Carlo: perturb probability and impact by uniform relative variance
2. Confidence interval: one batch-wide band on expected loss
3. What-if: independent single-parameter overrides
4. Sensitivity: evenly spaced sweeps, one parameter at a time
5. Threat level: fixed (probability, impact) multipliers

The confidence interval is population level: the same (low, high) pair is
attached to every result of a batch and says nothing about an individual row.

Usage:
    simulator = ScenarioSimulator(seed=42)
    results = simulator.run_monte_carlo(profile, iterations=5000)
    results = simulator.calculate_confidence_intervals(results)
    metrics = simulator.calculate_risk_metrics(results)
"""

import dataclasses
import random
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Union

import structlog

from riskquant.config import EngineSettings, get_settings
from riskquant.engine.metrics import RiskMetrics, calculate_risk_metrics
from riskquant.engine.sampling import (
    add_random_variance,
    create_rng,
    order_statistic,
    percentile_index,
)
from riskquant.engine.scoring import (
    calculate_risk_score,
    clamp_non_negative,
    clamp_probability,
)
from riskquant.exceptions import (
    InvalidInputError,
    UnknownParameterError,
    UnknownThreatLevelError,
)
from riskquant.schemas.profile import RiskProfile
from riskquant.schemas.scenario import (
    RiskParameter,
    SensitivityParameter,
    ThreatLevel,
    WhatIfChange,
)

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

# (probability multiplier, impact multiplier)
THREAT_MULTIPLIERS: dict[ThreatLevel, tuple[float, float]] = {
    ThreatLevel.LOW: (0.8, 0.9),
    ThreatLevel.MEDIUM: (1.0, 1.0),
    ThreatLevel.HIGH: (1.3, 1.2),
    ThreatLevel.CRITICAL: (1.6, 1.5),
}

NO_INTERVAL: tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True)
class SimulationResult:
    """One scenario outcome. Never mutated; intervals are attached by copying."""
    scenario_name: str
    probability: float
    impact: float
    expected_loss: float                 # probability × impact
    risk_score: float                    # 1-10
    confidence_interval: tuple[float, float] = NO_INTERVAL
    sensitivity_analysis: dict[str, Union[float, str]] = field(default_factory=dict)


class ScenarioSimulator:
    """
    Monte Carlo, what-if, sensitivity and threat scenarios for a risk.

    Holds only configuration and a private random generator; every method
    is otherwise a pure function of its arguments.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        settings: Optional[EngineSettings] = None,
    ):
        """
        Initialize simulator.

        Args:
            rng: Random generator to draw from (takes precedence over seed)
            seed: Seed for a new private generator
            settings: Engine defaults (cached environment settings if None)
        """
        self.settings = settings or get_settings()
        if rng is None:
            rng = create_rng(seed if seed is not None else self.settings.random_seed)
        self.rng = rng
        self.impact_cap = self.settings.impact_cap

    # ── Monte Carlo ───────────────────────────────────────────────────────

    def run_monte_carlo(
        self,
        profile: RiskProfile,
        iterations: Optional[int] = None,
        variance_factors: Optional[Mapping[str, float]] = None,
    ) -> list[SimulationResult]:
        """
        Sample perturbed outcomes of a risk.

        Each run draws p' = p × (1 + U(-f_p, f_p)) and i' = i × (1 + U(-f_i, f_i)),
        clamps p' to [0, 1] and i' to >= 0, then scores the clamped pair.

        Args:
            profile: Risk to simulate
            iterations: Number of runs (settings default if None)
            variance_factors: Overrides for "probability" / "impact" factors

        Returns:
            Exactly `iterations` results in simulation order
        """
        if iterations is None:
            iterations = self.settings.monte_carlo_iterations
        if iterations < 0:
            raise InvalidInputError(
                f"iterations must be >= 0, got {iterations}",
                field="iterations",
            )

        factors = dict(self.settings.variance_factors)
        if variance_factors:
            factors.update(variance_factors)
        f_prob = factors[RiskParameter.PROBABILITY.value]
        f_impact = factors[RiskParameter.IMPACT.value]

        logger.info(
            "monte_carlo_started",
            risk_id=profile.risk_id,
            iterations=iterations,
            probability_variance=f_prob,
            impact_variance=f_impact,
        )

        results: list[SimulationResult] = []
        for i in range(iterations):
            probability = clamp_probability(
                add_random_variance(profile.probability, f_prob, self.rng)
            )
            impact = clamp_non_negative(
                add_random_variance(profile.impact, f_impact, self.rng)
            )
            results.append(self._result(f"Simulation {i + 1}", probability, impact))

        logger.info("monte_carlo_complete", risk_id=profile.risk_id, results=len(results))

        return results

    def calculate_confidence_intervals(
        self,
        results: Sequence[SimulationResult],
        confidence_level: Optional[float] = None,
    ) -> list[SimulationResult]:
        """
        Attach the batch-wide expected-loss interval to every result.

        Input order is preserved; the input results are not modified.
        """
        interval = self.confidence_interval(results, confidence_level)
        return [dataclasses.replace(r, confidence_interval=interval) for r in results]

    def confidence_interval(
        self,
        results: Sequence[SimulationResult],
        confidence_level: Optional[float] = None,
    ) -> tuple[float, float]:
        """
        Population interval on expected loss.

        Reads the sorted losses at floor(alpha/2 × n) and
        floor((1 - alpha/2) × n); an index out of range reads as 0.
        """
        if confidence_level is None:
            confidence_level = self.settings.confidence_level
        if not 0 < confidence_level < 1:
            raise InvalidInputError(
                f"confidence_level must be within (0, 1), got {confidence_level}",
                field="confidence_level",
            )

        losses = sorted(r.expected_loss for r in results)
        n = len(losses)
        alpha = 1 - confidence_level

        low = order_statistic(losses, percentile_index(n, alpha / 2))
        high = order_statistic(losses, percentile_index(n, 1 - alpha / 2))
        return (low, high)

    # ── Deterministic scenarios ───────────────────────────────────────────

    def perform_what_if_analysis(
        self,
        profile: RiskProfile,
        changes: Sequence[Union[WhatIfChange, dict]],
    ) -> list[SimulationResult]:
        """
        Evaluate independent single-parameter overrides.

        Each change starts from the original profile; overrides are not
        clamped. One result per change, in input order.
        """
        results: list[SimulationResult] = []
        for change in changes:
            if not isinstance(change, WhatIfChange):
                change = WhatIfChange.model_validate(change)
            probability, impact = self._override(profile, change.parameter, change.new_value)
            results.append(self._result(change.description, probability, impact))

        logger.debug("what_if_complete", risk_id=profile.risk_id, scenarios=len(results))

        return results

    def perform_sensitivity_analysis(
        self,
        profile: RiskProfile,
        parameters: Sequence[Union[SensitivityParameter, dict]],
    ) -> list[SimulationResult]:
        """
        Sweep each parameter over its range, holding the other at baseline.

        Parameters are not crossed; output is grouped by parameter, then
        ordered by step. A name other than "probability" or "impact" raises
        UnknownParameterError rather than repeating the baseline.
        """
        results: list[SimulationResult] = []
        for param in parameters:
            if not isinstance(param, SensitivityParameter):
                param = SensitivityParameter.model_validate(param)
            for value in param.values():
                probability, impact = self._override(profile, param.name, value)
                results.append(self._result(
                    f"{param.name} = {value:.2f}",
                    probability,
                    impact,
                    sensitivity={param.name: value},
                ))

        logger.debug(
            "sensitivity_analysis_complete",
            risk_id=profile.risk_id,
            parameters=len(parameters),
            scenarios=len(results),
        )

        return results

    def create_threat_based_scenario(
        self,
        profile: RiskProfile,
        level: Union[ThreatLevel, str],
    ) -> SimulationResult:
        """Scale probability and impact by the threat-level multipliers."""
        try:
            level = ThreatLevel(str(level).lower())
        except ValueError:
            raise UnknownThreatLevelError(
                str(level), tuple(t.value for t in ThreatLevel)
            ) from None

        prob_mult, impact_mult = THREAT_MULTIPLIERS[level]
        scaled = profile.with_overrides(
            probability=profile.probability * prob_mult,
            impact=profile.impact * impact_mult,
        )

        return self._result(
            f"Threat Level: {level.value.capitalize()}",
            scaled.probability,
            scaled.impact,
            sensitivity={"threat_level": level.value},
        )

    # ── Statistics ────────────────────────────────────────────────────────

    def calculate_risk_metrics(
        self,
        results: Sequence[SimulationResult],
        percentile: Optional[float] = None,
    ) -> RiskMetrics:
        if percentile is None:
            percentile = self.settings.var_percentile
        return calculate_risk_metrics(results, percentile)

    # ── Internals ─────────────────────────────────────────────────────────

    def _override(
        self,
        profile: RiskProfile,
        parameter: str,
        value: float,
    ) -> tuple[float, float]:
        """(probability, impact) with one parameter replaced, unclamped."""
        if parameter == RiskParameter.PROBABILITY:
            return value, profile.impact
        if parameter == RiskParameter.IMPACT:
            return profile.probability, value
        raise UnknownParameterError(parameter, tuple(p.value for p in RiskParameter))

    def _result(
        self,
        name: str,
        probability: float,
        impact: float,
        sensitivity: Optional[dict[str, Union[float, str]]] = None,
    ) -> SimulationResult:
        return SimulationResult(
            scenario_name=name,
            probability=probability,
            impact=impact,
            expected_loss=probability * impact,
            risk_score=calculate_risk_score(probability, impact, self.impact_cap),
            sensitivity_analysis=sensitivity or {},
        )


# ============================================================================
# FACTORY
# ============================================================================


def create_scenario_simulator(
    seed: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
) -> ScenarioSimulator:
    """
    Factory function to create ScenarioSimulator.

    Args:
        seed: Seed for reproducible runs
        settings: Engine defaults

    Returns:
        Configured ScenarioSimulator
    """
    return ScenarioSimulator(seed=seed, settings=settings)
