"""
Scenario Simulator Tests.

Tests cover:
- Monte Carlo count, bounds, ordering and reproducibility
- Batch-wide confidence interval
- What-if and sensitivity sweeps
- Threat-level scenarios
"""

import random

import pytest
from hypothesis import given, settings as hyp_settings
from hypothesis import strategies as st
from pydantic import ValidationError

from riskquant.config import EngineSettings
from riskquant.engine.scoring import calculate_risk_score
from riskquant.engine.simulation import (
    NO_INTERVAL,
    ScenarioSimulator,
    SimulationResult,
    create_scenario_simulator,
)
from riskquant.exceptions import (
    InvalidInputError,
    UnknownParameterError,
    UnknownThreatLevelError,
)
from riskquant.schemas import RiskProfile, SensitivityParameter, ThreatLevel, WhatIfChange


def _loss_result(loss: float, name: str = "r") -> SimulationResult:
    return SimulationResult(
        scenario_name=name,
        probability=0.5,
        impact=loss * 2,
        expected_loss=loss,
        risk_score=1.0,
    )


# ============================================================================
# MONTE CARLO
# ============================================================================


class TestMonteCarlo:
    def test_returns_exact_iteration_count(self, simulator, profile):
        results = simulator.run_monte_carlo(profile, iterations=250)
        assert len(results) == 250

    def test_default_iterations(self, simulator, profile):
        assert len(simulator.run_monte_carlo(profile)) == 10_000

    def test_zero_iterations(self, simulator, profile):
        assert simulator.run_monte_carlo(profile, iterations=0) == []

    def test_negative_iterations_rejected(self, simulator, profile):
        with pytest.raises(InvalidInputError):
            simulator.run_monte_carlo(profile, iterations=-1)

    def test_results_in_simulation_order(self, simulator, profile):
        results = simulator.run_monte_carlo(profile, iterations=3)
        assert [r.scenario_name for r in results] == [
            "Simulation 1",
            "Simulation 2",
            "Simulation 3",
        ]

    def test_result_fields_consistent(self, simulator, profile):
        for r in simulator.run_monte_carlo(profile, iterations=100):
            assert r.expected_loss == pytest.approx(r.probability * r.impact)
            assert r.risk_score == pytest.approx(calculate_risk_score(r.probability, r.impact))
            assert r.confidence_interval == NO_INTERVAL
            assert r.sensitivity_analysis == {}

    def test_draws_stay_within_variance_band(self, simulator, profile):
        for r in simulator.run_monte_carlo(profile, iterations=500):
            assert 0.35 * 0.9 - 1e-9 <= r.probability <= 0.35 * 1.1 + 1e-9
            assert 750_000 * 0.85 - 1e-6 <= r.impact <= 750_000 * 1.15 + 1e-6

    def test_probability_clamped_to_one(self, engine_settings):
        """Upper-bound draws on a near-certain risk are capped at 1."""
        class UpperBound(random.Random):
            def uniform(self, a, b):
                return b

        sim = ScenarioSimulator(rng=UpperBound(), settings=engine_settings)
        risky = RiskProfile(probability=0.95, impact=1_000)
        results = sim.run_monte_carlo(risky, iterations=5)
        assert all(r.probability == 1.0 for r in results)
        assert all(r.impact == pytest.approx(1_150) for r in results)

    def test_zero_variance_reproduces_baseline(self, simulator, profile):
        results = simulator.run_monte_carlo(
            profile,
            iterations=10,
            variance_factors={"probability": 0.0, "impact": 0.0},
        )
        assert all(r.probability == profile.probability for r in results)
        assert all(r.impact == profile.impact for r in results)

    def test_partial_variance_override_keeps_other_default(self, simulator, profile):
        results = simulator.run_monte_carlo(
            profile, iterations=200, variance_factors={"probability": 0.0}
        )
        assert all(r.probability == profile.probability for r in results)
        assert len({r.impact for r in results}) > 1

    def test_same_seed_same_results(self, engine_settings, profile):
        a = ScenarioSimulator(seed=7, settings=engine_settings).run_monte_carlo(profile, 50)
        b = ScenarioSimulator(seed=7, settings=engine_settings).run_monte_carlo(profile, 50)
        assert a == b

    def test_different_seed_different_results(self, engine_settings, profile):
        a = ScenarioSimulator(seed=7, settings=engine_settings).run_monte_carlo(profile, 50)
        b = ScenarioSimulator(seed=8, settings=engine_settings).run_monte_carlo(profile, 50)
        assert a != b

    def test_profile_not_mutated(self, simulator, profile):
        before = profile.model_dump()
        simulator.run_monte_carlo(profile, iterations=20)
        assert profile.model_dump() == before

    def test_factory(self, engine_settings, profile):
        sim = create_scenario_simulator(seed=3, settings=engine_settings)
        assert isinstance(sim, ScenarioSimulator)
        assert len(sim.run_monte_carlo(profile, 5)) == 5


# ============================================================================
# CONFIDENCE INTERVALS
# ============================================================================


class TestConfidenceIntervals:
    def test_known_order_statistics(self, simulator):
        """n=20, level 0.5 → indices 5 and 15 of the sorted losses."""
        losses = [float(x) for x in range(20)]
        random.Random(0).shuffle(losses)
        results = [_loss_result(loss) for loss in losses]

        with_ci = simulator.calculate_confidence_intervals(results, confidence_level=0.5)

        assert all(r.confidence_interval == (5.0, 15.0) for r in with_ci)

    def test_preserves_input_order(self, simulator):
        results = [_loss_result(loss, name=str(loss)) for loss in (9.0, 1.0, 5.0)]
        with_ci = simulator.calculate_confidence_intervals(results)
        assert [r.scenario_name for r in with_ci] == ["9.0", "1.0", "5.0"]

    def test_inputs_untouched(self, simulator, profile):
        results = simulator.run_monte_carlo(profile, iterations=100)
        simulator.calculate_confidence_intervals(results)
        assert all(r.confidence_interval == NO_INTERVAL for r in results)

    def test_same_pair_across_batch(self, simulator, profile):
        results = simulator.calculate_confidence_intervals(
            simulator.run_monte_carlo(profile, iterations=1_000)
        )
        intervals = {r.confidence_interval for r in results}
        assert len(intervals) == 1
        low, high = intervals.pop()
        assert low <= high

    def test_empty_batch(self, simulator):
        assert simulator.calculate_confidence_intervals([]) == []
        assert simulator.confidence_interval([]) == (0.0, 0.0)

    @pytest.mark.parametrize("level", [0.0, 1.0, 1.5, -0.1])
    def test_invalid_level_rejected(self, simulator, level):
        with pytest.raises(InvalidInputError):
            simulator.confidence_interval([_loss_result(1.0)], confidence_level=level)

    @given(
        losses=st.lists(st.floats(min_value=0, max_value=1e9), min_size=1, max_size=200),
        level=st.floats(min_value=0.01, max_value=0.99),
    )
    @hyp_settings(max_examples=100)
    def test_low_never_above_high(self, losses, level):
        sim = ScenarioSimulator(seed=0, settings=EngineSettings())
        low, high = sim.confidence_interval([_loss_result(x) for x in losses], level)
        assert low <= high


# ============================================================================
# WHAT-IF
# ============================================================================


class TestWhatIf:
    def test_one_result_per_change_in_order(self, simulator, profile):
        changes = [
            WhatIfChange(parameter="probability", new_value=0.5, description="More phishing"),
            WhatIfChange(parameter="impact", new_value=2_000_000, description="Bigger fines"),
            {"parameter": "probability", "new_value": 0.1, "description": "Patched"},
        ]
        results = simulator.perform_what_if_analysis(profile, changes)
        assert [r.scenario_name for r in results] == ["More phishing", "Bigger fines", "Patched"]

    def test_changes_are_independent(self, simulator, profile):
        results = simulator.perform_what_if_analysis(profile, [
            WhatIfChange(parameter="probability", new_value=0.5, description="a"),
            WhatIfChange(parameter="impact", new_value=1_000_000, description="b"),
        ])
        assert results[0].impact == profile.impact
        assert results[1].probability == profile.probability
        assert results[1].expected_loss == pytest.approx(0.35 * 1_000_000)

    def test_override_is_not_clamped(self, simulator, profile):
        (result,) = simulator.perform_what_if_analysis(profile, [
            WhatIfChange(parameter="probability", new_value=1.5, description="over"),
        ])
        assert result.probability == 1.5
        assert result.expected_loss == pytest.approx(1_125_000)
        assert result.risk_score == pytest.approx(6.45)

    def test_original_profile_unchanged(self, simulator, profile):
        before = profile.model_dump()
        simulator.perform_what_if_analysis(profile, [
            WhatIfChange(parameter="impact", new_value=0, description="zero"),
        ])
        assert profile.model_dump() == before

    def test_unknown_parameter_rejected_at_construction(self, simulator, profile):
        with pytest.raises(ValidationError):
            simulator.perform_what_if_analysis(profile, [
                {"parameter": "likelihood", "new_value": 0.2, "description": "x"},
            ])

    def test_empty_changes(self, simulator, profile):
        assert simulator.perform_what_if_analysis(profile, []) == []


# ============================================================================
# SENSITIVITY
# ============================================================================


class TestSensitivity:
    def test_steps_plus_one_results(self, simulator, profile):
        results = simulator.perform_sensitivity_analysis(profile, [
            SensitivityParameter(name="probability", range=(0.0, 1.0), steps=4),
        ])
        assert len(results) == 5
        assert results[0].probability == 0.0
        assert results[-1].probability == 1.0

    def test_labels_and_mapping(self, simulator, profile):
        results = simulator.perform_sensitivity_analysis(profile, [
            SensitivityParameter(name="probability", range=(0.0, 1.0), steps=4),
        ])
        assert [r.scenario_name for r in results] == [
            "probability = 0.00",
            "probability = 0.25",
            "probability = 0.50",
            "probability = 0.75",
            "probability = 1.00",
        ]
        assert results[2].sensitivity_analysis == {"probability": 0.5}
        assert all(r.impact == profile.impact for r in results)

    def test_parameters_concatenated_not_crossed(self, simulator, profile):
        results = simulator.perform_sensitivity_analysis(profile, [
            {"name": "probability", "range": (0.1, 0.3), "steps": 2},
            {"name": "impact", "range": (100_000, 1_100_000), "steps": 10},
        ])
        assert len(results) == 3 + 11
        assert all("probability" in r.sensitivity_analysis for r in results[:3])
        assert all(r.probability == profile.probability for r in results[3:])
        assert results[-1].impact == 1_100_000
        assert results[-1].scenario_name == "impact = 1100000.00"

    def test_last_value_hits_upper_bound_exactly(self, simulator, profile):
        results = simulator.perform_sensitivity_analysis(profile, [
            SensitivityParameter(name="probability", range=(0.1, 0.7), steps=3),
        ])
        assert results[-1].sensitivity_analysis["probability"] == 0.7

    def test_descending_range(self, simulator, profile):
        results = simulator.perform_sensitivity_analysis(profile, [
            {"name": "probability", "range": (1.0, 0.0), "steps": 4},
        ])
        assert [r.probability for r in results] == [1.0, 0.75, 0.5, 0.25, 0.0]
        assert results[0].scenario_name == "probability = 1.00"
        assert results[-1].expected_loss == 0.0

    def test_unknown_parameter_raises(self, simulator, profile):
        with pytest.raises(UnknownParameterError) as exc_info:
            simulator.perform_sensitivity_analysis(profile, [
                SensitivityParameter(name="velocity", range=(0, 1), steps=2),
            ])
        assert exc_info.value.details["parameter"] == "velocity"

    @given(steps=st.integers(min_value=1, max_value=50))
    @hyp_settings(max_examples=30)
    def test_count_matches_steps(self, steps):
        sim = ScenarioSimulator(seed=0, settings=EngineSettings())
        base = RiskProfile(probability=0.2, impact=10_000)
        results = sim.perform_sensitivity_analysis(base, [
            SensitivityParameter(name="impact", range=(0, 50_000), steps=steps),
        ])
        assert len(results) == steps + 1
        assert results[0].impact == 0
        assert results[-1].impact == 50_000


# ============================================================================
# THREAT LEVEL
# ============================================================================


class TestThreatLevel:
    @pytest.mark.parametrize("level,prob,impact", [
        ("low", 0.35 * 0.8, 750_000 * 0.9),
        ("medium", 0.35, 750_000),
        ("high", 0.35 * 1.3, 750_000 * 1.2),
        ("critical", 0.35 * 1.6, 750_000 * 1.5),
    ])
    def test_multipliers(self, simulator, profile, level, prob, impact):
        result = simulator.create_threat_based_scenario(profile, level)
        assert result.probability == pytest.approx(prob)
        assert result.impact == pytest.approx(impact)
        assert result.expected_loss == pytest.approx(prob * impact)

    def test_label_and_mapping(self, simulator, profile):
        result = simulator.create_threat_based_scenario(profile, ThreatLevel.CRITICAL)
        assert result.scenario_name == "Threat Level: Critical"
        assert result.sensitivity_analysis == {"threat_level": "critical"}

    def test_probability_clamped(self, simulator):
        likely = RiskProfile(probability=0.8, impact=100_000)
        result = simulator.create_threat_based_scenario(likely, "critical")
        assert result.probability == 1.0

    def test_case_insensitive(self, simulator, profile):
        result = simulator.create_threat_based_scenario(profile, "High")
        assert result.scenario_name == "Threat Level: High"

    def test_scores_use_configured_impact_cap(self, engine_settings, profile):
        """Profile score stays on the library cap; engine output follows settings."""
        settings = engine_settings.model_copy(update={"impact_cap": 1_000_000})
        sim = ScenarioSimulator(seed=0, settings=settings)
        result = sim.create_threat_based_scenario(profile, "medium")
        assert result.risk_score == pytest.approx((0.35 * 0.4 + 0.75 * 0.6) * 10)
        assert profile.risk_score == pytest.approx(1.85)

    def test_unknown_level(self, simulator, profile):
        with pytest.raises(UnknownThreatLevelError):
            simulator.create_threat_based_scenario(profile, "apocalyptic")


# ============================================================================
# PROPERTY-BASED
# ============================================================================


class TestPropertyBased:
    @given(
        probability=st.floats(min_value=0, max_value=1),
        impact=st.floats(min_value=0, max_value=1e9),
        iterations=st.integers(min_value=0, max_value=50),
        seed=st.integers(min_value=0, max_value=10_000),
    )
    @hyp_settings(max_examples=50)
    def test_monte_carlo_bounds(self, probability, impact, iterations, seed):
        sim = ScenarioSimulator(seed=seed, settings=EngineSettings())
        results = sim.run_monte_carlo(RiskProfile(probability=probability, impact=impact), iterations)
        assert len(results) == iterations
        for r in results:
            assert 0 <= r.probability <= 1
            assert r.impact >= 0
            assert 1 <= r.risk_score <= 10
