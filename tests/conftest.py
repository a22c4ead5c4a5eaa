"""
Test fixtures for the RiskQuant engine.

Provides:
- Explicit engine settings (independent of the environment)
- Seeded simulator and ROI calculator
- The reference risk profile and investment catalogue
"""

import pytest

from riskquant.config import EngineSettings
from riskquant.decisions.roi import ROICalculator
from riskquant.engine.simulation import ScenarioSimulator
from riskquant.schemas import RiskProfile, SecurityInvestment


@pytest.fixture
def engine_settings() -> EngineSettings:
    """Library defaults, pinned so RISKQUANT_* variables cannot leak in."""
    return EngineSettings(
        monte_carlo_iterations=10_000,
        probability_variance=0.10,
        impact_variance=0.15,
        random_seed=None,
        confidence_level=0.95,
        var_percentile=0.05,
        impact_cap=10_000_000,
        target_search_iterations=20,
        cost_per_effectiveness=0.1,
    )


@pytest.fixture
def simulator(engine_settings) -> ScenarioSimulator:
    return ScenarioSimulator(seed=1234, settings=engine_settings)


@pytest.fixture
def calculator(engine_settings) -> ROICalculator:
    return ROICalculator(settings=engine_settings)


@pytest.fixture
def profile() -> RiskProfile:
    """Ransomware risk used across the suite (score 1.85)."""
    return RiskProfile(
        risk_id="risk-001",
        risk_name="Ransomware on file servers",
        probability=0.35,
        impact=750_000,
        threat_actor="Criminal group",
        vulnerability="Unpatched SMB",
        affected_assets=["fs-01", "fs-02"],
        business_unit="Operations",
    )


@pytest.fixture
def edr() -> SecurityInvestment:
    return SecurityInvestment(
        id="inv-edr",
        name="Endpoint detection and response",
        cost=50_000,
        effectiveness=0.3,
        implementation_time=3,
        lifecycle=3,
    )


@pytest.fixture
def investments(edr) -> list[SecurityInvestment]:
    """Catalogue with one strong, one weak and one long-lived control."""
    return [
        edr,
        SecurityInvestment(
            id="inv-backup",
            name="Immutable backups",
            cost=20_000,
            effectiveness=0.2,
            implementation_time=2,
            lifecycle=5,
        ),
        SecurityInvestment(
            id="inv-training",
            name="Awareness training",
            cost=90_000,
            effectiveness=0.1,
            implementation_time=1,
            lifecycle=2,
        ),
    ]
