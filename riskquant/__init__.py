"""
RiskQuant: quantitative risk simulation and security-investment ROI engine.

Architecture:
    riskquant/
    ├── schemas/         # Pydantic input records (risk profile, investment, scenarios)
    ├── engine/          # Scoring, sampling, Monte Carlo / what-if / sensitivity, metrics
    ├── decisions/       # ROI, combined ROI, cost/benefit, target effectiveness
    ├── config.py        # Engine defaults (pydantic-settings)
    ├── exceptions.py    # Error hierarchy with codes
    └── logging_config.py

Module Boundaries:
    - The engine never touches storage, network or files
    - Simulation and ROI modules do not depend on each other
    - Inputs are never mutated; derived profiles are new instances
    - Out-of-range numbers are clamped, not rejected

Data Flow:
    Risk register → RiskProfile → ScenarioSimulator / ROICalculator
    → result records → dashboards and reports

Version: 1.0.0
"""

from riskquant.decisions.roi import ROICalculator
from riskquant.engine.scoring import calculate_risk_score
from riskquant.engine.simulation import ScenarioSimulator, SimulationResult
from riskquant.schemas import RiskProfile, SecurityInvestment

__version__ = "1.0.0"

__all__ = [
    "ROICalculator",
    "RiskProfile",
    "ScenarioSimulator",
    "SecurityInvestment",
    "SimulationResult",
    "calculate_risk_score",
]
