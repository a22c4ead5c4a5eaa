"""
RiskQuant Engine Configuration.

Pydantic Settings v2 — library defaults for the simulation and ROI engine,
overridable from environment variables (``RISKQUANT_*``) or a ``.env`` file.

Every value here is only a default: each engine operation accepts a per-call
override.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)

# ── Library defaults (no magic numbers) ──────────────────────────────────

DEFAULT_ITERATIONS: int = 10_000
DEFAULT_PROBABILITY_VARIANCE: float = 0.10
DEFAULT_IMPACT_VARIANCE: float = 0.15
DEFAULT_CONFIDENCE_LEVEL: float = 0.95
DEFAULT_VAR_PERCENTILE: float = 0.05
IMPACT_CAP: float = 10_000_000.0
TARGET_SEARCH_ITERATIONS: int = 20
COST_PER_EFFECTIVENESS: float = 0.1


class EngineSettings(BaseSettings):
    """Engine defaults loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RISKQUANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Monte Carlo ─────────────────────────────────────────────────────
    monte_carlo_iterations: int = Field(default=DEFAULT_ITERATIONS, ge=0)
    probability_variance: float = Field(default=DEFAULT_PROBABILITY_VARIANCE, ge=0)
    impact_variance: float = Field(default=DEFAULT_IMPACT_VARIANCE, ge=0)
    random_seed: int | None = Field(
        default=None,
        description="Seed for the simulator's private generator (None = OS entropy)",
    )

    # ── Statistics ──────────────────────────────────────────────────────
    confidence_level: float = Field(default=DEFAULT_CONFIDENCE_LEVEL, gt=0, lt=1)
    var_percentile: float = Field(default=DEFAULT_VAR_PERCENTILE, gt=0, lt=1)

    # ── Scoring ─────────────────────────────────────────────────────────
    impact_cap: float = Field(
        default=IMPACT_CAP,
        gt=0,
        description="Monetary impact that maps to a fully weighted impact term",
    )

    # ── Investment targeting ────────────────────────────────────────────
    target_search_iterations: int = Field(default=TARGET_SEARCH_ITERATIONS, ge=1)
    cost_per_effectiveness: float = Field(
        default=COST_PER_EFFECTIVENESS,
        ge=0,
        description="Share of impact charged per unit of effectiveness in the cost proxy",
    )

    # ── Operational ─────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="console")

    @property
    def variance_factors(self) -> dict[str, float]:
        """Default per-field variance factors for Monte Carlo draws."""
        return {
            "probability": self.probability_variance,
            "impact": self.impact_variance,
        }


@lru_cache
def get_settings() -> EngineSettings:
    """
    Get cached settings instance.

    Uses lru_cache so the environment is only read once per process.
    """
    settings = EngineSettings()

    logger.debug(
        "engine_settings_loaded",
        iterations=settings.monte_carlo_iterations,
        confidence_level=settings.confidence_level,
        impact_cap=settings.impact_cap,
    )

    return settings
