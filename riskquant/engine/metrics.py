"""
Aggregate Risk Metrics.

Summarises a batch of simulation results:
- mean / median / standard deviation / min / max per series
- Value-at-Risk: order statistic at floor(n × percentile) of sorted losses
- Expected Shortfall: mean of the sorted losses below that cutoff index

Both tail figures read the lower tail of the expected-loss distribution.
"""

import statistics
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import structlog

from riskquant.config import DEFAULT_VAR_PERCENTILE
from riskquant.engine.sampling import order_statistic, percentile_index
from riskquant.exceptions import InvalidInputError

if TYPE_CHECKING:
    from riskquant.engine.simulation import SimulationResult

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SeriesStatistics:
    """Descriptive statistics of one numeric series."""
    mean: float
    median: float
    std_dev: float               # Sample standard deviation
    min: float
    max: float
    count: int = 0


@dataclass(frozen=True)
class RiskMetrics:
    """
    Batch-level risk metrics derived from simulation results.

    value_at_risk and expected_shortfall are measured on expected loss.
    """
    expected_loss: SeriesStatistics
    probability: SeriesStatistics
    impact: SeriesStatistics
    risk_score: SeriesStatistics
    value_at_risk: float
    expected_shortfall: float
    percentile: float
    n_results: int


EMPTY_STATISTICS = SeriesStatistics(mean=0.0, median=0.0, std_dev=0.0, min=0.0, max=0.0)


def describe(values: Sequence[float]) -> SeriesStatistics:
    """Descriptive statistics; all zeros for an empty series."""
    if not values:
        return EMPTY_STATISTICS
    return SeriesStatistics(
        mean=statistics.fmean(values),
        median=statistics.median(values),
        std_dev=statistics.stdev(values) if len(values) > 1 else 0.0,
        min=min(values),
        max=max(values),
        count=len(values),
    )


def _check_percentile(percentile: float) -> None:
    if not 0 <= percentile <= 1:
        raise InvalidInputError(
            f"percentile must be within [0, 1], got {percentile}",
            field="percentile",
        )


def calculate_value_at_risk(
    values: Sequence[float],
    percentile: float = DEFAULT_VAR_PERCENTILE,
) -> float:
    """Order statistic at floor(n × percentile) of the ascending values (0 if none)."""
    _check_percentile(percentile)
    ordered = sorted(values)
    return order_statistic(ordered, percentile_index(len(ordered), percentile))


def calculate_expected_shortfall(
    values: Sequence[float],
    percentile: float = DEFAULT_VAR_PERCENTILE,
) -> float:
    """Mean of the ascending values before the VaR cutoff index (0 if that slice is empty)."""
    _check_percentile(percentile)
    ordered = sorted(values)
    tail = ordered[:percentile_index(len(ordered), percentile)]
    if not tail:
        return 0.0
    return statistics.fmean(tail)


def calculate_risk_metrics(
    results: Sequence["SimulationResult"],
    percentile: float = DEFAULT_VAR_PERCENTILE,
) -> RiskMetrics:
    """
    Compute aggregate statistics and tail risk for a result batch.

    Args:
        results: Simulation results (any producer)
        percentile: Tail fraction for VaR / Expected Shortfall

    Returns:
        RiskMetrics; an empty batch yields all-zero figures
    """
    losses = [r.expected_loss for r in results]

    metrics = RiskMetrics(
        expected_loss=describe(losses),
        probability=describe([r.probability for r in results]),
        impact=describe([r.impact for r in results]),
        risk_score=describe([r.risk_score for r in results]),
        value_at_risk=calculate_value_at_risk(losses, percentile),
        expected_shortfall=calculate_expected_shortfall(losses, percentile),
        percentile=percentile,
        n_results=len(results),
    )

    logger.debug(
        "risk_metrics_calculated",
        n_results=metrics.n_results,
        mean_expected_loss=round(metrics.expected_loss.mean, 2),
        value_at_risk=round(metrics.value_at_risk, 2),
    )

    return metrics
