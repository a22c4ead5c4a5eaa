"""
Sampling and order-statistic helpers shared by the simulation engine.

Randomness always comes from an injected ``random.Random`` so runs are
reproducible with a fixed seed; the module-level generator is never used.
"""

import math
import random
from typing import Optional, Sequence


def create_rng(seed: Optional[int] = None) -> random.Random:
    """Private generator, seeded when a seed is given."""
    return random.Random(seed)


def add_random_variance(
    base_value: float,
    variance_factor: float,
    rng: random.Random,
) -> float:
    """
    Perturb a value by a uniform relative variance.

    Returns base × (1 + U(-factor, factor)).
    """
    variance = rng.uniform(-variance_factor, variance_factor)
    return base_value * (1 + variance)


def percentile_index(count: int, fraction: float) -> int:
    """Zero-based index of the order statistic at floor(count × fraction)."""
    return math.floor(count * fraction)


def order_statistic(
    sorted_values: Sequence[float],
    index: int,
    default: float = 0.0,
) -> float:
    """Value at index of an ascending sequence, or default when out of range."""
    if 0 <= index < len(sorted_values):
        return sorted_values[index]
    return default
