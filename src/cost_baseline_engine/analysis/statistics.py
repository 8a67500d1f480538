"""Statistics primitives shared by the baseline calculators.

Zero denominators resolve to 0 rather than raising, so callers never need to
guard ratios on degenerate input.
"""

import statistics
from typing import Literal, Sequence

DataQuality = Literal["High", "Medium", "Low"]


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    if not values:
        return 0.0
    return float(statistics.fmean(values))


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (divide by N), 0 for fewer than 2 values."""
    if len(values) < 2:
        return 0.0
    return float(statistics.pstdev(values))


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def percent_change(current: float, previous: float) -> float:
    """Percentage change from previous to current, 0 when previous is 0."""
    return safe_divide(current - previous, previous) * 100


def tail_mean(values: Sequence[float], count: int) -> float:
    """Mean of the last ``count`` values, or of all values if fewer exist."""
    return mean(values[-count:])


def data_quality(
    data_points: int,
    high_min_points: int = 30,
    medium_min_points: int = 14,
) -> DataQuality:
    """Coarse confidence label derived from the number of observations."""
    if data_points >= high_min_points:
        return "High"
    if data_points >= medium_min_points:
        return "Medium"
    return "Low"
