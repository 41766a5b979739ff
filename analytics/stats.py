import math
from typing import Sequence


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N); 0.0 for an empty sequence."""
    if not values:
        return 0.0
    avg = mean(values)
    return math.sqrt(mean([(v - avg) ** 2 for v in values]))


def z_score(value: float, values: Sequence[float]) -> float:
    std = standard_deviation(values)
    if std == 0:
        return 0.0
    return (value - mean(values)) / std
