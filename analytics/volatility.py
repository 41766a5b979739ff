from dataclasses import dataclass
from typing import Iterable

from analytics.domain import Transaction
from analytics.stats import mean, standard_deviation


@dataclass(frozen=True)
class VolatilityMetrics:
    standard_deviation: float
    coefficient_of_variation: float
    consistency_score: float  # 0-100, higher is more consistent
    volatility_level: str     # "low" | "medium" | "high"


def calculate_volatility(transactions: Iterable[Transaction]) -> VolatilityMetrics:
    amounts = [t.amount for t in transactions]
    if not amounts:
        return VolatilityMetrics(
            standard_deviation=0.0,
            coefficient_of_variation=0.0,
            consistency_score=0.0,
            volatility_level="low",
        )

    avg = mean(amounts)
    std = standard_deviation(amounts)
    cv = 0.0 if avg == 0 else std / avg

    # CV of 0 scores 100, CV of 1 or more scores 0
    consistency = max(0.0, min(100.0, 100 * (1 - min(cv, 1.0))))

    if cv < 0.3:
        level = "low"
    elif cv < 0.7:
        level = "medium"
    else:
        level = "high"

    return VolatilityMetrics(
        standard_deviation=std,
        coefficient_of_variation=cv,
        consistency_score=consistency,
        volatility_level=level,
    )
