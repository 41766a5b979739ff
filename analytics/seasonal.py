from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable

from analytics.domain import Transaction
from analytics.periods import day_of_week


@dataclass(frozen=True)
class SeasonalPattern:
    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    average_spending: float
    frequency: int


def detect_seasonal_patterns(transactions: Iterable[Transaction]) -> list[SeasonalPattern]:
    """Average spend per weekday, highest first. Empty weekdays are left out."""
    totals: dict[int, float] = defaultdict(float)
    counts: dict[int, int] = defaultdict(int)

    for t in transactions:
        dow = day_of_week(t.day)
        totals[dow] += t.amount
        counts[dow] += 1

    patterns = [
        SeasonalPattern(day_of_week=dow, average_spending=totals[dow] / counts[dow], frequency=counts[dow])
        for dow in totals
    ]
    return sorted(patterns, key=lambda p: p.average_spending, reverse=True)
