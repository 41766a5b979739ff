from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from analytics.domain import Transaction
from analytics.periods import end_of_month, last_month_range, resolve_now


@dataclass(frozen=True)
class PeriodComparison:
    current: float
    previous: float
    change: float
    change_percent: float


@dataclass(frozen=True)
class CategoryInsight:
    category: str
    total: float
    percentage: float
    trend: str  # "up" | "down" | "stable"
    average_per_transaction: float
    transaction_count: int


def _sum_between(transactions: Iterable[Transaction], start: date, end: date) -> float:
    return sum(t.amount for t in transactions if start <= t.day <= end)


def _compare(current: float, previous: float) -> PeriodComparison:
    change = current - previous
    # no prior spend reads as "no change"
    change_percent = change / previous * 100 if previous > 0 else 0.0
    return PeriodComparison(current=current, previous=previous, change=change, change_percent=change_percent)


def month_over_month(transactions: Iterable[Transaction], now: Optional[datetime] = None) -> PeriodComparison:
    """Month-to-date spend against the whole previous month."""
    transactions = tuple(transactions)
    today = resolve_now(now).date()
    last_start, last_end = last_month_range(today)

    return _compare(
        _sum_between(transactions, today.replace(day=1), today),
        _sum_between(transactions, last_start, last_end),
    )


def year_over_year(transactions: Iterable[Transaction], now: Optional[datetime] = None) -> PeriodComparison:
    """Year-to-date spend against last year up to the end of the same month."""
    transactions = tuple(transactions)
    today = resolve_now(now).date()
    last_year_start = date(today.year - 1, 1, 1)
    last_year_end = end_of_month(date(today.year - 1, today.month, 1))

    return _compare(
        _sum_between(transactions, today.replace(month=1, day=1), today),
        _sum_between(transactions, last_year_start, last_year_end),
    )


def category_insights(transactions: Iterable[Transaction], now: Optional[datetime] = None) -> list[CategoryInsight]:
    today = resolve_now(now).date()
    month_start = today.replace(day=1)
    last_start, last_end = last_month_range(today)

    current: dict[str, float] = defaultdict(float)
    previous: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)
    categories: dict[str, None] = {}

    for t in transactions:
        day = t.day
        categories.setdefault(t.category)
        if month_start <= day <= today:
            current[t.category] += t.amount
            counts[t.category] += 1
        if last_start <= day <= last_end:
            previous[t.category] += t.amount

    total = sum(current.values())
    insights = []
    for category in categories:
        cur = current[category]
        prev = previous[category]
        if cur > prev * 1.1:
            trend = "up"
        elif cur < prev * 0.9:
            trend = "down"
        else:
            trend = "stable"
        count = counts[category]
        insights.append(
            CategoryInsight(
                category=category,
                total=cur,
                percentage=cur / total * 100 if total > 0 else 0.0,
                trend=trend,
                average_per_transaction=cur / count if count > 0 else 0.0,
                transaction_count=count,
            )
        )

    return sorted(insights, key=lambda i: i.total, reverse=True)
