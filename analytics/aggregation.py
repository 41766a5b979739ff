from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional

from analytics.budgets import BudgetStatus, check_budget_status
from analytics.domain import Budget, Transaction
from analytics.periods import Periods, days_between, resolve_now


@dataclass(frozen=True)
class ExpenseStats:
    total: float = 0.0
    today: float = 0.0
    this_week: float = 0.0
    this_month: float = 0.0
    last_month: float = 0.0
    year_to_date: float = 0.0
    average_daily: float = 0.0
    average_monthly: float = 0.0
    by_category: dict[str, float] = field(default_factory=dict)
    budget_status: dict[str, BudgetStatus] = field(default_factory=dict)


@dataclass(frozen=True)
class SpendingImpact:
    monthly: float
    yearly: float


def calculate_stats(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget] = (),
    now: Optional[datetime] = None,
    week_start: str = "SUN",
) -> ExpenseStats:
    """Period totals, per-category sums and averages for a transaction snapshot.

    All period checks use boundaries captured once from ``now``.
    """
    transactions = tuple(transactions)
    now = resolve_now(now)
    periods = Periods.capture(now, week_start)

    totals = defaultdict(float)
    by_category: dict[str, float] = defaultdict(float)

    for t in transactions:
        day = t.day
        amount = t.amount

        totals["total"] += amount
        if periods.is_today(day):
            totals["today"] += amount
        if periods.in_week(day):
            totals["this_week"] += amount
        if periods.in_month(day):
            totals["this_month"] += amount
        if periods.in_last_month(day):
            totals["last_month"] += amount
        if periods.in_year_to_date(day):
            totals["year_to_date"] += amount

        by_category[t.category] += amount

    average_daily = 0.0
    if transactions:
        oldest = min(t.day for t in transactions)
        days_since_first = max(1, days_between(oldest, periods.today))
        average_daily = totals["total"] / days_since_first

    return ExpenseStats(
        total=totals["total"],
        today=totals["today"],
        this_week=totals["this_week"],
        this_month=totals["this_month"],
        last_month=totals["last_month"],
        year_to_date=totals["year_to_date"],
        average_daily=average_daily,
        average_monthly=average_daily * 30,
        by_category=dict(by_category),
        budget_status=check_budget_status(transactions, budgets, now),
    )


def transactions_in_last_days(
    transactions: Iterable[Transaction], days: int = 7, now: Optional[datetime] = None
) -> tuple[Transaction, ...]:
    """Transactions dated within the last ``days`` calendar days, today included."""
    today = resolve_now(now).date()
    cutoff = today - timedelta(days=days)
    return tuple(t for t in transactions if t.day > cutoff)


def spending_impact(daily_amount: float) -> SpendingImpact:
    return SpendingImpact(monthly=daily_amount * 30, yearly=daily_amount * 365)
