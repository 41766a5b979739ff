from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence

from analytics.domain import Budget, Transaction, category_key
from analytics.periods import month_range, resolve_now


@dataclass(frozen=True)
class BudgetStatus:
    spent: float
    limit: float
    percentage: float
    is_over_budget: bool
    remaining: float


def budget_status(budget: Budget, transactions: Iterable[Transaction], now: Optional[datetime] = None) -> BudgetStatus:
    """Spend-vs-limit for one budget over the current calendar month."""
    start, end = month_range(resolve_now(now).date())
    key = category_key(budget.category)

    spent = sum(
        t.amount for t in transactions
        if category_key(t.category) == key and start <= t.day <= end
    )
    limit = budget.monthly_limit
    percentage = spent / limit * 100 if limit > 0 else 0.0

    return BudgetStatus(
        spent=spent,
        limit=limit,
        percentage=percentage,
        is_over_budget=spent > limit,
        remaining=max(0.0, limit - spent),
    )


def check_budget_status(
    transactions: Sequence[Transaction],
    budgets: Iterable[Budget],
    now: Optional[datetime] = None,
) -> dict[str, BudgetStatus]:
    """Status for every active budget, keyed by the budget's category label.

    Active budgets with no matching spend still get a zero-valued entry.
    """
    now = resolve_now(now)
    return {
        b.category: budget_status(b, transactions, now)
        for b in budgets
        if b.is_active
    }


def should_show_budget_alert(
    category: str,
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
) -> bool:
    budget = next((b for b in budgets if b.category == category and b.is_active), None)
    if budget is None:
        return False
    return budget_status(budget, transactions, now).percentage >= budget.alert_threshold
