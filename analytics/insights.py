from collections import defaultdict
from typing import Sequence

from analytics.domain import Classification, Transaction

SMALL_EXPENSE_LIMIT = 100
SMALL_EXPENSE_COUNT = 10
FREQUENT_CATEGORY_COUNT = 20


def _total(transactions) -> float:
    return sum(t.amount for t in transactions)


def generate_insights(transactions: Sequence[Transaction], limit: int = 3) -> list[str]:
    """Rule-based observations about spending habits, at most ``limit`` of them."""
    insights: list[str] = []

    totals: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)
    for t in transactions:
        totals[t.category] += t.amount
        counts[t.category] += 1

    small = [t for t in transactions if 0 < t.amount < SMALL_EXPENSE_LIMIT]
    if len(small) > SMALL_EXPENSE_COUNT:
        small_total = _total(small)
        insights.append(
            f"You have {len(small)} small expenses totaling {small_total:,.0f}. "
            f"That's about {small_total * 12:,.0f} per year! Consider tracking these more carefully."
        )

    for category, total in totals.items():
        count = counts[category]
        if "food" in category.lower() and total / count < 50:
            insights.append(
                f"Your daily {category} spending of {total:,.0f} becomes "
                f"{total * 365:,.0f} per year. Small changes can save big!"
            )
        if count > FREQUENT_CATEGORY_COUNT:
            insights.append(
                f"You've logged {count} {category} expenses. "
                f"Consider setting a budget of {total * 1.1:,.0f} to stay on track."
            )

    waste = _total(t for t in transactions if t.classification is Classification.WASTE)
    if waste > 0:
        insights.append(
            f"You've identified {waste:,.0f} as wasteful spending. "
            f"Redirecting this could save {waste * 12:,.0f} yearly."
        )

    joy = _total(t for t in transactions if t.classification is Classification.JOY)
    if joy > 0:
        insights.append(
            f"You spent {joy:,.0f} on things that brought you joy. Balance is key to happy finances."
        )

    return insights[:limit]
