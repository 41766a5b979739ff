"""pandas views of analytics records, for charting in the dashboard."""

from typing import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from analytics.anomalies import AnomalyAlert
from analytics.budgets import BudgetStatus
from analytics.domain import Transaction
from analytics.seasonal import SeasonalPattern

DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {
            "id": t.id,
            "date": pd.to_datetime(t.date),
            "amount": t.amount,
            "category": t.category,
            "description": t.description,
            "classification": t.classification.value if t.classification else None,
        }
        for t in transactions
    ]
    columns = ["id", "date", "amount", "category", "description", "classification"]
    return pd.DataFrame(rows, columns=columns).sort_values("date", ignore_index=True)


def monthly_series(totals: Mapping[str, float]) -> pd.Series:
    """Monthly totals on a continuous month index, zero-filling empty months."""
    if not totals:
        return pd.Series(dtype=float)
    months = pd.period_range(min(totals), max(totals), freq="M")
    series = pd.Series(np.zeros(len(months)), index=months.strftime("%Y-%m"))
    for month, amount in totals.items():
        series[month] = amount
    return series


def category_frame(by_category: Mapping[str, float]) -> pd.DataFrame:
    df = pd.DataFrame(list(by_category.items()), columns=["Category", "Amount"])
    return df.sort_values("Amount", ascending=False, ignore_index=True)


def budget_frame(status: Mapping[str, BudgetStatus]) -> pd.DataFrame:
    rows = [
        {
            "Category": category,
            "Spent": s.spent,
            "Limit": s.limit,
            "Percentage": round(s.percentage, 1),
            "Remaining": s.remaining,
            "Over": s.is_over_budget,
        }
        for category, s in status.items()
    ]
    return pd.DataFrame(rows, columns=["Category", "Spent", "Limit", "Percentage", "Remaining", "Over"])


def seasonal_frame(patterns: Sequence[SeasonalPattern]) -> pd.DataFrame:
    rows = [
        {"Day": DAY_NAMES[p.day_of_week], "Average": p.average_spending, "Count": p.frequency}
        for p in patterns
    ]
    return pd.DataFrame(rows, columns=["Day", "Average", "Count"])


def anomaly_frame(alerts: Sequence[AnomalyAlert]) -> pd.DataFrame:
    rows = [
        {
            "Date": a.transaction.date,
            "Category": a.transaction.category,
            "Amount": a.transaction.amount,
            "Z": round(a.z_score, 2),
            "Severity": a.severity,
            "Reason": a.reason,
        }
        for a in alerts
    ]
    return pd.DataFrame(rows, columns=["Date", "Category", "Amount", "Z", "Severity", "Reason"])
