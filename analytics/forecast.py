"""Forward-looking spending estimates.

Two models are offered. ``exponential_smoothing`` forecasts next month's total
from monthly aggregates with a level + trend recurrence. ``linear_regression``
fits an ordinary least-squares line through every transaction, with x measured
in days since the earliest one. Both fall back to low-confidence results
instead of raising when there is too little data.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from analytics.domain import Transaction
from analytics.periods import resolve_now, shift_months
from analytics.stats import mean, standard_deviation

logger = logging.getLogger(__name__)

TREND_EPSILON = 0.05
SLOPE_THRESHOLD = 5.0  # currency per day


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float


@dataclass(frozen=True)
class PredictionResult:
    value: float
    confidence_interval: ConfidenceInterval
    method: str
    accuracy: float
    trend: str  # "increasing" | "decreasing" | "stable"


@dataclass(frozen=True)
class TrendAnalysis:
    slope: float
    intercept: float
    r_squared: float
    direction: str  # "increasing" | "decreasing" | "stable"
    strength: str   # "weak" | "moderate" | "strong"


@dataclass(frozen=True)
class MovingAverageSignal:
    short_ma: float
    long_ma: float
    signal: str  # "bullish" | "bearish" | "neutral"


def monthly_totals(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Return ``{'YYYY-MM': total}`` in chronological order."""
    out: dict[str, float] = defaultdict(float)
    for t in transactions:
        out[t.date[:7]] += t.amount
    return {month: out[month] for month in sorted(out)}


def _trend_label(trend: float) -> str:
    if trend > TREND_EPSILON:
        return "increasing"
    if trend < -TREND_EPSILON:
        return "decreasing"
    return "stable"


def exponential_smoothing(
    transactions: Iterable[Transaction],
    alpha: float = 0.3,
    beta: float = 0.1,
) -> PredictionResult:
    """Forecast next month's total with level + trend (Holt) smoothing."""
    monthly = list(monthly_totals(transactions).values())

    if not monthly:
        return PredictionResult(
            value=0.0,
            confidence_interval=ConfidenceInterval(0.0, 0.0),
            method="exponential-smoothing",
            accuracy=0.0,
            trend="stable",
        )

    if len(monthly) < 2:
        logger.debug("Only %d month of data, returning the average", len(monthly))
        avg = mean(monthly)
        return PredictionResult(
            value=avg,
            confidence_interval=ConfidenceInterval(avg * 0.8, avg * 1.2),
            method="exponential-smoothing",
            accuracy=0.5,
            trend="stable",
        )

    level = monthly[0]
    trend = monthly[1] - monthly[0]
    predictions: list[float] = []

    for actual in monthly[1:]:
        # one-step-ahead prediction, made before seeing ``actual``
        predictions.append(level + trend)
        prev_level = level
        level = alpha * actual + (1 - alpha) * (prev_level + trend)
        trend = beta * (level - prev_level) + (1 - beta) * trend

    forecast = level + trend
    actuals = monthly[1:]

    pct_errors = [
        abs((actual - predicted) / actual)
        for actual, predicted in zip(actuals, predictions)
        if actual != 0
    ]
    if pct_errors:
        accuracy = max(0.0, 1 - mean(pct_errors))
    else:
        logger.debug("No non-zero months to score, using fallback accuracy")
        accuracy = 0.5

    errors = [abs(predicted - actual) for actual, predicted in zip(actuals, predictions)]
    error_std = standard_deviation(errors)

    return PredictionResult(
        value=max(0.0, forecast),
        confidence_interval=ConfidenceInterval(
            lower=max(0.0, forecast - 2 * error_std),
            upper=forecast + 2 * error_std,
        ),
        method="exponential-smoothing",
        accuracy=accuracy,
        trend=_trend_label(trend),
    )


def linear_regression(transactions: Sequence[Transaction]) -> TrendAnalysis:
    """Least-squares trend of amount against days since the first transaction."""
    if len(transactions) < 2:
        return TrendAnalysis(slope=0.0, intercept=0.0, r_squared=0.0, direction="stable", strength="weak")

    ordered = sorted(transactions, key=lambda t: t.day)
    first = ordered[0].day
    x = [(t.day - first).days for t in ordered]
    y = [t.amount for t in ordered]

    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(xi * yi for xi, yi in zip(x, y))
    sum_x2 = sum(xi * xi for xi in x)

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        # every transaction on the same day: no time axis to fit
        slope = 0.0
    else:
        slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    y_mean = sum_y / n
    ss_total = sum((yi - y_mean) ** 2 for yi in y)
    ss_residual = sum((yi - (slope * xi + intercept)) ** 2 for xi, yi in zip(x, y))
    r_squared = 0.0 if ss_total == 0 else 1 - ss_residual / ss_total
    r_squared = max(0.0, min(1.0, r_squared))

    if slope > SLOPE_THRESHOLD:
        direction = "increasing"
    elif slope < -SLOPE_THRESHOLD:
        direction = "decreasing"
    else:
        direction = "stable"

    if r_squared > 0.7:
        strength = "strong"
    elif r_squared > 0.4:
        strength = "moderate"
    else:
        strength = "weak"

    return TrendAnalysis(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        direction=direction,
        strength=strength,
    )


def predict_next_month_spending(transactions: Iterable[Transaction], now: datetime | None = None) -> float:
    """Average monthly spend over the window starting three months back."""
    today = resolve_now(now).date()
    window_start = shift_months(today.replace(day=1), -3)

    recent = [t.amount for t in transactions if window_start <= t.day <= today]
    if not recent:
        return 0.0
    return sum(recent) / 3


def moving_average_convergence(
    transactions: Sequence[Transaction],
    short_period: int = 7,
    long_period: int = 30,
    now: datetime | None = None,
) -> MovingAverageSignal:
    """Compare short and long daily moving averages of spend.

    A short average well above the long one means spending is accelerating,
    which is reported as ``bearish`` for the budget.
    """
    if not transactions:
        return MovingAverageSignal(short_ma=0.0, long_ma=0.0, signal="neutral")

    today = resolve_now(now).date()
    short_cutoff = today - timedelta(days=short_period)
    long_cutoff = today - timedelta(days=long_period)

    short_ma = sum(t.amount for t in transactions if t.day > short_cutoff) / short_period
    long_ma = sum(t.amount for t in transactions if t.day > long_cutoff) / long_period

    diff = short_ma - long_ma
    if diff > long_ma * 0.1:
        signal = "bearish"
    elif diff < -long_ma * 0.1:
        signal = "bullish"
    else:
        signal = "neutral"

    return MovingAverageSignal(short_ma=short_ma, long_ma=long_ma, signal=signal)
