import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from analytics.aggregation import calculate_stats, transactions_in_last_days
from analytics.anomalies import detect_anomalies, detect_duplicates
from analytics.comparison import category_insights, month_over_month, year_over_year
from analytics.config import AnalyticsConfig
from analytics.domain import Budget, Transaction
from analytics.forecast import (
    exponential_smoothing,
    linear_regression,
    monthly_totals,
    moving_average_convergence,
    predict_next_month_spending,
)
from analytics.functional import validate_transaction
from analytics.insights import generate_insights
from analytics.seasonal import detect_seasonal_patterns
from analytics.streak import calculate_streak
from analytics.volatility import calculate_volatility

logger = logging.getLogger(__name__)

# (transactions, budgets, now) -> partial result
Analyzer = Callable[[Sequence[Transaction], Sequence[Budget], datetime], Dict[str, Any]]


class AnalyticsService:
    """Runs a set of independent analyzers over one snapshot.

    analyzers: sequence of functions taking (transactions, budgets, now) -> dict (partial results)
    Every analyzer sees the same validated snapshot and the same captured ``now``.

    With ``validate`` on (the default) each transaction must pass
    ``validate_transaction``, so rows with an empty description or category are
    dropped from every result and listed under ``report["validation"]``.
    Pass ``validate=False`` for snapshots that were already checked upstream.
    """

    def __init__(self, analyzers: Sequence[Analyzer], validate: bool = True):
        self.analyzers = analyzers
        self.validate = validate

    def _split_valid(self, transactions: Iterable[Transaction], today) -> tuple[tuple[Transaction, ...], list]:
        valid = []
        rejected = []
        for t in transactions:
            result = validate_transaction(t, today)
            if result.is_right():
                valid.append(t)
            else:
                rejected.append({"id": t.id, **result.get_error()})
        return tuple(valid), rejected

    def run(
        self,
        transactions: Iterable[Transaction],
        budgets: Iterable[Budget] = (),
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Run every analyzer and return the aggregated report with intermediate steps."""
        now = now or datetime.now()
        budgets = tuple(budgets)

        if self.validate:
            snapshot, rejected = self._split_valid(transactions, now.date())
        else:
            snapshot, rejected = tuple(transactions), []
        if rejected:
            logger.warning("Skipping %d invalid transaction(s)", len(rejected))

        report = {
            "now": now,
            "validation": rejected,
            "steps": [],
            "result": {},
        }

        acc = {}
        for analyzer in self.analyzers:
            out = analyzer(snapshot, budgets, now)
            report["steps"].append({"analyzer": getattr(analyzer, "__name__", str(analyzer)), "output": out})
            acc.update(out)

        logger.debug("Ran %d analyzers over %d transactions", len(self.analyzers), len(snapshot))
        report["result"] = acc
        return report


def default_analyzers(config: Optional[AnalyticsConfig] = None) -> list[Analyzer]:
    """Every analytics function, wired with values from ``config``."""
    cfg = config or AnalyticsConfig()

    def stats(trans, budgets, now):
        return {"stats": calculate_stats(trans, budgets, now, week_start=cfg.week_start)}

    def recent(trans, budgets, now):
        return {"recent": transactions_in_last_days(trans, cfg.recent_days, now)}

    def forecast(trans, budgets, now):
        return {
            "monthly_totals": monthly_totals(trans),
            "prediction": exponential_smoothing(trans, cfg.smoothing_alpha, cfg.smoothing_beta),
            "next_month_average": predict_next_month_spending(trans, now),
        }

    def trend(trans, budgets, now):
        return {
            "trend": linear_regression(trans),
            "momentum": moving_average_convergence(trans, cfg.short_period, cfg.long_period, now),
        }

    def volatility(trans, budgets, now):
        return {"volatility": calculate_volatility(trans)}

    def anomalies(trans, budgets, now):
        return {
            "anomalies": detect_anomalies(trans, cfg.anomaly_threshold),
            "duplicates": detect_duplicates(trans),
        }

    def seasonal(trans, budgets, now):
        return {"seasonal": detect_seasonal_patterns(trans)}

    def comparison(trans, budgets, now):
        return {
            "month_over_month": month_over_month(trans, now),
            "year_over_year": year_over_year(trans, now),
            "category_insights": category_insights(trans, now),
        }

    def habits(trans, budgets, now):
        return {
            "streak": calculate_streak(trans, now.date()),
            "insights": generate_insights(trans, cfg.insight_limit),
        }

    return [stats, recent, forecast, trend, volatility, anomalies, seasonal, comparison, habits]
