from datetime import datetime

import pytest

from analytics.aggregation import (
    ExpenseStats,
    calculate_stats,
    spending_impact,
    transactions_in_last_days,
)
from analytics.domain import Budget, Transaction

NOW = datetime(2024, 6, 12, 15, 30)  # Wednesday; Sunday-start week is 9..15 June


def make_tx(id, amount, date, category="Food"):
    return Transaction(id=id, amount=amount, date=date, category=category, description=f"tx {id}")


def make_sample():
    return (
        make_tx("t1", 100, "2024-06-12"),
        make_tx("t2", 50, "2024-06-09", "Transport"),
        make_tx("t3", 200, "2024-06-08"),
        make_tx("t4", 300, "2024-05-20", "Bills"),
        make_tx("t5", 400, "2023-12-31"),
        make_tx("t6", 25, "2024-06-20", "Other"),
    )


def test_period_totals():
    stats = calculate_stats(make_sample(), now=NOW)

    assert stats.total == 1075
    assert stats.today == 100
    assert stats.this_week == 150
    assert stats.this_month == 375
    assert stats.last_month == 300
    assert stats.year_to_date == 650


def test_by_category_sums_to_total():
    stats = calculate_stats(make_sample(), now=NOW)

    assert stats.by_category == {"Food": 700, "Transport": 50, "Bills": 300, "Other": 25}
    assert sum(stats.by_category.values()) == stats.total


def test_averages_use_days_since_oldest():
    stats = calculate_stats(make_sample(), now=NOW)

    # 2023-12-31 -> 2024-06-12 is 164 days
    assert stats.average_daily == pytest.approx(1075 / 164)
    assert stats.average_monthly == pytest.approx(1075 / 164 * 30)


def test_accepts_a_generator():
    stats = calculate_stats((t for t in make_sample()), now=NOW)

    assert stats.total == 1075
    assert stats.average_daily == pytest.approx(1075 / 164)


def test_same_day_dataset_uses_one_day_minimum():
    stats = calculate_stats((make_tx("t1", 90, "2024-06-12"),), now=NOW)
    assert stats.average_daily == 90
    assert stats.average_monthly == 2700


def test_empty_input_returns_zeros():
    assert calculate_stats((), now=NOW) == ExpenseStats()


def test_week_start_monday():
    stats = calculate_stats(make_sample(), now=NOW, week_start="MON")
    assert stats.this_week == 100


def test_calculate_stats_is_idempotent_and_pure():
    trans = make_sample()
    budgets = (Budget("b1", "food", 500),)

    first = calculate_stats(trans, budgets, now=NOW)
    second = calculate_stats(trans, budgets, now=NOW)

    assert first == second
    assert trans == make_sample()


def test_budget_status_is_included():
    stats = calculate_stats(make_sample(), (Budget("b1", "Food", 500),), now=NOW)

    status = stats.budget_status["Food"]
    assert status.spent == 300
    assert status.remaining == 200
    assert not status.is_over_budget


def test_unknown_category_is_its_own_bucket():
    trans = (make_tx("t1", 10, "2024-06-12", "Mystery"), make_tx("t2", 5, "2024-06-12", "mystery"))
    stats = calculate_stats(trans, now=NOW)
    assert stats.by_category == {"Mystery": 10, "mystery": 5}


def test_transactions_in_last_days():
    recent = transactions_in_last_days(make_sample(), days=7, now=NOW)
    assert {t.id for t in recent} == {"t1", "t2", "t3", "t6"}


def test_spending_impact():
    impact = spending_impact(10)
    assert impact.monthly == 300
    assert impact.yearly == 3650
