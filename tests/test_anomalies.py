import pytest

from analytics.anomalies import detect_anomalies, detect_duplicates
from analytics.domain import Transaction


def make_tx(id, amount, date="2024-01-05", category="Food", description=""):
    return Transaction(id=id, amount=amount, date=date, category=category, description=description)


def flat_with_outlier(count, base, outlier):
    trans = [make_tx(f"t{i}", base) for i in range(count)]
    trans.append(make_tx("outlier", outlier))
    return tuple(trans)


def test_fewer_than_three_returns_empty():
    assert detect_anomalies(()) == []
    assert detect_anomalies((make_tx("t1", 10), make_tx("t2", 10_000))) == []


def test_three_transactions_cannot_reach_two_sigma():
    trans = (
        make_tx("t1", 100, "2024-01-05"),
        make_tx("t2", 50, "2024-01-10"),
        make_tx("t3", 900, "2024-01-15"),
    )
    # with three samples the population z-score never exceeds sqrt(2)
    assert detect_anomalies(trans, threshold=2) == []

    alerts = detect_anomalies(trans, threshold=1.0)
    assert len(alerts) == 1
    assert alerts[0].transaction.id == "t3"
    assert alerts[0].z_score == pytest.approx(1.4123, abs=1e-3)
    assert alerts[0].reason == "Unusually high spending (1.4σ above average)"


def test_high_severity_outlier():
    alerts = detect_anomalies(flat_with_outlier(20, 100, 1000))

    assert len(alerts) == 1
    assert alerts[0].transaction.id == "outlier"
    assert alerts[0].z_score == pytest.approx(20 ** 0.5)
    assert alerts[0].severity == "high"


def test_low_spending_outlier():
    alerts = detect_anomalies(flat_with_outlier(20, 100, 0))

    assert len(alerts) == 1
    assert alerts[0].z_score < 0
    assert alerts[0].reason == "Unusually low spending (4.5σ below average)"


def test_medium_and_low_severity():
    # a single outlier among n equal values has |z| = sqrt(n - 1)
    medium = detect_anomalies(flat_with_outlier(7, 100, 800))
    low = detect_anomalies(flat_with_outlier(5, 100, 800))

    assert medium[0].severity == "medium"
    assert low[0].severity == "low"


def test_sorted_by_absolute_z_score():
    trans = tuple(make_tx(f"t{i}", 100) for i in range(18)) + (
        make_tx("mid", 600),
        make_tx("big", 1000),
    )
    alerts = detect_anomalies(trans, threshold=1.5)

    assert [a.transaction.id for a in alerts] == ["big", "mid"]
    assert [a.severity for a in alerts] == ["high", "low"]


def test_constant_amounts_have_no_anomalies():
    assert detect_anomalies(tuple(make_tx(f"t{i}", 40) for i in range(10))) == []


def test_detect_duplicates():
    trans = (
        make_tx("t1", 12.5, "2024-02-01", description="Coffee"),
        make_tx("t2", 12.5, "2024-02-02", description="Coffee"),
        make_tx("t3", 12.5, "2024-02-01", description="Coffee"),
    )
    groups = detect_duplicates(trans)

    assert len(groups) == 1
    assert groups[0].indices == (0, 2)
    assert groups[0].transaction.id == "t1"
