from datetime import datetime

from analytics.domain import Budget, Transaction
from analytics.events import (
    Event, EventBus,
    DATA_CHANGED, BUDGET_ALERT,
    budget_alert_handler, recompute_stats_handler, register_default_handlers
)

NOW = datetime(2024, 6, 12, 12, 0)


def make_tx(id, amount, date, category="Food"):
    return Transaction(id=id, amount=amount, date=date, category=category)


def test_event_creation():
    event = Event(name=DATA_CHANGED, ts=NOW.isoformat(), payload={"transactions": ()})
    assert event.name == DATA_CHANGED
    assert event.payload["transactions"] == ()


def test_subscribe_and_publish():
    bus = EventBus()
    seen = []

    def handler(event: Event, payload: dict) -> dict:
        seen.append(event.name)
        return {"processed": True}

    bus.subscribe(DATA_CHANGED, handler)
    results = bus.publish(DATA_CHANGED, {})

    assert results == [{"processed": True}]
    assert seen == [DATA_CHANGED]


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    bus.subscribe(DATA_CHANGED, lambda e, p: {"handler": 1})
    bus.subscribe(DATA_CHANGED, lambda e, p: {"handler": 2})

    assert bus.publish(DATA_CHANGED, {}) == [{"handler": 1}, {"handler": 2}]


def test_publish_without_subscribers():
    assert EventBus().publish(BUDGET_ALERT, {}) == []


def test_unsubscribe():
    bus = EventBus()

    def handler(event, payload):
        return {"called": True}

    bus.subscribe(DATA_CHANGED, handler)
    bus.unsubscribe(DATA_CHANGED, handler)
    bus.unsubscribe(BUDGET_ALERT, handler)

    assert bus.publish(DATA_CHANGED, {}) == []


def test_recompute_stats_handler():
    payload = {
        "transactions": (make_tx("t1", 40, "2024-06-12"), make_tx("t2", 60, "2024-06-01")),
        "now": NOW,
    }
    result = recompute_stats_handler(Event(DATA_CHANGED, NOW.isoformat(), payload), payload)

    assert result["stats"].today == 40
    assert result["stats"].this_month == 100


def test_budget_alert_handler():
    budgets = (
        Budget("b1", "Food", 100, alert_threshold=80),
        Budget("b2", "Bills", 1000, alert_threshold=80),
    )
    payload = {
        "transactions": (make_tx("t1", 85, "2024-06-03"), make_tx("t2", 100, "2024-06-03", "Bills")),
        "budgets": budgets,
        "now": NOW,
    }
    result = budget_alert_handler(Event(BUDGET_ALERT, NOW.isoformat(), payload), payload)

    assert result == {"alerts": ["Budget alert for Food: 85 of 100 spent (85%)"]}


def test_budget_alert_handler_quiet_under_threshold():
    payload = {
        "transactions": (make_tx("t1", 10, "2024-06-03"),),
        "budgets": (Budget("b1", "Food", 100),),
        "now": NOW,
    }
    assert budget_alert_handler(Event(BUDGET_ALERT, NOW.isoformat(), payload), payload) == {}


def test_default_handlers():
    bus = register_default_handlers(EventBus())
    payload = {
        "transactions": (make_tx("t1", 120, "2024-06-05"),),
        "budgets": (Budget("b1", "Food", 100),),
        "now": NOW,
    }

    changed = bus.publish(DATA_CHANGED, payload)
    assert len(changed) == 1
    assert changed[0]["stats"].budget_status["Food"].is_over_budget

    alerts = bus.publish(BUDGET_ALERT, payload)
    assert alerts == [{"alerts": ["Budget limit exceeded for category Food: 120 of 100 spent (20 over)"]}]


def test_budget_alert_handler_reports_overspend_and_skips_inactive():
    budgets = (
        Budget("b1", "Food", 100, alert_threshold=80),
        Budget("b2", "Bills", 100, is_active=False),
    )
    payload = {
        "transactions": (make_tx("t1", 150.4, "2024-06-03"), make_tx("t2", 500, "2024-06-03", "Bills")),
        "budgets": budgets,
        "now": NOW,
    }
    result = budget_alert_handler(Event(BUDGET_ALERT, NOW.isoformat(), payload), payload)

    assert result == {"alerts": ["Budget limit exceeded for category Food: 150 of 100 spent (50 over)"]}
