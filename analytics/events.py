import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

from analytics.aggregation import calculate_stats
from analytics.functional import check_budget

__all__ = ['DATA_CHANGED', 'BUDGET_ALERT', 'Event', 'EventBus', 'register_default_handlers']

logger = logging.getLogger(__name__)

DATA_CHANGED = "DATA_CHANGED"
BUDGET_ALERT = "BUDGET_ALERT"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    """Synchronous publish/subscribe; each publish returns the handlers' results."""

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name, [])
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        logger.debug("Publishing %s to %d handler(s)", name, len(handlers))
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


def recompute_stats_handler(event: Event, payload: dict) -> dict:
    """Rebuild the stats record from the snapshot carried by a DATA_CHANGED event."""
    stats = calculate_stats(
        payload.get("transactions", ()),
        payload.get("budgets", ()),
        now=payload.get("now"),
        week_start=payload.get("week_start", "SUN"),
    )
    return {"stats": stats}


def budget_alert_handler(event: Event, payload: dict) -> dict:
    """Alert on every active budget that is over its limit or past its threshold."""
    transactions = payload.get("transactions", ())
    now = payload.get("now")

    alerts = []
    for b in payload.get("budgets", ()):
        if not b.is_active:
            continue
        result = check_budget(b, transactions, now)
        if result.is_left():
            err = result.get_error()
            alerts.append(
                f"{err['message']}: {err['spent']:,.0f} of {err['limit']:,.0f} spent "
                f"({err['over_budget']:,.0f} over)"
            )
            continue
        s = result.get_or_else(None)
        if s.percentage >= b.alert_threshold:
            alerts.append(
                f"Budget alert for {b.category}: {s.spent:,.0f} of {s.limit:,.0f} spent ({s.percentage:.0f}%)"
            )
    if not alerts:
        return {}
    return {"alerts": alerts}


def register_default_handlers(bus: EventBus) -> EventBus:
    bus.subscribe(DATA_CHANGED, recompute_stats_handler)
    bus.subscribe(BUDGET_ALERT, budget_alert_handler)
    return bus
