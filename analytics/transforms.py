import json
import logging
from dataclasses import replace
from typing import Any, Tuple

from analytics.domain import Budget, Category, Classification, RecurringFrequency, Transaction

logger = logging.getLogger(__name__)

Snapshot = Tuple[
    Tuple[Category, ...],
    Tuple[Transaction, ...],
    Tuple[Budget, ...],
]


def _enum_or_none(enum_cls, value):
    return enum_cls(value) if value else None


def transaction_from_dict(d: dict[str, Any]) -> Transaction:
    """Build a Transaction from a stored record (camelCase keys)."""
    return Transaction(
        id=str(d["id"]),
        amount=float(d["amount"]),
        date=d["date"],
        category=d["category"],
        created_at=int(d.get("createdAt", 0)),
        description=d.get("description", ""),
        tags=tuple(d.get("tags") or ()),
        notes=d.get("notes") or "",
        classification=_enum_or_none(Classification, d.get("classification")),
        is_recurring=bool(d.get("isRecurring", False)),
        recurring_frequency=_enum_or_none(RecurringFrequency, d.get("recurringFrequency")),
        recurring_end_date=d.get("recurringEndDate"),
        parent_recurring_id=d.get("parentRecurringId"),
        event=d.get("event"),
        receipt_id=d.get("receiptId"),
        is_paused=bool(d.get("isPaused", False)),
    )


def budget_from_dict(d: dict[str, Any]) -> Budget:
    return Budget(
        id=str(d["id"]),
        category=d["category"],
        monthly_limit=float(d["monthlyLimit"]),
        alert_threshold=float(d.get("alertThreshold", 80)),
        is_active=bool(d.get("isActive", True)),
        created_at=int(d.get("createdAt", 0)),
    )


def category_from_dict(d: dict[str, Any]) -> Category:
    return Category(
        id=str(d["id"]),
        name=d["name"],
        icon=d.get("icon", ""),
        color=d.get("color", ""),
        is_default=bool(d.get("isDefault", False)),
        created_at=int(d.get("createdAt", 0)),
    )


def load_seed(path: str) -> Snapshot:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    categories = tuple(category_from_dict(c) for c in data.get("categories", []))
    transactions = tuple(transaction_from_dict(t) for t in data["transactions"])
    budgets = tuple(budget_from_dict(b) for b in data.get("budgets", []))

    logger.info(
        "Loaded snapshot from %s: %d transactions, %d budgets, %d categories",
        path, len(transactions), len(budgets), len(categories),
    )
    return categories, transactions, budgets


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return trans + (t,)


def replace_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    """Swap the transaction with ``t.id`` for ``t``; transactions are replaced whole."""
    return tuple(t if old.id == t.id else old for old in trans)


def remove_transaction(
    trans: Tuple[Transaction, ...], tid: str
) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.id != tid, trans))


def update_budget(
    budgets: Tuple[Budget, ...], bid: str, new_limit: float
) -> Tuple[Budget, ...]:
    return tuple(
        replace(b, monthly_limit=new_limit) if b.id == bid else b
        for b in budgets
    )
