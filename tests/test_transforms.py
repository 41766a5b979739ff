import json
from pathlib import Path

from analytics.domain import Budget, Classification, RecurringFrequency, Transaction
from analytics.transforms import (
    add_transaction,
    load_seed,
    remove_transaction,
    replace_transaction,
    transaction_from_dict,
    update_budget,
)

SEED = Path(__file__).resolve().parent.parent / "data" / "seed.json"


def test_transaction_from_dict_reads_camel_case():
    t = transaction_from_dict({
        "id": 7,
        "amount": "12.5",
        "date": "2024-03-01",
        "category": "Bills",
        "createdAt": 1709251200000,
        "classification": "WASTE",
        "isRecurring": True,
        "recurringFrequency": "weekly",
        "tags": ["home", "utilities"],
        "isPaused": True,
    })

    assert t.id == "7"
    assert t.amount == 12.5
    assert t.classification is Classification.WASTE
    assert t.recurring_frequency is RecurringFrequency.WEEKLY
    assert t.tags == ("home", "utilities")
    assert t.is_recurring and t.is_paused
    assert t.description == ""


def test_optional_fields_default():
    t = transaction_from_dict({"id": "t1", "amount": 5, "date": "2024-03-01", "category": "Food"})

    assert t.classification is None
    assert t.recurring_frequency is None
    assert t.is_recurring is False
    assert t.tags == ()


def test_load_seed(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({
        "transactions": [
            {"id": "t1", "amount": 10, "date": "2024-01-01", "category": "Food"},
        ],
        "budgets": [
            {"id": "b1", "category": "Food", "monthlyLimit": 200},
        ],
    }), encoding="utf-8")

    categories, transactions, budgets = load_seed(str(path))

    assert categories == ()
    assert transactions[0].amount == 10
    assert budgets == (Budget("b1", "Food", 200.0),)


def test_shipped_seed():
    categories, transactions, budgets = load_seed(str(SEED))

    assert len(categories) == 4
    assert len(transactions) == 12
    assert len(budgets) == 3
    assert [b.id for b in budgets if not b.is_active] == ["b3"]

    rent = next(t for t in transactions if t.id == "t3")
    assert rent.is_recurring
    assert rent.recurring_frequency is RecurringFrequency.MONTHLY


def test_snapshot_edits_return_new_tuples():
    t1 = Transaction("t1", 10, "2024-01-01", "Food")
    t2 = Transaction("t2", 20, "2024-01-02", "Food")
    trans = (t1,)

    added = add_transaction(trans, t2)
    assert added == (t1, t2)
    assert trans == (t1,)

    edited = Transaction("t1", 15, "2024-01-01", "Food")
    assert replace_transaction(added, edited) == (edited, t2)
    assert remove_transaction(added, "t1") == (t2,)


def test_update_budget():
    budgets = (Budget("b1", "Food", 100), Budget("b2", "Bills", 500))
    updated = update_budget(budgets, "b2", 650)

    assert updated[0] is budgets[0]
    assert updated[1].monthly_limit == 650
    assert budgets[1].monthly_limit == 500
