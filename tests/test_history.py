from analytics.domain import Budget, Transaction
from analytics.history import (
    ADD_EXPENSE, CLEAR_ALL, EDIT_EXPENSE,
    HistoryManager,
    add_budget_action, add_expense_action, bulk_delete_action, clear_all_action,
    delete_expense_action, edit_expense_action,
)

T1 = Transaction("t1", 10, "2024-06-01", "Food")
T2 = Transaction("t2", 20, "2024-06-02", "Food")


def test_undo_then_redo():
    history = HistoryManager()
    first = add_expense_action(T1)
    second = add_expense_action(T2)
    history.add_action(first)
    history.add_action(second)

    assert history.undo() is second
    assert history.undo() is first
    assert history.undo() is None
    assert not history.can_undo()

    assert history.redo() is first
    assert history.history() == [first]
    assert history.can_redo()


def test_new_action_discards_redo_stack():
    history = HistoryManager()
    history.add_action(add_expense_action(T1))
    history.undo()

    edit = edit_expense_action(T2, T1)
    history.add_action(edit)

    assert not history.can_redo()
    assert history.history() == [edit]
    assert edit.type == EDIT_EXPENSE
    assert edit.previous_state is T1


def test_history_is_bounded():
    history = HistoryManager(max_history=3)
    actions = [delete_expense_action(Transaction(f"t{i}", i, "2024-06-01", "Food")) for i in range(5)]
    for action in actions:
        history.add_action(action)

    assert history.history() == actions[2:]

    undone = 0
    while history.undo():
        undone += 1
    assert undone == 3


def test_clear():
    history = HistoryManager()
    history.add_action(add_budget_action(Budget("b1", "Food", 100)))
    history.clear()

    assert not history.can_undo()
    assert not history.can_redo()
    assert history.history() == []


def test_action_payloads():
    bulk = bulk_delete_action([T1, T2])
    assert bulk.data == (T1, T2)

    clear = clear_all_action([T1], [Budget("b1", "Food", 100)])
    assert clear.type == CLEAR_ALL
    assert clear.data is None
    assert clear.previous_state[0] == (T1,)

    assert add_expense_action(T1).type == ADD_EXPENSE
    assert add_expense_action(T1).timestamp > 0
