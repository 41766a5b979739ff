"""Bounded undo/redo history of user actions.

The history only records what happened. Applying or reverting an action is
the caller's job, after which it publishes ``DATA_CHANGED`` so the analytics
are recomputed from the new snapshot.
"""

import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, List, Optional, Sequence

from analytics.domain import Budget, Transaction

ADD_EXPENSE = "ADD_EXPENSE"
EDIT_EXPENSE = "EDIT_EXPENSE"
DELETE_EXPENSE = "DELETE_EXPENSE"
BULK_DELETE = "BULK_DELETE"
ADD_BUDGET = "ADD_BUDGET"
DELETE_BUDGET = "DELETE_BUDGET"
CLEAR_ALL = "CLEAR_ALL"


@dataclass(frozen=True)
class Action:
    type: str
    timestamp: int  # epoch ms
    data: Any
    previous_state: Any = None


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryManager:

    def __init__(self, max_history: int = 20):
        self._actions: Deque[Action] = deque(maxlen=max_history)
        # index of the last applied action, -1 when nothing can be undone
        self._cursor = -1

    def add_action(self, action: Action) -> None:
        # a new action discards everything that was undone
        while len(self._actions) > self._cursor + 1:
            self._actions.pop()
        self._actions.append(action)
        self._cursor = len(self._actions) - 1

    def can_undo(self) -> bool:
        return self._cursor >= 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._actions) - 1

    def undo(self) -> Optional[Action]:
        if not self.can_undo():
            return None
        action = self._actions[self._cursor]
        self._cursor -= 1
        return action

    def redo(self) -> Optional[Action]:
        if not self.can_redo():
            return None
        self._cursor += 1
        return self._actions[self._cursor]

    def clear(self) -> None:
        self._actions.clear()
        self._cursor = -1

    def history(self) -> List[Action]:
        """Applied actions, oldest first."""
        return list(self._actions)[: self._cursor + 1]


def add_expense_action(t: Transaction) -> Action:
    return Action(type=ADD_EXPENSE, timestamp=_now_ms(), data=t)


def edit_expense_action(updated: Transaction, previous: Transaction) -> Action:
    return Action(type=EDIT_EXPENSE, timestamp=_now_ms(), data=updated, previous_state=previous)


def delete_expense_action(t: Transaction) -> Action:
    return Action(type=DELETE_EXPENSE, timestamp=_now_ms(), data=t)


def bulk_delete_action(trans: Sequence[Transaction]) -> Action:
    return Action(type=BULK_DELETE, timestamp=_now_ms(), data=tuple(trans))


def add_budget_action(b: Budget) -> Action:
    return Action(type=ADD_BUDGET, timestamp=_now_ms(), data=b)


def delete_budget_action(b: Budget) -> Action:
    return Action(type=DELETE_BUDGET, timestamp=_now_ms(), data=b)


def clear_all_action(trans: Sequence[Transaction], budgets: Sequence[Budget]) -> Action:
    return Action(type=CLEAR_ALL, timestamp=_now_ms(), data=None, previous_state=(tuple(trans), tuple(budgets)))
