import math
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Callable, Generic, Optional, Sequence, TypeVar

from analytics.budgets import BudgetStatus, budget_status
from analytics.domain import Budget, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

MAX_AMOUNT = 1_000_000
MAX_DESCRIPTION = 200


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def _error(code: str, field: str, message: str, **extra) -> Left:
    return Left({"error": code, "field": field, "message": message, **extra})


def _check_amount(t: Transaction) -> Either[dict, Transaction]:
    amount = t.amount
    if amount is None:
        return _error("amount_required", "amount", "Amount is required")
    if not isinstance(amount, (int, float)) or math.isnan(amount) or math.isinf(amount):
        return _error("amount_invalid", "amount", "Amount must be a valid number", amount=amount)
    if amount < 0:
        return _error("amount_negative", "amount", "Amount cannot be negative", amount=amount)
    if amount > MAX_AMOUNT:
        return _error("amount_too_large", "amount", "Amount seems unusually large", amount=amount)
    return Right(t)


def _check_description(t: Transaction) -> Either[dict, Transaction]:
    if not t.description or not t.description.strip():
        return _error("description_required", "description", "Description is required")
    if len(t.description) > MAX_DESCRIPTION:
        return _error(
            "description_too_long",
            "description",
            f"Description is too long (max {MAX_DESCRIPTION} characters)",
        )
    return Right(t)


def _check_date(today: date) -> Callable[[Transaction], Either[dict, Transaction]]:
    def _check(t: Transaction) -> Either[dict, Transaction]:
        if not t.date:
            return _error("date_required", "date", "Date is required")
        try:
            day = date.fromisoformat(t.date)
        except (TypeError, ValueError):
            return _error("date_invalid", "date", "Invalid date format (use YYYY-MM-DD)", date=t.date)
        try:
            future_limit = today.replace(year=today.year + 1)
        except ValueError:
            # Feb 29 with no leap day next year
            future_limit = today.replace(year=today.year + 1, day=28)
        if day > future_limit:
            return _error("date_in_future", "date", "Date is too far in the future", date=t.date)
        return Right(t)

    return _check


def _check_category(t: Transaction) -> Either[dict, Transaction]:
    if not t.category or not t.category.strip():
        return _error("category_required", "category", "Category is required")
    return Right(t)


def validate_transaction(
    t: Transaction,
    today: Optional[date] = None,
) -> Either[dict, Transaction]:
    """Reject malformed transactions before they reach analytics.

    Returns the first failing check as a ``Left`` error dict.
    """
    today = today or date.today()
    return (
        _check_amount(t)
        .bind(_check_description)
        .bind(_check_date(today))
        .bind(_check_category)
    )


def check_budget(
    b: Budget,
    trans: Sequence[Transaction],
    now: Optional[datetime] = None,
) -> Either[dict, BudgetStatus]:
    status = budget_status(b, trans, now)

    if status.is_over_budget:
        return Left({
            "error": "budget_exceeded",
            "message": f"Budget limit exceeded for category {b.category}",
            "category": b.category,
            "limit": status.limit,
            "spent": status.spent,
            "over_budget": status.spent - status.limit,
        })

    return Right(status)
