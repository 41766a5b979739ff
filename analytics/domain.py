from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class Classification(Enum):
    ESSENTIAL = "ESSENTIAL"
    JOY = "JOY"
    WASTE = "WASTE"


class RecurringFrequency(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    icon: str = ""
    color: str = ""
    is_default: bool = False  # protects from deletion only
    created_at: int = 0


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float    # non-negative
    date: str        # calendar date, "YYYY-MM-DD"
    category: str    # free text, matched against Category.name
    created_at: int = 0  # epoch ms, audit only
    description: str = ""
    tags: tuple[str, ...] = ()
    notes: str = ""
    classification: Optional[Classification] = None
    is_recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None
    recurring_end_date: Optional[str] = None
    parent_recurring_id: Optional[str] = None  # back-reference to the template
    event: Optional[str] = None
    receipt_id: Optional[str] = None
    is_paused: bool = False

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date)


# A monthly spending limit for one category
@dataclass(frozen=True)
class Budget:
    id: str
    category: str
    monthly_limit: float
    alert_threshold: float = 80  # percent, 1-100
    is_active: bool = True
    created_at: int = 0


def category_key(name: str) -> str:
    """Normalise a category label for budget matching."""
    return name.strip().lower()
