from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from analytics.domain import Transaction


@dataclass(frozen=True)
class StreakData:
    current_streak: int
    longest_streak: int
    last_log_date: Optional[str]
    total_days: int


def calculate_streak(transactions: Iterable[Transaction], today: Optional[date] = None) -> StreakData:
    """Consecutive-day logging streaks.

    The current streak counts logged days going back from ``today``; it is 0
    when nothing was logged today.
    """
    today = today or date.today()
    days = sorted({t.day for t in transactions}, reverse=True)
    if not days:
        return StreakData(current_streak=0, longest_streak=0, last_log_date=None, total_days=0)

    logged = set(days)
    current = 0
    while today - timedelta(days=current) in logged:
        current += 1

    longest = run = 1
    for newer, older in zip(days, days[1:]):
        if (newer - older).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    return StreakData(
        current_streak=current,
        longest_streak=max(longest, current),
        last_log_date=days[0].isoformat(),
        total_days=len(days),
    )


def streak_message(streak: int) -> str:
    if streak == 0:
        return "Start your journey today!"
    if streak == 1:
        return "Great start! Keep going!"
    if streak < 7:
        return f"{streak} days strong!"
    if streak < 30:
        return f"Amazing {streak}-day streak!"
    if streak < 100:
        return f"Incredible {streak} days! You're a champion!"
    return f"Legendary {streak}-day streak!"
