"""Meal logging helpers."""
from datetime import date, timedelta
from typing import Iterable

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


def calculate_streak(days: Iterable[date], today: date) -> int:
    """Consecutive days with at least one meal, counting back from today."""
    logged = set(days)
    streak = 0
    current = today
    while current in logged:
        streak += 1
        current -= timedelta(days=1)
    return streak
