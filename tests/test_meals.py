"""Tests for meal streaks"""
from datetime import date

from selva_app.services.meals import calculate_streak

TODAY = date(2024, 5, 10)


def test_no_meals():
    assert calculate_streak([], TODAY) == 0


def test_consecutive_days():
    days = [date(2024, 5, 10), date(2024, 5, 9), date(2024, 5, 8), date(2024, 5, 6)]
    assert calculate_streak(days, TODAY) == 3


def test_streak_must_include_today():
    """Test a run that ended yesterday does not count"""
    assert calculate_streak([date(2024, 5, 9), date(2024, 5, 8)], TODAY) == 0


def test_duplicate_days():
    assert calculate_streak([TODAY, TODAY, date(2024, 5, 9)], TODAY) == 2


def test_across_month_boundary():
    days = [date(2024, 3, 1), date(2024, 2, 29), date(2024, 2, 28)]
    assert calculate_streak(days, date(2024, 3, 1)) == 3
