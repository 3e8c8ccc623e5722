"""Tests for weight progress aggregation"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from selva_app.services.progress import chart_grid, chart_points, history, render_chart_svg, summarize


@dataclass
class Entry:
    weight: float
    date: date
    id: Optional[int] = None
    notes: str = ""


def test_summarize_basic():
    """Test totals and percentage for a two-entry history"""
    entries = [Entry(85, date(2024, 1, 8)), Entry(90, date(2024, 1, 1))]
    summary = summarize(entries, fallback_weight=None, goal_weight=80)
    assert summary.start_weight == 90
    assert summary.current_weight == 85
    assert summary.total_lost == 5
    assert summary.remaining_to_goal == 5
    assert summary.progress_percentage == 50


def test_summarize_no_entries_uses_fallback():
    """Test the fallback weight stands in for start and current"""
    summary = summarize([], fallback_weight=75, goal_weight=70)
    assert summary.start_weight == 75
    assert summary.current_weight == 75
    assert summary.total_lost == 0
    assert summary.remaining_to_goal == 5
    assert summary.progress_percentage == 0


def test_summarize_start_equals_goal():
    """Test the percentage is undefined when start equals goal"""
    entries = [Entry(80, date(2024, 1, 1)), Entry(79, date(2024, 1, 2))]
    summary = summarize(entries, goal_weight=80)
    assert summary.progress_percentage is None
    assert summary.remaining_to_goal == -1


def test_summarize_clamps_percentage():
    """Test weight gain clamps to 0 and overshooting clamps to 100"""
    gained = [Entry(90, date(2024, 1, 1)), Entry(95, date(2024, 1, 2))]
    assert summarize(gained, goal_weight=80).progress_percentage == 0
    overshoot = [Entry(90, date(2024, 1, 1)), Entry(75, date(2024, 1, 2))]
    assert summarize(overshoot, goal_weight=80).progress_percentage == 100


def test_summarize_missing_goal():
    """Test goal-dependent fields stay undefined without a goal weight"""
    summary = summarize([Entry(90, date(2024, 1, 1))])
    assert summary.total_lost == 0
    assert summary.remaining_to_goal is None
    assert summary.progress_percentage is None


def test_summarize_nothing_known():
    summary = summarize([])
    assert summary.start_weight is None
    assert summary.total_lost is None


def test_history_newest_first_with_change():
    """Test history order, change sign and trend labels"""
    entries = [
        Entry(85, date(2024, 1, 8), id=2),
        Entry(90, date(2024, 1, 1), id=1),
        Entry(86, date(2024, 1, 15), id=3),
        Entry(86, date(2024, 1, 22), id=4),
    ]
    items = history(entries)
    assert [i.id for i in items] == [4, 3, 2, 1]
    assert [i.change for i in items] == [0, 1, -5, 0]
    assert [i.trend for i in items] == ["neutral", "negative", "positive", "neutral"]


def test_history_empty():
    assert history([]) == []


def test_chart_points_requires_two_entries():
    """Test fewer than two entries produce no points"""
    assert chart_points([]) == []
    assert chart_points([Entry(80, date(2024, 1, 1))]) == []


def test_chart_points_equal_weights():
    """Test equal weights share a y and span the padded width"""
    entries = [Entry(80, date(2024, 1, 2)), Entry(80, date(2024, 1, 1))]
    points = chart_points(entries, width=600, height=250, padding=40)
    assert len(points) == 2
    assert points[0].y == points[1].y
    assert points[0].x == 40
    assert points[1].x == 560


def test_chart_points_mapping():
    """Test heavier weights map to smaller y inside the padded box"""
    entries = [
        Entry(90, date(2024, 1, 1)),
        Entry(85, date(2024, 1, 2)),
        Entry(80, date(2024, 1, 3)),
    ]
    points = chart_points(entries, width=500, height=300, padding=50)
    assert [p.x for p in points] == [50, 250, 450]
    # 90 is max+2 away from the top margin: (92-90)/(92-78) of the drawable height
    assert points[0].y == round(50 + 200 * 2 / 14, 2)
    assert points[2].y == round(250 - 200 * 2 / 14, 2)
    assert points[0].y < points[1].y < points[2].y
    assert [p.weight for p in points] == [90, 85, 80]


def test_chart_grid_labels():
    """Test grid lines run from max+2 down to min-2"""
    entries = [Entry(90, date(2024, 1, 1)), Entry(80, date(2024, 1, 2))]
    grid = chart_grid(entries, height=250, padding=40)
    assert [g["label"] for g in grid] == ["92.0", "88.5", "85.0", "81.5", "78.0"]
    assert grid[0]["y"] == 40
    assert grid[-1]["y"] == 210


def test_render_chart_svg():
    """Test the SVG contains a path and one circle per entry"""
    entries = [Entry(90, date(2024, 1, 1)), Entry(85, date(2024, 1, 2))]
    svg = render_chart_svg(entries)
    assert svg.startswith("<svg")
    assert svg.count("<circle") == 2
    assert "M 40.0" in svg
    assert render_chart_svg(entries[:1]) is None
