"""Weight progress statistics and chart geometry.

Entries are anything with `weight` and `date` attributes (ProgressEntry rows
in the app, plain dataclasses in tests). Nothing here touches the database.
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

import numpy as np

# Weight margin (kg) added above and below the plotted range
CHART_MARGIN = 2.0
GRID_PERCENTAGES = (0, 25, 50, 75, 100)


@dataclass
class ProgressSummary:
    start_weight: Optional[float] = None
    current_weight: Optional[float] = None
    goal_weight: Optional[float] = None
    total_lost: Optional[float] = None
    remaining_to_goal: Optional[float] = None
    progress_percentage: Optional[float] = None


@dataclass
class HistoryItem:
    id: Optional[int]
    weight: float
    date: date
    notes: str
    change: float
    trend: str


@dataclass
class ChartPoint:
    x: float
    y: float
    weight: float
    date: date


def _chronological(entries) -> list:
    # sorted() is stable, so same-day entries keep their insertion order
    return sorted(entries, key=lambda e: e.date)


def summarize(entries: Sequence, fallback_weight: Optional[float] = None,
              goal_weight: Optional[float] = None) -> ProgressSummary:
    ordered = _chronological(entries)
    start = ordered[0].weight if ordered else fallback_weight
    current = ordered[-1].weight if ordered else fallback_weight

    summary = ProgressSummary(start_weight=start, current_weight=current, goal_weight=goal_weight)
    if start is not None and current is not None:
        summary.total_lost = round(start - current, 2)
    if current is not None and goal_weight is not None:
        summary.remaining_to_goal = round(current - goal_weight, 2)
        if start is not None and start != goal_weight:
            pct = (start - current) / (start - goal_weight) * 100
            summary.progress_percentage = float(np.clip(pct, 0, 100))
    return summary


def _trend(change: float) -> str:
    # Losing weight is the good direction
    if change < 0:
        return "positive"
    if change > 0:
        return "negative"
    return "neutral"


def history(entries: Sequence) -> List[HistoryItem]:
    """Newest first, each entry annotated with its change from the previous one."""
    ordered = _chronological(entries)
    items = []
    previous = None
    for entry in ordered:
        change = round(entry.weight - previous, 2) if previous is not None else 0.0
        items.append(HistoryItem(
            id=getattr(entry, "id", None),
            weight=entry.weight,
            date=entry.date,
            notes=getattr(entry, "notes", "") or "",
            change=change,
            trend=_trend(change),
        ))
        previous = entry.weight
    items.reverse()
    return items


def _weight_range(weights) -> tuple:
    return float(np.min(weights)) - CHART_MARGIN, float(np.max(weights)) + CHART_MARGIN


def chart_points(entries: Sequence, width: int = 600, height: int = 250,
                 padding: int = 40) -> List[ChartPoint]:
    """Screen coordinates of the weight line; empty for fewer than two entries."""
    ordered = _chronological(entries)
    if len(ordered) < 2:
        return []

    weights = np.array([e.weight for e in ordered], dtype=float)
    low, high = _weight_range(weights)
    xs = np.linspace(padding, width - padding, len(ordered))
    # Heavier is drawn higher, i.e. with a smaller y
    ys = np.interp(weights, [low, high], [height - padding, padding])
    return [
        ChartPoint(x=round(float(x), 2), y=round(float(y), 2), weight=e.weight, date=e.date)
        for x, y, e in zip(xs, ys, ordered)
    ]


def chart_grid(entries: Sequence, height: int = 250, padding: int = 40) -> List[dict]:
    """Horizontal grid lines with their weight labels, top to bottom."""
    if len(entries) < 2:
        return []
    low, high = _weight_range([e.weight for e in entries])
    lines = []
    for pct in GRID_PERCENTAGES:
        y = padding + (pct / 100) * (height - padding * 2)
        weight = high - (pct / 100) * (high - low)
        lines.append({"y": round(y, 2), "label": f"{weight:.1f}"})
    return lines


def render_chart_svg(entries: Sequence, width: int = 600, height: int = 250,
                     padding: int = 40) -> Optional[str]:
    """SVG document for the progress chart, or None when there is nothing to draw."""
    points = chart_points(entries, width, height, padding)
    if not points:
        return None

    path = " ".join(f"{'M' if i == 0 else 'L'} {p.x} {p.y}" for i, p in enumerate(points))
    bottom = height - padding
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">',
        '<defs>'
        '<linearGradient id="lineGradient" x1="0%" y1="0%" x2="100%" y2="0%">'
        '<stop offset="0%" stop-color="#1B5E20" /><stop offset="100%" stop-color="#00E676" />'
        '</linearGradient>'
        '<linearGradient id="areaGradient" x1="0%" y1="0%" x2="0%" y2="100%">'
        '<stop offset="0%" stop-color="#1B5E20" /><stop offset="100%" stop-color="transparent" />'
        '</linearGradient>'
        '</defs>',
    ]
    for line in chart_grid(entries, height, padding):
        parts.append(
            f'<line x1="{padding}" y1="{line["y"]}" x2="{width - padding}" y2="{line["y"]}" '
            f'stroke="rgba(255,255,255,0.1)" />'
            f'<text x="{padding - 5}" y="{line["y"] + 4}" fill="#666" font-size="10" '
            f'text-anchor="end">{line["label"]}</text>'
        )
    parts.append(f'<path d="{path}" fill="none" stroke="url(#lineGradient)" stroke-width="3" />')
    parts.append(
        f'<path d="{path} L {points[-1].x} {bottom} L {points[0].x} {bottom} Z" '
        f'fill="url(#areaGradient)" opacity="0.3" />'
    )
    for p in points:
        parts.append(
            f'<circle cx="{p.x}" cy="{p.y}" r="6" fill="#1B5E20" stroke="#00E676" stroke-width="2" />'
        )
    parts.append('</svg>')
    return "".join(parts)
