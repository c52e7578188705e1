"""
GitHub-style activity heatmap.
Turns the sparse activity log (only days with solved tasks) into a dense,
Monday-aligned grid of the last HEATMAP_WEEKS weeks with intensity tiers.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from pydantic import BaseModel

from stats.schemas import ActivityPoint

HEATMAP_WEEKS = 20
DAYS_PER_WEEK = 7
HEATMAP_DAYS = HEATMAP_WEEKS * DAYS_PER_WEEK

# (exclusive lower bound, tier); checked in ascending order, last match wins
TIER_THRESHOLDS = (
    (0, 1),    # 1-5
    (5, 2),    # 6-15
    (15, 3),   # 16-30
    (30, 4),   # 31+
)


class HeatmapCell(BaseModel):
    date: str
    count: int
    tier: int


def tier_for(count: int) -> int:
    tier = 0
    for bound, value in TIER_THRESHOLDS:
        if count > bound:
            tier = value
    return tier


def window_start(today: date) -> date:
    """First day of the grid: HEATMAP_DAYS back from today, then back to Monday."""
    start = today - timedelta(days=HEATMAP_DAYS)
    return start - timedelta(days=start.weekday())


def build_heatmap(points: Iterable[ActivityPoint], today: date) -> list[HeatmapCell]:
    counts: dict[str, int] = {}
    for p in points:
        counts.setdefault(p.date, p.count)

    start = window_start(today)
    cells = []
    for i in range(HEATMAP_DAYS):
        day = (start + timedelta(days=i)).isoformat()
        count = counts.get(day, 0)
        cells.append(HeatmapCell(date=day, count=count, tier=tier_for(count)))
    return cells


def weeks(cells: list[HeatmapCell]) -> list[list[HeatmapCell]]:
    """Split the flat grid into week columns, Monday first."""
    return [cells[i:i + DAYS_PER_WEEK] for i in range(0, len(cells), DAYS_PER_WEEK)]
