"""Commit frequency buckets and the weekday x hour activity heatmap."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional, Union

import numpy as np

from ..models import CommitFrequency

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24


def weekday_index(when: Union[date, datetime]) -> int:
    """Heatmap row: 0=Sunday .. 6=Saturday."""
    return (when.weekday() + 1) % DAYS_PER_WEEK


def month_key(when: Union[date, datetime]) -> str:
    return f"{when.year:04d}-{when.month:02d}"


def iso_week_key(when: Union[date, datetime]) -> str:
    """ISO-8601 week label, e.g. ``2023-W52``.

    Shifts the date to the Thursday of its Monday-start week, then counts
    whole weeks from January 4th of that Thursday's year (January 4th is
    always in week 1). Works on calendar dates, so the time of day never
    moves a commit into a neighbouring week.

    >>> iso_week_key(date(2021, 1, 3))
    '2020-W53'
    """
    day = when.date() if isinstance(when, datetime) else when
    day_number = (weekday_index(day) + 6) % DAYS_PER_WEEK  # Monday=0
    thursday = day + timedelta(days=3 - day_number)
    week_one = date(thursday.year, 1, 4)
    diff_days = (thursday - week_one).days
    week = 1 + math.floor(diff_days / DAYS_PER_WEEK + 0.5)
    return f"{thursday.year:04d}-W{week:02d}"


def heatmap_slot(when: datetime) -> tuple[int, int]:
    """(weekday, hour) using the timestamp's own wall clock."""
    return weekday_index(when), when.hour


def slot_label(weekday: int, hour: int) -> str:
    return f"{weekday}-{hour}"


@dataclass
class TemporalActivity:
    """Frequency counters for one analysis run.

    Undated commits are ignored rather than counted in any bucket.
    """

    monthly: Counter[str] = field(default_factory=Counter)
    weekly: Counter[str] = field(default_factory=Counter)
    heatmap: np.ndarray = field(
        default_factory=lambda: np.zeros((DAYS_PER_WEEK, HOURS_PER_DAY), dtype=np.int64)
    )

    def record(self, when: Optional[datetime]) -> None:
        if when is None:
            return
        self.monthly[month_key(when)] += 1
        self.weekly[iso_week_key(when)] += 1
        weekday, hour = heatmap_slot(when)
        self.heatmap[weekday, hour] += 1

    @property
    def total(self) -> int:
        return int(self.heatmap.sum())

    def frequency(self) -> CommitFrequency:
        return CommitFrequency(monthly=dict(self.monthly), weekly=dict(self.weekly))

    def heatmap_grid(self) -> list[list[int]]:
        """Heatmap as plain nested lists (7 rows of 24 ints)."""
        return [[int(v) for v in row] for row in self.heatmap.tolist()]
