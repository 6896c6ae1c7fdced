"""
bizledger_engines.periods -- Calendar month windows for trend reports.

Responsibility:
    Build the trailing window of calendar months ending with a given
    month, and the date bounds of that window.  Trend reports seed one
    bucket per month from here before folding in aggregated rows, so a
    month without activity still appears with zeros.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  "Today" is a parameter.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True, slots=True)
class MonthWindow:
    year: int
    month: int

    @property
    def label(self) -> str:
        return MONTH_LABELS[self.month - 1]

    @property
    def key(self) -> tuple[int, int]:
        return (self.year, self.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` calendar months from (year, month)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def trailing_months(today: date, count: int) -> tuple[MonthWindow, ...]:
    """
    The ``count`` calendar months ending with ``today``'s month, oldest first.

    Raises:
        ValueError: count < 1.
    """
    if count < 1:
        raise ValueError("count must be at least 1")
    return tuple(
        MonthWindow(*shift_month(today.year, today.month, offset))
        for offset in range(-(count - 1), 1)
    )


def window_bounds(months: tuple[MonthWindow, ...]) -> tuple[date, date]:
    """First day of the oldest month and last day of the newest."""
    return months[0].first_day, months[-1].last_day
