"""Tests for trailing calendar-month windows."""

from datetime import date

import pytest

from bizledger_engines.periods import (
    MonthWindow,
    shift_month,
    trailing_months,
    window_bounds,
)


class TestShiftMonth:

    def test_within_year(self):
        assert shift_month(2024, 6, -2) == (2024, 4)

    def test_across_year_boundary(self):
        assert shift_month(2024, 2, -3) == (2023, 11)
        assert shift_month(2023, 12, 1) == (2024, 1)


class TestTrailingMonths:

    def test_six_months_ending_current(self):
        months = trailing_months(date(2024, 6, 15), 6)

        assert [m.key for m in months] == [
            (2024, 1), (2024, 2), (2024, 3), (2024, 4), (2024, 5), (2024, 6),
        ]
        assert [m.label for m in months] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]

    def test_spans_year_boundary(self):
        months = trailing_months(date(2024, 2, 10), 4)
        assert [m.key for m in months] == [(2023, 11), (2023, 12), (2024, 1), (2024, 2)]

    def test_single_month(self):
        assert trailing_months(date(2024, 6, 1), 1) == (MonthWindow(2024, 6),)

    def test_count_below_one_rejected(self):
        with pytest.raises(ValueError):
            trailing_months(date(2024, 6, 1), 0)


class TestWindowBounds:

    def test_bounds_cover_whole_months(self):
        start, end = window_bounds(trailing_months(date(2024, 2, 10), 3))
        assert start == date(2023, 12, 1)
        assert end == date(2024, 2, 29)

    def test_last_day(self):
        assert MonthWindow(2023, 2).last_day == date(2023, 2, 28)
        assert MonthWindow(2024, 12).last_day == date(2024, 12, 31)
