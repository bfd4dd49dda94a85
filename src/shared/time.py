from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from src.core.config import get_settings

WEEKS_PER_MONTH = 4


@dataclass(frozen=True)
class MonthWindow:
    year: int
    month: int
    start: datetime
    end: datetime

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class WeekWindow:
    week: int
    start: datetime
    end: datetime


def now_in_report_timezone() -> datetime:
    return datetime.now(ZoneInfo(get_settings().report_timezone))


def month_window(year: int, month: int, tz=None) -> MonthWindow:
    last_day = calendar.monthrange(year, month)[1]
    return MonthWindow(
        year=year,
        month=month,
        start=datetime(year, month, 1, tzinfo=tz),
        end=datetime(year, month, last_day, 23, 59, 59, tzinfo=tz),
    )


def resolve_month_window(month: Optional[str], now: datetime) -> MonthWindow:
    """Resolve a ``YYYY-MM`` selector to its calendar month.

    Never fails: a missing or unparseable component falls back to the
    matching component of ``now``.
    """
    year = now.year
    month_number = now.month
    if month:
        parts = month.strip().split("-")
        parsed_year = _parse_component(parts[0] if parts else None, 1900, 9999)
        parsed_month = _parse_component(parts[1] if len(parts) > 1 else None, 1, 12)
        if parsed_year is not None:
            year = parsed_year
        if parsed_month is not None:
            month_number = parsed_month
    return month_window(year, month_number, now.tzinfo)


def previous_month_window(window: MonthWindow) -> MonthWindow:
    year, month = _add_months(window.year, window.month, -1)
    return month_window(year, month, window.start.tzinfo)


def is_current_month(window: MonthWindow, now: datetime) -> bool:
    return window.year == now.year and window.month == now.month


def split_into_weeks(window: MonthWindow, count: int = WEEKS_PER_MONTH) -> List[WeekWindow]:
    # Each bucket spans seven days from the month start; days past the last
    # bucket (29-31) are left uncovered.
    weeks: List[WeekWindow] = []
    for index in range(count):
        week_start = window.start + timedelta(days=7 * index)
        week_end = week_start + timedelta(days=7) - timedelta(seconds=1)
        if week_end > window.end:
            week_end = window.end
        weeks.append(WeekWindow(week=index + 1, start=week_start, end=week_end))
    return weeks


def _parse_component(value: Optional[str], minimum: int, maximum: int) -> Optional[int]:
    if value is None:
        return None
    try:
        parsed = int(value.strip())
    except ValueError:
        return None
    if parsed < minimum or parsed > maximum:
        return None
    return parsed


def _add_months(year: int, month: int, months: int) -> tuple[int, int]:
    month_index = month - 1 + months
    return year + month_index // 12, month_index % 12 + 1
