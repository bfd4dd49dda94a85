from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.shared.time import (
    is_current_month,
    previous_month_window,
    resolve_month_window,
    split_into_weeks,
)

NOW = datetime(2025, 3, 15, 10, 30, tzinfo=timezone.utc)


def test_resolve_month_window_defaults_to_current_month() -> None:
    window = resolve_month_window(None, NOW)
    assert window.label == "2025-03"
    assert window.start == datetime(2025, 3, 1, tzinfo=timezone.utc)
    assert window.end == datetime(2025, 3, 31, 23, 59, 59, tzinfo=timezone.utc)
    assert is_current_month(window, NOW)


def test_resolve_month_window_february_non_leap() -> None:
    window = resolve_month_window("2025-02", NOW)
    assert window.end == datetime(2025, 2, 28, 23, 59, 59, tzinfo=timezone.utc)
    assert not is_current_month(window, NOW)


def test_resolve_month_window_february_leap() -> None:
    window = resolve_month_window("2024-02", NOW)
    assert window.end.day == 29


@pytest.mark.parametrize(
    ("month", "expected"),
    [
        ("2024", "2024-03"),
        ("2024-", "2024-03"),
        ("abc-07", "2025-07"),
        ("2024-13", "2024-03"),
        ("garbage", "2025-03"),
        ("", "2025-03"),
    ],
)
def test_resolve_month_window_falls_back_per_component(month: str, expected: str) -> None:
    assert resolve_month_window(month, NOW).label == expected


def test_previous_month_window_rolls_back_year() -> None:
    window = resolve_month_window("2025-01", NOW)
    previous = previous_month_window(window)
    assert previous.label == "2024-12"
    assert previous.start == datetime(2024, 12, 1, tzinfo=timezone.utc)
    assert previous.end == datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


def test_split_into_weeks_always_four_buckets() -> None:
    for month in ("2025-02", "2024-02", "2025-04", "2025-03"):
        weeks = split_into_weeks(resolve_month_window(month, NOW))
        assert [week.week for week in weeks] == [1, 2, 3, 4]


def test_split_into_weeks_leaves_tail_days_uncovered() -> None:
    window = resolve_month_window("2025-03", NOW)
    weeks = split_into_weeks(window)
    assert weeks[0].start == datetime(2025, 3, 1, tzinfo=timezone.utc)
    assert weeks[0].end == datetime(2025, 3, 7, 23, 59, 59, tzinfo=timezone.utc)
    assert weeks[1].start == datetime(2025, 3, 8, tzinfo=timezone.utc)
    assert weeks[3].end == datetime(2025, 3, 28, 23, 59, 59, tzinfo=timezone.utc)


def test_split_into_weeks_clamps_to_month_end() -> None:
    window = resolve_month_window("2025-02", NOW)
    weeks = split_into_weeks(window)
    assert weeks[3].end == window.end
