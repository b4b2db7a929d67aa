from datetime import datetime, timedelta, timezone

import pytest

from app.parsing.dates import UNKNOWN_MONTH, expand_year, month_name, resolve_date


def test_short_date_in_current_century():
    resolved = resolve_date("020225")

    assert resolved.iso_date == "2025-02-02"
    assert resolved.month_name == "Февраль"
    assert resolved.year == "2025"


@pytest.mark.parametrize(
    "raw, iso, month, year",
    [
        ("150499", "1999-04-15", "Апрель", "1999"),
        ("010150", "1950-01-01", "Январь", "1950"),
        ("311249", "2049-12-31", "Декабрь", "2049"),
        ("010100", "2000-01-01", "Январь", "2000"),
    ],
)
def test_century_threshold(raw, iso, month, year):
    resolved = resolve_date(raw)

    assert (resolved.iso_date, resolved.month_name, resolved.year) == (iso, month, year)


@pytest.mark.parametrize(
    "raw, iso",
    [
        ("310225", "2025-03-03"),
        ("011325", "2026-01-01"),
        ("001325", "2025-12-31"),
        ("000125", "2024-12-31"),
    ],
)
def test_out_of_range_day_and_month_roll_over(raw, iso):
    assert resolve_date(raw).iso_date == iso


def test_missing_date_uses_now():
    now = datetime(2025, 7, 14, 23, 30, tzinfo=timezone.utc)

    resolved = resolve_date(None, now=now)

    assert resolved.iso_date == "2025-07-14"
    assert resolved.month_name == "Июль"
    assert resolved.year == "2025"


def test_missing_date_is_taken_in_utc():
    now = datetime(2025, 7, 15, 1, 0, tzinfo=timezone(timedelta(hours=3)))

    assert resolve_date(None, now=now).iso_date == "2025-07-14"


def test_month_name_table():
    assert month_name(1) == "Январь"
    assert month_name(12) == "Декабрь"
    assert month_name(0) == UNKNOWN_MONTH
    assert month_name(13) == UNKNOWN_MONTH


def test_expand_year():
    assert expand_year(0) == 2000
    assert expand_year(49) == 2049
    assert expand_year(50) == 1950
    assert expand_year(99) == 1999
