# tests/test_holiday_calendar.py
import threading
from datetime import date, timedelta

import pytest

from meeting_days.services.holiday_calendar import (
    HolidayCalendar,
    dutch_holidays,
    easter_sunday,
)


@pytest.mark.parametrize(
    "year,expected",
    [
        (2024, date(2024, 3, 31)),
        (2025, date(2025, 4, 20)),
        (2026, date(2026, 4, 5)),
        (2019, date(2019, 4, 21)),
        (2000, date(2000, 4, 23)),
        (2008, date(2008, 3, 23)),
        (2038, date(2038, 4, 25)),
    ],
)
def test_easter_sunday_known_dates(year, expected):
    assert easter_sunday(year) == expected


@pytest.mark.parametrize("month,day", [(1, 1), (4, 27), (5, 5), (12, 25), (12, 26)])
def test_fixed_holidays_are_recognised(holiday_calendar, month, day):
    for year in (2023, 2024, 2025):
        assert holiday_calendar.is_holiday(date(year, month, day))


@pytest.mark.parametrize(
    "day",
    [
        date(2024, 3, 29),  # Good Friday
        date(2024, 3, 31),  # Easter Sunday
        date(2024, 4, 1),   # Easter Monday
        date(2024, 5, 9),   # Ascension Day
        date(2024, 5, 19),  # Whit Sunday
        date(2024, 5, 20),  # Whit Monday
        date(2025, 4, 18),
        date(2025, 4, 21),
        date(2025, 5, 29),
        date(2025, 6, 8),
        date(2025, 6, 9),
        date(2026, 4, 3),
        date(2026, 4, 6),
        date(2026, 5, 14),
        date(2026, 5, 24),
        date(2026, 5, 25),
    ],
)
def test_easter_relative_holidays(holiday_calendar, day):
    assert holiday_calendar.is_holiday(day)


@pytest.mark.parametrize(
    "day",
    [
        date(2024, 4, 28),
        date(2024, 5, 6),
        date(2024, 12, 27),
        date(2024, 1, 2),
        date(2024, 4, 2),
        date(2024, 7, 15),
    ],
)
def test_days_after_holidays_are_not_holidays(holiday_calendar, day):
    assert holiday_calendar.is_holiday(day) is False
    assert holiday_calendar.holiday_name(day) is None


@pytest.mark.parametrize("year", range(2020, 2031))
def test_each_year_has_eleven_distinct_holidays(holiday_calendar, year):
    entries = holiday_calendar.holidays_for_year(year)

    assert len(entries) == 11
    assert len({e.date for e in entries}) == 11
    assert all(e.date.year == year for e in entries)

    # Count by brute force over the year as well.
    current = date(year, 1, 1)
    hits = 0
    while current.year == year:
        if holiday_calendar.is_holiday(current):
            hits += 1
        current += timedelta(days=1)
    assert hits == 11


def test_easter_offsets_relative_to_easter_sunday(holiday_calendar):
    for year in (2024, 2025, 2026):
        easter = easter_sunday(year)
        for offset in (-2, 0, 1, 39, 49, 50):
            assert holiday_calendar.is_holiday(easter + timedelta(days=offset))


def test_holiday_names(holiday_calendar):
    assert holiday_calendar.holiday_name(date(2024, 1, 1)) == "Nieuwjaarsdag"
    assert holiday_calendar.holiday_name(date(2024, 4, 27)) == "Koningsdag"
    assert holiday_calendar.holiday_name(date(2024, 5, 9)) == "Hemelvaartsdag"
    assert holiday_calendar.holiday_name(date(2024, 12, 26)) == "Tweede Kerstdag"


def test_holidays_for_year_sorted_by_date(holiday_calendar):
    entries = holiday_calendar.holidays_for_year(2024)

    dates = [e.date for e in entries]
    assert dates == sorted(dates)
    assert dates[0] == date(2024, 1, 1)
    assert dates[-1] == date(2024, 12, 26)
    assert all(e.name for e in entries)


def test_ascension_on_liberation_day_is_kept_once():
    """
    In 2016 Easter fell on March 27, putting Ascension Day on May 5.
    """
    holidays = dutch_holidays(2016)

    assert len(holidays) == 10
    name = holidays[date(2016, 5, 5)]
    assert "Bevrijdingsdag" in name
    assert "Hemelvaartsdag" in name


def test_results_are_cached_per_year(holiday_calendar):
    assert holiday_calendar.cached_years == []

    first = holiday_calendar.is_holiday(date(2024, 1, 1))
    second = holiday_calendar.is_holiday(date(2024, 1, 1))
    name1 = holiday_calendar.holiday_name(date(2024, 12, 25))
    name2 = holiday_calendar.holiday_name(date(2024, 12, 25))

    assert first is True and second is True
    assert name1 == name2 == "Eerste Kerstdag"
    assert holiday_calendar.cached_years == [2024]

    holiday_calendar.is_holiday(date(2025, 6, 1))
    assert holiday_calendar.cached_years == [2024, 2025]


def test_cached_year_is_computed_once(monkeypatch, holiday_calendar):
    from meeting_days.services import holiday_calendar as module

    calls = []
    original = module.dutch_holidays

    def _counting(year):
        calls.append(year)
        return original(year)

    monkeypatch.setattr(module, "dutch_holidays", _counting)

    for _ in range(5):
        holiday_calendar.is_holiday(date(2030, 1, 1))
        holiday_calendar.holiday_name(date(2030, 4, 27))
    holiday_calendar.holidays_for_year(2030)

    assert calls == [2030]


def test_concurrent_first_queries_compute_once(monkeypatch):
    from meeting_days.services import holiday_calendar as module

    calls = []
    original = module.dutch_holidays

    def _counting(year):
        calls.append(year)
        return original(year)

    monkeypatch.setattr(module, "dutch_holidays", _counting)

    calendar = HolidayCalendar()
    barrier = threading.Barrier(8)
    results = []

    def _worker():
        barrier.wait()
        results.append(calendar.is_holiday(date(2027, 12, 25)))

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results == [True] * 8
    assert calls == [2027]
