# meeting_days/services/holiday_calendar.py
from __future__ import annotations

import logging
import threading
from datetime import date as date_type, timedelta
from typing import Dict

from meeting_days.schemas.holiday import HolidayEntry

logger = logging.getLogger(__name__)

# (month, day, name)
FIXED_HOLIDAYS: tuple[tuple[int, int, str], ...] = (
    (1, 1, "Nieuwjaarsdag"),
    (4, 27, "Koningsdag"),
    (5, 5, "Bevrijdingsdag"),
    (12, 25, "Eerste Kerstdag"),
    (12, 26, "Tweede Kerstdag"),
)

# (days relative to Easter Sunday, name)
EASTER_RELATIVE_HOLIDAYS: tuple[tuple[int, str], ...] = (
    (-2, "Goede Vrijdag"),
    (0, "Eerste Paasdag"),
    (1, "Tweede Paasdag"),
    (39, "Hemelvaartsdag"),
    (49, "Eerste Pinksterdag"),
    (50, "Tweede Pinksterdag"),
)


def easter_sunday(year: int) -> date_type:
    """
    Return Easter Sunday for the given Gregorian year.

    Meeus/Jones/Butcher algorithm. Every division truncates; all operands
    are non-negative for positive years, so floor division is equivalent.
    """
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return date_type(year, month, day)


def dutch_holidays(year: int) -> Dict[date_type, str]:
    """
    Build the date -> name map of Dutch public holidays for `year`.

    Eleven dates in most years. When Easter falls on March 27 (e.g. 2016),
    Ascension Day coincides with Liberation Day; the date is kept once and
    its name lists both.
    """
    holidays: Dict[date_type, str] = {
        date_type(year, month, day): name for month, day, name in FIXED_HOLIDAYS
    }

    easter = easter_sunday(year)
    for offset, name in EASTER_RELATIVE_HOLIDAYS:
        day = easter + timedelta(days=offset)
        if day in holidays:
            holidays[day] = f"{holidays[day]} / {name}"
        else:
            holidays[day] = name

    return holidays


class HolidayCalendar:
    """
    Answers "is this date a public holiday" for the Netherlands.

    Holidays are computed once per year on first query and kept for the
    lifetime of the instance. Share a single instance across callers; the
    API layer does this through `get_holiday_calendar()`.

    Thread safety
    -------------
    Population of a year is guarded by a lock with a double-checked lookup,
    so concurrent first queries for the same year compute it once. Cached
    maps are never mutated after insertion, so reads need no lock.
    """

    def __init__(self) -> None:
        self._cache: Dict[int, Dict[date_type, str]] = {}
        self._lock = threading.Lock()

    def _holidays(self, year: int) -> Dict[date_type, str]:
        holidays = self._cache.get(year)
        if holidays is not None:
            return holidays

        with self._lock:
            holidays = self._cache.get(year)
            if holidays is None:
                holidays = dutch_holidays(year)
                self._cache[year] = holidays
                logger.debug("Computed %d holidays for year %d", len(holidays), year)
        return holidays

    def is_holiday(self, day: date_type) -> bool:
        return day in self._holidays(day.year)

    def holiday_name(self, day: date_type) -> str | None:
        """
        Return the holiday name for `day`, or None if it is not a holiday.
        """
        return self._holidays(day.year).get(day)

    def holidays_for_year(self, year: int) -> list[HolidayEntry]:
        """
        Return all holidays of `year` ordered by date.
        """
        return [
            HolidayEntry(date=day, name=name)
            for day, name in sorted(self._holidays(year).items())
        ]

    @property
    def cached_years(self) -> list[int]:
        return sorted(self._cache)
