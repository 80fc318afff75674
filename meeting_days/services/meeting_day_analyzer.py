# meeting_days/services/meeting_day_analyzer.py
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date as date_type, time, timedelta
from typing import Dict, Iterable, List, Set

from meeting_days.schemas.calendar_event import CalendarEvent
from meeting_days.schemas.monthly_breakdown import DayCategory, MonthlyBreakdown
from meeting_days.services.holiday_calendar import HolidayCalendar
from meeting_days.services.month_names import format_month_name, resolve_locale

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)
_SATURDAY = 5
_SUNDAY = 6


def month_key(day: date_type) -> int:
    """
    Canonical integer key of the (year, month) a day belongs to.

    Keys order the same way as (year, month) pairs.
    """
    return day.year * 12 + (day.month - 1)


def has_exclusive_end(event: CalendarEvent) -> bool:
    """
    True if the event's end timestamp marks the start of the day after its
    last day, as calendar APIs do for all-day events.

    Detected purely from the end timestamp: exactly midnight and later than
    the start. `is_all_day` is not consulted.
    """
    return (
        event.end_date_time.time() == time.min
        and event.end_date_time > event.start_date_time
    )


def expand_event_days(event: CalendarEvent) -> List[date_type]:
    """
    Return every calendar day covered by `event`, in order.

    An event ending before it starts covers no days.
    """
    current = event.start_date_time.date()
    end_day = event.end_date_time.date()
    if has_exclusive_end(event):
        end_day -= _ONE_DAY

    days: List[date_type] = []
    while current <= end_day:
        days.append(current)
        current += _ONE_DAY
    return days


class MeetingDayAnalyzer:
    """
    Turns a list of calendar events into monthly breakdowns of distinct
    meeting days.

    Steps
    -----
    1) Expand every event into the calendar days it covers.
    2) Collect the days into one set per (year, month), so a day touched by
       several events counts once.
    3) Classify each day:
        - public holiday          => HOLIDAY (even on a weekend)
        - Saturday or Sunday      => WEEKEND
        - anything else           => WEEKDAY
    4) Emit one MonthlyBreakdown per month, most recent month first.

    The analyzer keeps no state between calls; the injected HolidayCalendar
    is only read.
    """

    def __init__(self, holiday_calendar: HolidayCalendar) -> None:
        self.holiday_calendar = holiday_calendar

    def classify_day(self, day: date_type) -> DayCategory:
        if self.holiday_calendar.is_holiday(day):
            return DayCategory.HOLIDAY
        if day.weekday() in (_SATURDAY, _SUNDAY):
            return DayCategory.WEEKEND
        return DayCategory.WEEKDAY

    def analyze(
        self,
        events: Iterable[CalendarEvent],
        locale: str | None = None,
    ) -> List[MonthlyBreakdown]:
        """
        Build the monthly breakdown of distinct meeting days for `events`.

        Parameters
        ----------
        events:
            Concrete event occurrences. Reversed ranges contribute no days.
        locale:
            Locale for `month_name` (defaults to DEFAULT_LOCALE).
        """
        days_by_month: Dict[int, Set[date_type]] = defaultdict(set)

        event_count = 0
        for event in events:
            event_count += 1
            for day in expand_event_days(event):
                days_by_month[month_key(day)].add(day)

        language = resolve_locale(locale)
        results: List[MonthlyBreakdown] = []

        for key in sorted(days_by_month, reverse=True):
            days = days_by_month[key]
            year, month_index = divmod(key, 12)

            counts = {
                DayCategory.HOLIDAY: 0,
                DayCategory.WEEKEND: 0,
                DayCategory.WEEKDAY: 0,
            }
            saturdays = 0
            sundays = 0

            for day in days:
                category = self.classify_day(day)
                counts[category] += 1
                if category is DayCategory.WEEKEND:
                    if day.weekday() == _SATURDAY:
                        saturdays += 1
                    else:
                        sundays += 1

            results.append(
                MonthlyBreakdown(
                    year=year,
                    month=month_index + 1,
                    month_name=format_month_name(month_index + 1, language),
                    total_meeting_days=len(days),
                    weekday_count=counts[DayCategory.WEEKDAY],
                    weekend_count=counts[DayCategory.WEEKEND],
                    saturday_count=saturdays,
                    sunday_count=sundays,
                    holiday_count=counts[DayCategory.HOLIDAY],
                )
            )

        logger.info(
            "Analyzed %d events into %d meeting days across %d months",
            event_count,
            sum(b.total_meeting_days for b in results),
            len(results),
        )
        return results
