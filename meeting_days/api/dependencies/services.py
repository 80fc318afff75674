# meeting_days/api/dependencies/services.py
from functools import lru_cache

from fastapi import Depends

from meeting_days.core.config import get_settings
from meeting_days.services.calendar_source import GraphCalendarSource
from meeting_days.services.graph_client import GraphNotConfiguredError, get_graph_client
from meeting_days.services.holiday_calendar import HolidayCalendar
from meeting_days.services.meeting_day_analyzer import MeetingDayAnalyzer


@lru_cache()
def get_holiday_calendar() -> HolidayCalendar:
    """
    Process-wide HolidayCalendar shared by every request.

    Holidays of a year never change once computed, so one cache serves the
    whole process.
    """
    return HolidayCalendar()


def get_meeting_day_analyzer(
    holiday_calendar: HolidayCalendar = Depends(get_holiday_calendar),
) -> MeetingDayAnalyzer:
    return MeetingDayAnalyzer(holiday_calendar)


def get_calendar_source() -> GraphCalendarSource:
    """
    Build a GraphCalendarSource from settings.

    Raises GraphNotConfiguredError when credentials or GRAPH_USER_ID are
    missing; routes translate this into 503.
    """
    settings = get_settings()
    if not settings.GRAPH_USER_ID:
        raise GraphNotConfiguredError(
            "GRAPH_USER_ID must be configured to read calendar events from Graph."
        )
    return GraphCalendarSource(get_graph_client(), user_id=settings.GRAPH_USER_ID)
