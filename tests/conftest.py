# tests/conftest.py
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from meeting_days.main import create_app
from meeting_days.schemas.calendar_event import CalendarEvent
from meeting_days.services.holiday_calendar import HolidayCalendar
from meeting_days.services.meeting_day_analyzer import MeetingDayAnalyzer


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all API tests.

    Uses the application factory so configuration stays test-friendly.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def holiday_calendar() -> HolidayCalendar:
    return HolidayCalendar()


@pytest.fixture
def analyzer(holiday_calendar) -> MeetingDayAnalyzer:
    return MeetingDayAnalyzer(holiday_calendar)


def _make_event(
    start: datetime,
    end: datetime,
    subject: str = "Storingsdienst",
    is_all_day: bool = False,
    event_id: str = "1",
) -> CalendarEvent:
    return CalendarEvent(
        id=event_id,
        subject=subject,
        start_date_time=start,
        end_date_time=end,
        is_all_day=is_all_day,
    )


@pytest.fixture
def make_event():
    """
    Factory fixture building CalendarEvent instances with sensible defaults.
    """
    return _make_event
