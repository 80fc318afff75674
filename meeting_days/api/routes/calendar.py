# meeting_days/api/routes/calendar.py
from datetime import date as date_type, datetime, time, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status
from http import HTTPStatus

from meeting_days.api.dependencies.api_key_auth import verify_api_key
from meeting_days.api.dependencies.services import (
    get_calendar_source,
    get_meeting_day_analyzer,
)
from meeting_days.schemas.monthly_breakdown import MeetingDaysReport
from meeting_days.services.calendar_source import GraphCalendarSource
from meeting_days.services.meeting_day_analyzer import MeetingDayAnalyzer
from meeting_days.services.report_builder import build_report

router = APIRouter(
    prefix="/calendar",
    tags=["Calendar"],
    dependencies=[Depends(verify_api_key)],
)


@router.get(
    "/meetings",
    response_model=MeetingDaysReport,
    status_code=HTTPStatus.OK,
    summary="Analyse meeting days straight from the configured Graph calendar",
    description=(
        "Reads the calendarView of `GRAPH_USER_ID` for the inclusive date window, "
        "keeps events whose subject contains `subject`, and returns the monthly "
        "meeting-day breakdown.\n\n"
        "Protected via the `X-Api-Key` header when configured."
    ),
    responses={
        401: {"description": "Missing/invalid API key, or Graph rejected the credentials."},
        403: {"description": "The Graph app registration lacks calendar permissions."},
        429: {"description": "Graph is throttling requests."},
        502: {"description": "Graph returned an unexpected error."},
        503: {"description": "Graph is not configured for this deployment."},
    },
)
async def get_meeting_days(
    start_date: date_type = Query(
        ...,
        description="First day (inclusive) of the window, YYYY-MM-DD.",
        examples=["2024-01-01"],
    ),
    end_date: date_type = Query(
        ...,
        description="Last day (inclusive) of the window, YYYY-MM-DD.",
        examples=["2024-12-31"],
    ),
    subject: str | None = Query(
        default=None,
        description="Case-insensitive substring the event subject must contain.",
        examples=["Storingsdienst"],
    ),
    locale: str | None = Query(default=None, description="Locale for month names (nl/en)."),
    source: GraphCalendarSource = Depends(get_calendar_source),
    analyzer: MeetingDayAnalyzer = Depends(get_meeting_day_analyzer),
) -> MeetingDaysReport:
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must be greater than or equal to start_date",
        )

    window_start = datetime.combine(start_date, time.min)
    window_end = datetime.combine(end_date + timedelta(days=1), time.min)

    events = await source.get_meetings_by_subject(subject, window_start, window_end)
    return build_report(analyzer, events, subject_filter=subject, locale=locale)
