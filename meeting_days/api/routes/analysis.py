# meeting_days/api/routes/analysis.py
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from http import HTTPStatus

from meeting_days.api.dependencies.services import get_meeting_day_analyzer
from meeting_days.core.config import get_settings
from meeting_days.schemas.calendar_event import AnalysisRequest
from meeting_days.schemas.calendar_export import (
    ImportRequest,
    RecurringSubjects,
    SubjectsRequest,
)
from meeting_days.schemas.monthly_breakdown import MeetingDaysReport
from meeting_days.services.excel_export import generate_excel_report
from meeting_days.services.json_import import parse_export, recurring_subjects
from meeting_days.services.meeting_day_analyzer import MeetingDayAnalyzer
from meeting_days.services.report_builder import build_report

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

router = APIRouter(
    prefix="/analysis",
    tags=["Analysis"],
)


def _check_import_size(content: str) -> None:
    limit = get_settings().MAX_IMPORT_SIZE_BYTES
    if len(content.encode("utf-8")) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Calendar export exceeds the maximum size of {limit} bytes.",
        )


@router.post(
    "",
    response_model=MeetingDaysReport,
    status_code=HTTPStatus.OK,
    summary="Break caller-supplied events down into monthly meeting days",
    description=(
        "Expands every event into the calendar days it covers, counts each "
        "distinct day once, and classifies it as holiday, weekend or weekday "
        "(Dutch public holidays take precedence over weekends).\n\n"
        "An end timestamp at exactly midnight, later than the start, is read as "
        "an exclusive end date: the event's last day is the day before.\n\n"
        "Months are returned most recent first."
    ),
    responses={
        200: {
            "description": "Breakdown successfully computed.",
            "content": {
                "application/json": {
                    "example": {
                        "subject_filter": "Storingsdienst",
                        "locale": "nl",
                        "total_meeting_days": 4,
                        "months": [
                            {
                                "year": 2024,
                                "month": 1,
                                "month_name": "januari",
                                "total_meeting_days": 4,
                                "weekday_count": 2,
                                "weekend_count": 2,
                                "saturday_count": 1,
                                "sunday_count": 1,
                                "holiday_count": 0,
                            }
                        ],
                    }
                }
            },
        },
        422: {"description": "Validation error (e.g. malformed timestamps)."},
    },
)
async def analyze_events(
    payload: AnalysisRequest,
    analyzer: MeetingDayAnalyzer = Depends(get_meeting_day_analyzer),
) -> MeetingDaysReport:
    return build_report(
        analyzer,
        payload.events,
        subject_filter=payload.subject_filter,
        locale=payload.locale,
    )


@router.post(
    "/import",
    response_model=MeetingDaysReport,
    status_code=HTTPStatus.OK,
    summary="Analyse a Power Automate calendar export",
    description=(
        "Parses a Power Automate JSON export, keeps events whose subject contains "
        "`subject_filter` (case-insensitive) and which overlap the inclusive "
        "`start_date`..`end_date` window, then returns the monthly breakdown.\n\n"
        "Events with missing or unparseable start/end timestamps are skipped."
    ),
    responses={
        400: {"description": "Empty content or invalid JSON."},
        413: {"description": "Export larger than MAX_IMPORT_SIZE_BYTES."},
    },
)
async def analyze_import(
    payload: ImportRequest,
    analyzer: MeetingDayAnalyzer = Depends(get_meeting_day_analyzer),
) -> MeetingDaysReport:
    if payload.end_date < payload.start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must be greater than or equal to start_date",
        )
    _check_import_size(payload.content)

    try:
        events = parse_export(
            payload.content,
            payload.subject_filter,
            payload.start_date,
            payload.end_date,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return build_report(
        analyzer,
        events,
        subject_filter=payload.subject_filter,
        locale=payload.locale,
    )


@router.post(
    "/import/subjects",
    response_model=RecurringSubjects,
    status_code=HTTPStatus.OK,
    summary="List recurring subjects in a calendar export",
    description=(
        "Returns subjects that occur more than once in the export, grouped "
        "case-insensitively and sorted alphabetically. Useful for offering "
        "subject-filter suggestions. Invalid content yields an empty list."
    ),
)
async def list_recurring_subjects(payload: SubjectsRequest) -> RecurringSubjects:
    _check_import_size(payload.content)
    return RecurringSubjects(subjects=recurring_subjects(payload.content))


@router.post(
    "/export",
    status_code=HTTPStatus.OK,
    summary="Download the monthly breakdown as an Excel workbook",
    response_class=Response,
    responses={
        200: {
            "description": "Excel workbook with one row per month.",
            "content": {XLSX_MEDIA_TYPE: {}},
        }
    },
)
async def export_excel(
    payload: AnalysisRequest,
    analyzer: MeetingDayAnalyzer = Depends(get_meeting_day_analyzer),
) -> Response:
    report = build_report(
        analyzer,
        payload.events,
        subject_filter=payload.subject_filter,
        locale=payload.locale,
    )
    content = generate_excel_report(report.months, payload.subject_filter or "")

    filename = f"meeting-days-{datetime.now():%Y%m%d-%H%M%S}.xlsx"
    logger.info("Generated Excel report %s with %d month rows", filename, len(report.months))
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
