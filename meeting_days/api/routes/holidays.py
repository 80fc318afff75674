# meeting_days/api/routes/holidays.py
from datetime import date as date_type

from fastapi import APIRouter, Depends, Path, Query
from http import HTTPStatus

from meeting_days.api.dependencies.services import get_holiday_calendar
from meeting_days.schemas.holiday import HolidayCheck, HolidayEntry
from meeting_days.services.holiday_calendar import HolidayCalendar

router = APIRouter(
    prefix="/holidays",
    tags=["Holidays"],
)


@router.get(
    "/check",
    response_model=HolidayCheck,
    status_code=HTTPStatus.OK,
    summary="Check whether a date is a Dutch public holiday",
)
async def check_holiday(
    day: date_type = Query(
        ...,
        description="Date to check, in ISO format (YYYY-MM-DD).",
        examples=["2024-04-27"],
    ),
    holiday_calendar: HolidayCalendar = Depends(get_holiday_calendar),
) -> HolidayCheck:
    name = holiday_calendar.holiday_name(day)
    return HolidayCheck(date=day, is_holiday=name is not None, name=name)


@router.get(
    "/{year}",
    response_model=list[HolidayEntry],
    status_code=HTTPStatus.OK,
    summary="List Dutch public holidays of a year",
    description=(
        "Returns the eleven Dutch public holidays of the given year ordered by "
        "date: New Year's Day, Good Friday, Easter Sunday and Monday, King's Day, "
        "Liberation Day, Ascension Day, Whit Sunday and Monday, and both "
        "Christmas days."
    ),
)
async def list_holidays(
    year: int = Path(..., ge=1583, le=9999, description="Gregorian calendar year."),
    holiday_calendar: HolidayCalendar = Depends(get_holiday_calendar),
) -> list[HolidayEntry]:
    return holiday_calendar.holidays_for_year(year)
