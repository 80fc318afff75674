# meeting_days/schemas/holiday.py
from datetime import date as date_type

from pydantic import BaseModel, Field


class HolidayEntry(BaseModel):
    """
    A public holiday on a specific date.
    """

    date: date_type = Field(..., description="Date of the holiday.", examples=["2024-04-27"])
    name: str = Field(..., description="Human-readable holiday name.", examples=["Koningsdag"])


class HolidayCheck(BaseModel):
    """
    Result of checking a single date against the holiday calendar.
    """

    date: date_type
    is_holiday: bool
    name: str | None = None
