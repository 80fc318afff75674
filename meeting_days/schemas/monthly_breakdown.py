# meeting_days/schemas/monthly_breakdown.py
from enum import Enum

from pydantic import BaseModel, Field


class DayCategory(str, Enum):
    """
    Classification of a single meeting day.

    Precedence when several apply: HOLIDAY > WEEKEND > WEEKDAY.
    """

    HOLIDAY = "HOLIDAY"
    WEEKEND = "WEEKEND"
    WEEKDAY = "WEEKDAY"


class MonthlyBreakdown(BaseModel):
    """
    Distinct meeting days of one (year, month) period, split by category.
    """

    year: int = Field(..., description="Calendar year.", examples=[2024])
    month: int = Field(..., ge=1, le=12, description="Month number (1-12).", examples=[1])
    month_name: str = Field(
        ...,
        description="Human-readable month name in the requested locale.",
        examples=["januari"],
    )

    total_meeting_days: int = Field(
        ...,
        description="Number of distinct calendar days with at least one event.",
        examples=[10],
    )
    weekday_count: int = Field(
        ...,
        description="Meeting days on Monday-Friday that are not public holidays.",
        examples=[8],
    )
    weekend_count: int = Field(
        ...,
        description="Meeting days on Saturday or Sunday that are not public holidays.",
        examples=[1],
    )
    saturday_count: int = Field(
        0,
        description="Part of weekend_count falling on a Saturday.",
        examples=[1],
    )
    sunday_count: int = Field(
        0,
        description="Part of weekend_count falling on a Sunday.",
        examples=[0],
    )
    holiday_count: int = Field(
        ...,
        description="Meeting days on a public holiday, regardless of weekday.",
        examples=[1],
    )


class MeetingDaysReport(BaseModel):
    """
    Envelope returned by the analysis endpoints.
    """

    subject_filter: str | None = Field(
        None,
        description="Subject filter applied when selecting events, if any.",
    )
    locale: str = Field(..., description="Locale used for month names.", examples=["nl"])
    total_meeting_days: int = Field(
        ...,
        description="Sum of total_meeting_days over all months.",
    )
    months: list[MonthlyBreakdown] = Field(
        ...,
        description="Monthly breakdowns, most recent period first.",
    )
