# meeting_days/schemas/calendar_event.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CalendarEvent(BaseModel):
    """
    A single concrete calendar occurrence, as supplied by an event source
    (Graph calendarView, Power Automate export, or an API caller).

    Recurring meetings are expected to be materialized into one
    CalendarEvent per occurrence upstream.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", description="Identifier of the event at its source.")
    subject: str = Field(
        ...,
        description="Event subject/title.",
        examples=["Storingsdienst"],
    )
    start_date_time: datetime = Field(
        ...,
        alias="startDateTime",
        description="Start of the event, wall-clock time as delivered by the source.",
        examples=["2024-01-15T10:00:00"],
    )
    end_date_time: datetime = Field(
        ...,
        alias="endDateTime",
        description=(
            "End of the event. A midnight end later than the start is read as "
            "an exclusive end date (the event's last day is the day before)."
        ),
        examples=["2024-01-15T11:00:00"],
    )
    is_all_day: bool = Field(
        False,
        alias="isAllDay",
        description="True if the source flagged the event as an all-day event.",
    )

    @field_validator("start_date_time", "end_date_time")
    @classmethod
    def drop_offset(cls, v: datetime) -> datetime:
        """Keep the wall-clock time and discard any UTC offset."""
        return v.replace(tzinfo=None)


class AnalysisRequest(BaseModel):
    """
    Request body for analysing caller-supplied events.
    """

    events: list[CalendarEvent] = Field(
        ...,
        description="Event occurrences to analyse.",
    )
    subject_filter: str | None = Field(
        None,
        description="Case-insensitive substring an event subject must contain.",
    )
    locale: str | None = Field(None, description="Locale for month names (nl/en).")
