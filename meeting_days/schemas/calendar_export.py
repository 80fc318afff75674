# meeting_days/schemas/calendar_export.py
from datetime import date as date_type

from pydantic import BaseModel, Field


class ImportRequest(BaseModel):
    """
    Request body for analysing a Power Automate calendar export.
    """

    content: str = Field(
        ...,
        description=(
            "Raw JSON text of the export: an object with an `events` array whose "
            "items carry `subject`, `start.dateTime`, `end.dateTime` and `isAllDay`."
        ),
    )
    subject_filter: str | None = Field(
        None,
        description="Case-insensitive substring an event subject must contain.",
        examples=["Storingsdienst"],
    )
    start_date: date_type = Field(
        ...,
        description="First day (inclusive) of the window events must overlap.",
        examples=["2024-01-01"],
    )
    end_date: date_type = Field(
        ...,
        description="Last day (inclusive) of the window events must overlap.",
        examples=["2024-12-31"],
    )
    locale: str | None = Field(None, description="Locale for month names (nl/en).")


class SubjectsRequest(BaseModel):
    """
    Request body for listing recurring subjects of an export.
    """

    content: str = Field(..., description="Raw JSON text of the export.")


class RecurringSubjects(BaseModel):
    subjects: list[str] = Field(
        ...,
        description="Subjects occurring more than once, sorted case-insensitively.",
    )
