# meeting_days/services/report_builder.py
from __future__ import annotations

from typing import Iterable, List

from meeting_days.schemas.calendar_event import CalendarEvent
from meeting_days.schemas.monthly_breakdown import MeetingDaysReport
from meeting_days.services.meeting_day_analyzer import MeetingDayAnalyzer
from meeting_days.services.month_names import resolve_locale


def filter_by_subject(
    events: Iterable[CalendarEvent],
    subject_filter: str | None,
) -> List[CalendarEvent]:
    """
    Keep events whose subject contains `subject_filter` (case-insensitive).

    A blank filter keeps everything.
    """
    needle = (subject_filter or "").strip().lower()
    if not needle:
        return list(events)
    return [ev for ev in events if needle in ev.subject.lower()]


def build_report(
    analyzer: MeetingDayAnalyzer,
    events: Iterable[CalendarEvent],
    subject_filter: str | None = None,
    locale: str | None = None,
) -> MeetingDaysReport:
    """
    Filter `events` by subject, analyse them and wrap the result.

    Returns
    -------
    MeetingDaysReport
        Monthly breakdowns (most recent first) plus the grand total of
        meeting days and the locale actually used for month names.
    """
    language = resolve_locale(locale)
    selected = filter_by_subject(events, subject_filter)
    months = analyzer.analyze(selected, locale=language)

    return MeetingDaysReport(
        subject_filter=(subject_filter or None),
        locale=language,
        total_meeting_days=sum(m.total_meeting_days for m in months),
        months=months,
    )
