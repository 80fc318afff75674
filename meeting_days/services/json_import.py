# meeting_days/services/json_import.py
from __future__ import annotations

import json
import logging
import uuid
from datetime import date as date_type
from typing import Any, Dict, List

from meeting_days.schemas.calendar_event import CalendarEvent
from meeting_days.services.graph_datetime import parse_graph_datetime

logger = logging.getLogger(__name__)


class ImportFormatError(ValueError):
    """
    Raised when a calendar export is not valid JSON.
    """


def _lower_keys(obj: Any) -> Any:
    """
    Return `obj` with dictionary keys lower-cased, so property lookups are
    case-insensitive ('Subject', 'subject' and 'SUBJECT' are the same).
    """
    if isinstance(obj, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_lower_keys(v) for v in obj]
    return obj


def _load_events(content: str) -> List[Dict[str, Any]]:
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ImportFormatError(f"Invalid JSON format: {exc.msg}") from exc

    payload = _lower_keys(payload)
    if not isinstance(payload, dict):
        raise ImportFormatError("Invalid JSON format: expected an object at the top level")

    events = payload.get("events") or []
    if not isinstance(events, list):
        raise ImportFormatError("Invalid JSON format: 'events' must be an array")

    return [ev for ev in events if isinstance(ev, dict)]


def parse_export(
    content: str,
    subject_filter: str | None,
    start_date: date_type,
    end_date: date_type,
) -> List[CalendarEvent]:
    """
    Convert a Power Automate calendar export into CalendarEvents.

    Rules
    -----
    - Empty content raises ValueError; malformed JSON raises ImportFormatError.
    - A document without an `events` array yields no events.
    - Events missing start/end, or with an unparseable dateTime, are skipped.
    - With a subject filter, only subjects containing it (case-insensitive)
      are kept.
    - Events are kept when they overlap [start_date, end_date].
    - Every kept event gets a freshly generated id.
    """
    if content is None or not content.strip():
        raise ValueError("JSON content cannot be empty")

    needle = (subject_filter or "").strip().lower()
    results: List[CalendarEvent] = []
    skipped = 0

    for raw_event in _load_events(content):
        subject = raw_event.get("subject") or ""
        if not isinstance(subject, str):
            subject = str(subject)

        start_dt = parse_graph_datetime(raw_event.get("start"))
        end_dt = parse_graph_datetime(raw_event.get("end"))
        if start_dt is None or end_dt is None:
            skipped += 1
            logger.debug("Skipping export event %r without a valid start/end", subject)
            continue

        if needle and needle not in subject.lower():
            continue

        if start_dt.date() > end_date or end_dt.date() < start_date:
            continue

        results.append(
            CalendarEvent(
                id=str(uuid.uuid4()),
                subject=subject,
                start_date_time=start_dt,
                end_date_time=end_dt,
                is_all_day=bool(raw_event.get("isallday", False)),
            )
        )

    logger.info(
        "Imported %d events from calendar export (%d skipped as malformed)",
        len(results),
        skipped,
    )
    return results


def recurring_subjects(content: str | None) -> List[str]:
    """
    Return subjects that occur more than once in an export.

    Subjects are grouped case-insensitively; each group is reported with the
    casing of its first occurrence. Blank subjects are ignored. Empty or
    malformed content yields an empty list.
    """
    if content is None or not content.strip():
        return []

    try:
        events = _load_events(content)
    except ImportFormatError:
        return []

    first_seen: Dict[str, str] = {}
    counts: Dict[str, int] = {}

    for raw_event in events:
        subject = raw_event.get("subject")
        if not isinstance(subject, str) or not subject.strip():
            continue
        key = subject.lower()
        first_seen.setdefault(key, subject)
        counts[key] = counts.get(key, 0) + 1

    return sorted(
        (first_seen[key] for key, count in counts.items() if count > 1),
        key=str.lower,
    )
