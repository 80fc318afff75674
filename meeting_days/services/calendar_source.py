# meeting_days/services/calendar_source.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from meeting_days.schemas.calendar_event import CalendarEvent
from meeting_days.services.graph_client import GraphClient
from meeting_days.services.graph_datetime import parse_graph_datetime

logger = logging.getLogger(__name__)

SELECT_FIELDS = "id,subject,start,end,isAllDay"
PAGE_SIZE = 1000


def build_subject_filter(subject_filter: str) -> str:
    """
    OData `$filter` expression matching subjects containing `subject_filter`.
    """
    escaped = subject_filter.replace("'", "''")
    return f"contains(subject,'{escaped}')"


class GraphCalendarSource:
    """
    Fetches concrete event occurrences from a user's Graph calendarView.

    calendarView expands recurring series into individual occurrences, which
    is exactly what the meeting-day analysis expects.
    """

    def __init__(self, graph_client: GraphClient, user_id: str) -> None:
        """
        Parameters
        ----------
        graph_client:
            Shared Graph client instance.
        user_id:
            The user ID/email whose calendar is queried.
        """
        self.graph = graph_client
        self.user_id = user_id

    async def get_meetings_by_subject(
        self,
        subject_filter: str | None,
        start: datetime,
        end: datetime,
    ) -> List[CalendarEvent]:
        """
        Return all events between `start` and `end`, optionally limited to
        subjects containing `subject_filter`.

        Follows `@odata.nextLink` until every page has been read. Events
        without a start or end are skipped. GraphClientError subclasses
        propagate unchanged.
        """
        params: Optional[Dict[str, Any]] = {
            "startDateTime": start.strftime("%Y-%m-%dT%H:%M:%S"),
            "endDateTime": end.strftime("%Y-%m-%dT%H:%M:%S"),
            "$select": SELECT_FIELDS,
            "$top": PAGE_SIZE,
        }
        if subject_filter and subject_filter.strip():
            params["$filter"] = build_subject_filter(subject_filter.strip())

        path = f"/v1.0/users/{self.user_id}/calendarView"
        results: List[CalendarEvent] = []
        pages = 0

        while path:
            payload = await self.graph.get_json(path, params=params)
            pages += 1

            for ev in payload.get("value", []):
                event = self._to_calendar_event(ev)
                if event is not None:
                    results.append(event)

            # nextLink already carries the full query string.
            path = payload.get("@odata.nextLink")
            params = None

        logger.info(
            "Fetched %d events from Graph calendarView in %d page(s)",
            len(results),
            pages,
        )
        return results

    @staticmethod
    def _to_calendar_event(ev: Dict[str, Any]) -> Optional[CalendarEvent]:
        start_dt = parse_graph_datetime(ev.get("start"))
        end_dt = parse_graph_datetime(ev.get("end"))
        if start_dt is None or end_dt is None:
            logger.debug("Skipping Graph event %r without start/end", ev.get("id"))
            return None

        return CalendarEvent(
            id=ev.get("id") or "",
            subject=ev.get("subject") or "",
            start_date_time=start_dt,
            end_date_time=end_dt,
            is_all_day=bool(ev.get("isAllDay") or False),
        )
