# meeting_days/services/graph_datetime.py
from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Mapping, Optional

# Graph emits 7 fractional digits ("2024-01-15T10:00:00.0000000"); datetime
# accepts at most 6.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_graph_datetime(dt_obj: Any) -> Optional[datetime]:
    """
    Parse a Graph-style `{"dateTime": ..., "timeZone": ...}` object.

    Keys are matched case-insensitively. Returns None when the value is
    missing or not an ISO 8601 timestamp. The result is a naive datetime
    holding the wall-clock time as delivered; `timeZone` is not applied.
    """
    if not isinstance(dt_obj, Mapping):
        return None

    raw = None
    for key, value in dt_obj.items():
        if str(key).lower() == "datetime":
            raw = value
            break

    if not isinstance(raw, str) or not raw.strip():
        return None

    text = _FRACTION_RE.sub(r"\1", raw.strip())
    if text.endswith("Z"):
        text = text[:-1]
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    # Offsets are dropped so every timestamp compares as wall-clock time.
    return parsed.replace(tzinfo=None)
