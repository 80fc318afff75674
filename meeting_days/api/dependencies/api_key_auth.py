# meeting_days/api/dependencies/api_key_auth.py
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from meeting_days.core.config import get_settings

OPEN_ENVIRONMENTS = ("local", "test")


def api_key_matches(provided: Optional[str], expected: str) -> bool:
    """
    Constant-time comparison of the supplied header against the configured key.
    """
    if not provided:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def verify_api_key(
    api_key: Optional[str] = Header(
        default=None,
        alias="X-Api-Key",
        description="API key required for Graph-backed endpoints in non-local environments.",
    ),
) -> None:
    """
    Guard for endpoints that read calendars through the app's Graph
    credentials.

    Rules
    -----
    - No API_KEY configured:
        - local/test environments -> open access.
        - any other environment   -> 500, the deployment is misconfigured.
    - API_KEY configured -> X-Api-Key must match it, otherwise 401.
    """
    settings = get_settings()
    expected = getattr(settings, "API_KEY", None)

    if not expected:
        env = (settings.APP_ENV or "local").lower()
        if env in OPEN_ENVIRONMENTS:
            return
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API_KEY not configured for this environment.",
        )

    if not api_key_matches(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
        )
