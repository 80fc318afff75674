# meeting_days/services/graph_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from typing import Any, Dict, Optional

import httpx

from meeting_days.core.config import get_settings

logger = logging.getLogger(__name__)


class GraphClientError(RuntimeError):
    """
    Raised when the GraphClient cannot obtain an access token or when a
    Graph API call fails in a non-recoverable way.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GraphAuthError(GraphClientError):
    """
    Graph rejected the credentials (401) or the app lacks permissions (403).
    """


class GraphThrottledError(GraphClientError):
    """
    Graph is throttling this client (429).
    """


class GraphNotConfiguredError(GraphClientError):
    """
    Graph credentials or the calendar owner are missing from settings.
    """


@dataclass
class _TokenState:
    access_token: str
    expires_at: datetime


def _error_for_status(status_code: int, text: str) -> GraphClientError:
    """
    Map a non-2xx Graph response onto the matching exception.
    """
    if status_code == HTTPStatus.UNAUTHORIZED:
        return GraphAuthError("Please sign in again.", status_code=status_code)
    if status_code == HTTPStatus.FORBIDDEN:
        return GraphAuthError(
            "Insufficient permissions. Admin consent may be required.",
            status_code=status_code,
        )
    if status_code == HTTPStatus.TOO_MANY_REQUESTS:
        return GraphThrottledError(
            "Too many requests. Please wait and try again.",
            status_code=status_code,
        )
    return GraphClientError(
        f"Graph GET failed (status={status_code}): {text}",
        status_code=status_code,
    )


class GraphClient:
    """
    Minimal Microsoft Graph API client using client-credentials flow.

    Responsibilities
    ----------------
    - Fetch and cache an access token using the OAuth2 client-credentials flow.
    - Issue authenticated GET requests and return their JSON payload.
    - Translate HTTP failures into the GraphClientError hierarchy so callers
      never see httpx details.

    Notes
    -----
    - Token caching is in-memory for this process only.
    - A small safety margin is applied when calculating token expiry to avoid
      edge cases near expiration.
    """

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        base_url: str = "https://graph.microsoft.com",
        scope: str = "https://graph.microsoft.com/.default",
        timeout_seconds: float = 10.0,
    ) -> None:
        if not tenant_id or not client_id or not client_secret:
            raise ValueError("tenant_id, client_id and client_secret are required")

        self._tenant_id = tenant_id
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._scope = scope
        self._timeout_seconds = timeout_seconds

        self._token_state: Optional[_TokenState] = None

    @property
    def token_url(self) -> str:
        """
        Returns the OAuth2 token endpoint for the configured tenant.
        """
        return f"https://login.microsoftonline.com/{self._tenant_id}/oauth2/v2.0/token"

    async def _fetch_token(self) -> _TokenState:
        data = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "grant_type": "client_credentials",
            "scope": self._scope,
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.post(self.token_url, data=data)
        except httpx.HTTPError as exc:
            raise GraphClientError(
                "Network error. Please check your internet connection."
            ) from exc

        if resp.status_code != HTTPStatus.OK:
            raise GraphAuthError(
                f"Failed to obtain Graph token (status={resp.status_code}): {resp.text}",
                status_code=resp.status_code,
            )

        payload = resp.json()
        access_token = payload.get("access_token")
        expires_in = payload.get("expires_in")

        if not access_token or not isinstance(expires_in, (int, float)):
            raise GraphClientError(
                "Invalid token response from Azure AD (missing access_token/expires_in)"
            )

        # Refresh slightly before the real expiry.
        now = datetime.now(tz=timezone.utc)
        safety_margin = 60  # seconds
        expires_at = now + timedelta(seconds=float(expires_in) - safety_margin)

        logger.debug("Obtained Graph token valid until %s", expires_at.isoformat())
        return _TokenState(access_token=access_token, expires_at=expires_at)

    async def get_access_token(self) -> str:
        """
        Return a valid access token, using a cached value if still valid.
        """
        now = datetime.now(tz=timezone.utc)
        if self._token_state and self._token_state.expires_at > now:
            return self._token_state.access_token

        self._token_state = await self._fetch_token()
        return self._token_state.access_token

    def _build_url(self, path: str) -> str:
        # Absolute URLs (e.g. @odata.nextLink) are used as-is.
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    async def get_json(
        self,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Issue a GET request to a Graph endpoint and return the JSON payload.

        Parameters
        ----------
        path:
            Either an absolute URL or a path relative to the configured base_url.
        params:
            Optional query string parameters.

        Raises
        ------
        GraphAuthError
            On 401/403 responses.
        GraphThrottledError
            On 429 responses.
        GraphClientError
            On any other non-2xx response or transport failure.
        """
        token = await self.get_access_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.request(
                    method="GET",
                    url=self._build_url(path),
                    headers=headers,
                    params=params,
                )
        except httpx.HTTPError as exc:
            raise GraphClientError(
                "Network error. Please check your internet connection."
            ) from exc

        if resp.status_code // 100 != 2:
            logger.warning("Graph GET %s failed with status %s", path, resp.status_code)
            raise _error_for_status(resp.status_code, resp.text)
        return resp.json()


# Simple singleton-style accessor wired to app settings
_graph_client_instance: Optional[GraphClient] = None


def get_graph_client() -> GraphClient:
    """
    Lazily construct a GraphClient instance using application settings.
    """
    global _graph_client_instance
    if _graph_client_instance is None:
        settings = get_settings()
        if not settings.GRAPH_TENANT_ID or not settings.GRAPH_CLIENT_ID or not settings.GRAPH_CLIENT_SECRET:
            raise GraphNotConfiguredError(
                "GRAPH_TENANT_ID, GRAPH_CLIENT_ID and GRAPH_CLIENT_SECRET must be "
                "configured in settings to use the shared Graph client."
            )
        _graph_client_instance = GraphClient(
            tenant_id=settings.GRAPH_TENANT_ID,
            client_id=settings.GRAPH_CLIENT_ID,
            client_secret=settings.GRAPH_CLIENT_SECRET,
            base_url=str(settings.GRAPH_BASE_URL or "https://graph.microsoft.com"),
            timeout_seconds=settings.GRAPH_TIMEOUT_SECONDS,
        )
    return _graph_client_instance
