# meeting_days/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from http import HTTPStatus

from meeting_days.api.routes import analysis, calendar, health, holidays
from meeting_days.core.config import get_settings
from meeting_days.core.logging_config import setup_logging
from meeting_days.services.graph_client import (
    GraphAuthError,
    GraphClientError,
    GraphNotConfiguredError,
    GraphThrottledError,
)

logger = logging.getLogger(__name__)


def _graph_error_status(exc: GraphClientError) -> int:
    if isinstance(exc, GraphNotConfiguredError):
        return HTTPStatus.SERVICE_UNAVAILABLE
    if isinstance(exc, GraphThrottledError):
        return HTTPStatus.TOO_MANY_REQUESTS
    if isinstance(exc, GraphAuthError):
        if exc.status_code == HTTPStatus.FORBIDDEN:
            return HTTPStatus.FORBIDDEN
        return HTTPStatus.UNAUTHORIZED
    return HTTPStatus.BAD_GATEWAY


async def graph_error_handler(request: Request, exc: GraphClientError) -> JSONResponse:
    """
    Translate Graph failures into HTTP responses carrying a readable message.
    """
    status_code = _graph_error_status(exc)
    logger.warning("Graph request for %s failed: %s", request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """
    Application factory for the Meeting Days Monitor service.
    """
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Counts the distinct days on which calendar meetings take place,\n"
            "per month, classified as weekday, weekend or Dutch public holiday.\n"
            "Events come from the request body, a Power Automate JSON export, or\n"
            "a Microsoft Graph calendar; results can be downloaded as Excel."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(analysis.router)
    app.include_router(holidays.router)
    app.include_router(calendar.router)

    app.add_exception_handler(GraphClientError, graph_error_handler)

    return app


app = create_app()
