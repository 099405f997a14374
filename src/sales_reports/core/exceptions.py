"""Failure taxonomy of the reporting service and its FastAPI handlers.

Only whitelist rejection is an expected outcome (answered with a 400 page by
the router). Everything else propagates to these handlers unchanged and is
rendered as a generic failure."""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from markupsafe import Markup

from .templating import render_page

logger = logging.getLogger(__name__)


class ReportingError(Exception):
    """Base class for every failure raised by the reporting core."""

    status_code = 500
    public_message = "Error interno del servidor."


class StoreUnavailable(ReportingError):
    """The store file cannot be reached or the schema resource is missing."""

    status_code = 503
    public_message = "La base de datos no está disponible."


class SchemaInitFailed(ReportingError):
    """A statement of the schema resource failed during first-run bootstrap."""


class QueryFailed(ReportingError):
    """A report or table query failed in the store."""


class TableRejected(ReportingError):
    """A table name outside the whitelist reached the dynamic table accessor."""

    status_code = 400
    public_message = "Tabla inválida."

    def __init__(self, table: str):
        super().__init__(f"Table {table!r} is not in the whitelist")
        self.table = table


async def reporting_error_handler(request: Request, exc: ReportingError):
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc,
            exc_info=exc,
        )
    else:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)

    if request.url.path.startswith("/api/"):
        return JSONResponse({"detail": exc.public_message}, status_code=exc.status_code)
    return render_page(
        request,
        "Error",
        Markup(""),
        status_code=exc.status_code,
        template="error.html",
        message=exc.public_message,
    )


def reporting_exception_handlers() -> dict:
    """Handlers to pass as FastAPI(exception_handlers=...)."""
    return {ReportingError: reporting_error_handler}
