"""Map arena errors to JSON responses."""

from collections.abc import Awaitable, Callable

from aiohttp import web

from pokearena.core.errors import (
    ArenaError,
    MalformedDataError,
    NotFoundError,
    StateConflictError,
    UpstreamFetchError,
    ValidationError,
)
from pokearena.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_ERROR: list[tuple[type[ArenaError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (StateConflictError, 409),
    (MalformedDataError, 422),
    (UpstreamFetchError, 502),
]


def status_for(error: ArenaError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 500


@web.middleware
async def error_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Turn arena errors into ``{"error": ...}`` responses."""
    try:
        return await handler(request)
    except ArenaError as e:
        status = status_for(e)
        body: dict = {"error": str(e)}
        if isinstance(e, ValidationError):
            body["errors"] = e.errors
        if status >= 500:
            logger.warning("Request failed", path=request.path, status=status, error=str(e))
        return web.json_response(body, status=status)
