"""User loading middleware.

Sessions are handled outside this service; the caller's id arrives in the
``X-User-Id`` header and is resolved against the user store.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web

from pokearena.logging import bind_request_context
from pokearena.web.keys import USERS

USER_HEADER = "X-User-Id"


@web.middleware
async def user_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Load the calling user into ``request["user"]``."""
    user_id = request.headers.get(USER_HEADER)
    if not user_id:
        return web.json_response({"error": "Authentication required"}, status=401)

    user = await request.app[USERS].get(user_id)
    if user is None:
        return web.json_response({"error": "User not found"}, status=401)

    request["user"] = user
    bind_request_context(user_id=user.id, path=request.path)
    return await handler(request)
