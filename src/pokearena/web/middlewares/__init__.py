"""Middleware registration and implementations."""

from aiohttp import web

from pokearena.web.middlewares.errors import error_middleware
from pokearena.web.middlewares.user import user_middleware


def register_all_middlewares(app: web.Application) -> None:
    """Register all middlewares with the application."""
    # Error mapping wraps everything, including user loading
    app.middlewares.append(error_middleware)
    app.middlewares.append(user_middleware)


__all__ = ["register_all_middlewares"]
