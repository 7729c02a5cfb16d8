"""Handler registration."""

from aiohttp import web

from pokearena.web.handlers import arena, favorites, leaderboard


def register_all_handlers(app: web.Application) -> None:
    """Register all route tables with the application."""
    app.add_routes(arena.routes)
    app.add_routes(favorites.routes)
    app.add_routes(leaderboard.routes)


__all__ = ["register_all_handlers"]
