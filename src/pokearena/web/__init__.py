"""Web package initialization."""

from aiohttp import web

from pokearena.core.arena import ArenaService
from pokearena.database.stores import FavoritesStore, UserStore
from pokearena.web.handlers import register_all_handlers
from pokearena.web.keys import ARENA, FAVORITES, USERS
from pokearena.web.middlewares import register_all_middlewares


def create_app(arena: ArenaService, favorites: FavoritesStore, users: UserStore) -> web.Application:
    """Create the aiohttp application bound to the arena service."""
    app = web.Application()

    app[ARENA] = arena
    app[FAVORITES] = favorites
    app[USERS] = users

    register_all_middlewares(app)
    register_all_handlers(app)

    return app


__all__ = ["create_app"]
