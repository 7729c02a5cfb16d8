"""Typed application keys."""

from aiohttp import web

from pokearena.core.arena import ArenaService
from pokearena.database.stores import FavoritesStore, UserStore

ARENA = web.AppKey("arena", ArenaService)
FAVORITES = web.AppKey("favorites", FavoritesStore)
USERS = web.AppKey("users", UserStore)
