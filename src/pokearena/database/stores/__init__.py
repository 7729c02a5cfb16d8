"""Persistence stores used by the arena."""

from pokearena.database.stores.favorites import FavoriteEntry, FavoritesStore
from pokearena.database.stores.history import BattleHistoryEntry, BattleHistoryStore
from pokearena.database.stores.users import UserStore

__all__ = [
    "UserStore",
    "FavoriteEntry",
    "FavoritesStore",
    "BattleHistoryEntry",
    "BattleHistoryStore",
]
