"""Database models package."""

from pokearena.database.models.base import Base, TimestampMixin
from pokearena.database.models.battle_log import BattleLog
from pokearena.database.models.favorite import Favorite
from pokearena.database.models.user import User

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Core
    "User",
    "Favorite",
    "BattleLog",
]
