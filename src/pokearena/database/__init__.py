"""Database package."""

from pokearena.database.session import (
    async_session_factory,
    close_db,
    create_session_factory,
    engine,
    init_db,
)

__all__ = [
    "engine",
    "async_session_factory",
    "create_session_factory",
    "init_db",
    "close_db",
]
