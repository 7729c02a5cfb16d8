"""Main entry point for the PokeArena web service."""

import asyncio
import sys

from aiohttp import web

from pokearena.config import settings
from pokearena.core.arena import ArenaService
from pokearena.database import async_session_factory, close_db, init_db
from pokearena.database.stores import BattleHistoryStore, FavoritesStore, UserStore
from pokearena.logging import get_logger, setup_logging
from pokearena.pokeapi import PokeAPIClient
from pokearena.web import create_app

logger = get_logger(__name__)


async def main() -> None:
    """Main function to run the web service."""
    setup_logging()
    logger.info("Starting PokeArena...")

    try:
        await init_db()
        logger.info("Database connection established")
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        sys.exit(1)

    users = UserStore(async_session_factory)
    favorites = FavoritesStore(async_session_factory, max_favorites=settings.max_favorites)
    history = BattleHistoryStore(async_session_factory, daily_battle_limit=settings.daily_battle_limit)
    pokeapi = PokeAPIClient()
    arena = ArenaService(users, favorites, history, pokeapi, settings=settings)

    runner = web.AppRunner(create_app(arena, favorites, users))
    await runner.setup()

    try:
        site = web.TCPSite(runner, settings.web_host, settings.web_port)
        await site.start()
        logger.info("Web service started", host=settings.web_host, port=settings.web_port)

        await asyncio.Event().wait()
    except Exception as e:
        logger.error("Web service error", error=str(e))
        raise
    finally:
        await runner.cleanup()
        await pokeapi.close()
        await close_db()
        logger.info("Web service stopped")


def run() -> None:
    """Entry point for the application."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
