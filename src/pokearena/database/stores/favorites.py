"""Favorites store.

A user's list never exceeds the configured cap and never holds the same
Pokemon twice. Rejected adds leave the list untouched.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pokearena.core.errors import NotFoundError, ValidationError
from pokearena.database.models import Favorite
from pokearena.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FavoriteEntry:
    pokemon_id: int
    added_at: datetime

    def to_dict(self) -> dict:
        return {"pokemon_id": self.pokemon_id, "added_at": self.added_at.isoformat()}


class FavoritesStore:
    """Per-user capped favorites lists."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], max_favorites: int):
        self.session_factory = session_factory
        self.max_favorites = max_favorites

    async def list(self, user_id: str) -> list[FavoriteEntry]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Favorite)
                .where(Favorite.user_id == user_id)
                .order_by(Favorite.added_at.asc(), Favorite.id.asc())
            )
            return [
                FavoriteEntry(pokemon_id=fav.pokemon_id, added_at=fav.added_at)
                for fav in result.scalars().all()
            ]

    async def count(self, user_id: str) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                select(func.count(Favorite.id)).where(Favorite.user_id == user_id)
            )
            return result.scalar() or 0

    async def add(self, user_id: str, pokemon_id: int) -> FavoriteEntry:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Favorite.pokemon_id).where(Favorite.user_id == user_id)
            )
            current = set(result.scalars().all())

            if pokemon_id in current:
                raise ValidationError("Pokemon is already in favorites")
            if len(current) >= self.max_favorites:
                raise ValidationError(
                    f"Maximum of {self.max_favorites} favorites allowed. "
                    "Please remove some favorites first."
                )

            favorite = Favorite(user_id=user_id, pokemon_id=pokemon_id)
            session.add(favorite)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise ValidationError("Pokemon is already in favorites") from e

        logger.info("Favorite added", user_id=user_id, pokemon_id=pokemon_id)
        return FavoriteEntry(pokemon_id=favorite.pokemon_id, added_at=favorite.added_at)

    async def remove(self, user_id: str, pokemon_id: int) -> None:
        async with self.session_factory() as session:
            result = await session.execute(
                delete(Favorite).where(
                    Favorite.user_id == user_id,
                    Favorite.pokemon_id == pokemon_id,
                )
            )
            if result.rowcount == 0:
                raise NotFoundError("Pokemon not found in favorites")
            await session.commit()

        logger.info("Favorite removed", user_id=user_id, pokemon_id=pokemon_id)
