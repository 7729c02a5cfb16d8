"""Favorite Pokemon entries."""

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pokearena.database.models.base import Base, utcnow


class Favorite(Base):
    """One Pokemon in a user's favorites list."""

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "pokemon_id", name="uq_favorites_user_pokemon"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    pokemon_id: Mapped[int] = mapped_column(Integer)
    added_at: Mapped[datetime] = mapped_column(default=utcnow)

    user = relationship("User", back_populates="favorites")

    def __repr__(self) -> str:
        return f"<Favorite {self.user_id} #{self.pokemon_id}>"
