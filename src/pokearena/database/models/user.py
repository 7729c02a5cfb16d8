"""User model for registered trainers."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pokearena.database.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """A registered user."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))

    # Relationships
    favorites = relationship("Favorite", back_populates="user", lazy="raise")
    battle_logs = relationship("BattleLog", back_populates="user", lazy="raise")

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
