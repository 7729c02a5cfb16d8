"""Battle history log."""

from datetime import datetime

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pokearena.database.models.base import Base, utcnow


class BattleLog(Base):
    """One battle in a user's history. Append-only."""

    __tablename__ = "battle_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    timestamp: Mapped[datetime] = mapped_column(default=utcnow, index=True)

    # "bot" or "player-vs-player"
    battle_type: Mapped[str] = mapped_column(String(32))
    opponent: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Minimal storage record: my_pokemon, opponent_pokemon, result, opponent_name
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    user = relationship("User", back_populates="battle_logs")

    def __repr__(self) -> str:
        return f"<BattleLog {self.user_id} {self.battle_type} {self.timestamp}>"
