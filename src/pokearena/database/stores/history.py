"""Battle history store.

The history is the only durable record of battle outcomes, and the daily
battle quota is derived from it.
"""

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pokearena.core.battle import mirror_storage
from pokearena.core.constants import BATTLE_TYPE_PVP
from pokearena.database.models import BattleLog
from pokearena.logging import get_logger
from pokearena.utils import utc_day_bounds, utc_from_timestamp

logger = get_logger(__name__)


@dataclass(frozen=True)
class BattleHistoryEntry:
    timestamp: datetime
    type: str
    opponent: Optional[str]
    details: Optional[dict[str, Any]]

    @property
    def result(self) -> Optional[str]:
        return (self.details or {}).get("result")

    @classmethod
    def from_model(cls, log: BattleLog) -> "BattleHistoryEntry":
        return cls(
            timestamp=log.timestamp,
            type=log.battle_type,
            opponent=log.opponent,
            details=log.details,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "type": self.type,
            "opponent": self.opponent,
            "details": self.details,
        }


class BattleHistoryStore:
    """Append-only per-user battle log."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        daily_battle_limit: int,
    ):
        self.session_factory = session_factory
        self.daily_battle_limit = daily_battle_limit

    async def append(
        self,
        user_id: str,
        battle_type: str,
        opponent: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        now: Optional[float] = None,
    ) -> BattleHistoryEntry:
        log = BattleLog(
            user_id=user_id,
            timestamp=utc_from_timestamp(now if now is not None else time.time()),
            battle_type=battle_type,
            opponent=opponent,
            details=details,
        )
        async with self.session_factory() as session:
            session.add(log)
            await session.commit()

        logger.debug("Battle recorded", user_id=user_id, battle_type=battle_type)
        return BattleHistoryEntry.from_model(log)

    async def record_player_battle(
        self,
        player1_id: str,
        player2_id: str,
        player1_name: str,
        player2_name: str,
        storage: dict[str, Any],
        now: Optional[float] = None,
    ) -> tuple[BattleHistoryEntry, BattleHistoryEntry]:
        """Write one entry per participant in a single transaction.

        ``storage`` is from player 1's perspective; player 2 gets the mirror.
        """
        timestamp = utc_from_timestamp(now if now is not None else time.time())
        log1 = BattleLog(
            user_id=player1_id,
            timestamp=timestamp,
            battle_type=BATTLE_TYPE_PVP,
            opponent=player2_name,
            details={**storage, "opponent_name": player2_name},
        )
        log2 = BattleLog(
            user_id=player2_id,
            timestamp=timestamp,
            battle_type=BATTLE_TYPE_PVP,
            opponent=player1_name,
            details=mirror_storage(storage, player1_name),
        )
        async with self.session_factory() as session:
            session.add_all([log1, log2])
            await session.commit()

        logger.info(
            "Player battle recorded",
            player1_id=player1_id,
            player2_id=player2_id,
            result=storage["result"],
        )
        return BattleHistoryEntry.from_model(log1), BattleHistoryEntry.from_model(log2)

    async def load_all(self, user_id: str) -> list[BattleHistoryEntry]:
        """Every entry for a user, oldest first."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(BattleLog)
                .where(BattleLog.user_id == user_id)
                .order_by(BattleLog.timestamp.asc(), BattleLog.id.asc())
            )
            return [BattleHistoryEntry.from_model(log) for log in result.scalars().all()]

    async def count_today(self, user_id: str, now: Optional[float] = None) -> int:
        """Battles recorded on the current UTC calendar day."""
        day_start, day_end = utc_day_bounds(now if now is not None else time.time())
        async with self.session_factory() as session:
            result = await session.execute(
                select(func.count(BattleLog.id)).where(
                    BattleLog.user_id == user_id,
                    BattleLog.timestamp >= day_start,
                    BattleLog.timestamp < day_end,
                )
            )
            return result.scalar() or 0

    async def has_quota_remaining(self, user_id: str, now: Optional[float] = None) -> bool:
        return await self.count_today(user_id, now) < self.daily_battle_limit
