"""Ephemeral staging of battle display data.

Bot battles are staged here under ``bot_{user_id}_{timestamp_ms}`` ids. The
display data of accepted challenges is staged here as well, under the
challenge id, so the battle screen can still load after the challenge itself
has been swept. Entries live for a fixed TTL whether or not they were read.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pokearena.core.constants import BOT_BATTLE_PREFIX


@dataclass
class StagedBattle:
    battle_id: str
    battle_data: dict[str, Any]
    created_at: float


class BattleStagingStore:
    """TTL-bound map of battle id to display data."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._battles: dict[str, StagedBattle] = {}

    def __len__(self) -> int:
        return len(self._battles)

    def new_bot_battle_id(self, user_id: str) -> str:
        """Mint an unused id of the form ``bot_{user_id}_{timestamp_ms}``."""
        timestamp_ms = int(self._clock() * 1000)
        battle_id = f"{BOT_BATTLE_PREFIX}{user_id}_{timestamp_ms}"
        while battle_id in self._battles:
            timestamp_ms += 1
            battle_id = f"{BOT_BATTLE_PREFIX}{user_id}_{timestamp_ms}"
        return battle_id

    def put(self, battle_id: str, battle_data: dict[str, Any]) -> StagedBattle:
        staged = StagedBattle(
            battle_id=battle_id,
            battle_data=battle_data,
            created_at=self._clock(),
        )
        self._battles[battle_id] = staged
        return staged

    def get(self, battle_id: str) -> Optional[dict[str, Any]]:
        self.sweep()
        staged = self._battles.get(battle_id)
        return staged.battle_data if staged else None

    def sweep(self) -> int:
        now = self._clock()
        expired = [
            battle_id for battle_id, staged in self._battles.items()
            if now - staged.created_at > self.ttl_seconds
        ]
        for battle_id in expired:
            del self._battles[battle_id]
        return len(expired)
