"""Online presence tracking."""

import time
from dataclasses import dataclass
from typing import Callable

from pokearena.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PresenceRecord:
    """A user seen recently."""

    user_id: str
    first_name: str
    last_seen: float

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "first_name": self.first_name,
            "last_seen": self.last_seen,
        }


class PresenceTracker:
    """Tracks which users are online based on heartbeats.

    Stale entries are evicted lazily whenever the online list is read.
    Not thread-safe; the owning service serializes access.
    """

    def __init__(self, timeout_seconds: float, clock: Callable[[], float] = time.time):
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._records: dict[str, PresenceRecord] = {}

    def heartbeat(self, user_id: str, first_name: str) -> PresenceRecord:
        record = PresenceRecord(user_id=user_id, first_name=first_name, last_seen=self._clock())
        self._records[user_id] = record
        return record

    def remove(self, user_id: str) -> None:
        self._records.pop(user_id, None)

    def evict_stale(self) -> int:
        """Drop records older than the timeout. Returns how many were dropped."""
        now = self._clock()
        stale = [
            user_id
            for user_id, record in self._records.items()
            if now - record.last_seen > self.timeout_seconds
        ]
        for user_id in stale:
            del self._records[user_id]
        if stale:
            logger.debug("Evicted stale presence", count=len(stale))
        return len(stale)

    def list_online(self) -> list[PresenceRecord]:
        self.evict_stale()
        return list(self._records.values())

    def get(self, user_id: str) -> PresenceRecord | None:
        """Online record for a user, or None if offline."""
        self.evict_stale()
        return self._records.get(user_id)

    def is_online(self, user_id: str) -> bool:
        return self.get(user_id) is not None
