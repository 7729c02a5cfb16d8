"""Player-vs-player challenge state machine.

A challenge moves ``pending -> accepted | declined | expired``. The only way
back out of ``accepted`` is :meth:`Challenge.revert_acceptance`, used when the
battle could not be built after the opponent accepted.

The board holds challenges and decline notices in memory. It does no locking
of its own; the owning service serializes access.
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from pokearena.core.constants import CHALLENGE_PREFIX
from pokearena.core.errors import DuplicateChallengeError, StateConflictError
from pokearena.logging import get_logger

logger = get_logger(__name__)


class ChallengeStatus(str, Enum):
    """Challenge status enum."""

    PENDING = "pending"  # Waiting for the opponent
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


ALLOWED_TRANSITIONS: dict[ChallengeStatus, set[ChallengeStatus]] = {
    ChallengeStatus.PENDING: {
        ChallengeStatus.ACCEPTED,
        ChallengeStatus.DECLINED,
        ChallengeStatus.EXPIRED,
    },
    ChallengeStatus.ACCEPTED: set(),
    ChallengeStatus.DECLINED: set(),
    ChallengeStatus.EXPIRED: set(),
}


@dataclass
class Challenge:
    """A proposed battle between two online users."""

    id: str
    challenger_id: str
    challenger_name: str
    opponent_id: str
    opponent_name: str
    created_at: float
    status: ChallengeStatus = ChallengeStatus.PENDING
    accepted_at: Optional[float] = None
    battle_data: Optional[dict[str, Any]] = None
    notified_users: set[str] = field(default_factory=set)

    @property
    def is_pending(self) -> bool:
        return self.status == ChallengeStatus.PENDING

    @property
    def is_accepted(self) -> bool:
        return self.status == ChallengeStatus.ACCEPTED

    @property
    def is_in_flight(self) -> bool:
        """Accepted, but the battle has not been recorded yet."""
        return self.is_accepted and self.battle_data is None

    @property
    def is_open(self) -> bool:
        return self.is_pending or self.is_in_flight

    @property
    def participants(self) -> tuple[str, str]:
        return (self.challenger_id, self.opponent_id)

    def involves(self, user_id: str) -> bool:
        return user_id in self.participants

    def is_between(self, user_a: str, user_b: str) -> bool:
        return {self.challenger_id, self.opponent_id} == {user_a, user_b}

    def transition_to(self, status: ChallengeStatus, now: Optional[float] = None) -> None:
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise StateConflictError(
                f"Challenge cannot move from {self.status.value} to {status.value}"
            )
        self.status = status
        if status == ChallengeStatus.ACCEPTED:
            self.accepted_at = now if now is not None else time.time()

    def revert_acceptance(self) -> None:
        """Put an accepted challenge without battle data back to pending."""
        if not self.is_accepted or self.battle_data is not None:
            raise StateConflictError("Only an incomplete acceptance can be reverted")
        self.status = ChallengeStatus.PENDING
        self.accepted_at = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "challenger_id": self.challenger_id,
            "challenger_name": self.challenger_name,
            "opponent_id": self.opponent_id,
            "opponent_name": self.opponent_name,
            "status": self.status.value,
            "created_at": self.created_at,
        }
        if self.battle_data is not None:
            data["battle_data"] = self.battle_data
        return data


@dataclass
class DeclineNotice:
    """Tells a challenger their challenge was declined. Read once."""

    challenge_id: str
    challenger_id: str
    opponent_id: str
    opponent_name: str
    declined_by: str
    declined_at: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.challenge_id,
            "challenger_id": self.challenger_id,
            "opponent_id": self.opponent_id,
            "opponent_name": self.opponent_name,
            "declined_by": self.declined_by,
            "declined_at": self.declined_at,
        }


@dataclass
class SweepResult:
    expired: int = 0
    completed: int = 0
    notices: int = 0

    @property
    def total(self) -> int:
        return self.expired + self.completed + self.notices


class ChallengeBoard:
    """In-memory store of challenges and decline notices."""

    def __init__(
        self,
        challenge_ttl_seconds: float,
        declined_notice_ttl_seconds: float,
        accepted_ttl_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.challenge_ttl_seconds = challenge_ttl_seconds
        self.declined_notice_ttl_seconds = declined_notice_ttl_seconds
        self.accepted_ttl_seconds = accepted_ttl_seconds
        self._clock = clock
        self._challenges: dict[str, Challenge] = {}
        self._declined: dict[str, DeclineNotice] = {}

    def __len__(self) -> int:
        return len(self._challenges)

    def __contains__(self, challenge_id: str) -> bool:
        return challenge_id in self._challenges

    def get(self, challenge_id: str) -> Optional[Challenge]:
        return self._challenges.get(challenge_id)

    def find_open_between(self, user_a: str, user_b: str) -> Optional[Challenge]:
        """Pending or in-flight challenge between two users in either direction.

        An in-flight acceptance can still fall back to pending, so it blocks a
        new challenge just like a pending one.
        """
        for challenge in self._challenges.values():
            if challenge.is_open and challenge.is_between(user_a, user_b):
                return challenge
        return None

    def create(
        self,
        challenger_id: str,
        challenger_name: str,
        opponent_id: str,
        opponent_name: str,
    ) -> Challenge:
        if self.find_open_between(challenger_id, opponent_id):
            raise DuplicateChallengeError(
                "There is already a pending challenge between you and this player. "
                "Please accept or decline it first."
            )

        challenge = Challenge(
            id=f"{CHALLENGE_PREFIX}{uuid.uuid4().hex}",
            challenger_id=challenger_id,
            challenger_name=challenger_name,
            opponent_id=opponent_id,
            opponent_name=opponent_name,
            created_at=self._clock(),
        )
        self._challenges[challenge.id] = challenge
        return challenge

    def remove(self, challenge_id: str) -> None:
        self._challenges.pop(challenge_id, None)

    def clear_accepted_for(self, user_id: str) -> int:
        """Drop accepted challenges involving a user."""
        stale = [
            c.id for c in self._challenges.values()
            if c.is_accepted and c.battle_data is not None and c.involves(user_id)
        ]
        for challenge_id in stale:
            del self._challenges[challenge_id]
        return len(stale)

    def pending_for(self, user_id: str) -> list[Challenge]:
        """Pending challenges addressed to a user."""
        return [
            c for c in self._challenges.values()
            if c.is_pending and c.opponent_id == user_id
        ]

    def take_accepted_for(self, user_id: str) -> Optional[Challenge]:
        """First accepted challenge the user has not been told about yet.

        Marks the user as notified.
        """
        for challenge in self._challenges.values():
            if (
                challenge.is_accepted
                and challenge.battle_data is not None
                and challenge.involves(user_id)
                and user_id not in challenge.notified_users
            ):
                challenge.notified_users.add(user_id)
                return challenge
        return None

    # Decline notices

    def add_decline_notice(self, challenge: Challenge, declined_by: str) -> DeclineNotice:
        notice = DeclineNotice(
            challenge_id=challenge.id,
            challenger_id=challenge.challenger_id,
            opponent_id=challenge.opponent_id,
            opponent_name=challenge.opponent_name,
            declined_by=declined_by,
            declined_at=self._clock(),
        )
        self._declined[challenge.id] = notice
        return notice

    def discard_decline_notice(self, challenge_id: str) -> None:
        self._declined.pop(challenge_id, None)

    def clear_decline_notices_for(self, user_id: str) -> int:
        stale = [
            challenge_id for challenge_id, notice in self._declined.items()
            if user_id in (notice.challenger_id, notice.opponent_id)
        ]
        for challenge_id in stale:
            del self._declined[challenge_id]
        return len(stale)

    def take_decline_notice_for(self, challenger_id: str) -> Optional[DeclineNotice]:
        """Consume the decline notice for a challenger, if any."""
        for challenge_id, notice in self._declined.items():
            if notice.challenger_id == challenger_id:
                del self._declined[challenge_id]
                return notice
        return None

    # Expiry

    def sweep(self) -> SweepResult:
        """Remove expired challenges, completed acceptances and old notices."""
        now = self._clock()
        result = SweepResult()

        for challenge_id, challenge in list(self._challenges.items()):
            if challenge.is_accepted:
                too_old = now - (challenge.accepted_at or challenge.created_at) > self.accepted_ttl_seconds
                if challenge.is_in_flight:
                    # Battle still being built, unless the accept was abandoned
                    if too_old:
                        challenge.revert_acceptance()
                        challenge.transition_to(ChallengeStatus.EXPIRED)
                        del self._challenges[challenge_id]
                        result.expired += 1
                        logger.warning("Dropped abandoned acceptance", challenge_id=challenge_id)
                    continue
                both_notified = set(challenge.participants) <= challenge.notified_users
                if both_notified or too_old:
                    del self._challenges[challenge_id]
                    result.completed += 1
            elif now - challenge.created_at > self.challenge_ttl_seconds:
                if challenge.is_pending:
                    challenge.transition_to(ChallengeStatus.EXPIRED)
                del self._challenges[challenge_id]
                result.expired += 1

        for challenge_id, notice in list(self._declined.items()):
            if now - notice.declined_at > self.declined_notice_ttl_seconds:
                del self._declined[challenge_id]
                result.notices += 1

        if result.total:
            logger.debug(
                "Swept challenges",
                expired=result.expired,
                completed=result.completed,
                notices=result.notices,
            )
        return result
