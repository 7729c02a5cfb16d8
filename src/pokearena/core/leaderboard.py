"""Leaderboard computed from recent battle history."""

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Iterable, Literal, Optional

from pokearena.core.constants import POINTS_PER_DRAW, POINTS_PER_WIN, RESULT_TIE, RESULT_WON
from pokearena.logging import get_logger

if TYPE_CHECKING:
    from pokearena.database.stores import BattleHistoryEntry, BattleHistoryStore, UserStore

logger = get_logger(__name__)


@dataclass
class LeaderboardEntry:
    """One ranked row."""

    user_id: str
    username: str
    total_battles: int
    wins: int
    draws: int
    win_rate: int
    total_score: float
    points: int
    is_current_user: bool = False
    rank: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def summarize_battles(
    user_id: str,
    username: str,
    recent: Iterable["BattleHistoryEntry"],
    current_user_id: Optional[str] = None,
) -> LeaderboardEntry:
    """Tally wins, draws and points over a window of battles."""
    wins = 0
    draws = 0
    total_score = 0.0
    total = 0

    for entry in recent:
        total += 1
        details = entry.details or {}
        my_pokemon = details.get("my_pokemon") or {}
        total_score += my_pokemon.get("score") or 0

        result = details.get("result")
        if result == RESULT_WON:
            wins += 1
        elif result == RESULT_TIE:
            draws += 1

    win_rate = round(wins / total * 100) if total else 0

    return LeaderboardEntry(
        user_id=user_id,
        username=username,
        total_battles=total,
        wins=wins,
        draws=draws,
        win_rate=win_rate,
        total_score=total_score,
        points=wins * POINTS_PER_WIN + draws * POINTS_PER_DRAW,
        is_current_user=user_id == current_user_id,
    )


def rank_entries(
    entries: list[LeaderboardEntry],
    tiebreak: Literal["win_rate", "total_score"] = "win_rate",
) -> list[LeaderboardEntry]:
    """Sort by points, then by the tiebreak field, and number the rows."""
    ranked = sorted(
        entries,
        key=lambda e: (e.points, getattr(e, tiebreak)),
        reverse=True,
    )
    for i, entry in enumerate(ranked):
        entry.rank = i + 1
    return ranked


class LeaderboardAggregator:
    """Ranks every user with enough battles by their recent results."""

    def __init__(
        self,
        users: "UserStore",
        history: "BattleHistoryStore",
        min_battles: int,
        recent_battles: int,
        tiebreak: Literal["win_rate", "total_score"] = "win_rate",
    ):
        self.users = users
        self.history = history
        self.min_battles = min_battles
        self.recent_battles = recent_battles
        self.tiebreak = tiebreak

    async def compute(self, current_user_id: Optional[str] = None) -> list[LeaderboardEntry]:
        entries = []

        for user in await self.users.list_all():
            battles = await self.history.load_all(user.id)
            if len(battles) < self.min_battles:
                continue

            recent = sorted(battles, key=lambda b: b.timestamp, reverse=True)[: self.recent_battles]
            entries.append(
                summarize_battles(user.id, user.first_name, recent, current_user_id)
            )

        logger.debug("Leaderboard computed", ranked_users=len(entries))
        return rank_entries(entries, self.tiebreak)
