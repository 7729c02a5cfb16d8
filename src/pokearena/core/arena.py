"""Arena service: presence, challenges, bot battles and leaderboard.

All in-memory arena state (online players, challenges, decline notices,
staged battles) is owned by one :class:`ArenaService` instance. Every
operation that touches it runs under the service lock, so concurrent
requests are applied one at a time. The lock is released while Pokemon data
is fetched during an accept; the challenge is already ``accepted`` by then,
so a racing second accept sees that and returns the same redirect, and a new
challenge between the same pair is refused. If the accept fails or is
cancelled before the battle is recorded, the challenge goes back to pending.
"""

import asyncio
import random
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from pokearena.config import Settings, get_settings
from pokearena.core.battle import BattleRecord, build_battle
from pokearena.core.challenges import Challenge, ChallengeBoard, ChallengeStatus, DeclineNotice
from pokearena.core.constants import (
    BATTLE_REDIRECT_TEMPLATE,
    BATTLE_TYPE_BOT,
    BOT_BATTLE_PREFIX,
    BOT_DISPLAY_NAME,
    BOT_OPPONENT_ID,
    PLAYER_DISPLAY_NAME,
)
from pokearena.core.errors import (
    BattleNotFoundError,
    ChallengeExpiredError,
    InvalidChallengeError,
    ValidationError,
)
from pokearena.core.leaderboard import LeaderboardAggregator, LeaderboardEntry
from pokearena.core.pokemon import PokemonSnapshot
from pokearena.core.presence import PresenceRecord, PresenceTracker
from pokearena.core.staging import BattleStagingStore
from pokearena.logging import get_logger

if TYPE_CHECKING:
    from pokearena.database.stores import BattleHistoryStore, FavoritesStore, UserStore
    from pokearena.pokeapi import PokeAPIClient

logger = get_logger(__name__)


@dataclass
class AcceptResult:
    challenge_id: str
    redirect_url: str

    def to_dict(self) -> dict[str, str]:
        return {"challenge_id": self.challenge_id, "redirect_url": self.redirect_url}


class ArenaService:
    """Entry point for every arena operation."""

    def __init__(
        self,
        users: "UserStore",
        favorites: "FavoritesStore",
        history: "BattleHistoryStore",
        pokemon_source: "PokeAPIClient",
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or get_settings()
        self.users = users
        self.favorites = favorites
        self.history = history
        self.pokemon_source = pokemon_source
        self._clock = clock
        self._rng = rng or random.Random()
        self._lock = asyncio.Lock()

        self.presence = PresenceTracker(self.settings.presence_timeout_seconds, clock=clock)
        self.challenges = ChallengeBoard(
            challenge_ttl_seconds=self.settings.challenge_ttl_seconds,
            declined_notice_ttl_seconds=self.settings.declined_notice_ttl_seconds,
            accepted_ttl_seconds=self.settings.accepted_challenge_ttl_seconds,
            clock=clock,
        )
        self.staging = BattleStagingStore(self.settings.bot_battle_ttl_seconds, clock=clock)
        self.leaderboard_aggregator = LeaderboardAggregator(
            users=users,
            history=history,
            min_battles=self.settings.leaderboard_min_battles,
            recent_battles=self.settings.leaderboard_recent_battles,
            tiebreak=self.settings.leaderboard_tiebreak,
        )

    @property
    def quota_message(self) -> str:
        return (
            f"You have used all {self.settings.daily_battle_limit} battles for today. "
            "Come back tomorrow!"
        )

    # ------------------------------------------------------------------ #
    # Presence
    # ------------------------------------------------------------------ #

    async def heartbeat(self, user_id: str, first_name: str) -> None:
        async with self._lock:
            self.presence.heartbeat(user_id, first_name)

    async def online_players(self, user_id: str, first_name: str) -> list[PresenceRecord]:
        """Mark the caller online and list everyone currently online."""
        async with self._lock:
            self.presence.heartbeat(user_id, first_name)
            return self.presence.list_online()

    async def leave(self, user_id: str) -> None:
        async with self._lock:
            self.presence.remove(user_id)

    # ------------------------------------------------------------------ #
    # Status, history, leaderboard
    # ------------------------------------------------------------------ #

    async def arena_status(self, user_id: str) -> dict[str, Any]:
        battles_used = await self.history.count_today(user_id, self._clock())
        favorites_count = await self.favorites.count(user_id)
        limit = self.settings.daily_battle_limit
        return {
            "battles_used": battles_used,
            "battles_remaining": max(0, limit - battles_used),
            "can_battle": battles_used < limit,
            "has_favorites": favorites_count > 0,
            "favorites_count": favorites_count,
        }

    async def battle_history(self, user_id: str) -> dict[str, Any]:
        battles = await self.history.load_all(user_id)
        return {
            "battles": [b.to_dict() for b in battles],
            "total_battles": len(battles),
        }

    async def leaderboard(self, user_id: Optional[str] = None) -> list[LeaderboardEntry]:
        return await self.leaderboard_aggregator.compute(user_id)

    # ------------------------------------------------------------------ #
    # Challenges
    # ------------------------------------------------------------------ #

    async def create_challenge(
        self,
        challenger_id: str,
        challenger_name: str,
        opponent_id: str,
        opponent_name: Optional[str] = None,
    ) -> Challenge:
        if challenger_id == opponent_id:
            raise ValidationError("You cannot challenge yourself")

        async with self._lock:
            self.challenges.sweep()
            now = self._clock()

            errors = []
            opponent = self.presence.get(opponent_id)
            if opponent is None:
                errors.append("Opponent is no longer online")
            if not await self.history.has_quota_remaining(challenger_id, now):
                errors.append(self.quota_message)
            if not await self.favorites.count(challenger_id):
                errors.append("You need at least one favorite Pokemon to battle")
            if not await self.favorites.count(opponent_id):
                errors.append("Opponent has no favorite Pokemon")
            if errors:
                logger.info(
                    "Challenge rejected",
                    challenger_id=challenger_id,
                    opponent_id=opponent_id,
                    reason=errors[0],
                )
                raise ValidationError(errors)

            challenge = self.challenges.create(
                challenger_id=challenger_id,
                challenger_name=challenger_name,
                opponent_id=opponent_id,
                opponent_name=opponent_name or opponent.first_name,
            )
            # Old results and decline alerts would confuse the challenger's polling
            self.challenges.clear_accepted_for(challenger_id)
            self.challenges.clear_decline_notices_for(challenger_id)

        logger.info(
            "Challenge created",
            challenge_id=challenge.id,
            challenger_id=challenger_id,
            opponent_id=opponent_id,
        )
        return challenge

    async def pending_challenges(self, user_id: str) -> list[Challenge]:
        """Pending challenges addressed to the user."""
        async with self._lock:
            self.challenges.sweep()
            return self.challenges.pending_for(user_id)

    async def poll_accepted(self, user_id: str) -> Optional[Challenge]:
        """Accepted challenge the user has not been notified about yet."""
        async with self._lock:
            self.challenges.sweep()
            return self.challenges.take_accepted_for(user_id)

    async def poll_declined(self, user_id: str) -> Optional[DeclineNotice]:
        """Decline notice for a challenger. Returned once."""
        async with self._lock:
            self.challenges.sweep()
            return self.challenges.take_decline_notice_for(user_id)

    def _get_challenge_for_opponent(self, challenge_id: str, user_id: str) -> Challenge:
        challenge = self.challenges.get(challenge_id)
        if challenge is None or challenge.opponent_id != user_id:
            raise InvalidChallengeError("Invalid challenge")
        return challenge

    async def _quota_errors(self, challenge: Challenge, now: float) -> list[str]:
        for participant in challenge.participants:
            if not await self.history.has_quota_remaining(participant, now):
                return ["One or both players have used all battles for today"]
        return []

    def _accept_result(self, challenge: Challenge) -> AcceptResult:
        return AcceptResult(
            challenge_id=challenge.id,
            redirect_url=BATTLE_REDIRECT_TEMPLATE.format(challenge_id=challenge.id),
        )

    async def accept_challenge(self, challenge_id: str, user_id: str) -> AcceptResult:
        """Accept a challenge, fight it and record the result for both players."""
        async with self._lock:
            self.challenges.sweep()
            challenge = self._get_challenge_for_opponent(challenge_id, user_id)

            if challenge.is_accepted:
                logger.info("Challenge already accepted", challenge_id=challenge_id)
                return self._accept_result(challenge)
            if not challenge.is_pending:
                raise ChallengeExpiredError("Challenge is no longer pending")

            now = self._clock()
            errors = await self._quota_errors(challenge, now)
            challenger_favorites = await self.favorites.list(challenge.challenger_id)
            opponent_favorites = await self.favorites.list(challenge.opponent_id)
            if not challenger_favorites or not opponent_favorites:
                errors.append("Both players need at least one favorite Pokemon")
            if errors:
                challenge.transition_to(ChallengeStatus.EXPIRED)
                logger.info("Challenge expired on accept", challenge_id=challenge_id, reason=errors[0])
                raise ValidationError(errors)

            challenge.transition_to(ChallengeStatus.ACCEPTED, now)
            self.challenges.discard_decline_notice(challenge.id)

            challenger_pick = self._rng.choice(challenger_favorites).pokemon_id
            opponent_pick = self._rng.choice(opponent_favorites).pokemon_id

        try:
            record = await self._fight_accepted(challenge, user_id, challenger_pick, opponent_pick)
        except BaseException:
            # Also reached on cancellation, so nothing here may await
            self._rollback_acceptance(challenge)
            raise

        logger.info(
            "Challenge accepted",
            challenge_id=challenge_id,
            challenger_pokemon=record.display["player1_pokemon"]["name"],
            opponent_pokemon=record.display["player2_pokemon"]["name"],
            result=record.result,
        )
        return self._accept_result(challenge)

    def _rollback_acceptance(self, challenge: Challenge) -> None:
        """Put an acceptance that never produced a battle back to pending."""
        if challenge.is_in_flight:
            challenge.revert_acceptance()
            logger.warning("Challenge reverted to pending", challenge_id=challenge.id)

    async def _fight_accepted(
        self,
        challenge: Challenge,
        user_id: str,
        challenger_pick: int,
        opponent_pick: int,
    ) -> BattleRecord:
        """Fetch both Pokemon, score the battle and record it for both players.

        Runs with the lock released during the fetch. Any failure leaves the
        challenge in flight for the caller to roll back.
        """
        challenger_pokemon, opponent_pokemon = await asyncio.gather(
            self.pokemon_source.fetch(challenger_pick),
            self.pokemon_source.fetch(opponent_pick),
        )

        async with self._lock:
            now = self._clock()
            errors = await self._quota_errors(challenge, now)
            if errors:
                challenge.revert_acceptance()
                challenge.transition_to(ChallengeStatus.EXPIRED)
                raise ValidationError(errors)

            record = build_battle(
                challenger_pokemon,
                opponent_pokemon,
                challenge.challenger_name,
                challenge.opponent_name,
                challenge.challenger_id,
                challenge.opponent_id,
                rng=self._rng,
            )
            await self.history.record_player_battle(
                challenge.challenger_id,
                challenge.opponent_id,
                challenge.challenger_name,
                challenge.opponent_name,
                record.storage,
                now=now,
            )

            challenge.battle_data = record.display
            # The acceptor is redirected right away; the challenger finds out by polling
            challenge.notified_users.add(user_id)
            self.staging.put(challenge.id, record.display)
            for participant in challenge.participants:
                self.presence.remove(participant)

        return record

    async def decline_challenge(
        self,
        challenge_id: str,
        user_id: str,
        declined_by: Optional[str] = None,
    ) -> DeclineNotice:
        async with self._lock:
            challenge = self._get_challenge_for_opponent(challenge_id, user_id)
            if not challenge.is_pending:
                raise ChallengeExpiredError("Challenge is no longer pending")

            challenge.transition_to(ChallengeStatus.DECLINED)
            notice = self.challenges.add_decline_notice(
                challenge, declined_by or challenge.opponent_name
            )

        logger.info("Challenge declined", challenge_id=challenge_id, opponent_id=user_id)
        return notice

    # ------------------------------------------------------------------ #
    # Bot battles
    # ------------------------------------------------------------------ #

    async def create_bot_battle(
        self,
        user_id: str,
        pokemon: PokemonSnapshot,
        bot_pokemon: PokemonSnapshot,
    ) -> str:
        """Fight the bot, record the result and stage it. Returns the battle id."""
        async with self._lock:
            now = self._clock()
            if not await self.history.has_quota_remaining(user_id, now):
                raise ValidationError(self.quota_message)

            record = build_battle(
                pokemon,
                bot_pokemon,
                PLAYER_DISPLAY_NAME,
                BOT_DISPLAY_NAME,
                user_id,
                BOT_OPPONENT_ID,
                rng=self._rng,
                type_effectiveness=self.settings.type_effectiveness_in_bot_battles,
            )
            await self.history.append(
                user_id,
                BATTLE_TYPE_BOT,
                opponent=BOT_DISPLAY_NAME,
                details=record.storage,
                now=now,
            )
            battle_id = self.staging.new_bot_battle_id(user_id)
            self.staging.put(battle_id, record.display)

        logger.info("Bot battle staged", battle_id=battle_id, user_id=user_id, result=record.result)
        return battle_id

    async def battle_data(self, battle_id: str) -> dict[str, Any]:
        """Display data for a bot battle or an accepted challenge."""
        async with self._lock:
            if not battle_id.startswith(BOT_BATTLE_PREFIX):
                challenge = self.challenges.get(battle_id)
                if challenge is not None and challenge.battle_data is not None:
                    return challenge.battle_data

            battle_data = self.staging.get(battle_id)

        if battle_data is None:
            raise BattleNotFoundError("Battle data not found")
        return battle_data

    # ------------------------------------------------------------------ #
    # Housekeeping
    # ------------------------------------------------------------------ #

    async def sweep(self) -> None:
        """Run every expiry pass now."""
        async with self._lock:
            self.challenges.sweep()
            self.staging.sweep()
            self.presence.evict_stale()
