"""Pytest configuration and shared fixtures."""

import asyncio
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from pokearena.config import Settings
from pokearena.core.arena import ArenaService
from pokearena.core.errors import UpstreamFetchError
from pokearena.core.pokemon import PokemonSnapshot
from pokearena.database import close_db, create_session_factory, init_db
from pokearena.database.stores import BattleHistoryStore, FavoritesStore, UserStore

# Midday so a few hours either way stays on the same UTC day
START_TIME = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc).timestamp()


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = START_TIME):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ZeroRandom:
    """RNG stand-in with no random term and deterministic picks."""

    def random(self) -> float:
        return 0.0

    def choice(self, seq):
        return seq[0]


class FakePokemonSource:
    """In-memory Pokemon data source."""

    def __init__(self, pokemon: dict[int, PokemonSnapshot] | None = None):
        self.pokemon = dict(pokemon or {})
        self.fetched: list[int] = []
        self.fail = False
        self.error: Exception | None = None
        # When set, fetches block until the event is set
        self.gate: asyncio.Event | None = None
        self.waiting = 0

    def hold(self) -> asyncio.Event:
        self.gate = asyncio.Event()
        return self.gate

    async def wait_for_fetches(self, count: int = 2) -> None:
        """Yield until ``count`` fetches are blocked on the gate."""
        while self.waiting < count:
            await asyncio.sleep(0)

    async def fetch(self, pokemon_id: int) -> PokemonSnapshot:
        # Yield so concurrent callers interleave
        await asyncio.sleep(0)
        self.fetched.append(pokemon_id)
        if self.gate is not None:
            self.waiting += 1
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.fail:
            raise UpstreamFetchError(f"Failed to fetch Pokemon #{pokemon_id}")
        return self.pokemon[pokemon_id]


def make_pokemon(
    pokemon_id: int = 1,
    name: str = "testmon",
    types: tuple[str, ...] = ("normal",),
    hp: int = 50,
    attack: int = 50,
    defense: int = 50,
    speed: int = 50,
) -> PokemonSnapshot:
    return PokemonSnapshot(
        id=pokemon_id,
        name=name,
        types=types,
        stats=(hp, attack, defense, 50, 50, speed),
        abilities=("overgrow",),
        sprites={"front_default": f"https://sprites.example/{pokemon_id}.png"},
    )


def make_api_payload(
    pokemon_id: int = 25,
    name: str = "pikachu",
    types: tuple[str, ...] = ("electric",),
    stats: tuple[int, ...] = (35, 55, 40, 50, 50, 90),
) -> dict:
    """A trimmed PokeAPI /pokemon/{id} response."""
    stat_names = ["hp", "attack", "defense", "special-attack", "special-defense", "speed"]
    return {
        "id": pokemon_id,
        "name": name,
        "types": [{"slot": i + 1, "type": {"name": t}} for i, t in enumerate(types)],
        "abilities": [{"ability": {"name": "static"}, "is_hidden": False}],
        "stats": [
            {"base_stat": value, "stat": {"name": stat_names[i] if i < 6 else "extra"}}
            for i, value in enumerate(stats)
        ],
        "sprites": {"front_default": f"https://sprites.example/{pokemon_id}.png"},
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite://",
        daily_battle_limit=5,
        max_favorites=10,
        presence_timeout_seconds=300,
        challenge_ttl_seconds=30,
        declined_notice_ttl_seconds=10,
        accepted_challenge_ttl_seconds=600,
        bot_battle_ttl_seconds=600,
        type_effectiveness_in_bot_battles=True,
        leaderboard_min_battles=5,
        leaderboard_recent_battles=10,
        leaderboard_tiebreak="win_rate",
    )


@pytest_asyncio.fixture
async def engine():
    """In-memory database shared across sessions."""
    db_engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_db(db_engine)
    yield db_engine
    await close_db(db_engine)


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def users(session_factory):
    return UserStore(session_factory)


@pytest.fixture
def favorites(session_factory, test_settings):
    return FavoritesStore(session_factory, max_favorites=test_settings.max_favorites)


@pytest.fixture
def history(session_factory, test_settings):
    return BattleHistoryStore(session_factory, daily_battle_limit=test_settings.daily_battle_limit)


@pytest.fixture
def pokemon_source():
    return FakePokemonSource({
        1: make_pokemon(1, "bulbasaur", ("grass", "poison"), hp=45, attack=49, defense=49, speed=45),
        4: make_pokemon(4, "charmander", ("fire",), hp=39, attack=52, defense=43, speed=65),
        7: make_pokemon(7, "squirtle", ("water",), hp=44, attack=48, defense=65, speed=43),
    })


@pytest.fixture
def arena(users, favorites, history, pokemon_source, test_settings, clock):
    return ArenaService(
        users,
        favorites,
        history,
        pokemon_source,
        settings=test_settings,
        clock=clock,
        rng=ZeroRandom(),
    )


@pytest_asyncio.fixture
async def players(users, favorites):
    """Two registered players, each with one favorite."""
    ash = await users.create("u1", "Ash", "ash@example.com", "hash")
    misty = await users.create("u2", "Misty", "misty@example.com", "hash")
    await favorites.add("u1", 4)
    await favorites.add("u2", 7)
    return ash, misty
