"""Tests for the persistence stores."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from conftest import START_TIME
from pokearena.core.errors import NotFoundError, ValidationError


def storage_record(result="won", my_score=70.0, opponent_score=65.0):
    return {
        "my_pokemon": {"name": "charmander", "sprite": None, "score": my_score},
        "opponent_pokemon": {"name": "squirtle", "sprite": None, "score": opponent_score},
        "result": result,
    }


class TestUserStore:
    @pytest.mark.asyncio
    async def test_create_and_get(self, users):
        await users.create("u1", "Ash", "ash@example.com", "hash")

        user = await users.get("u1")
        assert user.first_name == "Ash"
        assert user.email == "ash@example.com"

        assert (await users.get_by_email("ash@example.com")).id == "u1"
        assert await users.get("missing") is None

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, users):
        await users.create("u1", "Ash", "ash@example.com", "hash")
        with pytest.raises(ValidationError):
            await users.create("u2", "Ashley", "ash@example.com", "hash")

    @pytest.mark.asyncio
    async def test_list_all(self, users):
        await users.create("u1", "Ash", "ash@example.com", "hash")
        await users.create("u2", "Misty", "misty@example.com", "hash")

        assert {u.id for u in await users.list_all()} == {"u1", "u2"}

    @pytest.mark.asyncio
    async def test_relationships_not_loaded_implicitly(self, users):
        await users.create("u1", "Ash", "ash@example.com", "hash")
        user = await users.get("u1")

        with pytest.raises(SQLAlchemyError):
            user.favorites
        with pytest.raises(SQLAlchemyError):
            user.battle_logs


class TestFavoritesStore:
    @pytest.mark.asyncio
    async def test_add_and_list(self, favorites):
        await favorites.add("u1", 25)
        await favorites.add("u1", 4)

        entries = await favorites.list("u1")
        assert [e.pokemon_id for e in entries] == [25, 4]
        assert await favorites.count("u1") == 2
        assert await favorites.list("u2") == []

    @pytest.mark.asyncio
    async def test_duplicate_rejected_without_mutation(self, favorites):
        await favorites.add("u1", 25)

        with pytest.raises(ValidationError, match="already in favorites"):
            await favorites.add("u1", 25)

        assert [e.pokemon_id for e in await favorites.list("u1")] == [25]

    @pytest.mark.asyncio
    async def test_eleventh_rejected_without_mutation(self, favorites):
        for pokemon_id in range(1, 11):
            await favorites.add("u1", pokemon_id)

        with pytest.raises(ValidationError, match="Maximum of 10"):
            await favorites.add("u1", 11)

        assert [e.pokemon_id for e in await favorites.list("u1")] == list(range(1, 11))

    @pytest.mark.asyncio
    async def test_lists_are_per_user(self, favorites):
        await favorites.add("u1", 25)
        await favorites.add("u2", 25)

        assert await favorites.count("u1") == 1
        assert await favorites.count("u2") == 1

    @pytest.mark.asyncio
    async def test_remove(self, favorites):
        await favorites.add("u1", 25)
        await favorites.add("u1", 4)
        await favorites.remove("u1", 25)

        assert [e.pokemon_id for e in await favorites.list("u1")] == [4]

    @pytest.mark.asyncio
    async def test_remove_missing(self, favorites):
        with pytest.raises(NotFoundError):
            await favorites.remove("u1", 25)


class TestBattleHistoryStore:
    @pytest.mark.asyncio
    async def test_append_and_load(self, history):
        await history.append("u1", "bot", opponent="Bot", details=storage_record(), now=START_TIME)
        await history.append("u1", "bot", opponent="Bot", details=storage_record("lost"), now=START_TIME + 60)

        entries = await history.load_all("u1")
        assert [e.result for e in entries] == ["won", "lost"]
        assert entries[0].type == "bot"
        assert entries[0].opponent == "Bot"
        assert entries[0].timestamp < entries[1].timestamp
        assert await history.load_all("u2") == []

    @pytest.mark.asyncio
    async def test_load_all_orders_by_timestamp(self, history):
        await history.append("u1", "bot", details=storage_record("lost"), now=START_TIME + 60)
        await history.append("u1", "bot", details=storage_record("won"), now=START_TIME)

        assert [e.result for e in await history.load_all("u1")] == ["won", "lost"]

    @pytest.mark.asyncio
    async def test_count_today_ignores_other_days(self, history):
        day = 24 * 60 * 60
        await history.append("u1", "bot", now=START_TIME - day)
        await history.append("u1", "bot", now=START_TIME)
        await history.append("u1", "bot", now=START_TIME + 3600)
        await history.append("u1", "bot", now=START_TIME + day)

        assert await history.count_today("u1", now=START_TIME) == 2

    @pytest.mark.asyncio
    async def test_quota(self, history):
        for i in range(4):
            await history.append("u1", "bot", now=START_TIME + i)
        assert await history.has_quota_remaining("u1", now=START_TIME + 10)

        await history.append("u1", "player-vs-player", now=START_TIME + 5)
        assert not await history.has_quota_remaining("u1", now=START_TIME + 10)

    @pytest.mark.asyncio
    async def test_quota_resets_next_day(self, history):
        for i in range(5):
            await history.append("u1", "bot", now=START_TIME + i)

        assert await history.has_quota_remaining("u1", now=START_TIME + 24 * 60 * 60)

    @pytest.mark.asyncio
    async def test_record_player_battle_is_symmetric(self, history):
        await history.record_player_battle("u1", "u2", "Ash", "Misty", storage_record("won"), now=START_TIME)

        [ash_entry] = await history.load_all("u1")
        [misty_entry] = await history.load_all("u2")

        assert ash_entry.type == misty_entry.type == "player-vs-player"
        assert ash_entry.opponent == "Misty"
        assert misty_entry.opponent == "Ash"
        assert ash_entry.result == "won"
        assert misty_entry.result == "lost"
        assert ash_entry.details["my_pokemon"] == misty_entry.details["opponent_pokemon"]
        assert ash_entry.details["opponent_pokemon"] == misty_entry.details["my_pokemon"]
        assert ash_entry.details["opponent_name"] == "Misty"
        assert misty_entry.details["opponent_name"] == "Ash"

    @pytest.mark.asyncio
    async def test_record_player_battle_tie(self, history):
        await history.record_player_battle("u1", "u2", "Ash", "Misty", storage_record("tie"), now=START_TIME)

        assert [e.result for e in await history.load_all("u1")] == ["tie"]
        assert [e.result for e in await history.load_all("u2")] == ["tie"]

    @pytest.mark.asyncio
    async def test_entry_to_dict(self, history):
        entry = await history.append("u1", "bot", opponent="Bot", details=storage_record(), now=START_TIME)

        data = entry.to_dict()
        assert data["timestamp"] == "2026-10-19T12:00:00"
        assert data["type"] == "bot"
        assert data["details"]["result"] == "won"
