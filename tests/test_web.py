"""Tests for the HTTP layer."""

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from conftest import make_api_payload
from pokearena.web import create_app

ASH = {"X-User-Id": "u1"}
MISTY = {"X-User-Id": "u2"}


@pytest_asyncio.fixture
async def client(arena, favorites, users, players):
    app = create_app(arena, favorites, users)
    async with TestClient(TestServer(app)) as test_client:
        yield test_client


@pytest.mark.asyncio
async def test_requires_user(client):
    response = await client.get("/api/arena/status")
    assert response.status == 401


@pytest.mark.asyncio
async def test_unknown_user(client):
    response = await client.get("/api/arena/status", headers={"X-User-Id": "nobody"})
    assert response.status == 401


@pytest.mark.asyncio
async def test_arena_status(client):
    response = await client.get("/api/arena/status", headers=ASH)

    assert response.status == 200
    data = await response.json()
    assert data["battles_remaining"] == 5
    assert data["favorites_count"] == 1


class TestFavorites:
    @pytest.mark.asyncio
    async def test_add_and_list(self, client):
        response = await client.post("/api/favorites", json={"pokemon_id": 25}, headers=ASH)
        assert response.status == 200
        assert (await response.json())["count"] == 2

        response = await client.get("/api/favorites", headers=ASH)
        data = await response.json()
        assert [f["pokemon_id"] for f in data["favorites"]] == [4, 25]

    @pytest.mark.asyncio
    async def test_duplicate(self, client):
        response = await client.post("/api/favorites", json={"pokemon_id": 4}, headers=ASH)

        assert response.status == 400
        assert (await response.json())["error"] == "Pokemon is already in favorites"

    @pytest.mark.asyncio
    async def test_bad_pokemon_id(self, client):
        response = await client.post("/api/favorites", json={"pokemon_id": "pikachu"}, headers=ASH)
        assert response.status == 400

    @pytest.mark.asyncio
    async def test_remove_missing(self, client):
        response = await client.delete("/api/favorites/25", headers=ASH)
        assert response.status == 404

    @pytest.mark.asyncio
    async def test_invalid_body(self, client):
        response = await client.post("/api/favorites", data="not json", headers=ASH)
        assert response.status == 400


class TestChallenges:
    @pytest.mark.asyncio
    async def test_send_to_offline_player(self, client):
        response = await client.post("/api/arena/send-challenge", json={"opponent_id": "u2"}, headers=ASH)

        assert response.status == 400
        data = await response.json()
        assert data["error"] == "Opponent is no longer online"
        assert data["errors"] == ["Opponent is no longer online"]

    @pytest.mark.asyncio
    async def test_missing_opponent(self, client):
        response = await client.post("/api/arena/send-challenge", json={}, headers=ASH)
        assert response.status == 400

    @pytest.mark.asyncio
    async def test_challenge_round_trip(self, client):
        await client.get("/api/arena/online-players", headers=MISTY)

        response = await client.post("/api/arena/send-challenge", json={"opponent_id": "u2"}, headers=ASH)
        assert response.status == 200
        challenge_id = (await response.json())["challenge_id"]

        response = await client.get("/api/arena/pending-challenges", headers=MISTY)
        [pending] = (await response.json())["challenges"]
        assert pending["id"] == challenge_id

        response = await client.post(
            "/api/arena/accept-challenge", json={"challenge_id": challenge_id}, headers=MISTY
        )
        assert response.status == 200
        assert (await response.json())["redirect_url"] == f"/arena/battle?challengeId={challenge_id}"

        response = await client.get("/api/arena/accepted-challenges", headers=ASH)
        assert (await response.json())["challenge"]["id"] == challenge_id

        response = await client.get(f"/api/arena/battle-data/{challenge_id}", headers=ASH)
        battle = (await response.json())["battle_data"]
        assert battle["player1_name"] == "Ash"
        assert battle["player2_name"] == "Misty"

    @pytest.mark.asyncio
    async def test_decline(self, client):
        await client.get("/api/arena/online-players", headers=MISTY)
        response = await client.post("/api/arena/send-challenge", json={"opponent_id": "u2"}, headers=ASH)
        challenge_id = (await response.json())["challenge_id"]

        response = await client.post(
            "/api/arena/decline-challenge", json={"challenge_id": challenge_id}, headers=MISTY
        )
        assert response.status == 200

        response = await client.get("/api/arena/declined-challenges", headers=ASH)
        assert (await response.json())["challenge"]["declined_by"] == "Misty"

        response = await client.post(
            "/api/arena/accept-challenge", json={"challenge_id": challenge_id}, headers=MISTY
        )
        assert response.status == 409

    @pytest.mark.asyncio
    async def test_accept_unknown(self, client):
        response = await client.post(
            "/api/arena/accept-challenge", json={"challenge_id": "challenge_nope"}, headers=MISTY
        )
        assert response.status == 404


class TestBotBattles:
    @pytest.mark.asyncio
    async def test_create_and_fetch(self, client):
        response = await client.post(
            "/api/arena/create-bot-battle",
            json={
                "player1_pokemon": make_api_payload(25, "pikachu"),
                "player2_pokemon": make_api_payload(133, "eevee", ("normal",)),
            },
            headers=ASH,
        )
        assert response.status == 200
        battle_id = (await response.json())["battle_id"]
        assert battle_id.startswith("bot_u1_")

        response = await client.get(f"/api/arena/battle-data/{battle_id}", headers=ASH)
        battle = (await response.json())["battle_data"]
        assert battle["battle_type"] == "bot"
        assert battle["player1_pokemon"]["name"] == "pikachu"

        response = await client.get("/api/arena/history", headers=ASH)
        assert (await response.json())["total_battles"] == 1

    @pytest.mark.asyncio
    async def test_malformed_pokemon(self, client):
        response = await client.post(
            "/api/arena/create-bot-battle",
            json={
                "player1_pokemon": {"name": "pikachu"},
                "player2_pokemon": make_api_payload(133, "eevee", ("normal",)),
            },
            headers=ASH,
        )
        assert response.status == 422

    @pytest.mark.asyncio
    async def test_missing_battle(self, client):
        response = await client.get("/api/arena/battle-data/bot_u1_0", headers=ASH)
        assert response.status == 404


@pytest.mark.asyncio
async def test_leaderboard(client):
    response = await client.get("/api/leaderboard", headers=ASH)

    assert response.status == 200
    assert (await response.json())["leaderboard"] == []
