"""Arena handlers: presence, challenges, bot battles and history."""

from aiohttp import web

from pokearena.core.pokemon import PokemonSnapshot
from pokearena.web.keys import ARENA
from pokearena.web.payload import read_json, require_field

routes = web.RouteTableDef()


@routes.get("/api/arena/status")
async def arena_status(request: web.Request) -> web.Response:
    status = await request.app[ARENA].arena_status(request["user"].id)
    return web.json_response(status)


@routes.get("/api/arena/history")
async def battle_history(request: web.Request) -> web.Response:
    history = await request.app[ARENA].battle_history(request["user"].id)
    return web.json_response(history)


# Presence


@routes.get("/api/arena/online-players")
async def online_players(request: web.Request) -> web.Response:
    """Heartbeat the caller and list who is online."""
    user = request["user"]
    players = await request.app[ARENA].online_players(user.id, user.first_name)
    return web.json_response({"players": [p.to_dict() for p in players]})


@routes.post("/api/arena/remove-online")
async def remove_online(request: web.Request) -> web.Response:
    await request.app[ARENA].leave(request["user"].id)
    return web.json_response({"message": "Removed from online players"})


# Challenges


@routes.post("/api/arena/send-challenge")
async def send_challenge(request: web.Request) -> web.Response:
    data = await read_json(request)
    opponent_id = str(require_field(data, "opponent_id"))
    user = request["user"]

    challenge = await request.app[ARENA].create_challenge(user.id, user.first_name, opponent_id)
    return web.json_response({
        "message": "Challenge sent successfully",
        "challenge_id": challenge.id,
    })


@routes.get("/api/arena/pending-challenges")
async def pending_challenges(request: web.Request) -> web.Response:
    challenges = await request.app[ARENA].pending_challenges(request["user"].id)
    return web.json_response({"challenges": [c.to_dict() for c in challenges]})


@routes.get("/api/arena/accepted-challenges")
async def accepted_challenges(request: web.Request) -> web.Response:
    challenge = await request.app[ARENA].poll_accepted(request["user"].id)
    return web.json_response({"challenge": challenge.to_dict() if challenge else None})


@routes.get("/api/arena/declined-challenges")
async def declined_challenges(request: web.Request) -> web.Response:
    notice = await request.app[ARENA].poll_declined(request["user"].id)
    return web.json_response({"challenge": notice.to_dict() if notice else None})


@routes.post("/api/arena/accept-challenge")
async def accept_challenge(request: web.Request) -> web.Response:
    data = await read_json(request)
    challenge_id = str(require_field(data, "challenge_id"))

    result = await request.app[ARENA].accept_challenge(challenge_id, request["user"].id)
    return web.json_response(result.to_dict())


@routes.post("/api/arena/decline-challenge")
async def decline_challenge(request: web.Request) -> web.Response:
    data = await read_json(request)
    challenge_id = str(require_field(data, "challenge_id"))
    user = request["user"]

    await request.app[ARENA].decline_challenge(challenge_id, user.id, declined_by=user.first_name)
    return web.json_response({"message": "Challenge declined"})


# Battles


@routes.post("/api/arena/create-bot-battle")
async def create_bot_battle(request: web.Request) -> web.Response:
    """Score the caller's Pokemon against the bot's.

    Both Pokemon objects come from the client, in PokeAPI shape.
    """
    data = await read_json(request)
    pokemon = PokemonSnapshot.from_api(require_field(data, "player1_pokemon"))
    bot_pokemon = PokemonSnapshot.from_api(require_field(data, "player2_pokemon"))

    battle_id = await request.app[ARENA].create_bot_battle(request["user"].id, pokemon, bot_pokemon)
    return web.json_response({
        "battle_id": battle_id,
        "message": "Bot battle created successfully",
    })


@routes.get("/api/arena/battle-data/{battle_id}")
async def battle_data(request: web.Request) -> web.Response:
    battle = await request.app[ARENA].battle_data(request.match_info["battle_id"])
    return web.json_response({"battle_data": battle})
