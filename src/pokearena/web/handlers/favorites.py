"""Favorites handlers."""

from aiohttp import web

from pokearena.core.errors import ValidationError
from pokearena.web.keys import FAVORITES
from pokearena.web.payload import read_json, require_field

routes = web.RouteTableDef()


def parse_pokemon_id(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError("Pokemon ID must be a number") from e


@routes.get("/api/favorites")
async def list_favorites(request: web.Request) -> web.Response:
    favorites = await request.app[FAVORITES].list(request["user"].id)
    return web.json_response({
        "favorites": [f.to_dict() for f in favorites],
        "count": len(favorites),
    })


@routes.post("/api/favorites")
async def add_favorite(request: web.Request) -> web.Response:
    data = await read_json(request)
    pokemon_id = parse_pokemon_id(require_field(data, "pokemon_id"))
    store = request.app[FAVORITES]

    entry = await store.add(request["user"].id, pokemon_id)
    return web.json_response({
        "message": "Pokemon added to favorites",
        "favorite": entry.to_dict(),
        "count": await store.count(request["user"].id),
    })


@routes.delete("/api/favorites/{pokemon_id}")
async def remove_favorite(request: web.Request) -> web.Response:
    pokemon_id = parse_pokemon_id(request.match_info["pokemon_id"])
    store = request.app[FAVORITES]

    await store.remove(request["user"].id, pokemon_id)
    return web.json_response({
        "message": "Pokemon removed from favorites",
        "count": await store.count(request["user"].id),
    })
