"""Leaderboard handlers."""

from aiohttp import web

from pokearena.web.keys import ARENA

routes = web.RouteTableDef()


@routes.get("/api/leaderboard")
async def get_leaderboard(request: web.Request) -> web.Response:
    """Ranked players, with the caller's row marked."""
    entries = await request.app[ARENA].leaderboard(request["user"].id)
    return web.json_response({"leaderboard": [e.to_dict() for e in entries]})
