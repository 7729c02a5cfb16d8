"""Request payload helpers."""

from typing import Any

from aiohttp import web

from pokearena.core.errors import ValidationError


async def read_json(request: web.Request) -> dict[str, Any]:
    """Parse a JSON object body."""
    try:
        data = await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON") from e
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_field(data: dict[str, Any], name: str) -> Any:
    value = data.get(name)
    if value in (None, ""):
        raise ValidationError(f"{name} is required")
    return value
