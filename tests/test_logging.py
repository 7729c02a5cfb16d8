"""Tests for logging helpers."""

import structlog

from pokearena.logging import bind_request_context


def test_bind_request_context_replaces_previous_values():
    bind_request_context(user_id="u1", path="/api/arena/status")
    assert structlog.contextvars.get_contextvars() == {
        "user_id": "u1",
        "path": "/api/arena/status",
    }

    bind_request_context(user_id="u2")
    assert structlog.contextvars.get_contextvars() == {"user_id": "u2"}

    structlog.contextvars.clear_contextvars()
