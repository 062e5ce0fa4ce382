"""Shared test fixtures for all test modules."""

from pathlib import Path

import pytest

from obscheck.core.models import CapturedLogRecord, MeterId, MeterKind


@pytest.fixture
def meters_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for meter snapshot tests."""
    return str(tmp_path / "meters.db")


@pytest.fixture
def make_record():
    """Factory fixture for CapturedLogRecord with only parameters set.

    Used in tests to avoid spelling out message templates.
    """

    def _record(*parameters: object, message: str = "msg") -> CapturedLogRecord:
        return CapturedLogRecord(message=message, parameters=tuple(parameters))

    return _record


@pytest.fixture
def make_meter_id():
    """Factory fixture for MeterId values tagged with keyword arguments."""

    def _meter_id(name: str = "http.server.requests", **tags: str) -> MeterId:
        return MeterId(name=name, tags=dict(tags), kind=MeterKind.TIMER)

    return _meter_id


# === ASGI Test Fixtures ===


@pytest.fixture
def routing_asgi_app():
    """ASGI app answering 200 for /users/<id>, 302 for /old, 500 for /boom.

    Any other path answers 404.
    """
    from obscheck.adapters.frameworks.asgi import Receive, Scope, Send

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        path = scope["path"]
        if path == "/boom":
            raise RuntimeError("boom")
        if path.startswith("/users/") or path == "/health":
            status = 200
        elif path == "/old":
            status = 302
        else:
            status = 404
        await send({"type": "http.response.start", "status": status, "headers": []})
        await send({"type": "http.response.body", "body": b"OK"})

    return app


@pytest.fixture
def asgi_scope():
    """Factory fixture for creating ASGI scope dicts."""
    from obscheck.adapters.frameworks.asgi import Scope

    def _scope(method: str = "GET", path: str = "/test") -> Scope:
        return {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [],
        }

    return _scope


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture."""

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses
