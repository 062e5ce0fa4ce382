"""pytest plugin providing log and meter capture fixtures.

Registered through the ``pytest11`` entry point, so installing obscheck
makes the fixtures available to every test session.
"""

import logging
from collections.abc import Iterator

import pytest

from obscheck.adapters.logging import capture_logs
from obscheck.adapters.storage.in_memory import InMemoryLogCapture, InMemoryMeterRegistry

LOG_LEVEL_INI = "obscheck_log_level"


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini(
        LOG_LEVEL_INI,
        help="Minimum level captured by the log_capture fixture (default DEBUG).",
        default="DEBUG",
    )


def _resolve_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise pytest.UsageError(f"{LOG_LEVEL_INI}: unknown log level {value!r}")
    return level


@pytest.fixture
def log_capture(request: pytest.FixtureRequest) -> Iterator[InMemoryLogCapture]:
    """Capture records logged to the root logger during the test."""
    level = _resolve_level(request.config.getini(LOG_LEVEL_INI))
    with capture_logs(level=level) as capture:
        yield capture


@pytest.fixture
def meter_registry() -> InMemoryMeterRegistry:
    """Fresh in-memory meter registry."""
    return InMemoryMeterRegistry()
