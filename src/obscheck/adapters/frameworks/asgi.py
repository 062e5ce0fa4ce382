"""ASGI middleware recording HTTP server request timers.

The middleware is framework-agnostic: it wraps any ASGI application
(Starlette, FastAPI, Django's ASGI handler or a bare callable) and records
one timer per distinct (method, uri, status, outcome) into a meter registry.
"""

import fnmatch
import logging
import re
import time
from collections.abc import Callable, Coroutine, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from obscheck.adapters.storage.in_memory import InMemoryMeterRegistry

logger = logging.getLogger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

DEFAULT_METRIC_NAME = "http.server.requests"


@dataclass(frozen=True)
class HttpServerMetricsConfig:
    """Configuration for ASGIMetricsMiddleware.

    Attributes:
        metric_name: Name of the request timer.
        ignore_patterns: Paths not to record. Supports exact matches and
            wildcard patterns (e.g., "/internal/*").
        match_patterns: Regular expression to replacement ``uri`` tag, used
            to collapse parameterized paths (e.g. ``{"/user/[0-9]+": "/user/{id}"}``).
            The first pattern that fully matches the path wins.
        max_uri_tags: Maximum number of distinct ``uri`` values recorded.
    """

    metric_name: str = DEFAULT_METRIC_NAME
    ignore_patterns: tuple[str, ...] = ()
    match_patterns: Mapping[str, str] = field(default_factory=dict)
    max_uri_tags: int = 100


def _outcome(status_code: int) -> str:
    """Map an HTTP status code to its outcome tag.

    - 100-199 (1xx) → "INFORMATIONAL"
    - 200-299 (2xx) → "SUCCESS"
    - 300-399 (3xx) → "REDIRECTION"
    - 400-499 (4xx) → "CLIENT_ERROR"
    - 500-599 (5xx) → "SERVER_ERROR"
    - Other → "UNKNOWN"
    """
    if 100 <= status_code < 200:
        return "INFORMATIONAL"
    if 200 <= status_code < 300:
        return "SUCCESS"
    if 300 <= status_code < 400:
        return "REDIRECTION"
    if 400 <= status_code < 500:
        return "CLIENT_ERROR"
    if 500 <= status_code < 600:
        return "SERVER_ERROR"
    return "UNKNOWN"


class ASGIMetricsMiddleware:
    """ASGI middleware that times requests into a meter registry.

    Example:
        ```python
        registry = InMemoryMeterRegistry()
        app = ASGIMetricsMiddleware(app, registry, match_patterns={...})
        ```
    """

    def __init__(
        self,
        app: ASGIApp,
        registry: InMemoryMeterRegistry,
        config: HttpServerMetricsConfig | None = None,
        **overrides: Any,
    ) -> None:
        """Initialize the middleware with a wrapped app and a registry.

        Args:
            app: The ASGI application to wrap.
            registry: Registry receiving the request timers.
            config: Middleware configuration (default: HttpServerMetricsConfig()).
            **overrides: Individual HttpServerMetricsConfig fields to override.
        """
        if not callable(app):
            raise TypeError("app must be an ASGI callable")
        config = config or HttpServerMetricsConfig()
        if overrides:
            config = replace(config, **overrides)
        if config.max_uri_tags < 1:
            raise ValueError("max_uri_tags must be at least 1")
        self.app = app
        self.registry = registry
        self.config = config
        self._match_patterns = [
            (re.compile(pattern), replacement)
            for pattern, replacement in config.match_patterns.items()
        ]
        self._uri_tags: set[str] = set()
        self._uri_limit_reported = False

    def _path_ignored(self, path: str) -> bool:
        """Check if path matches any pattern in ignore_patterns."""
        return any(
            fnmatch.fnmatch(path, pattern) for pattern in self.config.ignore_patterns
        )

    def _uri(self, path: str, status_code: int) -> str:
        """Resolve the ``uri`` tag for a request."""
        for pattern, replacement in self._match_patterns:
            if pattern.fullmatch(path):
                return replacement
        if status_code == 404:
            return "NOT_FOUND"
        if 300 <= status_code < 400:
            return "REDIRECTION"
        return path

    def _admit_uri(self, uri: str) -> bool:
        """Track distinct uri values, refusing new ones past the limit."""
        if uri in self._uri_tags:
            return True
        if len(self._uri_tags) < self.config.max_uri_tags:
            self._uri_tags.add(uri)
            return True
        if not self._uri_limit_reported:
            self._uri_limit_reported = True
            logger.warning(
                "Reached the maximum number (%s) of URI tags for '%s'.",
                self.config.max_uri_tags,
                self.config.metric_name,
            )
        return False

    def _record(self, scope: Scope, status_code: int, duration: float) -> None:
        """Record the request timer."""
        uri = self._uri(scope["path"], status_code)
        if not self._admit_uri(uri):
            return
        tags = {
            "method": scope["method"],
            "uri": uri,
            "status": str(status_code),
            "outcome": _outcome(status_code),
        }
        self.registry.timer(self.config.metric_name, tags).record(duration)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI callable interface that processes requests through the wrapped app."""
        if scope["type"] != "http" or self._path_ignored(scope["path"]):
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        captured: dict[str, Any] = {"status": None}

        async def wrapped_send(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                captured["status"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, wrapped_send)
        except Exception:
            logger.error(
                "Unhandled error for %s %s",
                scope["method"],
                scope["path"],
                exc_info=True,
            )
            duration = time.perf_counter() - start_time
            self._record(scope, captured["status"] or 500, duration)
            raise

        duration = time.perf_counter() - start_time
        if captured["status"] is not None:
            self._record(scope, captured["status"], duration)
