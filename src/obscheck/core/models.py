"""Core domain models for captured observability data."""

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class CapturedLogRecord:
    """A captured logging event.

    Attributes:
        message: The message template (e.g. "Tag %s registered").
        parameters: Substitution parameters, in call order.
        level: Log level name (e.g., INFO, ERROR, DEBUG).
        logger: Name of the logger that emitted the record.
        timestamp: Unix timestamp in seconds.
        attributes: Additional structured fields.
    """

    message: str
    parameters: tuple[Any, ...] = ()
    level: str = "INFO"
    logger: str = ""
    timestamp: float = 0.0
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)

    def formatted(self) -> str:
        """Render the message template with its parameters.

        A lone mapping parameter fills ``%(name)s`` placeholders. Falls back to
        the raw template when the parameters do not fit it.
        """
        if not self.parameters:
            return self.message
        args: Any = self.parameters
        if len(self.parameters) == 1 and isinstance(self.parameters[0], Mapping):
            args = self.parameters[0]
        try:
            return self.message % args
        except (TypeError, ValueError, KeyError):
            return self.message


class MeterKind(str, Enum):
    """Kinds of meters a registry can hold."""

    COUNTER = "counter"
    TIMER = "timer"
    GAUGE = "gauge"


@dataclass(frozen=True)
class MeterId:
    """Identity of a meter: its name, kind and dimension tags.

    Attributes:
        name: Meter name (e.g., http.server.requests).
        tags: Key-value pairs for meter dimensions.
        kind: The kind of meter this id belongs to.
    """

    name: str
    tags: dict[str, str] = field(default_factory=dict)
    kind: MeterKind = MeterKind.COUNTER

    def get_tag(self, key: str) -> str | None:
        """Return the value of tag ``key``, or None when the tag is absent."""
        return self.tags.get(key)

    @property
    def key(self) -> tuple[str, tuple[tuple[str, str], ...]]:
        """Hashable identity, independent of tag insertion order."""
        return self.name, tuple(sorted(self.tags.items()))


class _Meter:
    """Shared behaviour for registry-owned meters."""

    def __init__(self, meter_id: MeterId) -> None:
        self.id = meter_id
        self._lock = threading.Lock()

    def get_tag(self, key: str) -> str | None:
        return self.id.get_tag(key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.id.name!r}, tags={self.id.tags!r})"


class Counter(_Meter):
    """Monotonically increasing count."""

    def __init__(self, meter_id: MeterId) -> None:
        super().__init__(meter_id)
        self._count = 0.0

    def increment(self, amount: float = 1.0) -> None:
        """Increase the count by ``amount`` (default 1)."""
        if amount < 0:
            raise ValueError("counter increment must be non-negative")
        with self._lock:
            self._count += amount

    @property
    def count(self) -> float:
        return self._count

    @property
    def value(self) -> float:
        return self._count


class Timer(_Meter):
    """Records durations in seconds."""

    def __init__(self, meter_id: MeterId) -> None:
        super().__init__(meter_id)
        self._count = 0
        self._total = 0.0
        self._max = 0.0

    def record(self, seconds: float) -> None:
        """Record a single duration."""
        if seconds < 0:
            raise ValueError("timer duration must be non-negative")
        with self._lock:
            self._count += 1
            self._total += seconds
            self._max = max(self._max, seconds)

    @property
    def count(self) -> int:
        return self._count

    @property
    def total_time(self) -> float:
        return self._total

    @property
    def max(self) -> float:
        return self._max

    @property
    def mean(self) -> float:
        return self._total / self._count if self._count else 0.0

    @property
    def value(self) -> float:
        return self._total


class Gauge(_Meter):
    """Holds the last value set."""

    def __init__(self, meter_id: MeterId) -> None:
        super().__init__(meter_id)
        self._value = 0.0

    def set(self, value: float) -> None:
        with self._lock:
            self._value = value

    @property
    def value(self) -> float:
        return self._value


Meter = Counter | Timer | Gauge

METER_TYPES: dict[MeterKind, type[Counter] | type[Timer] | type[Gauge]] = {
    MeterKind.COUNTER: Counter,
    MeterKind.TIMER: Timer,
    MeterKind.GAUGE: Gauge,
}
