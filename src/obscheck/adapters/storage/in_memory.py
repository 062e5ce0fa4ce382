"""In-memory capture adapters for logs and meters."""

import logging
import threading
from collections.abc import Mapping
from typing import Any, cast

from obscheck.core.metrics import select_instruments
from obscheck.core.models import (
    METER_TYPES,
    CapturedLogRecord,
    Counter,
    Gauge,
    Meter,
    MeterId,
    MeterKind,
    Timer,
)

logger = logging.getLogger(__name__)


class InMemoryLogCapture:
    """In-memory implementation of LogRecordSource.

    Stores captured records in a list. Records are returned in the order
    they were written.
    """

    def __init__(self) -> None:
        self._records: list[CapturedLogRecord] = []
        self._lock = threading.Lock()

    def write(self, record: CapturedLogRecord) -> None:
        """Append a captured record."""
        with self._lock:
            self._records.append(record)

    def records(self) -> tuple[CapturedLogRecord, ...]:
        """Return a snapshot of the captured records."""
        with self._lock:
            return tuple(self._records)

    def clear(self) -> None:
        """Discard all captured records."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class InMemoryMeterRegistry:
    """In-memory implementation of TaggedInstrumentSource.

    Registration is idempotent: asking for a meter whose name and tags match
    an existing one returns that meter. Suitable for tests, where each test
    gets a fresh registry.
    """

    def __init__(self) -> None:
        self._meters: dict[tuple[str, tuple[tuple[str, str], ...]], Meter] = {}
        self._lock = threading.Lock()

    def _register(
        self, kind: MeterKind, name: str, tags: Mapping[str, Any] | None
    ) -> Meter:
        meter_id = MeterId(
            name=name,
            tags={str(k): str(v) for k, v in (tags or {}).items()},
            kind=kind,
        )
        with self._lock:
            existing = self._meters.get(meter_id.key)
            if existing is not None:
                if existing.id.kind is not kind:
                    raise ValueError(
                        f"Meter {name!r} with tags {meter_id.tags!r} is already "
                        f"registered as a {existing.id.kind.value}"
                    )
                return existing
            meter = METER_TYPES[kind](meter_id)
            self._meters[meter_id.key] = meter
        logger.debug("Registered %s %s %s", kind.value, name, meter_id.tags)
        return meter

    def counter(self, name: str, tags: Mapping[str, Any] | None = None) -> Counter:
        """Get or create a counter."""
        return cast(Counter, self._register(MeterKind.COUNTER, name, tags))

    def timer(self, name: str, tags: Mapping[str, Any] | None = None) -> Timer:
        """Get or create a timer."""
        return cast(Timer, self._register(MeterKind.TIMER, name, tags))

    def gauge(self, name: str, tags: Mapping[str, Any] | None = None) -> Gauge:
        """Get or create a gauge."""
        return cast(Gauge, self._register(MeterKind.GAUGE, name, tags))

    def instruments(self) -> tuple[Meter, ...]:
        """Return a snapshot of all meters in registration order."""
        with self._lock:
            return tuple(self._meters.values())

    def find(self, name: str, **tags: str) -> list[Meter]:
        """Return meters named ``name`` carrying all of ``tags``."""
        return select_instruments(self.instruments(), name=name, tags=tags)

    def clear(self) -> None:
        """Remove all meters."""
        with self._lock:
            self._meters.clear()
