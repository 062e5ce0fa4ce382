"""Capture and snapshot adapters implementing core ports."""

from obscheck.adapters.storage.in_memory import (
    InMemoryLogCapture,
    InMemoryMeterRegistry,
)
from obscheck.adapters.storage.sqlite import SQLiteMeterStorage, StoredMeter

__all__ = [
    "InMemoryLogCapture",
    "InMemoryMeterRegistry",
    "SQLiteMeterStorage",
    "StoredMeter",
]
