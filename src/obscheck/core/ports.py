"""Port interfaces for captured observability sources.

These protocols define the contracts that capture adapters must implement.
The query functions and assertions depend only on these interfaces, not on
a specific logging or metrics library.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ParameterizedRecord(Protocol):
    """A log record exposing its ordered substitution parameters."""

    @property
    def parameters(self) -> Sequence[Any]:
        """Substitution parameters, in call order."""
        ...


@runtime_checkable
class TaggedInstrument(Protocol):
    """An instrument exposing a key-to-value tag lookup."""

    def get_tag(self, key: str) -> str | None:
        """Return the tag value for ``key``, or None when absent."""
        ...


@runtime_checkable
class LogRecordSource(Protocol):
    """Port for captured log records.

    Adapters implementing this protocol expose an ordered snapshot of the
    records they captured.
    Examples: InMemoryLogCapture.
    """

    def records(self) -> Sequence[ParameterizedRecord]:
        """Return captured records in emission order."""
        ...


@runtime_checkable
class TaggedInstrumentSource(Protocol):
    """Port for enumerable tagged instruments.

    Adapters implementing this protocol expose an ordered snapshot of their
    instruments.
    Examples: InMemoryMeterRegistry, SQLiteMeterStorage.
    """

    def instruments(self) -> Sequence[TaggedInstrument]:
        """Return instruments in registration order."""
        ...
