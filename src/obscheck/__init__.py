"""obscheck - assertions over captured logs and metrics for test suites."""

from obscheck.adapters.logging import LogCaptureHandler, capture_logs
from obscheck.adapters.storage.in_memory import (
    InMemoryLogCapture,
    InMemoryMeterRegistry,
)
from obscheck.assertions import (
    ObservationAssertionError,
    assert_message,
    assert_no_error,
    assert_tag_value_present,
    assert_tag_values,
)
from obscheck.core.diagnostics import root_cause, stack_to_string
from obscheck.core.logs import count_matching_log_records, matching_log_records
from obscheck.core.metrics import join_tag_values, select_instruments, tag_values
from obscheck.core.models import (
    CapturedLogRecord,
    Counter,
    Gauge,
    MeterId,
    MeterKind,
    Timer,
)
from obscheck.core.ports import (
    LogRecordSource,
    ParameterizedRecord,
    TaggedInstrument,
    TaggedInstrumentSource,
)

__all__ = [
    # Models
    "CapturedLogRecord",
    "Counter",
    "Gauge",
    "MeterId",
    "MeterKind",
    "Timer",
    # Ports
    "LogRecordSource",
    "ParameterizedRecord",
    "TaggedInstrument",
    "TaggedInstrumentSource",
    # Queries
    "count_matching_log_records",
    "join_tag_values",
    "matching_log_records",
    "select_instruments",
    "tag_values",
    # Diagnostics
    "root_cause",
    "stack_to_string",
    # Assertions
    "ObservationAssertionError",
    "assert_message",
    "assert_no_error",
    "assert_tag_value_present",
    "assert_tag_values",
    # Adapters
    "InMemoryLogCapture",
    "InMemoryMeterRegistry",
    "LogCaptureHandler",
    "capture_logs",
]
