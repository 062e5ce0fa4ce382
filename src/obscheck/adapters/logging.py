"""Python logging handler adapter for obscheck.

This adapter bridges Python's standard library logging module to an
InMemoryLogCapture, keeping each record's message template and its
substitution parameters apart so tests can search the parameters.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from obscheck.adapters.storage.in_memory import InMemoryLogCapture
from obscheck.core.models import CapturedLogRecord

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def _parameters(args: Any) -> tuple[Any, ...]:
    """Normalize LogRecord.args into an ordered parameter tuple.

    A lone mapping argument (unwrapped by LogRecord) stays a single parameter.
    """
    if not args:
        return ()
    if isinstance(args, tuple):
        return args
    return (args,)


class LogCaptureHandler(logging.Handler):
    """Logging handler that writes captured records to an InMemoryLogCapture.

    Example:
        ```python
        from obscheck import InMemoryLogCapture, LogCaptureHandler

        capture = InMemoryLogCapture()
        logging.getLogger().addHandler(LogCaptureHandler(capture))
        ```
    """

    def __init__(
        self,
        capture: InMemoryLogCapture,
        include_extra: bool = True,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a capture backend.

        Args:
            capture: Where captured records are written.
            include_extra: Copy primitive ``extra=`` fields into attributes.
            level: Minimum level handled (default: everything).
        """
        super().__init__(level)
        self._capture = capture
        self._include_extra = include_extra

    def emit(self, record: logging.LogRecord) -> None:
        """Capture a log record.

        Args:
            record: The log record to capture.
        """
        attributes: dict[str, str | int | float | bool] = {}
        if self._include_extra:
            for key, value in record.__dict__.items():
                if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                    value, (str, int, float, bool)
                ):
                    attributes[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            attributes["exc_type"] = record.exc_info[0].__name__

        self._capture.write(
            CapturedLogRecord(
                message=str(record.msg),
                parameters=_parameters(record.args),
                level=record.levelname,
                logger=record.name,
                timestamp=record.created,
                attributes=attributes,
            )
        )


@contextmanager
def capture_logs(
    logger: str | None = None,
    level: int = logging.DEBUG,
    capture: InMemoryLogCapture | None = None,
) -> Iterator[InMemoryLogCapture]:
    """Capture records emitted to ``logger`` for the duration of the block.

    The logger's level is lowered to ``level`` if needed (never raised) while
    capturing and restored on exit, together with the handler list. The
    capture handler filters at ``level`` itself.

    Args:
        logger: Logger name (default: the root logger).
        level: Minimum level to capture (default DEBUG).
        capture: Existing capture to append to (default: a new one).

    Yields:
        The InMemoryLogCapture receiving the records.
    """
    target = logging.getLogger(logger)
    sink = capture if capture is not None else InMemoryLogCapture()
    handler = LogCaptureHandler(sink, level=level)
    previous_level = target.level
    target.addHandler(handler)
    target.setLevel(min(target.getEffectiveLevel(), level))
    try:
        yield sink
    finally:
        target.removeHandler(handler)
        target.setLevel(previous_level)
