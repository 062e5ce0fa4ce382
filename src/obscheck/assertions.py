"""Assertions over captured logs and meters.

The query functions in ``obscheck.core`` only report what was captured.
This module applies the policy (how many matches are expected, which tag
values must be present) and raises ``ObservationAssertionError`` with a
diagnostic message when the captured data does not satisfy it.
"""

from collections import Counter as Multiset
from collections.abc import Iterable
from typing import Any

from obscheck.core.diagnostics import stack_to_string
from obscheck.core.logs import matching_log_records
from obscheck.core.metrics import join_tag_values, select_instruments, tag_values
from obscheck.core.ports import (
    LogRecordSource,
    ParameterizedRecord,
    TaggedInstrument,
    TaggedInstrumentSource,
)

RecordsLike = LogRecordSource | Iterable[ParameterizedRecord]
InstrumentsLike = TaggedInstrumentSource | Iterable[TaggedInstrument]


class ObservationAssertionError(AssertionError):
    """Raised when captured logs or meters do not match an expectation."""


def _records(source: RecordsLike) -> list[ParameterizedRecord]:
    if isinstance(source, LogRecordSource):
        return list(source.records())
    return list(source)


def _instruments(
    source: InstrumentsLike, name: str | None = None
) -> list[TaggedInstrument]:
    if isinstance(source, TaggedInstrumentSource):
        items = list(source.instruments())
    else:
        items = list(source)
    if name is not None:
        items = select_instruments(items, name=name)
    return items


def _describe(record: ParameterizedRecord) -> str:
    formatted = getattr(record, "formatted", None)
    if callable(formatted):
        return str(formatted())
    return repr(record)


def assert_message(attribute: Any, source: RecordsLike, expected: int = 1) -> None:
    """Assert that ``expected`` records carry ``attribute`` as a parameter.

    Args:
        attribute: Parameter value to look for.
        source: A LogRecordSource or an iterable of records.
        expected: Required number of matching records (default exactly one).

    Raises:
        ObservationAssertionError: If the number of matches differs.
    """
    matches = matching_log_records(attribute, _records(source))
    if len(matches) == expected:
        return
    detail = "".join(f"\n\t{_describe(record)}" for record in matches)
    raise ObservationAssertionError(
        f"Expected {expected} log record(s) with parameter {attribute!r}, "
        f"found {len(matches)}{detail}"
    )


def assert_tag_value_present(
    tag_key: str,
    value: str,
    source: InstrumentsLike,
    name: str | None = None,
) -> None:
    """Assert that at least one instrument carries ``tag_key=value``.

    Args:
        tag_key: Tag to inspect (e.g., "uri").
        value: Required tag value.
        source: A TaggedInstrumentSource or an iterable of instruments.
        name: Only consider meters with this name (optional).

    Raises:
        ObservationAssertionError: If no instrument carries the value. The
            message lists the values that were present.
    """
    instruments = _instruments(source, name)
    if value in tag_values(tag_key, instruments):
        return
    raise ObservationAssertionError(
        f"Expected a meter with {tag_key}={value!r}; "
        f"found {tag_key} values: {join_tag_values(tag_key, instruments)}"
    )


def assert_tag_values(
    tag_key: str,
    expected: Iterable[str | None],
    source: InstrumentsLike,
    name: str | None = None,
    ordered: bool = False,
) -> None:
    """Assert the exact tag values carried by a set of instruments.

    Args:
        tag_key: Tag to inspect.
        expected: Expected values, None standing for a missing tag.
        source: A TaggedInstrumentSource or an iterable of instruments.
        name: Only consider meters with this name (optional).
        ordered: Compare as sequences instead of multisets.

    Raises:
        ObservationAssertionError: If the values differ.
    """
    instruments = _instruments(source, name)
    actual = tag_values(tag_key, instruments)
    wanted = list(expected)
    if ordered:
        matched = actual == wanted
    else:
        matched = Multiset(actual) == Multiset(wanted)
    if matched:
        return
    wanted_joined = ",".join("" if v is None else v for v in wanted)
    raise ObservationAssertionError(
        f"Expected {tag_key} values: {wanted_joined}; "
        f"found: {join_tag_values(tag_key, instruments)}"
    )


def assert_no_error(error: BaseException | None) -> None:
    """Assert that no error was captured.

    Raises:
        ObservationAssertionError: If ``error`` is set. The message names the
            root cause and the frames it was raised from.
    """
    if error is None:
        return
    raise ObservationAssertionError(
        f"Unexpected error captured:{stack_to_string(error)}"
    ) from error
