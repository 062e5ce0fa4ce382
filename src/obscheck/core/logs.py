"""Queries over captured log records."""

from collections.abc import Iterable
from typing import Any

from obscheck.core.ports import ParameterizedRecord


def _has_parameter(record: ParameterizedRecord, attribute: Any) -> bool:
    return any(parameter == attribute for parameter in record.parameters)


def matching_log_records(
    attribute: Any, records: Iterable[ParameterizedRecord]
) -> list[ParameterizedRecord]:
    """Return the records carrying ``attribute`` among their parameters.

    Args:
        attribute: Value to look for (compared by equality, not substring).
        records: Captured log records.

    Returns:
        Matching records, in input order.
    """
    return [record for record in records if _has_parameter(record, attribute)]


def count_matching_log_records(
    attribute: Any, records: Iterable[ParameterizedRecord]
) -> int:
    """Count the records carrying ``attribute`` among their parameters.

    The count is reported as-is; deciding how many matches are acceptable
    is left to the caller (see ``obscheck.assertions.assert_message``).

    Args:
        attribute: Value to look for (compared by equality, not substring).
        records: Captured log records.

    Returns:
        Number of matching records, 0 for an empty input.
    """
    return sum(1 for record in records if _has_parameter(record, attribute))
