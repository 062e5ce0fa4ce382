"""Tests for log record queries."""

import pytest

from obscheck.core.logs import count_matching_log_records, matching_log_records
from obscheck.core.models import CapturedLogRecord

pytestmark = [pytest.mark.core, pytest.mark.tier(0)]


class TestCountMatchingLogRecords:
    """Tests for count_matching_log_records()."""

    def test_counts_single_matching_record(self, make_record) -> None:
        """Only the record carrying the attribute is counted."""
        records = [make_record("foo", "bar"), make_record("baz")]
        assert count_matching_log_records("bar", records) == 1

    def test_counts_every_matching_record(self, make_record) -> None:
        """Duplicate emissions are all counted."""
        records = [make_record("bar"), make_record("bar")]
        assert count_matching_log_records("bar", records) == 2

    def test_empty_input_counts_zero(self) -> None:
        """No records means no matches."""
        assert count_matching_log_records("bar", []) == 0

    def test_record_with_repeated_parameter_counts_once(self, make_record) -> None:
        """A record is counted once however many parameters match."""
        records = [make_record("bar", "bar", "bar")]
        assert count_matching_log_records("bar", records) == 1

    def test_substring_does_not_match(self, make_record) -> None:
        """Matching is by equality, not substring."""
        records = [make_record("barbell"), make_record("foobar")]
        assert count_matching_log_records("bar", records) == 0

    def test_message_template_is_not_searched(self) -> None:
        """Only parameters are compared, never the message text."""
        records = [CapturedLogRecord(message="bar happened", parameters=("x",))]
        assert count_matching_log_records("bar", records) == 0

    def test_non_string_attributes(self, make_record) -> None:
        """Opaque parameter values are compared by value."""
        records = [make_record(42, ("a", 1)), make_record(("a", 1))]
        assert count_matching_log_records(("a", 1), records) == 2
        assert count_matching_log_records(42, records) == 1

    def test_record_without_parameters(self, make_record) -> None:
        """Records without parameters never match."""
        assert count_matching_log_records(None, [make_record()]) == 0

    def test_accepts_generator(self, make_record) -> None:
        """Any iterable of records is accepted."""
        records = (make_record(str(i)) for i in range(5))
        assert count_matching_log_records("3", records) == 1


class TestMatchingLogRecords:
    """Tests for matching_log_records()."""

    def test_returns_matches_in_input_order(self, make_record) -> None:
        """Matching records are returned in the order given."""
        first = make_record("a", message="first")
        second = make_record("b")
        third = make_record("a", message="third")
        assert matching_log_records("a", [first, second, third]) == [first, third]

    def test_returns_empty_list_without_matches(self, make_record) -> None:
        """No match yields an empty list."""
        assert matching_log_records("z", [make_record("a")]) == []


class TestCapturedLogRecord:
    """Tests for CapturedLogRecord.formatted()."""

    def test_formats_parameters_into_template(self) -> None:
        """Parameters are substituted %-style."""
        record = CapturedLogRecord(message="%s -> %d", parameters=("GET", 200))
        assert record.formatted() == "GET -> 200"

    def test_returns_template_without_parameters(self) -> None:
        """A record without parameters renders its template unchanged."""
        record = CapturedLogRecord(message="100% done")
        assert record.formatted() == "100% done"

    def test_falls_back_to_template_on_mismatch(self) -> None:
        """Parameters that do not fit the template leave it unchanged."""
        record = CapturedLogRecord(message="%d items", parameters=("many",))
        assert record.formatted() == "%d items"
