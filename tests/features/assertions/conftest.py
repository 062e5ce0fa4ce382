"""BDD step definitions for observation assertion features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from obscheck.assertions import (
    ObservationAssertionError,
    assert_message,
    assert_tag_value_present,
)
from obscheck.core.logs import count_matching_log_records
from obscheck.core.metrics import join_tag_values
from obscheck.core.models import CapturedLogRecord, MeterId


@dataclass
class AssertionScenarioContext:
    """Shared state between steps in an assertion scenario."""

    records: list[CapturedLogRecord] = field(default_factory=list)
    instruments: list[MeterId] = field(default_factory=list)
    count: int | None = None
    joined: str | None = None


@pytest.fixture
def ctx() -> AssertionScenarioContext:
    """Fresh scenario context for each test."""
    return AssertionScenarioContext()


# === Log Record Steps ===
@given(parsers.parse('a log record with parameters "{params}"'))
def step_log_record(ctx: AssertionScenarioContext, params: str) -> None:
    parameters = tuple(p.strip() for p in params.split(","))
    ctx.records.append(CapturedLogRecord(message="event", parameters=parameters))


@when(parsers.parse('I count records carrying "{attribute}"'))
def step_count(ctx: AssertionScenarioContext, attribute: str) -> None:
    ctx.count = count_matching_log_records(attribute, ctx.records)


@then(parsers.parse("the count is {expected:d}"))
def step_count_is(ctx: AssertionScenarioContext, expected: int) -> None:
    assert ctx.count == expected


@then(parsers.parse('asserting exactly one record carrying "{attribute}" passes'))
def step_exactly_one_passes(ctx: AssertionScenarioContext, attribute: str) -> None:
    assert_message(attribute, ctx.records)


@then(parsers.parse('asserting exactly one record carrying "{attribute}" fails'))
def step_exactly_one_fails(ctx: AssertionScenarioContext, attribute: str) -> None:
    with pytest.raises(ObservationAssertionError):
        assert_message(attribute, ctx.records)


# === Meter Steps ===
@given(parsers.re(r'a meter tagged (?P<key>\w+) "(?P<value>[^"]*)"'))
def step_tagged_meter(ctx: AssertionScenarioContext, key: str, value: str) -> None:
    ctx.instruments.append(MeterId(name="http.server.requests", tags={key: value}))


@given("a meter without tags")
def step_untagged_meter(ctx: AssertionScenarioContext) -> None:
    ctx.instruments.append(MeterId(name="http.server.requests"))


@when(parsers.parse('I join the "{key}" tag values'))
def step_join(ctx: AssertionScenarioContext, key: str) -> None:
    ctx.joined = join_tag_values(key, ctx.instruments)


@then(parsers.re(r'the joined values are "(?P<expected>[^"]*)"'))
def step_joined_are(ctx: AssertionScenarioContext, expected: str) -> None:
    assert ctx.joined == expected


@then(
    parsers.re(
        r'asserting a meter tagged (?P<key>\w+) "(?P<value>[^"]*)" fails '
        r'mentioning "(?P<present>[^"]*)"'
    )
)
def step_tag_assertion_fails(
    ctx: AssertionScenarioContext, key: str, value: str, present: str
) -> None:
    with pytest.raises(ObservationAssertionError) as excinfo:
        assert_tag_value_present(key, value, ctx.instruments)
    assert present in str(excinfo.value)
