"""Queries over tagged metric instruments."""

from collections.abc import Iterable, Mapping
from typing import Any

from obscheck.core.ports import TaggedInstrument

TAG_SEPARATOR = ","


def tag_values(
    tag_key: str, instruments: Iterable[TaggedInstrument]
) -> list[str | None]:
    """Look up ``tag_key`` on each instrument.

    Args:
        tag_key: Tag to look up (e.g., "uri").
        instruments: Instruments to inspect.

    Returns:
        One entry per instrument, in input order; None where the tag is absent.
    """
    return [instrument.get_tag(tag_key) for instrument in instruments]


def join_tag_values(tag_key: str, instruments: Iterable[TaggedInstrument]) -> str:
    """Join the values of ``tag_key`` across instruments with commas.

    Instruments without the tag contribute an empty placeholder, so every
    position in the result lines up with an instrument.

    Args:
        tag_key: Tag to look up (e.g., "uri").
        instruments: Instruments to inspect.

    Returns:
        Comma-joined values in input order; empty string for no instruments.
    """
    return TAG_SEPARATOR.join(
        "" if value is None else str(value)
        for value in tag_values(tag_key, instruments)
    )


def select_instruments(
    instruments: Iterable[Any],
    name: str | None = None,
    tags: Mapping[str, str] | None = None,
) -> list[Any]:
    """Filter instruments by meter name and required tag values.

    The name is read from ``instrument.id.name`` for meters and from
    ``instrument.name`` for bare meter ids.

    Args:
        instruments: Instruments to filter.
        name: Meter name to match exactly (optional).
        tags: Tag values every returned instrument must carry (optional).

    Returns:
        Matching instruments, in input order.
    """
    required = tags or {}
    selected = []
    for instrument in instruments:
        if name is not None:
            meter_id = getattr(instrument, "id", instrument)
            if getattr(meter_id, "name", None) != name:
                continue
        if all(instrument.get_tag(k) == v for k, v in required.items()):
            selected.append(instrument)
    return selected
