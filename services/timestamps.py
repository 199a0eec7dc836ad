"""Parsing and display of the ledger's ``YYYY-MM-DD_HH-mm-ss`` timestamp keys."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

DISPLAY_FORMAT = "%H:%M:%S %d/%m/%Y"

_DATE_TIME_SEPARATOR = "_"
_COMPONENT_SEPARATOR = "-"


class TimestampError(ValueError):
    """Raised when a ledger key does not describe a valid calendar instant."""


def parse(value: str) -> datetime:
    """Parse a ledger key into a naive local ``datetime``.

    Month is 1-based on the wire. Raises ``TimestampError`` on a wrong
    component count, a non-numeric component or an impossible date.
    """
    if not isinstance(value, str):
        raise TimestampError(f"Timestamp must be a string, got {type(value).__name__}.")

    parts = value.split(_DATE_TIME_SEPARATOR)
    if len(parts) != 2:
        raise TimestampError(f"Timestamp {value!r} is missing its date/time separator.")

    date_part, time_part = parts
    date_fields = date_part.split(_COMPONENT_SEPARATOR)
    time_fields = time_part.split(_COMPONENT_SEPARATOR)
    if len(date_fields) != 3 or len(time_fields) != 3:
        raise TimestampError(f"Timestamp {value!r} must have three date and three time fields.")

    try:
        year, month, day = (int(field) for field in date_fields)
        hour, minute, second = (int(field) for field in time_fields)
    except ValueError as exc:
        raise TimestampError(f"Timestamp {value!r} has a non-numeric component.") from exc

    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError as exc:
        raise TimestampError(f"Timestamp {value!r} is not a valid calendar value.") from exc


def try_parse(value: str) -> Optional[datetime]:
    try:
        return parse(value)
    except TimestampError:
        return None


def format(value: str, fmt: str = DISPLAY_FORMAT) -> str:  # noqa: A001 - mirrors parse()
    """Render a ledger key for display, returning it unchanged when unparseable."""
    parsed = try_parse(value)
    if parsed is None:
        return value
    return parsed.strftime(fmt)


def sort_key(value: str) -> Tuple[bool, datetime]:
    """Ordering key where every invalid timestamp ranks below every valid one."""
    parsed = try_parse(value)
    if parsed is None:
        return (False, datetime.min)
    return (True, parsed)
