"""Decode-with-defaults helpers for untyped realtime snapshots.

All permissive coercion of feed payloads lives here so the rest of the
pipeline only ever sees typed values.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional, Tuple

from models.records import AlarmEvent, DoorEvent, Transaction, TransactionType

logger = logging.getLogger(__name__)

DEFAULT_ALARM_EVENT = "ALARM"
DEFAULT_DOOR_EVENT = "OPEN"

_TRUE_STRINGS = {"true", "1", "yes", "on"}


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Return ``value`` as a finite float, or ``default`` when it is not one.

    Numeric strings are accepted; booleans, ``None``, NaN and infinities are
    not.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        try:
            parsed = float(value)
        except OverflowError:
            # Python ints are unbounded; JSON can carry one wider than a float.
            logger.debug("Coercing out-of-range number to default", extra={"invalid_value": value})
            return default
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return default
        try:
            parsed = float(candidate)
        except ValueError:
            logger.debug("Coercing non-numeric value to default", extra={"invalid_value": value})
            return default
    else:
        return default
    return parsed if math.isfinite(parsed) else default


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, float):
        return math.isfinite(value) and value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def decode_sensor_snapshot(snapshot: Any) -> Tuple[float, float]:
    """Extract ``(temperature, humidity)`` from a telemetry snapshot."""
    data: Mapping[str, Any] = snapshot if isinstance(snapshot, Mapping) else {}
    return coerce_number(data.get("temperature")), coerce_number(data.get("humidity"))


def is_transaction_record(record: Any) -> bool:
    return isinstance(record, Mapping) and any(
        field in record for field in ("amount", "ton_sau", "runningBalance")
    )


def decode_transaction(key: str, record: Mapping[str, Any]) -> Transaction:
    balance = record.get("ton_sau")
    if balance is None:
        balance = record.get("runningBalance")
    return Transaction(
        date=key,
        amount=coerce_number(record.get("amount")),
        running_balance=coerce_number(balance),
        type=decode_transaction_type(record.get("type")),
    )


def decode_transaction_type(value: Any) -> TransactionType:
    if isinstance(value, str):
        try:
            return TransactionType(value.strip().upper())
        except ValueError:
            logger.debug("Unknown transaction type", extra={"invalid_value": value})
    return TransactionType.inbound


def _event_label(record: Any, default: str) -> str:
    if not isinstance(record, Mapping):
        return default
    event: Optional[Any] = record.get("event")
    if event is None:
        return default
    return event if isinstance(event, str) else str(event)


def decode_alarm(key: str, record: Any) -> AlarmEvent:
    return AlarmEvent(timestamp=key, event=_event_label(record, DEFAULT_ALARM_EVENT))


def decode_door(key: str, record: Any) -> DoorEvent:
    return DoorEvent(timestamp=key, event=_event_label(record, DEFAULT_DOOR_EVENT))
