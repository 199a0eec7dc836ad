"""Partition a flat ledger snapshot into independently sorted histories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple, TypeVar

from models.records import AlarmEvent, DoorEvent, Transaction
from services import timestamps
from services.snapshots import (
    coerce_number,
    decode_alarm,
    decode_door,
    decode_transaction,
    is_transaction_record,
)

logger = logging.getLogger(__name__)

ALARM_KEY = "alarm"
DOOR_KEY = "door"
HISTORY_KEY = "history"
INVENTORY_KEY = "ton_kho"
RESERVED_KEYS = frozenset({ALARM_KEY, DOOR_KEY, HISTORY_KEY, INVENTORY_KEY})

T = TypeVar("T")


@dataclass(frozen=True)
class Reconciliation:
    """Outcome of one reconciliation pass.

    A sequence is ``None`` when the snapshot carried nothing for it, meaning
    the previously published sequence should be kept.
    """

    current_inventory: float = 0.0
    transactions: Optional[Tuple[Transaction, ...]] = None
    alarms: Optional[Tuple[AlarmEvent, ...]] = None
    doors: Optional[Tuple[DoorEvent, ...]] = None


def newest_first(items: Iterable[T], key: Callable[[T], str]) -> Tuple[T, ...]:
    """Stable descending sort on a ledger timestamp; invalid keys sort last."""
    return tuple(sorted(items, key=lambda item: timestamps.sort_key(key(item)), reverse=True))


class EventReconciler:
    """Rebuilds transaction, alarm and door histories from a full snapshot."""

    def reconcile(self, snapshot: Any) -> Reconciliation:
        if not isinstance(snapshot, Mapping):
            return Reconciliation()

        alarms = None
        alarm_entries = snapshot.get(ALARM_KEY)
        if isinstance(alarm_entries, Mapping):
            alarms = newest_first(
                (decode_alarm(str(key), record) for key, record in alarm_entries.items()),
                key=lambda event: event.timestamp,
            )

        doors = None
        door_entries = snapshot.get(DOOR_KEY)
        if isinstance(door_entries, Mapping):
            doors = newest_first(
                (decode_door(str(key), record) for key, record in door_entries.items()),
                key=lambda event: event.timestamp,
            )

        return Reconciliation(
            current_inventory=coerce_number(snapshot.get(INVENTORY_KEY)),
            transactions=self._transactions(snapshot),
            alarms=alarms,
            doors=doors,
        )

    def _transactions(self, snapshot: Mapping[str, Any]) -> Optional[Tuple[Transaction, ...]]:
        found = False
        skipped = 0
        transactions: list[Transaction] = []

        history = snapshot.get(HISTORY_KEY)
        sources = [snapshot]
        if isinstance(history, Mapping):
            found = True
            sources.append(history)

        for source in sources:
            for key, record in source.items():
                if source is snapshot and key in RESERVED_KEYS:
                    continue
                if not is_transaction_record(record):
                    skipped += 1
                    continue
                found = True
                transactions.append(decode_transaction(str(key), record))

        if skipped:
            logger.debug(
                "Skipped ledger entries without transaction fields",
                extra={"stream": "ledger", "skipped_count": skipped},
            )

        if not found:
            return None
        return newest_first(transactions, key=lambda transaction: transaction.date)
