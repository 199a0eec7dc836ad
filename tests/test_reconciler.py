from __future__ import annotations

import pytest

from models.records import AlarmEvent, DoorEvent, Transaction, TransactionType
from services.reconciler import EventReconciler


@pytest.fixture()
def reconciler() -> EventReconciler:
    return EventReconciler()


def test_sample_ledger_partitions_without_cross_contamination(reconciler: EventReconciler) -> None:
    snapshot = {
        "alarm": {"2026-01-05_16-37-41": {"event": "ALARM"}},
        "door": {"2026-01-05_16-30-00": {"event": "OPEN"}},
        "2025-12-20_20-11-20": {"amount": 50, "ton_sau": 150, "type": "NHAP"},
    }

    result = reconciler.reconcile(snapshot)

    assert result.alarms == (AlarmEvent(timestamp="2026-01-05_16-37-41", event="ALARM"),)
    assert result.doors == (DoorEvent(timestamp="2026-01-05_16-30-00", event="OPEN"),)
    assert result.transactions == (
        Transaction(
            date="2025-12-20_20-11-20",
            amount=50.0,
            running_balance=150.0,
            type=TransactionType.inbound,
        ),
    )


def test_transactions_sorted_newest_first_regardless_of_key_order(
    reconciler: EventReconciler,
) -> None:
    snapshot = {
        "2025-12-19_08-00-00": {"amount": 1},
        "2025-12-21_08-00-00": {"amount": 3},
        "2025-12-20_08-00-00": {"amount": 2},
        "2024-01-01_00-00-00": {"amount": 0},
    }

    result = reconciler.reconcile(snapshot)

    assert result.transactions is not None
    assert [t.date for t in result.transactions] == [
        "2025-12-21_08-00-00",
        "2025-12-20_08-00-00",
        "2025-12-19_08-00-00",
        "2024-01-01_00-00-00",
    ]


def test_alarm_and_door_events_sorted_and_defaulted(reconciler: EventReconciler) -> None:
    snapshot = {
        "alarm": {
            "2026-01-05_10-00-00": {},
            "2026-01-06_10-00-00": {"event": "SMOKE"},
        },
        "door": {
            "2026-01-04_10-00-00": None,
            "2026-01-07_10-00-00": {"event": "CLOSE"},
        },
    }

    result = reconciler.reconcile(snapshot)

    assert result.alarms == (
        AlarmEvent(timestamp="2026-01-06_10-00-00", event="SMOKE"),
        AlarmEvent(timestamp="2026-01-05_10-00-00", event="ALARM"),
    )
    assert result.doors == (
        DoorEvent(timestamp="2026-01-07_10-00-00", event="CLOSE"),
        DoorEvent(timestamp="2026-01-04_10-00-00", event="OPEN"),
    )


def test_malformed_values_are_coerced(reconciler: EventReconciler) -> None:
    snapshot = {
        "2025-12-20_20-11-20": {"amount": "lots", "runningBalance": "12.5", "type": "XUAT"},
        "2025-12-21_20-11-20": {"amount": None, "type": "SOMETHING"},
    }

    result = reconciler.reconcile(snapshot)

    assert result.transactions is not None
    newest, oldest = result.transactions
    assert newest.amount == 0
    assert newest.running_balance == 0
    assert newest.type is TransactionType.inbound
    assert oldest.amount == 0
    assert oldest.running_balance == 12.5
    assert oldest.type is TransactionType.outbound


def test_malformed_timestamps_sort_last_and_keep_order(reconciler: EventReconciler) -> None:
    snapshot = {
        "bad-key": {"amount": 1},
        "2025-12-20_20-11-20": {"amount": 2},
        "also-bad": {"amount": 3},
        "2025-12-22_20-11-20": {"amount": 4},
    }

    result = reconciler.reconcile(snapshot)

    assert result.transactions is not None
    assert [t.date for t in result.transactions] == [
        "2025-12-22_20-11-20",
        "2025-12-20_20-11-20",
        "bad-key",
        "also-bad",
    ]


def test_equal_timestamps_keep_iteration_order(reconciler: EventReconciler) -> None:
    snapshot = {
        "history": {"2025-12-20_20-11-20": {"amount": 1}},
        "2025-12-20_20-11-20": {"amount": 2},
    }

    result = reconciler.reconcile(snapshot)

    assert result.transactions is not None
    assert [t.amount for t in result.transactions] == [2.0, 1.0]


def test_entries_without_transaction_fields_are_skipped(reconciler: EventReconciler) -> None:
    snapshot = {
        "ton_kho": "42",
        "note": {"text": "hello"},
        "counter": 7,
        "2025-12-20_20-11-20": {"amount": 5},
    }

    result = reconciler.reconcile(snapshot)

    assert result.current_inventory == 42.0
    assert result.transactions is not None
    assert [t.date for t in result.transactions] == ["2025-12-20_20-11-20"]


def test_nested_history_contributes_transactions(reconciler: EventReconciler) -> None:
    snapshot = {
        "ton_kho": 150,
        "history": {
            "2025-12-20_20-11-20": {"amount": 50, "ton_sau": 150, "type": "NHAP"},
            "2025-12-21_09-00-00": {"amount": 20, "ton_sau": 130, "type": "XUAT"},
        },
    }

    result = reconciler.reconcile(snapshot)

    assert result.current_inventory == 150.0
    assert result.transactions is not None
    assert [t.type for t in result.transactions] == [
        TransactionType.outbound,
        TransactionType.inbound,
    ]


def test_absent_sections_are_reported_as_none(reconciler: EventReconciler) -> None:
    result = reconciler.reconcile({"alarm": {"2026-01-05_16-37-41": {"event": "ALARM"}}})

    assert result.alarms is not None
    assert result.doors is None
    assert result.transactions is None


def test_non_mapping_snapshot_yields_empty_result(reconciler: EventReconciler) -> None:
    result = reconciler.reconcile(["not", "a", "mapping"])

    assert result.transactions is None
    assert result.alarms is None
    assert result.doors is None
    assert result.current_inventory == 0
