"""Orchestration of the telemetry, motion and ledger streams."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from threading import Lock, Timer
from typing import Any, Callable, List, Optional

from app.schemas import (
    AlertState,
    LedgerEventModel,
    LedgerState,
    Reading,
    TelemetryState,
    TransactionModel,
    WindowSnapshot,
    WindowSummary,
)
from feed.realtime import MockRealtimeDatabase, Subscription
from models.records import SensorReading
from services.classifier import classify, classify_humidity, classify_temperature
from services.reconciler import EventReconciler
from services.rolling_window import RollingWindow
from services.snapshots import coerce_bool, decode_sensor_snapshot
from services.state import StateCell
from settings import get_settings

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TelemetryAggregator:
    """Turns raw feed snapshots into published, derived state.

    Each stream (telemetry, motion, ledger) is serialized by its own lock, so
    the streams never block each other. Published values are immutable models
    swapped whole into their ``StateCell``.
    """

    def __init__(
        self,
        window: RollingWindow,
        reconciler: EventReconciler,
        alert_expiry_seconds: float = 8.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.window = window
        self.reconciler = reconciler
        self.alert_expiry_seconds = alert_expiry_seconds
        self._clock = clock

        self.telemetry: StateCell[TelemetryState] = StateCell("telemetry", TelemetryState())
        self.readings: StateCell[WindowSnapshot] = StateCell(
            "window", WindowSnapshot(capacity=window.capacity)
        )
        self.motion: StateCell[bool] = StateCell("motion", False)
        self.alert: StateCell[AlertState] = StateCell("alert", AlertState())
        self.ledger: StateCell[LedgerState] = StateCell("ledger", LedgerState())

        self._telemetry_lock = Lock()
        self._motion_lock = Lock()
        self._ledger_lock = Lock()
        self._alert_lock = Lock()
        self._alert_timer: Optional[Timer] = None
        self._alert_generation = 0
        self._subscriptions: List[Subscription] = []

    # Telemetry stream

    def ingest(self, snapshot: Any) -> None:
        if snapshot is None:
            return
        temperature, humidity = decode_sensor_snapshot(snapshot)
        now = self._clock()

        with self._telemetry_lock:
            self.window.push(
                SensorReading(temperature=temperature, humidity=humidity, captured_at=now)
            )
            state = TelemetryState(
                temperature=temperature,
                humidity=humidity,
                status=classify(temperature, humidity),
                temperature_status=classify_temperature(temperature),
                humidity_status=classify_humidity(humidity),
                last_updated=now,
                loading=False,
            )
            self.telemetry.publish(state)
            self._publish_window()

        logger.debug(
            "Ingested telemetry snapshot",
            extra={"stream": "telemetry", "status": state.status.value, "reading_count": len(self.window)},
        )

    def ingest_error(self, error: Exception) -> None:
        """Keep last-known-good values and only clear the loading flag."""
        logger.warning("Telemetry feed error", extra={"stream": "telemetry", "reason": str(error)})
        with self._telemetry_lock:
            current = self.telemetry.value
            self.telemetry.publish(current.model_copy(update={"loading": False}))

    def clear_window(self) -> None:
        with self._telemetry_lock:
            self.window.clear()
            self._publish_window()

    def _publish_window(self) -> None:
        self.readings.publish(
            WindowSnapshot(
                capacity=self.window.capacity,
                readings=[Reading.from_record(reading) for reading in self.window.all()],
                stats=WindowSummary.from_stats(self.window.stats()),
            )
        )

    # Motion stream

    def ingest_motion(self, snapshot: Any) -> None:
        if snapshot is None:
            return
        motion = coerce_bool(snapshot)
        with self._motion_lock:
            self.motion.publish(motion)
            if motion:
                self.trigger_alert()

    def ingest_motion_error(self, error: Exception) -> None:
        logger.warning("Motion feed error", extra={"stream": "motion", "reason": str(error)})

    def trigger_alert(self) -> None:
        """Raise the alert and (re)start its expiry timer."""
        with self._alert_lock:
            self._cancel_alert_timer()
            timer = Timer(
                self.alert_expiry_seconds, self._expire_alert, args=(self._alert_generation,)
            )
            timer.daemon = True
            self._alert_timer = timer
            self.alert.publish(AlertState(active=True, triggered_at=self._clock()))
            timer.start()
        logger.info("Motion alert raised", extra={"stream": "motion"})

    def dismiss_alert(self) -> None:
        with self._alert_lock:
            self._cancel_alert_timer()
            if self.alert.value.active:
                self.alert.publish(AlertState(active=False))

    def _expire_alert(self, generation: int) -> None:
        with self._alert_lock:
            # Stale if a retrigger or dismiss happened after this timer fired.
            if generation != self._alert_generation:
                return
            self._alert_timer = None
            self.alert.publish(AlertState(active=False))

    def _cancel_alert_timer(self) -> None:
        self._alert_generation += 1
        if self._alert_timer is not None:
            self._alert_timer.cancel()
            self._alert_timer = None

    # Ledger stream

    def ingest_ledger(self, snapshot: Any) -> None:
        if snapshot is None:
            return
        result = self.reconciler.reconcile(snapshot)

        with self._ledger_lock:
            current = self.ledger.value
            update: dict[str, Any] = {
                "current_inventory": result.current_inventory,
                "loading": False,
            }
            if result.transactions is not None:
                update["transactions"] = [
                    TransactionModel.from_record(item) for item in result.transactions
                ]
            if result.alarms is not None:
                update["alarms"] = [LedgerEventModel.from_record(item) for item in result.alarms]
            if result.doors is not None:
                update["doors"] = [LedgerEventModel.from_record(item) for item in result.doors]
            self.ledger.publish(current.model_copy(update=update))

        logger.debug("Reconciled ledger snapshot", extra={"stream": "ledger"})

    def ingest_ledger_error(self, error: Exception) -> None:
        logger.warning("Ledger feed error", extra={"stream": "ledger", "reason": str(error)})
        with self._ledger_lock:
            current = self.ledger.value
            self.ledger.publish(current.model_copy(update={"loading": False}))

    # Feed wiring

    def listen(
        self,
        feed: MockRealtimeDatabase,
        sensor_path: str = "warehouse",
        motion_path: str = "motion",
        ledger_path: str = "ledger",
    ) -> None:
        self.stop_listening()
        self._subscriptions = [
            feed.subscribe(sensor_path, self.ingest, self.ingest_error),
            feed.subscribe(motion_path, self.ingest_motion, self.ingest_motion_error),
            feed.subscribe(ledger_path, self.ingest_ledger, self.ingest_ledger_error),
        ]
        logger.info(
            "Listening to realtime feed",
            extra={"path": f"{sensor_path},{motion_path},{ledger_path}"},
        )

    def stop_listening(self) -> None:
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.unsubscribe()

    def shutdown(self) -> None:
        self.stop_listening()
        with self._alert_lock:
            self._cancel_alert_timer()


@lru_cache
def build_default_aggregator() -> TelemetryAggregator:
    """Factory that wires the aggregator from settings."""
    settings = get_settings()
    return TelemetryAggregator(
        window=RollingWindow(capacity=settings.window_capacity),
        reconciler=EventReconciler(),
        alert_expiry_seconds=settings.alert_expiry_seconds,
    )
