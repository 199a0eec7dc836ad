"""Pydantic models for published state and the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import AlarmEvent, DoorEvent, SensorReading, Transaction, TransactionType
from services.classifier import Status
from services.rolling_window import DimensionStats, WindowStats


class _Published(BaseModel):
    model_config = ConfigDict(frozen=True)


class TelemetryState(_Published):
    """Current environmental values, published as one consistent tuple."""

    temperature: float = 0.0
    humidity: float = 0.0
    status: Status = Status.optimal
    temperature_status: Status = Status.optimal
    humidity_status: Status = Status.optimal
    last_updated: Optional[datetime] = None
    loading: bool = True


class Reading(_Published):
    temperature: float
    humidity: float
    captured_at: datetime

    @classmethod
    def from_record(cls, reading: SensorReading) -> "Reading":
        return cls(
            temperature=reading.temperature,
            humidity=reading.humidity,
            captured_at=reading.captured_at,
        )


class DimensionSummary(_Published):
    average: float = 0.0
    max: float = 0.0
    min: float = 0.0

    @classmethod
    def from_stats(cls, stats: DimensionStats) -> "DimensionSummary":
        return cls(average=stats.average, max=stats.max, min=stats.min)


class WindowSummary(_Published):
    count: int = Field(default=0, ge=0)
    temperature: DimensionSummary = Field(default_factory=DimensionSummary)
    humidity: DimensionSummary = Field(default_factory=DimensionSummary)

    @classmethod
    def from_stats(cls, stats: WindowStats) -> "WindowSummary":
        return cls(
            count=stats.count,
            temperature=DimensionSummary.from_stats(stats.temperature),
            humidity=DimensionSummary.from_stats(stats.humidity),
        )


class WindowSnapshot(_Published):
    """Rolling-window contents (oldest first) with their statistics."""

    capacity: int = Field(..., gt=0)
    readings: List[Reading] = Field(default_factory=list)
    stats: WindowSummary = Field(default_factory=WindowSummary)


class AlertState(_Published):
    active: bool = False
    triggered_at: Optional[datetime] = None


class MotionState(_Published):
    motion: bool = False
    alert: AlertState = Field(default_factory=AlertState)


class TransactionModel(_Published):
    date: str
    amount: float
    running_balance: float
    type: TransactionType

    @classmethod
    def from_record(cls, transaction: Transaction) -> "TransactionModel":
        return cls(
            date=transaction.date,
            amount=transaction.amount,
            running_balance=transaction.running_balance,
            type=transaction.type,
        )


class LedgerEventModel(_Published):
    timestamp: str
    event: str

    @classmethod
    def from_record(cls, event: AlarmEvent | DoorEvent) -> "LedgerEventModel":
        return cls(timestamp=event.timestamp, event=event.event)


class LedgerState(_Published):
    """Reconciled ledger histories, each sorted newest first."""

    current_inventory: float = 0.0
    transactions: List[TransactionModel] = Field(default_factory=list)
    alarms: List[LedgerEventModel] = Field(default_factory=list)
    doors: List[LedgerEventModel] = Field(default_factory=list)
    loading: bool = True
