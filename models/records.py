"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True, slots=True)
class SensorReading:
    """A single temperature/humidity sample taken from the telemetry feed."""

    temperature: float
    humidity: float
    captured_at: datetime


class TransactionType(str, Enum):
    """Direction of an inventory movement, using the ledger's wire values."""

    inbound = "NHAP"
    outbound = "XUAT"

    @property
    def label(self) -> str:
        return "Nhập Hàng" if self is TransactionType.inbound else "Xuất Hàng"


@dataclass(frozen=True, slots=True)
class Transaction:
    """An inventory delta keyed by its ledger timestamp."""

    date: str
    amount: float
    running_balance: float
    type: TransactionType


@dataclass(frozen=True, slots=True)
class AlarmEvent:
    timestamp: str
    event: str


@dataclass(frozen=True, slots=True)
class DoorEvent:
    timestamp: str
    event: str
