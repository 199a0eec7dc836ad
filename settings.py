from __future__ import annotations

import math
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_WINDOW_CAPACITY_ENV = "TELEMETRY_WINDOW_CAPACITY"
_ALERT_EXPIRY_ENV = "ALERT_EXPIRY_SECONDS"
_SENSOR_PATH_ENV = "SENSOR_PATH"
_MOTION_PATH_ENV = "MOTION_PATH"
_LEDGER_PATH_ENV = "LEDGER_PATH"
_SEED_PATH_ENV = "REALTIME_SEED_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    window_capacity: int
    alert_expiry_seconds: float
    sensor_path: str
    motion_path: str
    ledger_path: str
    seed_path: Optional[str]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    if not math.isfinite(parsed):
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        window_capacity=_read_positive_int(_WINDOW_CAPACITY_ENV, 100),
        alert_expiry_seconds=_read_positive_float(_ALERT_EXPIRY_ENV, 8.0),
        sensor_path=_read_str_env(_SENSOR_PATH_ENV, "warehouse"),
        motion_path=_read_str_env(_MOTION_PATH_ENV, "motion"),
        ledger_path=_read_str_env(_LEDGER_PATH_ENV, "ledger"),
        seed_path=_read_optional_env(_SEED_PATH_ENV, None),
        log_level=_read_log_level("INFO"),
    )
