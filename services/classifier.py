"""Threshold classification of warehouse environmental conditions."""

from __future__ import annotations

from enum import Enum


class Status(str, Enum):
    """Environmental status; compare members through ``severity``."""

    optimal = "optimal"
    warning = "warning"
    critical = "critical"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {Status.optimal: 0, Status.warning: 1, Status.critical: 2}

# Inclusive (low, high) bands.
TEMPERATURE_OPTIMAL = (16.0, 26.0)
TEMPERATURE_WARNING = (12.0, 30.0)
HUMIDITY_OPTIMAL = (30.0, 60.0)
HUMIDITY_WARNING = (20.0, 70.0)


def _within(value: float, band: tuple[float, float]) -> bool:
    low, high = band
    return low <= value <= high


def classify(temperature: float, humidity: float) -> Status:
    """Combine both dimensions into one status.

    Optimal requires both values in their optimal band, warning requires both
    in their warning band, anything else is critical. NaN compares false
    against every bound and therefore always classifies as critical.
    """
    if _within(temperature, TEMPERATURE_OPTIMAL) and _within(humidity, HUMIDITY_OPTIMAL):
        return Status.optimal
    if _within(temperature, TEMPERATURE_WARNING) and _within(humidity, HUMIDITY_WARNING):
        return Status.warning
    return Status.critical


def classify_temperature(temperature: float) -> Status:
    if _within(temperature, TEMPERATURE_OPTIMAL):
        return Status.optimal
    if _within(temperature, TEMPERATURE_WARNING):
        return Status.warning
    return Status.critical


def classify_humidity(humidity: float) -> Status:
    if _within(humidity, HUMIDITY_OPTIMAL):
        return Status.optimal
    if _within(humidity, HUMIDITY_WARNING):
        return Status.warning
    return Status.critical
