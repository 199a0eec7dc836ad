"""Bounded FIFO history of recent sensor readings."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Tuple

from models.records import SensorReading


@dataclass(frozen=True)
class DimensionStats:
    """Average/max/min of one measured dimension; all zero when empty."""

    average: float = 0.0
    max: float = 0.0
    min: float = 0.0


@dataclass(frozen=True)
class WindowStats:
    count: int = 0
    temperature: DimensionStats = DimensionStats()
    humidity: DimensionStats = DimensionStats()


class RollingWindow:
    """Fixed-capacity window; pushing past capacity evicts the oldest reading.

    Not thread-safe. Callers sharing a window must serialize access.
    """

    def __init__(self, capacity: int = 100) -> None:
        if capacity <= 0:
            raise ValueError("Window capacity must be positive.")
        self.capacity = capacity
        self._readings: Deque[SensorReading] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._readings)

    def push(self, reading: SensorReading) -> None:
        self._readings.append(reading)

    def clear(self) -> None:
        self._readings.clear()

    def all(self) -> Tuple[SensorReading, ...]:
        """Copy of the current contents in arrival order."""
        return tuple(self._readings)

    def stats(self) -> WindowStats:
        count = 0
        temperature_total = 0.0
        humidity_total = 0.0
        temperature_min = temperature_max = None
        humidity_min = humidity_max = None

        for reading in self._readings:
            count += 1
            temperature = reading.temperature
            humidity = reading.humidity
            temperature_total += temperature
            humidity_total += humidity

            if temperature_min is None or temperature < temperature_min:
                temperature_min = temperature
            if temperature_max is None or temperature > temperature_max:
                temperature_max = temperature
            if humidity_min is None or humidity < humidity_min:
                humidity_min = humidity
            if humidity_max is None or humidity > humidity_max:
                humidity_max = humidity

        if not count:
            return WindowStats()

        return WindowStats(
            count=count,
            temperature=_dimension(temperature_total, count, temperature_min, temperature_max),
            humidity=_dimension(humidity_total, count, humidity_min, humidity_max),
        )


def _dimension(total: float, count: int, low: float, high: float) -> DimensionStats:
    # Float summation can push the mean a hair outside [min, max].
    average = min(max(total / count, low), high)
    return DimensionStats(average=average, max=high, min=low)
