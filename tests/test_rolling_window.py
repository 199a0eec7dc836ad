"""Unit tests for the rolling window."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from models.records import SensorReading
from services.rolling_window import RollingWindow, WindowStats


def _reading(temperature: float, humidity: float, offset: int = 0) -> SensorReading:
    """Helper to build deterministic sensor readings."""

    return SensorReading(
        temperature=temperature,
        humidity=humidity,
        captured_at=datetime(2026, 1, 1) + timedelta(seconds=offset),
    )


def test_empty_window_stats_are_zero() -> None:
    window = RollingWindow()

    stats = window.stats()

    assert stats == WindowStats()
    assert stats.count == 0
    assert stats.temperature.average == 0
    assert stats.temperature.max == 0
    assert stats.temperature.min == 0
    assert stats.humidity.average == 0
    assert stats.humidity.max == 0
    assert stats.humidity.min == 0


def test_stats_are_computed_per_dimension() -> None:
    window = RollingWindow()
    for temperature, humidity in [(10.0, 70.0), (30.0, 40.0), (20.0, 55.0)]:
        window.push(_reading(temperature, humidity))

    stats = window.stats()

    assert stats.count == 3
    assert stats.temperature.average == 20.0
    assert stats.temperature.max == 30.0
    assert stats.temperature.min == 10.0
    assert stats.humidity.average == 55.0
    assert stats.humidity.max == 70.0
    assert stats.humidity.min == 40.0


@pytest.mark.parametrize("pushes,capacity", [(0, 3), (2, 3), (3, 3), (7, 3), (250, 100)])
def test_length_never_exceeds_capacity(pushes: int, capacity: int) -> None:
    window = RollingWindow(capacity=capacity)

    for index in range(pushes):
        window.push(_reading(float(index), float(index), offset=index))
        assert len(window) <= capacity

    assert len(window) == min(pushes, capacity)
    kept = [reading.temperature for reading in window.all()]
    assert kept == [float(index) for index in range(max(0, pushes - capacity), pushes)]


def test_average_stays_between_min_and_max() -> None:
    window = RollingWindow(capacity=5)
    for _ in range(5):
        window.push(_reading(0.1, 33.3))

    stats = window.stats()

    assert stats.temperature.min <= stats.temperature.average <= stats.temperature.max
    assert stats.humidity.min <= stats.humidity.average <= stats.humidity.max


def test_all_returns_a_copy() -> None:
    window = RollingWindow(capacity=2)
    window.push(_reading(20.0, 40.0))

    snapshot = window.all()
    window.push(_reading(21.0, 41.0))

    assert len(snapshot) == 1
    assert len(window.all()) == 2


def test_clear_empties_the_window() -> None:
    window = RollingWindow(capacity=2)
    window.push(_reading(20.0, 40.0))

    window.clear()

    assert len(window) == 0
    assert window.stats() == WindowStats()


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RollingWindow(capacity=0)
