"""Latest-value cells with fan-out to subscribers."""

from __future__ import annotations

import logging
from threading import Lock, RLock
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Observer = Callable[[T], None]


class StateCell(Generic[T]):
    """Holds the most recent value and multicasts every publish.

    Values are swapped whole under a lock so readers never see a partial
    update. New subscribers immediately receive the current value. Observer
    failures are logged and never reach the publisher.
    """

    def __init__(self, name: str, initial: T) -> None:
        self.name = name
        self._value = initial
        self._observers: List[Observer[T]] = []
        self._lock = Lock()
        # Serializes delivery so observers see publishes in order.
        self._dispatch_lock = RLock()

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    def publish(self, value: T) -> None:
        with self._dispatch_lock:
            with self._lock:
                self._value = value
                observers = list(self._observers)
            for observer in observers:
                self._notify(observer, value)

    def subscribe(self, observer: Observer[T]) -> Callable[[], None]:
        """Register ``observer`` and return a callable that removes it."""
        with self._dispatch_lock:
            with self._lock:
                self._observers.append(observer)
                current = self._value
            self._notify(observer, current)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def _notify(self, observer: Observer[T], value: T) -> None:
        try:
            observer(value)
        except Exception:  # noqa: BLE001 - observers must not break ingestion
            logger.exception("State observer failed", extra={"stream": self.name})
