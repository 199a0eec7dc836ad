from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from threading import Lock, RLock
from typing import Any, Callable, Dict, List, Optional

from settings import get_settings

logger = logging.getLogger(__name__)

ValueCallback = Callable[[Any], None]
ErrorCallback = Callable[[Exception], None]


@dataclass(eq=False)
class Subscription:
    """Handle returned by ``subscribe``; call ``unsubscribe`` to stop delivery."""

    path: str
    on_value: ValueCallback
    on_error: Optional[ErrorCallback] = None
    _database: Optional["MockRealtimeDatabase"] = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._database is not None

    def unsubscribe(self) -> None:
        database = self._database
        if database is None:
            return
        self._database = None
        database._remove(self)


class MockRealtimeDatabase:
    """In-memory stand-in for a realtime store that pushes whole snapshots.

    A subscriber receives the current value of its path on subscription (when
    one exists) and every later ``set``. ``None`` means the path is empty.
    Deliveries happen on the writer's thread. Writers to one path are
    serialized through delivery, so subscribers see values in write order.
    """

    def __init__(self, name: str = "realtime", seed_path: Optional[Path] = None) -> None:
        self.name = name
        self.seed_path = seed_path
        self._values: Dict[str, Any] = {}
        self._subscriptions: Dict[str, List[Subscription]] = {}
        self._lock = Lock()
        self._path_locks: Dict[str, RLock] = {}
        if seed_path:
            self._load_from_disk()

    def get(self, path: str) -> Any:
        key = _normalize(path)
        with self._lock:
            return copy.deepcopy(self._values.get(key))

    def set(self, path: str, value: Any) -> None:
        """Replace the snapshot at ``path`` and push it to its subscribers.

        Raises ``ValueError`` when ``path`` names the root.
        """
        key = _normalize(path)
        with self._path_lock(key):
            with self._lock:
                if value is None:
                    self._values.pop(key, None)
                else:
                    self._values[key] = copy.deepcopy(value)
                subscriptions = list(self._subscriptions.get(key, ()))
            for subscription in subscriptions:
                self._deliver(subscription, copy.deepcopy(value))

    def fail(self, path: str, error: Exception) -> None:
        """Deliver a transport error to every subscriber of ``path``."""
        key = _normalize(path)
        with self._path_lock(key):
            with self._lock:
                subscriptions = list(self._subscriptions.get(key, ()))
            logger.warning("Delivering feed error", extra={"path": key, "reason": str(error)})
            for subscription in subscriptions:
                if subscription.active and subscription.on_error is not None:
                    subscription.on_error(error)

    def subscribe(
        self,
        path: str,
        on_value: ValueCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        key = _normalize(path)
        subscription = Subscription(path=key, on_value=on_value, on_error=on_error, _database=self)
        # Registration and replay share the path lock so a concurrent set cannot
        # deliver its newer value before the replayed one.
        with self._path_lock(key):
            with self._lock:
                self._subscriptions.setdefault(key, []).append(subscription)
                current = copy.deepcopy(self._values.get(key))
            if current is not None:
                self._deliver(subscription, current)
        return subscription

    def subscriber_count(self, path: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(_normalize(path), ()))

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subscriptions = self._subscriptions.get(subscription.path, [])
            if subscription in subscriptions:
                subscriptions.remove(subscription)

    def _path_lock(self, key: str) -> RLock:
        # Reentrant so a subscriber may write back to its own path.
        with self._lock:
            lock = self._path_locks.get(key)
            if lock is None:
                lock = self._path_locks[key] = RLock()
            return lock

    @staticmethod
    def _deliver(subscription: Subscription, value: Any) -> None:
        if not subscription.active:
            return
        subscription.on_value(value)

    def _load_from_disk(self) -> None:
        if not self.seed_path or not self.seed_path.exists():
            return

        try:
            raw = self.seed_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable seed file", extra={"path": str(self.seed_path)})
            data = {}

        if not isinstance(data, dict):
            return
        for path, value in data.items():
            key = path.strip("/")
            if value is not None and key:
                self._values[key] = value


def _normalize(path: str) -> str:
    key = path.strip("/")
    if not key:
        raise ValueError("Feed path must not be empty.")
    return key


@lru_cache
def build_default_feed(seed_path: Optional[str] = None) -> MockRealtimeDatabase:
    settings = get_settings()
    seed = settings.seed_path if seed_path is None else seed_path
    return MockRealtimeDatabase(seed_path=Path(seed) if seed else None)
