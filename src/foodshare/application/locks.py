"""Per-entity serialization for the Consistency Coordinator.

Every handler that mutates ledger or reservation state first takes the
locks for all the entities it will touch, in one ``hold()`` call.  Keys are
acquired in sorted order, so two handlers can never wait on each other in
a cycle.  Handlers that touch disjoint food items run concurrently.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager


def food_item_key(food_item_id: str) -> str:
    return f"food_item:{food_item_id}"


def location_key(location_id: str) -> str:
    return f"location:{location_id}"


def reservation_key(reservation_id: str) -> str:
    return f"reservation:{reservation_id}"


class KeyedLocks:
    """A lazily-populated registry of one ``threading.Lock`` per key.

    Locks are dropped from the registry once nobody holds or waits on them.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}

    @contextmanager
    def hold(self, keys: Iterable[str]) -> Iterator[None]:
        ordered = sorted(set(keys))
        checked_out: list[str] = []
        acquired: list[threading.Lock] = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                checked_out.append(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in checked_out:
                self._checkin(key)

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]
