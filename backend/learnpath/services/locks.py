"""Per-resource mutation locks.

Mutations of the same workspace, project, folder or pathway id are
serialized within the process; cross-process races are caught by the
version stamp on each row.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class ResourceLocks:
    """Registry of reentrant locks keyed by resource key, e.g. ``pathway:path_x``.

    Locks are created on demand and dropped when no holder or waiter is
    left. Several keys are always acquired in sorted order.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}
        self._users: dict[str, int] = {}

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        ordered = sorted({k for k in keys if k})
        acquired: list[str] = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                lock.acquire()
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
            for key in ordered:
                self._checkin(key)

    def _checkout(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            remaining = self._users.get(key, 0) - 1
            if remaining <= 0:
                self._users.pop(key, None)
                self._locks.pop(key, None)
            else:
                self._users[key] = remaining

    def active_keys(self) -> list[str]:
        with self._guard:
            return sorted(self._locks)


def lock_key(kind: str, resource_id: str | None) -> str:
    return f"{kind}:{resource_id}" if resource_id else ""


resource_locks = ResourceLocks()
