"""Per-key mutual exclusion within one process.

A ``KeyedLock`` hands out one re-entrant lock per key (a user id for cart
work, an order id for settlement and lifecycle changes), so work on the same
cart or order is serialized while different keys proceed in parallel.
"""

from contextlib import contextmanager
from threading import Lock, RLock


class KeyedLock:
    def __init__(self, name: str):
        self.name = name
        self._guard = Lock()
        self._locks: dict[str, RLock] = {}

    def _lock_for(self, key) -> RLock:
        with self._guard:
            lock = self._locks.get(str(key))
            if lock is None:
                lock = self._locks[str(key)] = RLock()
            return lock

    @contextmanager
    def hold(self, key):
        lock = self._lock_for(key)
        with lock:
            yield

    def reset(self) -> None:
        with self._guard:
            self._locks.clear()


cart_locks = KeyedLock("cart")
order_locks = KeyedLock("order")


def reset_locks() -> None:
    cart_locks.reset()
    order_locks.reset()
