from __future__ import annotations

import threading
import weakref
from contextlib import ExitStack, contextmanager
from typing import Iterator


class LockRegistry:
    """
    One re-entrant lock per key ("report:<id>", "reporter:<id>", ...).
    Locks are created on first use and dropped once nobody holds a
    reference to them, so the registry only tracks keys in use.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._locks)

    def get(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        # sorted acquisition order so multi-key holders never deadlock
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                stack.enter_context(self.get(key))
            yield
