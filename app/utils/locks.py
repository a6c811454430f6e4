"""
Per-key locks serializing the timesheet write path.

find-or-create -> append entry -> recompute must run as one unit for a given
(user_id, week_start). Locks are created on demand and dropped again once no
thread holds or waits on them.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Tuple


class KeyedLock:
    def __init__(self):
        self._guard = threading.Lock()
        # key -> (lock, number of threads holding or waiting)
        self._locks: Dict[Hashable, Tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, key: Hashable):
        with self._guard:
            lock, users = self._locks.get(key, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[key] = (lock, users + 1)

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                _, users = self._locks[key]
                if users <= 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, users - 1)


week_locks = KeyedLock()
