"""
Keyed Locks

One exclusive critical section per key (a username), so mutations for a single
user are serialized while different users proceed in parallel. A key's lock
only exists while someone holds or waits for it.
"""

import threading
from contextlib import contextmanager


class KeyedLock:
    def __init__(self):
        # key -> [lock, number of holders and waiters]
        self._locks = {}
        self._guard = threading.Lock()

    def _acquire_entry(self, key):
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
            return entry

    def _release_entry(self, key, entry):
        with self._guard:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    def __len__(self):
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key):
        entry = self._acquire_entry(key)
        try:
            with entry[0]:
                yield
        finally:
            self._release_entry(key, entry)


# Shared by every writer of a user's favorites / login state
user_locks = KeyedLock()
