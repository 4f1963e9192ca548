from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator


class ClaimRegistry:
    """In-process registry of record ids held by an in-flight settlement.

    A record claimed by one invocation is invisible to any other invocation
    until the first one finishes.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._held: set[str] = set()

    @contextmanager
    def claim(self, ids: Iterable[str]) -> Iterator[frozenset[str]]:
        with self._lock:
            granted = frozenset(i for i in ids if i not in self._held)
            self._held |= granted
        try:
            yield granted
        finally:
            with self._lock:
                self._held -= granted

    def held(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._held)
