"""In-flight guard: at most one running operation per key.

Used to stop a second checkout of the same cart slot, or a second status
change of the same order, from starting while the first is still running.
The second caller fails fast instead of waiting.
"""

import threading
from contextlib import contextmanager

from marketplace.domain import logger
from marketplace.errors import OperationInProgress


class InFlightGuard:
    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()
        self._held: set[str] = set()

    def is_held(self, key) -> bool:
        with self._lock:
            return str(key) in self._held

    @contextmanager
    def hold(self, key):
        key = str(key)
        with self._lock:
            if key in self._held:
                logger.info("operation_rejected_in_flight", guard=self.name, key=key)
                raise OperationInProgress(f"A {self.name} for {key} is already in progress")
            self._held.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._held.discard(key)
