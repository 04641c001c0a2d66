"""
Thread-safe document counter used for admission control.
"""

import threading


class DocumentCounter:
    """Integer counter whose updates never get lost between concurrent tasks."""

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def decrement(self) -> int:
        with self._lock:
            self._value -= 1
            return self._value
