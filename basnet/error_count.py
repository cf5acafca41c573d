"""Thread-safe counters of timeouts and other errors."""

from __future__ import annotations

import threading


class ErrorCount:
    """Counts timeouts and errors; safe to use from several threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timeouts = 0
        self._errors = 0

    def reset(self) -> None:
        with self._lock:
            self._timeouts = 0
            self._errors = 0

    def timeout(self) -> None:
        """Record one timeout."""
        with self._lock:
            self._timeouts += 1

    def error(self) -> None:
        """Record one error."""
        with self._lock:
            self._errors += 1

    @property
    def timeouts(self) -> int:
        with self._lock:
            return self._timeouts

    @property
    def errors(self) -> int:
        with self._lock:
            return self._errors