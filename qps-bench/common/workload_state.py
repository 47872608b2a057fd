"""
Shared per-run state: key set, cursor and outcome counters.
"""

import threading
from typing import Sequence, Tuple

from common.histogram import LatencyHistogram


class Cursor:
    """Fetch-and-increment counter shared by all attempts of a run."""

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._value
            self._value += 1
            return value

    @property
    def issued(self) -> int:
        """Next value to be handed out, i.e. the draw count when started at zero."""
        return self._value


class OutcomeCounters:
    """Monotonic success/failure counters."""

    def __init__(self):
        self._ok = 0
        self._err = 0
        self._lock = threading.Lock()

    def success(self) -> None:
        with self._lock:
            self._ok += 1

    def failure(self) -> None:
        with self._lock:
            self._err += 1

    @property
    def ok(self) -> int:
        return self._ok

    @property
    def err(self) -> int:
        return self._err

    @property
    def completed(self) -> int:
        with self._lock:
            return self._ok + self._err


class WorkloadState:
    """Everything a single attempt needs, owned by one benchmark phase.

    Attributes:
        keys: Pre-populated key set (read-only, may be empty)
        prefix: Run-scoped key prefix
        object_size: Payload size for writes
        cursor: Shared key selector
        histogram: Latency samples for successful attempts
        counters: Success/failure counters
    """

    def __init__(self, keys: Sequence[str], prefix: str, object_size: int):
        self.keys: Tuple[str, ...] = tuple(keys)
        self.prefix = prefix
        self.object_size = object_size
        self.cursor = Cursor()
        self.histogram = LatencyHistogram()
        self.counters = OutcomeCounters()

    def next_key(self) -> str:
        """Pick the next pre-populated key (cursor mod key count)."""
        return self.keys[self.cursor.next() % len(self.keys)]
