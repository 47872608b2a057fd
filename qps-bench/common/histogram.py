"""
Latency histogram over integer microsecond samples.
"""

import logging
import threading
from typing import Dict, List, Optional

import numpy as np

from common.exceptions import EmptyHistogramError
from configuration import (
    HISTOGRAM_LOWEST_TRACKABLE_US,
    HISTOGRAM_HIGHEST_TRACKABLE_US,
)

logger = logging.getLogger(__name__)


class LatencyHistogram:
    """Concurrently-updated latency distribution.

    ``record`` may be called from any number of workers. Quantile and mean
    queries are meant for after recording has stopped.

    Attributes:
        lowest: Smallest trackable value in microseconds
        highest: Largest trackable value in microseconds
        dropped: Number of samples rejected as out of range
    """

    def __init__(
        self,
        lowest: int = HISTOGRAM_LOWEST_TRACKABLE_US,
        highest: int = HISTOGRAM_HIGHEST_TRACKABLE_US,
    ):
        if lowest < 0 or highest <= lowest:
            raise ValueError(f"Invalid histogram range [{lowest}, {highest}]")

        self.lowest = lowest
        self.highest = highest
        self.dropped = 0
        self._samples: List[int] = []
        self._lock = threading.Lock()

    def record(self, value_us: int) -> bool:
        """Record one sample.

        Out-of-range values are dropped, never raised, so latency capture
        cannot affect operation accounting.

        Returns:
            True if the sample was stored
        """
        with self._lock:
            if value_us < self.lowest or value_us > self.highest:
                self.dropped += 1
                return False
            self._samples.append(int(value_us))
            return True

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._samples)

    def _snapshot(self) -> np.ndarray:
        with self._lock:
            if not self._samples:
                raise EmptyHistogramError()
            return np.asarray(self._samples, dtype=np.int64)

    def quantile(self, q: float) -> int:
        """Return the smallest recorded value whose cumulative share reaches q."""
        if not 0.0 <= q <= 1.0:
            raise ValueError(f"Quantile must be within [0, 1], got {q}")
        samples = self._snapshot()
        return int(np.quantile(samples, q, method="inverted_cdf"))

    def mean(self) -> float:
        return float(self._snapshot().mean())

    def summary(self) -> Dict[str, Optional[int]]:
        """p50/p95/p99/mean in microseconds, or None values when empty."""
        if self.count == 0:
            return {"p50": None, "p95": None, "p99": None, "mean": None}
        return {
            "p50": self.quantile(0.5),
            "p95": self.quantile(0.95),
            "p99": self.quantile(0.99),
            "mean": int(self.mean()),
        }

    def __repr__(self) -> str:
        return f"LatencyHistogram(count={self.count}, dropped={self.dropped})"
