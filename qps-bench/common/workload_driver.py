"""
Bounded-concurrency async workload driver for timed benchmark phases.
"""

import asyncio
import enum
import logging
import time
from typing import Optional, Set

from common.workload_state import WorkloadState
from common.histogram import LatencyHistogram
from configuration import NANOSECONDS_PER_MICROSECOND

logger = logging.getLogger(__name__)


class DriverState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"


class WorkloadOutcome:
    """Final counts and latency distribution of one timed phase."""

    def __init__(
        self,
        ok_ops: int,
        err_ops: int,
        histogram: LatencyHistogram,
        elapsed_seconds: float,
        attempts_launched: int,
        peak_in_flight: int,
    ):
        self.ok_ops = ok_ops
        self.err_ops = err_ops
        self.histogram = histogram
        self.elapsed_seconds = elapsed_seconds
        self.attempts_launched = attempts_launched
        self.peak_in_flight = peak_in_flight

    def __repr__(self) -> str:
        return (
            f"WorkloadOutcome(ok={self.ok_ops}, err={self.err_ops}, "
            f"launched={self.attempts_launched}, elapsed={self.elapsed_seconds:.2f}s)"
        )


class WorkloadDriver:
    """Issues operation attempts for a fixed duration under a concurrency cap.

    The launch loop acquires a permit per attempt and spawns it as a task
    without waiting for it. Each attempt releases its permit when it finishes,
    whatever the outcome, so at most ``concurrency`` attempts are ever
    outstanding. When the duration elapses the driver stops launching and
    awaits every attempt still in flight before reporting.
    """

    def __init__(self, concurrency: int):
        """Initialize the driver.

        Args:
            concurrency: Maximum number of simultaneously outstanding attempts
        """
        if concurrency < 1:
            raise ValueError(f"Concurrency must be at least 1, got {concurrency}")

        self.concurrency = concurrency
        self.state = DriverState.IDLE

        self._semaphore = asyncio.Semaphore(concurrency)
        self._tasks: Set[asyncio.Task] = set()
        self._in_flight = 0
        self._peak_in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        return self._peak_in_flight

    async def run(
        self,
        operation,
        workload: WorkloadState,
        duration_seconds: float,
        max_attempts: Optional[int] = None,
    ) -> WorkloadOutcome:
        """Run one timed phase.

        Args:
            operation: Strategy with ``select_target(workload)`` and
                ``async invoke(target)``
            workload: Shared state for this phase (cursor, histogram, counters)
            duration_seconds: Wall-clock length of the launch window
            max_attempts: Stop launching after this many attempts (None = unbounded)

        Returns:
            Outcome with final counters and histogram
        """
        if self.state is not DriverState.IDLE:
            raise RuntimeError(f"Driver already used (state={self.state.value})")

        loop = asyncio.get_running_loop()
        start = loop.time()
        deadline = start + duration_seconds
        launched = 0

        self.state = DriverState.RUNNING
        logger.info(
            f"Running {operation.name} for {duration_seconds}s with concurrency {self.concurrency}"
        )

        while max_attempts is None or launched < max_attempts:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            try:
                await asyncio.wait_for(self._semaphore.acquire(), timeout=remaining)
            except asyncio.TimeoutError:
                break

            self._in_flight += 1
            self._peak_in_flight = max(self._peak_in_flight, self._in_flight)

            task = asyncio.create_task(self._attempt(operation, workload))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            launched += 1

        if max_attempts is not None and launched >= max_attempts:
            logger.info(f"Attempt limit reached after {launched} launches")

        self.state = DriverState.DRAINING
        if self._tasks:
            logger.debug(f"Draining {len(self._tasks)} in-flight attempts")
            await asyncio.gather(*list(self._tasks))

        elapsed = loop.time() - start
        self.state = DriverState.DONE

        outcome = WorkloadOutcome(
            ok_ops=workload.counters.ok,
            err_ops=workload.counters.err,
            histogram=workload.histogram,
            elapsed_seconds=elapsed,
            attempts_launched=launched,
            peak_in_flight=self._peak_in_flight,
        )
        logger.info(
            f"{operation.name} done: {outcome.ok_ops} ok, {outcome.err_ops} failed "
            f"in {elapsed:.2f}s"
        )
        return outcome

    async def _attempt(self, operation, workload: WorkloadState) -> None:
        """Issue one operation and record its outcome. Never raises."""
        try:
            try:
                target = operation.select_target(workload)
                op_start = time.perf_counter_ns()
                await operation.invoke(target)
            except Exception as e:
                workload.counters.failure()
                logger.debug(f"{operation.name} attempt failed: {e}")
            else:
                latency_us = (time.perf_counter_ns() - op_start) // NANOSECONDS_PER_MICROSECOND
                workload.histogram.record(latency_us)
                workload.counters.success()
        finally:
            self._in_flight -= 1
            self._semaphore.release()
