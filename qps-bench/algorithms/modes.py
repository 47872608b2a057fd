"""
Mode dispatch: which operations a benchmark mode issues, whether it needs a
pre-populated dataset, and what cleanup targets afterwards.
"""

import logging
from typing import Callable, Dict, List, NamedTuple, Sequence, Tuple

from algorithms.operations import (
    Operation,
    StatOperation,
    ReadOperation,
    WriteOperation,
    DeleteOperation,
    ListOperation,
)
from common.exceptions import EmptyKeySetError, UnknownModeError
from common.run_config import RunConfiguration
from common.workload_driver import WorkloadDriver
from common.workload_state import WorkloadState
from persistence.record import BackendInfo, BenchmarkReport, BenchmarkResult
from persistence.report import render_combined_summary, render_one_line

logger = logging.getLogger(__name__)

CLEANUP_KEYSET = "keyset"
CLEANUP_PREFIX = "prefix"

OperationFactory = Callable[[object, RunConfiguration], Operation]


class ModeSpec(NamedTuple):
    """Static description of a benchmark mode.

    Attributes:
        name: Mode name as given on the command line
        requires_dataset: Whether objects must be pre-populated
        phases: Ordered operation factories, one timed run each
        cleanup_scope: CLEANUP_KEYSET or CLEANUP_PREFIX
    """

    name: str
    requires_dataset: bool
    phases: Tuple[OperationFactory, ...]
    cleanup_scope: str


def _stat(storage, config):
    return StatOperation(storage)


def _read(storage, config):
    return ReadOperation(storage)


def _write(storage, config):
    return WriteOperation(storage, config.object_size_bytes)


def _delete(storage, config):
    return DeleteOperation(storage)


def _list(storage, config):
    return ListOperation(storage)


MODES: Dict[str, ModeSpec] = {
    "stat": ModeSpec("stat", True, (_stat,), CLEANUP_KEYSET),
    "read_small": ModeSpec("read_small", True, (_read,), CLEANUP_KEYSET),
    "write_small": ModeSpec("write_small", False, (_write,), CLEANUP_PREFIX),
    "delete": ModeSpec("delete", True, (_delete,), CLEANUP_PREFIX),
    "list": ModeSpec("list", True, (_list,), CLEANUP_KEYSET),
    "read_write": ModeSpec("read_write", True, (_read, _write), CLEANUP_PREFIX),
}


def supported_modes() -> List[str]:
    return list(MODES)


def resolve_mode(name: str) -> ModeSpec:
    """Look up a mode, failing before any backend interaction."""
    try:
        return MODES[name]
    except KeyError:
        raise UnknownModeError(name, MODES) from None


class ModeDispatcher:
    """Runs every phase of a mode with a fresh driver and assembles the report."""

    def __init__(self, storage_system, run_config: RunConfiguration, backend_info: BackendInfo):
        self.storage_system = storage_system
        self.run_config = run_config
        self.backend_info = backend_info
        self.mode_spec = resolve_mode(run_config.mode)

    async def execute(self, keys: Sequence[str], run_prefix: str) -> BenchmarkReport:
        """Run the mode's phases sequentially.

        Args:
            keys: Pre-populated key set (empty for pure-write modes)
            run_prefix: Run-scoped key prefix

        Returns:
            Report with one result per phase

        Raises:
            EmptyKeySetError: If a phase needs keys and none were created
        """
        operations = [factory(self.storage_system, self.run_config) for factory in self.mode_spec.phases]
        for operation in operations:
            if operation.requires_keys and not keys:
                raise EmptyKeySetError(
                    f"Mode {self.mode_spec.name} needs pre-populated objects but the key set is empty"
                )

        results = []
        for operation in operations:
            logger.info(f"=== {operation.name.upper()} Benchmark ===")
            results.append(await self._run_phase(operation, keys, run_prefix))

        summary = ""
        if len(results) > 1:
            for result in results:
                logger.info(render_one_line(result.mode.split("_")[0].upper(), result))
            summary = render_combined_summary(results)

        return BenchmarkReport(self.mode_spec.name, results, summary)

    async def _run_phase(self, operation: Operation, keys: Sequence[str],
                         run_prefix: str) -> BenchmarkResult:
        # Writes get their own cursor, so their key stream never overlaps the key set
        workload = WorkloadState(
            keys=keys if operation.requires_keys else (),
            prefix=run_prefix,
            object_size=self.run_config.object_size_bytes,
        )
        max_attempts = operation.attempt_limit(workload)

        driver = WorkloadDriver(self.run_config.concurrency)
        outcome = await driver.run(
            operation, workload, self.run_config.duration_seconds, max_attempts=max_attempts
        )
        if outcome.histogram.dropped:
            logger.warning(
                f"{operation.name}: {outcome.histogram.dropped} latency samples outside "
                f"[{outcome.histogram.lowest}, {outcome.histogram.highest}] μs were dropped"
            )

        return BenchmarkResult.from_outcome(
            mode=operation.name,
            concurrency=self.run_config.concurrency,
            duration_seconds=self.run_config.duration_seconds,
            outcome=outcome,
            backend=self.backend_info,
        )

