"""
Single-operation strategies issued by the workload driver, one per benchmark mode.

Each strategy splits an attempt in two: ``select_target`` draws from the
shared cursor before the clock starts, ``invoke`` is the timed backend call.
"""

import logging

from common.key_naming import generate_key
from common.workload_state import WorkloadState

logger = logging.getLogger(__name__)


class Operation:
    """Base strategy bound to a storage system."""

    name: str = ""
    requires_keys: bool = False

    def __init__(self, storage_system):
        self.storage_system = storage_system

    def select_target(self, workload: WorkloadState):
        return workload.next_key()

    def attempt_limit(self, workload: WorkloadState):
        """Maximum launches for a phase, or None for duration-bound only."""
        return None

    async def invoke(self, target) -> None:
        raise NotImplementedError


class StatOperation(Operation):
    name = "stat"
    requires_keys = True

    async def invoke(self, key: str) -> None:
        await self.storage_system.stat(key)


class ReadOperation(Operation):
    name = "read_small"
    requires_keys = True

    async def invoke(self, key: str) -> None:
        await self.storage_system.read(key)


class WriteOperation(Operation):
    """Writes a fixed payload under a freshly synthesized key per attempt."""

    name = "write_small"

    def __init__(self, storage_system, object_size: int):
        super().__init__(storage_system)
        self.payload = bytes(object_size)

    def select_target(self, workload: WorkloadState) -> str:
        return generate_key(workload.prefix, workload.cursor.next())

    async def invoke(self, key: str) -> None:
        await self.storage_system.write(key, self.payload)


class DeleteOperation(Operation):
    """Deletes pre-populated keys, each at most once.

    The driver caps launches at the key count, so cursor values never wrap.
    """

    name = "delete"
    requires_keys = True

    def attempt_limit(self, workload: WorkloadState) -> int:
        return len(workload.keys)

    def select_target(self, workload: WorkloadState) -> str:
        index = workload.cursor.next()
        if index >= len(workload.keys):
            raise IndexError(f"Key set exhausted at draw {index}")
        return workload.keys[index]

    async def invoke(self, key: str) -> None:
        await self.storage_system.delete(key)


class ListOperation(Operation):
    """Lists one level under the run prefix."""

    name = "list"

    def select_target(self, workload: WorkloadState) -> str:
        return workload.prefix.rstrip("/") + "/"

    async def invoke(self, prefix: str) -> None:
        entries = await self.storage_system.list(prefix)
        logger.debug(f"Listed {len(entries)} entries under {prefix}")
