"""
Pre-flight check: confirm the bucket is reachable with the given credentials.
"""

import logging

from common.run_config import RunConfiguration
from common.storage_factory import create_storage_system

logger = logging.getLogger(__name__)


class ConnectionVerifier:
    """Opens a client and issues a single bucket-level request."""

    def __init__(self, run_config: RunConfiguration, storage_system=None):
        self.run_config = run_config
        self.storage_system = storage_system or create_storage_system(run_config)

    async def verify(self) -> bool:
        async with self.storage_system:
            ok = await self.storage_system.verify_connection()

        if ok:
            logger.info("Backend verification passed. Ready for benchmarking.")
        else:
            logger.error("Backend verification failed. Fix issues before benchmarking.")
        return ok
