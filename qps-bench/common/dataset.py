"""
Dataset lifecycle: pre-populate objects before a benchmark and remove them after.
"""

import asyncio
import logging
from typing import Sequence, Tuple

from common.key_naming import generate_key
from configuration import (
    PROGRESS_INTERVAL_OBJECTS,
    DEFAULT_CLEANUP_CONCURRENCY,
)

logger = logging.getLogger(__name__)


class DatasetManager:
    """Creates and deletes the fixed-size object set used by read-oriented modes."""

    def __init__(self, storage_system):
        self.storage_system = storage_system

    async def populate(self, prefix: str, count: int, object_size: int) -> Tuple[str, ...]:
        """Sequentially write ``count`` zero-filled objects under ``prefix``.

        Failed writes are logged and skipped, so the returned key set may be
        shorter than ``count``. Callers must treat its length as ground truth.

        Returns:
            Keys that were written successfully, in creation order
        """
        logger.info(f"Creating dataset: {count} objects of {object_size} bytes each...")
        data = bytes(object_size)
        keys = []

        for i in range(count):
            key = generate_key(prefix, i)
            try:
                await self.storage_system.write(key, data)
            except Exception as e:
                logger.warning(f"Failed to create object {i}: {e}")
                continue

            keys.append(key)
            if (i + 1) % PROGRESS_INTERVAL_OBJECTS == 0:
                logger.info(f"  Created {i + 1}/{count} objects...")

        logger.info(f"Dataset created: {len(keys)} objects")
        if len(keys) < count:
            logger.warning(f"{count - len(keys)} objects could not be created")
        return tuple(keys)

    async def cleanup(
        self, keys: Sequence[str], concurrency: int = DEFAULT_CLEANUP_CONCURRENCY
    ) -> int:
        """Delete every key, best-effort.

        Returns:
            Number of successful deletions
        """
        if not keys:
            return 0

        total = len(keys)
        logger.info(f"🧹 Cleaning up {total} objects...")
        semaphore = asyncio.Semaphore(max(1, concurrency))
        deleted = 0

        async def delete_one(key: str) -> None:
            nonlocal deleted
            async with semaphore:
                try:
                    await self.storage_system.delete(key)
                except Exception as e:
                    logger.debug(f"Cleanup delete failed for {key}: {e}")
                    return
            deleted += 1
            if deleted % PROGRESS_INTERVAL_OBJECTS == 0:
                logger.info(f"  Deleted {deleted}/{total} objects...")

        await asyncio.gather(*(delete_one(key) for key in keys))

        logger.info(f"✅ Cleaned up {deleted} objects")
        return deleted

    async def purge_prefix(
        self, prefix: str, concurrency: int = DEFAULT_CLEANUP_CONCURRENCY
    ) -> int:
        """Delete everything stored under a run prefix.

        Returns:
            Number of successful deletions (0 if the listing itself fails)
        """
        listing_prefix = prefix.rstrip("/") + "/"
        try:
            keys = await self.storage_system.list(listing_prefix, recursive=True)
        except Exception as e:
            logger.warning(f"Could not list {listing_prefix} for cleanup: {e}")
            return 0
        return await self.cleanup(keys, concurrency)
