"""
Object key naming: run-scoped prefixes and sharded, globally unique keys.
"""

import random
import time
import uuid
from typing import Optional

from configuration import SHARD_COUNT


def generate_key(prefix: str, ordinal: int) -> str:
    """Build ``prefix/<2-hex shard>/<uuid4>``.

    The shard is ``ordinal mod 256`` so consecutive ordinals spread across
    backend partitions instead of hammering one.

    Args:
        prefix: Run-scoped prefix (no trailing slash)
        ordinal: Cursor value used to pick the shard

    Returns:
        Fully-qualified object key
    """
    shard = f"{ordinal % SHARD_COUNT:02x}"
    return f"{prefix}/{shard}/{uuid.uuid4()}"


def make_run_prefix(base_prefix: str, now: Optional[float] = None) -> str:
    """Build ``base_prefix/<unix seconds>-<random u64>`` for a single run."""
    timestamp = int(time.time() if now is None else now)
    run_id = random.getrandbits(64)
    return f"{base_prefix.rstrip('/')}/{timestamp}-{run_id}"


def shard_of(key: str) -> int:
    """Return the shard number encoded in a key built by generate_key."""
    return int(key.rsplit("/", 2)[-2], 16)
