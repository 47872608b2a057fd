"""
Configuration constants for the QPS benchmark.

This module contains all configuration parameters including:
- Backend credentials and endpoints (read from the environment)
- Benchmark defaults (object count and size, concurrency, duration, mode)
- Latency histogram range
- Connection pool sizing and request timeouts
- Progress reporting intervals
"""

import os
from typing import Tuple

# =============================================================================
# CLOUD STORAGE CONFIGURATION
# =============================================================================

# Object storage configuration
BUCKET_NAME: str = os.getenv("BUCKET_NAME", "")
S3_ENDPOINT: str = os.getenv("S3_ENDPOINT", "")

# Credentials (shared by every S3-compatible service)
AWS_ACCESS_KEY_ID: str = os.getenv("AWS_ACCESS_KEY_ID", "")
AWS_SECRET_ACCESS_KEY: str = os.getenv("AWS_SECRET_ACCESS_KEY", "")
AWS_SESSION_TOKEN: str = os.getenv("AWS_SESSION_TOKEN", "")
AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")

# Cloudflare R2 only accepts the "auto" region
R2_REGION: str = "auto"

SUPPORTED_SERVICES: Tuple[str, ...] = ("s3", "r2")
DEFAULT_SERVICE: str = "s3"

# =============================================================================
# BENCHMARK DEFAULTS
# =============================================================================

DEFAULT_KEY_PREFIX: str = "bench"
DEFAULT_OBJECT_COUNT: int = 10000
DEFAULT_OBJECT_SIZE_BYTES: int = 1024
DEFAULT_CONCURRENCY: int = 64
DEFAULT_DURATION_SECONDS: int = 60
DEFAULT_MODE: str = "stat"

# =============================================================================
# KEY NAMING
# =============================================================================

SHARD_COUNT: int = 256  # Keys are spread over 256 two-hex-digit shards

# =============================================================================
# LATENCY HISTOGRAM
# =============================================================================

HISTOGRAM_LOWEST_TRACKABLE_US: int = 0
HISTOGRAM_HIGHEST_TRACKABLE_US: int = 3_600_000_000  # One hour

# =============================================================================
# DATASET LIFECYCLE
# =============================================================================

PROGRESS_INTERVAL_OBJECTS: int = 1000  # Log progress every N objects
DEFAULT_CLEANUP_CONCURRENCY: int = 32

# =============================================================================
# CONNECTION POOL AND TIMEOUTS
# =============================================================================

MIN_POOL_CONNECTIONS: int = 10
MAX_POOL_CONNECTIONS: int = 2000
POOL_HEADROOM: int = 16  # Extra connections on top of the concurrency cap

CONNECT_TIMEOUT_SECONDS: int = 5
READ_TIMEOUT_SECONDS: int = 60

# Total requests per call, first one included: botocore must not retry
BACKEND_TOTAL_ATTEMPTS: int = 1

LIST_PAGE_SIZE: int = 1000

# =============================================================================
# UNIT CONVERSIONS
# =============================================================================

MICROSECONDS_PER_MILLISECOND: int = 1000
NANOSECONDS_PER_MICROSECOND: int = 1000

# =============================================================================
# CLI DEFAULTS
# =============================================================================

DEFAULT_OUTPUT_DIR: str = "results"
LOG_FORMAT: str = "%(asctime)s - %(levelname)s - %(message)s"
BANNER_WIDTH: int = 55
