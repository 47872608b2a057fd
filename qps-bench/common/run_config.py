"""
Immutable run configuration shared read-only by every benchmark component.
"""

import logging
from typing import Optional, NamedTuple

from common.exceptions import ConfigurationError
from configuration import (
    SUPPORTED_SERVICES,
    DEFAULT_SERVICE,
    AWS_REGION,
    DEFAULT_KEY_PREFIX,
    DEFAULT_OBJECT_COUNT,
    DEFAULT_OBJECT_SIZE_BYTES,
    DEFAULT_CONCURRENCY,
    DEFAULT_DURATION_SECONDS,
    DEFAULT_MODE,
)

logger = logging.getLogger(__name__)


def normalize_endpoint(endpoint: str) -> str:
    """Prefix a bare host with https:// so botocore accepts it."""
    endpoint = endpoint.strip()
    if endpoint and "://" not in endpoint:
        return f"https://{endpoint}"
    return endpoint


class RunConfiguration(NamedTuple):
    """Parameters for a single benchmark run."""

    endpoint: str
    bucket: str
    access_key: str = ""
    secret_key: str = ""
    session_token: Optional[str] = None
    service: str = DEFAULT_SERVICE
    region: str = AWS_REGION
    force_path_style: bool = False
    prefix: str = DEFAULT_KEY_PREFIX
    objects: int = DEFAULT_OBJECT_COUNT
    object_size_bytes: int = DEFAULT_OBJECT_SIZE_BYTES
    concurrency: int = DEFAULT_CONCURRENCY
    duration_seconds: float = DEFAULT_DURATION_SECONDS
    mode: str = DEFAULT_MODE
    cleanup: bool = True

    @classmethod
    def from_args(cls, args) -> "RunConfiguration":
        """Build a configuration from parsed CLI arguments."""
        return cls(
            endpoint=normalize_endpoint(args.endpoint or ""),
            bucket=args.bucket or "",
            access_key=args.access_key or "",
            secret_key=args.secret_key or "",
            session_token=args.session_token or None,
            service=args.service,
            region=args.region,
            force_path_style=args.force_path_style,
            prefix=getattr(args, "prefix", DEFAULT_KEY_PREFIX),
            objects=getattr(args, "objects", DEFAULT_OBJECT_COUNT),
            object_size_bytes=getattr(args, "object_size_bytes", DEFAULT_OBJECT_SIZE_BYTES),
            concurrency=getattr(args, "concurrency", DEFAULT_CONCURRENCY),
            duration_seconds=getattr(args, "duration_seconds", DEFAULT_DURATION_SECONDS),
            mode=getattr(args, "mode", DEFAULT_MODE),
            cleanup=getattr(args, "cleanup", True),
        )

    def validate(self) -> "RunConfiguration":
        """Raise ConfigurationError for malformed parameters.

        Returns:
            self, so calls can be chained
        """
        if self.service not in SUPPORTED_SERVICES:
            raise ConfigurationError(
                f"Unsupported service: {self.service}. Must be one of {', '.join(SUPPORTED_SERVICES)}"
            )
        if not self.endpoint:
            raise ConfigurationError("Endpoint is required (--endpoint or S3_ENDPOINT)")
        if not self.bucket:
            raise ConfigurationError("Bucket is required (--bucket or BUCKET_NAME)")
        if not self.prefix.strip("/"):
            raise ConfigurationError("Key prefix must not be empty")
        if self.concurrency < 1:
            raise ConfigurationError(f"Concurrency must be at least 1, got {self.concurrency}")
        if self.duration_seconds <= 0:
            raise ConfigurationError(
                f"Duration must be positive, got {self.duration_seconds}"
            )
        if self.objects < 0:
            raise ConfigurationError(f"Object count must not be negative, got {self.objects}")
        if self.object_size_bytes < 0:
            raise ConfigurationError(
                f"Object size must not be negative, got {self.object_size_bytes}"
            )
        return self
