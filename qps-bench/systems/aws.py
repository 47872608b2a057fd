"""
AWS S3 (and generic S3-compatible) object storage system implementation.
"""

from systems.base import ObjectStorageSystem
from configuration import AWS_REGION
import logging

logger = logging.getLogger(__name__)


class S3System(ObjectStorageSystem):
    """AWS S3 or any S3-compatible endpoint."""

    service = "s3"

    def __init__(
        self,
        endpoint: str,
        bucket_name: str,
        credentials: dict = None,
        region: str = None,
        force_path_style: bool = False,
        max_concurrency: int = None,
    ):
        if credentials is None:
            credentials = {}

        super().__init__(
            endpoint=endpoint,
            bucket_name=bucket_name,
            credentials=credentials,
            region=region or AWS_REGION,
            force_path_style=force_path_style,
            max_concurrency=max_concurrency or 0,
        )
        logger.info("Initialized S3 system")
