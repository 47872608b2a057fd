"""
Cloudflare R2 object storage system implementation.
"""

from systems.base import ObjectStorageSystem
from configuration import R2_REGION
import logging

logger = logging.getLogger(__name__)


class R2System(ObjectStorageSystem):
    """Cloudflare R2 object storage system.

    R2 only understands the "auto" region and is always addressed path-style.
    """

    service = "r2"

    def __init__(
        self,
        endpoint: str,
        bucket_name: str,
        credentials: dict = None,
        region: str = None,
        max_concurrency: int = None,
    ):
        if credentials is None:
            credentials = {}

        if region and region != R2_REGION:
            logger.warning(f"R2 ignores region {region!r}, using {R2_REGION!r}")

        super().__init__(
            endpoint=endpoint,
            bucket_name=bucket_name,
            credentials=credentials,
            region=R2_REGION,
            force_path_style=True,
            max_concurrency=max_concurrency or 0,
        )
        logger.info("Initialized R2 system")
