"""
Factory module for creating storage system instances.
"""

import logging

# Suppress boto3/botocore logging BEFORE importing any boto3-related modules
logging.getLogger('botocore').setLevel(logging.CRITICAL)
logging.getLogger('botocore.credentials').setLevel(logging.CRITICAL)
logging.getLogger('boto3').setLevel(logging.CRITICAL)
logging.getLogger('aioboto3').setLevel(logging.CRITICAL)
logging.getLogger('aiobotocore').setLevel(logging.CRITICAL)
logging.getLogger('urllib3').setLevel(logging.CRITICAL)

from systems.r2 import R2System
from systems.aws import S3System
from common.exceptions import ConfigurationError
from common.run_config import RunConfiguration

logger = logging.getLogger(__name__)


def create_storage_system(run_config: RunConfiguration):
    """Create and return the appropriate storage system for a run.

    Args:
        run_config: Run configuration carrying service label and connection parameters

    Returns:
        Storage system instance (S3System or R2System), not yet opened

    Raises:
        ConfigurationError: If the service is not supported
    """
    service = run_config.service.lower()
    credentials = {
        "access_key_id": run_config.access_key,
        "secret_access_key": run_config.secret_key,
        "session_token": run_config.session_token,
    }

    if service == "s3":
        return S3System(
            endpoint=run_config.endpoint,
            bucket_name=run_config.bucket,
            credentials=credentials,
            region=run_config.region,
            force_path_style=run_config.force_path_style,
            max_concurrency=run_config.concurrency,
        )

    elif service == "r2":
        if not run_config.force_path_style:
            logger.info("R2 always uses path-style addressing")
        return R2System(
            endpoint=run_config.endpoint,
            bucket_name=run_config.bucket,
            credentials=credentials,
            region=run_config.region,
            max_concurrency=run_config.concurrency,
        )

    else:
        raise ConfigurationError(f"Unsupported storage type: {service}. Must be 'r2' or 's3'.")
