"""
Async base class for S3-compatible object storage systems.
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

import aioboto3
import psutil
from aiohttp.client_exceptions import ClientError as AiohttpClientError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from common.exceptions import BackendError
from configuration import (
    MIN_POOL_CONNECTIONS,
    MAX_POOL_CONNECTIONS,
    POOL_HEADROOM,
    CONNECT_TIMEOUT_SECONDS,
    READ_TIMEOUT_SECONDS,
    BACKEND_TOTAL_ATTEMPTS,
    LIST_PAGE_SIZE,
)

logger = logging.getLogger(__name__)

# Failures that count as an opaque backend error for a single call
BACKEND_EXCEPTIONS = (ClientError, BotoCoreError, AiohttpClientError, asyncio.TimeoutError)


class ObjectStorageSystem:
    """Async S3-compatible storage client exposing the benchmark's five operations."""

    service: str = "s3"

    def __init__(
        self,
        endpoint: str,
        bucket_name: str,
        credentials: dict,
        region: str,
        force_path_style: bool = False,
        max_concurrency: int = MIN_POOL_CONNECTIONS,
    ):
        self.endpoint = endpoint
        self.bucket_name = bucket_name
        self.credentials = credentials
        self.region = region
        self.force_path_style = force_path_style

        # Single source of truth for config
        self._config = self._create_config(max_concurrency)

        self.session = aioboto3.Session(
            aws_access_key_id=credentials.get("access_key_id") or None,
            aws_secret_access_key=credentials.get("secret_access_key") or None,
            aws_session_token=credentials.get("session_token") or None,
            region_name=region,
        )

        self.client = None

        logger.info(
            f"Initialized async storage for {endpoint} "
            f"(bucket={bucket_name}, region={region}, "
            f"max_pool_connections={self._config.max_pool_connections})"
        )

    @property
    def addressing_style(self) -> str:
        return "path" if self.force_path_style else "virtual"

    def _create_config(self, max_concurrency: int) -> Config:
        """Create a botocore config sized to the concurrency cap."""
        pool_size = max(MIN_POOL_CONNECTIONS, max_concurrency + POOL_HEADROOM)
        if pool_size > MAX_POOL_CONNECTIONS:
            logger.warning(
                f"Requested pool size ({pool_size}) exceeds maximum ({MAX_POOL_CONNECTIONS}), capping"
            )
            pool_size = MAX_POOL_CONNECTIONS

        return Config(
            max_pool_connections=pool_size,
            connect_timeout=CONNECT_TIMEOUT_SECONDS,
            read_timeout=READ_TIMEOUT_SECONDS,
            retries={
                "total_max_attempts": BACKEND_TOTAL_ATTEMPTS,
                "mode": "standard",
            },
            s3={
                "addressing_style": self.addressing_style,
            },
            tcp_keepalive=True,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        self.client = await self.session.client(
            "s3",
            endpoint_url=self.endpoint,
            config=self._config,
        ).__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.client:
            await self.client.__aexit__(exc_type, exc_val, exc_tb)
            self.client = None

    def _require_client(self):
        if not self.client:
            raise RuntimeError("Storage client not initialized. Use async context manager.")
        return self.client

    def _backend_error(self, operation: str, key: str, error: Exception) -> BackendError:
        """Log throttling loudly and wrap the failure."""
        if isinstance(error, ClientError):
            error_code = error.response.get("Error", {}).get("Code", "Unknown")
            status_code = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
            if status_code in (429, 503):
                logger.error(
                    f"🚨 THROTTLING DETECTED: {error_code} (HTTP {status_code}) "
                    f"on {operation} {key}"
                )
        return BackendError(operation, key, error)

    async def write(self, key: str, data: bytes) -> None:
        client = self._require_client()
        try:
            await client.put_object(Bucket=self.bucket_name, Key=key, Body=data)
        except BACKEND_EXCEPTIONS as e:
            raise self._backend_error("write", key, e) from e

    async def read(self, key: str) -> bytes:
        client = self._require_client()
        try:
            response = await client.get_object(Bucket=self.bucket_name, Key=key)
            async with response["Body"] as stream:
                return await stream.read()
        except BACKEND_EXCEPTIONS as e:
            raise self._backend_error("read", key, e) from e

    async def stat(self, key: str) -> Dict[str, Any]:
        client = self._require_client()
        try:
            response = await client.head_object(Bucket=self.bucket_name, Key=key)
        except BACKEND_EXCEPTIONS as e:
            raise self._backend_error("stat", key, e) from e
        return {
            "content_length": response.get("ContentLength", 0),
            "etag": response.get("ETag"),
            "last_modified": response.get("LastModified"),
        }

    async def delete(self, key: str) -> None:
        client = self._require_client()
        try:
            await client.delete_object(Bucket=self.bucket_name, Key=key)
        except BACKEND_EXCEPTIONS as e:
            raise self._backend_error("delete", key, e) from e

    async def list(self, prefix: str, recursive: bool = False) -> List[str]:
        """List entries under a prefix.

        Non-recursive listings group by "/" and return object keys plus
        common prefixes at that level; recursive listings return every key.
        """
        client = self._require_client()
        list_args = {
            "Bucket": self.bucket_name,
            "Prefix": prefix,
            "MaxKeys": LIST_PAGE_SIZE,
        }
        if not recursive:
            list_args["Delimiter"] = "/"

        entries: List[str] = []
        try:
            while True:
                response = await client.list_objects_v2(**list_args)
                entries.extend(obj["Key"] for obj in response.get("Contents", []))
                entries.extend(p["Prefix"] for p in response.get("CommonPrefixes", []))

                if not response.get("IsTruncated"):
                    break
                list_args["ContinuationToken"] = response.get("NextContinuationToken")
        except BACKEND_EXCEPTIONS as e:
            raise self._backend_error("list", prefix, e) from e

        return entries

    def get_connection_count(self) -> int:
        """Get number of established connections for this process."""
        try:
            process = psutil.Process(os.getpid())
            connections = process.net_connections(kind="inet")
            return len([c for c in connections if c.status == psutil.CONN_ESTABLISHED])
        except psutil.Error as e:
            logger.debug(f"Failed to get connection count: {e}")
            return -1

    async def verify_connection(self) -> bool:
        """Verify storage connection and configuration."""
        if not self.client:
            logger.error("Client not initialized. Use async context manager.")
            return False

        try:
            logger.info("Verifying storage connection...")
            await self.client.head_bucket(Bucket=self.bucket_name)
        except BACKEND_EXCEPTIONS as e:
            logger.error(f"✗ Connection verification failed: {e}")
            return False

        logger.info(f"✓ Successfully connected to bucket: {self.bucket_name}")
        logger.info(f"✓ Endpoint: {self.endpoint}")
        logger.info(f"✓ Addressing style: {self.addressing_style}")
        logger.info(f"✓ Max pool connections: {self._config.max_pool_connections}")

        conn_count = self.get_connection_count()
        if conn_count >= 0:
            logger.info(f"✓ Current established connections: {conn_count}")
        else:
            logger.info("✓ Connection monitoring: unavailable")
        return True

    def describe(self) -> Dict[str, Optional[str]]:
        """Backend identity as reported alongside results."""
        return {
            "service": self.service,
            "endpoint": self.endpoint,
            "region": self.region,
            "bucket": self.bucket_name,
        }
