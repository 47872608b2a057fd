"""
Timed QPS/latency benchmark of one mode against an object storage backend.
"""

import logging
from typing import Optional

from algorithms.modes import CLEANUP_PREFIX, ModeDispatcher, resolve_mode
from common.dataset import DatasetManager
from common.key_naming import make_run_prefix
from common.run_config import RunConfiguration
from common.storage_factory import create_storage_system
from persistence.parquet import ParquetPersistence
from persistence.record import BackendInfo, BenchmarkReport
from persistence.report import banner, print_report
from configuration import DEFAULT_CLEANUP_CONCURRENCY

logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """Top-level run: populate, benchmark, report, clean up."""

    def __init__(
        self,
        run_config: RunConfiguration,
        storage_system=None,
        persistence: Optional[ParquetPersistence] = None,
    ):
        """Initialize the runner.

        Configuration and mode are validated here, so an invalid run fails
        before any backend client exists.

        Args:
            run_config: Immutable run configuration
            storage_system: Pre-built storage system (default: from the factory)
            persistence: Result persistence (default: none)
        """
        self.run_config = run_config.validate()
        self.mode_spec = resolve_mode(run_config.mode)
        self.persistence = persistence
        self.storage_system = storage_system or create_storage_system(run_config)
        self.run_prefix = make_run_prefix(run_config.prefix)

        logger.info(
            f"Initialized benchmark runner: mode={run_config.mode} "
            f"concurrency={run_config.concurrency} duration={run_config.duration_seconds}s"
        )

    def backend_info(self) -> BackendInfo:
        return BackendInfo(**self.storage_system.describe())

    def _log_header(self) -> None:
        config = self.run_config
        logger.info(banner("🚀 QPS Benchmark"))
        logger.info(f"Mode: {config.mode}")
        logger.info(f"Service: {config.service}")
        logger.info(f"Endpoint: {config.endpoint}")
        logger.info(f"Bucket: {config.bucket}")
        logger.info(f"Region: {self.storage_system.region}")
        logger.info(f"Concurrency: {config.concurrency}")
        logger.info(f"Duration: {config.duration_seconds}s")
        logger.info(f"Using prefix: {self.run_prefix}")

    async def run_benchmark(self) -> BenchmarkReport:
        """Execute the complete benchmark for the configured mode."""
        self._log_header()
        dataset = DatasetManager(self.storage_system)
        keys = ()
        cleaned = 0

        async with self.storage_system:
            try:
                if self.mode_spec.requires_dataset:
                    keys = await dataset.populate(
                        self.run_prefix,
                        self.run_config.objects,
                        self.run_config.object_size_bytes,
                    )

                dispatcher = ModeDispatcher(
                    self.storage_system, self.run_config, self.backend_info()
                )
                report = await dispatcher.execute(keys, self.run_prefix)
                print_report(report)

                if self.persistence is not None:
                    for result in report.results:
                        self.persistence.store_result(result)
                    parquet_file = self.persistence.save_to_file("qps_bench")
                    if parquet_file:
                        logger.info(f"Results saved to: {parquet_file}")
            finally:
                if self.run_config.cleanup:
                    cleaned = await self._cleanup(dataset, keys)
                    logger.info(f"Cleanup removed {cleaned} objects")

        report.cleaned_up = cleaned
        return report

    async def _cleanup(self, dataset: DatasetManager, keys) -> int:
        """Best-effort cleanup according to the mode's cleanup scope."""
        concurrency = min(self.run_config.concurrency, DEFAULT_CLEANUP_CONCURRENCY)
        if self.mode_spec.cleanup_scope == CLEANUP_PREFIX:
            return await dataset.purge_prefix(self.run_prefix, concurrency)
        return await dataset.cleanup(keys, concurrency)
