"""
Tests for mode dispatch and the end-to-end benchmark runner.
"""

import unittest
import sys
import os
import io
import tempfile
from contextlib import redirect_stdout
from unittest.mock import patch

# Add the parent directory to Python path for imports
TEST_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.dirname(TEST_DIR))
sys.path.insert(0, TEST_DIR)

from algorithms.modes import (
    CLEANUP_KEYSET, CLEANUP_PREFIX, ModeDispatcher, resolve_mode, supported_modes,
)
from cli.benchmark import BenchmarkRunner
from common.dataset import DatasetManager
from common.histogram import LatencyHistogram
from common.exceptions import EmptyKeySetError, UnknownModeError
from common.run_config import RunConfiguration
from persistence.parquet import ParquetPersistence
from persistence.record import BackendInfo
from fake_storage import FakeStorageSystem

BACKEND = BackendInfo("s3", "https://s3.example.com", "us-east-1", "bucket")


def make_config(mode, **overrides):
    params = dict(
        endpoint="https://s3.example.com",
        bucket="bucket",
        mode=mode,
        objects=20,
        object_size_bytes=16,
        concurrency=4,
        duration_seconds=0.2,
    )
    params.update(overrides)
    return RunConfiguration(**params)


class TestModeRegistry(unittest.TestCase):

    def test_supported_modes(self):
        self.assertEqual(
            supported_modes(),
            ["stat", "read_small", "write_small", "delete", "list", "read_write"],
        )

    def test_unknown_mode(self):
        with self.assertRaises(UnknownModeError) as ctx:
            resolve_mode("bogus")
        self.assertIn("Unknown mode: bogus", str(ctx.exception))
        self.assertIn("read_write", str(ctx.exception))

    def test_dataset_and_cleanup_scope(self):
        self.assertFalse(resolve_mode("write_small").requires_dataset)
        self.assertTrue(resolve_mode("stat").requires_dataset)
        self.assertEqual(resolve_mode("stat").cleanup_scope, CLEANUP_KEYSET)
        self.assertEqual(resolve_mode("delete").cleanup_scope, CLEANUP_PREFIX)
        self.assertEqual(len(resolve_mode("read_write").phases), 2)


class TestModeDispatcher(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.storage = FakeStorageSystem(delay=0.001)
        self.prefix = "bench/1700000000-1"
        self.keys = await DatasetManager(self.storage).populate(self.prefix, 20, 16)

    async def test_stat_mode(self):
        dispatcher = ModeDispatcher(self.storage, make_config("stat"), BACKEND)
        report = await dispatcher.execute(self.keys, self.prefix)

        self.assertEqual(len(report.results), 1)
        result = report.results[0]
        self.assertEqual(result.mode, "stat")
        self.assertGreater(result.ok_ops, 0)
        self.assertEqual(result.err_ops, 0)
        self.assertAlmostEqual(result.qps, result.ok_ops / 0.2)
        self.assertIsNotNone(result.latency_us_p50)
        self.assertEqual(report.summary, "")

    async def test_dropped_latency_samples_are_logged(self):
        dispatcher = ModeDispatcher(self.storage, make_config("stat"), BACKEND)

        def narrow():
            return LatencyHistogram(lowest=0, highest=1)

        with patch("common.workload_state.LatencyHistogram", narrow):
            with self.assertLogs("algorithms.modes", level="WARNING") as logs:
                report = await dispatcher.execute(self.keys, self.prefix)

        result = report.results[0]
        self.assertGreater(result.ok_ops, 0)
        self.assertIsNone(result.latency_us_p50)
        self.assertIn(f"stat: {result.ok_ops} latency samples", logs.output[0])

    async def test_read_write_runs_read_then_write(self):
        dispatcher = ModeDispatcher(self.storage, make_config("read_write"), BACKEND)
        report = await dispatcher.execute(self.keys, self.prefix)

        self.assertEqual([r.mode for r in report.results], ["read_small", "write_small"])
        self.assertIn("READ Operations:", report.summary)
        self.assertIn("WRITE Operations:", report.summary)

        written = set(self.storage.objects) - set(self.keys)
        self.assertEqual(len(written), report.results[1].ok_ops)
        self.assertTrue(all(k.startswith(self.prefix + "/") for k in written))

    async def test_delete_never_deletes_a_key_twice(self):
        dispatcher = ModeDispatcher(
            self.storage, make_config("delete", duration_seconds=5), BACKEND
        )
        report = await dispatcher.execute(self.keys, self.prefix)

        result = report.results[0]
        self.assertEqual(result.ok_ops, len(self.keys))
        self.assertEqual(sorted(self.storage.deleted), sorted(self.keys))
        self.assertLess(result.elapsed_seconds, 5)

    async def test_list_mode(self):
        dispatcher = ModeDispatcher(self.storage, make_config("list"), BACKEND)
        report = await dispatcher.execute(self.keys, self.prefix)
        self.assertGreater(report.results[0].ok_ops, 0)

    async def test_write_mode_needs_no_keys(self):
        dispatcher = ModeDispatcher(self.storage, make_config("write_small"), BACKEND)
        report = await dispatcher.execute((), self.prefix)
        self.assertGreater(report.results[0].ok_ops, 0)

    async def test_empty_key_set_is_rejected(self):
        dispatcher = ModeDispatcher(self.storage, make_config("stat"), BACKEND)
        with self.assertRaises(EmptyKeySetError):
            await dispatcher.execute((), self.prefix)


class TestBenchmarkRunner(unittest.IsolatedAsyncioTestCase):

    def test_unknown_mode_fails_before_backend_is_built(self):
        with patch("cli.benchmark.create_storage_system") as factory:
            with self.assertRaises(UnknownModeError):
                BenchmarkRunner(make_config("bogus"))
            factory.assert_not_called()

    async def test_stat_run_cleans_up_its_objects(self):
        storage = FakeStorageSystem(delay=0.001)
        runner = BenchmarkRunner(make_config("stat"), storage_system=storage)

        with redirect_stdout(io.StringIO()) as out:
            report = await runner.run_benchmark()

        self.assertEqual(report.cleaned_up, 20)
        self.assertEqual(storage.objects, {})
        self.assertEqual(storage.opened, 1)
        self.assertEqual(storage.closed, 1)
        self.assertIn('"mode": "stat"', out.getvalue())
        self.assertEqual(report.results[0].backend.to_dict(), storage.describe())

    async def test_write_run_purges_prefix(self):
        storage = FakeStorageSystem(delay=0.001)
        storage.objects["bench/unrelated"] = b""
        runner = BenchmarkRunner(make_config("write_small"), storage_system=storage)

        with redirect_stdout(io.StringIO()):
            report = await runner.run_benchmark()

        self.assertEqual(report.cleaned_up, report.results[0].ok_ops)
        self.assertEqual(list(storage.objects), ["bench/unrelated"])

    async def test_no_cleanup_keeps_objects(self):
        storage = FakeStorageSystem()
        runner = BenchmarkRunner(make_config("stat", cleanup=False), storage_system=storage)

        with redirect_stdout(io.StringIO()):
            report = await runner.run_benchmark()

        self.assertEqual(report.cleaned_up, 0)
        self.assertEqual(len(storage.objects), 20)

    async def test_results_are_persisted(self):
        storage = FakeStorageSystem()
        with tempfile.TemporaryDirectory() as tmp:
            persistence = ParquetPersistence(tmp)
            runner = BenchmarkRunner(
                make_config("read_write"), storage_system=storage, persistence=persistence
            )
            with redirect_stdout(io.StringIO()):
                await runner.run_benchmark()

            files = os.listdir(tmp)
            self.assertEqual(len(files), 1)
            self.assertTrue(files[0].startswith("qps_bench_"))
            self.assertEqual(len(persistence.results), 2)


if __name__ == '__main__':
    unittest.main()
