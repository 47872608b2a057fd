"""
Tests for the bounded-concurrency workload driver.
"""

import unittest
import sys
import os

# Add the parent directory to Python path for imports
TEST_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.dirname(TEST_DIR))
sys.path.insert(0, TEST_DIR)

from algorithms.operations import StatOperation, WriteOperation, DeleteOperation
from common.exceptions import EmptyHistogramError
from common.key_naming import generate_key
from common.workload_driver import DriverState, WorkloadDriver
from common.workload_state import WorkloadState
from fake_storage import FakeStorageSystem


def make_keys(storage, count, prefix="bench/run"):
    keys = []
    for i in range(count):
        key = generate_key(prefix, i)
        storage.objects[key] = b"x"
        keys.append(key)
    return keys


class TestWorkloadDriver(unittest.IsolatedAsyncioTestCase):

    async def test_concurrency_cap_is_never_exceeded(self):
        storage = FakeStorageSystem(delay=0.005)
        keys = make_keys(storage, 50)
        workload = WorkloadState(keys, "bench/run", 1)
        driver = WorkloadDriver(concurrency=5)

        outcome = await driver.run(StatOperation(storage), workload, duration_seconds=0.3)

        self.assertLessEqual(storage.peak_in_flight, 5)
        self.assertLessEqual(driver.peak_in_flight, 5)
        self.assertGreater(outcome.ok_ops, 0)
        self.assertEqual(driver.in_flight, 0)
        self.assertEqual(driver.state, DriverState.DONE)

    async def test_accounting_is_consistent(self):
        """Every launched attempt is counted exactly once."""
        storage = FakeStorageSystem(delay=0.002, fail_every=3, fail_ops=("stat",))
        keys = make_keys(storage, 20)
        workload = WorkloadState(keys, "bench/run", 1)
        driver = WorkloadDriver(concurrency=4)

        outcome = await driver.run(StatOperation(storage), workload, duration_seconds=0.3)

        self.assertEqual(outcome.ok_ops + outcome.err_ops, outcome.attempts_launched)
        self.assertEqual(outcome.histogram.count, outcome.ok_ops)
        self.assertGreater(outcome.err_ops, 0)
        self.assertEqual(storage.calls["stat"], outcome.attempts_launched)

    async def test_stat_throughput_matches_latency_and_concurrency(self):
        """4 slots of 10ms each over 2s should sustain roughly 400 ops/s."""
        storage = FakeStorageSystem(delay=0.01)
        keys = make_keys(storage, 100)
        workload = WorkloadState(keys, "bench/run", 1)
        driver = WorkloadDriver(concurrency=4)

        outcome = await driver.run(StatOperation(storage), workload, duration_seconds=2)

        qps = outcome.ok_ops / 2
        self.assertGreater(qps, 150)
        self.assertLess(qps, 440)
        self.assertGreater(outcome.ok_ops, 0)
        self.assertEqual(outcome.err_ops, 0)
        self.assertGreaterEqual(outcome.histogram.quantile(0.5), 9000)

    async def test_single_slot_write_against_failing_backend(self):
        storage = FakeStorageSystem(delay=0.001, fail_every=1, fail_ops=("write",))
        workload = WorkloadState((), "bench/run", 16)
        driver = WorkloadDriver(concurrency=1)

        outcome = await driver.run(WriteOperation(storage, 16), workload, duration_seconds=1)

        self.assertEqual(outcome.ok_ops, 0)
        self.assertGreater(outcome.err_ops, 0)
        self.assertEqual(outcome.histogram.count, 0)
        self.assertEqual(storage.peak_in_flight, 1)
        with self.assertRaises(EmptyHistogramError) as ctx:
            outcome.histogram.quantile(0.5)
        self.assertIn("no data", str(ctx.exception))

    async def test_all_failures_leave_histogram_empty(self):
        storage = FakeStorageSystem(delay=0.001, fail_every=1, fail_ops=("write",))
        workload = WorkloadState((), "bench/run", 16)
        driver = WorkloadDriver(concurrency=4)

        outcome = await driver.run(WriteOperation(storage, 16), workload, duration_seconds=0.2)

        self.assertEqual(outcome.ok_ops, 0)
        self.assertGreater(outcome.err_ops, 0)
        with self.assertRaises(EmptyHistogramError):
            outcome.histogram.quantile(0.5)

    async def test_attempt_limit_stops_launches_early(self):
        storage = FakeStorageSystem(delay=0.001)
        keys = make_keys(storage, 30)
        workload = WorkloadState(keys, "bench/run", 1)
        driver = WorkloadDriver(concurrency=8)
        operation = DeleteOperation(storage)

        outcome = await driver.run(
            operation, workload, duration_seconds=5,
            max_attempts=operation.attempt_limit(workload),
        )

        self.assertEqual(outcome.attempts_launched, 30)
        self.assertEqual(len(storage.deleted), 30)
        self.assertEqual(len(set(storage.deleted)), 30)
        self.assertLess(outcome.elapsed_seconds, 5)

    async def test_driver_cannot_be_reused(self):
        storage = FakeStorageSystem()
        keys = make_keys(storage, 1)
        driver = WorkloadDriver(concurrency=1)
        await driver.run(StatOperation(storage), WorkloadState(keys, "p", 1), duration_seconds=0.05)

        with self.assertRaises(RuntimeError):
            await driver.run(StatOperation(storage), WorkloadState(keys, "p", 1), duration_seconds=0.05)

    def test_invalid_concurrency(self):
        with self.assertRaises(ValueError):
            WorkloadDriver(concurrency=0)


class TestWorkloadState(unittest.TestCase):

    def test_next_key_cycles_through_key_set(self):
        state = WorkloadState(("a", "b", "c"), "p", 1)
        drawn = [state.next_key() for _ in range(7)]
        self.assertEqual(drawn, ["a", "b", "c", "a", "b", "c", "a"])
        self.assertEqual(state.cursor.issued, 7)

    def test_counters(self):
        state = WorkloadState((), "p", 1)
        state.counters.success()
        state.counters.success()
        state.counters.failure()
        self.assertEqual(state.counters.ok, 2)
        self.assertEqual(state.counters.err, 1)
        self.assertEqual(state.counters.completed, 3)


if __name__ == '__main__':
    unittest.main()
