"""
Tests for the worker pool: coverage, timing, fail-fast behaviour and run configuration.
"""

import asyncio
import unittest
import sys
import os

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.distributor import SharedQueue, StaticPartition
from common.errors import ConfigurationError, OperationError
from common.worker_pool import RunConfig, WorkerPool


class TestWorkerPool(unittest.IsolatedAsyncioTestCase):
    """Worker pool end-to-end behaviour against in-process operations."""

    async def test_every_index_observed_once_static(self):
        seen = []

        async def record(index):
            seen.append(index)

        result = await WorkerPool(4, distributor=StaticPartition()).run(record, 40)

        self.assertEqual(sorted(seen), list(range(40)))
        self.assertEqual(result.per_worker, [10, 10, 10, 10])
        self.assertTrue(result.samples.is_complete())

    async def test_end_to_end_static_partition(self):
        async def sleep_1ms(index):
            await asyncio.sleep(0.001)

        result = await WorkerPool(4, distributor=StaticPartition()).run(sleep_1ms, 100)

        self.assertEqual(len(result.samples), 100)
        self.assertEqual(result.samples.recorded_count, 100)
        self.assertEqual(result.per_worker, [25, 25, 25, 25])
        # Every sample covers the 1ms sleep (minus event loop timer slack)
        self.assertTrue((result.samples.values >= 900_000).all())
        self.assertGreater(result.elapsed_ns, 0)

    async def test_end_to_end_shared_queue(self):
        seen = []

        async def sleep_1ms(index):
            seen.append(index)
            await asyncio.sleep(0.001)

        result = await WorkerPool(4, distributor=SharedQueue()).run(sleep_1ms, 100)

        self.assertEqual(sorted(seen), list(range(100)))
        self.assertEqual(sum(result.per_worker), 100)
        self.assertTrue(result.samples.is_complete())

    async def test_worker_operations_are_sequential(self):
        in_flight = {}
        overlaps = []

        async def operation(index):
            worker = index // 5
            if in_flight.get(worker):
                overlaps.append(index)
            in_flight[worker] = True
            await asyncio.sleep(0)
            in_flight[worker] = False

        await WorkerPool(3, distributor=StaticPartition()).run(operation, 15)
        self.assertEqual(overlaps, [])

    async def test_fail_fast_stops_remaining_requests(self):
        seen = []

        async def failing(index):
            seen.append(index)
            if index == 3:
                raise RuntimeError("boom")

        with self.assertRaises(OperationError) as ctx:
            await WorkerPool(1).run(failing, 10)

        self.assertEqual(ctx.exception.request_index, 3)
        self.assertEqual(seen, [0, 1, 2, 3])
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    async def test_fail_fast_cancels_other_workers(self):
        started = []

        async def operation(index):
            started.append(index)
            if index == 0:
                raise OperationError("first request failed")
            await asyncio.sleep(0.01)

        with self.assertRaises(OperationError) as ctx:
            await WorkerPool(2, distributor=StaticPartition()).run(operation, 200)

        self.assertEqual(ctx.exception.request_index, 0)
        self.assertLess(len(started), 200)

    async def test_delay_between_operations(self):
        async def noop(index):
            pass

        loop = asyncio.get_running_loop()
        start = loop.time()
        await WorkerPool(1, delay=0.01).run(noop, 5)
        self.assertGreaterEqual(loop.time() - start, 0.04)

    async def test_uneven_request_count_rejected(self):
        calls = []

        async def record(index):
            calls.append(index)

        with self.assertRaises(ConfigurationError):
            await WorkerPool(4, distributor=StaticPartition()).run(record, 10)
        self.assertEqual(calls, [])

    async def test_unexecuted_indices_fail_the_run(self):
        class DropLast(StaticPartition):
            def assign(self, nr_requests, parallelism):
                return super().assign(nr_requests - parallelism, parallelism)

        async def noop(index):
            pass

        with self.assertRaises(OperationError) as ctx:
            await WorkerPool(2, distributor=DropLast()).run(noop, 8)
        self.assertIn("Only 6 of 8", str(ctx.exception))

    def test_initial_delay_stagger(self):
        pool = WorkerPool(4, delay=1.0)
        self.assertEqual([pool.initial_delay(j) for j in range(4)], [0.0, 0.25, 0.5, 0.75])

    def test_no_stagger_without_delay(self):
        pool = WorkerPool(4, delay=0.0)
        self.assertEqual(pool.initial_delay(3), 0.0)
        pool = WorkerPool(4, delay=1.0, stagger=False)
        self.assertEqual(pool.initial_delay(3), 0.0)

    def test_invalid_parallelism(self):
        with self.assertRaises(ValueError):
            WorkerPool(0)


class TestRunConfig(unittest.TestCase):

    def test_adjusted_request_count(self):
        config = RunConfig(nr_requests=1001, parallelism=4).adjusted()
        self.assertEqual(config.nr_requests, 1000)
        self.assertEqual(config.requests_per_worker, 250)

    def test_adjusted_is_a_copy(self):
        config = RunConfig(nr_requests=10, parallelism=3)
        self.assertEqual(config.adjusted().nr_requests, 9)
        self.assertEqual(config.nr_requests, 10)

    def test_negative_delay_rejected(self):
        with self.assertRaises(ConfigurationError):
            RunConfig(nr_requests=10, delay=-1.0).adjusted()

    def test_unknown_distribution_rejected(self):
        with self.assertRaises(ConfigurationError):
            RunConfig(nr_requests=10, distribution="random").adjusted()

    def test_create_pool(self):
        pool = RunConfig(nr_requests=10, parallelism=2, delay=0.5, distribution="queue").create_pool()
        self.assertEqual(pool.parallelism, 2)
        self.assertEqual(pool.delay, 0.5)
        self.assertIsInstance(pool.distributor, SharedQueue)


if __name__ == '__main__':
    unittest.main()
