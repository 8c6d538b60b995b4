"""
Async worker pool that runs an operation for every request index and times it.
"""

import asyncio
import time
import logging
from dataclasses import dataclass, field, replace
from typing import Awaitable, Callable, List, Optional

from common.distributor import (
    DISTRIBUTORS,
    WorkDistributor,
    StaticPartition,
    adjust_request_count,
    create_distributor,
)
from common.errors import ConfigurationError, OperationError
from persistence.samples import SampleBuffer
from configuration import PROGRESS_INTERVAL, NANOS_PER_SECOND

logger = logging.getLogger(__name__)

Operation = Callable[[int], Awaitable[object]]


@dataclass
class RunResult:
    """Outcome of one completed pool run."""

    samples: SampleBuffer
    elapsed_ns: int
    per_worker: List[int] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ns / NANOS_PER_SECOND


class WorkerPool:
    """Fixed-size pool of async workers sharing one sample buffer."""

    def __init__(
        self,
        parallelism: int,
        delay: float = 0.0,
        stagger: bool = True,
        distributor: Optional[WorkDistributor] = None,
    ):
        """Initialize the worker pool.

        Args:
            parallelism: Number of concurrent workers
            delay: Seconds each worker sleeps after every operation
            stagger: Offset worker j's first operation by j * delay / parallelism
            distributor: How indices are handed out (default: static partition)
        """
        if parallelism < 1:
            raise ValueError(f"parallelism must be at least 1, got {parallelism}")
        self.parallelism = parallelism
        self.delay = delay
        self.stagger = stagger
        self.distributor = distributor or StaticPartition()

    def initial_delay(self, worker_id: int) -> float:
        """Startup offset for a worker, spreading first requests over one delay period."""
        if not self.stagger or self.delay <= 0:
            return 0.0
        return worker_id * self.delay / self.parallelism

    async def run(self, operation: Operation, nr_requests: int) -> RunResult:
        """Run `operation` once for every index in [0, nr_requests).

        Blocks until every worker has finished its share. The first failing
        operation cancels the remaining workers.

        Args:
            operation: Coroutine function taking the request index
            nr_requests: Total number of requests (a multiple of parallelism)

        Returns:
            RunResult with the filled sample buffer

        Raises:
            ConfigurationError: If nr_requests is not a multiple of parallelism
            OperationError: If any operation fails
        """
        if adjust_request_count(nr_requests, self.parallelism) != nr_requests:
            raise ConfigurationError(
                f"{nr_requests} requests do not divide evenly over {self.parallelism} workers"
            )

        samples = SampleBuffer(nr_requests)
        per_worker = [0] * self.parallelism
        sources = self.distributor.assign(nr_requests, self.parallelism)

        logger.info(
            f"Starting {self.parallelism} workers for {nr_requests} requests "
            f"({self.distributor.name} distribution, delay={self.delay}s)"
        )

        start_ns = time.perf_counter_ns()
        tasks = [
            asyncio.create_task(
                self._worker_task(worker_id, source, operation, samples, per_worker),
                name=f"worker-{worker_id}",
            )
            for worker_id, source in enumerate(sources)
        ]

        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        elapsed_ns = time.perf_counter_ns() - start_ns
        if not samples.is_complete():
            raise OperationError(
                f"Only {samples.recorded_count} of {nr_requests} requests were executed"
            )
        logger.info(f"All {self.parallelism} workers finished in {elapsed_ns / NANOS_PER_SECOND:.3f}s")

        return RunResult(samples=samples, elapsed_ns=elapsed_ns, per_worker=per_worker)

    async def _worker_task(
        self,
        worker_id: int,
        source,
        operation: Operation,
        samples: SampleBuffer,
        per_worker: List[int],
    ):
        """Worker loop: pull an index, time the operation, record the sample."""
        initial_delay = self.initial_delay(worker_id)
        if initial_delay > 0:
            await asyncio.sleep(initial_delay)

        async for index in source:
            start_ns = time.perf_counter_ns()
            try:
                await operation(index)
            except OperationError as e:
                if e.request_index is None:
                    e.request_index = index
                raise
            except Exception as e:
                raise OperationError(str(e) or type(e).__name__, request_index=index) from e
            samples.record(index, time.perf_counter_ns() - start_ns)

            per_worker[worker_id] += 1
            if per_worker[worker_id] % PROGRESS_INTERVAL == 0:
                logger.debug(f"Worker {worker_id}: {per_worker[worker_id]} requests completed")

            if self.delay > 0:
                await asyncio.sleep(self.delay)


@dataclass(frozen=True)
class RunConfig:
    """Immutable parameters of one scenario execution."""

    nr_requests: int
    parallelism: int = 1
    delay: float = 0.0
    stagger: bool = True
    distribution: str = "static"

    def adjusted(self) -> "RunConfig":
        """Copy with nr_requests rounded down to a multiple of parallelism.

        Raises:
            ConfigurationError: If any parameter is out of range
        """
        if self.delay < 0:
            raise ConfigurationError(f"delay must not be negative, got {self.delay}")
        if self.distribution not in DISTRIBUTORS:
            raise ConfigurationError(
                f"Unsupported distribution: {self.distribution}. Must be one of {', '.join(DISTRIBUTORS)}."
            )
        nr_requests = adjust_request_count(self.nr_requests, self.parallelism)
        return replace(self, nr_requests=nr_requests)

    @property
    def requests_per_worker(self) -> int:
        return self.nr_requests // self.parallelism

    def create_pool(self) -> WorkerPool:
        return WorkerPool(
            self.parallelism,
            delay=self.delay,
            stagger=self.stagger,
            distributor=create_distributor(self.distribution),
        )
