"""
Work distribution strategies: hand request indices out to a fixed set of workers.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, List

from common.errors import ConfigurationError

logger = logging.getLogger(__name__)

# End-of-work marker; one is enqueued per worker when the queue is closed
_END_OF_WORK = None


def adjust_request_count(nr_requests: int, parallelism: int) -> int:
    """Round the request count down to a multiple of the parallelism.

    Args:
        nr_requests: Requested number of requests
        parallelism: Number of workers

    Returns:
        Largest multiple of parallelism not exceeding nr_requests

    Raises:
        ConfigurationError: If parallelism < 1 or nr_requests < 0
    """
    if parallelism < 1:
        raise ConfigurationError(f"parallelism must be at least 1, got {parallelism}")
    if nr_requests < 0:
        raise ConfigurationError(f"number of requests must not be negative, got {nr_requests}")
    return (nr_requests // parallelism) * parallelism


def partition_range(nr_requests: int, parallelism: int, worker_id: int) -> range:
    """Contiguous slice of request indices owned by one worker."""
    per_worker = nr_requests // parallelism
    return range(worker_id * per_worker, (worker_id + 1) * per_worker)


class WorkDistributor(ABC):
    """Assigns every index in [0, nr_requests) to exactly one worker."""

    name: str = ""

    @abstractmethod
    def assign(self, nr_requests: int, parallelism: int) -> List[AsyncIterator[int]]:
        """Create one index source per worker.

        Args:
            nr_requests: Total number of requests, already a multiple of parallelism
            parallelism: Number of workers

        Returns:
            List of async iterators, one per worker, in worker order
        """


class StaticPartition(WorkDistributor):
    """Each worker owns a contiguous range computed up front."""

    name = "static"

    def assign(self, nr_requests: int, parallelism: int) -> List[AsyncIterator[int]]:
        return [
            self._iterate(partition_range(nr_requests, parallelism, worker_id))
            for worker_id in range(parallelism)
        ]

    @staticmethod
    async def _iterate(indices: range) -> AsyncIterator[int]:
        for index in indices:
            yield index


class SharedQueue(WorkDistributor):
    """Workers pull the next index from one queue until it is drained and closed."""

    name = "queue"

    def assign(self, nr_requests: int, parallelism: int) -> List[AsyncIterator[int]]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=nr_requests + parallelism)
        for index in range(nr_requests):
            queue.put_nowait(index)

        # Close the queue: every worker gets exactly one end-of-work marker
        for _ in range(parallelism):
            queue.put_nowait(_END_OF_WORK)

        logger.debug(f"Queued {nr_requests} requests for {parallelism} workers")
        return [self._drain(queue) for _ in range(parallelism)]

    @staticmethod
    async def _drain(queue: asyncio.Queue) -> AsyncIterator[int]:
        while True:
            index = await queue.get()
            if index is _END_OF_WORK:
                return
            yield index


DISTRIBUTORS = {
    StaticPartition.name: StaticPartition,
    SharedQueue.name: SharedQueue,
}


def create_distributor(name: str) -> WorkDistributor:
    """Create a work distributor by strategy name ('static' or 'queue').

    Raises:
        ConfigurationError: If the strategy is unknown
    """
    try:
        return DISTRIBUTORS[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unsupported distribution: {name}. Must be one of {', '.join(DISTRIBUTORS)}."
        ) from None
