"""
Base class for benchmark scenarios.
"""

import logging

from common.worker_pool import Operation, RunConfig
from configuration import BENCH_DATABASE, BENCH_COLLECTION

logger = logging.getLogger(__name__)


class Scenario:
    """A named workload: optional fixture lifecycle plus one per-request operation.

    Subclasses set `name` (the testcase identifier) and `label` (the name the
    statistics are reported under) and implement build_operation().
    """

    name: str = ""
    label: str = ""

    def __init__(
        self,
        system,
        run_config: RunConfig,
        database: str = BENCH_DATABASE,
        collection: str = BENCH_COLLECTION,
    ):
        self.system = system
        self.run_config = run_config
        self.database = database
        self.collection = collection

    async def setup(self) -> None:
        """Create fixtures before measurement. Must be idempotent."""

    def build_operation(self) -> Operation:
        """Return the coroutine function executed once per request index."""
        raise NotImplementedError

    async def teardown(self) -> None:
        """Remove fixtures after measurement (only called when cleanup is enabled)."""

    def partition_base(self, index: int) -> int:
        """First index of the partition that owns `index`.

        With the shared queue there is no fixed ownership, so every worker uses 0.
        """
        if self.run_config.distribution != "static":
            return 0
        per_worker = self.run_config.requests_per_worker
        if per_worker == 0:
            return 0
        return (index // per_worker) * per_worker

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name='{self.name}', database='{self.database}')"
