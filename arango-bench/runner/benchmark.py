"""
Scenario driver: prepares fixtures, runs scenarios back to back and reports their statistics.
"""

import time
import logging
from typing import List, Optional

from common.errors import SetupError
from common.metrics_utils import RunTotal
from common.worker_pool import RunConfig, RunResult
from reporting.reporters import Reporter
from scenarios import Scenario, resolve_testcase
from systems.base import ArangoError
from configuration import (
    BENCH_DATABASE,
    BENCH_COLLECTION,
    DEFAULT_REPLICATION_FACTOR,
)

logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """Runs one testcase (one or more chained scenarios) against a shared system."""

    def __init__(
        self,
        system,
        run_config: RunConfig,
        reporter: Reporter,
        cleanup: bool = True,
        replication_factor: int = DEFAULT_REPLICATION_FACTOR,
    ):
        """Initialize the runner.

        Args:
            system: Open ArangoSystem shared by all workers
            run_config: Load parameters; nr_requests is rounded down to a multiple of parallelism
            reporter: Console or CSV reporter
            cleanup: Drop fixtures after the run
            replication_factor: Replication factor of the benchmark collection

        Raises:
            ConfigurationError: If the run configuration is invalid
        """
        self.system = system
        self.run_config = run_config.adjusted()
        self.reporter = reporter
        self.cleanup = cleanup
        self.replication_factor = replication_factor

        if self.run_config.nr_requests != run_config.nr_requests:
            logger.info(
                f"Adjusted number of requests from {run_config.nr_requests} to "
                f"{self.run_config.nr_requests} (multiple of parallelism {self.run_config.parallelism})"
            )

    def create_scenarios(self, testcase: str) -> List[Scenario]:
        return [scenario_class(self.system, self.run_config) for scenario_class in resolve_testcase(testcase)]

    async def prepare(self) -> None:
        """Create the benchmark database and collection unless they exist."""
        try:
            await self.system.ensure_database(BENCH_DATABASE)
            if not await self.system.collection_exists(BENCH_DATABASE, BENCH_COLLECTION):
                await self.system.create_collection(
                    BENCH_DATABASE, BENCH_COLLECTION, replication_factor=self.replication_factor
                )
        except ArangoError as e:
            raise SetupError(f"Failed to create {BENCH_DATABASE}/{BENCH_COLLECTION}: {e}") from e

    async def finish(self) -> None:
        """Drop the benchmark collection and database."""
        try:
            await self.system.drop_collection(BENCH_DATABASE, BENCH_COLLECTION)
            await self.system.drop_database(BENCH_DATABASE)
        except ArangoError as e:
            raise SetupError(f"Failed to drop {BENCH_DATABASE}/{BENCH_COLLECTION}: {e}") from e

    async def setup_scenario(self, scenario: Scenario) -> None:
        try:
            await scenario.setup()
        except ArangoError as e:
            raise SetupError(f"Failed to set up {scenario.name}: {e}") from e

    async def teardown_scenario(self, scenario: Scenario) -> None:
        try:
            await scenario.teardown()
        except ArangoError as e:
            raise SetupError(f"Failed to clean up {scenario.name}: {e}") from e

    async def run_scenario(self, scenario: Scenario, total: RunTotal) -> RunTotal:
        """Execute one scenario, report it and return the updated request total.

        Raises:
            OperationError: If any request fails; nothing is reported in that case
        """
        logger.info(f"=== {scenario.name} ===")
        pool = self.run_config.create_pool()
        result: RunResult = await pool.run(scenario.build_operation(), self.run_config.nr_requests)
        total = total.add(len(result.samples))

        self.reporter.report(scenario.label, result.samples.values, self.run_config.parallelism)

        if self.cleanup:
            await self.teardown_scenario(scenario)
        return total

    async def run(self, testcase: str, total: Optional[RunTotal] = None) -> RunTotal:
        """Run every scenario of a testcase and report aggregate throughput.

        Fixtures are set up before the timer starts.

        Args:
            testcase: Scenario name or composite testcase ('all', 'version')
            total: Request total to continue from

        Returns:
            Request total including this testcase
        """
        scenarios = self.create_scenarios(testcase)
        total = total or RunTotal()

        await self.prepare()
        for scenario in scenarios:
            await self.setup_scenario(scenario)

        start_ns = time.perf_counter_ns()
        for scenario in scenarios:
            total = await self.run_scenario(scenario, total)
        elapsed_ns = time.perf_counter_ns() - start_ns

        self.reporter.report_total(total, elapsed_ns)

        if self.cleanup:
            await self.finish()
        return total
