"""
Renderers for latency statistics: human-readable console report or one CSV row per scenario.
"""

import csv
import sys
import logging
from typing import IO, Optional

from common.errors import ConfigurationError
from common.metrics_utils import RunTotal, Statistics, calculate_latency_stats
from configuration import (
    NANOS_PER_MICRO,
    NANOS_PER_MILLI,
    NANOS_PER_SECOND,
    SECONDS_PER_MINUTE,
    SECONDS_PER_HOUR,
    OUTPUT_CONSOLE,
    OUTPUT_CSV,
    SUPPORTED_OUTPUT_FORMATS,
)

logger = logging.getLogger(__name__)


def _decimal(value: int, unit: int) -> str:
    """Exact decimal rendering of value / unit with trailing zeros removed."""
    whole, fraction = divmod(value, unit)
    if not fraction:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{str(fraction).rjust(width, '0').rstrip('0')}"


def format_duration(nanoseconds: int) -> str:
    """
    Render a duration the way Go prints time.Duration values.

    Examples: 850ns, 1.5µs, 12.345ms, 2.000001s, 1m30.5s, 2h0m1s.
    """
    nanoseconds = int(nanoseconds)
    if nanoseconds < 0:
        return "-" + format_duration(-nanoseconds)
    if nanoseconds == 0:
        return "0s"
    if nanoseconds < NANOS_PER_MICRO:
        return f"{nanoseconds}ns"
    if nanoseconds < NANOS_PER_MILLI:
        return f"{_decimal(nanoseconds, NANOS_PER_MICRO)}µs"
    if nanoseconds < NANOS_PER_SECOND:
        return f"{_decimal(nanoseconds, NANOS_PER_MILLI)}ms"

    whole_seconds, remainder = divmod(nanoseconds, NANOS_PER_SECOND)
    hours, rest = divmod(whole_seconds, SECONDS_PER_HOUR)
    minutes, seconds = divmod(rest, SECONDS_PER_MINUTE)
    seconds_text = _decimal(seconds * NANOS_PER_SECOND + remainder, NANOS_PER_SECOND) + "s"
    if hours:
        return f"{hours}h{minutes}m{seconds_text}"
    if minutes:
        return f"{minutes}m{seconds_text}"
    return seconds_text


class Reporter:
    """Base reporter: guards empty runs and reduces samples before rendering."""

    output_format: str = ""

    def report(self, name: str, samples, parallelism: int = 1) -> Optional[Statistics]:
        """Reduce and render the samples of one scenario.

        Args:
            name: Scenario label
            samples: Durations in nanoseconds
            parallelism: Number of workers that produced the samples

        Returns:
            The computed statistics, or None if there were no samples
        """
        if len(samples) == 0:
            logger.info(f"No samples for {name}, skipping report")
            return None
        stats = calculate_latency_stats(samples, parallelism)
        self.render(name, stats)
        return stats

    def render(self, name: str, stats: Statistics) -> None:
        raise NotImplementedError

    def report_total(self, total: RunTotal, elapsed_ns: int) -> None:
        """Report aggregate throughput over all chained scenarios."""
        elapsed_seconds = elapsed_ns / NANOS_PER_SECOND
        logger.info("")
        logger.info(f"Time for {total.requests} requests: {format_duration(elapsed_ns)}")
        logger.info(f"Reqs/s: {int(total.requests_per_second(elapsed_seconds))}")


class ConsoleReporter(Reporter):
    """Multi-line report written to the log."""

    output_format = OUTPUT_CONSOLE

    def render(self, name: str, stats: Statistics) -> None:
        logger.info(f"Statistics for {name}:")
        logger.info(f"Samples : {stats.count}")
        logger.info(f"Time/T  : {format_duration(stats.time_per_worker)}")
        logger.info(f"S/Sec   : {stats.samples_per_second:f}")
        logger.info(f"Average : {format_duration(stats.mean)}")
        logger.info(f"Median  : {format_duration(stats.median)}")
        logger.info(f"90%     : {format_duration(stats.p90)}")
        logger.info(f"99%     : {format_duration(stats.p99)}")
        logger.info(f"99.9%   : {format_duration(stats.p999)}")
        if stats.smallest:
            logger.info("Smallest: " + " ".join(format_duration(v) for v in stats.smallest))
            logger.info("Largest: " + " ".join(format_duration(v) for v in stats.largest))


class CSVReporter(Reporter):
    """
    One comma separated line per scenario, the columns are

    - scenario name
    - average time taken
    - median time
    - minimum
    - maximum
    - standard deviation
    - collection label (empty)

    All timings are in microseconds.
    """

    output_format = OUTPUT_CSV

    def __init__(self, stream: Optional[IO[str]] = None):
        self.stream = stream

    def format_row(self, name: str, stats: Statistics) -> list:
        return [
            name,
            stats.mean // NANOS_PER_MICRO,
            stats.median // NANOS_PER_MICRO,
            stats.minimum // NANOS_PER_MICRO,
            stats.maximum // NANOS_PER_MICRO,
            f"{stats.stddev_us:.2f}",
            "",
        ]

    def render(self, name: str, stats: Statistics) -> None:
        stream = self.stream or sys.stdout
        writer = csv.writer(stream, lineterminator="\n")
        writer.writerow(self.format_row(name, stats))
        stream.flush()


def create_reporter(output_format: str, stream: Optional[IO[str]] = None) -> Reporter:
    """Create the reporter for a run-wide output format.

    Args:
        output_format: 'console' or 'csv'
        stream: Output stream for CSV rows (default: stdout)

    Raises:
        ConfigurationError: If the output format is not supported
    """
    if output_format == OUTPUT_CONSOLE:
        return ConsoleReporter()
    if output_format == OUTPUT_CSV:
        return CSVReporter(stream)
    raise ConfigurationError(
        f"outputFormat needs to be one of {' or '.join(SUPPORTED_OUTPUT_FORMATS)}, got {output_format!r}"
    )
