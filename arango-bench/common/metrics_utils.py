"""
Shared utilities for benchmark metrics calculations: latency statistics and request rates.
"""

import math
import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple, Union

import numpy as np

from configuration import (
    NANOS_PER_MICRO,
    NANOS_PER_SECOND,
    OUTLIER_GROUP_SIZE,
    MIN_SAMPLES_FOR_OUTLIERS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statistics:
    """Latency summary of one completed run. All durations are in nanoseconds."""

    count: int
    total: int
    mean: int
    median: int
    p90: int
    p99: int
    p999: int
    minimum: int
    maximum: int
    stddev: float
    smallest: Tuple[int, ...] = ()
    largest: Tuple[int, ...] = ()
    parallelism: int = 1
    # Population deviation of the samples truncated to whole microseconds
    # around the truncated microsecond mean; the CSV column
    stddev_us: float = 0.0

    @property
    def time_per_worker(self) -> int:
        """Summed latency divided over the workers."""
        return self.total // self.parallelism

    @property
    def samples_per_second(self) -> float:
        worker_seconds = self.total / NANOS_PER_SECOND / self.parallelism
        if worker_seconds <= 0:
            return 0.0
        return self.count / worker_seconds


@dataclass(frozen=True)
class RunTotal:
    """Running count of submitted requests across chained scenarios."""

    requests: int = 0

    def add(self, submitted: int) -> "RunTotal":
        return RunTotal(self.requests + submitted)

    def requests_per_second(self, elapsed_seconds: float) -> float:
        return calculate_requests_per_second(self.requests, elapsed_seconds)


def percentile_index(count: int, percentile: Union[int, float]) -> int:
    """
    Index of a percentile in a sorted sample of `count` values.

    Uses floor(count * p / 100) without interpolation, clamped to the
    valid index range. Computed with exact fractions so that 99.9 does
    not suffer from float rounding.

    Args:
        count: Number of samples (>= 1)
        percentile: Percentile in [0, 100]

    Returns:
        Index into the sorted samples
    """
    index = math.floor(count * Fraction(str(percentile)) / 100)
    return min(max(index, 0), count - 1)


def _truncated_stddev_us(ordered: np.ndarray, mean: int) -> float:
    deviations = (ordered // NANOS_PER_MICRO - mean // NANOS_PER_MICRO).astype(np.float64)
    return math.sqrt(float(np.sum(deviations * deviations)) / len(ordered))


def calculate_latency_stats(samples, parallelism: int = 1) -> Statistics:
    """
    Reduce a completed sample buffer to latency statistics.

    The median is the element at sorted position n // 2, so for an even
    count it is the upper of the two middle values rather than their
    average. Percentiles follow percentile_index(). The standard deviation
    is the population one (divides by n). stddev_us repeats it at
    microsecond granularity: every sample and the mean are truncated to
    whole microseconds first.

    Args:
        samples: Sequence or numpy array of durations in nanoseconds
        parallelism: Number of workers that produced the samples

    Returns:
        Statistics snapshot; the input is not modified

    Raises:
        ValueError: If samples is empty
    """
    ordered = np.sort(np.asarray(samples, dtype=np.int64))
    count = len(ordered)
    if count == 0:
        raise ValueError("Cannot compute statistics of an empty sample set")

    total = int(ordered.sum())
    mean = total // count
    smallest: Tuple[int, ...] = ()
    largest: Tuple[int, ...] = ()
    if count >= MIN_SAMPLES_FOR_OUTLIERS:
        smallest = tuple(int(v) for v in ordered[:OUTLIER_GROUP_SIZE])
        largest = tuple(int(v) for v in ordered[-OUTLIER_GROUP_SIZE:])

    return Statistics(
        count=count,
        total=total,
        mean=mean,
        median=int(ordered[count // 2]),
        p90=int(ordered[percentile_index(count, 90)]),
        p99=int(ordered[percentile_index(count, 99)]),
        p999=int(ordered[percentile_index(count, 99.9)]),
        minimum=int(ordered[0]),
        maximum=int(ordered[-1]),
        stddev=float(np.std(ordered)),
        stddev_us=_truncated_stddev_us(ordered, mean),
        smallest=smallest,
        largest=largest,
        parallelism=parallelism,
    )


def calculate_requests_per_second(request_count: int, duration_seconds: float) -> float:
    """
    Calculate requests per second (RPS) from request count and duration.

    Args:
        request_count: Number of requests
        duration_seconds: Duration in seconds

    Returns:
        Requests per second (RPS), 0 for a non-positive duration
    """
    if duration_seconds <= 0:
        return 0.0
    return request_count / duration_seconds
