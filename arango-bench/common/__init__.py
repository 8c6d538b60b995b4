"""
Common utilities for the ArangoDB load generator.
"""

from .distributor import SharedQueue, StaticPartition, WorkDistributor, create_distributor
from .worker_pool import RunConfig, RunResult, WorkerPool

__all__ = [
    'RunConfig',
    'RunResult',
    'SharedQueue',
    'StaticPartition',
    'WorkDistributor',
    'WorkerPool',
    'create_distributor',
]
