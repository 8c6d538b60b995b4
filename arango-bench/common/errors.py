"""
Exception hierarchy for the load generator.

Every error is fatal: the CLI turns any BenchmarkError into a non-zero exit.
"""

from typing import Optional


class BenchmarkError(Exception):
    """Base class for all load generator errors."""


class ConfigurationError(BenchmarkError):
    """Invalid run-wide configuration, detected before any work starts."""


class SetupError(BenchmarkError):
    """Fixture creation or removal failed."""


class OperationError(BenchmarkError):
    """An operation failed for a specific request index."""

    def __init__(self, message: str, request_index: Optional[int] = None):
        super().__init__(message)
        self.request_index = request_index

    def __str__(self) -> str:
        message = super().__str__()
        if self.request_index is None:
            return message
        return f"request {self.request_index}: {message}"
