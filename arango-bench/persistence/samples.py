"""
Preallocated per-request sample storage.
"""

import numpy as np


class SampleBuffer:
    """Index-addressable buffer of request durations in nanoseconds.

    Every worker writes only the indices it owns, so no locking is needed.
    The buffer must not be read before all workers have been joined.

    Attributes:
        size: Number of slots (one per request index)
    """

    def __init__(self, size: int):
        if size < 0:
            raise ValueError(f"Sample buffer size must not be negative, got {size}")
        self.size: int = size
        self._samples = np.zeros(size, dtype=np.int64)
        self._written = np.zeros(size, dtype=bool)

    def record(self, index: int, duration_ns: int) -> None:
        """Store the duration of request `index`. Each index is written once.

        Raises:
            IndexError: If index is outside the buffer
            ValueError: If the index was already recorded
        """
        if self._written[index]:
            raise ValueError(f"Sample {index} already recorded")
        self._samples[index] = duration_ns
        self._written[index] = True

    @property
    def recorded_count(self) -> int:
        return int(self._written.sum())

    def is_complete(self) -> bool:
        return bool(self._written.all())

    @property
    def values(self) -> np.ndarray:
        """Read-only view of all samples."""
        view = self._samples.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"SampleBuffer(size={self.size}, recorded={self.recorded_count})"
