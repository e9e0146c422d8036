"""Read-and-clear load accumulator."""

import logging
import threading
from typing import Optional

from autosmp.core.interfaces import ILoadSampler
from autosmp.hotplug.errors import SampleUnavailableError

logger = logging.getLogger(__name__)


class LoadSampler(ILoadSampler):
    """Accumulates load samples between two reads.

    ``record`` may be called from any thread; ``sample_and_reset`` returns the
    integer mean of everything recorded since the previous read and clears it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._total = 0
        self._count = 0
        self._unavailable_reason: Optional[str] = None

    def record(self, value: int):
        """Add one observation to the accumulator."""
        with self._lock:
            self._total += max(0, int(value))
            self._count += 1
            self._unavailable_reason = None

    def mark_unavailable(self, reason: str):
        """Flag that the observer could not probe the host."""
        with self._lock:
            self._unavailable_reason = reason

    def sample_and_reset(self) -> int:
        with self._lock:
            total, count = self._total, self._count
            reason = self._unavailable_reason
            self._total = 0
            self._count = 0

        if count == 0:
            if reason:
                raise SampleUnavailableError(reason)
            return 0

        return total // count

    def pending(self) -> int:
        """Number of observations waiting for the next read."""
        with self._lock:
            return self._count
