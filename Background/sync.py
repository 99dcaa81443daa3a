import logging
import threading
from contextlib import contextmanager
from typing import Callable, Optional, Tuple

from models.schema import HoursBreakdown


class SnapshotWriter:
    """Single writer for computed hours snapshots.

    Submitting replaces any snapshot still waiting to be written, so a burst
    of recomputations results in one write of the latest one. Every submit or
    cancel bumps the generation; a write only goes through while its
    generation is still current. Snapshots submitted while a reset window is
    open are dropped.
    """

    def __init__(self, sink: Callable[[HoursBreakdown], None]):
        self._sink = sink
        self._lock = threading.Lock()
        self._generation = 0
        self._pending: Optional[Tuple[int, HoursBreakdown]] = None
        self._suspended = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def suspended(self) -> bool:
        return self._suspended

    def submit(self, snapshot: HoursBreakdown) -> int:
        with self._lock:
            self._generation += 1
            if self._suspended:
                logging.info(f"Snapshot {self._generation} dropped, reset in progress")
                return self._generation
            self._pending = (self._generation, snapshot)
            return self._generation

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            self._pending = None

    def is_current(self, token: int) -> bool:
        return token == self._generation and not self._suspended

    def flush(self, token: Optional[int] = None) -> bool:
        """Write the pending snapshot. Returns False when there was nothing current to write."""
        with self._lock:
            if self._pending is None:
                return False
            generation, snapshot = self._pending
            if token is not None and token != generation:
                logging.debug(f"Snapshot {token} superseded by {generation}")
                return False
            self._pending = None
            # writes are serialized under the lock
            self._sink(snapshot)
        logging.info(f"Snapshot {generation} published")
        return True

    @contextmanager
    def reset_window(self):
        with self._lock:
            self._suspended = True
            self._generation += 1
            self._pending = None
        try:
            yield self
        finally:
            with self._lock:
                self._suspended = False
