"""
Shared progress state for a scan.

ScanProgress is written by every completing worker and read by display
collaborators (CLI progress bar, GUI). Readers only ever see immutable
snapshots; updates reach them as one-way notifications.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time view of scan progress."""
    completed: int
    total: Optional[int]

    @property
    def fraction(self) -> float:
        """
        Progress in [0.0, 1.0].

        0.0 before the total is known, 1.0 for an empty scan, otherwise
        completed / total clamped to 1.0. Computed from integer counts so
        the value is exactly 1.0 once every unit has completed.
        """
        if self.total is None:
            return 0.0
        if self.total == 0:
            return 1.0
        return min(1.0, self.completed / self.total)

    @property
    def done(self) -> bool:
        return self.total is not None and self.completed >= self.total


ProgressListener = Callable[[ProgressSnapshot], None]


class ScanProgress:
    """
    Thread-safe progress counter.

    Mutations are short critical sections under ``_lock``: they update the
    counts, mark the state dirty and wake the dispatcher. Listeners run on
    a single dispatcher thread, never on the threads that call advance(),
    so a slow listener cannot stall the workers. Changes that land while a
    listener is running are coalesced into the next snapshot, so every
    listener sees non-decreasing values and always sees the latest one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._changed = threading.Condition(self._lock)
        self._completed = 0
        self._total: Optional[int] = None
        self._listeners: list[ProgressListener] = []
        self._dirty = False
        self._delivering = False
        self._dispatcher: Optional[threading.Thread] = None
        self._dispatcher_stop: Optional[threading.Event] = None

    def subscribe(self, listener: ProgressListener) -> None:
        """Register a listener called with a snapshot after changes."""
        with self._lock:
            self._listeners.append(listener)
            if self._dispatcher is None:
                self._dispatcher_stop = threading.Event()
                self._dispatcher = threading.Thread(
                    target=self._dispatch,
                    args=(self._dispatcher_stop,),
                    name="dupescan-progress",
                    daemon=True,
                )
                self._dispatcher.start()

    def unsubscribe(self, listener: ProgressListener) -> None:
        """
        Remove a previously registered listener (no-op if absent).

        Pending changes are delivered first, so the listener's last call
        carries the state at the time of unsubscribing. The dispatcher
        thread exits once no listeners remain.
        """
        on_dispatcher = threading.current_thread() is self._dispatcher
        if not on_dispatcher:
            self.flush()

        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
            if self._listeners or self._dispatcher is None:
                return
            dispatcher = self._dispatcher
            self._dispatcher = None
            self._dispatcher_stop.set()
            self._dispatcher_stop = None
            self._changed.notify_all()

        if not on_dispatcher:
            dispatcher.join()

    def flush(self) -> None:
        """Block until every change so far has reached the listeners."""
        with self._lock:
            if threading.current_thread() is self._dispatcher:
                return
            while self._dispatcher is not None and (self._dirty or self._delivering):
                self._changed.wait()

    def start(self, total: int) -> None:
        """Reset the counter for a scan of ``total`` units."""
        if total < 0:
            raise ValueError(f"total must be >= 0, got {total}")
        with self._lock:
            self._completed = 0
            self._total = total
            self._mark_dirty()

    def advance(self, count: int = 1) -> None:
        """Record ``count`` completed units. Never exceeds the total."""
        with self._lock:
            if self._total is None:
                raise RuntimeError("advance() called before start()")
            self._completed = min(self._total, self._completed + count)
            self._mark_dirty()

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(completed=self._completed, total=self._total)

    @property
    def value(self) -> float:
        """Current progress fraction, safe to read at any time."""
        return self.snapshot().fraction

    def _mark_dirty(self) -> None:
        # Caller holds _lock
        if self._dispatcher is not None:
            self._dirty = True
            self._changed.notify_all()

    def _dispatch(self, stop: threading.Event) -> None:
        while True:
            with self._lock:
                while not self._dirty and not stop.is_set():
                    self._changed.wait()
                if stop.is_set():
                    return
                snap = ProgressSnapshot(completed=self._completed, total=self._total)
                listeners = list(self._listeners)
                self._dirty = False
                self._delivering = True

            for listener in listeners:
                try:
                    listener(snap)
                except Exception as e:
                    logger.warning(f"Progress listener failed: {e}")

            with self._lock:
                self._delivering = False
                self._changed.notify_all()


__all__ = ['ProgressSnapshot', 'ProgressListener', 'ScanProgress']
