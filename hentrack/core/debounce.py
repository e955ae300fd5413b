"""
Coalescing write-back timer.

Every mutation calls ``schedule()``; the write callback only runs once no new
mutation arrived for ``delay`` seconds. ``flush()`` writes right away. All
writes go through one lock, so the store never has two writers at once.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DebouncedWriter:
    def __init__(self, write: Callable[[], None], delay: float = 1.0, *, name: str = "flock-save") -> None:
        self._write = write
        self._delay = max(0.0, float(delay))
        self._name = name
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._dirty = False
        self._closed = False

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        with self._timer_lock:
            return self._dirty

    def schedule(self) -> None:
        """Mark state dirty and (re)start the debounce timer."""
        with self._timer_lock:
            self._dirty = True
            if self._closed:
                return
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self._delay > 0:
                timer = threading.Timer(self._delay, self._on_timer)
                timer.name = self._name
                timer.daemon = True
                self._timer = timer
                timer.start()
        if self._delay <= 0:
            self.flush()

    def flush(self) -> bool:
        """Write pending changes now. Returns True when a write happened."""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if not self._dirty:
                return False
            self._dirty = False
        return self._run_write()

    def close(self) -> None:
        """Flush whatever is pending and stop accepting timers."""
        with self._timer_lock:
            self._closed = True
        self.flush()

    def _on_timer(self) -> None:
        with self._timer_lock:
            if self._timer is not None and threading.current_thread() is not self._timer:
                # a newer timer replaced this one
                return
            self._timer = None
            if not self._dirty:
                return
            self._dirty = False
        self._run_write()

    def _run_write(self) -> bool:
        with self._write_lock:
            try:
                self._write()
            except Exception:
                # no retry: the batch is dropped, the next mutation writes the full state again
                logger.exception("Failed to persist pending changes")
                return False
        logger.debug("Pending changes persisted")
        return True
