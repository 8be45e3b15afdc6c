# mailing_api/services/retention/watcher.py
"""
Background retention watcher.

Runs sweep_expired_entries on a fixed tick in a dedicated thread, independent
of request traffic. The tick period and the TTL are separate settings: an entry
may outlive its TTL by up to one tick period before it is swept.
"""

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Optional

from mailing_api.services.retention.sweep_service import (
    DEFAULT_TTL,
    SweepResult,
    sweep_expired_entries,
)
from mailing_api.storage.base import EntryStore

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class RetentionWatcher:
    """
    Periodically removes entries older than the retention TTL.

    States: stopped -> start() -> running -> stop() -> stopped.

    stop() lets an in-flight sweep finish, then joins the thread, so no
    sweep is running or will run once it returns. Calling start() while
    running or stop() while stopped does nothing. If stop(timeout) gave up
    on a slow sweep, the next start() first waits for that thread to exit.

    Usage:
        watcher = RetentionWatcher(store, tick_period=60)
        watcher.start()
        ...
        watcher.stop()
    """

    def __init__(
        self,
        store: EntryStore,
        tick_period: float,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utc_now,
    ):
        if tick_period <= 0:
            raise ValueError(f"tick_period must be positive, got {tick_period}")

        self.store = store
        self.tick_period = tick_period
        self.ttl = ttl
        self._clock = clock

        self._stop_event = threading.Event()
        self._lifecycle_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

        self.sweeps_completed = 0
        self.last_result: Optional[SweepResult] = None

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        """Start the sweep loop in a background thread."""
        with self._lifecycle_lock:
            stale = self._thread
            if stale is not None and self._stop_event.is_set():
                # A previous stop() timed out; its loop exits after the current sweep
                logger.warning("Waiting for the previous retention watcher thread to exit")
                stale.join()
                self._thread = None

            if self.running:
                logger.warning("Retention watcher already running, ignoring start()")
                return

            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run,
                name="retention-watcher",
                daemon=True,
            )
            self._thread.start()

        logger.info(
            f"Retention watcher started (tick {self.tick_period}s, ttl {self.ttl})",
            extra={
                "event": "watcher_started",
                "tick_seconds": self.tick_period,
                "ttl_seconds": int(self.ttl.total_seconds()),
            },
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the loop to exit and block until its thread has finished."""
        with self._lifecycle_lock:
            thread = self._thread
            if thread is None:
                return

            self._stop_event.set()
            thread.join(timeout)
            if thread.is_alive():
                logger.error(f"Retention watcher did not stop within {timeout}s")
                return
            self._thread = None

        logger.info("Retention watcher stopped", extra={"event": "watcher_stopped"})

    def _run(self) -> None:
        # wait() returns True once stop() sets the event
        while not self._stop_event.wait(self.tick_period):
            self.tick()

    def tick(self) -> Optional[SweepResult]:
        """
        Run one sweep. Failures are logged and swallowed so the loop retries
        on the next tick.
        """
        try:
            result = sweep_expired_entries(self.store, ttl=self.ttl, now=self._clock())
        except Exception as e:
            logger.exception(
                f"Failed to clear old client entries: {e}",
                extra={"event": "watcher_sweep_failed"},
            )
            return None

        self.sweeps_completed += 1
        self.last_result = result
        return result
