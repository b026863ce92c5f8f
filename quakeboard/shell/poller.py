"""Feed Poller - Imperative Shell.

This module owns the periodic refresh schedule. The poller is an explicit,
cancellable task: whoever starts it is responsible for stopping it.
"""

import logging
import threading
from typing import Callable


logger = logging.getLogger(__name__)


# Default polling interval (seconds)
DEFAULT_INTERVAL = 120


class Poller:
    """Runs a callback now and then every `interval` seconds.

    Each tick runs the callback on its own worker thread so a slow fetch
    never delays the schedule. With `skip_overlapping` set, a tick that
    fires while the previous callback is still running is skipped.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        interval: float = DEFAULT_INTERVAL,
        skip_overlapping: bool = True,
        name: str = "feed-poller",
    ) -> None:
        """Initialize poller.

        Args:
            callback: Work to run on every tick
            interval: Seconds between ticks
            skip_overlapping: Skip ticks while a previous run is in flight
            name: Thread name prefix, for logs
        """
        self.callback = callback
        self.interval = interval
        self.skip_overlapping = skip_overlapping
        self.name = name

        self._stop_event = threading.Event()
        self._in_flight = 0
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """True between start() and stop()."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def in_flight(self) -> int:
        """Number of callbacks currently running."""
        with self._lock:
            return self._in_flight

    def start(self) -> None:
        """Run the first tick immediately and schedule the rest."""
        if self.running:
            logger.warning("%s already running", self.name)
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._schedule_loop,
            name=f"{self.name}-schedule",
            daemon=True,
        )
        self._thread.start()

        logger.info("%s started (every %ss)", self.name, self.interval)

    def stop(self, timeout: float | None = None) -> None:
        """Cancel future ticks.

        A callback already running is left to finish on its own.

        Args:
            timeout: Seconds to wait for the schedule thread to exit
        """
        self._stop_event.set()

        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

        logger.info("%s stopped", self.name)

    def trigger(self) -> threading.Thread | None:
        """Fire one tick now, outside the schedule.

        Returns:
            The worker thread, or None if the tick was skipped
        """
        with self._lock:
            if self.skip_overlapping and self._in_flight:
                logger.warning(
                    "%s: previous poll still in flight, skipping this one",
                    self.name,
                )
                return None
            self._in_flight += 1

        worker = threading.Thread(
            target=self._run_callback,
            name=f"{self.name}-worker",
            daemon=True,
        )
        worker.start()
        return worker

    def _run_callback(self) -> None:
        try:
            self.callback()
        except Exception:
            logger.exception("%s: poll failed", self.name)
        finally:
            with self._lock:
                self._in_flight -= 1

    def _schedule_loop(self) -> None:
        self.trigger()
        while not self._stop_event.wait(self.interval):
            self.trigger()
