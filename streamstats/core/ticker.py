"""
Cancellable periodic background task.

Drives EWMA decay for meters. The loop runs on a daemon thread and sleeps on
an Event, so stop() returns without waiting out a full interval.
"""

import logging
import threading
from typing import Callable, Optional

from streamstats.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class PeriodicTicker:
    """
    Calls ``callback`` every ``interval`` milliseconds until stopped.

    Architecture:
    - Separate daemon thread per ticker
    - Shutdown event doubles as the interval timer
    - Callback errors are logged and the loop keeps going

    Usage:
        ticker = PeriodicTicker(ewma.tick, interval=5000, name="meter-tick")
        ticker.start()
        ...
        ticker.stop()
    """

    def __init__(self, callback: Callable[[], None], interval: float, name: str = "stats-ticker"):
        """
        Args:
            callback: Zero-argument callable invoked on every tick
            interval: Milliseconds between ticks
            name: Thread name (shows up in logs and debuggers)
        """
        if interval <= 0:
            raise ConfigurationError(f"Ticker interval must be positive, got {interval}")

        self._callback = callback
        self._interval_seconds = interval / 1000.0
        self._name = name

        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._shutdown_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the background thread."""
        if self._running:
            logger.warning(f"Ticker {self._name} already running")
            return

        self._running = True
        # Each run owns its event; a thread outliving a timed-out stop() stays stopped
        self._shutdown_event = threading.Event()

        self._thread = threading.Thread(
            target=self._run,
            args=(self._shutdown_event,),
            daemon=True,
            name=self._name,
        )
        self._thread.start()
        logger.info(f"Ticker {self._name} started ({self._interval_seconds:.3f}s interval)")

    def stop(self, timeout: float = 2.0) -> None:
        """
        Stop the background thread.

        Args:
            timeout: Maximum time to wait for thread shutdown (seconds)
        """
        if not self._running:
            return

        self._running = False
        self._shutdown_event.set()

        if (
            self._thread
            and self._thread.is_alive()
            and self._thread is not threading.current_thread()
        ):
            self._thread.join(timeout=timeout)

        logger.info(f"Ticker {self._name} stopped")

    def _run(self, shutdown_event: threading.Event) -> None:
        """Background thread main loop."""
        logger.debug(f"Ticker thread {self._name} started")

        # wait() returns True once stop() sets the event
        while not shutdown_event.wait(self._interval_seconds):
            try:
                self._callback()
            except Exception as e:
                logger.error(f"Error in ticker {self._name}: {e}", exc_info=True)

        logger.debug(f"Ticker thread {self._name} stopped")
