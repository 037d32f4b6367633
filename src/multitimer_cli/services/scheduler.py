"""The one-second clock that drives every timer."""

from __future__ import annotations

import threading

from multitimer_cli.services.manager import TimerManager
from multitimer_cli.utils.logger import get_logger


class Ticker:
    """Call ``manager.tick()`` every *interval* seconds on a daemon thread.

    The interval is measured from the end of one tick to the start of the
    next, so the clock drifts slightly over long runs.
    """

    def __init__(self, manager: TimerManager, interval: float = 1.0):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._manager = manager
        self.interval = interval
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="ticker", daemon=True)
        self._thread.start()
        get_logger().debug("Ticker started (interval=%.2fs)", self.interval)

    def stop(self, timeout: float = 2.0) -> None:
        if self._thread is None:
            return
        self._stopped.set()
        self._thread.join(timeout)
        self._thread = None
        get_logger().debug("Ticker stopped")

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            try:
                self._manager.tick()
            except Exception:
                # a dead ticker would silently freeze every timer
                get_logger().exception("Timer tick failed")
