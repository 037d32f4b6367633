"""Desktop notifications for timer transitions.

``notify()`` never blocks the caller and never raises: the timer engine
calls it while holding the manager lock, so the actual delivery happens on a
worker thread and failures only reach the log.
"""

from __future__ import annotations

import queue
import threading

from plyer import notification
from rich.console import Console

from multitimer_cli.utils.logger import get_logger

_APP_NAME = "Multitimer"
_TIMEOUT_SECONDS = 10


class NullNotifier:
    """Notifier used when notifications are switched off."""

    def notify(self, title: str, body: str) -> None:
        get_logger().debug("Notification suppressed: %s: %s", title, body)

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass


class DesktopNotifier:
    """Deliver notifications through plyer on a background thread."""

    def __init__(self, console: Console | None = None, bell: bool = False):
        self._queue: queue.Queue[tuple[str, str] | None] = queue.Queue()
        self._console = console
        self._bell = bell
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name="notifier", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        if self._thread is None:
            return
        self._queue.put(None)
        self._thread.join(timeout)
        self._thread = None

    def notify(self, title: str, body: str) -> None:
        self._queue.put((title, body))

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                return
            self.deliver(*item)

    def deliver(self, title: str, body: str) -> None:
        """Show one notification right now; errors are logged, not raised."""
        get_logger().info("Notify: %s: %s", title, body)
        if self._bell and self._console is not None:
            self._console.bell()
        try:
            notification.notify(
                title=title,
                message=body,
                app_name=_APP_NAME,
                timeout=_TIMEOUT_SECONDS,
            )
        except Exception as e:
            # plyer raises NotImplementedError without a backend, and backends
            # raise whatever their platform API raises
            get_logger().warning("Error sending notification: %s", e)
