"""Owner of the running timers.

``TimerManager`` keeps the active timers and their configurations in two
parallel lists guarded by a single lock: index *i* in one list always refers
to the same timer as index *i* in the other. All public operations take the
lock for their whole duration and only do in-memory work plus, for add and
delete, one write of the config file.

Indices accepted from the command surface are 1-based. An index outside the
current range is ignored and reported through the return value only.
"""

from __future__ import annotations

import queue
import threading

from multitimer_cli.models.exceptions import PersistenceError
from multitimer_cli.models.timer import (
    NotificationSink,
    Timer,
    TimerConfig,
    TimerView,
)
from multitimer_cli.services.storage import TimerStore
from multitimer_cli.utils.logger import get_logger


class RedrawSignal:
    """Single-slot mailbox asking the display to redraw.

    Requests never block; a request made while one is already pending is
    dropped, so a burst of ticks collapses into one redraw.
    """

    def __init__(self):
        self._slot: queue.Queue[bool] = queue.Queue(maxsize=1)

    def request(self) -> bool:
        """Post a redraw request. Returns False if one was already pending."""
        try:
            self._slot.put_nowait(True)
        except queue.Full:
            return False
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until a request is pending and consume it."""
        try:
            self._slot.get(timeout=timeout)
        except queue.Empty:
            return False
        return True

    @property
    def pending(self) -> bool:
        return not self._slot.empty()


class TimerManager:
    """Thread-safe collection of active timers and their saved programs."""

    def __init__(self, store: TimerStore, notifier: NotificationSink | None = None):
        self._store = store
        self._notifier = notifier
        self._lock = threading.Lock()
        self._timers: list[Timer] = []
        self._configs: list[TimerConfig] = []
        self.redraw = RedrawSignal()

    # -- startup ------------------------------------------------------------

    def load(self) -> int:
        """Start one timer per saved configuration.

        Returns the number of timers loaded.

        Raises:
            PersistenceError: if the store exists but cannot be read; the
                manager is left untouched.
        """
        configs = self._store.load()
        with self._lock:
            for config in configs:
                self._timers.append(Timer.from_config(config, self._notifier))
                self._configs.append(config)
        get_logger().info("Loaded %d saved timer(s)", len(configs))
        return len(configs)

    # -- mutations ----------------------------------------------------------

    def add_config(self, config: TimerConfig) -> Timer:
        """Create a timer for *config* and add it (see ``add_timer``)."""
        timer = Timer.from_config(config, self._notifier)
        self.add_timer(timer, config)
        return timer

    def add_timer(self, timer: Timer, config: TimerConfig) -> None:
        """Append a timer and its config, then save all configs.

        Raises:
            PersistenceError: the save failed; the timer stays active.
        """
        with self._lock:
            self._timers.append(timer)
            self._configs.append(config)
            get_logger().info("Added timer %r", config.name)
            self._save()

    def toggle_pause(self, index: int) -> bool:
        with self._lock:
            timer = self._get(index)
            if timer is None:
                return False
            paused = timer.toggle_pause()
            get_logger().info(
                "%s timer %r", "Paused" if paused else "Resumed", timer.name
            )
            return True

    def reset(self, index: int) -> bool:
        """Restore the countdown of timer *index* to its first work duration."""
        with self._lock:
            timer = self._get(index)
            if timer is None:
                return False
            timer.reset()
            get_logger().info("Reset timer %r", timer.name)
            return True

    def delete(self, index: int) -> bool:
        """Remove timer *index* and its config, then save all configs.

        Raises:
            PersistenceError: the save failed; the timer is still removed.
        """
        with self._lock:
            if not self._in_range(index):
                return False
            timer = self._timers.pop(index - 1)
            self._configs.pop(index - 1)
            get_logger().info("Deleted timer %r", timer.name)
            self._save()
            return True

    # -- scheduling ---------------------------------------------------------

    def tick(self) -> list[str]:
        """Advance every timer by one second.

        Finished timers are dropped together with their configs. Returns the
        names of the timers that finished on this tick.
        """
        finished: list[str] = []
        with self._lock:
            if not self._timers:
                return finished

            kept_timers: list[Timer] = []
            kept_configs: list[TimerConfig] = []
            for timer, config in zip(self._timers, self._configs):
                if timer.update():
                    finished.append(timer.name)
                else:
                    kept_timers.append(timer)
                    kept_configs.append(config)
            self._timers = kept_timers
            self._configs = kept_configs

            if finished:
                get_logger().info("Timer(s) completed: %s", ", ".join(finished))
                try:
                    self._save()
                except PersistenceError as e:
                    # nobody to report to from the ticker thread
                    get_logger().error("Error saving timer configurations: %s", e)

        self.redraw.request()
        return finished

    # -- reads --------------------------------------------------------------

    def snapshot(self) -> list[TimerView]:
        with self._lock:
            return [timer.snapshot() for timer in self._timers]

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._timers)

    @property
    def configs(self) -> list[TimerConfig]:
        with self._lock:
            return list(self._configs)

    @property
    def timers(self) -> list[Timer]:
        with self._lock:
            return list(self._timers)

    # -- helpers (lock held) ------------------------------------------------

    def _in_range(self, index: int) -> bool:
        return 1 <= index <= len(self._timers)

    def _get(self, index: int) -> Timer | None:
        if not self._in_range(index):
            return None
        return self._timers[index - 1]

    def _save(self) -> None:
        self._store.save(list(self._configs))
