"""Wiring of one interactive multitimer session."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from rich.console import Console

from multitimer_cli.commands.loop import CommandLoop
from multitimer_cli.config import Settings
from multitimer_cli.models.exceptions import PersistenceError
from multitimer_cli.services.manager import TimerManager
from multitimer_cli.services.notifier import DesktopNotifier, NullNotifier
from multitimer_cli.services.scheduler import Ticker
from multitimer_cli.services.storage import TimerStore
from multitimer_cli.ui.display import DisplayRenderer
from multitimer_cli.ui.reader import LineReader
from multitimer_cli.utils.logger import get_logger, set_log_level


def run_session(
    settings: Settings,
    console: Console,
    store_path: Path | str | None = None,
    notifications: bool | None = None,
    bell: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Load saved timers, start the clock and display, and read commands.

    Returns when the user quits or input ends. Arguments left as None fall
    back to *settings*.
    """
    logger = get_logger()
    set_log_level(settings.log_level)

    store = TimerStore(store_path or settings.timers_file)
    if notifications is None:
        notifications = settings.notifications
    if bell is None:
        bell = settings.bell
    notifier = DesktopNotifier(console, bell=bell) if notifications else NullNotifier()

    manager = TimerManager(store, notifier)
    notice = None
    try:
        manager.load()
    except PersistenceError as e:
        logger.error("Error loading timer configurations: %s", e)
        notice = f"Error loading timer configurations: {e}"

    ticker = Ticker(manager, interval=settings.tick_interval)
    renderer = DisplayRenderer(manager, console)
    loop = CommandLoop(manager, renderer, LineReader(stream), console)

    logger.info("Session started with %d timer(s) from %s", manager.count, store.path)
    notifier.start()
    ticker.start()
    renderer.start()
    try:
        loop.run(notice=notice)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        ticker.stop()
        renderer.stop()
        notifier.stop()
        logger.info("Session ended")
