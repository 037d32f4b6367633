"""In-place terminal display of the running timers."""

from __future__ import annotations

import threading

from rich.console import Console
from rich.text import Text

from multitimer_cli.models.timer import TimerView
from multitimer_cli.services.manager import TimerManager
from multitimer_cli.utils.logger import get_logger

CLEAR_SCREEN = "\033[2J"
MOVE_TO_TOP = "\033[H"
CLEAR_LINE = "\033[K"
SAVE_CURSOR = "\033[s"
RESTORE_CURSOR = "\033[u"
CLEAR_TO_BOTTOM = "\033[J"

HEADER = "=== Active Timers ==="
PROMPT = "Enter command: "
MENU = (
    "a - Add new timer",
    "p <number> - Pause/Resume timer",
    "r <number> - Reset timer",
    "d <number> - Delete timer",
    "q - Quit",
)


def timer_row(number: int, view: TimerView) -> Text:
    if view.paused:
        style = "yellow"
    elif view.is_work:
        style = "green"
    else:
        style = "cyan"
    return Text(f"{number}. {view.status_line()}", style=style)


def build_frame(views: list[TimerView]) -> list[Text]:
    """Lines of one full display: header, one row per timer, command menu."""
    lines = [Text(HEADER, style="bold")]
    lines.extend(timer_row(number, view) for number, view in enumerate(views, 1))
    lines.append(Text(""))
    lines.append(Text("Commands:", style="bold"))
    lines.extend(Text(entry, style="dim") for entry in MENU)
    return lines


class DisplayRenderer:
    """Redraw the timer list whenever the manager asks for it.

    Two modes:

    * a full redraw clears the screen and is used after a command, when the
      prompt is about to be printed again anyway;
    * an in-place redraw saves the cursor, repaints from the top of the
      screen and restores the cursor, so a half-typed command survives.
    """

    def __init__(self, manager: TimerManager, console: Console):
        self._manager = manager
        self._console = console
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def render(self, preserve_prompt: bool = False) -> None:
        # the snapshot takes the manager lock; everything below runs without it
        frame = build_frame(self._manager.snapshot())

        console = self._console
        with console:
            if preserve_prompt:
                console.out(SAVE_CURSOR + MOVE_TO_TOP, end="", highlight=False)
            else:
                console.out(CLEAR_SCREEN + MOVE_TO_TOP, end="", highlight=False)
            for line in frame:
                console.out(CLEAR_LINE, end="", highlight=False)
                console.print(line, soft_wrap=True)
            if preserve_prompt:
                console.out(RESTORE_CURSOR, end="", highlight=False)
            else:
                console.out(CLEAR_TO_BOTTOM, end="", highlight=False)

    def prompt(self) -> None:
        self._console.out("\n" + PROMPT, end="", highlight=False)

    # -- background redraws ---------------------------------------------------

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="display", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        if self._thread is None:
            return
        self._stopped.set()
        # wake the thread if it is waiting for a redraw
        self._manager.redraw.request()
        self._thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        while True:
            self._manager.redraw.wait()
            if self._stopped.is_set():
                return
            try:
                self.render(preserve_prompt=True)
            except OSError as e:
                get_logger().error("Display redraw failed: %s", e)
