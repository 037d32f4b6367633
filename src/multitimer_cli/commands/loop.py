"""The interactive command loop.

One command per line; the first letter picks the action, case-insensitive::

    a        add a timer (starts the wizard)
    p <n>    pause or resume timer n
    r <n>    reset timer n
    d <n>    delete timer n
    q        quit

Timer numbers are 1-based and checked against the timers running when the
command arrives; unknown numbers are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from rich.console import Console

from multitimer_cli.commands.wizard import TimerWizard
from multitimer_cli.models.exceptions import PersistenceError
from multitimer_cli.services.manager import TimerManager
from multitimer_cli.ui.console import format_error
from multitimer_cli.ui.display import PROMPT, DisplayRenderer
from multitimer_cli.ui.reader import LineReader
from multitimer_cli.utils.logger import get_logger


class Action(str, Enum):
    ADD = "a"
    PAUSE = "p"
    RESET = "r"
    DELETE = "d"
    QUIT = "q"


_INDEXED = (Action.PAUSE, Action.RESET, Action.DELETE)
_INDEX_RE = re.compile(r"^[A-Za-z]+\s*(\d+)$")


@dataclass(frozen=True)
class Command:
    action: Action
    index: int | None = None


def parse_command(line: str) -> Command | None:
    """Turn an input line into a Command; None for blank or unknown input.

    Indexed commands without a usable number keep ``index=None``.
    """
    line = line.strip()
    if not line:
        return None
    try:
        action = Action(line[0].lower())
    except ValueError:
        return None

    index = None
    if action in _INDEXED:
        match = _INDEX_RE.match(line)
        if match:
            index = int(match.group(1))
    return Command(action, index)


class CommandLoop:
    """Read commands until quit or end of input and apply them."""

    def __init__(
        self,
        manager: TimerManager,
        renderer: DisplayRenderer,
        reader: LineReader,
        console: Console,
        wizard: TimerWizard | None = None,
    ):
        self._manager = manager
        self._renderer = renderer
        self._reader = reader
        self._console = console
        self._wizard = wizard or TimerWizard(reader, console)

    def run(self, notice: str | None = None) -> None:
        """Run until quit or end of input; *notice* is shown once at start."""
        self._renderer.render()
        if notice:
            format_error(notice, self._console)
        self._renderer.prompt()
        while True:
            try:
                command = parse_command(self._reader.read())
                if command is None:
                    self._console.out(PROMPT, end="", highlight=False)
                    continue
                if command.action is Action.QUIT:
                    get_logger().info("Quit requested")
                    return
                error = self.dispatch(command)
            except EOFError:
                get_logger().info("Input closed, leaving command loop")
                return

            self._renderer.render()
            if error:
                format_error(error, self._console)
            self._renderer.prompt()

    def dispatch(self, command: Command) -> str | None:
        """Apply *command*; returns an error message worth showing, if any."""
        manager = self._manager
        try:
            if command.action is Action.ADD:
                manager.add_config(self._wizard.build())
            elif command.index is None:
                return None
            elif command.action is Action.PAUSE:
                manager.toggle_pause(command.index)
            elif command.action is Action.RESET:
                manager.reset(command.index)
            elif command.action is Action.DELETE:
                manager.delete(command.index)
        except PersistenceError as e:
            get_logger().error("Error saving timer configurations: %s", e)
            return f"Error saving timer configurations: {e}"
        return None
