"""Interactive creation of a new timer program."""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Confirm, InvalidResponse, Prompt, PromptBase

from multitimer_cli.models.exceptions import InvalidFormatError
from multitimer_cli.models.timer import Phase, TimerConfig
from multitimer_cli.ui.reader import LineReader
from multitimer_cli.utils.duration import parse_duration

WORK_PROMPT = "Enter work time (MM:SS or just minutes)"
BREAK_PROMPT = "Enter break time (MM:SS or just minutes)"
CYCLE_PROMPT = "Enter cycle type (u for unlimited, number for fixed cycles)"


class CyclePrompt(PromptBase[int | None]):
    """Ask for ``u`` (unlimited, returns None) or a positive cycle count."""

    validate_error_message = (
        "[prompt.invalid]Enter 'u' or a positive number of cycles."
    )

    def process_response(self, value: str) -> int | None:
        value = value.strip().lower()
        if value == "u":
            return None
        try:
            cycles = int(value)
        except ValueError:
            raise InvalidResponse(self.validate_error_message) from None
        if cycles < 1:
            raise InvalidResponse(self.validate_error_message)
        return cycles


class TimerWizard:
    """Ask for name, notification text, phases and cycle policy.

    Bad durations restart the current phase; a bad cycle policy is asked
    again. ``EOFError`` from the reader is left to the caller.
    """

    def __init__(self, reader: LineReader, console: Console):
        self._reader = reader
        self._console = console

    def _ask(self, prompt: str) -> str:
        return Prompt.ask(prompt, console=self._console, stream=self._reader)

    def build(self) -> TimerConfig:
        name = self._ask("Enter timer name")
        notification_text = self._ask("Enter notification text")
        phases = self._ask_phases()
        max_cycles = CyclePrompt.ask(
            CYCLE_PROMPT, console=self._console, stream=self._reader
        )
        return TimerConfig(
            name=name,
            notification_text=notification_text,
            phases=tuple(phases),
            max_cycles=max_cycles,
        )

    def _ask_phases(self) -> list[Phase]:
        phases: list[Phase] = []
        while True:
            self._console.print(f"\n[bold]Phase {len(phases) + 1}[/bold]")
            try:
                work = parse_duration(self._ask(WORK_PROMPT))
                rest = parse_duration(self._ask(BREAK_PROMPT))
            except InvalidFormatError:
                self._console.print("[red]Invalid duration format. Try again.[/red]")
                continue
            phases.append(Phase(work_duration=work, break_duration=rest))

            if not Confirm.ask(
                "Add another phase?",
                default=False,
                console=self._console,
                stream=self._reader,
            ):
                return phases
