"""Work/break cycle timers.

A timer runs a *program*: an ordered sequence of phases, each a pair of work
and break durations. Within a phase the timer alternates Working and OnBreak
until ``max_cycles`` work/break cycles are done, then moves to the next
phase. Unlimited timers (``max_cycles is None``) repeat their first phase
forever. A bounded timer that runs out of phases reports completion from
``update()`` and is expected to be dropped by its owner.

``update()`` is driven once per second by the manager's ticker; the timer
itself knows nothing about clocks or threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

from multitimer_cli.utils.duration import ONE_SECOND, format_clock

_NS_PER_US = 1000
_MICROSECOND = timedelta(microseconds=1)


class NotificationSink(Protocol):
    def notify(self, title: str, body: str) -> None: ...


# ---------------------------------------------------------------------------
# Persisted program
# ---------------------------------------------------------------------------


class Phase(BaseModel):
    """One work/break pair. Stored on disk as integer nanoseconds."""

    model_config = ConfigDict(frozen=True)

    work_duration: timedelta = Field(
        ...,
        validation_alias=AliasChoices("work_ns", "work_duration"),
        serialization_alias="work_ns",
    )
    break_duration: timedelta = Field(
        ...,
        validation_alias=AliasChoices("break_ns", "break_duration"),
        serialization_alias="break_ns",
    )

    @field_validator("work_duration", "break_duration", mode="before")
    @classmethod
    def _from_nanoseconds(cls, v):
        if isinstance(v, timedelta):
            return v
        # bool is an int subclass; refuse it rather than read True as 1ns
        if not isinstance(v, int) or isinstance(v, bool):
            raise ValueError("duration must be an integer nanosecond count")
        if v % _NS_PER_US:
            raise ValueError("duration must be a whole number of microseconds")
        try:
            return timedelta(microseconds=v // _NS_PER_US)
        except OverflowError as e:
            raise ValueError("duration too large") from e

    @field_validator("work_duration", "break_duration")
    @classmethod
    def _non_negative(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            raise ValueError("durations cannot be negative")
        return v

    @field_serializer("work_duration", "break_duration")
    def _to_nanoseconds(self, v: timedelta) -> int:
        return (v // _MICROSECOND) * _NS_PER_US


class TimerConfig(BaseModel):
    """Durable description of a timer program (no runtime state)."""

    model_config = ConfigDict(frozen=True)

    name: str
    notification_text: str = ""
    phases: tuple[Phase, ...] = Field(..., min_length=1)
    max_cycles: int | None = Field(
        default=None, ge=1, description="None means cycle forever"
    )


# ---------------------------------------------------------------------------
# Runtime state
# ---------------------------------------------------------------------------


@dataclass
class TimerState:
    """Mutable countdown state, owned by exactly one Timer."""

    name: str
    notification_text: str
    remaining: timedelta
    is_work: bool = True
    cycle_count: int = 1
    phase_index: int = 0


@dataclass(frozen=True)
class TimerView:
    """Immutable copy of what the display needs from one timer."""

    name: str
    is_work: bool
    remaining: timedelta
    cycle_count: int
    max_cycles: int | None
    phase_index: int
    phase_total: int
    paused: bool

    def status_line(self) -> str:
        label = "Work" if self.is_work else "Break"
        if self.max_cycles is None:
            cycles = f"{self.cycle_count} (∞)"
        else:
            cycles = f"{self.cycle_count}/{self.max_cycles}"
        line = (
            f"{self.name} - {label}: {format_clock(self.remaining)} "
            f"(Cycle {cycles}) Phase {self.phase_index + 1}/{self.phase_total}"
        )
        if self.paused:
            line += " (PAUSED)"
        return line


class Timer:
    """A single work/break state machine."""

    def __init__(
        self,
        name: str,
        notification_text: str,
        phases: tuple[Phase, ...] | list[Phase],
        max_cycles: int | None = None,
        notifier: NotificationSink | None = None,
    ):
        if not phases:
            raise ValueError("A timer needs at least one phase")
        if max_cycles is not None and max_cycles < 1:
            raise ValueError("max_cycles must be positive or None")

        self.phases: tuple[Phase, ...] = tuple(phases)
        self.max_cycles = max_cycles
        self.paused = False
        self.state = TimerState(
            name=name,
            notification_text=notification_text,
            remaining=self.phases[0].work_duration,
        )
        self._notifier = notifier

    @classmethod
    def from_config(
        cls, config: TimerConfig, notifier: NotificationSink | None = None
    ) -> Timer:
        """Build a fresh timer (phase 1, cycle 1, working) from a config."""
        return cls(
            name=config.name,
            notification_text=config.notification_text,
            phases=config.phases,
            max_cycles=config.max_cycles,
            notifier=notifier,
        )

    @property
    def name(self) -> str:
        return self.state.name

    @property
    def current_phase(self) -> Phase:
        return self.phases[self.state.phase_index]

    # -- controls -----------------------------------------------------------

    def toggle_pause(self) -> bool:
        """Flip the paused flag and return the new value."""
        self.paused = not self.paused
        return self.paused

    def reset(self) -> None:
        """Restart the countdown from the first phase's work duration.

        Only ``remaining`` is restored; the sub-phase, cycle count and phase
        index are left where they are.
        """
        self.state.remaining = self.phases[0].work_duration

    # -- ticking ------------------------------------------------------------

    def update(self) -> bool:
        """Advance the timer by one second.

        Returns True when the last phase of a bounded timer has finished.
        """
        if self.paused:
            return False

        state = self.state
        if state.remaining > ONE_SECOND:
            state.remaining -= ONE_SECOND
            return False

        if state.is_work:
            self._notify(f"Break: {state.notification_text}")
            state.is_work = False
            state.remaining = self.current_phase.break_duration
            return False

        state.cycle_count += 1
        if self.max_cycles is not None and state.cycle_count > self.max_cycles:
            next_index = state.phase_index + 1
            if next_index >= len(self.phases):
                self._notify(f"All phases completed: {state.notification_text}")
                return True
            state.phase_index = next_index
            state.cycle_count = 1

        self._notify(state.notification_text)
        state.is_work = True
        state.remaining = self.current_phase.work_duration
        return False

    def _notify(self, body: str) -> None:
        if self._notifier is not None:
            self._notifier.notify(self.state.name, body)

    # -- display ------------------------------------------------------------

    def snapshot(self) -> TimerView:
        state = self.state
        return TimerView(
            name=state.name,
            is_work=state.is_work,
            remaining=state.remaining,
            cycle_count=state.cycle_count,
            max_cycles=self.max_cycles,
            phase_index=state.phase_index,
            phase_total=len(self.phases),
            paused=self.paused,
        )

    def status_line(self) -> str:
        return self.snapshot().status_line()

    def __repr__(self) -> str:
        return f"Timer({self.status_line()!r})"
