"""Unit tests for the timer state machine and its persisted program.

Coverage strategy
-----------------
* ``Timer.update`` is driven tick by tick with whole-second phases so every
  transition (work → break, break → work, phase advance, completion) can be
  asserted exactly.
* Notifications are captured with a MagicMock sink.
* ``Phase``/``TimerConfig`` validation and the nanosecond wire format are
  checked directly on the pydantic models.
"""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock, call

import pytest
from pydantic import ValidationError

from multitimer_cli.models.timer import Phase, Timer, TimerConfig


def _secs(n: int) -> timedelta:
    return timedelta(seconds=n)


def _state_tuple(timer: Timer) -> tuple:
    s = timer.state
    return (s.remaining, s.is_work, s.cycle_count, s.phase_index)


def _tick(timer: Timer, n: int) -> list[bool]:
    return [timer.update() for _ in range(n)]


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestTimerInit:
    def test_from_config_starts_working_on_first_phase(self, make_config):
        timer = Timer.from_config(make_config(phases=[(2, 1), (5, 3)]))
        assert timer.state.is_work is True
        assert timer.state.remaining == _secs(2)
        assert timer.state.cycle_count == 1
        assert timer.state.phase_index == 0
        assert timer.paused is False
        assert timer.name == "Focus"

    def test_requires_a_phase(self):
        with pytest.raises(ValueError):
            Timer("x", "y", phases=[])

    def test_rejects_non_positive_max_cycles(self, make_config):
        phases = make_config().phases
        with pytest.raises(ValueError):
            Timer("x", "y", phases=phases, max_cycles=0)


# ---------------------------------------------------------------------------
# Ticking
# ---------------------------------------------------------------------------


class TestTimerUpdate:
    def test_tick_decrements_by_one_second(self, make_config):
        timer = Timer.from_config(make_config(phases=[(5, 1)]))
        assert timer.update() is False
        assert timer.state.remaining == _secs(4)
        assert timer.state.is_work is True

    def test_work_to_break_to_work_cycle(self, make_config):
        notifier = MagicMock()
        timer = Timer.from_config(make_config(phases=[(2, 1)]), notifier)

        assert _tick(timer, 2) == [False, False]
        assert timer.state.is_work is False
        assert timer.state.remaining == _secs(1)
        assert timer.state.cycle_count == 1

        assert timer.update() is False
        assert timer.state.is_work is True
        assert timer.state.remaining == _secs(2)
        assert timer.state.cycle_count == 2

        assert notifier.notify.call_args_list == [
            call("Focus", "Break: Stretch"),
            call("Focus", "Stretch"),
        ]

    def test_unlimited_timer_never_completes(self, make_config):
        timer = Timer.from_config(make_config(phases=[(1, 1), (9, 9)]))
        assert not any(_tick(timer, 200))
        assert timer.state.phase_index == 0
        assert timer.state.cycle_count > 50

    def test_bounded_single_phase_completes(self, make_config):
        notifier = MagicMock()
        timer = Timer.from_config(
            make_config(phases=[(2, 1)], max_cycles=1), notifier
        )

        assert _tick(timer, 2) == [False, False]  # now on break
        assert timer.update() is True

        assert timer.state.cycle_count == 2
        # the completing tick leaves the phase index in range
        assert timer.state.phase_index == 0
        assert notifier.notify.call_args_list[-1] == call(
            "Focus", "All phases completed: Stretch"
        )

    def test_bounded_cycles_repeat_within_phase(self, make_config):
        timer = Timer.from_config(make_config(phases=[(1, 1)], max_cycles=2))
        timer.update()  # work -> break
        timer.update()  # break -> work, cycle 2
        assert timer.state.cycle_count == 2
        assert timer.state.is_work is True
        timer.update()  # work -> break
        assert timer.update() is True  # cycle 3 > 2, only one phase

    def test_advances_to_next_phase(self, make_config):
        notifier = MagicMock()
        timer = Timer.from_config(
            make_config(phases=[(1, 1), (3, 2)], max_cycles=1), notifier
        )
        timer.update()  # work -> break
        assert timer.update() is False  # break -> phase 2

        assert timer.state.phase_index == 1
        assert timer.state.cycle_count == 1
        assert timer.state.is_work is True
        assert timer.state.remaining == _secs(3)
        assert notifier.notify.call_args_list[-1] == call("Focus", "Stretch")

        _tick(timer, 3)  # 3 -> 2 -> 1 -> break
        assert timer.state.is_work is False
        assert timer.state.remaining == _secs(2)

    def test_last_phase_completion_after_advance(self, make_config):
        timer = Timer.from_config(make_config(phases=[(1, 1), (1, 1)], max_cycles=1))
        results = _tick(timer, 4)
        assert results == [False, False, False, True]
        assert timer.state.phase_index == 1

    def test_zero_durations_transition_every_tick(self, make_config):
        timer = Timer.from_config(make_config(phases=[(0, 0)]))
        timer.update()
        assert timer.state.is_work is False
        assert timer.state.remaining == timedelta(0)
        timer.update()
        assert timer.state.is_work is True
        assert timer.state.cycle_count == 2

    def test_remaining_never_negative(self, make_config):
        timer = Timer.from_config(make_config(phases=[(3, 2), (1, 4)], max_cycles=2))
        for _ in range(30):
            if timer.update():
                break
            assert timer.state.remaining >= timedelta(0)
            assert 0 <= timer.state.phase_index < len(timer.phases)

    def test_without_notifier(self, make_config):
        timer = Timer.from_config(make_config(phases=[(1, 1)]))
        timer.update()
        assert timer.state.is_work is False


class TestTimerPause:
    def test_toggle_pause_returns_new_value(self, make_config):
        timer = Timer.from_config(make_config())
        assert timer.toggle_pause() is True
        assert timer.paused is True
        assert timer.toggle_pause() is False

    def test_paused_ticks_change_nothing(self, make_config):
        notifier = MagicMock()
        timer = Timer.from_config(make_config(phases=[(1, 1)]), notifier)
        timer.update()  # on break now
        before = _state_tuple(timer)
        notifier.reset_mock()

        timer.toggle_pause()
        assert not any(_tick(timer, 10))

        assert _state_tuple(timer) == before
        notifier.notify.assert_not_called()

    def test_paused_timer_does_not_complete(self, make_config):
        timer = Timer.from_config(make_config(phases=[(0, 0)], max_cycles=1))
        timer.update()
        timer.toggle_pause()
        assert timer.update() is False


class TestTimerReset:
    def test_reset_restores_first_work_duration(self, make_config):
        timer = Timer.from_config(make_config(phases=[(10, 5)]))
        _tick(timer, 4)
        timer.reset()
        assert timer.state.remaining == _secs(10)

    def test_reset_is_partial(self, make_config):
        """Reset only restores the countdown; sub-phase, cycle and phase stay."""
        timer = Timer.from_config(make_config(phases=[(1, 1), (7, 3)], max_cycles=1))
        _tick(timer, 3)  # phase 2, working, then one tick into it
        assert timer.state.phase_index == 1
        _tick(timer, 6)  # phase 2 break
        assert timer.state.is_work is False

        timer.reset()

        assert timer.state.remaining == _secs(1)  # first phase's work
        assert timer.state.is_work is False
        assert timer.state.phase_index == 1
        assert timer.state.cycle_count == 1


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestStatusLine:
    def test_unlimited_work(self, make_config):
        timer = Timer.from_config(make_config(phases=[(25 * 60, 5 * 60)]))
        assert timer.status_line() == "Focus - Work: 25:00 (Cycle 1 (∞)) Phase 1/1"

    def test_bounded_break(self, make_config):
        timer = Timer.from_config(make_config(phases=[(1, 65), (1, 1)], max_cycles=3))
        timer.update()
        assert timer.status_line() == "Focus - Break: 01:05 (Cycle 1/3) Phase 1/2"

    def test_paused_marker(self, make_config):
        timer = Timer.from_config(make_config(phases=[(90, 1)]))
        timer.toggle_pause()
        assert timer.status_line() == "Focus - Work: 01:30 (Cycle 1 (∞)) Phase 1/1 (PAUSED)"

    def test_long_durations_keep_counting_minutes(self, make_config):
        timer = Timer.from_config(make_config(phases=[(120 * 60, 1)]))
        assert "120:00" in timer.status_line()

    def test_snapshot_is_a_copy(self, make_config):
        timer = Timer.from_config(make_config(phases=[(5, 1)]))
        view = timer.snapshot()
        timer.update()
        assert view.remaining == _secs(5)
        assert timer.snapshot().remaining == _secs(4)


# ---------------------------------------------------------------------------
# Persisted models
# ---------------------------------------------------------------------------


class TestPhaseModel:
    def test_serialises_to_nanoseconds(self):
        phase = Phase(
            work_duration=timedelta(minutes=25), break_duration=timedelta(minutes=5)
        )
        assert phase.model_dump(by_alias=True) == {
            "work_ns": 1_500_000_000_000,
            "break_ns": 300_000_000_000,
        }

    def test_reads_nanoseconds(self):
        phase = Phase.model_validate({"work_ns": 90_000_000_000, "break_ns": 0})
        assert phase.work_duration == timedelta(seconds=90)
        assert phase.break_duration == timedelta(0)

    def test_rejects_negative_durations(self):
        with pytest.raises(ValidationError):
            Phase(work_duration=timedelta(seconds=-1), break_duration=timedelta(0))

    def test_rejects_booleans(self):
        with pytest.raises(ValidationError):
            Phase.model_validate({"work_ns": True, "break_ns": 0})

    @pytest.mark.parametrize(
        "value", [1.5e9, 1_500_000_000.0, "1500000000", None, 1_500_000_001, 10**30]
    )
    def test_rejects_non_integer_or_inexact_nanoseconds(self, value):
        with pytest.raises(ValidationError):
            Phase.model_validate({"work_ns": value, "break_ns": 0})

    def test_accepts_sub_second_microseconds(self):
        phase = Phase.model_validate({"work_ns": 1_500_000, "break_ns": 0})
        assert phase.work_duration == timedelta(microseconds=1500)

    def test_is_frozen(self):
        phase = Phase(work_duration=timedelta(1), break_duration=timedelta(0))
        with pytest.raises(ValidationError):
            phase.work_duration = timedelta(0)


class TestTimerConfigModel:
    def test_requires_at_least_one_phase(self):
        with pytest.raises(ValidationError):
            TimerConfig(name="x", phases=())

    def test_rejects_zero_max_cycles(self, make_config):
        with pytest.raises(ValidationError):
            TimerConfig(name="x", phases=make_config().phases, max_cycles=0)

    def test_equality_by_value(self, make_config):
        assert make_config(phases=[(1, 2)]) == make_config(phases=[(1, 2)])
        assert make_config(phases=[(1, 2)]) != make_config(phases=[(1, 3)])
