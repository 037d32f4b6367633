"""Timer domain models."""

from .exceptions import InvalidFormatError, MultitimerError, PersistenceError
from .timer import Phase, Timer, TimerConfig, TimerState, TimerView

__all__ = [
    "InvalidFormatError",
    "MultitimerError",
    "PersistenceError",
    "Phase",
    "Timer",
    "TimerConfig",
    "TimerState",
    "TimerView",
]
