"""Multitimer CLI - concurrent Pomodoro-style interval timers in the terminal."""

__version__ = "0.1.0"
