"""Parsing and formatting of human-entered durations."""

from __future__ import annotations

from datetime import timedelta

from multitimer_cli.models.exceptions import InvalidFormatError

ONE_SECOND = timedelta(seconds=1)


def _parse_field(value: str, what: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise InvalidFormatError(f"Invalid {what}: {value!r}") from e
    if number < 0:
        raise InvalidFormatError(f"{what.capitalize()} cannot be negative: {value!r}")
    return number


def parse_duration(text: str) -> timedelta:
    """Parse ``MM:SS`` or a bare number of minutes.

    >>> parse_duration("1:30")
    datetime.timedelta(seconds=90)
    >>> parse_duration("5")
    datetime.timedelta(seconds=300)

    Seconds of 60 or more are accepted as-is (``"0:90"`` is 90 seconds).

    Raises:
        InvalidFormatError: on anything else, including negative fields and
            durations too large to represent.
    """
    text = text.strip()
    if ":" in text:
        parts = text.split(":")
        if len(parts) != 2:
            raise InvalidFormatError("Invalid format, use MM:SS")
        minutes = _parse_field(parts[0], "minutes")
        seconds = _parse_field(parts[1], "seconds")
    else:
        minutes = _parse_field(text, "minutes")
        seconds = 0
    try:
        return timedelta(minutes=minutes, seconds=seconds)
    except OverflowError as e:
        raise InvalidFormatError("Duration too large") from e


def format_clock(duration: timedelta) -> str:
    """Render a duration as ``MM:SS``; minutes keep counting past 59."""
    total = max(0, int(duration.total_seconds()))
    minutes, seconds = divmod(total, 60)
    return f"{minutes:02d}:{seconds:02d}"
