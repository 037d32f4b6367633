"""Custom exceptions for Multitimer CLI."""


class MultitimerError(Exception):
    """Base exception for all Multitimer errors."""


class InvalidFormatError(MultitimerError, ValueError):
    """Raised when a duration string is not ``MM:SS`` or whole minutes."""


class PersistenceError(MultitimerError):
    """Raised when timer configurations cannot be loaded or saved."""
