"""Error types raised by browser log queries."""

from __future__ import annotations


class BrowserLogsError(Exception):
    """Base class for browser log query errors."""


class InvalidFilterPattern(BrowserLogsError, ValueError):
    """A filter clause carried a regular expression that does not compile."""

    def __init__(self, pattern: str, reason: str = ""):
        self.pattern = pattern
        self.reason = reason
        message = f"Invalid filter pattern: {pattern!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
