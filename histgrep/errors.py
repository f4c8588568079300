"""
Error taxonomy for histgrep.

Every fatal condition derives from `HistGrepError` so the command line can
report it with a single `except` at the boundary. Non-fatal parser anomalies
are never raised; they are logged and absorbed.
"""

from __future__ import annotations

from pathlib import Path


class HistGrepError(Exception):
    """Base class for all errors reported to the user."""


class OpenError(HistGrepError):
    """The history file could not be opened."""

    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Opening history file `{self.path}`: {reason}")


class ReadError(HistGrepError):
    """An I/O failure while reading the history stream."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Error reading line number {line_number}: {reason}")


class PatternError(HistGrepError):
    """A user-supplied pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Error parsing pattern `{pattern}`: {reason}")


class IndexOutOfRange(HistGrepError):
    """A requested entry index is past the end of the master list."""

    def __init__(self, requested: int, maximum: int):
        self.requested = requested
        self.maximum = maximum
        if maximum < 0:
            message = f"Index {requested:x} out of range: the history is empty"
        else:
            message = f"Index {requested:x} out of range: maximum valid index is {maximum:x}"
        super().__init__(message)
