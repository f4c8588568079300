"""histgrep - search bash history from the command line or interactively."""

from histgrep.errors import HistGrepError, IndexOutOfRange, OpenError, PatternError, ReadError
from histgrep.histfile import (
    DEFAULT_TIMESTAMP,
    MIN_REASONABLE_UNIXTIME,
    HistoryEntry,
    dedup_entries,
    parse_history,
    read_history_file,
)
from histgrep.patterns import CaseMode, compile_pattern, compile_patterns, matches

__version__ = "0.3.0"

__all__ = [
    "DEFAULT_TIMESTAMP",
    "MIN_REASONABLE_UNIXTIME",
    "CaseMode",
    "HistGrepError",
    "HistoryEntry",
    "IndexOutOfRange",
    "OpenError",
    "PatternError",
    "ReadError",
    "compile_pattern",
    "compile_patterns",
    "dedup_entries",
    "matches",
    "parse_history",
    "read_history_file",
]
