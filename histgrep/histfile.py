"""
histfile.py - Bash history file parsing

A bash history file written with `HISTTIMEFORMAT` set looks like this:

    #1262305001
    this is a command
    #1262305003
    multi line
    command

Each entry is a timestamp marker line (`#` followed only by digits) and then
one or more command lines. Files written without timestamps are simply one
command per line, and a file may start without timestamps and switch to them
later on. The parser is a small state machine:

* Until the first timestamp marker, every line is a standalone command.
* After that, command lines accumulate into the pending entry until the next
  timestamp marker closes it. This is what makes multi-line commands work.
* Two markers in a row: the second one is ignored. The most likely
  explanation is a command that looks like `#1262305003`.

Blank and whitespace-only lines are dropped before they reach the state
machine, so they never end up inside a reconstructed command.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, AnyStr, Iterable, Iterator, Union

from histgrep.errors import OpenError, ReadError

logger = logging.getLogger(__name__)

# Any "timestamp" before this is assumed not to be one.
# 2010-01-01 00:00:00 UTC
MIN_REASONABLE_UNIXTIME = 1262304000
DEFAULT_TIMESTAMP = datetime.fromtimestamp(MIN_REASONABLE_UNIXTIME, tz=timezone.utc)

TIMESTAMP_LINE_RE = re.compile(r"#([0-9]+)")


# ============================================================================
# DATA STRUCTURES
# ============================================================================


@dataclass(frozen=True)
class HistoryEntry:
    """One reconstructed command together with the time it was run."""

    timestamp: datetime
    lines: tuple[str, ...]

    def __post_init__(self):
        if isinstance(self.lines, str):
            raise TypeError("HistoryEntry.lines must be a sequence of lines, not a string")
        lines = tuple(self.lines)
        if not lines:
            raise ValueError("HistoryEntry needs at least one command line")
        object.__setattr__(self, "lines", lines)

    @property
    def text(self) -> str:
        """→ The full command, lines joined with newlines"""
        return "\n".join(self.lines)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Timestamp:
    value: datetime


@dataclass(frozen=True)
class Command:
    text: str


@dataclass(frozen=True)
class Empty:
    pass


ParsedLine = Union[Timestamp, Command, Empty]


class ParserState(enum.Enum):
    # No timestamp seen yet; every line is a command on its own.
    NO_TIMESTAMPS = "no-timestamps"
    LAST_WAS_TIMESTAMP = "last-was-timestamp"
    LAST_WAS_COMMAND = "last-was-command"


# ============================================================================
# PARSING
# ============================================================================


def parse_line(line: str) -> ParsedLine:
    """→ Classifies a single physical line (without its line terminator)"""
    if not line.strip():
        return Empty()
    if match := TIMESTAMP_LINE_RE.fullmatch(line):
        try:
            # int() refuses digit runs past sys.get_int_max_str_digits()
            unixtime = int(match.group(1))
            if unixtime >= MIN_REASONABLE_UNIXTIME:
                return Timestamp(datetime.fromtimestamp(unixtime, tz=timezone.utc))
        except (OverflowError, OSError, ValueError):
            # Too far in the future to be a time; it is a command then
            pass
    return Command(line)


def _iter_decoded_lines(stream: Iterable[AnyStr]) -> Iterator[tuple[int, str]]:
    """→ Yields (1-based line number, decoded line without terminator)"""
    lines = iter(stream)
    line_number = 0
    while True:
        line_number += 1
        try:
            raw = next(lines)
        except StopIteration:
            return
        except OSError as e:
            raise ReadError(line_number, str(e)) from e
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        line = raw[:-1] if raw.endswith("\n") else raw
        # Only the CR of a CRLF terminator; any other CR is part of the command
        if raw.endswith("\r\n"):
            line = line[:-1]
        yield line_number, line


def parse_history(stream: Iterable[AnyStr]) -> list[HistoryEntry]:
    """
    Parses a history stream into entries, in file order.

    `stream` is anything that yields lines: a binary file, a text file or a
    list of strings. Bytes are decoded as UTF-8 with replacement characters.
    """
    entries: list[HistoryEntry] = []
    state = ParserState.NO_TIMESTAMPS
    current_ts = DEFAULT_TIMESTAMP
    current_lines: list[str] = []

    for line_number, line in _iter_decoded_lines(stream):
        parsed = parse_line(line)
        logger.debug("Line %d in state %s parsed as %r", line_number, state.name, parsed)

        if isinstance(parsed, Empty):
            logger.info("Read an empty line. Should not happen. At line %d", line_number)
        elif state is ParserState.NO_TIMESTAMPS:
            if isinstance(parsed, Command):
                entries.append(HistoryEntry(DEFAULT_TIMESTAMP, (parsed.text,)))
            else:
                current_ts = parsed.value
                state = ParserState.LAST_WAS_TIMESTAMP
        elif isinstance(parsed, Command):
            current_lines.append(parsed.text)
            state = ParserState.LAST_WAS_COMMAND
        elif state is ParserState.LAST_WAS_TIMESTAMP:
            logger.info(
                "Read two consecutive lines with timestamps. At line %d: `%s`", line_number, line
            )
        else:
            entries.append(HistoryEntry(current_ts, tuple(current_lines)))
            current_ts = parsed.value
            current_lines = []
            state = ParserState.LAST_WAS_TIMESTAMP

    if state is ParserState.LAST_WAS_COMMAND:
        entries.append(HistoryEntry(current_ts, tuple(current_lines)))
    elif state is ParserState.LAST_WAS_TIMESTAMP:
        logger.info("History ends with a timestamp and no command; dropping it")

    return entries


def read_history_file(path: str | Path) -> list[HistoryEntry]:
    """→ File I/O: Opens and parses a history file"""
    path = Path(path)
    logger.debug("Reading and parsing history file: %s", path)
    try:
        f: IO[bytes] = path.open("rb")
    except OSError as e:
        raise OpenError(path, e.strerror or str(e)) from e
    with f:
        entries = parse_history(f)
    logger.debug("Parsed %d entries from %s", len(entries), path)
    return entries


# ============================================================================
# DEDUPLICATION
# ============================================================================


def dedup_entries(entries: Iterable[HistoryEntry]) -> list[HistoryEntry]:
    """
    Collapses runs of consecutive entries with the same command.

    The first entry of each run is kept. The same command appearing again
    after a different one is kept as well.
    """
    result: list[HistoryEntry] = []
    for entry in entries:
        if result and result[-1].text == entry.text:
            continue
        result.append(entry)
    return result
