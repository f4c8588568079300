"""
patterns.py - Magic patterns and entry matching

A magic pattern is either a literal string or, when wrapped in slashes, a
regular expression:

    asd[12]       matches the literal text "asd[12]"
    /asd[12]/     matches "asd1" and "asd2"
    /abc/f[o]+/   only the outer slashes delimit; the inner one is part of the regex

An entry matches when every include pattern is found somewhere in its full
(possibly multi-line) text and no exclude pattern is.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Iterable, Sequence

from histgrep.errors import PatternError
from histgrep.histfile import HistoryEntry

logger = logging.getLogger(__name__)

REGEX_DELIMITER = "/"


class CaseMode(enum.Enum):
    SENSITIVE = "sensitive"
    INSENSITIVE = "insensitive"

    @classmethod
    def from_sensitive(cls, is_sensitive: bool) -> CaseMode:
        return cls.SENSITIVE if is_sensitive else cls.INSENSITIVE

    @property
    def flags(self) -> int:
        return re.IGNORECASE if self is CaseMode.INSENSITIVE else 0


CompiledPattern = re.Pattern[str]


def is_regex_pattern(raw: str) -> bool:
    return (
        len(raw) >= 2 and raw.startswith(REGEX_DELIMITER) and raw.endswith(REGEX_DELIMITER)
    )


def compile_pattern(raw: str, case_mode: CaseMode) -> CompiledPattern:
    """→ Compiles one magic pattern, raising PatternError on bad regex syntax"""
    if is_regex_pattern(raw):
        logger.debug("Pattern `%s` is a regex pattern", raw)
        expression = raw[1:-1]
    else:
        logger.debug("Pattern `%s` is fixed", raw)
        expression = re.escape(raw)
    try:
        return re.compile(expression, case_mode.flags)
    except (re.error, ValueError) as e:
        raise PatternError(raw, str(e)) from e


def compile_patterns(raws: Iterable[str], case_mode: CaseMode) -> list[CompiledPattern]:
    """→ Compiles a batch of magic patterns, stopping at the first bad one"""
    compiled = []
    for raw in raws:
        logger.debug("Compiling pattern `%s` as %s", raw, case_mode.name)
        compiled.append(compile_pattern(raw, case_mode))
    return compiled


def compile_search_words(search_text: str, case_mode: CaseMode) -> list[CompiledPattern]:
    """
    Turns interactive search text into include patterns.

    Each whitespace-separated word is matched literally, even when it looks
    like `/regex/`. Literal compilation cannot fail.
    """
    return [re.compile(re.escape(word), case_mode.flags) for word in search_text.split()]


def matches(
    entry: HistoryEntry,
    includes: Sequence[CompiledPattern],
    excludes: Sequence[CompiledPattern],
) -> bool:
    """True iff all includes are found in the entry's text and no exclude is"""
    text = entry.text
    return all(p.search(text) for p in includes) and not any(p.search(text) for p in excludes)


def filter_entries(
    entries: Iterable[HistoryEntry],
    includes: Sequence[CompiledPattern],
    excludes: Sequence[CompiledPattern],
) -> list[HistoryEntry]:
    return [entry for entry in entries if matches(entry, includes, excludes)]
