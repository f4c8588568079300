"""
render.py - How history entries look on screen and in batch output

Every entry is shown as its local timestamp, a space, then the command.
Continuation lines of a multi-line command are indented so they line up
under the first line's command:

    2010-01-01 00:25:03 multi line
                        command
"""

from __future__ import annotations

from pygments.lexers import BashLexer
from rich.syntax import Syntax
from rich.text import Text

from histgrep.histfile import HistoryEntry
from histgrep.theme import (
    INDEX_STYLE,
    MARKER_STYLE,
    SELECTED_STYLE,
    SYNTAX_THEME,
    TIMESTAMP_STYLE,
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
SELECTED_MARKER = "➤ "
UNSELECTED_MARKER = " " * len(SELECTED_MARKER)

_BASH_LEXER = BashLexer(stripnl=False, ensurenl=False)


def format_timestamp(entry: HistoryEntry) -> str:
    """→ The entry's timestamp in local time"""
    return entry.timestamp.astimezone().strftime(TIMESTAMP_FORMAT)


def continuation_indent(ts: str) -> str:
    """→ Blank prefix that puts a continuation line under the first line's command"""
    return " " * (len(ts) + 1)


def format_batch_line(index: int, entry: HistoryEntry) -> str:
    """→ `<hex index> <timestamp> <command>`, the command joined verbatim"""
    return f"{index:x} {format_timestamp(entry)} {entry.text}"


def highlight_command(command: str) -> Text:
    syntax = Syntax(command, _BASH_LEXER, theme=SYNTAX_THEME, background_color="default")
    highlighted = syntax.highlight(command)
    # Pygments may still terminate the last line
    if highlighted.plain.endswith("\n") and not command.endswith("\n"):
        highlighted.right_crop(1)
    return highlighted


def render_batch_line(index: int, entry: HistoryEntry) -> Text:
    """Styled version of `format_batch_line`; same characters, with colors."""
    return Text.assemble(
        (f"{index:x}", INDEX_STYLE),
        " ",
        (format_timestamp(entry), TIMESTAMP_STYLE),
        " ",
        highlight_command(entry.text),
    )


def render_entry(entry: HistoryEntry, selected: bool = False) -> Text:
    """
    Renders one entry for the interactive list.

    Every row starts with a marker gutter so the selected entry can carry an
    arrow without shifting the text. The selected entry is reversed as a whole.
    """
    ts = format_timestamp(entry)
    indent = continuation_indent(ts)
    command_lines = highlight_command(entry.text).split("\n", allow_blank=True)

    rendered = Text(no_wrap=True, overflow="ellipsis")
    for i, line in enumerate(command_lines):
        if i == 0:
            rendered.append(SELECTED_MARKER if selected else UNSELECTED_MARKER, MARKER_STYLE)
            rendered.append(ts, TIMESTAMP_STYLE)
            rendered.append(" ")
        else:
            rendered.append("\n")
            rendered.append(UNSELECTED_MARKER)
            rendered.append(indent)
        rendered.append_text(line)
    if selected:
        rendered.stylize(SELECTED_STYLE)
    return rendered


def entry_height(entry: HistoryEntry) -> int:
    """→ Number of screen rows an entry occupies in the list"""
    return len(entry.lines)
