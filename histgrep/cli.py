"""
hgr - grep your bash history, or pick an entry from it interactively

Reads a bash history file (timestamps from HISTTIMEFORMAT and multi-line
commands are understood) and filters it with magic patterns: plain text is
matched literally, `/text/` is a regular expression. All include patterns
must match; no exclude pattern may.

Modes
-----
* Batch (default when stdout is not a terminal): print every matching entry
  as `<hex index> <timestamp> <command>`.
* Interactive (default on a terminal): a full-screen list filtered as you
  type. The chosen command is printed and copied to the clipboard.
* `--index HEX`: pick the entry batch mode printed with that index.
* `--bash-readline-mode FILE`: interactive, but the choice goes to FILE for
  the bash Ctrl-R binding (see `--print-bash-integration`).

Environment
-----------
HISTFILE            default history file (falls back to ~/.bash_history)
HGR_INITIAL_SEARCH  initial interactive search text
HGR_CASE_SENSITIVE  match case-sensitively by default when truthy
HGR_LOG             log level: debug, info, warning, error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from histgrep.clipboard import copy_to_clipboard
from histgrep.config import CONFIG, Config
from histgrep.errors import HistGrepError, IndexOutOfRange
from histgrep.histfile import HistoryEntry, dedup_entries, read_history_file
from histgrep.integration import BASH_INTEGRATION
from histgrep.interactive import run_interactive
from histgrep.log import setup_logging
from histgrep.patterns import CaseMode, compile_patterns, matches
from histgrep.render import format_batch_line, render_batch_line
from histgrep.theme import console

logger = logging.getLogger(__name__)


# ============================================================================
# UTILITIES
# ============================================================================


def _console_print(string="", *args, **kwargs) -> None:
    """→ Safe stderr console printing with fallback"""
    try:
        console.print(string, *args, **kwargs)
    except Exception:
        print(string, file=sys.stderr)


def hex_index(value: str) -> int:
    """→ argparse type: a non-negative hexadecimal index"""
    try:
        index = int(value, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hexadecimal index: {value!r}") from None
    if index < 0:
        raise argparse.ArgumentTypeError(f"index must not be negative: {value!r}")
    return index


def build_parser(config: Config) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="hgr",
        description="Search bash history, in batch or interactively",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    ap.add_argument(
        "patterns",
        nargs="*",
        metavar="PATTERN",
        help="Include patterns: literal text, or /regex/. All must match.",
    )
    ap.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Exclude entries matching PATTERN (repeatable)",
    )
    ap.add_argument(
        "-f",
        "--histfile",
        type=Path,
        default=config.history_file,
        help="History file to read (default: $HISTFILE or ~/.bash_history)",
    )
    ap.add_argument(
        "-s",
        "--case-sensitive",
        action="store_true",
        default=config.case_sensitive,
        help="Match case-sensitively",
    )
    ap.add_argument(
        "--dedup",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Collapse consecutive duplicate commands (default: on)",
    )
    mode = ap.add_mutually_exclusive_group()
    mode.add_argument(
        "-i", "--interactive", action="store_true", help="Force the interactive selector"
    )
    mode.add_argument("-b", "--batch", action="store_true", help="Force batch output")
    mode.add_argument(
        "-n",
        "--index",
        type=hex_index,
        metavar="HEX",
        help="Select the entry with this (hexadecimal) index, as shown in batch output",
    )
    ap.add_argument(
        "--bash-readline-mode",
        type=Path,
        metavar="OUTFILE",
        help="Interactive selection for the bash Ctrl-R binding; writes the choice to OUTFILE",
    )
    ap.add_argument(
        "--print-bash-integration",
        action="store_true",
        help="Print the bash snippet that binds Ctrl-R to hgr, then exit",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More log output on stderr (-v info, -vv debug)",
    )
    return ap


# ============================================================================
# OUTPUT SINKS
# ============================================================================


def print_batch(entries: list[HistoryEntry], includes, excludes) -> int:
    """→ Batch mode: prints matching entries with their index; returns the match count"""
    out = Console(highlight=False, soft_wrap=True) if sys.stdout.isatty() else None
    count = 0
    for index, entry in enumerate(entries):
        if not matches(entry, includes, excludes):
            continue
        count += 1
        if out is not None:
            out.print(render_batch_line(index, entry))
        else:
            sys.stdout.write(format_batch_line(index, entry) + "\n")
    sys.stdout.flush()
    logger.debug("%d of %d entries matched", count, len(entries))
    return count


def select_by_index(entries: list[HistoryEntry], index: int) -> HistoryEntry:
    if index >= len(entries):
        raise IndexOutOfRange(index, len(entries) - 1)
    return entries[index]


def emit_selection(entry: HistoryEntry | None) -> None:
    """→ Selection sink: prints the command and copies it to the clipboard"""
    if entry is None:
        logger.debug("Nothing selected")
        return
    sys.stdout.write(entry.text + "\n")
    sys.stdout.flush()
    copy_to_clipboard(entry.text)


def write_readline_selection(path: Path, entry: HistoryEntry | None) -> None:
    """→ Integration sink: the raw command goes to `path`, nothing to stdout"""
    text = entry.text if entry is not None else ""
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise HistGrepError(f"Writing selection to `{path}`: {e.strerror or e}") from e


# ============================================================================
# MAIN
# ============================================================================


def run(args: argparse.Namespace, config: Config) -> int:
    case_mode = CaseMode.from_sensitive(args.case_sensitive)
    entries = read_history_file(args.histfile)
    if args.dedup:
        before = len(entries)
        entries = dedup_entries(entries)
        logger.info("Deduplication removed %d of %d entries", before - len(entries), before)

    excludes = compile_patterns(args.exclude, case_mode)

    if args.index is not None:
        entry = select_by_index(entries, args.index)
    elif args.bash_readline_mode is not None or args.interactive or (
        not args.batch and sys.stdout.isatty()
    ):
        # Positional words seed the search and are matched literally there
        initial_search = " ".join(args.patterns) or config.initial_search
        entry = run_interactive(entries, initial_search, excludes, case_mode)
    else:
        print_batch(entries, compile_patterns(args.patterns, case_mode), excludes)
        return 0

    if args.bash_readline_mode is not None:
        write_readline_selection(args.bash_readline_mode, entry)
    else:
        emit_selection(entry)
    return 0


def main(argv: list[str] | None = None, config: Config = CONFIG) -> int:
    args = build_parser(config).parse_args(argv)
    setup_logging(args.verbose, config.log_level)

    if args.print_bash_integration:
        sys.stdout.write(BASH_INTEGRATION)
        return 0

    try:
        return run(args, config)
    except HistGrepError as e:
        _console_print(f"Error: {e}", style="error", markup=False, highlight=False, soft_wrap=True)
        return 1
    except BrokenPipeError:
        # Downstream consumer closed early (e.g., piped to `head`). Exit cleanly.
        try:
            sys.stdout.close()
        except BrokenPipeError:
            pass
        return 0
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
