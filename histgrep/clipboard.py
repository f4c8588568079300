"""
Copying text to the system clipboard through the terminal.

Uses the OSC 52 escape sequence, which most modern terminal emulators (and
tmux with `set-clipboard on`) forward to the clipboard. Works over ssh too,
since it only needs the terminal.
"""

from __future__ import annotations

import base64
import logging
import sys
from typing import TextIO

logger = logging.getLogger(__name__)

CONTROLLING_TTY = "/dev/tty"


def osc52_sequence(text: str) -> str:
    """→ `ESC ] 52 ; c ; <base64 text> BEL`"""
    payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return f"\x1b]52;c;{payload}\x07"


def _write_sequence(stream: TextIO, sequence: str) -> None:
    stream.write(sequence)
    stream.flush()


def copy_to_clipboard(text: str) -> bool:
    """
    Copies `text` to the clipboard. Returns whether the sequence was emitted.

    Prefers the controlling terminal so stdout stays clean for the command
    itself; falls back to stderr when it is a terminal.
    """
    sequence = osc52_sequence(text)
    try:
        with open(CONTROLLING_TTY, "w", encoding="utf-8") as tty:
            _write_sequence(tty, sequence)
            logger.debug("Copied %d characters to the clipboard via %s", len(text), CONTROLLING_TTY)
            return True
    except OSError as e:
        logger.debug("Cannot open %s (%s); trying stderr", CONTROLLING_TTY, e)

    if sys.stderr.isatty():
        _write_sequence(sys.stderr, sequence)
        logger.debug("Copied %d characters to the clipboard via stderr", len(text))
        return True

    logger.info("No terminal available; not copying to the clipboard")
    return False
