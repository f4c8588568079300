"""Process-wide logging: one RichHandler on the shared stderr console."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from histgrep.theme import console

VERBOSITY_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def resolve_level(verbosity: int, env_level: str) -> int:
    """Each -v lowers the threshold one step from WARNING; without -v the environment decides."""
    if verbosity > 0:
        return VERBOSITY_LEVELS[min(verbosity, len(VERBOSITY_LEVELS) - 1)]
    return logging.getLevelName(env_level.upper())


def setup_logging(verbosity: int = 0, env_level: str = "warning") -> None:
    handler = RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=True)
    logging.basicConfig(
        level=resolve_level(verbosity, env_level),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
