"""Environment-driven defaults. Command-line flags always win over these."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

DEFAULT_HISTORY_FILE = "~/.bash_history"
LOG_LEVELS = ("debug", "info", "warning", "error")
TRUTHY = {"1", "true", "yes", "on"}


class Config:
    """Configuration read from the environment"""

    def __init__(self, environ: Mapping[str, str] | None = None):
        self.environ = os.environ if environ is None else environ

    @property
    def history_file(self) -> Path:
        """→ $HISTFILE, or ~/.bash_history"""
        return Path(self.environ.get("HISTFILE") or DEFAULT_HISTORY_FILE).expanduser()

    @property
    def initial_search(self) -> str:
        """→ Search text the interactive list starts with; the bash integration passes the readline buffer here"""
        return self.environ.get("HGR_INITIAL_SEARCH", "")

    @property
    def log_level(self) -> str:
        level = self.environ.get("HGR_LOG", "").strip().lower()
        if level == "warn":
            level = "warning"
        return level if level in LOG_LEVELS else "warning"

    @property
    def case_sensitive(self) -> bool:
        return self.environ.get("HGR_CASE_SENSITIVE", "").strip().lower() in TRUTHY


CONFIG = Config()
