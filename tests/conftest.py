"""Pytest configuration and fixtures for histgrep tests."""

import time
from datetime import datetime, timezone

import pytest

from histgrep.histfile import DEFAULT_TIMESTAMP, HistoryEntry


@pytest.fixture(autouse=True)
def utc_local_time(monkeypatch):
    """Render local timestamps in UTC so expected strings are stable."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture(autouse=True)
def clipboard(monkeypatch):
    """Record clipboard copies instead of writing escape sequences to the terminal."""
    copied = []

    def fake_copy(text):
        copied.append(text)
        return True

    monkeypatch.setattr("histgrep.cli.copy_to_clipboard", fake_copy)
    return copied


def make_entry(*lines, ts=None):
    """HistoryEntry from command lines and an optional unix timestamp."""
    timestamp = DEFAULT_TIMESTAMP if ts is None else datetime.fromtimestamp(ts, tz=timezone.utc)
    return HistoryEntry(timestamp, lines)
