"""
interactive.py - Incremental, full-screen history search

Two layers:

1. `FilterState` owns the data: the master list (exclude patterns already
   applied, fixed for the session), the search text, the filtered sub-list and
   the selection/scroll position. It has no idea a terminal exists.
2. `HistorySearchApp` is the Textual app that draws a `FilterState` and turns
   key presses into calls on it. Textual owns the terminal: it switches to raw
   mode and the alternate screen when the app starts and restores the terminal
   on every way out, exceptions included.

Keys: Up/Down move the selection, PageUp/PageDown move by half a screen,
Enter picks the selected entry, Escape or Ctrl-C leave without picking.
Everything else edits the search text. Each search word is matched literally,
all words must match, and the selection jumps back to the newest match
whenever the text changes.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from rich.console import RenderableType
from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import Resize
from textual.widget import Widget
from textual.widgets import Input, Label, Static

from histgrep.histfile import HistoryEntry
from histgrep.patterns import (
    CaseMode,
    CompiledPattern,
    compile_search_words,
    filter_entries,
)
from histgrep.render import entry_height, render_entry
from histgrep.theme import TIMESTAMP_STYLE

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT_HEIGHT = 20

# ============================================================================
# FILTER STATE
# ============================================================================


class FilterState:
    """The live search: master list, search text, filtered sub-list, selection."""

    def __init__(
        self,
        entries: Iterable[HistoryEntry],
        initial_search: str = "",
        excludes: Sequence[CompiledPattern] = (),
        case_mode: CaseMode = CaseMode.INSENSITIVE,
    ):
        self.master: tuple[HistoryEntry, ...] = tuple(filter_entries(entries, [], excludes))
        self.case_mode = case_mode
        self.search_text = initial_search
        self.filtered: list[HistoryEntry] = []
        self.selected: int | None = None
        self.offset = 0
        self.viewport_height = DEFAULT_VIEWPORT_HEIGHT
        self.refilter()

    def refilter(self) -> None:
        """→ Re-applies the search words to the master list; selects the newest match"""
        includes = compile_search_words(self.search_text, self.case_mode)
        self.filtered = filter_entries(self.master, includes, [])
        self.selected = len(self.filtered) - 1 if self.filtered else None
        self.offset = 0
        self._scroll_to_selection()
        logger.debug(
            "Search `%s` matches %d of %d entries",
            self.search_text,
            len(self.filtered),
            len(self.master),
        )

    def set_search(self, text: str) -> bool:
        """Updates the search text. Returns whether it changed (and refiltered)."""
        if text == self.search_text:
            return False
        self.search_text = text
        self.refilter()
        return True

    @property
    def selected_entry(self) -> HistoryEntry | None:
        if self.selected is None:
            return None
        return self.filtered[self.selected]

    @property
    def page_size(self) -> int:
        return max(1, self.viewport_height // 2)

    def select_previous(self) -> None:
        self._move_selection(-1)

    def select_next(self) -> None:
        self._move_selection(1)

    def page_up(self) -> None:
        self._move_selection(-self.page_size)

    def page_down(self) -> None:
        self._move_selection(self.page_size)

    def resize(self, height: int) -> None:
        self.viewport_height = max(1, height)
        self._scroll_to_selection()

    def visible_entries(self) -> list[tuple[int, HistoryEntry]]:
        """→ (index, entry) pairs that fit the viewport, starting at the scroll offset"""
        visible: list[tuple[int, HistoryEntry]] = []
        rows = 0
        for index in range(self.offset, len(self.filtered)):
            entry = self.filtered[index]
            height = entry_height(entry)
            if visible and rows + height > self.viewport_height:
                break
            visible.append((index, entry))
            rows += height
        return visible

    def _move_selection(self, delta: int) -> None:
        if self.selected is None:
            return
        self.selected = min(max(self.selected + delta, 0), len(self.filtered) - 1)
        self._scroll_to_selection()

    def _scroll_to_selection(self) -> None:
        if self.selected is None:
            self.offset = 0
            return
        if self.selected < self.offset:
            self.offset = self.selected
            return
        # Lowest offset at which the selected entry is still fully on screen
        rows = 0
        top = self.selected
        for index in range(self.selected, -1, -1):
            rows += entry_height(self.filtered[index])
            if rows > self.viewport_height and index < self.selected:
                break
            top = index
        self.offset = max(self.offset, top)


# ============================================================================
# TEXTUAL UI
# ============================================================================


class EntryList(Widget):
    """The filtered entries, newest at the bottom, selection highlighted."""

    DEFAULT_CSS = """
    EntryList {
        height: 1fr;
    }
    """

    def __init__(self, state: FilterState, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.state = state

    def on_resize(self, event: Resize) -> None:
        self.state.resize(event.size.height)
        self.refresh()

    def render(self) -> RenderableType:
        visible = self.state.visible_entries()
        if not visible:
            return Text("  No matching entries", style=TIMESTAMP_STYLE)
        rows = [render_entry(entry, selected=index == self.state.selected) for index, entry in visible]
        return Text("\n", no_wrap=True).join(rows)


class HistorySearchApp(App[HistoryEntry | None]):
    CSS = """
    #title {
        dock: top;
        height: 1;
        width: 100%;
        background: blue;
        color: white;
        text-style: bold;
        content-align: center middle;
    }
    #footer {
        dock: bottom;
        height: 1;
        background: blue;
    }
    #prompt {
        width: 2;
        background: blue;
        color: white;
    }
    #search {
        width: 1fr;
        height: 1;
        border: none;
        padding: 0;
        background: blue;
        color: white;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", priority=True),
        Binding("ctrl+c", "cancel", "Cancel", show=False, priority=True),
        Binding("enter", "choose", "Select", priority=True),
        Binding("up", "select_previous", "Previous", show=False, priority=True),
        Binding("down", "select_next", "Next", show=False, priority=True),
        Binding("pageup", "page_up", "Page up", show=False, priority=True),
        Binding("pagedown", "page_down", "Page down", show=False, priority=True),
    ]

    def __init__(self, state: FilterState, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.state = state

    def compose(self) -> ComposeResult:
        yield Static("Interactive History Search", id="title")
        yield EntryList(self.state, id="entries")
        with Horizontal(id="footer"):
            yield Label(">", id="prompt")
            yield Input(value=self.state.search_text, id="search", select_on_focus=False)

    def on_mount(self):
        search = self.query_one("#search", Input)
        search.focus()
        search.action_end()

    @on(Input.Changed, "#search")
    def handle_search_changed(self, event: Input.Changed):
        if self.state.set_search(event.value):
            self._refresh_entries()

    def _refresh_entries(self) -> None:
        self.query_one(EntryList).refresh()

    def action_cancel(self):
        self.exit(None)

    def action_choose(self):
        self.exit(self.state.selected_entry)

    def action_select_previous(self):
        self.state.select_previous()
        self._refresh_entries()

    def action_select_next(self):
        self.state.select_next()
        self._refresh_entries()

    def action_page_up(self):
        self.state.page_up()
        self._refresh_entries()

    def action_page_down(self):
        self.state.page_down()
        self._refresh_entries()


def run_interactive(
    entries: Iterable[HistoryEntry],
    initial_search: str,
    excludes: Sequence[CompiledPattern],
    case_mode: CaseMode,
) -> HistoryEntry | None:
    """→ Runs the interactive selector; returns the chosen entry, if any"""
    state = FilterState(entries, initial_search, excludes, case_mode)
    logger.debug("Interactive session over %d entries", len(state.master))
    return HistorySearchApp(state).run()
