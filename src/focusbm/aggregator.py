"""
Merges bookmarks, floating windows and tmux panes into one search list
"""

import logging
from dataclasses import dataclass, field

from PyQt6.QtCore import QObject, pyqtSignal

from . import matcher
from .errors import FocusBMError
from .models import (
    Bookmark,
    BookmarkItem,
    FloatingWindowEntry,
    FloatingWindowItem,
    SearchItem,
    TmuxPane,
    TmuxPaneItem,
)
from .storage import Settings

logger = logging.getLogger(__name__)


@dataclass
class SessionCache:
    """Enumeration results for one panel session"""

    windows: dict[str, list[FloatingWindowEntry]] = field(default_factory=dict)
    panes: list[TmuxPane] = field(default_factory=list)

    def windows_for(self, app_name: str) -> list[FloatingWindowEntry]:
        return self.windows.get(app_name, [])


def bookmark_fields(bookmark: Bookmark) -> tuple[str, str, str, str | None]:
    return bookmark.alias, bookmark.app_name, bookmark.tag, bookmark.url_pattern


class SearchAggregator(QObject):
    """Builds the ordered candidate list for the search panel.

    Enumeration only happens in ``refresh``; ``rebuild`` reads the cache, so
    typing never triggers window or pane listing.
    """

    items_changed = pyqtSignal(object)  # list of search items
    selection_changed = pyqtSignal(int)

    def __init__(self, window_provider, tmux_provider, settings: Settings | None = None):
        super().__init__()
        self.window_provider = window_provider
        self.tmux_provider = tmux_provider
        self.settings = settings or Settings()
        self.bookmarks: list[Bookmark] = []
        self.cache = SessionCache()
        self.query = ""
        self.items: list[SearchItem] = []
        self.selected_index = 0

    def load(self, bookmarks: list[Bookmark], settings: Settings | None = None) -> list[SearchItem]:
        """Replace the bookmark list without touching the enumeration cache"""
        self.bookmarks = list(bookmarks)
        if settings is not None:
            self.settings = settings
        return self.rebuild(self.query)

    def refresh(self) -> list[SearchItem]:
        """Re-enumerate windows and panes for a newly opened panel"""
        cache = SessionCache()
        for bookmark in self.bookmarks:
            if bookmark.is_dynamic and bookmark.app_name not in cache.windows:
                cache.windows[bookmark.app_name] = self.window_provider.enumerate(bookmark.app_name)

        if self.settings.show_agent_panes:
            try:
                cache.panes = self.tmux_provider.list_all_panes()
            except FocusBMError as e:
                logger.info("tmux panes unavailable: %s", e)
                cache.panes = []

        self.cache = cache
        return self.rebuild(self.query)

    def _agent_panes(self) -> list[TmuxPane]:
        if not self.settings.show_agent_panes:
            return []
        return [pane for pane in self.cache.panes if pane.is_agent_candidate]

    def _compose_unfiltered(self) -> list[SearchItem]:
        items: list[SearchItem] = []
        for bookmark in self.bookmarks:
            if bookmark.is_dynamic:
                items.extend(
                    FloatingWindowItem(entry, group_tag=bookmark.tag)
                    for entry in self.cache.windows_for(bookmark.app_name)
                )
            else:
                items.append(BookmarkItem(bookmark))
        items.extend(TmuxPaneItem(pane) for pane in self._agent_panes())
        return items

    def _compose_filtered(self, query: str) -> list[SearchItem]:
        windows: list[SearchItem] = []
        static: list[Bookmark] = []
        for bookmark in self.bookmarks:
            if bookmark.is_dynamic:
                windows.extend(
                    FloatingWindowItem(entry, group_tag=bookmark.tag)
                    for entry in self.cache.windows_for(bookmark.app_name)
                    if matcher.matches(entry.display_name, query)
                )
            else:
                static.append(bookmark)

        ranked = matcher.rank(static, query, bookmark_fields)
        panes = matcher.rank(self._agent_panes(), query, lambda pane: (pane.display_name,))
        return (
            windows
            + [BookmarkItem(b) for b in ranked]
            + [TmuxPaneItem(p) for p in panes]
        )

    def rebuild(self, query: str = "") -> list[SearchItem]:
        self.query = query
        if query:
            self.items = self._compose_filtered(query)
        else:
            self.items = self._compose_unfiltered()
        self._clamp_selection()
        self.items_changed.emit(self.items)
        return self.items

    # ------------------------------
    # Selection
    # ------------------------------
    def _clamp_selection(self) -> None:
        last = max(0, len(self.items) - 1)
        self.selected_index = max(0, min(self.selected_index, last))
        self.selection_changed.emit(self.selected_index)

    def select(self, index: int) -> None:
        self.selected_index = index
        self._clamp_selection()

    def move_up(self) -> None:
        if self.selected_index > 0:
            self.select(self.selected_index - 1)

    def move_down(self) -> None:
        if self.selected_index < len(self.items) - 1:
            self.select(self.selected_index + 1)

    def item_at(self, index: int) -> SearchItem | None:
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def selected_item(self) -> SearchItem | None:
        return self.item_at(self.selected_index)
