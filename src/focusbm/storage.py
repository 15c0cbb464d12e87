"""
YAML bookmark store
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from PyQt6.QtCore import QObject, pyqtSignal

from .models import AppState, Bookmark, BrowserState, DynamicWindowSet, TargetState

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """User settings stored alongside the bookmarks"""

    show_agent_panes: bool = True
    toggle_panel: str = "cmd+ctrl+b"
    display_number: int | None = None
    list_font_size: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        hotkey = data.get("hotkey") or {}
        return cls(
            show_agent_panes=bool(data.get("showAgentPanes", True)),
            toggle_panel=hotkey.get("togglePanel", "cmd+ctrl+b"),
            display_number=data.get("displayNumber"),
            list_font_size=data.get("listFontSize"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "hotkey": {"togglePanel": self.toggle_panel},
            "showAgentPanes": self.show_agent_panes,
        }
        if self.display_number is not None:
            data["displayNumber"] = self.display_number
        if self.list_font_size is not None:
            data["listFontSize"] = self.list_font_size
        return data


def state_to_dict(state: TargetState) -> dict[str, Any]:
    if isinstance(state, BrowserState):
        data: dict[str, Any] = {
            "type": "browser",
            "urlPattern": state.url_pattern,
            "title": state.title,
        }
        if state.tab_index is not None:
            data["tabIndex"] = state.tab_index
        return data
    if isinstance(state, AppState):
        return {"type": "app", "windowTitle": state.window_title}
    if isinstance(state, DynamicWindowSet):
        return {"type": "floatingWindows"}
    raise TypeError(f"Unhandled target state: {state!r}")


def state_from_dict(data: dict[str, Any]) -> TargetState:
    kind = data.get("type")
    if kind == "browser":
        return BrowserState(
            url_pattern=data.get("urlPattern", ""),
            title=data.get("title", ""),
            tab_index=data.get("tabIndex"),
        )
    if kind == "floatingWindows":
        return DynamicWindowSet()
    return AppState(window_title=data.get("windowTitle", ""))


def bookmark_to_dict(bookmark: Bookmark) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": bookmark.alias,
        "appName": bookmark.app_name,
        "context": bookmark.tag,
        "state": state_to_dict(bookmark.state),
        "createdAt": bookmark.created_at,
    }
    if bookmark.bundle_id_pattern is not None:
        data["bundleIdPattern"] = bookmark.bundle_id_pattern
    return data


def bookmark_from_dict(data: dict[str, Any]) -> Bookmark:
    return Bookmark(
        alias=str(data["id"]),
        app_name=data.get("appName", ""),
        state=state_from_dict(data.get("state") or {}),
        bundle_id_pattern=data.get("bundleIdPattern"),
        tag=data.get("context", "default"),
        created_at=str(data.get("createdAt", "")),
    )


class BookmarkStore(QObject):
    """Loads and saves bookmarks.yml"""

    bookmark_saved = pyqtSignal(str)  # alias
    bookmark_deleted = pyqtSignal(str)  # alias

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self.settings: Settings | None = None
        self.bookmarks: list[Bookmark] = []

    def load(self) -> "BookmarkStore":
        """Read the store; a missing or unreadable file yields an empty store"""
        self.settings = None
        self.bookmarks = []
        if not self.path.exists():
            return self
        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Error loading bookmarks from %s: %s", self.path, e)
            return self
        if not isinstance(data, dict):
            logger.error("Error loading bookmarks from %s: not a mapping", self.path)
            return self

        if data.get("settings") is not None:
            self.settings = Settings.from_dict(data["settings"])
        for entry in data.get("bookmarks") or []:
            try:
                self.bookmarks.append(bookmark_from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping malformed bookmark %r: %s", entry, e)
        return self

    def save(self) -> None:
        data: dict[str, Any] = {}
        if self.settings is not None:
            data["settings"] = self.settings.to_dict()
        data["bookmarks"] = [bookmark_to_dict(b) for b in self.bookmarks]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    @property
    def effective_settings(self) -> Settings:
        return self.settings or Settings()

    def get(self, alias: str) -> Bookmark | None:
        for bookmark in self.bookmarks:
            if bookmark.alias == alias:
                return bookmark
        return None

    def upsert(self, bookmark: Bookmark) -> None:
        """Store a bookmark; an existing one with the same alias is replaced"""
        self.bookmarks = [b for b in self.bookmarks if b.alias != bookmark.alias]
        self.bookmarks.append(bookmark)
        self.save()
        self.bookmark_saved.emit(bookmark.alias)

    def delete(self, alias: str) -> bool:
        before = len(self.bookmarks)
        self.bookmarks = [b for b in self.bookmarks if b.alias != alias]
        if len(self.bookmarks) == before:
            return False
        self.save()
        self.bookmark_deleted.emit(alias)
        return True

    def with_tag(self, tag: str) -> list[Bookmark]:
        return [b for b in self.bookmarks if b.tag == tag]

    def tags(self) -> list[str]:
        return sorted({b.tag for b in self.bookmarks})
