"""
Bookmark targets, enumerated candidates and the search items built from them
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


# ------------------------------
# Target states
# ------------------------------
@dataclass(frozen=True)
class BrowserState:
    """A browser tab located by URL substring and optional tab index"""

    url_pattern: str
    title: str
    tab_index: int | None = None


@dataclass(frozen=True)
class AppState:
    """A plain application, optionally remembered with its window title"""

    window_title: str = ""


@dataclass(frozen=True)
class DynamicWindowSet:
    """Marker state: the app's floating windows are discovered at query time"""


TargetState = BrowserState | AppState | DynamicWindowSet

DYNAMIC_PLACEHOLDER = "(floating windows)"


def _now_iso() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


@dataclass
class Bookmark:
    """A persisted, user-named focus target"""

    alias: str
    app_name: str
    state: TargetState
    bundle_id_pattern: str | None = None
    tag: str = "default"
    created_at: str = field(default_factory=_now_iso)

    @property
    def is_dynamic(self) -> bool:
        return isinstance(self.state, DynamicWindowSet)

    @property
    def url_pattern(self) -> str | None:
        if isinstance(self.state, BrowserState):
            return self.state.url_pattern
        return None

    @property
    def description(self) -> str:
        return describe(self)


def describe(bookmark: Bookmark) -> str:
    """Human readable one-line description of what a bookmark restores to"""
    state = bookmark.state
    if isinstance(state, BrowserState):
        tab = f" [tab:{state.tab_index}]" if state.tab_index is not None else ""
        return f"{bookmark.app_name}: {state.title} ({state.url_pattern}){tab}"
    if isinstance(state, AppState):
        return f"{bookmark.app_name}: {state.window_title}"
    if isinstance(state, DynamicWindowSet):
        return f"{bookmark.app_name}: {DYNAMIC_PLACEHOLDER}"
    raise TypeError(f"Unhandled target state: {state!r}")


# ------------------------------
# Enumerated candidates
# ------------------------------
@dataclass(frozen=True)
class FloatingWindowEntry:
    """A floating window found while the panel is open"""

    id: str
    app_name: str
    window_title: str
    display_name: str
    pid: int

    @classmethod
    def build(
        cls, app_name: str, window_title: str, pid: int, position: int = 0
    ) -> "FloatingWindowEntry":
        """``position`` is the window's index in enumeration order; with the pid
        it keeps same-titled windows apart."""
        safe_title = window_title.lower().replace(" ", "-")
        safe_id = f"{app_name.lower()}-{pid}-{position}-{safe_title}"
        return cls(
            id=safe_id,
            app_name=app_name,
            window_title=window_title,
            display_name=f"{app_name} - {window_title}",
            pid=pid,
        )


class AgentStatus(Enum):
    RUNNING = "running"
    PLAN_MODE = "plan_mode"
    ACCEPT_EDITS = "accept_edits"
    IDLE = "idle"


AGENT_COMMANDS = frozenset({"claude", "aider", "gemini", "copilot", "agent"})
AGENT_TITLE_MARKERS = (
    "claude code",
    "aider",
    "gemini",
    "codex",  # codex runs as node
    "copilot",
    "openai",
    "ai agent",
)
# A finished agent leaves its title behind while the shell takes the foreground
SHELL_COMMANDS = frozenset({"bash", "zsh", "fish", "sh"})

PLAN_MODE_GLYPH = "⏸"
ACCEPT_EDITS_GLYPH = "⏵"
SPINNER_BLOCK = (0x2800, 0x28FF)

STATUS_GLYPHS = {
    AgentStatus.RUNNING: "●",
    AgentStatus.PLAN_MODE: PLAN_MODE_GLYPH,
    AgentStatus.ACCEPT_EDITS: ACCEPT_EDITS_GLYPH,
    AgentStatus.IDLE: "○",
}

UNKNOWN_TERMINAL_GLYPH = "❓"


@dataclass
class TmuxPane:
    """A tmux pane as reported by ``tmux list-panes -a``"""

    pane_id: str
    session_name: str
    window_index: int
    window_name: str
    command: str
    title: str
    current_path: str
    terminal_glyph: str = UNKNOWN_TERMINAL_GLYPH

    @property
    def is_agent_candidate(self) -> bool:
        if self.command in SHELL_COMMANDS:
            return False
        if self.command in AGENT_COMMANDS:
            return True
        title = self.title.lower()
        return any(marker in title for marker in AGENT_TITLE_MARKERS)

    @property
    def agent_status(self) -> AgentStatus:
        if PLAN_MODE_GLYPH in self.title:
            return AgentStatus.PLAN_MODE
        if ACCEPT_EDITS_GLYPH in self.title:
            return AgentStatus.ACCEPT_EDITS
        if self.title and SPINNER_BLOCK[0] <= ord(self.title[0]) <= SPINNER_BLOCK[1]:
            return AgentStatus.RUNNING
        return AgentStatus.IDLE

    @property
    def status_glyph(self) -> str:
        return STATUS_GLYPHS[self.agent_status]

    @property
    def agent_name(self) -> str:
        names = {
            "claude": "Claude Code",
            "aider": "Aider",
            "gemini": "Gemini",
            "copilot": "Copilot",
            "agent": "Agent",
        }
        if self.command in names:
            return names[self.command]
        title = self.title.lower()
        if "codex" in title:
            return "Codex"
        if "copilot" in title:
            return "Copilot"
        return self.command

    @property
    def target(self) -> str:
        """tmux target string for the pane's window"""
        return f"{self.session_name}:{self.window_index}"

    @property
    def display_name(self) -> str:
        path_part = ""
        if self.current_path:
            path_part = f" - {os.path.basename(self.current_path.rstrip('/')) or '/'}"
        return f"{self.terminal_glyph} {self.status_glyph} {self.agent_name}{path_part}"


# ------------------------------
# Search items
# ------------------------------
@dataclass(frozen=True)
class BookmarkItem:
    bookmark: Bookmark

    @property
    def identity(self) -> str:
        return f"bookmark:{self.bookmark.alias}"

    @property
    def display_label(self) -> str:
        return self.bookmark.alias

    @property
    def owner_app(self) -> str:
        return self.bookmark.app_name

    @property
    def group_tag(self) -> str:
        return self.bookmark.tag

    @property
    def url_pattern(self) -> str | None:
        return self.bookmark.url_pattern


@dataclass(frozen=True)
class FloatingWindowItem:
    entry: FloatingWindowEntry
    group_tag: str = ""

    @property
    def identity(self) -> str:
        return f"window:{self.entry.id}"

    @property
    def display_label(self) -> str:
        return self.entry.display_name

    @property
    def owner_app(self) -> str:
        return self.entry.app_name

    @property
    def url_pattern(self) -> str | None:
        return None


@dataclass(frozen=True)
class TmuxPaneItem:
    pane: TmuxPane

    @property
    def identity(self) -> str:
        return f"tmux:{self.pane.pane_id}"

    @property
    def display_label(self) -> str:
        return self.pane.display_name

    @property
    def owner_app(self) -> str:
        return "tmux"

    @property
    def group_tag(self) -> str:
        return self.pane.session_name

    @property
    def url_pattern(self) -> str | None:
        return None


SearchItem = BookmarkItem | FloatingWindowItem | TmuxPaneItem
