"""
Restores focus to a selected bookmark, floating window or tmux pane
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import FocusBMError, NotFoundError
from .models import (
    AppState,
    Bookmark,
    BookmarkItem,
    BrowserState,
    DynamicWindowSet,
    FloatingWindowEntry,
    FloatingWindowItem,
    TmuxPane,
    TmuxPaneItem,
)

logger = logging.getLogger(__name__)


class RestoreOutcome(Enum):
    RESTORED = "restored"
    NOT_RESTORABLE = "not_restorable"
    FAILED = "failed"


@dataclass
class RestoreResult:
    """Outcome of one restore attempt and the steps it went through"""

    outcome: RestoreOutcome
    attempts: list[str] = field(default_factory=list)
    reason: FocusBMError | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is RestoreOutcome.RESTORED

    @property
    def strategy(self) -> str | None:
        """The step the attempt stopped at"""
        return self.attempts[-1] if self.attempts else None

    def summary(self) -> str:
        if self.outcome is RestoreOutcome.FAILED:
            tried = " -> ".join(self.attempts) or "nothing"
            return f"failed at {self.strategy} ({self.reason}); tried {tried}"
        return self.outcome.value


# ------------------------------
# Browser tab strategies
# ------------------------------
class TierStatus(Enum):
    SUCCEEDED = "succeeded"
    NEXT = "next"
    FAILED = "failed"


@dataclass(frozen=True)
class TierResult:
    status: TierStatus
    error: FocusBMError | None = None


SUCCEEDED = TierResult(TierStatus.SUCCEEDED)
NEXT = TierResult(TierStatus.NEXT)


def _has_index_only(state: BrowserState) -> bool:
    return state.tab_index is not None and not state.url_pattern


def _has_index_and_url(state: BrowserState) -> bool:
    return state.tab_index is not None and bool(state.url_pattern)


def _always(state: BrowserState) -> bool:
    return True


def _tab_index_only(bridge, bundle_id: str, state: BrowserState) -> TierResult:
    if bridge.switch_tab(bundle_id, state.tab_index):
        return SUCCEEDED
    # No URL to fall back on
    return TierResult(TierStatus.FAILED, NotFoundError(f"Tab index {state.tab_index} not found"))


def _tab_index_with_url(bridge, bundle_id: str, state: BrowserState) -> TierResult:
    try:
        found = bridge.switch_tab_if_url_contains(bundle_id, state.tab_index, state.url_pattern)
    except FocusBMError as e:
        logger.debug("Tab %s check failed, scanning by URL: %s", state.tab_index, e)
        return NEXT
    # The index may have drifted since the bookmark was saved
    return SUCCEEDED if found else NEXT


def _url_scan(bridge, bundle_id: str, state: BrowserState) -> TierResult:
    if bridge.find_and_switch_tab_by_url(bundle_id, state.url_pattern):
        return SUCCEEDED
    return TierResult(TierStatus.FAILED, NotFoundError(f"Tab not found for URL: {state.url_pattern}"))


@dataclass(frozen=True)
class TabStrategy:
    name: str
    applies: Callable[[BrowserState], bool]
    run: Callable[..., TierResult]


BROWSER_TAB_STRATEGIES = (
    TabStrategy("tab_index", _has_index_only, _tab_index_only),
    TabStrategy("tab_index_and_url", _has_index_and_url, _tab_index_with_url),
    TabStrategy("url_scan", _always, _url_scan),
)


# ------------------------------
# Batch report
# ------------------------------
@dataclass
class ContextRestoreEntry:
    alias: str
    description: str
    result: RestoreResult


@dataclass
class ContextRestoreReport:
    tag: str
    started_at: datetime
    finished_at: datetime
    total: int
    restored_count: int
    failed_count: int
    skipped_count: int
    cancelled: bool
    items: list[ContextRestoreEntry]

    @property
    def failures(self) -> list[ContextRestoreEntry]:
        return [it for it in self.items if it.result.outcome is RestoreOutcome.FAILED]


class BookmarkRestorer(QObject):
    """Dispatches a restore request to the strategy for its target kind.

    Errors raised by collaborators are turned into a RestoreResult; restore()
    itself never raises FocusBMError. Callers must not start a second restore
    while one is running.
    """

    restore_started = pyqtSignal(str)  # label
    restored = pyqtSignal(str)  # label
    restore_failed = pyqtSignal(str, str)  # label, reason

    def __init__(self, processes, browser, window_provider, tmux_provider):
        super().__init__()
        self.processes = processes
        self.browser = browser
        self.window_provider = window_provider
        self.tmux_provider = tmux_provider
        self._cancelled = False

    def restore(self, target) -> RestoreResult:
        """Restore a search item or a bookmark"""
        if isinstance(target, BookmarkItem):
            target = target.bookmark

        if isinstance(target, Bookmark):
            label, handler = target.alias, self._restore_bookmark
        elif isinstance(target, FloatingWindowItem):
            label, handler = target.display_label, self._restore_window
            target = target.entry
        elif isinstance(target, TmuxPaneItem):
            label, handler = target.display_label, self._restore_pane
            target = target.pane
        else:
            raise TypeError(f"Unhandled restore target: {target!r}")

        self.restore_started.emit(label)
        attempts: list[str] = []
        try:
            outcome = handler(target, attempts)
        except FocusBMError as e:
            result = RestoreResult(RestoreOutcome.FAILED, attempts, e)
            logger.info("Restore of %s %s", label, result.summary())
            self.restore_failed.emit(label, result.summary())
            return result

        result = RestoreResult(outcome, attempts)
        if outcome is RestoreOutcome.RESTORED:
            self.restored.emit(label)
        return result

    # ------------------------------
    # Bookmarks
    # ------------------------------
    def _restore_bookmark(self, bookmark: Bookmark, attempts: list[str]) -> RestoreOutcome:
        state = bookmark.state
        if isinstance(state, BrowserState):
            return self._restore_browser(bookmark, state, attempts)
        if isinstance(state, AppState):
            return self._restore_app(bookmark, attempts)
        if isinstance(state, DynamicWindowSet):
            # Members are restored individually from the search list
            return RestoreOutcome.NOT_RESTORABLE
        raise TypeError(f"Unhandled target state: {state!r}")

    def resolve_bundle_id(self, bookmark: Bookmark, attempts: list[str]) -> str:
        """Find the bundle id to drive, launching the app when it is not running.

        Order: exact bundle id, regex match, launch by pattern. Without a
        pattern the display name is looked up among running apps.
        """
        pattern = bookmark.bundle_id_pattern
        if pattern:
            attempts.append("exact_bundle_id")
            proc = self.processes.find_exact(pattern)
            if proc is None:
                attempts.append("regex_bundle_id")
                proc = self.processes.find_matching(pattern)
            if proc is not None and proc.bundle_id:
                return proc.bundle_id
            attempts.append("launch_by_pattern")
            self.processes.launch_by_pattern(pattern)
            return pattern

        attempts.append("app_name")
        proc = self.processes.find_by_name(bookmark.app_name)
        if proc is None or not proc.bundle_id:
            raise NotFoundError(f"Cannot find running app: {bookmark.app_name}")
        return proc.bundle_id

    def _restore_app(self, bookmark: Bookmark, attempts: list[str]) -> RestoreOutcome:
        bundle_id = self.resolve_bundle_id(bookmark, attempts)
        if attempts[-1] != "launch_by_pattern":
            attempts.append("activate")
            self.processes.activate_by_exact_id(bundle_id)
        return RestoreOutcome.RESTORED

    def _restore_browser(
        self, bookmark: Bookmark, state: BrowserState, attempts: list[str]
    ) -> RestoreOutcome:
        bundle_id = self.resolve_bundle_id(bookmark, attempts)
        for strategy in BROWSER_TAB_STRATEGIES:
            if not strategy.applies(state):
                continue
            attempts.append(strategy.name)
            result = strategy.run(self.browser, bundle_id, state)
            if result.status is TierStatus.NEXT:
                continue
            if result.status is TierStatus.SUCCEEDED:
                return RestoreOutcome.RESTORED
            raise result.error or NotFoundError(strategy.name)
        raise NotFoundError(f"No tab strategy applied to {state.url_pattern!r}")

    # ------------------------------
    # Enumerated candidates
    # ------------------------------
    def _restore_window(self, entry: FloatingWindowEntry, attempts: list[str]) -> RestoreOutcome:
        attempts.append("raise_window")
        if not self.window_provider.raise_window(entry.pid, entry.window_title):
            logger.debug("Window %r is gone, activating pid %s only", entry.window_title, entry.pid)
        attempts.append("activate_pid")
        try:
            self.processes.activate_pid(entry.pid)
        except FocusBMError as e:
            logger.warning("Could not activate pid %s: %s", entry.pid, e)
        return RestoreOutcome.RESTORED

    def _restore_pane(self, pane: TmuxPane, attempts: list[str]) -> RestoreOutcome:
        attempts.append("switch_client")
        self.tmux_provider.switch_client(pane.session_name, pane.window_index)

        attempts.append("detect_terminal")
        app = self.tmux_provider.detect_terminal_app(pane.session_name, pane.window_index)
        if app is None or not app.bundle_id:
            logger.debug("No terminal app found for %s", pane.target)
            return RestoreOutcome.RESTORED
        attempts.append("activate_terminal")
        self.processes.activate_by_exact_id(app.bundle_id)
        return RestoreOutcome.RESTORED

    # ------------------------------
    # Batch
    # ------------------------------
    def cancel(self) -> None:
        """Stop a running restore_context before its next item"""
        self._cancelled = True

    def restore_context(
        self, bookmarks: list[Bookmark], tag: str, delay: float = 0.0
    ) -> ContextRestoreReport:
        """Restore every bookmark tagged ``tag``, continuing past failures"""
        targets = [b for b in bookmarks if b.tag == tag]
        started = datetime.now()
        self._cancelled = False
        items: list[ContextRestoreEntry] = []

        for bookmark in targets:
            if self._cancelled:
                logger.info("Context %s restore cancelled after %d item(s)", tag, len(items))
                break
            result = self.restore(bookmark)
            items.append(ContextRestoreEntry(bookmark.alias, bookmark.description, result))
            if delay and result.ok:
                time.sleep(delay)

        return ContextRestoreReport(
            tag=tag,
            started_at=started,
            finished_at=datetime.now(),
            total=len(targets),
            restored_count=sum(1 for it in items if it.result.outcome is RestoreOutcome.RESTORED),
            failed_count=sum(1 for it in items if it.result.outcome is RestoreOutcome.FAILED),
            skipped_count=sum(
                1 for it in items if it.result.outcome is RestoreOutcome.NOT_RESTORABLE
            ),
            cancelled=self._cancelled,
            items=items,
        )
