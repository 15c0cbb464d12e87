"""
System tray icon for focusbm
"""

import logging

from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import QApplication, QInputDialog, QMenu, QStyle, QSystemTrayIcon

from .applescript import AppleScriptBridge, capture_front_bookmark
from .config import Config
from .errors import FocusBMError
from .restorer import BookmarkRestorer, ContextRestoreReport
from .storage import BookmarkStore

logger = logging.getLogger(__name__)


def report_message(report: ContextRestoreReport) -> tuple[str, str]:
    """Title and body for the notification shown after a context restore"""
    counts = f"Restored {report.restored_count}/{report.total}"
    if report.skipped_count:
        counts += f", skipped {report.skipped_count}"
    if report.cancelled:
        return "Restore Cancelled", f"{counts} for '{report.tag}'"
    if report.failed_count == 0:
        return "Context Restored", f"{counts} for '{report.tag}'"
    failed = ", ".join(entry.alias for entry in report.failures)
    return "Restore Completed With Failures", f"{counts}; failed: {failed}"


class SystemTrayIcon(QSystemTrayIcon):
    """System tray icon for the application"""

    def __init__(
        self,
        panel,
        store: BookmarkStore,
        restorer: BookmarkRestorer,
        scripts: AppleScriptBridge,
        config: Config,
        parent=None,
    ):
        super().__init__(parent)
        self.panel = panel
        self.store = store
        self.restorer = restorer
        self.scripts = scripts
        self.config = config

        self.setIcon(QApplication.style().standardIcon(QStyle.StandardPixmap.SP_DirLinkIcon))
        self.setToolTip("focusbm - Focus Bookmarks")

        self.create_context_menu()

        self.activated.connect(self.on_activated)
        self.store.bookmark_saved.connect(lambda alias: self.refresh_menu())
        self.store.bookmark_deleted.connect(lambda alias: self.refresh_menu())

        self.show()

    def create_context_menu(self):
        """Create the context menu for the tray icon"""
        menu = QMenu()

        show_action = QAction("Show Search Panel", self)
        show_action.triggered.connect(self.show_panel)
        menu.addAction(show_action)

        menu.addSeparator()

        save_action = QAction("Bookmark Frontmost...", self)
        save_action.triggered.connect(self.bookmark_frontmost)
        menu.addAction(save_action)

        restore_menu = menu.addMenu("Restore Context")
        self.populate_restore_menu(restore_menu)

        menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.exit_application)
        menu.addAction(exit_action)

        self.setContextMenu(menu)

    def populate_restore_menu(self, menu):
        """One entry per bookmark tag"""
        menu.clear()

        tags = self.store.tags()
        if not tags:
            empty_action = QAction("No bookmarks saved", self)
            empty_action.setEnabled(False)
            menu.addAction(empty_action)
            return

        for tag in tags:
            count = len(self.store.with_tag(tag))
            action = QAction(f"{tag} ({count})", self)
            action.triggered.connect(lambda checked, t=tag: self.restore_context(t))
            menu.addAction(action)

    def on_activated(self, reason):
        """Handle tray icon activation"""
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self.show_panel()

    def show_panel(self):
        self.panel.show()
        self.panel.raise_()
        self.panel.activateWindow()

    def bookmark_frontmost(self):
        """Capture whatever is focused and save it under a new alias"""
        try:
            # Capture before any dialog takes focus
            info = self.scripts.front_app_info()
        except FocusBMError as e:
            self.showMessage("Bookmark Failed", str(e), QSystemTrayIcon.MessageIcon.Critical, 3000)
            return

        alias, ok = QInputDialog.getText(None, "Bookmark Frontmost", f"Alias for {info[0]}:")
        alias = alias.strip()
        if not ok or not alias:
            return
        tags = self.store.tags() or ["default"]
        tag, ok = QInputDialog.getItem(None, "Bookmark Frontmost", "Tag:", tags, 0, True)
        if not ok:
            return

        try:
            bookmark = capture_front_bookmark(_FixedFront(self.scripts, info), alias, tag.strip() or "default")
        except FocusBMError as e:
            self.showMessage("Bookmark Failed", str(e), QSystemTrayIcon.MessageIcon.Critical, 3000)
            return

        self.store.upsert(bookmark)
        self.showMessage(
            "Bookmark Saved",
            f"{bookmark.alias}: {bookmark.description}",
            QSystemTrayIcon.MessageIcon.Information,
            3000,
        )

    def restore_context(self, tag: str):
        """Restore every bookmark tagged ``tag``"""
        report = self.restorer.restore_context(
            self.store.bookmarks, tag, delay=self.config.get("restore.context_delay", 0.0)
        )
        title, body = report_message(report)
        icon = (
            QSystemTrayIcon.MessageIcon.Information
            if report.failed_count == 0
            else QSystemTrayIcon.MessageIcon.Warning
        )
        self.showMessage(title, body, icon, 5000)

    def exit_application(self):
        """Exit the application"""
        QApplication.quit()

    def refresh_menu(self):
        """Refresh the context menu"""
        self.create_context_menu()


class _FixedFront:
    """Bridge view that replays an already captured frontmost app"""

    def __init__(self, scripts: AppleScriptBridge, info: tuple[str, str, str]):
        self._scripts = scripts
        self._info = info

    def front_app_info(self) -> tuple[str, str, str]:
        return self._info

    def browser_state(self, bundle_id: str):
        return self._scripts.browser_state(bundle_id)
