"""
focusbm - bookmark and re-focus apps, browser tabs, floating windows and tmux panes
"""

import logging
import sys

from PyQt6.QtWidgets import QApplication, QMessageBox

from .aggregator import SearchAggregator
from .applescript import AppleScriptBridge
from .config import Config
from .logging_config import setup_logging
from .permissions import PermissionsHelper
from .processes import ProcessDirectory
from .restorer import BookmarkRestorer
from .search_panel import SearchPanel
from .storage import BookmarkStore
from .system_tray import SystemTrayIcon
from .tmux import TmuxProvider
from .windows import FloatingWindowProvider

logger = logging.getLogger(__name__)


def offer_permission_setup():
    """Ask to open System Settings when Accessibility is not granted"""
    missing = PermissionsHelper.get_missing_permissions()
    if not missing:
        return
    logger.warning("Missing permissions: %s", ", ".join(missing))
    if not PermissionsHelper.is_macos():
        return

    reply = QMessageBox.question(
        None,
        "Permissions Required",
        PermissionsHelper.request_permissions_instructions()
        + "\n\nOpen System Settings now?",
        QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
    )
    if reply == QMessageBox.StandardButton.Yes:
        PermissionsHelper.open_system_preferences()


def main():
    """Main application entry point"""
    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)

    # Set application metadata
    app.setApplicationName("focusbm")
    app.setApplicationVersion("0.1.0")

    # Initialize configuration
    config = Config()
    setup_logging(config.get("logging.level", "WARNING"), config.log_path)

    offer_permission_setup()

    # Initialize core components
    scripts = AppleScriptBridge()
    processes = ProcessDirectory(scripts)
    window_provider = FloatingWindowProvider()
    tmux_provider = TmuxProvider(processes, timeout=config.get("tmux.timeout", 5.0))
    store = BookmarkStore(config.bookmarks_path).load()

    aggregator = SearchAggregator(window_provider, tmux_provider, store.effective_settings)
    aggregator.load(store.bookmarks)
    restorer = BookmarkRestorer(processes, scripts, window_provider, tmux_provider)

    panel = SearchPanel(aggregator, restorer, store, config)
    tray = SystemTrayIcon(panel, store, restorer, scripts, config)
    panel.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
