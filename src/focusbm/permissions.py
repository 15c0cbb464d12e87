"""
Permissions helper for the macOS Accessibility permission
"""

import logging
import platform
import subprocess

logger = logging.getLogger(__name__)


class PermissionsHelper:
    """Helper for checking and requesting macOS permissions"""

    @staticmethod
    def is_macos() -> bool:
        """Check if running on macOS"""
        return platform.system() == "Darwin"

    @staticmethod
    def check_accessibility_permissions() -> bool:
        """Check if the process is trusted for Accessibility (window titles, raise)"""
        if not PermissionsHelper.is_macos():
            return False
        try:
            from ApplicationServices import AXIsProcessTrusted

            return bool(AXIsProcessTrusted())
        except Exception as e:
            logger.debug("Accessibility check failed: %s", e)
            return False

    @staticmethod
    def get_missing_permissions() -> list[str]:
        """Get list of missing permissions"""
        missing = []
        if not PermissionsHelper.check_accessibility_permissions():
            missing.append("Accessibility")
        return missing

    @staticmethod
    def request_permissions_instructions() -> str:
        """Get instructions for granting permissions"""
        instructions = """
focusbm needs the Accessibility permission to list and raise floating windows:

1. Open System Settings → Privacy & Security → Accessibility
2. Add the terminal or Python interpreter that runs focusbm
3. Enable the checkbox next to it and restart focusbm

Bookmarks for apps, browser tabs and tmux panes work without it.
"""
        return instructions.strip()

    @staticmethod
    def open_system_preferences() -> None:
        """Open System Settings at the Accessibility privacy pane"""
        try:
            subprocess.run(
                [
                    "open",
                    "x-apple.systempreferences:com.apple.preference.security?Privacy_Accessibility",
                ],
                check=False,
            )
        except OSError as e:
            logger.warning("Could not open System Settings: %s", e)
