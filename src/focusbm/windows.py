"""
Floating window enumeration and focusing through Quartz and the Accessibility API
"""

import logging

from .models import FloatingWindowEntry
from .permissions import PermissionsHelper

logger = logging.getLogger(__name__)

# Window layers above normal app windows but below the menu bar and overlays
FLOATING_LAYER_RANGE = (1, 19)


class FloatingWindowProvider:
    """Lists and raises the floating windows of a named application"""

    def __init__(self, permissions: type[PermissionsHelper] = PermissionsHelper):
        self.permissions = permissions

    def _floating_pids(self, app_name: str) -> set[int]:
        import Quartz

        window_list = Quartz.CGWindowListCopyWindowInfo(
            Quartz.kCGWindowListOptionAll | Quartz.kCGWindowListExcludeDesktopElements,
            Quartz.kCGNullWindowID,
        )
        pids: set[int] = set()
        for window in window_list or []:
            if window.get(Quartz.kCGWindowOwnerName, "") != app_name:
                continue
            layer = window.get(Quartz.kCGWindowLayer, 0)
            if not FLOATING_LAYER_RANGE[0] <= layer <= FLOATING_LAYER_RANGE[1]:
                continue
            pid = window.get(Quartz.kCGWindowOwnerPID, 0)
            if pid:
                pids.add(int(pid))
        return pids

    def _ax_windows(self, pid: int) -> list:
        from ApplicationServices import (
            AXUIElementCopyAttributeValue,
            AXUIElementCreateApplication,
            kAXWindowsAttribute,
        )

        app_ref = AXUIElementCreateApplication(pid)
        err, windows = AXUIElementCopyAttributeValue(app_ref, kAXWindowsAttribute, None)
        if err != 0 or not windows:
            return []
        return list(windows)

    def _ax_title(self, window) -> str:
        from ApplicationServices import AXUIElementCopyAttributeValue, kAXTitleAttribute

        err, title = AXUIElementCopyAttributeValue(window, kAXTitleAttribute, None)
        if err != 0 or not title:
            return ""
        return str(title)

    def enumerate(self, app_name: str) -> list[FloatingWindowEntry]:
        """Return the titled floating windows owned by ``app_name``.

        Never raises: missing Accessibility permission or any pyobjc failure
        yields an empty list.
        """
        if not self.permissions.check_accessibility_permissions():
            logger.info("Accessibility permission missing, skipping %s windows", app_name)
            return []

        entries: list[FloatingWindowEntry] = []
        try:
            for pid in sorted(self._floating_pids(app_name)):
                for window in self._ax_windows(pid):
                    title = self._ax_title(window)
                    if not title:
                        continue
                    entries.append(FloatingWindowEntry.build(app_name, title, pid, len(entries)))
        except Exception as e:
            logger.warning("Error enumerating windows of %s: %s", app_name, e)
            return []
        return entries

    def raise_window(self, pid: int, window_title: str) -> bool:
        """Raise and focus the window of ``pid`` titled ``window_title``.

        Returns False when the window can no longer be found.
        """
        try:
            from ApplicationServices import (
                AXUIElementPerformAction,
                AXUIElementSetAttributeValue,
                kAXFocusedAttribute,
                kAXRaiseAction,
            )

            for window in self._ax_windows(pid):
                if self._ax_title(window) != window_title:
                    continue
                AXUIElementPerformAction(window, kAXRaiseAction)
                AXUIElementSetAttributeValue(window, kAXFocusedAttribute, True)
                return True
        except Exception as e:
            logger.warning("Error raising window %r of pid %s: %s", window_title, pid, e)
        return False
