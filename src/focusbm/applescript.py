"""
osascript bridge: browser tab switching and frontmost app capture
"""

import logging
import subprocess

from .errors import ExecutionFailedError, NotAvailableError
from .models import AppState, BrowserState, Bookmark, TargetState

logger = logging.getLogger(__name__)

BROWSER_BUNDLE_IDS = (
    "com.microsoft.edgemac",
    "com.google.Chrome",
    "com.brave.Browser",
    "com.apple.Safari",
    "org.mozilla.firefox",
)


def is_browser(bundle_id: str) -> bool:
    return bundle_id in BROWSER_BUNDLE_IDS


def escape_for_applescript(value: str) -> str:
    """Escape a value for use inside an AppleScript string literal"""
    return value.replace("\\", "\\\\").replace('"', '\\"')


class AppleScriptBridge:
    """Runs AppleScript snippets through ``osascript``"""

    def __init__(self, runner=subprocess.run):
        self._runner = runner

    def run(self, script: str) -> str:
        try:
            proc = self._runner(
                ["osascript", "-e", script], capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise NotAvailableError(f"osascript is not available: {e}") from e
        output = (proc.stdout or "").strip()
        err_output = (proc.stderr or "").strip()
        if proc.returncode != 0 and err_output:
            raise ExecutionFailedError(f"AppleScript error: {err_output}")
        return output

    # ------------------------------
    # Activation
    # ------------------------------
    def activate_by_exact_id(self, bundle_id: str) -> None:
        self.run(f'tell application id "{escape_for_applescript(bundle_id)}" to activate')

    # ------------------------------
    # Browser tabs
    # ------------------------------
    def switch_tab(self, bundle_id: str, tab_index: int) -> bool:
        """Activate tab ``tab_index`` in the first window that has that many tabs"""
        script = f"""
        tell application id "{escape_for_applescript(bundle_id)}"
            repeat with w in windows
                if (count of tabs of w) >= {tab_index} then
                    set active tab index of w to {tab_index}
                    activate
                    return "true"
                end if
            end repeat
            return "false"
        end tell
        """
        return self.run(script) == "true"

    def switch_tab_if_url_contains(self, bundle_id: str, tab_index: int, url: str) -> bool:
        """Activate tab ``tab_index`` of the first window where that tab's URL contains ``url``"""
        script = f"""
        tell application id "{escape_for_applescript(bundle_id)}"
            repeat with w in windows
                if (count of tabs of w) >= {tab_index} then
                    if URL of tab {tab_index} of w contains "{escape_for_applescript(url)}" then
                        set active tab index of w to {tab_index}
                        activate
                        return "true"
                    end if
                end if
            end repeat
            return "false"
        end tell
        """
        return self.run(script) == "true"

    def find_and_switch_tab_by_url(self, bundle_id: str, url: str) -> bool:
        """Activate the first tab, in window order, whose URL contains ``url``"""
        script = f"""
        tell application id "{escape_for_applescript(bundle_id)}"
            set found to false
            repeat with w in windows
                set tabList to tabs of w
                repeat with i from 1 to count of tabList
                    if URL of item i of tabList contains "{escape_for_applescript(url)}" then
                        set active tab index of w to i
                        set found to true
                        exit repeat
                    end if
                end repeat
                if found then exit repeat
            end repeat
            if found then activate
            return found as text
        end tell
        """
        return self.run(script) == "true"

    # ------------------------------
    # Capture
    # ------------------------------
    def front_app_info(self) -> tuple[str, str, str]:
        """Return (app name, bundle id, window title) of the frontmost app"""
        script = """
        tell application "System Events"
            set frontProc to first application process whose frontmost is true
            set frontName to name of frontProc
            set frontBundle to bundle identifier of frontProc
            set winTitle to ""
            try
                tell frontProc
                    set winTitle to name of first window
                end tell
            end try
            return frontName & "|" & frontBundle & "|" & winTitle
        end tell
        """
        parts = self.run(script).split("|", 2)
        app_name = parts[0]
        bundle_id = parts[1] if len(parts) > 1 else ""
        window_title = parts[2] if len(parts) > 2 else ""
        return app_name, bundle_id, window_title

    def browser_state(self, bundle_id: str) -> BrowserState:
        """Active tab of the browser window with the most tabs.

        Popups can take window 1, so the window with the most tabs is treated
        as the main browser window.
        """
        script = f"""
        tell application id "{escape_for_applescript(bundle_id)}"
            set bestWin to missing value
            set maxTabs to 0
            repeat with w in windows
                set tc to count of tabs of w
                if tc > maxTabs then
                    set maxTabs to tc
                    set bestWin to w
                end if
            end repeat
            if bestWin is missing value then set bestWin to window 1
            tell bestWin
                set tabIdx to active tab index
                tell active tab
                    return URL & "|||" & title & "|||" & tabIdx
                end tell
            end tell
        end tell
        """
        parts = self.run(script).split("|||")
        url = parts[0]
        title = parts[1] if len(parts) > 1 else ""
        tab_index = None
        if len(parts) > 2:
            try:
                tab_index = int(parts[2])
            except ValueError:
                tab_index = None
        return BrowserState(url_pattern=url, title=title, tab_index=tab_index)


def capture_front_bookmark(bridge: AppleScriptBridge, alias: str, tag: str = "default") -> Bookmark:
    """Build a bookmark for whatever is focused right now"""
    app_name, bundle_id, window_title = bridge.front_app_info()

    state: TargetState = AppState(window_title=window_title)
    if is_browser(bundle_id):
        try:
            state = bridge.browser_state(bundle_id)
        except ExecutionFailedError as e:
            logger.warning("Could not read browser state of %s: %s", bundle_id, e)

    return Bookmark(
        alias=alias,
        app_name=app_name,
        state=state,
        bundle_id_pattern=bundle_id or None,
        tag=tag,
    )
