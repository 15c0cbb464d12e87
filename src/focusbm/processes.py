"""
Running application lookup, activation and launch
"""

import logging
import re
import subprocess
from dataclasses import dataclass

from .applescript import AppleScriptBridge
from .errors import ExecutionFailedError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunningProcess:
    """A regular (Dock-visible) running application"""

    pid: int
    name: str
    bundle_id: str | None
    is_frontmost: bool = False


class ProcessDirectory:
    """Lookup over the running application table.

    ``running_processes`` reads NSWorkspace; the lookup methods only depend on
    it, so a subclass can supply a fixed process list.
    """

    def __init__(self, scripts: AppleScriptBridge | None = None, runner=subprocess.run):
        self.scripts = scripts or AppleScriptBridge()
        self._runner = runner

    def _workspace(self):
        from AppKit import NSWorkspace

        return NSWorkspace.sharedWorkspace()

    def running_processes(self) -> list[RunningProcess]:
        """Get list of running regular applications"""
        workspace = self._workspace()
        front = workspace.frontmostApplication()
        processes = []
        for app in workspace.runningApplications():
            if app.activationPolicy() != 0:  # Regular apps only
                continue
            processes.append(
                RunningProcess(
                    pid=int(app.processIdentifier()),
                    name=app.localizedName() or "",
                    bundle_id=app.bundleIdentifier(),
                    is_frontmost=front is not None
                    and front.processIdentifier() == app.processIdentifier(),
                )
            )
        return processes

    # ------------------------------
    # Lookup
    # ------------------------------
    def find_exact(self, bundle_id: str) -> RunningProcess | None:
        for proc in self.running_processes():
            if proc.bundle_id == bundle_id:
                return proc
        return None

    def find_matching(self, pattern: str) -> RunningProcess | None:
        """First process whose bundle id matches ``pattern`` as a regex"""
        try:
            regex = re.compile(pattern)
        except re.error:
            return None
        for proc in self.running_processes():
            if proc.bundle_id and regex.search(proc.bundle_id):
                return proc
        return None

    def find_by_name(self, app_name: str) -> RunningProcess | None:
        """Match a display name, preferring the frontmost process"""
        candidates = [p for p in self.running_processes() if p.name == app_name]
        for proc in candidates:
            if proc.is_frontmost:
                return proc
        return candidates[0] if candidates else None

    def find_by_pid(self, pid: int) -> RunningProcess | None:
        for proc in self.running_processes():
            if proc.pid == pid:
                return proc
        return None

    # ------------------------------
    # Actions
    # ------------------------------
    def activate_by_exact_id(self, bundle_id: str) -> None:
        self.scripts.activate_by_exact_id(bundle_id)

    def activate_pid(self, pid: int) -> None:
        """Activate (bring to front) an application by PID"""
        from AppKit import NSRunningApplication

        app = NSRunningApplication.runningApplicationWithProcessIdentifier_(pid)
        if app is None:
            raise NotFoundError(f"No running application with pid {pid}")
        app.activateWithOptions_(1 << 1)  # NSApplicationActivateIgnoringOtherApps

    def launch_by_pattern(self, pattern: str) -> None:
        """Launch by bundle id with ``open -b``; a regex pattern will usually fail"""
        try:
            proc = self._runner(["open", "-b", pattern], capture_output=True, text=True, check=False)
        except OSError as e:
            raise ExecutionFailedError(f"Failed to run open: {e}") from e
        if proc.returncode != 0:
            raise ExecutionFailedError(f"Failed to open app with bundleId: {pattern}")
