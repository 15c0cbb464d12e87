"""
tmux pane listing, client switching and hosting-terminal detection
"""

import logging
import subprocess

from .errors import ExecutionFailedError, FocusBMError, NotAvailableError, ParseError
from .models import UNKNOWN_TERMINAL_GLYPH, TmuxPane
from .processes import ProcessDirectory, RunningProcess

logger = logging.getLogger(__name__)

SEPARATOR = "||"
FIELD_COUNT = 7
PANE_FORMAT = SEPARATOR.join(
    [
        "#{pane_id}",
        "#{session_name}",
        "#{window_index}",
        "#{window_name}",
        "#{pane_current_command}",
        "#{pane_title}",
        "#{pane_current_path}",
    ]
)

# Priority order used when the client tty cannot be traced to an app
KNOWN_TERMINALS = (
    ("com.mitchellh.ghostty", "Ghostty"),
    ("com.googlecode.iterm2", "iTerm2"),
    ("com.apple.Terminal", "Terminal"),
    ("org.alacritty", "Alacritty"),
    ("com.github.wez.wezterm", "WezTerm"),
)

TERMINAL_GLYPHS = {
    "com.mitchellh.ghostty": "👻",
    "com.googlecode.iterm2": "🍎",
    "com.apple.Terminal": "🍎",
    "com.github.wez.wezterm": "⚡",
    "org.alacritty": "🔲",
}


def terminal_glyph(bundle_id: str | None) -> str:
    if bundle_id is None:
        return UNKNOWN_TERMINAL_GLYPH
    return TERMINAL_GLYPHS.get(bundle_id, UNKNOWN_TERMINAL_GLYPH)


def parse_output(output: str) -> list[TmuxPane]:
    """Parse ``list-panes`` output produced with PANE_FORMAT.

    Every non-empty line must carry 7 fields; a short line raises ParseError.
    Extra separators are taken to be part of the pane title.
    """
    panes = []
    for line in output.split("\n"):
        if not line:
            continue
        parts = line.split(SEPARATOR)
        if len(parts) < FIELD_COUNT:
            raise ParseError(f"Expected {FIELD_COUNT} fields, got {len(parts)}: {line}")
        try:
            window_index = int(parts[2])
        except ValueError:
            window_index = 0
        panes.append(
            TmuxPane(
                pane_id=parts[0],
                session_name=parts[1],
                window_index=window_index,
                window_name=parts[3],
                command=parts[4],
                title=SEPARATOR.join(parts[5:-1]),
                current_path=parts[-1],
            )
        )
    return panes


class TmuxProvider:
    """Thin wrapper over the tmux CLI"""

    def __init__(
        self,
        processes: ProcessDirectory | None = None,
        runner=subprocess.run,
        timeout: float = 5.0,
    ):
        self.processes = processes or ProcessDirectory()
        self._runner = runner
        self.timeout = timeout

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        try:
            return self._runner(
                args, capture_output=True, text=True, check=False, timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise NotAvailableError(f"{args[0]} is not available") from e
        except subprocess.TimeoutExpired as e:
            raise ExecutionFailedError(f"{' '.join(args[:2])} timed out") from e
        except OSError as e:
            raise NotAvailableError(f"{args[0]} could not be started: {e}") from e

    def _tmux(self, *args: str) -> subprocess.CompletedProcess:
        return self._run(["tmux", *args])

    def is_available(self) -> bool:
        try:
            return self._tmux("info").returncode == 0
        except (NotAvailableError, ExecutionFailedError):
            return False

    def list_all_panes(self) -> list[TmuxPane]:
        proc = self._tmux("list-panes", "-a", "-F", PANE_FORMAT)
        if proc.returncode != 0:
            err_output = (proc.stderr or "").strip()
            raise ExecutionFailedError(err_output or f"exit code {proc.returncode}")
        panes = parse_output(proc.stdout or "")

        # One terminal lookup per session
        glyphs: dict[str, str] = {}
        for pane in panes:
            if pane.session_name not in glyphs:
                glyphs[pane.session_name] = self._detect_glyph(pane)
            pane.terminal_glyph = glyphs[pane.session_name]
        return panes

    def _detect_glyph(self, pane: TmuxPane) -> str:
        try:
            app = self.detect_terminal_app(pane.session_name, pane.window_index)
        except Exception as e:
            logger.debug("Terminal detection failed for session %s: %s", pane.session_name, e)
            return UNKNOWN_TERMINAL_GLYPH
        return terminal_glyph(app.bundle_id if app else None)

    def switch_client(self, session_name: str, window_index: int) -> None:
        proc = self._tmux("switch-client", "-t", f"{session_name}:{window_index}")
        if proc.returncode != 0:
            err_output = (proc.stderr or "").strip()
            raise ExecutionFailedError(err_output or "switch-client failed")

    def list_client_tty(self, session_name: str, window_index: int) -> str | None:
        proc = self._tmux(
            "list-clients", "-t", f"{session_name}:{window_index}", "-F", "#{client_tty}"
        )
        lines = (proc.stdout or "").strip().splitlines()
        if proc.returncode != 0 or not lines:
            return None
        return lines[0].strip() or None

    # ------------------------------
    # Terminal app detection
    # ------------------------------
    def detect_terminal_app(self, session_name: str, window_index: int) -> RunningProcess | None:
        """GUI terminal hosting the client attached to ``session:window``"""
        try:
            tty = self.list_client_tty(session_name, window_index)
            if tty:
                tty_name = tty[len("/dev/"):] if tty.startswith("/dev/") else tty
                return self.find_terminal_app_for_tty(tty_name)
        except FocusBMError as e:
            logger.debug("tty lookup for %s:%s failed: %s", session_name, window_index, e)
        return self.find_running_terminal_app()

    def find_terminal_app_for_tty(self, tty_name: str) -> RunningProcess | None:
        proc = self._run(["ps", "-t", tty_name, "-o", "pid=,ppid="])
        pids: list[int] = []
        parents: list[int] = []
        for line in (proc.stdout or "").splitlines():
            parts = line.split()
            if len(parts) < 2:
                continue
            try:
                pids.append(int(parts[0]))
                parents.append(int(parts[1]))
            except ValueError:
                continue

        # The login shell on the tty is a child of the GUI terminal
        for pid in pids + parents:
            app = self.processes.find_by_pid(pid)
            if app is not None and app.bundle_id:
                return app
        return self.find_running_terminal_app()

    def find_running_terminal_app(self) -> RunningProcess | None:
        running = {p.bundle_id: p for p in self.processes.running_processes() if p.bundle_id}
        for bundle_id, _name in KNOWN_TERMINALS:
            if bundle_id in running:
                return running[bundle_id]
        return None
