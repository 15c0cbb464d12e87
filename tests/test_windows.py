"""Tests for focusbm.windows with the pyobjc calls replaced."""

from __future__ import annotations

from focusbm.windows import FloatingWindowProvider


class Granted:
    @staticmethod
    def check_accessibility_permissions():
        return True


class Denied:
    @staticmethod
    def check_accessibility_permissions():
        return False


class StubProvider(FloatingWindowProvider):
    def __init__(self, windows_by_pid, permissions=Granted, error=None):
        super().__init__(permissions)
        self.windows_by_pid = windows_by_pid
        self.error = error
        self.queried = []

    def _floating_pids(self, app_name):
        self.queried.append(app_name)
        if self.error is not None:
            raise self.error
        return set(self.windows_by_pid)

    def _ax_windows(self, pid):
        return list(self.windows_by_pid.get(pid, []))

    def _ax_title(self, window):
        return window


def test_enumerate_builds_entries():
    provider = StubProvider({700: ["Chat"], 500: ["Search", ""]})
    entries = provider.enumerate("Alter")
    assert [(e.pid, e.window_title) for e in entries] == [(500, "Search"), (700, "Chat")]
    assert entries[0].id == "alter-500-0-search"
    assert entries[0].display_name == "Alter - Search"


def test_same_titled_windows_get_distinct_ids():
    provider = StubProvider({500: ["Untitled", "Untitled"], 501: ["Untitled"]})
    entries = provider.enumerate("Alter")
    assert [e.id for e in entries] == [
        "alter-500-0-untitled",
        "alter-500-1-untitled",
        "alter-501-2-untitled",
    ]
    assert len({e.display_name for e in entries}) == 1


def test_enumerate_without_permission_is_empty():
    provider = StubProvider({500: ["Chat"]}, permissions=Denied)
    assert provider.enumerate("Alter") == []
    assert provider.queried == []


def test_enumerate_swallows_failures():
    provider = StubProvider({}, error=RuntimeError("quartz exploded"))
    assert provider.enumerate("Alter") == []


def test_raise_window_missing_title_returns_false():
    # also False where ApplicationServices cannot be imported
    assert StubProvider({500: ["Chat"]}).raise_window(500, "Gone") is False
