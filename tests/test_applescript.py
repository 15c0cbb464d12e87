"""Tests for focusbm.applescript."""

from __future__ import annotations

import pytest

from fakes import FakeRunner
from focusbm.applescript import AppleScriptBridge, capture_front_bookmark, escape_for_applescript, is_browser
from focusbm.errors import ExecutionFailedError, NotAvailableError
from focusbm.models import AppState, BrowserState


def test_escape_for_applescript():
    assert escape_for_applescript('say "hi"') == 'say \\"hi\\"'
    assert escape_for_applescript("a\\b") == "a\\\\b"
    assert escape_for_applescript("plain") == "plain"


def test_is_browser():
    assert is_browser("com.google.Chrome")
    assert is_browser("com.apple.Safari")
    assert not is_browser("com.apple.Notes")


class TestRun:
    def test_returns_stripped_stdout(self):
        runner = FakeRunner().add(["osascript"], stdout="true\n")
        assert AppleScriptBridge(runner).run("return true") == "true"
        assert runner.calls == [["osascript", "-e", "return true"]]

    def test_error_output_raises(self):
        runner = FakeRunner().add(["osascript"], stderr="execution error: nope (-1728)", returncode=1)
        with pytest.raises(ExecutionFailedError, match="AppleScript error: execution error"):
            AppleScriptBridge(runner).run("bad")

    def test_nonzero_without_stderr_returns_output(self):
        runner = FakeRunner().add(["osascript"], stdout="false", returncode=1)
        assert AppleScriptBridge(runner).run("x") == "false"

    def test_missing_osascript(self):
        runner = FakeRunner().add(["osascript"], stdout=FileNotFoundError("osascript"))
        with pytest.raises(NotAvailableError):
            AppleScriptBridge(runner).run("x")


class TestTabs:
    @pytest.mark.parametrize(("output", "expected"), [("true", True), ("false", False), ("", False)])
    def test_switch_tab_result(self, output, expected):
        runner = FakeRunner().add(["osascript"], stdout=output)
        assert AppleScriptBridge(runner).switch_tab("com.google.Chrome", 2) is expected

    def test_url_is_escaped_into_script(self):
        runner = FakeRunner().add(["osascript"], stdout="true")
        bridge = AppleScriptBridge(runner)
        assert bridge.find_and_switch_tab_by_url("com.google.Chrome", 'q="x"')
        script = runner.calls[0][2]
        assert 'tell application id "com.google.Chrome"' in script
        assert 'contains "q=\\"x\\""' in script

    def test_switch_tab_if_url_contains_uses_index(self):
        runner = FakeRunner().add(["osascript"], stdout="false")
        bridge = AppleScriptBridge(runner)
        assert not bridge.switch_tab_if_url_contains("com.brave.Browser", 4, "github.com")
        assert "URL of tab 4 of w" in runner.calls[0][2]


class TestCapture:
    def test_front_app_info(self):
        runner = FakeRunner().add(["osascript"], stdout="Notes|com.apple.Notes|Inbox | Work\n")
        assert AppleScriptBridge(runner).front_app_info() == ("Notes", "com.apple.Notes", "Inbox | Work")

    def test_browser_state(self):
        runner = FakeRunner().add(["osascript"], stdout="https://github.com/pulls|||Pull requests|||3")
        state = AppleScriptBridge(runner).browser_state("com.google.Chrome")
        assert state == BrowserState("https://github.com/pulls", "Pull requests", 3)

    def test_browser_state_without_index(self):
        runner = FakeRunner().add(["osascript"], stdout="https://a.example|||A|||x")
        assert AppleScriptBridge(runner).browser_state("com.google.Chrome").tab_index is None


class ScriptedBridge(AppleScriptBridge):
    def __init__(self, front, browser=None, browser_error=None):
        super().__init__(runner=FakeRunner())
        self.front = front
        self.browser = browser
        self.browser_error = browser_error

    def front_app_info(self):
        return self.front

    def browser_state(self, bundle_id):
        if self.browser_error is not None:
            raise self.browser_error
        return self.browser


def test_capture_front_app():
    bridge = ScriptedBridge(("Notes", "com.apple.Notes", "Inbox"))
    bookmark = capture_front_bookmark(bridge, "notes", tag="work")
    assert bookmark.state == AppState("Inbox")
    assert bookmark.bundle_id_pattern == "com.apple.Notes"
    assert bookmark.tag == "work"


def test_capture_front_browser():
    tab = BrowserState("https://github.com/pulls", "PRs", 2)
    bookmark = capture_front_bookmark(ScriptedBridge(("Google Chrome", "com.google.Chrome", "PRs"), tab), "prs")
    assert bookmark.state == tab
    assert bookmark.app_name == "Google Chrome"


def test_capture_browser_failure_falls_back_to_app_state():
    bridge = ScriptedBridge(
        ("Safari", "com.apple.Safari", "Start"),
        browser_error=ExecutionFailedError("AppleScript error: not allowed"),
    )
    assert capture_front_bookmark(bridge, "s").state == AppState("Start")


def test_capture_without_bundle_id():
    bookmark = capture_front_bookmark(ScriptedBridge(("Thing", "", "")), "thing")
    assert bookmark.bundle_id_pattern is None
