"""Tests for focusbm.tmux."""

from __future__ import annotations

import subprocess

import pytest

from fakes import FakeProcessDirectory, FakeRunner
from focusbm.errors import ExecutionFailedError, NotAvailableError, ParseError
from focusbm.processes import RunningProcess
from focusbm.tmux import PANE_FORMAT, TmuxProvider, parse_output, terminal_glyph

GHOSTTY = RunningProcess(pid=900, name="Ghostty", bundle_id="com.mitchellh.ghostty")
ITERM = RunningProcess(pid=100, name="iTerm2", bundle_id="com.googlecode.iterm2")


class TestParseOutput:
    def test_single_record(self):
        panes = parse_output("%1||s||0||w||claude||Claude Code||/tmp")
        assert len(panes) == 1
        pane = panes[0]
        assert pane.pane_id == "%1"
        assert pane.session_name == "s"
        assert pane.window_index == 0
        assert pane.window_name == "w"
        assert pane.command == "claude"
        assert pane.title == "Claude Code"
        assert pane.current_path == "/tmp"

    def test_short_record_is_an_error(self):
        with pytest.raises(ParseError):
            parse_output("%1||s||0||w||claude||Claude Code")

    def test_short_record_among_good_ones_is_an_error(self):
        output = "%1||s||0||w||claude||t||/tmp\n%2||s||1\n"
        with pytest.raises(ParseError):
            parse_output(output)

    def test_empty_input(self):
        assert parse_output("") == []

    def test_multiple_lines_with_trailing_newline(self):
        output = "%1||a||0||w||claude||t||/tmp\n%2||b||3||x||zsh||||/home/me\n"
        panes = parse_output(output)
        assert [p.pane_id for p in panes] == ["%1", "%2"]
        assert panes[1].window_index == 3
        assert panes[1].title == ""

    def test_non_numeric_window_index(self):
        assert parse_output("%1||s||x||w||claude||t||/tmp")[0].window_index == 0

    def test_separator_inside_title_stays_in_title(self):
        pane = parse_output("%1||s||0||w||claude||a||b||/tmp")[0]
        assert pane.title == "a||b"
        assert pane.current_path == "/tmp"
        assert pane.command == "claude"


def test_pane_format_has_seven_fields():
    assert len(PANE_FORMAT.split("||")) == 7


def test_terminal_glyph():
    assert terminal_glyph("com.mitchellh.ghostty") == "👻"
    assert terminal_glyph("com.example.unknown") == "❓"
    assert terminal_glyph(None) == "❓"


class TestListAllPanes:
    def test_lists_and_tags_glyph_once_per_session(self):
        runner = FakeRunner()
        runner.add(
            ["tmux", "list-panes"],
            stdout="%1||main||0||w||claude||t||/tmp\n%2||main||1||w||zsh||||/tmp\n%3||other||0||w||aider||||/tmp\n",
        )
        runner.add(["tmux", "list-clients"], stdout="")
        provider = TmuxProvider(FakeProcessDirectory([GHOSTTY]), runner=runner)

        panes = provider.list_all_panes()

        assert [p.terminal_glyph for p in panes] == ["👻", "👻", "👻"]
        list_clients = [c for c in runner.calls if c[:2] == ["tmux", "list-clients"]]
        assert len(list_clients) == 2
        assert runner.calls[0] == ["tmux", "list-panes", "-a", "-F", PANE_FORMAT]

    def test_agent_candidates_among_listed_panes(self):
        runner = FakeRunner().add(
            ["tmux", "list-panes"],
            stdout="%1||main||0||w||claude||t||/tmp\n%2||main||1||w||zsh||Claude Code||/tmp\n",
        )
        provider = TmuxProvider(FakeProcessDirectory([]), runner=runner)
        panes = provider.list_all_panes()
        assert [p.pane_id for p in panes if p.is_agent_candidate] == ["%1"]

    def test_nonzero_exit_raises_execution_failed(self):
        runner = FakeRunner().add(["tmux", "list-panes"], stderr="no server running", returncode=1)
        provider = TmuxProvider(FakeProcessDirectory([]), runner=runner)
        with pytest.raises(ExecutionFailedError, match="no server running"):
            provider.list_all_panes()

    def test_missing_binary_raises_not_available(self):
        runner = FakeRunner().add(["tmux"], stdout=FileNotFoundError("tmux"))
        provider = TmuxProvider(FakeProcessDirectory([]), runner=runner)
        with pytest.raises(NotAvailableError):
            provider.list_all_panes()

    def test_timeout_raises_execution_failed(self):
        runner = FakeRunner().add(["tmux"], stdout=subprocess.TimeoutExpired("tmux", 5))
        provider = TmuxProvider(FakeProcessDirectory([]), runner=runner)
        with pytest.raises(ExecutionFailedError):
            provider.list_all_panes()

    def test_parse_error_propagates(self):
        runner = FakeRunner().add(["tmux", "list-panes"], stdout="garbage\n")
        provider = TmuxProvider(FakeProcessDirectory([]), runner=runner)
        with pytest.raises(ParseError):
            provider.list_all_panes()


def test_is_available():
    assert TmuxProvider(FakeProcessDirectory([]), runner=FakeRunner().add(["tmux", "info"])).is_available()
    missing = FakeRunner().add(["tmux"], stdout=FileNotFoundError("tmux"))
    assert not TmuxProvider(FakeProcessDirectory([]), runner=missing).is_available()


def test_switch_client():
    runner = FakeRunner().add(["tmux", "switch-client"])
    TmuxProvider(FakeProcessDirectory([]), runner=runner).switch_client("work", 2)
    assert runner.calls == [["tmux", "switch-client", "-t", "work:2"]]


def test_switch_client_failure():
    runner = FakeRunner().add(["tmux", "switch-client"], stderr="can't find session", returncode=1)
    with pytest.raises(ExecutionFailedError, match="can't find session"):
        TmuxProvider(FakeProcessDirectory([]), runner=runner).switch_client("gone", 0)


class TestDetectTerminalApp:
    def test_tty_owner_process(self):
        runner = FakeRunner()
        runner.add(["tmux", "list-clients"], stdout="/dev/ttys003\n")
        runner.add(["ps"], stdout="  4242   100\n")
        provider = TmuxProvider(FakeProcessDirectory([GHOSTTY, ITERM]), runner=runner)

        app = provider.detect_terminal_app("main", 0)

        assert app == ITERM
        assert ["ps", "-t", "ttys003", "-o", "pid=,ppid="] in runner.calls

    def test_no_client_uses_priority_list(self):
        runner = FakeRunner().add(["tmux", "list-clients"], stdout="")
        provider = TmuxProvider(FakeProcessDirectory([ITERM, GHOSTTY]), runner=runner)
        assert provider.detect_terminal_app("main", 0) == GHOSTTY

    def test_unknown_tty_owner_falls_back(self):
        runner = FakeRunner()
        runner.add(["tmux", "list-clients"], stdout="/dev/ttys009")
        runner.add(["ps"], stdout="  1  1\n")
        provider = TmuxProvider(FakeProcessDirectory([ITERM]), runner=runner)
        assert provider.detect_terminal_app("main", 0) == ITERM

    def test_missing_ps_falls_back_to_priority_list(self):
        runner = FakeRunner()
        runner.add(["tmux", "list-clients"], stdout="/dev/ttys003")
        runner.add(["ps"], stdout=FileNotFoundError("ps"))
        provider = TmuxProvider(FakeProcessDirectory([ITERM]), runner=runner)
        assert provider.detect_terminal_app("main", 0) == ITERM

    def test_list_clients_timeout_falls_back_to_priority_list(self):
        runner = FakeRunner().add(["tmux", "list-clients"], stdout=subprocess.TimeoutExpired("tmux", 5))
        provider = TmuxProvider(FakeProcessDirectory([GHOSTTY]), runner=runner)
        assert provider.detect_terminal_app("main", 0) == GHOSTTY

    def test_nothing_running(self):
        runner = FakeRunner().add(["tmux", "list-clients"], stdout="")
        provider = TmuxProvider(FakeProcessDirectory([]), runner=runner)
        assert provider.detect_terminal_app("main", 0) is None
