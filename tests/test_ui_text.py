"""Tests for the text the panel and tray show; no widgets are created."""

from __future__ import annotations

from datetime import datetime

import pytest

from fakes import app_bookmark, make_pane, window
from focusbm.errors import NotFoundError
from focusbm.models import BookmarkItem, FloatingWindowItem, TmuxPaneItem
from focusbm.restorer import ContextRestoreEntry, ContextRestoreReport, RestoreOutcome, RestoreResult
from focusbm.search_panel import item_text
from focusbm.system_tray import report_message


def test_item_text():
    assert item_text(BookmarkItem(app_bookmark("notes", app_name="Notes", title="Inbox", tag="work"))) == (
        "notes    Notes: Inbox    [work]"
    )
    assert item_text(FloatingWindowItem(window("Alter", "Chat"))) == "🪟 Alter - Chat"
    pane = make_pane(session="dev", window_index=1, command="claude", path="/src/api")
    assert item_text(TmuxPaneItem(pane)) == "❓ ○ Claude Code - api    dev:1"


def test_item_text_unknown():
    with pytest.raises(TypeError):
        item_text("notes")


def make_report(outcomes, cancelled=False):
    items = [
        ContextRestoreEntry(
            alias,
            alias,
            RestoreResult(
                outcome,
                reason=NotFoundError("gone") if outcome is RestoreOutcome.FAILED else None,
            ),
        )
        for alias, outcome in outcomes
    ]
    def count(outcome):
        return sum(1 for _, it in outcomes if it is outcome)

    now = datetime.now()
    return ContextRestoreReport(
        tag="work",
        started_at=now,
        finished_at=now,
        total=len(outcomes),
        restored_count=count(RestoreOutcome.RESTORED),
        failed_count=count(RestoreOutcome.FAILED),
        skipped_count=count(RestoreOutcome.NOT_RESTORABLE),
        cancelled=cancelled,
        items=items,
    )


def test_report_message_success():
    report = make_report([("a", RestoreOutcome.RESTORED), ("b", RestoreOutcome.NOT_RESTORABLE)])
    assert report_message(report) == ("Context Restored", "Restored 1/2, skipped 1 for 'work'")


def test_report_message_failures():
    report = make_report([("a", RestoreOutcome.RESTORED), ("b", RestoreOutcome.FAILED)])
    assert report_message(report) == ("Restore Completed With Failures", "Restored 1/2; failed: b")


def test_report_message_cancelled():
    report = make_report([("a", RestoreOutcome.RESTORED)], cancelled=True)
    assert report_message(report)[0] == "Restore Cancelled"
