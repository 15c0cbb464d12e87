"""Fixtures shared by the focusbm tests."""

from __future__ import annotations

import pytest

from fakes import FakeProcessDirectory
from focusbm.processes import RunningProcess


@pytest.fixture
def processes():
    return FakeProcessDirectory(
        [
            RunningProcess(pid=101, name="Safari", bundle_id="com.apple.Safari"),
            RunningProcess(pid=102, name="Google Chrome", bundle_id="com.google.Chrome", is_frontmost=True),
            RunningProcess(pid=103, name="iTerm2", bundle_id="com.googlecode.iterm2"),
            RunningProcess(pid=500, name="Alter", bundle_id="com.alter.app"),
        ]
    )
