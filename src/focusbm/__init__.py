"""
focusbm - bookmark and re-focus apps, browser tabs, floating windows and tmux panes
"""

__version__ = "0.1.0"
__description__ = (
    "Bookmark and re-focus apps, browser tabs, floating windows and tmux panes on macOS"
)

from .config import Config
from .models import (
    AppState,
    Bookmark,
    BrowserState,
    DynamicWindowSet,
    FloatingWindowEntry,
    TmuxPane,
    describe,
)
from .matcher import rank, score
from .aggregator import SearchAggregator, SessionCache
from .restorer import BookmarkRestorer, RestoreOutcome, RestoreResult
from .storage import BookmarkStore, Settings

__all__ = [
    "Config",
    "AppState",
    "Bookmark",
    "BrowserState",
    "DynamicWindowSet",
    "FloatingWindowEntry",
    "TmuxPane",
    "describe",
    "rank",
    "score",
    "SearchAggregator",
    "SessionCache",
    "BookmarkRestorer",
    "RestoreOutcome",
    "RestoreResult",
    "BookmarkStore",
    "Settings",
]
