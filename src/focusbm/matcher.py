"""
Subsequence fuzzy matching used by the search panel
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")

START_BONUS = 10
BOUNDARY_BONUS = 5
MATCH_POINT = 1
SEPARATORS = frozenset(" -_")


def score(text: str, query: str) -> int | None:
    """Score ``text`` against ``query``.

    Returns None unless every query character occurs in ``text`` in order
    (case-insensitive). A match at position 0 earns 10, a match right after a
    space, hyphen or underscore earns 5, and every matched character earns 1.
    An empty query always scores 0.
    """
    if not query:
        return 0

    haystack = text.lower()
    total = 0
    cursor = 0
    for ch in query.lower():
        pos = haystack.find(ch, cursor)
        if pos < 0:
            return None
        if pos == 0:
            total += START_BONUS
        elif haystack[pos - 1] in SEPARATORS:
            total += BOUNDARY_BONUS
        total += MATCH_POINT
        cursor = pos + 1
    return total


def matches(text: str, query: str) -> bool:
    return score(text, query) is not None


def best_score(fields: Iterable[str | None], query: str) -> int | None:
    """Highest score across several text fields; None fields are skipped"""
    best = None
    for text in fields:
        if text is None:
            continue
        s = score(text, query)
        if s is not None and (best is None or s > best):
            best = s
    return best


def rank(
    items: Iterable[T], query: str, fields: Callable[[T], Iterable[str | None]]
) -> list[T]:
    """Drop items with no matching field and sort the rest by best score.

    The sort is stable, so items with equal scores keep their input order.
    """
    scored = []
    for item in items:
        s = best_score(fields(item), query)
        if s is not None:
            scored.append((s, item))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored]
