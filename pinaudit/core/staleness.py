"""Staleness decisions — pure functions, one per axis.

Tags are compared by identity only; floating tag names are never reported.
Commits are compared by (possibly abbreviated) hash first, and only when
the hashes differ does the staleness window apply: a newer commit is
reported once it is at least ``window`` newer than the pinned one.
"""

from __future__ import annotations

from datetime import datetime, timedelta

INVALID_TAGS: frozenset[str] = frozenset({"latest", "nightly"})

STALENESS_WINDOW = timedelta(days=7)

SHORT_HASH_LENGTH = 7


def is_tag_stale(new_tag: str, current_tag: str) -> bool:
    """Return True if *new_tag* should be reported as an update over *current_tag*."""
    return new_tag != current_tag and new_tag.lower() not in INVALID_TAGS


def hashes_match(first: str, second: str) -> bool:
    """Return True if either hash is a prefix of the other.

    Pins are frequently abbreviated, so ``"abc1234"`` matches
    ``"abc1234def..."`` in either direction.  Empty strings never match.
    """
    if not first or not second:
        return False
    first, second = first.lower(), second.lower()
    return first.startswith(second) or second.startswith(first)


def is_commit_stale(
    current_hash: str,
    latest_hash: str,
    current_date: datetime,
    latest_date: datetime,
    *,
    window: timedelta = STALENESS_WINDOW,
) -> bool:
    """Return True if the latest commit should be reported over the pinned one.

    Matching hashes are never stale, whatever the dates say.  Otherwise the
    latest commit must be at least *window* newer than the pinned commit;
    exactly *window* counts as stale.
    """
    if hashes_match(current_hash, latest_hash):
        return False
    return latest_date >= current_date + window


def short_hash(commit_id: str) -> str:
    return commit_id[:SHORT_HASH_LENGTH]
