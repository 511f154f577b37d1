"""Coarse single-region text diff between two script revisions.

Not a general LCS diff.  The longest common line prefix and the longest common
(non-overlapping) line suffix are trimmed; whatever remains in between is one
changed region.  Regenerate-and-replace edits rewrite one contiguous block, so
a single hunk describes them well and the result is fully deterministic.

change_pct = round(((added + removed) / (2 * max(old_len, 1))) * 10000) / 100

change_pct is a churn metric and is not clamped to [0, 100]: growing a short
text into a long one reports well over 100.
"""
from __future__ import annotations

from typing import List, Optional

from scene_delta.analysis.models import ChangeStats, DiffHunk, DiffResult

PREVIEW_LINES = 5
PREVIEW_CHARS = 200


def split_lines(text: str) -> List[str]:
    """Split on "\\n".  The empty text has zero lines, not one empty line."""
    if not text:
        return []
    return text.split("\n")


def _preview(lines: List[str]) -> str:
    return "\n".join(lines[:PREVIEW_LINES])[:PREVIEW_CHARS]


def _region_chars(lines: List[str]) -> int:
    return len("\n".join(lines))


def compute_change_pct(added: int, removed: int, old_len: int) -> float:
    return round(((added + removed) / (2 * max(old_len, 1))) * 10000) / 100


def diff_texts(old: str, new: str) -> DiffResult:
    """Diff *old* against *new*; at most one hunk.

    Hunk op is "insert" when the old side of the region is empty, "delete"
    when the new side is empty, "replace" otherwise.  Identical inputs give
    no hunks and change_pct == 0.
    """
    old_lines = split_lines(old)
    new_lines = split_lines(new)
    n_old, n_new = len(old_lines), len(new_lines)

    prefix = 0
    limit = min(n_old, n_new)
    while prefix < limit and old_lines[prefix] == new_lines[prefix]:
        prefix += 1

    suffix = 0
    limit -= prefix
    while suffix < limit and old_lines[n_old - 1 - suffix] == new_lines[n_new - 1 - suffix]:
        suffix += 1

    removed_lines = old_lines[prefix:n_old - suffix]
    added_lines = new_lines[prefix:n_new - suffix]

    hunk: Optional[DiffHunk] = None
    if removed_lines or added_lines:
        if not removed_lines:
            op = "insert"
        elif not added_lines:
            op = "delete"
        else:
            op = "replace"
        hunk = DiffHunk(
            op=op,
            old_start=prefix,
            old_end=n_old - suffix,
            new_start=prefix,
            new_end=n_new - suffix,
            before=_preview(removed_lines),
            after=_preview(added_lines),
        )

    added = _region_chars(added_lines)
    removed = _region_chars(removed_lines)
    hunks = [hunk] if hunk is not None else []
    return DiffResult(
        hunks=hunks,
        stats=ChangeStats(
            old_len=len(old),
            new_len=len(new),
            added=added,
            removed=removed,
            change_pct=compute_change_pct(added, removed, len(old)),
            hunks=len(hunks),
        ),
    )


def no_prior_comparison(new: str) -> DiffResult:
    """Result for a first revision: everything is new, nothing to compare against."""
    return DiffResult(
        hunks=[],
        stats=ChangeStats(
            old_len=0,
            new_len=len(new),
            added=len(new),
            removed=0,
            change_pct=100.0,
            hunks=0,
        ),
    )
