"""Map diff hunks (line ranges) onto the old revision's scenes."""
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from scene_delta.analysis.diff_engine import split_lines
from scene_delta.analysis.models import DiffHunk, Scene


def line_offsets(text: str) -> List[int]:
    """Character offset of every line start, plus a final entry for end of text.

    offsets[i] is where line i begins; offsets[-1] == len(text).
    """
    offsets = [0]
    for line in split_lines(text):
        offsets.append(offsets[-1] + len(line) + 1)
    offsets[-1] = min(offsets[-1], len(text))
    return offsets


def hunk_char_span(hunk: DiffHunk, offsets: Sequence[int]) -> Tuple[int, int]:
    last = len(offsets) - 1
    start = offsets[min(hunk.old_start, last)]
    end = offsets[min(hunk.old_end, last)]
    return start, end


def _overlaps(scene: Scene, start: int, end: int, text_len: int) -> bool:
    if start < end:
        return scene.start < end and start < scene.end
    # Pure insertion: the scene that contains the insertion point.  Appending
    # at end of text lands in the scene that runs to end of text.
    if start >= text_len:
        return scene.end >= text_len
    return scene.start <= start < scene.end


def map_hunks_to_scenes(old_text: str, hunks: Iterable[DiffHunk], scenes: Sequence[Scene]) -> List[int]:
    """Sorted distinct ordinals of old scenes touched by any hunk."""
    offsets = line_offsets(old_text)
    affected = set()
    for hunk in hunks:
        start, end = hunk_char_span(hunk, offsets)
        for scene in scenes:
            if _overlaps(scene, start, end, len(old_text)):
                affected.add(scene.ordinal)
    return sorted(affected)
