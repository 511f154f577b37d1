"""Screenplay formatting conventions: scene headings and character cues.

Cue detection depends on how a script is laid out.  The default convention is
the classic typewriter layout (cue names indented by 10+ spaces); scripts in
another layout supply their own CueConvention instead of patching the
segmenter.
"""
from __future__ import annotations

import re
from typing import Optional, Protocol, runtime_checkable

from scene_delta.analysis.policy import TRANSITION_WORDS

# Optional scene number ("12", "12A", "12."), then the INT/EXT marker.
SCENE_HEADING_RE = re.compile(
    r"^\s*(?:\d+[A-Z]?\.?\s+)?(?:INT\./EXT\.|INT/EXT\.|I/E\.|INT\.|EXT\.)\s*\S.*$",
    re.IGNORECASE,
)
HEADING_PREFIX_RE = re.compile(
    r"^\s*(?:\d+[A-Z]?\.?\s+)?(?:INT\./EXT\.|INT/EXT\.|I/E\.|INT\.|EXT\.)\s*",
    re.IGNORECASE,
)

_CUE_BODY = r"(?P<name>[A-Z][A-Z0-9 .'\-]{0,29}?)\s*(?:\([^)]*\))?\s*$"


def is_scene_heading(line: str) -> bool:
    return SCENE_HEADING_RE.match(line) is not None


def is_transition(name: str) -> bool:
    """True for FADE IN, CUT TO and friends, ignoring a trailing colon or period."""
    word = name.strip().rstrip(":.").strip()
    return any(word == t or word.startswith(t + " ") for t in TRANSITION_WORDS)


@runtime_checkable
class CueConvention(Protocol):
    """Decides whether a single line is a character cue."""

    def match_cue(self, line: str) -> Optional[str]:
        """Return the cue name for *line*, or None if it is not a cue."""
        ...


class IndentedCueConvention:
    """Typewriter layout: the cue name sits behind a long leading indent."""

    def __init__(self, min_indent: int = 10) -> None:
        self.min_indent = min_indent
        self._pattern = re.compile(r"^ {%d,}" % min_indent + _CUE_BODY)

    def match_cue(self, line: str) -> Optional[str]:
        if is_scene_heading(line):
            return None
        m = self._pattern.match(line.rstrip("\n"))
        if not m:
            return None
        name = m.group("name").strip()
        if not name or is_transition(name):
            return None
        return name


class FlushLeftCueConvention:
    """Fountain-style layout: unindented all-caps cues, "@" forces a cue."""

    _FORCED_RE = re.compile(r"^@(?P<name>[^(\n]{1,30}?)\s*(?:\([^)]*\))?\s*$")
    _PLAIN_RE = re.compile(r"^" + _CUE_BODY)

    def match_cue(self, line: str) -> Optional[str]:
        line = line.rstrip("\n")
        forced = self._FORCED_RE.match(line)
        if forced:
            return forced.group("name").strip() or None
        if is_scene_heading(line):
            return None
        m = self._PLAIN_RE.match(line)
        if not m:
            return None
        name = m.group("name").strip()
        if not name or is_transition(name):
            return None
        return name


DEFAULT_CONVENTION: CueConvention = IndentedCueConvention()
