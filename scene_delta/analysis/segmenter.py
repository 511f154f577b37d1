"""Scene segmentation plus character-cue and location extraction.

All functions are pure: no I/O, no external state.

segment_scenes walks the text line by line with a running character offset.
Every heading line closes the open scene and opens a new one at its own
offset; the last scene closes at end of text.  Text without a single heading
yields no scenes at all, so prose documents produce an empty scene graph.
"""
from __future__ import annotations

import hashlib
import re
from typing import Iterable, List, Optional

from scene_delta.analysis.conventions import (
    DEFAULT_CONVENTION,
    HEADING_PREFIX_RE,
    CueConvention,
    is_scene_heading,
)
from scene_delta.analysis.models import Scene
from scene_delta.analysis.policy import TIME_OF_DAY

PARSER_VERSION = "scene-segmenter-1.0.0"

PREVIEW_CHARS = 200
ANCHOR_CHARS = 120

_WS_RE = re.compile(r"\s+")
# Longest alternatives first so "LATE AFTERNOON" wins over "AFTERNOON".
_TIME_SUFFIX_RE = re.compile(
    r"\s*[-–—]+\s*(?:%s)\b.*$"
    % "|".join(re.escape(t) for t in sorted(TIME_OF_DAY, key=len, reverse=True)),
    re.IGNORECASE,
)


def make_scene_id(ordinal: int, slugline: str) -> str:
    """Deterministic scene ID: "sc_" + first 12 hex chars of SHA-256("ordinal:slugline")."""
    digest = hashlib.sha256(f"{ordinal}:{slugline}".encode("utf-8")).hexdigest()
    return f"sc_{digest[:12]}"


def make_anchor(body: str) -> str:
    """Whitespace-collapsed, upper-cased prefix of a scene body."""
    return _WS_RE.sub(" ", body).strip().upper()[:ANCHOR_CHARS]


def _build_scene(text: str, ordinal: int, slugline: str, start: int, end: int, heading_len: int) -> Scene:
    body = text[start + heading_len:end]
    return Scene(
        scene_id=make_scene_id(ordinal, slugline),
        ordinal=ordinal,
        slugline=slugline,
        start=start,
        end=end,
        preview=body.strip()[:PREVIEW_CHARS],
        anchor=make_anchor(body),
    )


def segment_scenes(text: str) -> List[Scene]:
    """Split *text* into ordered scenes.

    Returns scenes with ordinals 1..n and 0 <= start < end <= len(text).
    Content above the first heading (title page, FADE IN) belongs to no scene.
    """
    scenes: List[Scene] = []
    open_start: Optional[int] = None
    open_slug = ""
    open_heading_len = 0
    offset = 0

    for line in text.split("\n"):
        if is_scene_heading(line):
            if open_start is not None:
                scenes.append(
                    _build_scene(text, len(scenes) + 1, open_slug, open_start, offset, open_heading_len)
                )
            open_start = offset
            open_slug = line.strip()
            open_heading_len = len(line)
        offset += len(line) + 1

    if open_start is not None:
        scenes.append(
            _build_scene(text, len(scenes) + 1, open_slug, open_start, len(text), open_heading_len)
        )
    return scenes


def extract_characters(text: str, convention: Optional[CueConvention] = None) -> List[str]:
    """Sorted distinct character-cue names found in *text*."""
    convention = convention or DEFAULT_CONVENTION
    names = set()
    for line in text.split("\n"):
        name = convention.match_cue(line)
        if name:
            names.add(name)
    return sorted(names)


def location_from_slugline(slugline: str) -> str:
    """"12 INT. KITCHEN - DAY" -> "KITCHEN"."""
    rest = HEADING_PREFIX_RE.sub("", slugline, count=1)
    rest = _TIME_SUFFIX_RE.sub("", rest)
    return rest.strip().upper()


def extract_locations(scenes: Iterable[Scene]) -> List[str]:
    """Sorted distinct locations named by the scenes' sluglines."""
    return sorted({loc for loc in (location_from_slugline(s.slugline) for s in scenes) if loc})
