"""Scene continuity: which new scene does each changed old scene become?

Scenes move when material is inserted or removed upstream, so ordinals alone
cannot re-identify them.  Matching is greedy over ascending old ordinals; for
each one the first rule that yields an unclaimed new scene wins:

    1. same slugline (case-insensitive) AND the new anchor starts with the
       first 40 characters of the old anchor
    2. same slugline
    3. nearest new scene by ordinal distance (ties go to the lower ordinal)

A new scene is claimed at most once.  An old ordinal that finds nothing is
dropped and logged.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from scene_delta.analysis.models import Scene

logger = logging.getLogger(__name__)

ANCHOR_MATCH_CHARS = 40


def _same_slug(a: Scene, b: Scene) -> bool:
    return a.slugline.casefold() == b.slugline.casefold()


def _first_unclaimed(
    candidates: Iterable[Scene],
    claimed: set,
    accept: Callable[[Scene], bool],
) -> Optional[Scene]:
    for cand in candidates:
        if cand.ordinal not in claimed and accept(cand):
            return cand
    return None


def _claim(old: Scene, new_scenes: Sequence[Scene], claimed: set) -> Optional[Scene]:
    head = old.anchor[:ANCHOR_MATCH_CHARS]

    match = _first_unclaimed(
        new_scenes, claimed, lambda s: _same_slug(old, s) and s.anchor.startswith(head)
    )
    if match is None:
        match = _first_unclaimed(new_scenes, claimed, lambda s: _same_slug(old, s))
    if match is None:
        by_distance = sorted(new_scenes, key=lambda s: (abs(s.ordinal - old.ordinal), s.ordinal))
        match = _first_unclaimed(by_distance, claimed, lambda s: True)
    return match


def match_scenes(
    old_scenes: Sequence[Scene],
    new_scenes: Sequence[Scene],
    affected_ordinals: Iterable[int],
) -> Dict[int, int]:
    """Map affected old ordinals to new ordinals.  Values are distinct."""
    old_by_ordinal = {s.ordinal: s for s in old_scenes}
    ordered_new = sorted(new_scenes, key=lambda s: s.ordinal)
    claimed: set = set()
    mapping: Dict[int, int] = {}

    for ordinal in sorted(set(affected_ordinals)):
        old = old_by_ordinal.get(ordinal)
        if old is None:
            logger.warning("continuity: old scene %d not in old scene list; dropped", ordinal)
            continue
        match = _claim(old, ordered_new, claimed)
        if match is None:
            logger.warning(
                "continuity: no unclaimed new scene for old scene %d (%s); dropped",
                ordinal, old.slugline,
            )
            continue
        claimed.add(match.ordinal)
        mapping[ordinal] = match.ordinal
    return mapping


def resolve_continuity(
    old_scenes: Sequence[Scene],
    new_scenes: Sequence[Scene],
    affected_ordinals: Iterable[int],
) -> List[Scene]:
    """New-revision scenes corresponding to the affected old ones, by new ordinal."""
    mapping = match_scenes(old_scenes, new_scenes, affected_ordinals)
    new_by_ordinal = {s.ordinal: s for s in new_scenes}
    return [new_by_ordinal[o] for o in sorted(mapping.values())]
