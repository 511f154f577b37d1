"""Heuristic impact flags for a script revision.

Pure function of (old text, new text, old scenes, new scenes).  Flags are
hints for a human reader; identical inputs never raise a flag.

Flag order is fixed: CHARACTER_CHANGE (added, then removed), CONTINUITY_RISK,
NEC_RISK, LOCATION_CHANGE, SETUP_PAYOFF_RISK.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from scene_delta.analysis.conventions import CueConvention
from scene_delta.analysis.models import ImpactFlag, Scene
from scene_delta.analysis.policy import ESCALATION_TERMS
from scene_delta.analysis.segmenter import extract_characters, extract_locations

SCENE_SHIFT_THRESHOLD = 2


def entity_deltas(
    old_items: Sequence[str], new_items: Sequence[str]
) -> Tuple[List[str], List[str]]:
    """(added, removed), each sorted."""
    old_set, new_set = set(old_items), set(new_items)
    return sorted(new_set - old_set), sorted(old_set - new_set)


def new_escalation_terms(old_text: str, new_text: str) -> List[str]:
    """Escalation terms present in *new_text* but absent from *old_text* (case-insensitive)."""
    old_lc, new_lc = old_text.lower(), new_text.lower()
    return [t for t in ESCALATION_TERMS if t in new_lc and t not in old_lc]


def analyze_impact(
    old_text: str,
    new_text: str,
    old_scenes: Sequence[Scene],
    new_scenes: Sequence[Scene],
    convention: Optional[CueConvention] = None,
) -> List[ImpactFlag]:
    flags: List[ImpactFlag] = []

    added_chars, removed_chars = entity_deltas(
        extract_characters(old_text, convention), extract_characters(new_text, convention)
    )
    if added_chars:
        flags.append(ImpactFlag(
            code="CHARACTER_CHANGE", detail=f"Characters added: {', '.join(added_chars)}"
        ))
    if removed_chars:
        flags.append(ImpactFlag(
            code="CHARACTER_CHANGE", detail=f"Characters removed: {', '.join(removed_chars)}"
        ))

    # A cue is gone but the name is still mentioned somewhere.
    for name in removed_chars:
        if name in new_text:
            flags.append(ImpactFlag(
                code="CONTINUITY_RISK",
                detail=f"{name} no longer has dialogue but is still referenced",
            ))

    terms = new_escalation_terms(old_text, new_text)
    if terms:
        flags.append(ImpactFlag(
            code="NEC_RISK", detail=f"New high-severity content: {', '.join(terms)}"
        ))

    _, removed_locs = entity_deltas(extract_locations(old_scenes), extract_locations(new_scenes))
    if removed_locs:
        flags.append(ImpactFlag(
            code="LOCATION_CHANGE", detail=f"Locations removed: {', '.join(removed_locs)}"
        ))

    if abs(len(old_scenes) - len(new_scenes)) >= SCENE_SHIFT_THRESHOLD:
        flags.append(ImpactFlag(
            code="SETUP_PAYOFF_RISK",
            detail=f"Scene count changed from {len(old_scenes)} to {len(new_scenes)}",
        ))

    return flags
