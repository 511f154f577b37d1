"""Stale-document hints and the remediation plan.

resolve_stale_docs never forces a regeneration; it names existing downstream
documents that may no longer reflect the script.  build_fix_plan turns flag
codes into short actions.  LOCATION_CHANGE has no action: removed locations
are already listed in the Change Report's removed_locations.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from scene_delta.analysis.models import FixPlanItem, ImpactFlag, StaleDoc

CHARACTER_DOC_TYPES = ("character_bible", "beat_sheet")
SUMMARY_DOC_TYPES = ("deck", "topline_narrative")
ARC_DOC_TYPES = ("season_arc", "episode_grid")

CHANGE_PCT_THRESHOLD = 1.0
CHANGED_SCENES_THRESHOLD = 3

_FIX_ACTIONS = {
    "CONTINUITY_RISK": ("check_nearby_references", "Check nearby scenes for references to removed characters"),
    "NEC_RISK": ("review_compliance", "Review new high-severity content for compliance"),
    "CHARACTER_CHANGE": ("update_character_bible", "Update the character bible for added or removed characters"),
    "SETUP_PAYOFF_RISK": ("verify_setup_payoff", "Verify setup/payoff chains across the shifted scenes"),
}


def resolve_stale_docs(
    change_pct: float,
    flags: Sequence[ImpactFlag],
    changed_scene_count: int,
    existing_doc_types: Iterable[str],
) -> List[StaleDoc]:
    existing = set(existing_doc_types)
    codes = {f.code for f in flags}
    stale: List[StaleDoc] = []

    def _add(doc_types: Sequence[str], reason: str) -> None:
        for doc_type in doc_types:
            if doc_type in existing and all(s.doc_type != doc_type for s in stale):
                stale.append(StaleDoc(doc_type=doc_type, reason=reason))

    if "CHARACTER_CHANGE" in codes:
        _add(CHARACTER_DOC_TYPES, "Character set changed")

    if change_pct > CHANGE_PCT_THRESHOLD:
        _add(SUMMARY_DOC_TYPES, f"Script changed by {change_pct}%")
    elif "NEC_RISK" in codes:
        _add(SUMMARY_DOC_TYPES, "New high-severity content")

    if change_pct > CHANGE_PCT_THRESHOLD:
        _add(ARC_DOC_TYPES, f"Script changed by {change_pct}%")
    elif changed_scene_count >= CHANGED_SCENES_THRESHOLD:
        _add(ARC_DOC_TYPES, f"{changed_scene_count} scenes changed")

    return stale


def build_fix_plan(flags: Sequence[ImpactFlag]) -> List[FixPlanItem]:
    """One item per distinct flag code, in first-seen order."""
    plan: List[FixPlanItem] = []
    seen = set()
    for flag in flags:
        if flag.code in seen or flag.code not in _FIX_ACTIONS:
            continue
        seen.add(flag.code)
        action, detail = _FIX_ACTIONS[flag.code]
        plan.append(FixPlanItem(action=action, detail=detail))
    return plan
