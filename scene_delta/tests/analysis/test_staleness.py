"""Tests for stale-document hints and the fix plan."""
from __future__ import annotations

from scene_delta.analysis.models import ImpactFlag
from scene_delta.analysis.staleness import build_fix_plan, resolve_stale_docs


def _flag(code: str, detail: str = "x") -> ImpactFlag:
    return ImpactFlag(code=code, detail=detail)


ALL_DOWNSTREAM = [
    "character_bible", "beat_sheet", "deck", "topline_narrative", "season_arc", "episode_grid",
]


class TestResolveStaleDocs:

    def test_character_change_with_only_character_bible(self):
        stale = resolve_stale_docs(50.0, [_flag("CHARACTER_CHANGE")], 1, ["character_bible"])
        assert len(stale) == 1
        assert stale[0].doc_type == "character_bible"

    def test_character_change_marks_both_character_docs(self):
        stale = resolve_stale_docs(0.5, [_flag("CHARACTER_CHANGE")], 0, ALL_DOWNSTREAM)
        assert [s.doc_type for s in stale] == ["character_bible", "beat_sheet"]

    def test_missing_doc_types_are_never_reported(self):
        assert resolve_stale_docs(90.0, [_flag("CHARACTER_CHANGE"), _flag("NEC_RISK")], 9, []) == []

    def test_large_change_marks_summary_and_arc_docs(self):
        stale = resolve_stale_docs(1.5, [], 0, ALL_DOWNSTREAM)
        assert [s.doc_type for s in stale] == [
            "deck", "topline_narrative", "season_arc", "episode_grid",
        ]

    def test_small_change_marks_nothing(self):
        assert resolve_stale_docs(1.0, [], 2, ALL_DOWNSTREAM) == []

    def test_escalation_marks_summary_docs_even_for_small_change(self):
        stale = resolve_stale_docs(0.2, [_flag("NEC_RISK")], 0, ["deck", "season_arc"])
        assert [s.doc_type for s in stale] == ["deck"]

    def test_three_changed_scenes_mark_arc_docs(self):
        stale = resolve_stale_docs(0.2, [], 3, ["deck", "season_arc", "episode_grid"])
        assert [s.doc_type for s in stale] == ["season_arc", "episode_grid"]

    def test_each_doc_type_reported_once(self):
        stale = resolve_stale_docs(
            80.0,
            [_flag("CHARACTER_CHANGE"), _flag("CHARACTER_CHANGE"), _flag("NEC_RISK")],
            5,
            ALL_DOWNSTREAM,
        )
        doc_types = [s.doc_type for s in stale]
        assert len(doc_types) == len(set(doc_types)) == len(ALL_DOWNSTREAM)

    def test_reasons_are_filled(self):
        stale = resolve_stale_docs(12.5, [], 0, ["deck"])
        assert stale[0].reason == "Script changed by 12.5%"


class TestBuildFixPlan:

    def test_mapping(self):
        plan = build_fix_plan([
            _flag("CONTINUITY_RISK"),
            _flag("NEC_RISK"),
            _flag("CHARACTER_CHANGE"),
            _flag("SETUP_PAYOFF_RISK"),
        ])
        assert [p.action for p in plan] == [
            "check_nearby_references",
            "review_compliance",
            "update_character_bible",
            "verify_setup_payoff",
        ]

    def test_location_change_has_no_action(self):
        assert build_fix_plan([_flag("LOCATION_CHANGE")]) == []

    def test_one_item_per_code(self):
        plan = build_fix_plan([_flag("CHARACTER_CHANGE", "added"), _flag("CHARACTER_CHANGE", "removed")])
        assert len(plan) == 1

    def test_empty(self):
        assert build_fix_plan([]) == []
