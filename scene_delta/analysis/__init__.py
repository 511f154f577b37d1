"""Script-change analysis stages: segment, diff, map, resolve, assess."""

from scene_delta.analysis.continuity import match_scenes, resolve_continuity
from scene_delta.analysis.diff_engine import diff_texts, no_prior_comparison
from scene_delta.analysis.hunk_mapper import map_hunks_to_scenes
from scene_delta.analysis.impact import analyze_impact
from scene_delta.analysis.models import (
    ChangeReport,
    ChangeStats,
    ChangedScene,
    DiffHunk,
    DiffResult,
    FixPlanItem,
    ImpactFlag,
    Scene,
    SceneIndex,
    ScriptRevision,
    ScriptSaveEvent,
    StaleDoc,
)
from scene_delta.analysis.segmenter import extract_characters, extract_locations, segment_scenes
from scene_delta.analysis.staleness import build_fix_plan, resolve_stale_docs

__all__ = [
    "analyze_impact",
    "build_fix_plan",
    "diff_texts",
    "extract_characters",
    "extract_locations",
    "map_hunks_to_scenes",
    "match_scenes",
    "no_prior_comparison",
    "resolve_continuity",
    "resolve_stale_docs",
    "segment_scenes",
    "ChangeReport",
    "ChangeStats",
    "ChangedScene",
    "DiffHunk",
    "DiffResult",
    "FixPlanItem",
    "ImpactFlag",
    "Scene",
    "SceneIndex",
    "ScriptRevision",
    "ScriptSaveEvent",
    "StaleDoc",
]
