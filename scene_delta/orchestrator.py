"""Derived-document orchestration for script-save events.

Public entry points
-------------------
    analyze_revision(revision, source_doc_type, existing_doc_types) -> (SceneIndex, ChangeReport)
    derive_script_documents(event, store) -> DerivationResult | None

analyze_revision is pure.  derive_script_documents runs it and appends one
version to each of two namespaced derived documents:

    scene_graph__<source_doc_id>    Scene Index
    change_report__<source_doc_id>  Change Report

Derivation is best-effort side work of a script save: every failure is caught
and logged, and nothing propagates to the caller.  The two writes are not a
transaction; a failure between them leaves the Scene Index one version ahead.
Derivations for the same source document are serialized by a per-document
lock, so "read max version, insert max+1, clear the older current flag"
cannot interleave.
"""
from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from docstore.contract import DocumentStore
from scene_delta.analysis.continuity import resolve_continuity
from scene_delta.analysis.conventions import CueConvention
from scene_delta.analysis.diff_engine import diff_texts, no_prior_comparison
from scene_delta.analysis.hunk_mapper import map_hunks_to_scenes
from scene_delta.analysis.impact import analyze_impact, entity_deltas
from scene_delta.analysis.models import (
    ChangedScene,
    ChangeReport,
    SceneIndex,
    ScriptRevision,
    ScriptSaveEvent,
)
from scene_delta.analysis.segmenter import (
    PARSER_VERSION,
    extract_characters,
    extract_locations,
    segment_scenes,
)
from scene_delta.analysis.staleness import build_fix_plan, resolve_stale_docs
from scene_delta.contract_validate import (
    validate_change_report_model,
    validate_scene_index_model,
)
from scene_delta.schemas.change_report_v1 import dump_change_report
from scene_delta.schemas.scene_index_v1 import dump_scene_index

logger = logging.getLogger(__name__)

SCRIPT_DOC_TYPES = frozenset(
    {"feature_script", "episode_script", "season_master_script", "production_draft"}
)

SCENE_INDEX_TITLE = "Scene Index"
CHANGE_REPORT_TITLE = "Change Report"


@dataclass(frozen=True)
class DerivationResult:
    scene_index_doc_type: str
    scene_index_version_id: str
    change_report_doc_type: str
    change_report_version_id: str


# ── Naming and normalisation ──────────────────────────────────────────────────


def scene_index_doc_type(source_doc_id: str) -> str:
    return f"scene_graph__{source_doc_id}"


def change_report_doc_type(source_doc_id: str) -> str:
    return f"change_report__{source_doc_id}"


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


# ── Pure analysis ─────────────────────────────────────────────────────────────


def analyze_revision(
    revision: ScriptRevision,
    source_doc_type: str,
    existing_doc_types: Iterable[str] = (),
    convention: Optional[CueConvention] = None,
) -> Tuple[SceneIndex, ChangeReport]:
    """Run the whole pipeline for one revision; no I/O."""
    new_text = normalize_newlines(revision.text)
    new_scenes = segment_scenes(new_text)

    scene_index = SceneIndex(
        parser_version=PARSER_VERSION,
        source_doc_id=revision.source_doc_id,
        source_version_id=revision.version_id,
        normalized_length=len(new_text),
        scenes=new_scenes,
    )

    if revision.previous_text is None:
        old_text = ""
        old_scenes = []
        diff = no_prior_comparison(new_text)
        changed = []
        flags = []
    else:
        old_text = normalize_newlines(revision.previous_text)
        old_scenes = segment_scenes(old_text)
        diff = diff_texts(old_text, new_text)
        affected = map_hunks_to_scenes(old_text, diff.hunks, old_scenes)
        changed = resolve_continuity(old_scenes, new_scenes, affected)
        flags = analyze_impact(old_text, new_text, old_scenes, new_scenes, convention)

    stale_docs = resolve_stale_docs(
        diff.stats.change_pct, flags, len(changed), existing_doc_types
    )
    added_chars, removed_chars = entity_deltas(
        extract_characters(old_text, convention), extract_characters(new_text, convention)
    )
    added_locs, removed_locs = entity_deltas(
        extract_locations(old_scenes), extract_locations(new_scenes)
    )

    report = ChangeReport(
        source_doc_id=revision.source_doc_id,
        source_doc_type=source_doc_type,
        from_version_id=revision.previous_version_id,
        to_version_id=revision.version_id,
        stats=diff.stats,
        diff_hunks=diff.hunks,
        changed_scene_ids=[s.scene_id for s in changed],
        changed_scenes=[
            ChangedScene(scene_id=s.scene_id, ordinal=s.ordinal, slugline=s.slugline)
            for s in changed
        ],
        impact_flags=flags,
        stale_docs=stale_docs,
        fix_plan=build_fix_plan(flags),
        added_characters=added_chars,
        removed_characters=removed_chars,
        added_locations=added_locs,
        removed_locations=removed_locs,
    )
    return scene_index, report


# ── Persistence ───────────────────────────────────────────────────────────────


# Entries vanish once no derivation holds or waits on the lock.
_LOCKS: "weakref.WeakValueDictionary[Tuple[str, str], threading.Lock]" = weakref.WeakValueDictionary()
_LOCKS_GUARD = threading.Lock()


def _derivation_lock(project_id: str, source_doc_id: str) -> threading.Lock:
    with _LOCKS_GUARD:
        key = (project_id, source_doc_id)
        lock = _LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _LOCKS[key] = lock
        return lock


def append_derived_version(
    store: DocumentStore,
    project_id: str,
    doc_type: str,
    title: str,
    payload: str,
    author_id: str,
) -> str:
    """Find-or-create the (project, doc_type) document and append a current version.

    Callers must hold the derivation lock for the source document.
    """
    document_id = store.find_document(project_id, doc_type)
    if document_id is None:
        document_id = store.create_document(project_id, doc_type, title)
    next_number = store.get_max_version_number(document_id) + 1
    # Insert before clearing: a failed insert leaves the previous version current.
    version_id = store.insert_version(document_id, next_number, payload, author_id)
    store.clear_current_flag(document_id, keep_version_number=next_number)
    return version_id


def derive_script_documents(
    event: ScriptSaveEvent,
    store: DocumentStore,
    convention: Optional[CueConvention] = None,
) -> Optional[DerivationResult]:
    """Derive and persist the Scene Index and Change Report for *event*.

    Returns None when the event is skipped (not a script type, empty text) or
    when derivation fails; failures are logged, never raised.
    """
    if event.source_doc_type not in SCRIPT_DOC_TYPES:
        logger.debug("skip %s: doc type %r is not a script", event.source_doc_id, event.source_doc_type)
        return None
    if not event.new_plaintext.strip():
        logger.debug("skip %s: empty script text", event.source_doc_id)
        return None

    try:
        scene_index, report = analyze_revision(
            event.revision(),
            event.source_doc_type,
            event.existing_doc_types,
            convention,
        )
        validate_scene_index_model(scene_index)
        validate_change_report_model(report)

        index_type = scene_index_doc_type(event.source_doc_id)
        report_type = change_report_doc_type(event.source_doc_id)

        with _derivation_lock(event.project_id, event.source_doc_id):
            index_version = append_derived_version(
                store, event.project_id, index_type, SCENE_INDEX_TITLE,
                dump_scene_index(scene_index), event.actor_id,
            )
            report_version = append_derived_version(
                store, event.project_id, report_type, CHANGE_REPORT_TITLE,
                dump_change_report(report), event.actor_id,
            )
    except Exception:
        logger.exception(
            "derivation failed for %s version %s", event.source_doc_id, event.new_version_id
        )
        return None

    logger.info(
        "derived %s (%d scenes) and %s (%.2f%% changed, %d flags) for %s",
        index_type, len(scene_index.scenes), report_type,
        report.stats.change_pct, len(report.impact_flags), event.source_doc_id,
    )
    return DerivationResult(
        scene_index_doc_type=index_type,
        scene_index_version_id=index_version,
        change_report_doc_type=report_type,
        change_report_version_id=report_version,
    )
