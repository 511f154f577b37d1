"""Scene, diff and impact data models: the records passed between pipeline stages.

Every model sets extra="ignore" so artifacts written by a newer parser still
load: unknown fields are dropped rather than rejected.  Hunks, flags, stale
docs and fix-plan items are ephemeral; they only ever live inside a Change
Report.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

ImpactCode = Literal[
    "CHARACTER_CHANGE",
    "CONTINUITY_RISK",
    "NEC_RISK",
    "LOCATION_CHANGE",
    "SETUP_PAYOFF_RISK",
]

HunkOp = Literal["insert", "delete", "replace"]


# ── Scenes ────────────────────────────────────────────────────────────────────


class Scene(BaseModel):
    """One scene of a revision: slugline plus its half-open [start, end) span.

    scene_id is derived from (ordinal, slugline) and is only stable within a
    single revision.  Cross-revision identity goes through the anchor.
    """

    model_config = ConfigDict(extra="ignore")

    scene_id: str
    ordinal: int = Field(ge=1)
    slugline: str
    start: int = Field(ge=0)
    end: int
    preview: str = ""
    anchor: str = ""

    @model_validator(mode="after")
    def _check_span(self) -> "Scene":
        if self.end <= self.start:
            raise ValueError(f"scene span must be non-empty, got [{self.start}, {self.end})")
        return self


class ChangedScene(BaseModel):
    model_config = ConfigDict(extra="ignore")

    scene_id: str
    ordinal: int = Field(ge=1)
    slugline: str


# ── Diff ──────────────────────────────────────────────────────────────────────


class DiffHunk(BaseModel):
    """A contiguous changed region.  Line ranges are 0-based and half-open."""

    model_config = ConfigDict(extra="ignore")

    op: HunkOp
    old_start: int = Field(ge=0)
    old_end: int = Field(ge=0)
    new_start: int = Field(ge=0)
    new_end: int = Field(ge=0)
    before: str = ""
    after: str = ""


class ChangeStats(BaseModel):
    model_config = ConfigDict(extra="ignore")

    old_len: int = Field(ge=0)
    new_len: int = Field(ge=0)
    added: int = Field(ge=0)
    removed: int = Field(ge=0)
    change_pct: float = Field(ge=0)
    hunks: int = Field(ge=0)


class DiffResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hunks: List[DiffHunk] = []
    stats: ChangeStats


# ── Impact ────────────────────────────────────────────────────────────────────


class ImpactFlag(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: ImpactCode
    detail: str


class StaleDoc(BaseModel):
    """A downstream document that may no longer match the script.  A hint only."""

    model_config = ConfigDict(extra="ignore")

    doc_type: str
    reason: str


class FixPlanItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    action: str
    detail: str


# ── Revisions and save events ─────────────────────────────────────────────────


class ScriptRevision(BaseModel):
    """Immutable text snapshot with its (nullable) predecessor."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    source_doc_id: str
    version_id: str
    text: str
    previous_version_id: Optional[str] = None
    previous_text: Optional[str] = None


class ScriptSaveEvent(BaseModel):
    """Payload of a script-save trigger; one event per new current version."""

    model_config = ConfigDict(extra="ignore")

    project_id: str
    source_doc_id: str
    source_doc_type: str
    new_version_id: str
    new_plaintext: str
    previous_plaintext: Optional[str] = None
    previous_version_id: Optional[str] = None
    actor_id: str
    existing_doc_types: List[str] = []

    def revision(self) -> ScriptRevision:
        return ScriptRevision(
            source_doc_id=self.source_doc_id,
            version_id=self.new_version_id,
            text=self.new_plaintext,
            previous_version_id=self.previous_version_id,
            previous_text=self.previous_plaintext,
        )


# ── Derived artifacts ─────────────────────────────────────────────────────────


class SceneIndex(BaseModel):
    """Full scene graph of one script revision."""

    model_config = ConfigDict(extra="ignore")

    schema_version: Literal["1.0.0"] = "1.0.0"
    parser_version: str
    source_doc_id: str
    source_version_id: str
    normalized_length: int = Field(ge=0)
    scenes: List[Scene] = []


class ChangeReport(BaseModel):
    """What changed between two revisions and what it may have broken."""

    model_config = ConfigDict(extra="ignore")

    schema_version: Literal["1.0.0"] = "1.0.0"
    source_doc_id: str
    source_doc_type: str
    from_version_id: Optional[str] = None
    to_version_id: str
    stats: ChangeStats
    diff_hunks: List[DiffHunk] = []
    changed_scene_ids: List[str] = []
    changed_scenes: List[ChangedScene] = []
    impact_flags: List[ImpactFlag] = []
    stale_docs: List[StaleDoc] = []
    fix_plan: List[FixPlanItem] = []
    added_characters: List[str] = []
    removed_characters: List[str] = []
    added_locations: List[str] = []
    removed_locations: List[str] = []
