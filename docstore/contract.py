"""
contract.py: Document Store interface and the typed records it hands out.

The analysis pipeline never talks to a concrete backend.  It receives an
object satisfying DocumentStore and drives it through the find-or-create,
then append-version protocol.  Rows crossing this boundary are validated
pydantic records, never loose dicts.
"""

from __future__ import annotations

import hashlib
from typing import List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class PersistenceError(RuntimeError):
    """A store operation (create / insert / read) failed."""


def make_id(prefix: str, *parts: object) -> str:
    """Deterministic id: prefix + "_" + first 16 hex chars of SHA-256 over the parts."""
    digest = hashlib.sha256(":".join(str(p) for p in parts).encode("utf-8")).hexdigest()
    return f"{prefix}_{digest[:16]}"


class DerivedDocument(BaseModel):
    """One logical document per (project_id, doc_type)."""

    model_config = ConfigDict(extra="ignore")

    document_id: str
    project_id: str
    doc_type: str
    title: str


class DerivedDocumentVersion(BaseModel):
    """An append-only version row.  Exactly one row per document is current."""

    model_config = ConfigDict(extra="ignore")

    version_id: str
    document_id: str
    version_number: int = Field(ge=1)
    payload: str
    author_id: str
    is_current: bool = True


@runtime_checkable
class DocumentStore(Protocol):

    def get_current_version_text(self, document_id: str) -> Optional[str]:
        ...

    def list_existing_doc_types(self, project_id: str) -> List[str]:
        ...

    def find_document(self, project_id: str, doc_type: str) -> Optional[str]:
        ...

    def create_document(self, project_id: str, doc_type: str, title: str) -> str:
        ...

    def get_max_version_number(self, document_id: str) -> int:
        """Highest version number for *document_id*, 0 when it has none."""
        ...

    def clear_current_flag(
        self, document_id: str, keep_version_number: Optional[int] = None
    ) -> None:
        """Unflag every current row except version *keep_version_number*."""
        ...

    def insert_version(
        self, document_id: str, version_number: int, payload: str, author_id: str
    ) -> str:
        """Insert a current version row and return its version_id."""
        ...
