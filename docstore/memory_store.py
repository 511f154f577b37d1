"""
memory_store.py: In-memory DocumentStore.

Backs unit tests and single-process tools.  Each operation holds the store
lock, so individual calls are atomic; sequencing across calls (read max,
insert max+1) is the caller's job.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from .contract import DerivedDocument, DerivedDocumentVersion, PersistenceError, make_id


class InMemoryDocumentStore:

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: Dict[str, DerivedDocument] = {}
        self._by_type: Dict[Tuple[str, str], str] = {}
        self._versions: Dict[str, List[DerivedDocumentVersion]] = {}

    # ── DocumentStore ─────────────────────────────────────────────────────

    def get_current_version_text(self, document_id: str) -> Optional[str]:
        with self._lock:
            current = [r for r in self._versions.get(document_id, []) if r.is_current]
            if not current:
                return None
            # Between insert and clear the previous row is still flagged.
            return max(current, key=lambda r: r.version_number).payload

    def list_existing_doc_types(self, project_id: str) -> List[str]:
        with self._lock:
            return sorted(dt for (pid, dt) in self._by_type if pid == project_id)

    def find_document(self, project_id: str, doc_type: str) -> Optional[str]:
        with self._lock:
            return self._by_type.get((project_id, doc_type))

    def create_document(self, project_id: str, doc_type: str, title: str) -> str:
        with self._lock:
            key = (project_id, doc_type)
            if key in self._by_type:
                raise PersistenceError(
                    f"Document already exists for project '{project_id}' doc_type '{doc_type}'"
                )
            doc = DerivedDocument(
                document_id=make_id("doc", project_id, doc_type),
                project_id=project_id,
                doc_type=doc_type,
                title=title,
            )
            self._documents[doc.document_id] = doc
            self._by_type[key] = doc.document_id
            self._versions[doc.document_id] = []
            return doc.document_id

    def get_max_version_number(self, document_id: str) -> int:
        with self._lock:
            rows = self._rows(document_id)
            return max((r.version_number for r in rows), default=0)

    def clear_current_flag(
        self, document_id: str, keep_version_number: Optional[int] = None
    ) -> None:
        with self._lock:
            for row in self._rows(document_id):
                if row.version_number != keep_version_number:
                    row.is_current = False

    def insert_version(
        self, document_id: str, version_number: int, payload: str, author_id: str
    ) -> str:
        with self._lock:
            rows = self._rows(document_id)
            if any(r.version_number >= version_number for r in rows):
                raise PersistenceError(
                    f"Version {version_number} is not above the existing versions of '{document_id}'"
                )
            try:
                row = DerivedDocumentVersion(
                    version_id=make_id("ver", document_id, version_number),
                    document_id=document_id,
                    version_number=version_number,
                    payload=payload,
                    author_id=author_id,
                    is_current=True,
                )
            except ValidationError as exc:
                raise PersistenceError(f"Invalid version row for '{document_id}': {exc}") from exc
            rows.append(row)
            return row.version_id

    # ── Inspection ────────────────────────────────────────────────────────

    def get_document(self, document_id: str) -> DerivedDocument:
        with self._lock:
            if document_id not in self._documents:
                raise PersistenceError(f"Unknown document '{document_id}'")
            return self._documents[document_id]

    def list_versions(self, document_id: str) -> List[DerivedDocumentVersion]:
        with self._lock:
            return [r.model_copy() for r in self._rows(document_id)]

    def _rows(self, document_id: str) -> List[DerivedDocumentVersion]:
        if document_id not in self._versions:
            raise PersistenceError(f"Unknown document '{document_id}'")
        return self._versions[document_id]
