"""
file_store.py: DocumentStore backed by JSON files (append-only versions).

Layout under <base_dir>/:

    projects/<project_id>/index.json          ← {doc_type: document_id}
    documents/<document_id>/document.json     ← DerivedDocument record
    documents/<document_id>/versions/
        0001.json                             ← immutable once written
        0002.json
        ...
    documents/<document_id>/current.json      ← {"version_number": N}

Version files are created with exclusive mode, so two writers that pick the
same number cannot both succeed: the loser gets PersistenceError.  The
is_current flag of a version row is derived from current.json, which makes
"exactly one current version" a property of a single file.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .contract import DerivedDocument, DerivedDocumentVersion, PersistenceError, make_id


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_json(path: Path, data: dict, mode: str = "w") -> None:
    with open(path, mode, encoding="utf-8") as f:
        json.dump(data, f, sort_keys=True, indent=2, ensure_ascii=False)
        f.write("\n")  # POSIX trailing newline


def _read_json(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _version_filename(version_number: int) -> str:
    return f"{version_number:04d}.json"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class FileDocumentStore:
    """DocumentStore rooted at *base_dir*; the directory is created on demand."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)
        self._lock = threading.Lock()

    # ── paths ────────────────────────────────────────────────────────────

    def _index_path(self, project_id: str) -> Path:
        return self.base_dir / "projects" / project_id / "index.json"

    def _doc_dir(self, document_id: str) -> Path:
        return self.base_dir / "documents" / document_id

    def _versions_dir(self, document_id: str) -> Path:
        return self._doc_dir(document_id) / "versions"

    def _current_path(self, document_id: str) -> Path:
        return self._doc_dir(document_id) / "current.json"

    def _load_index(self, project_id: str) -> dict:
        path = self._index_path(project_id)
        if not path.exists():
            return {}
        return _read_json(path)

    def _require_doc(self, document_id: str) -> Path:
        doc_dir = self._doc_dir(document_id)
        if not (doc_dir / "document.json").exists():
            raise PersistenceError(f"Unknown document '{document_id}' at {doc_dir}")
        return doc_dir

    def _current_number(self, document_id: str) -> Optional[int]:
        path = self._current_path(document_id)
        if not path.exists():
            return None
        return int(_read_json(path)["version_number"])

    # ── DocumentStore ────────────────────────────────────────────────────

    def get_current_version_text(self, document_id: str) -> Optional[str]:
        with self._lock:
            number = self._current_number(document_id)
            if number is None:
                return None
            path = self._versions_dir(document_id) / _version_filename(number)
            return _read_json(path)["payload"]

    def list_existing_doc_types(self, project_id: str) -> List[str]:
        with self._lock:
            return sorted(self._load_index(project_id))

    def find_document(self, project_id: str, doc_type: str) -> Optional[str]:
        with self._lock:
            return self._load_index(project_id).get(doc_type)

    def create_document(self, project_id: str, doc_type: str, title: str) -> str:
        """Create the (project_id, doc_type) document.

        Raises:
            PersistenceError: the document already exists or cannot be written.
        """
        with self._lock:
            index = self._load_index(project_id)
            if doc_type in index:
                raise PersistenceError(
                    f"Document already exists for project '{project_id}' doc_type '{doc_type}'"
                )
            doc = DerivedDocument(
                document_id=make_id("doc", project_id, doc_type),
                project_id=project_id,
                doc_type=doc_type,
                title=title,
            )
            try:
                self._versions_dir(doc.document_id).mkdir(parents=True, exist_ok=True)
                _write_json(self._doc_dir(doc.document_id) / "document.json", doc.model_dump())
                index[doc_type] = doc.document_id
                index_path = self._index_path(project_id)
                index_path.parent.mkdir(parents=True, exist_ok=True)
                _write_json(index_path, index)
            except OSError as exc:
                raise PersistenceError(f"Cannot create document '{doc_type}': {exc}") from exc
            return doc.document_id

    def get_max_version_number(self, document_id: str) -> int:
        with self._lock:
            self._require_doc(document_id)
            numbers = [int(p.stem) for p in self._versions_dir(document_id).glob("*.json")]
            return max(numbers, default=0)

    def clear_current_flag(
        self, document_id: str, keep_version_number: Optional[int] = None
    ) -> None:
        """Drop the current pointer, or move it to *keep_version_number*.

        insert_version already points current.json at the row it wrote, so
        with a kept version this only repairs a pointer that lags behind it.
        A pointer at a newer version is left alone.
        """
        with self._lock:
            self._require_doc(document_id)
            if keep_version_number is None:
                self._current_path(document_id).unlink(missing_ok=True)
                return
            kept = self._versions_dir(document_id) / _version_filename(keep_version_number)
            if not kept.exists():
                raise PersistenceError(f"Cannot keep missing version {kept}")
            current = self._current_number(document_id)
            if current is None or current < keep_version_number:
                _write_json(self._current_path(document_id), {"version_number": keep_version_number})

    def insert_version(
        self, document_id: str, version_number: int, payload: str, author_id: str
    ) -> str:
        """Write ``versions/<NNNN>.json`` then point current.json at it.

        The version file is written before the pointer so that a crash
        between the two leaves the new row on disk, merely not current.

        Raises:
            PersistenceError: the version number is taken or invalid, or the
                              write fails.
        """
        with self._lock:
            self._require_doc(document_id)
            try:
                row = DerivedDocumentVersion(
                    version_id=make_id("ver", document_id, version_number),
                    document_id=document_id,
                    version_number=version_number,
                    payload=payload,
                    author_id=author_id,
                )
            except ValidationError as exc:
                raise PersistenceError(f"Invalid version row for '{document_id}': {exc}") from exc

            path = self._versions_dir(document_id) / _version_filename(version_number)
            try:
                _write_json(path, row.model_dump(exclude={"is_current"}), mode="x")
            except FileExistsError as exc:
                raise PersistenceError(
                    f"Version {version_number} already exists for '{document_id}': {path}"
                ) from exc
            except OSError as exc:
                raise PersistenceError(f"Cannot write version {path}: {exc}") from exc

            _write_json(self._current_path(document_id), {"version_number": version_number})
            return row.version_id

    # ── Inspection ───────────────────────────────────────────────────────

    def get_document(self, document_id: str) -> DerivedDocument:
        with self._lock:
            doc_dir = self._require_doc(document_id)
            return DerivedDocument.model_validate(_read_json(doc_dir / "document.json"))

    def list_versions(self, document_id: str) -> List[DerivedDocumentVersion]:
        """All version rows in version-number order."""
        with self._lock:
            self._require_doc(document_id)
            current = self._current_number(document_id)
            rows = []
            for path in sorted(self._versions_dir(document_id).glob("*.json")):
                data = _read_json(path)
                data["is_current"] = data.get("version_number") == current
                rows.append(DerivedDocumentVersion.model_validate(data))
            return rows
