"""Tests for FileDocumentStore: on-disk layout, versions, current pointer."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from docstore import DocumentStore, FileDocumentStore, PersistenceError


@pytest.fixture
def store(tmp_path: Path) -> FileDocumentStore:
    return FileDocumentStore(tmp_path / "store")


def _append(store: FileDocumentStore, doc_id: str, payload: str) -> str:
    n = store.get_max_version_number(doc_id) + 1
    version_id = store.insert_version(doc_id, n, payload, "alice")
    store.clear_current_flag(doc_id, keep_version_number=n)
    return version_id


class TestLayout:

    def test_satisfies_protocol(self, store):
        assert isinstance(store, DocumentStore)

    def test_create_writes_index_and_document(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        index = json.loads((store.base_dir / "projects" / "p1" / "index.json").read_text())
        assert index == {"deck": doc_id}
        doc = json.loads((store.base_dir / "documents" / doc_id / "document.json").read_text())
        assert doc["title"] == "Deck"

    def test_files_end_with_newline(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        _append(store, doc_id, "one")
        path = store.base_dir / "documents" / doc_id / "versions" / "0001.json"
        assert path.read_text(encoding="utf-8").endswith("}\n")

    def test_state_survives_a_new_store_instance(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        _append(store, doc_id, "one")
        reopened = FileDocumentStore(store.base_dir)
        assert reopened.find_document("p1", "deck") == doc_id
        assert reopened.get_current_version_text(doc_id) == "one"
        assert reopened.list_existing_doc_types("p1") == ["deck"]


class TestDocuments:

    def test_find_missing_returns_none(self, store):
        assert store.find_document("p1", "deck") is None
        assert store.list_existing_doc_types("p1") == []

    def test_duplicate_create_raises(self, store):
        store.create_document("p1", "deck", "Deck")
        with pytest.raises(PersistenceError):
            store.create_document("p1", "deck", "Deck")

    def test_get_document(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        doc = store.get_document(doc_id)
        assert (doc.project_id, doc.doc_type) == ("p1", "deck")

    def test_unknown_document_raises(self, store):
        with pytest.raises(PersistenceError):
            store.get_max_version_number("doc_missing")
        with pytest.raises(PersistenceError):
            store.clear_current_flag("doc_missing")


class TestVersions:

    def test_new_document_has_no_versions(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        assert store.get_max_version_number(doc_id) == 0
        assert store.get_current_version_text(doc_id) is None
        assert store.list_versions(doc_id) == []

    def test_append_keeps_exactly_one_current(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        for payload in ("one", "two", "three"):
            _append(store, doc_id, payload)
        rows = store.list_versions(doc_id)
        assert [r.version_number for r in rows] == [1, 2, 3]
        assert [r.is_current for r in rows] == [False, False, True]
        assert store.get_current_version_text(doc_id) == "three"

    def test_cleared_flag_leaves_no_current(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        _append(store, doc_id, "one")
        store.clear_current_flag(doc_id)
        assert store.get_current_version_text(doc_id) is None

    def test_version_files_are_never_overwritten(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        store.insert_version(doc_id, 1, "one", "alice")
        with pytest.raises(PersistenceError):
            store.insert_version(doc_id, 1, "clobber", "bob")
        assert store.list_versions(doc_id)[0].payload == "one"

    def test_invalid_version_number_raises(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        with pytest.raises(PersistenceError):
            store.insert_version(doc_id, 0, "zero", "alice")

    def test_failed_insert_leaves_previous_current(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        _append(store, doc_id, "one")
        with pytest.raises(PersistenceError):
            store.insert_version(doc_id, 1, "clobber", "bob")
        assert [r.is_current for r in store.list_versions(doc_id)] == [True]
        assert store.get_current_version_text(doc_id) == "one"

    def test_keep_restores_a_missing_pointer(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        _append(store, doc_id, "one")
        store.clear_current_flag(doc_id)
        store.clear_current_flag(doc_id, keep_version_number=1)
        assert store.get_current_version_text(doc_id) == "one"

    def test_keep_leaves_a_newer_pointer_alone(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        store.insert_version(doc_id, 1, "one", "alice")
        store.insert_version(doc_id, 2, "two", "bob")
        store.clear_current_flag(doc_id, keep_version_number=1)
        assert store.get_current_version_text(doc_id) == "two"
        assert [r.is_current for r in store.list_versions(doc_id)] == [False, True]

    def test_keep_of_missing_version_raises(self, store):
        doc_id = store.create_document("p1", "deck", "Deck")
        with pytest.raises(PersistenceError):
            store.clear_current_flag(doc_id, keep_version_number=3)
