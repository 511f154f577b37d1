# Document Store: interface, typed records, in-memory and on-disk backends
from .contract import DerivedDocument, DerivedDocumentVersion, DocumentStore, PersistenceError
from .file_store import FileDocumentStore
from .memory_store import InMemoryDocumentStore

__all__ = [
    "DerivedDocument",
    "DerivedDocumentVersion",
    "DocumentStore",
    "PersistenceError",
    "FileDocumentStore",
    "InMemoryDocumentStore",
]
