# Services package
from .library_store import LibraryStore, SqlLibraryStore
from .ingestion import LibraryService, UnresolvedAuthorPolicy

__all__ = [
    "LibraryStore",
    "SqlLibraryStore",
    "LibraryService",
    "UnresolvedAuthorPolicy",
]
