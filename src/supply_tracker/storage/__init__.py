from .base import LoadedState, PersistenceBackend
from .file_backend import FileBackend
from .database_backend import DatabaseBackend
from .selection import open_backend

__all__ = [
    "LoadedState",
    "PersistenceBackend",
    "FileBackend",
    "DatabaseBackend",
    "open_backend",
]
