"""Pick the storage backend from configuration."""

from server.config import DATA_DIR, DB_PATH, STORAGE_BACKEND
from storage.base import Storage
from storage.file_store import FileStorage
from storage.sqlite_store import SqliteStorage


def create_storage(backend: str = STORAGE_BACKEND, data_dir: str = DATA_DIR, db_path: str = DB_PATH) -> Storage:
    if backend == "files":
        return FileStorage(data_dir)
    if backend == "sqlite":
        return SqliteStorage(db_path)
    raise ValueError(f"Unknown storage backend: {backend!r} (expected 'sqlite' or 'files')")
