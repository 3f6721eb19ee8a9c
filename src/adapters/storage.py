"""Storage backend selection."""

from __future__ import annotations

from core.config import AppSettings
from core.domain.errors import StorageError
from core.interfaces.storage import ProjectStore

from adapters.json_store import JsonProjectStore
from adapters.sqlite_store import SqliteProjectStore


def ensure_data_dir(settings: AppSettings) -> None:
    data_dir = settings.resolved_data_dir()
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"cannot create storage directory {data_dir}: {exc}") from exc


def build_store(settings: AppSettings | None = None) -> ProjectStore:
    """Create the data directory and open the configured backend.

    Raises `StorageError` when either step fails (fatal at startup).
    """

    settings = settings or AppSettings()
    ensure_data_dir(settings)
    if settings.storage_backend == "json":
        return JsonProjectStore(settings.resolved_data_dir() / "projects")
    return SqliteProjectStore(settings.database_path())
