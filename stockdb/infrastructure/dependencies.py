"""Dependency wiring: binds the file adapters to the application services."""

from pathlib import Path

from stockdb.application.services import ChangeNotifier, DataStore, HistoryLog
from stockdb.config import get_settings
from stockdb.infrastructure.storage.json_store_file import JsonStoreRepository
from stockdb.infrastructure.storage.jsonl_history_file import (
    JsonLinesHistoryRepository,
    history_path_for,
)


def build_history_log(path: str | Path, *, enabled: bool | None = None) -> HistoryLog:
    """Provides the history log bound to the dataset at ``path``, or a disabled one."""
    settings = get_settings()
    if enabled is None:
        enabled = settings.history_enabled
    if not enabled:
        return HistoryLog.disabled()
    return HistoryLog(JsonLinesHistoryRepository(history_path_for(path, settings.history_suffix)))


def open_store(
    path: str | Path | None = None,
    *,
    history_enabled: bool | None = None,
    notifier: ChangeNotifier | None = None,
) -> DataStore:
    """Open the dataset at ``path`` (defaults to ``settings.data_file``) as the active store.

    Passing the same ``notifier`` across reopens keeps existing subscribers attached.
    """
    settings = get_settings()
    data_path = Path(path) if path is not None else Path(settings.data_file)

    # Previous store must flush its history before the new log reads the file
    DataStore.close_active()

    repository = JsonStoreRepository(
        data_path,
        pretty=settings.pretty_json,
        backup_suffix=settings.backup_suffix,
    )
    history = build_history_log(data_path, enabled=history_enabled)
    return DataStore.open(repository, history=history, notifier=notifier)
