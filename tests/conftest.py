"""Shared fixtures: in-memory fakes for the repository ports and an open store."""

import pytest

from stockdb.application.interfaces import HistoryRepository, StoreRepository
from stockdb.application.schemas import StoreDocument
from stockdb.application.services import ChangeNotifier, DataStore, HistoryLog
from stockdb.config import get_settings
from stockdb.domain.entities import HistoryEvent


class FakeStoreRepository(StoreRepository):
    """In-memory fake store repository for unit testing."""

    def __init__(self, document: StoreDocument | None = None):
        self.document = document if document is not None else StoreDocument()
        self.saved: list[StoreDocument] = []

    @property
    def location(self) -> str:
        return "memory://stock.smd"

    def load(self) -> StoreDocument:
        return self.document

    def save(self, document: StoreDocument) -> None:
        self.document = document
        self.saved.append(document)


class FakeHistoryRepository(HistoryRepository):
    """In-memory fake history repository that only ever appends."""

    def __init__(self, events: list[HistoryEvent] | None = None):
        self.persisted: list[HistoryEvent] = list(events or [])
        self.append_calls = 0

    def load(self) -> list[HistoryEvent]:
        return list(self.persisted)

    def append(self, events: list[HistoryEvent]) -> None:
        self.append_calls += 1
        self.persisted.extend(events)


@pytest.fixture(autouse=True)
def _reset_active_store():
    """Forget any store a test left open so tests stay independent."""
    yield
    DataStore._active = None


@pytest.fixture
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store_repository() -> FakeStoreRepository:
    return FakeStoreRepository()


@pytest.fixture
def make_store_repository():
    return FakeStoreRepository


@pytest.fixture
def history_repository() -> FakeHistoryRepository:
    return FakeHistoryRepository()


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture
def store(store_repository, history_repository, notifier) -> DataStore:
    return DataStore.open(
        store_repository,
        history=HistoryLog(history_repository),
        notifier=notifier,
    )
