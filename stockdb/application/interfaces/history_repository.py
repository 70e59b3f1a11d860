"""Abstract repository interface (port) for the append-only history."""

from abc import ABC, abstractmethod

from stockdb.domain.entities import HistoryEvent


class HistoryRepository(ABC):
    """Port for history persistence. Implementations only ever append."""

    @abstractmethod
    def load(self) -> list[HistoryEvent]:
        """Return every previously persisted event, oldest first."""
        ...

    @abstractmethod
    def append(self, events: list[HistoryEvent]) -> None:
        """Append events after the existing ones without touching them."""
        ...
