"""Abstract repository interface (port) for the persisted store document."""

from abc import ABC, abstractmethod

from stockdb.application.schemas import StoreDocument


class StoreRepository(ABC):
    """Port for loading and saving the whole dataset: implemented in the infrastructure layer."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the backing store (for logs and errors)."""
        ...

    @abstractmethod
    def load(self) -> StoreDocument:
        """Read the document. An absent or empty source yields an empty document.

        Raises PersistenceError if the source exists but cannot be read or parsed.
        """
        ...

    @abstractmethod
    def save(self, document: StoreDocument) -> None:
        """Replace the persisted document atomically.

        Raises PersistenceError on failure; the previous content stays intact.
        """
        ...
