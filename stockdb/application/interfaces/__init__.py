from .store_repository import StoreRepository
from .history_repository import HistoryRepository

__all__ = [
    "StoreRepository",
    "HistoryRepository",
]
