"""StockDB: in-memory parts and BOM store with an append-only change history.

Typical use:

    from stockdb import open_store, Part, PartParameter

    with open_store("data/stock.smd") as store:
        store.add_part(Part("R1", stock="10", low_stock="5"))
        store.edit_part("R1", PartParameter.STOCK, "3")
"""

from stockdb.application.services import ChangeNotifier, DataStore, HistoryLog, OrderList, StoreTopic
from stockdb.domain.entities import (
    HistoryEvent,
    HistoryEventKind,
    Material,
    Part,
    PartParameter,
    Project,
    ProjectVersion,
)
from stockdb.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidParameterError,
    NoOpenStoreError,
    PersistenceError,
    StockDBError,
)
from stockdb.domain.versioning import compare_versions
from stockdb.infrastructure.dependencies import open_store

__all__ = [
    "ChangeNotifier",
    "DataStore",
    "HistoryLog",
    "OrderList",
    "StoreTopic",
    "HistoryEvent",
    "HistoryEventKind",
    "Material",
    "Part",
    "PartParameter",
    "Project",
    "ProjectVersion",
    "DuplicateEntityError",
    "EntityNotFoundError",
    "InvalidParameterError",
    "NoOpenStoreError",
    "PersistenceError",
    "StockDBError",
    "compare_versions",
    "open_store",
]
