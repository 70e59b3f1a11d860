from .store_document import (
    MaterialRecord,
    PartRecord,
    ProjectRecord,
    StoreDocument,
    VersionRecord,
)
from .history import HistoryEventRecord

__all__ = [
    "MaterialRecord",
    "PartRecord",
    "ProjectRecord",
    "StoreDocument",
    "VersionRecord",
    "HistoryEventRecord",
]
