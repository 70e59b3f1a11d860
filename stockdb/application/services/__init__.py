from .change_notifier import ChangeNotifier, StoreTopic
from .history_log import HistoryLog
from .data_store import DataStore
from .order_list import OrderList

__all__ = [
    "ChangeNotifier",
    "StoreTopic",
    "HistoryLog",
    "DataStore",
    "OrderList",
]
