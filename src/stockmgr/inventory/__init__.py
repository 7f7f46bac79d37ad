"""在庫・買い物リスト管理"""

from .db import KeyValueDB, MemoryKeyValueDB, StorageError
from .derive import (
    InventoryStats,
    estimated_cost,
    filter_by_category,
    is_low_stock,
    shopping_list,
    shortfall,
    summarize,
    total_inventory_value,
    total_shopping_estimate,
)
from .models import ClassifierGuess, InvalidItemError, InventoryRecord, Preferences, PrefillRequest
from .reorder import ReorderMismatchError, reconcile_order
from .shopping import purchase_checked
from .state import CheckedState, PreferencesStore
from .store import InventoryRepository, RecordStore

__all__ = [
    "CheckedState",
    "ClassifierGuess",
    "InvalidItemError",
    "InventoryRecord",
    "InventoryRepository",
    "InventoryStats",
    "KeyValueDB",
    "MemoryKeyValueDB",
    "Preferences",
    "PreferencesStore",
    "PrefillRequest",
    "RecordStore",
    "ReorderMismatchError",
    "StorageError",
    "estimated_cost",
    "filter_by_category",
    "is_low_stock",
    "purchase_checked",
    "reconcile_order",
    "shopping_list",
    "shortfall",
    "summarize",
    "total_inventory_value",
    "total_shopping_estimate",
]
