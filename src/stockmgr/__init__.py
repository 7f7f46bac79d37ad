"""stockmgr - household stock and shopping list manager"""

__version__ = "0.1.0"

from stockmgr.inventory.db import KeyValueDB, MemoryKeyValueDB
from stockmgr.inventory.store import InventoryRepository, RecordStore
from stockmgr.vision.client import get_provider

__all__ = [
    "KeyValueDB",
    "MemoryKeyValueDB",
    "InventoryRepository",
    "RecordStore",
    "get_provider",
]
