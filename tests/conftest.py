"""Pytest configuration and shared fixtures."""

import json
import os
import sys

import pytest

# Ensure src/ is importable when tests run from repo root
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from stockmgr.inventory.db import MemoryKeyValueDB  # noqa: E402
from stockmgr.inventory.store import STORAGE_KEY, InventoryRepository, RecordStore  # noqa: E402


SCENARIO_ITEMS = [
    {"id": "1", "name": "牛乳", "category": "food", "quantity": 1, "threshold": 2, "price": 230},
    {"id": "2", "name": "卵", "category": "food", "quantity": 0, "threshold": 1, "price": 280},
]


def make_store(items, kv=None):
    """Build a RecordStore whose storage already holds ``items``."""
    kv = kv if kv is not None else MemoryKeyValueDB()
    kv.set(STORAGE_KEY, json.dumps(items, ensure_ascii=False))
    return RecordStore(InventoryRepository(kv))


@pytest.fixture
def kv():
    return MemoryKeyValueDB()


@pytest.fixture
def store(kv):
    """Store seeded with the first-launch sample items."""
    return RecordStore(InventoryRepository(kv))


@pytest.fixture
def scenario_store(kv):
    return make_store(SCENARIO_ITEMS, kv)


@pytest.fixture
def empty_store(kv):
    return RecordStore(InventoryRepository(kv), seed=False)
