import pytest

from stockmgr.inventory.db import KeyValueDB, MemoryKeyValueDB, StorageError, get_json, set_json
from stockmgr.inventory.state import CheckedState
from stockmgr.inventory.store import InventoryRepository, RecordStore


@pytest.fixture
def sqlite_kv(tmp_path):
    db = KeyValueDB(tmp_path / "stock.db")
    yield db
    db.close()


def test_sqlite_get_set_delete(sqlite_kv):
    assert sqlite_kv.get("a") is None
    sqlite_kv.set("a", "1")
    sqlite_kv.set("a", "2")
    assert sqlite_kv.get("a") == "2"
    sqlite_kv.delete("a")
    assert sqlite_kv.get("a") is None


def test_sqlite_prefix_keys_are_literal(sqlite_kv):
    sqlite_kv.set("checked:1", "true")
    sqlite_kv.set("checked:2", "true")
    sqlite_kv.set("checked_x", "true")
    sqlite_kv.set("stock_manager_data", "[]")
    assert sqlite_kv.keys("checked:") == ["checked:1", "checked:2"]
    assert sqlite_kv.keys("checked_") == ["checked_x"]


def test_sqlite_store_persists_across_connections(tmp_path):
    path = tmp_path / "stock.db"
    db = KeyValueDB(path)
    store = RecordStore(InventoryRepository(db))
    record = store.create({"name": "納豆", "category": "food", "quantity": 3, "threshold": 2, "price": 98})
    store.replace_order([record.id, "1", "2", "3"])
    CheckedState(db).set("2")
    db.close()

    db = KeyValueDB(path)
    reopened = RecordStore(InventoryRepository(db))
    assert [r.name for r in reopened.records] == ["納豆", "牛乳", "卵", "洗濯洗剤"]
    assert CheckedState(db).is_checked("2")
    db.close()


def test_json_helpers_keep_japanese_readable():
    kv = MemoryKeyValueDB()
    set_json(kv, "k", {"name": "牛乳"})
    assert "牛乳" in kv.get("k")
    assert get_json(kv, "k") == {"name": "牛乳"}
    assert get_json(kv, "missing") is None


def test_non_list_inventory_is_rejected():
    kv = MemoryKeyValueDB({"stock_manager_data": '{"id": "1"}'})
    with pytest.raises(StorageError):
        InventoryRepository(kv).load()
