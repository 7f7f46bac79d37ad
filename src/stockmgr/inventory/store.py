"""在庫レコードストア"""

import logging
import uuid
from typing import Optional

from .db import get_json, set_json, StorageError
from .models import InvalidItemError, InventoryRecord, find_record, validate_fields
from .reorder import reconcile_order

logger = logging.getLogger(__name__)

STORAGE_KEY = "stock_manager_data"

# 初回起動時のサンプルデータ
DEFAULT_ITEMS = [
    {"id": "1", "name": "牛乳", "category": "food", "quantity": 1, "threshold": 2, "price": 230},
    {"id": "2", "name": "卵", "category": "food", "quantity": 0, "threshold": 1, "price": 280},
    {"id": "3", "name": "洗濯洗剤", "category": "goods", "quantity": 1, "threshold": 1, "price": 450},
]


class InventoryRepository:
    """在庫リストの保存先（キーバリューストア上の JSON 配列）"""

    def __init__(self, kv, key: str = STORAGE_KEY):
        self.kv = kv
        self.key = key

    def load(self) -> Optional[list[InventoryRecord]]:
        """保存済みの在庫リストを返す。未保存なら None。"""
        data = get_json(self.kv, self.key)
        if data is None:
            return None
        if not isinstance(data, list):
            raise StorageError(f"{self.key!r} is not a list")
        records = []
        seen = set()
        for d in data:
            if not isinstance(d, dict) or "id" not in d:
                raise StorageError(f"record without id under {self.key!r}: {d!r}")
            item_id = str(d["id"])
            if item_id in seen:
                raise StorageError(f"duplicate id {item_id!r} under {self.key!r}")
            seen.add(item_id)
            try:
                cleaned = validate_fields({k: v for k, v in d.items() if k != "id"})
            except InvalidItemError as e:
                raise StorageError(f"invalid record {item_id!r} under {self.key!r}: {e}") from e
            records.append(InventoryRecord(id=item_id, **cleaned))
        return records

    def save(self, records: list[InventoryRecord]):
        set_json(self.kv, self.key, [r.to_dict() for r in records])


class RecordStore:
    """在庫リストの所有者。

    並び順は表示順そのもので、保存対象。変更操作はすべて即座に保存する。
    """

    def __init__(self, repository, seed: bool = True):
        """
        Args:
            repository: load()/save(records) を持つ保存先
            seed: 保存データが無いときサンプルデータを投入するか
        """
        self.repository = repository
        records = repository.load()
        if records is None:
            records = [InventoryRecord.from_dict(d) for d in DEFAULT_ITEMS] if seed else []
            self._records = records
            self._save()
        else:
            self._records = records

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[InventoryRecord]:
        """在庫リストのコピー（保存順）"""
        return list(self._records)

    def get(self, item_id: str) -> Optional[InventoryRecord]:
        return find_record(self._records, item_id)

    def _save(self):
        self.repository.save(self._records)

    def _new_id(self) -> str:
        while True:
            item_id = uuid.uuid4().hex
            if self.get(item_id) is None:
                return item_id

    # ── 変更操作 ──

    def create(self, fields: dict) -> InventoryRecord:
        """新しいアイテムを末尾に追加する。

        Raises:
            InvalidItemError: フィールド値が不正
        """
        cleaned = validate_fields(fields)
        record = InventoryRecord(id=self._new_id(), **cleaned)
        self._records.append(record)
        self._save()
        logger.info("Created item %s (%s)", record.id, record.name)
        return record

    def update(self, item_id: str, patch: dict) -> Optional[InventoryRecord]:
        """アイテムのフィールドを部分更新する。ID が無ければ何もしない。

        Raises:
            InvalidItemError: フィールド値が不正（id の変更も含む）
        """
        record = self.get(item_id)
        if record is None:
            logger.debug("update: %s not found", item_id)
            return None

        cleaned = validate_fields(patch, partial=True)
        for key, value in cleaned.items():
            setattr(record, key, value)
        self._save()
        return record

    def delete(self, item_id: str) -> bool:
        """アイテムを削除する。削除したら True。"""
        before = len(self._records)
        self._records = [r for r in self._records if r.id != item_id]
        self._save()
        removed = len(self._records) != before
        if removed:
            logger.info("Deleted item %s", item_id)
        return removed

    def adjust_quantity(self, item_id: str, delta: int) -> Optional[InventoryRecord]:
        """在庫数を増減する（0 未満にはならない）。変化が無ければ保存しない。"""
        record = self.get(item_id)
        if record is None:
            return None

        new_quantity = max(0, record.quantity + delta)
        if new_quantity == record.quantity:
            return record
        return self.update(item_id, {"quantity": new_quantity})

    def replace_order(self, ordered_ids: list[str]) -> list[InventoryRecord]:
        """並び順を置き換える。

        Raises:
            ReorderMismatchError: 全アイテムの並べ替えになっていない（ストアは変更しない）
        """
        self._records = reconcile_order(self._records, ordered_ids)
        self._save()
        return self.records
