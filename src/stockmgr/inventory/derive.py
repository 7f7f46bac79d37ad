"""在庫リストからの集計（副作用なし）"""

from dataclasses import dataclass

from .models import CATEGORY_FILTERS, InventoryRecord


@dataclass
class InventoryStats:
    """画面上部の集計値"""
    total_inventory_value: int = 0    # 在庫総額
    total_shopping_estimate: int = 0  # 買い物予算の目安
    shopping_count: int = 0           # 買い物リストの件数（バッジ表示）


def is_low_stock(record: InventoryRecord) -> bool:
    """在庫が適正数以下か（一覧での警告表示用）"""
    return record.quantity <= record.threshold


def needs_restock(record: InventoryRecord) -> bool:
    """買い物リストに載るか。適正数と同数なら載らない。"""
    return record.quantity < record.threshold


def shopping_list(records: list[InventoryRecord]) -> list[InventoryRecord]:
    """買い物リスト（在庫リストの並び順のまま）"""
    return [r for r in records if needs_restock(r)]


def shortfall(record: InventoryRecord) -> int:
    """不足数"""
    return record.threshold - record.quantity


def estimated_cost(record: InventoryRecord) -> int:
    return shortfall(record) * record.price


def total_inventory_value(records: list[InventoryRecord]) -> int:
    return sum(r.quantity * r.price for r in records)


def total_shopping_estimate(records: list[InventoryRecord]) -> int:
    return sum(estimated_cost(r) for r in shopping_list(records))


def filter_by_category(
    records: list[InventoryRecord], category: str = "all"
) -> list[InventoryRecord]:
    """カテゴリで絞り込む（表示専用、並び順は変えない）

    Raises:
        ValueError: category が all/food/goods 以外
    """
    if category not in CATEGORY_FILTERS:
        raise ValueError(f"category filter must be one of {CATEGORY_FILTERS}: {category!r}")
    if category == "all":
        return list(records)
    return [r for r in records if r.category == category]


def summarize(records: list[InventoryRecord]) -> InventoryStats:
    return InventoryStats(
        total_inventory_value=total_inventory_value(records),
        total_shopping_estimate=total_shopping_estimate(records),
        shopping_count=len(shopping_list(records)),
    )
