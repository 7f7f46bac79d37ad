"""並べ替え結果の照合

ドラッグ操作などで得られた ID の並びを、現在の在庫リストに突き合わせる。
全アイテムの並べ替え（順列）になっている場合だけ受け入れる。
"""

import logging

from .models import InventoryRecord

logger = logging.getLogger(__name__)


class ReorderMismatchError(Exception):
    """並べ替え結果が在庫リスト全体と一致しない"""
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Reorder mismatch: expected {expected} item(s), resolved {actual}"
        )


def reconcile_order(
    records: list[InventoryRecord], ordered_ids: list[str]
) -> list[InventoryRecord]:
    """ID の並びを在庫レコードの並びに変換する。

    1. 各 ID を現在のレコードに対応付ける（見つからない ID は読み捨て）
    2. 結果が全レコードの順列でなければ拒否

    Args:
        records: 現在の在庫リスト（変更しない）
        ordered_ids: 新しい並び順の ID

    Returns:
        新しい順序のレコードリスト

    Raises:
        ReorderMismatchError: 件数が合わない、または同じアイテムが重複している
    """
    by_id = {r.id: r for r in records}

    reordered = []
    seen = set()
    for item_id in ordered_ids:
        record = by_id.get(item_id)
        if record is None:
            continue
        reordered.append(record)
        seen.add(item_id)

    if len(reordered) != len(records) or len(seen) != len(records):
        logger.warning(
            "Reorder mismatch (%d resolved, %d unique, %d expected); keeping current order",
            len(reordered), len(seen), len(records),
        )
        raise ReorderMismatchError(len(records), len(reordered))

    return reordered
