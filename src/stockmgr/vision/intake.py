"""画像認識結果の取り込み

既存アイテムに一致すれば在庫を1つ増やし、一致しなければ
新規登録フォームへの事前入力を返す（自動では登録しない）。
"""

import logging
from dataclasses import dataclass
from typing import Optional

from stockmgr.inventory.models import ClassifierGuess, InventoryRecord, PrefillRequest
from stockmgr.inventory.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class IntakeResult:
    """取り込み結果。matched か prefill のどちらか一方が入る。"""
    guess: ClassifierGuess
    matched: Optional[InventoryRecord] = None
    prefill: Optional[PrefillRequest] = None

    @property
    def is_match(self) -> bool:
        return self.matched is not None


def find_match(records: list[InventoryRecord], name: str) -> Optional[InventoryRecord]:
    """商品名が部分一致する最初のアイテム（大文字小文字は区別）"""
    for record in records:
        if name in record.name or record.name in name:
            return record
    return None


def resolve_guess(
    store: RecordStore,
    guess: ClassifierGuess,
    quantity: int = 1,
    threshold: int = 1,
) -> IntakeResult:
    """推定結果を在庫に反映する。

    Args:
        store: 在庫ストア
        guess: 画像認識の推定
        quantity: 未登録だった場合の在庫数の初期値
        threshold: 未登録だった場合の適正数の初期値
    """
    record = find_match(store.records, guess.name)
    if record is not None:
        updated = store.adjust_quantity(record.id, 1)
        logger.info("Intake matched %s -> %s (+1)", guess.name, record.name)
        return IntakeResult(guess=guess, matched=updated)

    logger.info("Intake found no match for %s; prefill requested", guess.name)
    return IntakeResult(
        guess=guess,
        prefill=PrefillRequest(
            name=guess.name,
            category=guess.category,
            price=guess.price,
            quantity=quantity,
            threshold=threshold,
        ),
    )


def confirm_prefill(store: RecordStore, prefill: PrefillRequest, **overrides) -> InventoryRecord:
    """ユーザーが確認した事前入力からアイテムを登録する。

    Raises:
        InvalidItemError: フィールド値が不正
    """
    fields = prefill.to_fields()
    fields.update(overrides)
    return store.create(fields)
