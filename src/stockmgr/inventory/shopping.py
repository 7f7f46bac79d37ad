"""買い物完了処理 - チェックした商品を在庫に戻す"""

import logging
from typing import Callable, Optional

from .state import CheckedState
from .store import RecordStore

logger = logging.getLogger(__name__)


def purchase_checked(
    store: RecordStore,
    checked: CheckedState,
    confirm: Optional[Callable[[], bool]] = None,
) -> int:
    """チェック済みの商品を購入済みとして在庫に加える。

    不足数（適正数 - 在庫数）だけ在庫を増やし、チェックを外す。

    Args:
        store: 在庫ストア
        checked: チェック状態
        confirm: 実行前の確認コールバック。False を返したら何もしない。

    Returns:
        在庫を補充したアイテム数
    """
    targets = [r for r in store.records if checked.is_checked(r.id)]
    if not targets:
        return 0

    if confirm is not None and not confirm():
        logger.debug("purchase cancelled by user")
        return 0

    checked.prune(r.id for r in store.records)

    restocked = 0
    for record in targets:
        needed = max(0, record.threshold - record.quantity)
        if needed > 0:
            store.adjust_quantity(record.id, needed)
            restocked += 1
        checked.clear(record.id)

    logger.info("Marked %d item(s) as purchased", restocked)
    return restocked
