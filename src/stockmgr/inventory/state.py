"""画面状態の保存 - 買い物リストのチェックと表示設定

在庫データとは別のキーに保存し、ライフサイクルも独立させる。
"""

import logging

from .db import get_json, set_json
from .models import Preferences

logger = logging.getLogger(__name__)

PREFS_KEY = "stock_manager_prefs"
CHECKED_PREFIX = "checked:"


class CheckedState:
    """買い物リストの「カゴに入れた」チェック状態。キーが無ければ未チェック。"""

    def __init__(self, kv):
        self.kv = kv

    @staticmethod
    def _key(item_id: str) -> str:
        return f"{CHECKED_PREFIX}{item_id}"

    def is_checked(self, item_id: str) -> bool:
        return self.kv.get(self._key(item_id)) == "true"

    def set(self, item_id: str, checked: bool = True):
        if checked:
            self.kv.set(self._key(item_id), "true")
        else:
            self.clear(item_id)

    def clear(self, item_id: str):
        self.kv.delete(self._key(item_id))

    def checked_ids(self) -> list[str]:
        return [
            key[len(CHECKED_PREFIX):]
            for key in self.kv.keys(CHECKED_PREFIX)
            if self.kv.get(key) == "true"
        ]

    def prune(self, live_ids) -> int:
        """削除済みアイテムのチェックを消す。消した件数を返す。"""
        live = set(live_ids)
        removed = 0
        for item_id in self.checked_ids():
            if item_id not in live:
                self.clear(item_id)
                removed += 1
        if removed:
            logger.debug("Pruned %d stale check(s)", removed)
        return removed


class PreferencesStore:
    """表示設定の保存"""

    def __init__(self, kv, key: str = PREFS_KEY):
        self.kv = kv
        self.key = key

    def load(self) -> Preferences:
        data = get_json(self.kv, self.key)
        if not isinstance(data, dict):
            return Preferences()
        return Preferences.from_dict(data)

    def save(self, prefs: Preferences):
        set_json(self.kv, self.key, prefs.to_dict())

    def toggle_compact(self) -> Preferences:
        prefs = self.load()
        prefs.compact_view = not prefs.compact_view
        self.save(prefs)
        return prefs
