"""永続化層 - SQLite キーバリューストア"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DB_PATH = Path.cwd() / "stock_manager.db"


class StorageError(Exception):
    """保存データの読み書きに失敗"""


class KeyValueDB:
    """キーバリュー形式の永続ストレージ（SQLite）

    set/delete のたびに commit する（書き込みはバッファリングしない）。
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or DB_PATH
        self._conn: Optional[sqlite3.Connection] = None
        self._init_db()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_db(self):
        """テーブル作成"""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT DEFAULT (datetime('now', 'localtime'))
            );
        """)
        self.conn.commit()

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def get(self, key: str) -> Optional[str]:
        row = self.conn.execute(
            "SELECT value FROM kv WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str):
        self.conn.execute("""
            INSERT OR REPLACE INTO kv (key, value, updated_at)
            VALUES (?, ?, datetime('now', 'localtime'))
        """, (key, value))
        self.conn.commit()

    def delete(self, key: str):
        self.conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        self.conn.commit()

    def keys(self, prefix: str = "") -> list[str]:
        # LIKE のワイルドカードを避けるため substr で前方一致
        rows = self.conn.execute(
            "SELECT key FROM kv WHERE substr(key, 1, ?) = ? ORDER BY key",
            (len(prefix), prefix),
        ).fetchall()
        return [r["key"] for r in rows]


class MemoryKeyValueDB:
    """メモリ上のキーバリューストア（テスト用）"""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str):
        self.data[key] = value
        self.writes += 1

    def delete(self, key: str):
        self.data.pop(key, None)
        self.writes += 1

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self.data if k.startswith(prefix))

    def close(self):
        pass


def get_json(kv, key: str) -> Optional[Any]:
    """JSON 値を読み出す。キーが無ければ None。"""
    raw = kv.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageError(f"corrupt data under {key!r}: {e}") from e


def set_json(kv, key: str, value: Any):
    kv.set(key, json.dumps(value, ensure_ascii=False))
    logger.debug("saved %s", key)
