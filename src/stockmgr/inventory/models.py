"""在庫管理システム データモデル定義"""

from dataclasses import asdict, dataclass
from typing import Optional

FOOD = "food"
GOODS = "goods"
CATEGORIES = (FOOD, GOODS)

# 表示用フィルタ（"all" は絞り込みなし）
CATEGORY_FILTERS = ("all", FOOD, GOODS)

EDITABLE_FIELDS = ("name", "category", "quantity", "threshold", "price")


class InvalidItemError(ValueError):
    """アイテムのフィールド値が不正"""


@dataclass
class InventoryRecord:
    """在庫アイテム1件"""
    id: str
    name: str
    category: str = FOOD         # food / goods
    quantity: int = 0            # 現在の在庫数
    threshold: int = 0           # 適正在庫数（これを下回ると買い物リスト入り）
    price: int = 0               # 単価（円）

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "InventoryRecord":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            category=data.get("category", FOOD),
            quantity=int(data.get("quantity", 0)),
            threshold=int(data.get("threshold", 0)),
            price=int(data.get("price", 0)),
        )


@dataclass
class Preferences:
    """表示設定（在庫データとは独立して保存）"""
    compact_view: bool = False

    def to_dict(self) -> dict:
        return {"compactView": self.compact_view}

    @classmethod
    def from_dict(cls, data: dict) -> "Preferences":
        return cls(compact_view=bool(data.get("compactView", False)))


@dataclass
class ClassifierGuess:
    """画像認識APIが返した商品の推定"""
    name: str
    category: str
    price: int = 0


@dataclass
class PrefillRequest:
    """新規登録フォームへの事前入力（ユーザー確認待ち）"""
    name: str
    category: str
    price: int
    quantity: int = 1
    threshold: int = 1

    def to_fields(self) -> dict:
        return {
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "threshold": self.threshold,
            "price": self.price,
        }


def validate_fields(fields: dict, partial: bool = False) -> dict:
    """フィールド値を検証し、正規化した dict を返す。

    Args:
        fields: 検証対象（id は含めない）
        partial: True なら部分更新として欠けたフィールドを許容する

    Raises:
        InvalidItemError: 未知のフィールド、空の名前、範囲外の値
    """
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidItemError(f"unknown field(s): {', '.join(sorted(unknown))}")

    if not partial:
        missing = [f for f in ("name", "category") if f not in fields]
        if missing:
            raise InvalidItemError(f"missing field(s): {', '.join(missing)}")

    cleaned = {}
    if "name" in fields:
        name = fields["name"]
        if not isinstance(name, str) or not name.strip():
            raise InvalidItemError("name must be a non-empty string")
        cleaned["name"] = name.strip()

    if "category" in fields:
        if fields["category"] not in CATEGORIES:
            raise InvalidItemError(f"category must be one of {CATEGORIES}: {fields['category']!r}")
        cleaned["category"] = fields["category"]

    for key in ("quantity", "threshold", "price"):
        if key not in fields:
            continue
        cleaned[key] = _non_negative_int(key, fields[key])

    return cleaned


def _non_negative_int(key: str, value) -> int:
    # bool は int のサブクラスなので明示的に除外
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidItemError(f"{key} must be an integer: {value!r}")
    if value < 0:
        raise InvalidItemError(f"{key} must not be negative: {value}")
    return value


def find_record(records: list[InventoryRecord], item_id: str) -> Optional[InventoryRecord]:
    for record in records:
        if record.id == item_id:
            return record
    return None
