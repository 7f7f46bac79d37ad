"""画像認識APIの応答テキストをパースする"""

import json
import math
import re

from stockmgr.inventory.models import CATEGORIES, FOOD, GOODS, ClassifierGuess

from .errors import ClassifierParseError

# 非食品キーワード（カテゴリが読み取れないときの判定用）
NON_FOOD_KEYWORDS = [
    "ティッシュ", "ﾃｨｯｼｭ", "トイレ", "ﾄｲﾚ", "洗剤", "ｾﾝｻﾞｲ",
    "シャンプー", "ｼｬﾝﾌﾟｰ", "石鹸", "ｾｯｹﾝ", "歯ブラシ", "ﾊﾌﾞﾗｼ",
    "歯磨き", "柔軟剤", "電池", "ﾃﾞﾝﾁ", "ゴミ袋", "ｺﾞﾐﾌﾞｸﾛ",
    "ラップ", "ﾗｯﾌﾟ", "アルミホイル", "ｱﾙﾐﾎｲﾙ", "キッチンペーパー",
    "スポンジ", "マスク", "ﾏｽｸ",
]

_FENCE_RE = re.compile(r"```(?:[A-Za-z]+)?\s*(.*?)```", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """```json ... ``` のようなコードフェンスを取り除く（前後の説明文も捨てる）"""
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_guess(text: str) -> ClassifierGuess:
    """応答テキストから {name, category, price} を取り出す。

    Raises:
        ClassifierParseError: JSON として読めない、または name が無い
    """
    if not isinstance(text, str) or not text.strip():
        raise ClassifierParseError("EMPTY", "Empty response from classifier")

    body = strip_code_fence(text)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ClassifierParseError("INVALID_JSON", f"{e}: {body[:200]}") from e

    if not isinstance(data, dict):
        raise ClassifierParseError("INVALID_JSON", f"Expected a JSON object: {body[:200]}")

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ClassifierParseError("NO_NAME", f"Response has no product name: {data}")
    name = name.strip()

    return ClassifierGuess(
        name=name,
        category=_normalize_category(data.get("category"), name),
        price=max(0, _to_int(data.get("price"))),
    )


def _normalize_category(value, name: str) -> str:
    if isinstance(value, str) and value.strip().lower() in CATEGORIES:
        return value.strip().lower()
    return GOODS if any(kw in name for kw in NON_FOOD_KEYWORDS) else FOOD


def _to_int(value) -> int:
    """文字列を安全にintに変換"""
    if value is None or isinstance(value, bool):
        return 0
    try:
        cleaned = str(value).replace(",", "").replace("¥", "").replace("￥", "").replace("円", "")
        number = float(cleaned.strip())
    except (ValueError, TypeError):
        return 0
    if math.isnan(number):
        return 0
    if not math.isfinite(number):
        raise ClassifierParseError("INVALID_PRICE", f"Price is not a finite number: {value!r}")
    return int(number)
