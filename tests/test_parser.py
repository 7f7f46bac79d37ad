import pytest

from stockmgr.vision.errors import ClassifierParseError
from stockmgr.vision.parser import parse_guess, strip_code_fence


def test_plain_json():
    guess = parse_guess('{"name": "牛乳", "category": "food", "price": 230}')
    assert (guess.name, guess.category, guess.price) == ("牛乳", "food", 230)


@pytest.mark.parametrize("text", [
    '```json\n{"name": "牛乳", "category": "food", "price": 230}\n```',
    '```\n{"name": "牛乳", "category": "food", "price": 230}\n```',
    '```JSON {"name": "牛乳", "category": "food", "price": 230}```',
    'はい、結果です。\n```json\n{"name": "牛乳", "category": "food", "price": 230}\n```\n以上です。',
])
def test_code_fences_are_stripped(text):
    guess = parse_guess(text)
    assert guess.name == "牛乳"
    assert guess.price == 230


def test_strip_code_fence_leaves_plain_text():
    assert strip_code_fence('  {"a": 1}\n') == '{"a": 1}'


@pytest.mark.parametrize("raw, expected", [
    ("¥1,280", 1280),
    ("230円", 230),
    (198.0, 198),
    ("-50", 0),
    ("不明", 0),
    (None, 0),
])
def test_price_coercion(raw, expected):
    text = '{"name": "x", "category": "food", "price": %s}' % (
        "null" if raw is None else (raw if isinstance(raw, float) else f'"{raw}"'))
    assert parse_guess(text).price == expected


def test_category_is_normalized():
    assert parse_guess('{"name": "洗濯洗剤", "category": "GOODS"}').category == "goods"


def test_unknown_category_falls_back_to_keywords():
    assert parse_guess('{"name": "キッチンペーパー 4ロール", "category": "日用品"}').category == "goods"
    assert parse_guess('{"name": "食パン", "category": "bakery"}').category == "food"
    assert parse_guess('{"name": "食パン"}').category == "food"


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "牛乳です",
    "```json\nnot json\n```",
    '["牛乳"]',
    '{"category": "food", "price": 100}',
    '{"name": "", "category": "food"}',
    '{"name": 42}',
])
def test_malformed_payload_raises(text):
    with pytest.raises(ClassifierParseError):
        parse_guess(text)


@pytest.mark.parametrize("price", ["Infinity", "-Infinity", "1e999", '"1e999"'])
def test_non_finite_price_is_parse_error(price):
    with pytest.raises(ClassifierParseError) as exc_info:
        parse_guess('{"name": "牛乳", "category": "food", "price": %s}' % price)
    assert exc_info.value.code == "INVALID_PRICE"


def test_nan_price_becomes_zero():
    assert parse_guess('{"name": "牛乳", "category": "food", "price": NaN}').price == 0
