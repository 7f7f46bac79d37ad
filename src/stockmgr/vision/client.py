"""
画像認識 API クライアント

商品の写真を外部の画像認識 API に送り、商品名・カテゴリ・価格の推定を得る。

プロバイダ:
- gemini  Google Generative Language API (generateContent)
- groq    Groq Chat Completions (OpenAI 互換)

どのプロバイダも classify(image, credential) -> ClassifierGuess を実装する。
リトライはしない。失敗は ClassifierError として呼び出し元に返す。
"""

import base64
import io
import logging
from typing import Optional

import requests
from PIL import Image, ImageOps, UnidentifiedImageError

from stockmgr.inventory.models import ClassifierGuess

from .errors import (
    ClassifierConfigError,
    ClassifierInputError,
    ClassifierParseError,
    ClassifierTransportError,
)
from .parser import parse_guess

logger = logging.getLogger(__name__)

PROMPT = (
    "この画像に写っている商品を特定してください。"
    "次のJSON形式だけで回答し、それ以外の文章は書かないでください。\n"
    '{"name": "商品名", "category": "food または goods", "price": 日本での一般的な価格(円, 整数)}\n'
    "category は食品・飲料なら food、日用品なら goods にしてください。"
)

MAX_IMAGE_SIZE = 1024
JPEG_QUALITY = 85
DEFAULT_TIMEOUT = 30.0


def prepare_image(data: bytes, max_size: int = MAX_IMAGE_SIZE) -> bytes:
    """画像を送信用の JPEG に変換する。

    スマホの写真は大きいので長辺 max_size px に縮小し、EXIF の回転を反映する。

    Raises:
        ClassifierInputError: 画像として読めない
    """
    if not data:
        raise ClassifierInputError("NO_IMAGE", "Image data is empty")
    out = io.BytesIO()
    try:
        img = Image.open(io.BytesIO(data))
        img = ImageOps.exif_transpose(img)
        if img.mode != "RGB":
            img = img.convert("RGB")
        img.thumbnail((max_size, max_size))
        img.save(out, format="JPEG", quality=JPEG_QUALITY)
    except (UnidentifiedImageError, OSError) as e:
        raise ClassifierInputError("BAD_IMAGE", f"Cannot decode image: {e}") from e
    return out.getvalue()


class ClassifierProvider:
    """画像認識プロバイダの共通部分"""

    name = ""
    default_model = ""

    def __init__(
        self,
        model: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.model = model or self.default_model
        self.timeout = timeout
        self._session = session or requests.Session()

    def classify(self, image: bytes, credential: Optional[str]) -> ClassifierGuess:
        """画像から商品を推定する。

        Args:
            image: 画像のバイト列（JPEG/PNG 等）
            credential: プロバイダの API キー

        Returns:
            ClassifierGuess

        Raises:
            ClassifierConfigError: API キーが無い（通信しない）
            ClassifierInputError: 画像が読めない（通信しない）
            ClassifierTransportError: 通信失敗・HTTP エラー
            ClassifierParseError: 応答の形式が不正
        """
        if not credential or not credential.strip():
            raise ClassifierConfigError("NO_CREDENTIAL", f"API key for {self.name} is not set")

        jpeg = prepare_image(image)
        b64 = base64.b64encode(jpeg).decode("ascii")

        logger.info("Classifying image with %s (%s, %d bytes)", self.name, self.model, len(jpeg))
        data = self._send(b64, credential.strip())
        text = self._extract_text(data)
        guess = parse_guess(text)
        logger.info("Classifier guess: %s", guess)
        return guess

    def _send(self, image_b64: str, credential: str) -> dict:
        raise NotImplementedError

    def _extract_text(self, data: dict) -> str:
        raise NotImplementedError

    def _post(self, url: str, json_body: dict, **kwargs) -> dict:
        try:
            resp = self._session.post(url, json=json_body, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ClassifierTransportError("CONNECTION", f"{self.name}: {e}") from e

        if not resp.ok:
            raise ClassifierTransportError(
                f"HTTP_{resp.status_code}",
                f"{self.name}: {_error_message(resp)}",
            )

        try:
            return resp.json()
        except ValueError as e:
            raise ClassifierParseError("INVALID_ENVELOPE", f"{self.name}: response is not JSON") from e


class GeminiProvider(ClassifierProvider):
    """Google Gemini (generateContent)"""

    name = "gemini"
    default_model = "gemini-2.0-flash"
    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def _send(self, image_b64: str, credential: str) -> dict:
        return self._post(
            f"{self.BASE_URL}/models/{self.model}:generateContent",
            json_body={
                "contents": [{
                    "parts": [
                        {"text": PROMPT},
                        {"inline_data": {"mime_type": "image/jpeg", "data": image_b64}},
                    ],
                }],
            },
            params={"key": credential},
        )

    def _extract_text(self, data: dict) -> str:
        try:
            parts = data["candidates"][0]["content"]["parts"]
            return "".join(p.get("text", "") for p in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ClassifierParseError("INVALID_ENVELOPE", f"gemini: unexpected response: {data}") from e


class GroqProvider(ClassifierProvider):
    """Groq (OpenAI 互換 Chat Completions)"""

    name = "groq"
    default_model = "meta-llama/llama-4-scout-17b-16e-instruct"
    BASE_URL = "https://api.groq.com/openai/v1"

    def _send(self, image_b64: str, credential: str) -> dict:
        return self._post(
            f"{self.BASE_URL}/chat/completions",
            json_body={
                "model": self.model,
                "messages": [{
                    "role": "user",
                    "content": [
                        {"type": "text", "text": PROMPT},
                        {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{image_b64}"}},
                    ],
                }],
                "temperature": 0,
            },
            headers={"Authorization": f"Bearer {credential}"},
        )

    def _extract_text(self, data: dict) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ClassifierParseError("INVALID_ENVELOPE", f"groq: unexpected response: {data}") from e
        if not isinstance(content, str):
            raise ClassifierParseError("INVALID_ENVELOPE", f"groq: content is not text: {content!r}")
        return content


PROVIDERS = {
    GeminiProvider.name: GeminiProvider,
    GroqProvider.name: GroqProvider,
}


def get_provider(name: str, **options) -> ClassifierProvider:
    """名前からプロバイダを生成する。

    Raises:
        ClassifierConfigError: 未知のプロバイダ名
    """
    cls = PROVIDERS.get((name or "").strip().lower())
    if cls is None:
        raise ClassifierConfigError(
            "UNKNOWN_PROVIDER",
            f"Unknown provider {name!r} (available: {', '.join(sorted(PROVIDERS))})",
        )
    return cls(**options)


def _error_message(resp: requests.Response) -> str:
    """エラー応答から {"error": {"message": ...}} を取り出す"""
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}: {resp.text[:200]}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    if isinstance(error, str):
        return error
    return f"HTTP {resp.status_code}: {body}"
