"""設定の読み込み（.env と環境変数）"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from stockmgr.vision.client import DEFAULT_TIMEOUT

# プロバイダ名 → API キーの環境変数名
CREDENTIAL_ENV = {
    "gemini": "GEMINI_API_KEY",
    "groq": "GROQ_API_KEY",
}

MODEL_ENV = {
    "gemini": "GEMINI_MODEL",
    "groq": "GROQ_MODEL",
}


@dataclass
class Settings:
    db_path: Optional[Path] = None
    provider: str = "gemini"
    credentials: Optional[dict[str, str]] = None
    models: Optional[dict[str, str]] = None
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"

    def credential_for(self, provider: str) -> Optional[str]:
        return (self.credentials or {}).get(provider)

    def model_for(self, provider: str) -> Optional[str]:
        return (self.models or {}).get(provider)


def load_settings(env_file: Optional[str] = None) -> Settings:
    """.env を読み込んでから環境変数を Settings にまとめる。

    既に設定されている環境変数は .env で上書きしない。
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    db_path = os.getenv("STOCKMGR_DB_PATH")
    credentials = {
        name: os.environ[var] for name, var in CREDENTIAL_ENV.items() if os.getenv(var)
    }
    models = {
        name: os.environ[var] for name, var in MODEL_ENV.items() if os.getenv(var)
    }

    timeout = DEFAULT_TIMEOUT
    raw_timeout = os.getenv("STOCKMGR_TIMEOUT")
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"STOCKMGR_TIMEOUT must be a number: {raw_timeout!r}") from None

    return Settings(
        db_path=Path(db_path) if db_path else None,
        provider=os.getenv("STOCKMGR_PROVIDER", "gemini").strip().lower(),
        credentials=credentials,
        models=models,
        timeout=timeout,
        log_level=os.getenv("LOG_LEVEL", "WARNING"),
    )
