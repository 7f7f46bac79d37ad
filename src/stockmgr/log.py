import logging
import sys
from typing import Union

FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Union[str, int] = "WARNING") -> logging.Logger:
    """stockmgr パッケージのロガーに stderr ハンドラを1つだけ付ける。

    ライブラリ側はハンドラを設定しない。CLI から呼ぶ。
    二度目以降の呼び出しではレベルと出力先だけ更新する。
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper().strip())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger("stockmgr")
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if getattr(h, "_stockmgr_cli", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(FORMAT, datefmt=DATE_FORMAT))
        handler._stockmgr_cli = True
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)
    return logger
