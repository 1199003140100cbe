# 執行期設定：從環境變數與 .env 讀取

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    log_dir: str | None = None
    show_progress: bool = False


def get_settings() -> Settings:
    log_dir = os.getenv("SYMFILTER_LOG_DIR") or None
    return Settings(
        log_level=os.getenv("SYMFILTER_LOG_LEVEL", "WARNING").upper(),
        log_dir=log_dir,
        show_progress=os.getenv("SYMFILTER_SHOW_PROGRESS", "false").strip().lower() in _TRUE_VALUES,
    )
