import sys
from pathlib import Path

from loguru import logger

from symfilter.config.settings import get_settings


def configure_logging(level: str = "WARNING", log_dir: str | None = None) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_dir:
        log_file = Path(log_dir) / "{time}.log"
        logger.add(
            log_file,
            rotation="256 MB",  # 每個檔案滿 256MB 就切分
            retention="10 days",  # 只保留最近 10 天的日誌
            compression="zip",  # 切分後的舊檔案自動壓縮成 zip
            encoding="utf-8",
            level="DEBUG",
        )


_settings = get_settings()
configure_logging(_settings.log_level, _settings.log_dir)
