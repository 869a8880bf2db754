"""
로깅 초기화
"""
import logging
from typing import Optional

from sajucal.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    패키지 로거 설정 (애플리케이션 진입점에서 1회 호출)

    Args:
        level: 로그 레벨 (None이면 settings.log_level)
    """
    level_name = (level or get_settings().log_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)

    logger = logging.getLogger("sajucal")
    logger.setLevel(numeric_level)
    logger.info(f"[Logging] level={level_name}")
    return logger
