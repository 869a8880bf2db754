"""
sajucal Settings
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
만세력 엔진 설정:
- 계산 캐시 (cachetools)
- 절기/음력 Fallback (ephem, lunar_python)
- 지방시/서머타임 보정
- 일별 캘린더 저장소 (SQLite)
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Cache
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    cache_max_size: int = 10000
    cache_ttl_seconds: int = 0  # 0 = LRU (간지/절기는 고정값이라 만료 불필요)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Fallback (테이블에 없는 날짜)
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    solar_term_fallback_enabled: bool = True   # ephem 태양 황경
    lunar_fallback_enabled: bool = True        # lunar_python 음력 변환

    # 절기 판정 기준 시간대 (KST)
    standard_utc_offset_hours: int = 9

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # 지방시 보정
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    apply_dst_correction: bool = True

    # 연주 경계: calendar(양력 1/1) | lichun(입춘)
    year_boundary: Literal["calendar", "lichun"] = "calendar"

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # 일별 캘린더 저장소
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    calendar_db_path: str = "sajucal.db"
    range_max_days: int = 366
    range_workers: int = 4

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


_settings: Optional[Settings] = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
