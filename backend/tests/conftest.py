"""
공용 fixture
- Fallback 비활성화 Provider (정적 테이블만 사용 → 결과 고정)
- tmp_path 저장소
"""
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from sajucal.config import Settings
from sajucal.services.cache import CalculationCache
from sajucal.services.calendar_store import DailyCalendarStore
from sajucal.services.lunar_calendar import LunarCalendarProvider
from sajucal.services.month_pillar import MonthPillarResolver
from sajucal.services.saju_engine import SajuEngine
from sajucal.services.solar_terms import SolarTermProvider


@pytest.fixture
def test_logger():
    """caplog로 잡히는 테스트 로거"""
    logger = logging.getLogger("sajucal.tests")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def settings(tmp_path):
    return Settings(
        solar_term_fallback_enabled=False,
        lunar_fallback_enabled=False,
        calendar_db_path=str(tmp_path / "calendar.db"),
        range_max_days=31,
        range_workers=2,
    )


@pytest.fixture
def cache():
    return CalculationCache(maxsize=100)


@pytest.fixture
def solar_terms(test_logger):
    return SolarTermProvider(fallback=None, logger=test_logger)


@pytest.fixture
def lunar(test_logger):
    return LunarCalendarProvider(fallback=None, logger=test_logger)


@pytest.fixture
def month_resolver(solar_terms, lunar, test_logger):
    return MonthPillarResolver(solar_terms=solar_terms, lunar=lunar, logger=test_logger)


@pytest.fixture
def engine(settings, cache, test_logger):
    return SajuEngine(settings=settings, cache=cache, logger=test_logger)


@pytest.fixture
def store(tmp_path, test_logger):
    return DailyCalendarStore(str(tmp_path / "store.db"), logger=test_logger)
