"""
음력 변환 모듈
- 정적 테이블 (검증된 샘플 날짜)
- Fallback: lunar_python (Solar → Lunar, 윤달은 음수 월)
- 둘 다 없으면 None / IncompleteLunarDataError
"""
import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import Callable, Dict, Optional, Any

from lunar_python import Solar

from sajucal.errors import IncompleteLunarDataError
from sajucal.services.cache import CalculationCache
from sajucal.services.cycle import DateLike, to_calendar_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LunarDate:
    """음력 날짜"""
    year: int
    month: int
    day: int
    is_leap_month: bool = False

    @property
    def label(self) -> str:
        """'3/4', 윤달은 '閏3/4'"""
        prefix = "閏" if self.is_leap_month else ""
        return f"{prefix}{self.month}/{self.day}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# 검증된 음력 샘플 (양력 ISO → 음력)
LUNAR_TABLE: Dict[str, LunarDate] = {
    # 2025년 4월
    "2025-04-01": LunarDate(2025, 3, 4),
    "2025-04-02": LunarDate(2025, 3, 5),
    "2025-04-03": LunarDate(2025, 3, 6),
    "2025-04-04": LunarDate(2025, 3, 7),
    "2025-04-05": LunarDate(2025, 3, 8),
    "2025-04-06": LunarDate(2025, 3, 9),
    "2025-04-07": LunarDate(2025, 3, 10),
    "2025-04-08": LunarDate(2025, 3, 11),
    "2025-04-09": LunarDate(2025, 3, 12),
    "2025-04-10": LunarDate(2025, 3, 13),
    "2025-04-11": LunarDate(2025, 3, 14),
    "2025-04-12": LunarDate(2025, 3, 15),
    "2025-04-13": LunarDate(2025, 3, 16),
    "2025-04-14": LunarDate(2025, 3, 17),
    "2025-04-15": LunarDate(2025, 3, 18),
    "2025-04-16": LunarDate(2025, 3, 19),
    "2025-04-17": LunarDate(2025, 3, 20),
    "2025-04-18": LunarDate(2025, 3, 21),
    "2025-04-19": LunarDate(2025, 3, 22),
    # 2019년 6월
    "2019-06-18": LunarDate(2019, 5, 16),
    "2019-06-19": LunarDate(2019, 5, 17),
    "2019-06-20": LunarDate(2019, 5, 18),
    # 1986년 5월
    "1986-05-24": LunarDate(1986, 4, 16),
    "1986-05-25": LunarDate(1986, 4, 17),
    "1986-05-26": LunarDate(1986, 4, 18),
    "1986-05-27": LunarDate(1986, 4, 19),
}


def lunar_python_date(day: date) -> Optional[LunarDate]:
    """lunar_python 변환 (윤달: getMonth() < 0)"""
    lunar = Solar.fromYmd(day.year, day.month, day.day).getLunar()
    month = lunar.getMonth()
    return LunarDate(
        year=lunar.getYear(),
        month=abs(month),
        day=lunar.getDay(),
        is_leap_month=month < 0,
    )


LunarFallback = Callable[[date], Optional[LunarDate]]


class LunarCalendarProvider:
    """
    양력 → 음력 조회

    우선순위:
    1. 정적 테이블
    2. Fallback (lunar_python)
    3. None
    """

    def __init__(
        self,
        table: Optional[Dict[str, LunarDate]] = None,
        fallback: Optional[LunarFallback] = lunar_python_date,
        cache: Optional[CalculationCache] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.table = LUNAR_TABLE if table is None else table
        self.fallback = fallback
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)

    def lunar_date_of(self, value: DateLike) -> Optional[LunarDate]:
        """양력 날짜의 음력 (없으면 None)"""
        day = to_calendar_day(value)
        key = day.isoformat()

        found = self.table.get(key)
        if found is not None:
            return found

        if self.fallback is None:
            return None

        if self.cache is None:
            return self._compute_fallback(day)
        return self.cache.get_or_compute("lunar_date", (key,), lambda: self._compute_fallback(day))

    def require_lunar_date(self, value: DateLike) -> LunarDate:
        """
        음력 조회 (필수)

        Raises:
            IncompleteLunarDataError: 테이블/Fallback 모두 데이터 없음
        """
        found = self.lunar_date_of(value)
        if found is None:
            raise IncompleteLunarDataError(to_calendar_day(value))
        return found

    def _compute_fallback(self, day: date) -> Optional[LunarDate]:
        try:
            found = self.fallback(day)
        except Exception as e:
            self.logger.warning(f"[Lunar] fallback 실패 {day}: {e}")
            return None
        self.logger.debug(f"[Lunar] fallback {day} → {found}")
        return found
