"""
24절기 데이터 및 날짜별 절기 판정
- 월주 계산의 핵심: 해당 날짜가 절입일(월 경계 절기)인지 판단
- 정적 테이블 우선, 없으면 ephem 태양 황경으로 계산
- 입춘 기준 연도 보정
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

import ephem

from sajucal.errors import InvalidDateError
from sajucal.services.cache import CalculationCache
from sajucal.services.cycle import DateLike, to_calendar_day
from sajucal.services.ganji import Branch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolarTermInfo:
    """절기 정보"""
    name: str           # 절기 이름 (한자)
    korean: str         # 절기 이름 (한글)
    longitude: int      # 태양 황경 (도)
    month: Optional[int] = None       # 절월 번호 (입절만: 1=인월 ... 12=축월)
    approx_month: int = 0             # 대략적인 양력 월
    approx_day: int = 0               # 대략적인 양력 일

    @property
    def is_month_boundary(self) -> bool:
        return self.month is not None

    @property
    def branch(self) -> Optional[Branch]:
        """절월 지지: 1월(입춘)=寅 ... 12월(소한)=丑"""
        if self.month is None:
            return None
        return Branch.from_index((self.month + 1) % 12)


# 24절기 (입절 12개 + 중기 12개)
# 월주는 "입절"만 사용 (입춘, 경칩, 청명, 입하, 망종, 소서, 입추, 백로, 한로, 입동, 대설, 소한)
SOLAR_TERMS: List[SolarTermInfo] = [
    SolarTermInfo("立春", "입춘", 315, 1, 2, 4),
    SolarTermInfo("雨水", "우수", 330, None, 2, 19),
    SolarTermInfo("驚蟄", "경칩", 345, 2, 3, 6),
    SolarTermInfo("春分", "춘분", 0, None, 3, 21),
    SolarTermInfo("清明", "청명", 15, 3, 4, 5),
    SolarTermInfo("穀雨", "곡우", 30, None, 4, 20),
    SolarTermInfo("立夏", "입하", 45, 4, 5, 6),
    SolarTermInfo("小満", "소만", 60, None, 5, 21),
    SolarTermInfo("芒種", "망종", 75, 5, 6, 6),
    SolarTermInfo("夏至", "하지", 90, None, 6, 21),
    SolarTermInfo("小暑", "소서", 105, 6, 7, 7),
    SolarTermInfo("大暑", "대서", 120, None, 7, 23),
    SolarTermInfo("立秋", "입추", 135, 7, 8, 8),
    SolarTermInfo("処暑", "처서", 150, None, 8, 23),
    SolarTermInfo("白露", "백로", 165, 8, 9, 8),
    SolarTermInfo("秋分", "추분", 180, None, 9, 23),
    SolarTermInfo("寒露", "한로", 195, 9, 10, 8),
    SolarTermInfo("霜降", "상강", 210, None, 10, 23),
    SolarTermInfo("立冬", "입동", 225, 10, 11, 7),
    SolarTermInfo("小雪", "소설", 240, None, 11, 22),
    SolarTermInfo("大雪", "대설", 255, 11, 12, 7),
    SolarTermInfo("冬至", "동지", 270, None, 12, 22),
    SolarTermInfo("小寒", "소한", 285, 12, 1, 6),
    SolarTermInfo("大寒", "대한", 300, None, 1, 20),
]

TERMS_BY_NAME: Dict[str, SolarTermInfo] = {t.name: t for t in SOLAR_TERMS}
TERMS_BY_LONGITUDE: Dict[int, SolarTermInfo] = {t.longitude: t for t in SOLAR_TERMS}

# 입절 (월 경계 절기), 월 순서
SOLAR_TERMS_ENTRY: List[SolarTermInfo] = sorted(
    (t for t in SOLAR_TERMS if t.is_month_boundary), key=lambda t: t.month
)

# 절기 → 월지
TERM_TO_BRANCH: Dict[str, Branch] = {t.name: t.branch for t in SOLAR_TERMS_ENTRY}

# 절기 → 절월 번호
TERM_TO_MONTH: Dict[str, int] = {t.name: t.month for t in SOLAR_TERMS_ENTRY}

# 정밀 입절 시각 (KST 기준)
# 형식: (년, 월, 일, 시, 분), 입춘 ~ 다음해 소한 순서
# 출처: 한국천문연구원 데이터 기반
SOLAR_TERMS_PRECISE: Dict[int, List[Tuple[int, int, int, int, int]]] = {
    2024: [
        (2024, 2, 4, 17, 27),   # 입춘
        (2024, 3, 5, 11, 23),   # 경칩
        (2024, 4, 4, 16, 2),    # 청명
        (2024, 5, 5, 9, 10),    # 입하
        (2024, 6, 5, 13, 10),   # 망종
        (2024, 7, 6, 23, 20),   # 소서
        (2024, 8, 7, 9, 9),     # 입추
        (2024, 9, 7, 12, 11),   # 백로
        (2024, 10, 8, 3, 0),    # 한로
        (2024, 11, 7, 7, 20),   # 입동
        (2024, 12, 7, 0, 17),   # 대설
        (2025, 1, 5, 11, 33),   # 소한 (다음해 1월)
    ],
    2025: [
        (2025, 2, 3, 23, 10),
        (2025, 3, 5, 17, 7),
        (2025, 4, 4, 21, 48),
        (2025, 5, 5, 14, 57),
        (2025, 6, 5, 18, 56),
        (2025, 7, 7, 5, 5),
        (2025, 8, 7, 14, 51),
        (2025, 9, 7, 17, 52),
        (2025, 10, 8, 8, 41),
        (2025, 11, 7, 13, 4),
        (2025, 12, 7, 6, 5),
        (2026, 1, 5, 17, 23),
    ],
    2026: [
        (2026, 2, 4, 4, 52),
        (2026, 3, 5, 22, 59),
        (2026, 4, 5, 3, 39),
        (2026, 5, 5, 20, 49),
        (2026, 6, 6, 0, 48),
        (2026, 7, 7, 10, 57),
        (2026, 8, 7, 20, 42),
        (2026, 9, 7, 23, 41),
        (2026, 10, 8, 14, 29),
        (2026, 11, 7, 18, 52),
        (2026, 12, 7, 11, 52),
        (2027, 1, 5, 23, 10),
    ],
    # 과거 년도 (회귀 테스트용)
    1978: [
        (1978, 2, 4, 7, 27),
        (1978, 3, 6, 1, 23),
        (1978, 4, 5, 5, 59),
        (1978, 5, 5, 23, 8),
        (1978, 6, 6, 3, 10),
        (1978, 7, 7, 13, 23),
        (1978, 8, 7, 22, 55),
        (1978, 9, 8, 1, 38),
        (1978, 10, 8, 16, 15),
        (1978, 11, 7, 20, 24),
        (1978, 12, 7, 13, 17),
        (1979, 1, 6, 0, 32),
    ],
    1990: [
        (1990, 2, 4, 10, 15),
        (1990, 3, 6, 4, 11),
        (1990, 4, 5, 8, 43),
        (1990, 5, 6, 1, 44),
        (1990, 6, 6, 5, 47),
        (1990, 7, 7, 16, 8),
        (1990, 8, 8, 1, 55),
        (1990, 9, 8, 4, 54),
        (1990, 10, 8, 19, 36),
        (1990, 11, 7, 23, 52),
        (1990, 12, 7, 16, 47),
        (1991, 1, 6, 3, 56),
    ],
    1996: [
        (1996, 2, 4, 15, 8),
        (1996, 3, 5, 9, 2),
        (1996, 4, 4, 13, 43),
        (1996, 5, 5, 6, 53),
        (1996, 6, 5, 10, 54),
        (1996, 7, 6, 21, 7),
        (1996, 8, 7, 6, 54),
        (1996, 9, 7, 9, 55),
        (1996, 10, 8, 0, 45),
        (1996, 11, 7, 4, 59),
        (1996, 12, 6, 21, 55),
        (1997, 1, 5, 9, 8),
    ],
    2000: [
        (2000, 2, 4, 20, 14),
        (2000, 3, 5, 14, 7),
        (2000, 4, 4, 18, 32),
        (2000, 5, 5, 11, 31),
        (2000, 6, 5, 15, 29),
        (2000, 7, 7, 1, 41),
        (2000, 8, 7, 11, 29),
        (2000, 9, 7, 14, 27),
        (2000, 10, 8, 5, 12),
        (2000, 11, 7, 9, 24),
        (2000, 12, 7, 2, 14),
        (2001, 1, 5, 13, 21),
    ],
}

# 날짜만 확인된 절입일 (시각 미상)
SOLAR_TERM_DATES_SUPPLEMENT: Dict[str, str] = {
    "2023-01-06": "小寒",
    "2023-02-04": "立春",
    "2023-03-06": "驚蟄",
    "2023-04-05": "清明",
    "2023-05-06": "立夏",
    "2023-06-06": "芒種",
    "2023-07-07": "小暑",
    "2023-08-08": "立秋",
    "2023-09-08": "白露",
    "2023-10-08": "寒露",
    "2023-11-08": "立冬",
    "2023-12-07": "大雪",
    "2024-01-06": "小寒",
}


def _build_solar_term_table() -> Dict[str, str]:
    """정밀 시각 테이블 + 보충 테이블 → {ISO 날짜: 절기명}"""
    table: Dict[str, str] = {}
    for terms in SOLAR_TERMS_PRECISE.values():
        for entry, term in zip(terms, SOLAR_TERMS_ENTRY):
            table[date(*entry[:3]).isoformat()] = term.name
    table.update(SOLAR_TERM_DATES_SUPPLEMENT)
    return table


SOLAR_TERM_TABLE: Dict[str, str] = _build_solar_term_table()


# ============ ephem Fallback ============

def solar_longitude(moment_utc: datetime) -> float:
    """ephem으로 태양 황경 계산 (당일 춘분점 기준, 0~360도)"""
    when = ephem.Date(moment_utc)
    sun = ephem.Sun()
    sun.compute(when, epoch=when)
    ecliptic = ephem.Ecliptic(sun, epoch=when)
    return math.degrees(ecliptic.lon) % 360


def ephem_solar_term(day: date, utc_offset_hours: int = 9) -> Optional[str]:
    """
    해당 날짜(현지 00:00~24:00)에 태양 황경이 15도 배수를 통과하면 그 절기

    Returns:
        절기명 또는 None (절입일이 아님)
    """
    start_utc = datetime(day.year, day.month, day.day) - timedelta(hours=utc_offset_hours)
    end_utc = start_utc + timedelta(days=1)

    lon_start = solar_longitude(start_utc)
    lon_end = solar_longitude(end_utc)
    if lon_end < lon_start:
        lon_end += 360  # 춘분(0도) 통과

    start_slot = int(lon_start // 15)
    end_slot = int(lon_end // 15)
    if end_slot == start_slot:
        return None

    return TERMS_BY_LONGITUDE[(end_slot * 15) % 360].name


SolarTermFallback = Callable[[date], Optional[str]]


class SolarTermProvider:
    """
    날짜 → 절기 조회

    우선순위:
    1. 정적 테이블 (ISO 날짜 정확히 일치)
    2. Fallback (ephem 태양 황경)
    3. None
    """

    def __init__(
        self,
        table: Optional[Dict[str, str]] = None,
        fallback: Optional[SolarTermFallback] = ephem_solar_term,
        cache: Optional[CalculationCache] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.table = SOLAR_TERM_TABLE if table is None else table
        self.fallback = fallback
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def with_ephem(
        cls,
        utc_offset_hours: int = 9,
        cache: Optional[CalculationCache] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "SolarTermProvider":
        return cls(
            fallback=partial(ephem_solar_term, utc_offset_hours=utc_offset_hours),
            cache=cache,
            logger=logger,
        )

    def solar_term_of(self, value: DateLike) -> Optional[str]:
        """날짜의 절기명 (없으면 None)"""
        day = to_calendar_day(value)
        key = day.isoformat()

        term = self.table.get(key)
        if term is not None:
            return term

        if self.fallback is None:
            return None

        if self.cache is None:
            return self._compute_fallback(day)
        return self.cache.get_or_compute("solar_term", (key,), lambda: self._compute_fallback(day))

    def month_boundary_term_of(self, value: DateLike) -> Optional[SolarTermInfo]:
        """입절일이면 절기 정보, 아니면 None"""
        term = self.solar_term_of(value)
        if term is None:
            return None
        info = TERMS_BY_NAME.get(term)
        if info is None or not info.is_month_boundary:
            return None
        return info

    def _compute_fallback(self, day: date) -> Optional[str]:
        try:
            term = self.fallback(day)
        except Exception as e:
            self.logger.warning(f"[SolarTerm] fallback 실패 {day}: {e}")
            return None
        self.logger.debug(f"[SolarTerm] fallback {day} → {term}")
        return term


# ============ 입춘 보정 ============

def lichun_moment(year: int) -> Tuple[datetime, bool]:
    """
    해당 연도 입춘 시각

    Returns:
        (입춘 시각, 정밀 데이터 여부) - 정밀 데이터 없으면 2월 4일 00:00 근사
    """
    terms = SOLAR_TERMS_PRECISE.get(year)
    if terms:
        return datetime(*terms[0]), True
    return datetime(year, 2, 4, 0, 0), False


def lichun_adjusted_year(value: DateLike) -> int:
    """
    입춘 보정된 연도 반환

    - datetime: 입춘 시각과 비교
    - date: 입춘 날짜와 비교 (입춘 당일은 새해)
    """
    if isinstance(value, datetime):
        moment = value.replace(tzinfo=None)
        start, _ = lichun_moment(moment.year)
        return moment.year if moment >= start else moment.year - 1

    day = to_calendar_day(value)
    if day.year <= 1:
        raise InvalidDateError(value, "year out of range for lichun adjustment")
    start, _ = lichun_moment(day.year)
    return day.year if day >= start.date() else day.year - 1
