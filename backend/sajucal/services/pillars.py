"""
연주 / 일주 / 시주 계산 모듈
- 일주: 기준일(2023-10-02 = 癸巳) 대비 순환 인덱스
- 시주: 일간 기준 자시 천간 + 2시간 단위 지지
- 연주: 1984년 = 甲子 기준 (양력 연도 또는 입춘 보정 연도)
"""
import logging
from datetime import date, datetime
from typing import Optional, Tuple, Union

from sajucal.errors import InvalidDateError
from sajucal.services.cycle import (
    DateLike,
    ReferencePoint,
    offset_index,
    offset_year_index,
    to_calendar_day,
)
from sajucal.services.ganji import BRANCHES, Pillar, Stem
from sajucal.services.solar_terms import lichun_adjusted_year
from sajucal.services.solar_time import GeoLocation, LocalSolarTimeAdjuster

logger = logging.getLogger(__name__)

# 검증된 기준: 2023년 10월 2일 = 癸巳일 (癸=9, 巳=5)
DAY_ANCHOR_DATE = date(2023, 10, 2)
DAY_STEM_ANCHOR = ReferencePoint(DAY_ANCHOR_DATE, 9)
DAY_BRANCH_ANCHOR = ReferencePoint(DAY_ANCHOR_DATE, 5)

# 1984년 = 甲子년
YEAR_ANCHOR = 1984
YEAR_STEM_ANCHOR_INDEX = 0
YEAR_BRANCH_ANCHOR_INDEX = 0


class DayPillarResolver:
    """일주 계산기"""

    def __init__(
        self,
        stem_anchor: ReferencePoint = DAY_STEM_ANCHOR,
        branch_anchor: ReferencePoint = DAY_BRANCH_ANCHOR,
        time_adjuster: Optional[LocalSolarTimeAdjuster] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.stem_anchor = stem_anchor
        self.branch_anchor = branch_anchor
        self.time_adjuster = time_adjuster or LocalSolarTimeAdjuster()
        self.logger = logger or logging.getLogger(__name__)

    def day_pillar(self, value: DateLike) -> Pillar:
        stem_idx = offset_index(value, self.stem_anchor, 10)
        branch_idx = offset_index(value, self.branch_anchor, 12)
        return Pillar.from_indices(stem_idx, branch_idx)

    def day_pillar_at(
        self,
        timestamp: datetime,
        location: Optional[GeoLocation] = None,
    ) -> Tuple[Pillar, datetime]:
        """
        지방시 보정 후 일주

        Returns:
            (일주, 보정된 시각) - 보정으로 날짜가 바뀔 수 있음
        """
        adjusted = timestamp
        if location is not None:
            adjusted = self.time_adjuster.adjusted_time(
                timestamp, location.longitude, location.latitude
            )
            if adjusted.date() != timestamp.date():
                self.logger.info(
                    f"[DayPillar] 지방시 보정으로 날짜 변경: {timestamp.date()} → {adjusted.date()}"
                )
        return self.day_pillar(adjusted), adjusted


class HourPillarResolver:
    """
    시주 계산기

    시간 → 지지 (2시간 단위):
    - 子시: 23:00~00:59
    - 丑시: 01:00~02:59
    - ...
    - 亥시: 21:00~22:59

    일간 → 자시 천간:
    - 갑/기일 → 甲子시
    - 을/경일 → 丙子시
    - 병/신일 → 戊子시
    - 정/임일 → 庚子시
    - 무/계일 → 壬子시
    """

    HOUR_RANGES = [
        ("23:00", "00:59"),  # 자
        ("01:00", "02:59"),  # 축
        ("03:00", "04:59"),  # 인
        ("05:00", "06:59"),  # 묘
        ("07:00", "08:59"),  # 진
        ("09:00", "10:59"),  # 사
        ("11:00", "12:59"),  # 오
        ("13:00", "14:59"),  # 미
        ("15:00", "16:59"),  # 신
        ("17:00", "18:59"),  # 유
        ("19:00", "20:59"),  # 술
        ("21:00", "22:59"),  # 해
    ]

    @staticmethod
    def hour_bucket(hour: int) -> int:
        """시간 → 지지 인덱스 (23시 = 자시)"""
        if not isinstance(hour, int) or not 0 <= hour <= 23:
            raise InvalidDateError(hour, "hour must be 0-23")
        return ((hour + 1) % 24) // 2

    @staticmethod
    def hour_stem_base(day_stem: Stem) -> int:
        """일간 → 자시 천간 인덱스 (갑기/을경/병신/정임/무계 짝)"""
        return (day_stem.index % 5) * 2

    def hour_pillar(self, hour: int, day_stem: Union[Stem, str]) -> Pillar:
        day_stem = Stem.from_symbol(day_stem)
        bucket = self.hour_bucket(hour)
        stem_idx = (self.hour_stem_base(day_stem) + bucket) % 10
        return Pillar(Stem.from_index(stem_idx), BRANCHES[bucket])

    @classmethod
    def hour_range(cls, bucket: int) -> Tuple[str, str]:
        """지지 인덱스 → 시간 범위 문자열"""
        return cls.HOUR_RANGES[bucket]


class YearPillarResolver:
    """
    연주 계산기

    Args:
        boundary: "calendar" (양력 연도) | "lichun" (입춘 보정 연도)
    """

    def __init__(self, boundary: str = "calendar", logger: Optional[logging.Logger] = None):
        if boundary not in ("calendar", "lichun"):
            raise ValueError(f"unknown year boundary: {boundary}")
        self.boundary = boundary
        self.logger = logger or logging.getLogger(__name__)

    def effective_year(self, value: DateLike) -> int:
        if self.boundary == "lichun":
            return lichun_adjusted_year(value)
        return to_calendar_day(value).year

    def year_pillar(self, value: DateLike) -> Pillar:
        return self.year_pillar_for_year(self.effective_year(value))

    @staticmethod
    def year_pillar_for_year(year: int) -> Pillar:
        stem_idx = offset_year_index(year, YEAR_ANCHOR, YEAR_STEM_ANCHOR_INDEX, 10)
        branch_idx = offset_year_index(year, YEAR_ANCHOR, YEAR_BRANCH_ANCHOR_INDEX, 12)
        return Pillar.from_indices(stem_idx, branch_idx)
