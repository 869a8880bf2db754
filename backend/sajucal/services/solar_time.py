"""
지방시(真太陽時) 보정 모듈
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
표준 자오선(동경 135도) 대비 경도 차이로 출생 시각 보정
- 도쿄권(135~145도): +18분
- 서울권(125~135도 미만): -32분
- 그 외: (경도 - 135) × 4분 (분 단위 반올림)
- 과거 서머타임 시행 기간: -60분 (선택)
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sajucal.errors import InvalidDateError

logger = logging.getLogger(__name__)

STANDARD_MERIDIAN = 135.0
MINUTES_PER_DEGREE = 4.0
DST_MINUTES = -60


@dataclass(frozen=True)
class GeoLocation:
    """경도/위도"""
    longitude: float
    latitude: float

    def __post_init__(self):
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidDateError(self.longitude, "longitude out of range")
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidDateError(self.latitude, "latitude out of range")


@dataclass(frozen=True)
class MeridianRegion:
    """고정 보정값을 쓰는 지역"""
    code: str
    name: str
    min_longitude: float
    max_longitude: float
    offset_minutes: int
    include_max: bool = False

    def contains(self, longitude: float) -> bool:
        if longitude < self.min_longitude:
            return False
        if self.include_max:
            return longitude <= self.max_longitude
        return longitude < self.max_longitude


REGIONS: List[MeridianRegion] = [
    MeridianRegion("JP", "도쿄권", 135.0, 145.0, 18, include_max=True),
    MeridianRegion("KR", "서울권", 125.0, 135.0, -32),
]

# 서머타임 시행 기간 (시작일, 종료일 포함)
DST_PERIODS: Dict[str, List[Tuple[date, date]]] = {
    "JP": [
        (date(1948, 5, 1), date(1948, 9, 11)),
        (date(1949, 4, 2), date(1949, 9, 10)),
        (date(1950, 5, 6), date(1950, 9, 9)),
        (date(1951, 5, 5), date(1951, 9, 8)),
    ],
    "KR": [
        (date(1987, 5, 10), date(1987, 10, 11)),
        (date(1988, 5, 8), date(1988, 10, 9)),
    ],
}

# 주요 도시 좌표
MAJOR_CITIES: Dict[str, GeoLocation] = {
    "tokyo": GeoLocation(139.77, 35.68),
    "seoul": GeoLocation(126.98, 37.57),
    "kyoto": GeoLocation(135.77, 35.02),
    "osaka": GeoLocation(135.50, 34.70),
    "nagoya": GeoLocation(136.91, 35.18),
    "fukuoka": GeoLocation(130.40, 33.60),
    "sapporo": GeoLocation(141.35, 43.07),
    "naha": GeoLocation(127.68, 26.22),
    "beijing": GeoLocation(116.41, 39.90),
    "shanghai": GeoLocation(121.47, 31.23),
    "taipei": GeoLocation(121.56, 25.03),
    "hong kong": GeoLocation(114.17, 22.28),
    "busan": GeoLocation(129.04, 35.18),
    "gwangju": GeoLocation(126.85, 35.15),
    "pyongyang": GeoLocation(125.75, 39.03),
    "new york": GeoLocation(-74.01, 40.71),
    "london": GeoLocation(-0.13, 51.51),
    "paris": GeoLocation(2.35, 48.86),
    "sydney": GeoLocation(151.21, -33.87),
    "singapore": GeoLocation(103.82, 1.35),
}

CITY_ALIASES: Dict[str, str] = {
    "東京": "tokyo", "도쿄": "tokyo",
    "서울": "seoul", "ソウル": "seoul",
    "부산": "busan", "釜山": "busan",
    "광주": "gwangju", "光州": "gwangju",
    "大阪": "osaka", "京都": "kyoto",
}


def find_city(name: str) -> Optional[GeoLocation]:
    """도시명(영문/한글/한자) → 좌표"""
    key = str(name).strip()
    key = CITY_ALIASES.get(key, key).lower()
    return MAJOR_CITIES.get(key)


class LocalSolarTimeAdjuster:
    """
    지방시 보정기

    Args:
        apply_dst: 서머타임 시행 기간 보정 여부
        logger: 주입 로거 (기본: 모듈 로거)
    """

    def __init__(self, apply_dst: bool = True, logger: Optional[logging.Logger] = None):
        self.apply_dst = apply_dst
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def region_of(longitude: float) -> Optional[MeridianRegion]:
        for region in REGIONS:
            if region.contains(longitude):
                return region
        return None

    def correction_minutes(self, longitude: float) -> float:
        """경도 보정 (분)"""
        region = self.region_of(longitude)
        if region is not None:
            return float(region.offset_minutes)
        return float(round((longitude - STANDARD_MERIDIAN) * MINUTES_PER_DEGREE))

    def dst_minutes(self, timestamp: datetime, longitude: float) -> int:
        """서머타임 보정 (분): 해당 지역 시행 기간이면 -60"""
        if not self.apply_dst:
            return 0
        region = self.region_of(longitude)
        if region is None:
            return 0

        day = timestamp.date()
        for start, end in DST_PERIODS.get(region.code, []):
            if start <= day <= end:
                return DST_MINUTES
        return 0

    def adjusted_time(
        self,
        timestamp: datetime,
        longitude: Optional[float] = None,
        latitude: Optional[float] = None,
    ) -> datetime:
        """
        지방시 보정된 시각

        위치가 없으면 원래 시각 그대로 반환.
        보정 결과가 자정을 넘으면 날짜도 바뀜 (일주에 영향).
        """
        if not isinstance(timestamp, datetime):
            raise InvalidDateError(timestamp, "timestamp must be a datetime")
        if longitude is None:
            return timestamp

        location = GeoLocation(longitude, latitude if latitude is not None else 0.0)

        minutes = self.correction_minutes(location.longitude)
        minutes += self.dst_minutes(timestamp, location.longitude)

        try:
            adjusted = timestamp + timedelta(minutes=minutes)
        except OverflowError as e:
            raise InvalidDateError(timestamp, "adjusted time out of range") from e
        self.logger.debug(
            f"[SolarTime] {timestamp.isoformat()} @ {location.longitude:.2f} → "
            f"{adjusted.isoformat()} ({minutes:+.1f}분)"
        )
        return adjusted
