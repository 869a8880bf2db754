"""
순환 인덱스 엔진
- 기준점(anchor)으로부터의 일수 차이를 주기(10/12/60)로 나눈 나머지
- 시각은 제거하고 달력 날짜끼리만 비교 (자정 경계 오차 방지)
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

from sajucal.errors import CalculationError, InvalidDateError

DateLike = Union[date, datetime, str]

# date 범위 (datetime.date 지원 범위와 동일)
MIN_YEAR = 1
MAX_YEAR = 9999


@dataclass(frozen=True)
class ReferencePoint:
    """순환 기준점: (기준일, 기준일의 인덱스)"""
    day: date
    index: int


def to_calendar_day(value: DateLike) -> date:
    """
    입력값 → 달력 날짜

    - date: 그대로
    - datetime: 시각 제거 (tz-aware면 해당 tz의 달력 필드 사용)
    - str: 'YYYY-MM-DD' 또는 ISO datetime
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidDateError(value, "empty string")
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text).date()
        except ValueError as e:
            raise InvalidDateError(value, str(e)) from e
    raise InvalidDateError(value, f"unsupported type {type(value).__name__}")


def days_between(start: DateLike, end: DateLike) -> int:
    """end - start (일)"""
    return (to_calendar_day(end) - to_calendar_day(start)).days


def offset_index(target: DateLike, anchor: ReferencePoint, cycle_length: int) -> int:
    """
    기준점 대비 순환 인덱스

    index = (anchor + ((diff % n) + n) % n) % n
    기준일 이전 날짜(diff < 0)도 같은 식으로 처리

    Raises:
        InvalidDateError: 날짜 해석 실패
        CalculationError: 잘못된 기준점/주기
    """
    if cycle_length <= 0:
        raise CalculationError(f"cycle_length must be positive: {cycle_length}")
    if not 0 <= anchor.index < cycle_length:
        raise CalculationError(
            f"anchor index {anchor.index} out of range for cycle {cycle_length}"
        )

    diff_days = days_between(anchor.day, target)
    shift = ((diff_days % cycle_length) + cycle_length) % cycle_length
    return (anchor.index + shift) % cycle_length


def offset_year_index(year: int, anchor_year: int, anchor_index: int, cycle_length: int) -> int:
    """연 단위 순환 인덱스 (연주용)"""
    if cycle_length <= 0:
        raise CalculationError(f"cycle_length must be positive: {cycle_length}")
    if not 0 <= anchor_index < cycle_length:
        raise CalculationError(
            f"anchor index {anchor_index} out of range for cycle {cycle_length}"
        )
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidDateError(year, "year out of range")

    diff_years = year - anchor_year
    shift = ((diff_years % cycle_length) + cycle_length) % cycle_length
    return (anchor_index + shift) % cycle_length
