"""
Pydantic 스키마 정의
입력 검증 / 출력 직렬화 모델
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict
import datetime as dt
from datetime import date, datetime

from sajucal.services.ganji import Pillar as PillarValue


# ============ 월주 예외 테이블 (data/month_pillar_overrides.json) ============

class MonthOverrideEntry(BaseModel):
    """월주 예외 항목"""
    date: dt.date
    pillar: str = Field(..., min_length=2, max_length=2, description="간지 (예: 甲寅)")
    note: str = ""

    @field_validator("pillar")
    @classmethod
    def _check_pillar(cls, value: str) -> str:
        # 해석 불가능한 간지는 로딩 시점에 실패
        PillarValue.from_name(value)
        return value


class MonthOverrideTableFile(BaseModel):
    """월주 예외 테이블 (버전 관리)"""
    version: str
    description: str = ""
    entries: List[MonthOverrideEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_dates(self):
        seen = set()
        for entry in self.entries:
            if entry.date in seen:
                raise ValueError(f"duplicate override date: {entry.date}")
            seen.add(entry.date)
        return self


# ============ 사주 계산 요청/응답 ============

class CalculateRequest(BaseModel):
    """사주 계산 요청"""
    birth_year: int = Field(..., ge=1, le=9999, description="년도 (양력)")
    birth_month: int = Field(..., ge=1, le=12, description="월")
    birth_day: int = Field(..., ge=1, le=31, description="일")
    birth_hour: Optional[int] = Field(None, ge=0, le=23, description="시간 (0-23시, 선택)")
    birth_minute: int = Field(0, ge=0, le=59, description="분 (0-59)")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="경도 (지방시 보정용)")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="위도")
    city: Optional[str] = Field(None, description="도시명 (좌표 대신)")

    class Config:
        json_schema_extra = {
            "example": {
                "birth_year": 1986,
                "birth_month": 5,
                "birth_day": 26,
                "birth_hour": 10,
                "birth_minute": 30,
                "city": "seoul"
            }
        }

    @model_validator(mode="after")
    def _check_date(self):
        # 2월 30일 등 달력에 없는 날짜
        date(self.birth_year, self.birth_month, self.birth_day)
        return self


class PillarSchema(BaseModel):
    """사주 기둥 (년/월/일/시주)"""
    gan: str = Field(..., description="천간 (甲乙丙丁戊己庚辛壬癸)")
    ji: str = Field(..., description="지지 (子丑寅卯辰巳午未申酉戌亥)")
    ganji: str = Field(..., description="간지 조합 (예: 甲子)")
    ganji_korean: str = Field(..., description="한글 간지 (예: 갑자)")

    # 오행/음양
    gan_element: str = Field(..., description="천간 오행 (木火土金水)")
    ji_element: str = Field(..., description="지지 오행")
    gan_yin_yang: str = Field(..., description="천간 음양")
    ji_yin_yang: str = Field(..., description="지지 음양")

    gan_index: int = Field(..., ge=0, le=9)
    ji_index: int = Field(..., ge=0, le=11)
    hidden_stems: List[str] = Field(default_factory=list, description="지장간")

    # 일간 기준 십성 (주석 정보)
    ten_god: Optional[str] = Field(None, description="천간 십성")
    branch_ten_god: Optional[str] = Field(None, description="지지 십성")
    hidden_stem_ten_gods: List[str] = Field(default_factory=list, description="지장간 십성")

    # 십이운성 / 십이신살
    twelve_fortune: Optional[str] = Field(None, description="십이운성 (일간 기준)")
    twelve_spirit: Optional[str] = Field(None, description="십이신살 (연지 기준)")


class FourPillarsSchema(BaseModel):
    """사주 원국 (4개 기둥)"""
    year_pillar: PillarSchema = Field(..., description="년주")
    month_pillar: PillarSchema = Field(..., description="월주")
    day_pillar: PillarSchema = Field(..., description="일주 (일간=나)")
    hour_pillar: Optional[PillarSchema] = Field(None, description="시주 (시간 미입력시 None)")


class LunarDateSchema(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=30)
    is_leap_month: bool = False


class QualityInfo(BaseModel):
    """계산 품질 정보"""
    has_birth_time: bool = Field(..., description="출생시간 입력 여부")
    month_rule: str = Field(..., description="월주 결정 규칙 (override/solar_term/algorithmic)")
    used_gregorian_month: bool = Field(False, description="음력 데이터 없어 양력월 사용")
    local_time_adjusted: bool = Field(False, description="지방시 보정 적용 여부")
    degraded: bool = Field(False, description="계산 실패로 기본값 대체")


class CalculateResponse(BaseModel):
    """사주 계산 응답"""
    success: bool = True

    saju: FourPillarsSchema

    # 일간 정보 (핵심)
    day_master: str = Field(..., description="일간")
    day_master_element: str = Field(..., description="일간 오행")
    day_master_yin_yang: str = Field(..., description="일간 음양")

    # 오행/음양 분포
    element_count: Dict[str, int] = Field(default_factory=dict)
    yin_yang_count: Dict[str, int] = Field(default_factory=dict)

    solar_term: Optional[str] = None
    lunar_date: Optional[LunarDateSchema] = None
    adjusted_time: Optional[datetime] = None

    quality: QualityInfo


class HourOption(BaseModel):
    """시간대 선택 옵션"""
    index: int = Field(..., description="지지 인덱스 (0-11)")
    ji: str = Field(..., description="지지 한글 (자~해)")
    ji_hanja: str = Field(..., description="지지 한자 (子~亥)")
    range_start: str = Field(..., description="시작 시간 (HH:MM)")
    range_end: str = Field(..., description="종료 시간 (HH:MM)")


# ============ 궁합 ============

class CompatibilitySchema(BaseModel):
    """궁합 점수"""
    score: int = Field(..., ge=0, le=100)
    rating: str
    ten_god: str
    branch_ten_god: str
    element_relation: str
    components: Dict[str, int] = Field(default_factory=dict, description="점수 구성")


class SajuDataSchema(BaseModel):
    """일별 캘린더 + 사용자 사주 비교 결과"""
    day_master: str = Field(..., description="사용자 일간")
    day_element: str = Field(..., description="당일 일간 오행")
    ten_god: str
    branch_ten_god: str
    compatibility: CompatibilitySchema


# ============ 일별 캘린더 ============

class CalendarQuery(BaseModel):
    """일별 캘린더 조회 (날짜 미입력시 오늘)"""
    date: Optional[dt.date] = None


class CalendarRangeQuery(BaseModel):
    """기간 조회 (시작/종료 포함)"""
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_order(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class DailyCalendarRecord(BaseModel):
    """일별 캘린더 정보 (저장 단위, 키: YYYY-MM-DD)"""
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    year_pillar: str
    month_pillar: str
    day_pillar: str
    hour_pillar: Optional[str] = None

    solar_term: Optional[str] = None
    lunar_date: Optional[LunarDateSchema] = None
    month_rule: str = "algorithmic"

    degraded: bool = Field(False, description="기본값 대체 여부")
    saju_data: Optional[SajuDataSchema] = None

    updated_at: Optional[datetime] = None

