"""
사주 계산 엔진 (통합)
- 연주 / 월주 / 일주 / 시주 결정기 조립
- 지방시 보정 → 일주/시주
- 십성·오행 주석, 궁합
- 캐시/로거/Fallback은 모두 주입 (전역 상태 없음)
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sajucal.config import Settings, get_settings
from sajucal.errors import CalculationError, InvalidDateError
from sajucal.models.schemas import (
    CalculateRequest,
    CalculateResponse,
    FourPillarsSchema,
    HourOption,
    LunarDateSchema,
    PillarSchema,
    QualityInfo,
)
from sajucal.services.cache import CalculationCache, create_cache
from sajucal.services.compatibility import CompatibilityResult, CompatibilityScorer
from sajucal.services.cycle import DateLike, to_calendar_day
from sajucal.services.ganji import BRANCHES, FourPillars
from sajucal.services.lunar_calendar import LunarCalendarProvider, LunarDate
from sajucal.services.month_pillar import (
    MonthOverrideTable,
    MonthPillarResolution,
    MonthPillarResolver,
)
from sajucal.services.pillars import DayPillarResolver, HourPillarResolver, YearPillarResolver
from sajucal.services.solar_terms import SolarTermProvider
from sajucal.services.solar_time import GeoLocation, LocalSolarTimeAdjuster, find_city
from sajucal.services.ten_gods import SajuAnnotation, TenGodCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SajuResult:
    """사주 계산 결과"""
    pillars: FourPillars
    month: MonthPillarResolution
    has_birth_time: bool
    adjusted_time: Optional[datetime] = None
    location: Optional[GeoLocation] = None
    solar_term: Optional[str] = None
    lunar_date: Optional[LunarDate] = None

    @property
    def local_time_adjusted(self) -> bool:
        return self.location is not None and self.adjusted_time is not None


class SajuEngine:
    """
    사주 계산 엔진

    Args:
        settings: 설정 (기본: get_settings())
        cache: 계산 캐시 (기본: 설정 기반 새 캐시)
        solar_terms / lunar: Provider (기본: 설정에 따라 Fallback 포함)
        overrides: 월주 예외 테이블 (기본: 패키지 데이터)
        logger: 주입 로거
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[CalculationCache] = None,
        solar_terms: Optional[SolarTermProvider] = None,
        lunar: Optional[LunarCalendarProvider] = None,
        overrides: Optional[MonthOverrideTable] = None,
        time_adjuster: Optional[LocalSolarTimeAdjuster] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.settings = settings or get_settings()
        self.logger = logger or logging.getLogger(__name__)
        self.cache = cache if cache is not None else create_cache(self.settings)

        if solar_terms is None:
            if self.settings.solar_term_fallback_enabled:
                solar_terms = SolarTermProvider.with_ephem(
                    utc_offset_hours=self.settings.standard_utc_offset_hours,
                    cache=self.cache,
                    logger=self.logger,
                )
            else:
                solar_terms = SolarTermProvider(fallback=None, logger=self.logger)
        if lunar is None:
            if self.settings.lunar_fallback_enabled:
                lunar = LunarCalendarProvider(cache=self.cache, logger=self.logger)
            else:
                lunar = LunarCalendarProvider(fallback=None, logger=self.logger)

        self.solar_terms = solar_terms
        self.lunar = lunar
        self.time_adjuster = time_adjuster or LocalSolarTimeAdjuster(
            apply_dst=self.settings.apply_dst_correction, logger=self.logger
        )

        self.year_resolver = YearPillarResolver(self.settings.year_boundary, logger=self.logger)
        self.month_resolver = MonthPillarResolver(
            overrides=overrides,
            solar_terms=self.solar_terms,
            lunar=self.lunar,
            logger=self.logger,
        )
        self.day_resolver = DayPillarResolver(time_adjuster=self.time_adjuster, logger=self.logger)
        self.hour_resolver = HourPillarResolver()
        self.ten_gods = TenGodCalculator(logger=self.logger)
        self.scorer = CompatibilityScorer(logger=self.logger)

    # ============ 계산 ============

    def calculate(
        self,
        value: DateLike,
        hour: Optional[int] = None,
        minute: int = 0,
        location: Optional[GeoLocation] = None,
    ) -> SajuResult:
        """
        사주 계산

        Args:
            value: 양력 날짜 (date / datetime / 'YYYY-MM-DD')
            hour, minute: 시각 (없으면 시주 None)
            location: 좌표 (시각이 있을 때만 지방시 보정)
        """
        day = to_calendar_day(value)
        self.logger.info(f"[SajuEngine] 계산 시작: {day} hour={hour} minute={minute}")

        adjusted: Optional[datetime] = None
        if hour is not None:
            try:
                birth_time = datetime(day.year, day.month, day.day, hour, minute)
            except (TypeError, ValueError) as e:
                raise InvalidDateError(f"{day} {hour}:{minute}", str(e)) from e

            adjusted = birth_time
            if location is not None:
                _, adjusted = self.day_resolver.day_pillar_at(birth_time, location)

        effective = adjusted if adjusted is not None else day
        effective_day = to_calendar_day(effective)

        year_pillar = self.year_resolver.year_pillar(effective)
        month = self.month_resolver.month_pillar(effective_day, year_pillar.stem)
        day_pillar = self.day_resolver.day_pillar(effective_day)
        hour_pillar = None
        if adjusted is not None:
            hour_pillar = self.hour_resolver.hour_pillar(adjusted.hour, day_pillar.stem)

        pillars = FourPillars(year_pillar, month.pillar, day_pillar, hour_pillar)
        self.logger.info(f"[SajuEngine] {effective_day} → {pillars.names} (월주: {month.rule.value})")

        return SajuResult(
            pillars=pillars,
            month=month,
            has_birth_time=hour is not None,
            adjusted_time=adjusted,
            location=location,
            solar_term=month.solar_term or self.solar_terms.solar_term_of(effective_day),
            lunar_date=month.lunar_date or self.lunar.lunar_date_of(effective_day),
        )

    def annotate(self, pillars: FourPillars) -> SajuAnnotation:
        return self.ten_gods.annotate(pillars)

    def compatibility(self, user: FourPillars, other: FourPillars) -> CompatibilityResult:
        return self.scorer.compare(user, other)

    # ============ 요청/응답 변환 ============

    @staticmethod
    def resolve_location(request: CalculateRequest) -> Optional[GeoLocation]:
        """요청 좌표 또는 도시명 → 좌표"""
        if request.longitude is not None:
            latitude = request.latitude if request.latitude is not None else 0.0
            return GeoLocation(request.longitude, latitude)
        if request.city:
            location = find_city(request.city)
            if location is None:
                raise CalculationError(f"Unknown city: {request.city}")
            return location
        return None

    def calculate_request(self, request: CalculateRequest) -> CalculateResponse:
        """검증된 요청 → 응답 스키마"""
        result = self.calculate(
            f"{request.birth_year:04d}-{request.birth_month:02d}-{request.birth_day:02d}",
            hour=request.birth_hour,
            minute=request.birth_minute,
            location=self.resolve_location(request),
        )
        return self.to_response(result)

    def to_response(self, result: SajuResult, degraded: bool = False) -> CalculateResponse:
        annotation = self.annotate(result.pillars)

        def _pillar(position: str) -> Optional[PillarSchema]:
            found = annotation.positions.get(position)
            return PillarSchema(**found.to_dict()) if found else None

        day_master = annotation.day_master
        lunar = result.lunar_date
        return CalculateResponse(
            saju=FourPillarsSchema(
                year_pillar=_pillar("year"),
                month_pillar=_pillar("month"),
                day_pillar=_pillar("day"),
                hour_pillar=_pillar("hour"),
            ),
            day_master=day_master.value,
            day_master_element=day_master.element.value,
            day_master_yin_yang=day_master.polarity.value,
            element_count=annotation.element_count,
            yin_yang_count=annotation.yin_yang_count,
            solar_term=result.solar_term,
            lunar_date=LunarDateSchema(**lunar.to_dict()) if lunar else None,
            adjusted_time=result.adjusted_time if result.local_time_adjusted else None,
            quality=QualityInfo(
                has_birth_time=result.has_birth_time,
                month_rule=result.month.rule.value,
                used_gregorian_month=result.month.used_gregorian_month,
                local_time_adjusted=result.local_time_adjusted,
                degraded=degraded,
            ),
        )

    def get_hour_options(self) -> List[HourOption]:
        """시간대 선택 옵션 (자시~해시)"""
        options = []
        for idx, branch in enumerate(BRANCHES):
            start, end = HourPillarResolver.hour_range(idx)
            options.append(HourOption(
                index=idx,
                ji=branch.korean,
                ji_hanja=branch.value,
                range_start=start,
                range_end=end,
            ))
        return options
