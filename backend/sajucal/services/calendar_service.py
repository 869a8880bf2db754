"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
일별 캘린더 서비스
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
- 입력 검증 (pydantic) → 엔진 계산 → 저장소 캐싱
- 날짜 미입력: 오늘 (UTC+9 자정 기준)
- 기간 조회: 없는 날짜만 계산 (ThreadPoolExecutor), 날짜 오름차순
- 계산 실패: error 로그 + degraded=True 기본값 레코드 (기간 조회는 중단하지 않음)
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from sajucal.config import Settings, get_settings
from sajucal.errors import InvalidDateError
from sajucal.models.schemas import (
    CalculateRequest,
    CalculateResponse,
    CalendarQuery,
    CalendarRangeQuery,
    CompatibilitySchema,
    DailyCalendarRecord,
    LunarDateSchema,
    SajuDataSchema,
)
from sajucal.services.calendar_store import DailyCalendarStore
from sajucal.services.ganji import FourPillars, Pillar
from sajucal.services.month_pillar import MonthPillarResolution, MonthRule, algorithmic_month_pillar
from sajucal.services.pillars import DayPillarResolver, YearPillarResolver
from sajucal.services.saju_engine import SajuEngine, SajuResult

logger = logging.getLogger(__name__)


def default_result(day: date) -> SajuResult:
    """
    기본값 사주 (자정, 양력월 공식)

    절기/음력 Provider 없이 순환 계산만 사용.
    """
    year_pillar = YearPillarResolver.year_pillar_for_year(day.year)
    month_pillar = algorithmic_month_pillar(day.month, year_pillar.stem)
    day_pillar = DayPillarResolver().day_pillar(day)
    return SajuResult(
        pillars=FourPillars(year_pillar, month_pillar, day_pillar),
        month=MonthPillarResolution(
            rule=MonthRule.ALGORITHMIC,
            pillar=month_pillar,
            month_number=day.month,
            used_gregorian_month=True,
        ),
        has_birth_time=False,
    )


class DailyCalendarService:
    """
    일별 캘린더 서비스

    Args:
        engine: 사주 엔진 (기본: 설정 기반 새 엔진)
        store: 저장소 (기본: settings.calendar_db_path)
        clock: 현재 시각 (테스트 주입용, tz-aware)
    """

    def __init__(
        self,
        engine: Optional[SajuEngine] = None,
        store: Optional[DailyCalendarStore] = None,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or get_settings()
        self.logger = logger or logging.getLogger(__name__)
        self.engine = engine or SajuEngine(settings=self.settings, logger=self.logger)
        self.store = store or DailyCalendarStore(self.settings.calendar_db_path, logger=self.logger)
        self.local_tz = timezone(timedelta(hours=self.settings.standard_utc_offset_hours))
        self.clock = clock or (lambda: datetime.now(self.local_tz))

    # ============ 조회 ============

    def today(self) -> date:
        """현지(UTC+9) 기준 오늘"""
        return self.clock().astimezone(self.local_tz).date()

    def get_or_create(self, value: Union[str, date, None] = None) -> DailyCalendarRecord:
        """
        일별 캘린더 조회 (없으면 계산 후 저장)

        Raises:
            InvalidDateError: 날짜 형식 오류
        """
        try:
            query = CalendarQuery(date=value)
        except ValidationError as e:
            raise InvalidDateError(value, "expected YYYY-MM-DD") from e
        day = query.date or self.today()

        found = self.store.find_by_date(day)
        if found is not None:
            self.logger.debug(f"[DailyCalendar] 저장소 조회: {day}")
            return found

        record = self.build_record(day)
        return self._save(record)

    def get_today(self) -> DailyCalendarRecord:
        return self.get_or_create(self.today())

    def get_range(self, start: Union[str, date], end: Union[str, date]) -> List[DailyCalendarRecord]:
        """
        기간 조회 (시작/종료 포함, 날짜 오름차순)

        Raises:
            InvalidDateError: 날짜 형식 오류, start > end, 최대 일수 초과
        """
        try:
            query = CalendarRangeQuery(start_date=start, end_date=end)
        except ValidationError as e:
            raise InvalidDateError(f"{start}..{end}", "invalid range") from e

        span = (query.end_date - query.start_date).days + 1
        if span > self.settings.range_max_days:
            raise InvalidDateError(
                f"{start}..{end}", f"range exceeds {self.settings.range_max_days} days"
            )

        days = [query.start_date + timedelta(days=i) for i in range(span)]
        existing = {r.date: r for r in self.store.find_by_date_range(query.start_date, query.end_date)}
        missing = [d for d in days if d.isoformat() not in existing]

        self.logger.info(
            f"[DailyCalendar] 기간 {query.start_date}~{query.end_date}: "
            f"저장 {len(existing)}건, 계산 {len(missing)}건"
        )

        computed = self._build_many(missing)
        for record in computed:
            existing[record.date] = self._save(record)

        return [existing[d.isoformat()] for d in days]

    # ============ 계산 ============

    def calculate(self, request: Union[CalculateRequest, Dict[str, Any]]) -> CalculateResponse:
        """
        사주 계산 (사주 + 십성/오행 주석)

        입력 검증 실패는 ValidationError 그대로 전파.
        계산 실패는 자정 기본값 + quality.degraded=True.
        """
        if not isinstance(request, CalculateRequest):
            request = CalculateRequest.model_validate(request)

        try:
            return self.engine.calculate_request(request)
        except Exception as e:
            self.logger.error(f"[DailyCalendar] 사주 계산 실패 {request.model_dump()}: {e}")
            day = date(request.birth_year, request.birth_month, request.birth_day)
            return self.engine.to_response(default_result(day), degraded=True)

    def build_record(self, value: Union[str, date]) -> DailyCalendarRecord:
        """날짜 → 일별 레코드 (실패 시 degraded 기본값)"""
        day = date.fromisoformat(value) if isinstance(value, str) else value
        try:
            result = self.engine.calculate(day)
            degraded = False
        except Exception as e:
            self.logger.error(f"[DailyCalendar] 계산 실패 {day}: {e}")
            result = default_result(day)
            degraded = True
        return self.record_from_result(day, result, degraded=degraded)

    @staticmethod
    def record_from_result(day: date, result: SajuResult, degraded: bool = False) -> DailyCalendarRecord:
        pillars = result.pillars
        lunar = result.lunar_date
        return DailyCalendarRecord(
            date=day.isoformat(),
            year_pillar=pillars.year.name,
            month_pillar=pillars.month.name,
            day_pillar=pillars.day.name,
            hour_pillar=pillars.hour.name if pillars.hour else None,
            solar_term=result.solar_term,
            lunar_date=LunarDateSchema(**lunar.to_dict()) if lunar else None,
            month_rule=result.month.rule.value,
            degraded=degraded,
        )

    def enrich_with_subject(
        self,
        record: DailyCalendarRecord,
        subject: FourPillars,
    ) -> DailyCalendarRecord:
        """
        사용자 사주 기준 궁합 정보 추가 (저장하지 않음)

        당일 일주를 상대 사주로 보고 비교.
        """
        day_pillars = FourPillars(
            Pillar.from_name(record.year_pillar),
            Pillar.from_name(record.month_pillar),
            Pillar.from_name(record.day_pillar),
        )
        result = self.engine.compatibility(subject, day_pillars)
        saju_data = SajuDataSchema(
            day_master=subject.day_master.value,
            day_element=day_pillars.day_master.element.value,
            ten_god=result.ten_god.value,
            branch_ten_god=result.branch_ten_god.value,
            compatibility=CompatibilitySchema(**result.to_dict()),
        )
        self.logger.debug(f"[DailyCalendar] {record.date} 궁합 {result.score} ({result.rating})")
        return record.model_copy(update={"saju_data": saju_data})

    # ============ 내부 ============

    def _build_many(self, days: List[date]) -> List[DailyCalendarRecord]:
        workers = self.settings.range_workers
        if workers <= 1 or len(days) <= 1:
            return [self.build_record(d) for d in days]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self.build_record, days))

    def _save(self, record: DailyCalendarRecord) -> DailyCalendarRecord:
        # degraded 레코드는 저장하지 않음 (다음 조회 때 재계산)
        if record.degraded:
            return record
        return self.store.create_or_update_by_date(record)
