"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
월주 계산 모듈
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
결정 순서 (먼저 맞는 규칙 적용):
1. 예외 테이블 (data/month_pillar_overrides.json) - 절대 우선
2. 절입일 규칙 - 12 입절 당일이면 절기 → 월지, 연간 기준 월간
3. 일반 공식 - 음력월 (없으면 양력월) + 연간 기준 월간
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from sajucal.errors import IncompleteLunarDataError, InvalidDateError
from sajucal.models.schemas import MonthOverrideTableFile
from sajucal.services.cycle import DateLike, to_calendar_day
from sajucal.services.ganji import Branch, Pillar, Polarity, Stem
from sajucal.services.lunar_calendar import LunarCalendarProvider, LunarDate
from sajucal.services.solar_terms import SolarTermProvider, TERMS_BY_NAME, TERM_TO_BRANCH

logger = logging.getLogger(__name__)

OVERRIDE_TABLE_PATH = Path(__file__).resolve().parent.parent / "data" / "month_pillar_overrides.json"


class MonthRule(str, Enum):
    """월주를 결정한 규칙 (진단용)"""
    OVERRIDE = "override"
    SOLAR_TERM = "solar_term"
    ALGORITHMIC = "algorithmic"


@dataclass(frozen=True)
class MonthPillarResolution:
    """
    월주 결정 결과

    rule은 진단용 태그일 뿐, 정답 여부와 무관.
    """
    rule: MonthRule
    pillar: Pillar
    month_number: Optional[int] = None      # 절월 번호 또는 음력/양력 월
    solar_term: Optional[str] = None
    lunar_date: Optional[LunarDate] = None
    used_gregorian_month: bool = False


@dataclass(frozen=True)
class MonthOverrideTable:
    """월주 예외 테이블 (ISO 날짜 → 월주)"""
    version: str
    entries: Dict[str, Pillar] = field(default_factory=dict)

    def lookup(self, day: date) -> Optional[Pillar]:
        return self.entries.get(day.isoformat())

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key) -> bool:
        if isinstance(key, date):
            key = key.isoformat()
        return key in self.entries


def load_override_table(path: Optional[Union[str, Path]] = None) -> MonthOverrideTable:
    """예외 테이블 JSON 로딩 (pydantic 검증)"""
    path = Path(path) if path is not None else OVERRIDE_TABLE_PATH
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    parsed = MonthOverrideTableFile.model_validate(raw)
    entries = {e.date.isoformat(): Pillar.from_name(e.pillar) for e in parsed.entries}

    logger.info(f"[MonthPillar] 예외 테이블 v{parsed.version} 로딩: {len(entries)}건")
    return MonthOverrideTable(version=parsed.version, entries=entries)


# ============ 공식 ============

def month_stem_base(year_stem: Stem) -> int:
    """
    연간 → 월간 시작 인덱스

    - 양간: (10 - (i*2) % 10) % 10
    - 음간: (6 + i) % 10
    """
    i = year_stem.index
    if year_stem.polarity == Polarity.YANG:
        return (10 - (i * 2) % 10) % 10
    return (6 + i) % 10


def algorithmic_month_pillar(month: int, year_stem: Stem) -> Pillar:
    """
    일반 공식 월주

    월간 = (base + month - 1) % 10
    월지 = (month + 1) % 12  (1월=寅)
    """
    if not 1 <= month <= 12:
        raise InvalidDateError(month, "month must be 1-12")
    stem_idx = (month_stem_base(year_stem) + (month - 1)) % 10
    branch_idx = (month + 1) % 12
    return Pillar.from_indices(stem_idx, branch_idx)


def solar_term_month_pillar(term_name: str, year_stem: Stem) -> Pillar:
    """절입일 월주: 월지는 절기 테이블, 월간은 절월 번호 기준"""
    term = TERMS_BY_NAME[term_name]
    branch: Branch = TERM_TO_BRANCH[term_name]
    stem_idx = (month_stem_base(year_stem) + (term.month - 1)) % 10
    return Pillar(Stem.from_index(stem_idx), branch)


class MonthPillarResolver:
    """
    월주 결정기

    Args:
        overrides: 예외 테이블 (기본: data/month_pillar_overrides.json)
        solar_terms: 절기 Provider
        lunar: 음력 Provider
        logger: 주입 로거
    """

    def __init__(
        self,
        overrides: Optional[MonthOverrideTable] = None,
        solar_terms: Optional[SolarTermProvider] = None,
        lunar: Optional[LunarCalendarProvider] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.overrides = overrides if overrides is not None else load_override_table()
        self.solar_terms = solar_terms if solar_terms is not None else SolarTermProvider()
        self.lunar = lunar if lunar is not None else LunarCalendarProvider()
        self.logger = logger or logging.getLogger(__name__)

    def month_pillar(self, value: DateLike, year_stem: Union[Stem, str]) -> MonthPillarResolution:
        day = to_calendar_day(value)
        year_stem = Stem.from_symbol(year_stem)

        # 1. 예외 테이블
        override = self.overrides.lookup(day)
        if override is not None:
            self.logger.debug(f"[MonthPillar] override {day} → {override.name}")
            return MonthPillarResolution(rule=MonthRule.OVERRIDE, pillar=override)

        # 2. 절입일
        term = self.solar_terms.month_boundary_term_of(day)
        if term is not None:
            pillar = solar_term_month_pillar(term.name, year_stem)
            self.logger.debug(f"[MonthPillar] solar_term {day} {term.name} → {pillar.name}")
            return MonthPillarResolution(
                rule=MonthRule.SOLAR_TERM,
                pillar=pillar,
                month_number=term.month,
                solar_term=term.name,
            )

        # 3. 일반 공식 (음력월, 윤달은 같은 월 번호)
        lunar_date: Optional[LunarDate] = None
        try:
            lunar_date = self.lunar.require_lunar_date(day)
            month = lunar_date.month
            used_gregorian = False
        except IncompleteLunarDataError:
            self.logger.warning(f"[MonthPillar] 음력 데이터 없음 {day} → 양력 {day.month}월 사용")
            month = day.month
            used_gregorian = True

        pillar = algorithmic_month_pillar(month, year_stem)
        self.logger.debug(f"[MonthPillar] algorithmic {day} month={month} → {pillar.name}")
        return MonthPillarResolution(
            rule=MonthRule.ALGORITHMIC,
            pillar=pillar,
            month_number=month,
            lunar_date=lunar_date,
            used_gregorian_month=used_gregorian,
        )
