"""
사주 계산 엔진 (통합) 테스트
"""
from datetime import datetime

import pytest

from sajucal.errors import CalculationError, InvalidDateError
from sajucal.models.schemas import CalculateRequest
from sajucal.services.month_pillar import MonthRule
from sajucal.services.solar_time import GeoLocation, find_city


class TestSajuEngine:
    """SajuEngine"""

    def test_calculate_with_hour(self, engine):
        """2023-10-15 0시: 癸卯 壬戌 丙午 戊子"""
        result = engine.calculate("2023-10-15", hour=0)
        assert result.pillars.names == "癸卯 壬戌 丙午 戊子", \
            f"Expected 癸卯 壬戌 丙午 戊子, got {result.pillars.names}"
        assert result.month.rule == MonthRule.OVERRIDE
        assert result.has_birth_time
        assert not result.local_time_adjusted

    def test_calculate_without_hour(self, engine):
        result = engine.calculate("2023-10-02")
        assert result.pillars.hour is None
        assert result.pillars.day.name == "癸巳"
        assert not result.has_birth_time

    def test_local_time_crosses_midnight(self, engine):
        """서울 00:10 → 전날 23:38 (일주/시주/월주 모두 보정 날짜 기준)"""
        result = engine.calculate("2023-10-15", hour=0, minute=10, location=find_city("seoul"))
        assert result.adjusted_time == datetime(2023, 10, 14, 23, 38)
        assert result.pillars.day.name == "乙巳"
        assert result.pillars.hour.name == "丙子"
        assert result.pillars.month.name == "戊亥"
        assert result.month.used_gregorian_month
        assert result.local_time_adjusted

    def test_solar_term_reported(self, engine):
        result = engine.calculate("2023-03-06")
        assert result.solar_term == "驚蟄"
        assert result.month.rule == MonthRule.SOLAR_TERM

    def test_lunar_date_reported(self, engine):
        result = engine.calculate("2025-04-01")
        assert result.lunar_date.month == 3
        assert result.pillars.day.name == "庚子"

    def test_invalid_inputs(self, engine):
        with pytest.raises(InvalidDateError):
            engine.calculate("2023-02-30")
        with pytest.raises(InvalidDateError):
            engine.calculate("2023-10-15", hour=24)

    def test_adjusted_time_out_of_range(self, engine):
        with pytest.raises(InvalidDateError):
            engine.calculate("9999-12-31", hour=23, location=GeoLocation(180.0, 0.0))
        with pytest.raises(InvalidDateError):
            engine.calculate("0001-01-01", hour=0, location=GeoLocation(-180.0, 0.0))

    def test_calculate_request(self, engine):
        """1986-05-26 10시 서울"""
        request = CalculateRequest(birth_year=1986, birth_month=5, birth_day=26, birth_hour=10, city="seoul")
        response = engine.calculate_request(request)

        assert response.saju.year_pillar.ganji == "丙寅"
        assert response.saju.month_pillar.ganji == "癸巳"
        assert response.saju.day_pillar.ganji == "庚午"
        assert response.saju.hour_pillar.ganji == "辛巳"
        assert response.day_master == "庚"
        assert response.day_master_element == "金"
        assert response.day_master_yin_yang == "陽"
        assert response.element_count["火"] == 4
        assert response.saju.day_pillar.ten_god == "日主"
        assert response.saju.day_pillar.twelve_fortune == "沐浴"
        assert response.saju.year_pillar.twelve_fortune == "絶"
        assert response.saju.year_pillar.twelve_spirit == "地殺"
        assert response.saju.hour_pillar.twelve_spirit == "亡身殺"
        assert response.lunar_date.day == 18
        assert response.quality.local_time_adjusted
        assert response.quality.month_rule == "override"
        assert response.adjusted_time == datetime(1986, 5, 26, 9, 28)

    def test_request_without_location(self, engine):
        request = CalculateRequest(birth_year=2023, birth_month=10, birth_day=2)
        response = engine.calculate_request(request)
        assert response.saju.hour_pillar is None
        assert response.adjusted_time is None
        assert not response.quality.has_birth_time

    def test_unknown_city(self, engine):
        request = CalculateRequest(birth_year=2023, birth_month=10, birth_day=2, birth_hour=5, city="atlantis")
        with pytest.raises(CalculationError):
            engine.calculate_request(request)

    def test_compatibility(self, engine):
        user = engine.calculate("2023-10-03").pillars      # 甲午
        other = engine.calculate("2023-10-15").pillars     # 丙午
        result = engine.compatibility(user, other)
        assert result.score == 82
        assert 0 <= result.score <= 100

    def test_hour_options(self, engine):
        options = engine.get_hour_options()
        assert len(options) == 12
        assert options[0].ji_hanja == "子"
        assert options[0].range_start == "23:00"

    def test_lichun_boundary_setting(self, settings, cache, test_logger):
        from sajucal.services.saju_engine import SajuEngine

        lichun_settings = settings.model_copy(update={"year_boundary": "lichun"})
        engine = SajuEngine(settings=lichun_settings, cache=cache, logger=test_logger)
        assert engine.calculate("2025-02-02").pillars.year.name == "甲辰"
        assert engine.calculate("2025-02-04").pillars.year.name == "乙巳"

    def test_lazy_singleton(self):
        from sajucal.services import get_saju_engine
        from sajucal.services.saju_engine import SajuEngine

        engine = get_saju_engine()
        assert isinstance(engine, SajuEngine)
        assert get_saju_engine() is engine
