"""
연주 / 일주 / 시주 테스트
"""
from datetime import date, datetime

import pytest

from sajucal.errors import InvalidDateError
from sajucal.services.ganji import Stem
from sajucal.services.pillars import DayPillarResolver, HourPillarResolver, YearPillarResolver
from sajucal.services.solar_time import GeoLocation, find_city


class TestDayPillar:
    """일주 (기준일 2023-10-02 = 癸巳)"""

    @pytest.mark.parametrize("day,expected", [
        ("2023-10-02", "癸巳"),
        ("2023-10-03", "甲午"),
        ("2023-10-15", "丙午"),
        ("2023-10-01", "壬辰"),
        ("2000-01-01", "戊午"),
        ("2025-04-01", "庚子"),
        ("1986-05-26", "庚午"),
    ])
    def test_fixtures(self, day, expected):
        result = DayPillarResolver().day_pillar(day)
        assert result.name == expected, f"{day}: Expected {expected}, got {result.name}"

    def test_sixty_day_cycle(self):
        resolver = DayPillarResolver()
        assert resolver.day_pillar(date(1900, 3, 1)) == resolver.day_pillar(date(1900, 4, 30))

    def test_datetime_uses_calendar_day(self):
        resolver = DayPillarResolver()
        assert resolver.day_pillar(datetime(2023, 10, 2, 23, 59)).name == "癸巳"

    def test_local_time_changes_day(self, caplog, test_logger):
        """서울 -32분 보정으로 전날로 넘어감"""
        resolver = DayPillarResolver(logger=test_logger)
        with caplog.at_level("INFO"):
            pillar, adjusted = resolver.day_pillar_at(datetime(2023, 10, 15, 0, 10), find_city("seoul"))
        assert adjusted == datetime(2023, 10, 14, 23, 38)
        assert pillar.name == "乙巳"
        assert "날짜 변경" in caplog.text

    def test_no_location(self):
        pillar, adjusted = DayPillarResolver().day_pillar_at(datetime(2023, 10, 15, 0, 10))
        assert pillar.name == "丙午"
        assert adjusted == datetime(2023, 10, 15, 0, 10)


class TestHourPillar:
    """시주"""

    @pytest.mark.parametrize("hour,bucket", [
        (23, 0), (0, 0), (1, 1), (2, 1), (11, 6), (12, 6), (21, 11), (22, 11),
    ])
    def test_hour_bucket(self, hour, bucket):
        assert HourPillarResolver.hour_bucket(hour) == bucket

    @pytest.mark.parametrize("day_stem,hour,expected", [
        ("丙", 0, "戊子"),
        ("甲", 0, "甲子"),
        ("己", 0, "甲子"),
        ("甲", 12, "庚午"),
        ("癸", 0, "壬子"),
        ("庚", 9, "辛巳"),
    ])
    def test_hour_pillar(self, day_stem, hour, expected):
        result = HourPillarResolver().hour_pillar(hour, day_stem)
        assert result.name == expected, f"{day_stem}일 {hour}시: Expected {expected}, got {result.name}"

    @pytest.mark.parametrize("hour", [-1, 24, 12.5, "12"])
    def test_invalid_hour(self, hour):
        with pytest.raises(InvalidDateError):
            HourPillarResolver().hour_pillar(hour, Stem.GAP)

    def test_hour_range(self):
        assert HourPillarResolver.hour_range(0) == ("23:00", "00:59")
        assert HourPillarResolver.hour_range(11) == ("21:00", "22:59")


class TestYearPillar:
    """연주 (1984 = 甲子)"""

    @pytest.mark.parametrize("year,expected", [
        (1984, "甲子"), (2023, "癸卯"), (2024, "甲辰"), (2025, "乙巳"),
        (1986, "丙寅"), (1983, "癸亥"),
    ])
    def test_year_for_year(self, year, expected):
        assert YearPillarResolver.year_pillar_for_year(year).name == expected

    def test_calendar_boundary(self):
        resolver = YearPillarResolver("calendar")
        assert resolver.year_pillar("2025-01-01").name == "乙巳"

    def test_lichun_boundary(self):
        resolver = YearPillarResolver("lichun")
        assert resolver.year_pillar("2025-01-01").name == "甲辰"
        assert resolver.year_pillar("2025-02-03").name == "乙巳"
        assert resolver.year_pillar(datetime(2025, 2, 3, 22, 0)).name == "甲辰"
        assert resolver.year_pillar(datetime(2025, 2, 3, 23, 30)).name == "乙巳"

    def test_unknown_boundary(self):
        with pytest.raises(ValueError):
            YearPillarResolver("solstice")

    def test_year_out_of_range(self):
        with pytest.raises(InvalidDateError):
            YearPillarResolver.year_pillar_for_year(10000)
