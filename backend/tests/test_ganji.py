"""
천간·지지 분류 / 순환 인덱스 테스트
"""
from datetime import date, datetime, timedelta

import pytest

from sajucal.errors import CalculationError, InvalidDateError, UnrepresentableSymbolError
from sajucal.services.cycle import ReferencePoint, days_between, offset_index, to_calendar_day
from sajucal.services.ganji import (
    BRANCHES,
    STEMS,
    Branch,
    Element,
    FourPillars,
    Pillar,
    Polarity,
    Stem,
    branch_index,
    branch_name,
    get_element,
    stem_index,
    stem_name,
)


class TestClassifier:
    """오행/음양 분류"""

    def test_name_index_round_trip(self):
        """인덱스 ↔ 이름 왕복"""
        for i in range(10):
            assert stem_index(stem_name(i)) == i
        for i in range(12):
            assert branch_index(branch_name(i)) == i

    def test_korean_symbols(self):
        assert Stem.from_symbol("갑") == Stem.GAP
        assert Branch.from_symbol("해") == Branch.HAE
        assert Pillar.from_name("계사").name == "癸巳"

    @pytest.mark.parametrize("symbol,expected", [
        ("甲", Element.WOOD), ("丁", Element.FIRE), ("己", Element.EARTH),
        ("庚", Element.METAL), ("癸", Element.WATER),
        ("子", Element.WATER), ("丑", Element.EARTH), ("卯", Element.WOOD),
        ("午", Element.FIRE), ("酉", Element.METAL), ("戌", Element.EARTH),
    ])
    def test_elements(self, symbol, expected):
        assert get_element(symbol) == expected, \
            f"{symbol}: Expected {expected}, got {get_element(symbol)}"

    def test_polarity_by_parity(self):
        assert Stem.GAP.polarity == Polarity.YANG
        assert Stem.EUL.polarity == Polarity.YIN
        assert Branch.HAE.polarity == Polarity.YIN
        assert Branch.O.polarity == Polarity.YANG

    def test_element_cycles(self):
        assert Element.WOOD.generates == Element.FIRE
        assert Element.WATER.generates == Element.WOOD
        assert Element.WOOD.overcomes == Element.EARTH
        assert Element.FIRE.overcomes == Element.METAL

    @pytest.mark.parametrize("symbol", ["X", "", "甲甲", 42])
    def test_unknown_symbol(self, symbol):
        with pytest.raises(UnrepresentableSymbolError):
            Stem.from_symbol(symbol)

    def test_index_out_of_range(self):
        with pytest.raises(UnrepresentableSymbolError):
            Stem.from_index(10)
        with pytest.raises(UnrepresentableSymbolError):
            Branch.from_index(-1)

    def test_hidden_stems(self):
        assert Branch.IN.hidden_stems == (Stem.GAP, Stem.BYEONG, Stem.MU)
        assert all(1 <= len(b.hidden_stems) <= 3 for b in BRANCHES)

    def test_pillar_dict(self):
        data = Pillar.from_name("丙午").to_dict()
        assert data["ganji"] == "丙午"
        assert data["ganji_korean"] == "병오"
        assert data["gan_element"] == "火"
        assert data["ji_index"] == 6

    def test_four_pillars_without_hour(self):
        pillars = FourPillars(
            Pillar.from_name("癸卯"), Pillar.from_name("壬戌"), Pillar.from_name("丙午")
        )
        assert pillars.day_master == Stem.BYEONG
        assert [p for p, _ in pillars.items()] == ["year", "month", "day"]
        assert pillars.to_dict()["hour_pillar"] is None


class TestCycle:
    """순환 인덱스 엔진"""

    def test_to_calendar_day(self):
        assert to_calendar_day("2023-10-02") == date(2023, 10, 2)
        assert to_calendar_day(datetime(2023, 10, 2, 23, 59)) == date(2023, 10, 2)
        assert to_calendar_day("2023-10-02T05:00:00") == date(2023, 10, 2)

    @pytest.mark.parametrize("value", ["2023-13-01", "not a date", "", 20231002, None])
    def test_invalid_input(self, value):
        with pytest.raises(InvalidDateError):
            to_calendar_day(value)

    def test_invalid_date_is_value_error(self):
        with pytest.raises(ValueError):
            to_calendar_day("2023-02-30")

    def test_days_between(self):
        assert days_between("2023-10-02", "2023-10-15") == 13
        assert days_between("2023-10-15", "2023-10-02") == -13

    @pytest.mark.parametrize("cycle", [10, 12, 60])
    def test_consistency_around_anchor(self, cycle):
        """기준일 전후 모두 d+n 과 d 의 인덱스 동일"""
        anchor = ReferencePoint(date(2023, 10, 2), 3)
        for offset in (-1000, -37, -1, 0, 1, 59, 1234):
            d = anchor.day + timedelta(days=offset)
            assert offset_index(d, anchor, cycle) == offset_index(d + timedelta(days=cycle), anchor, cycle)
            assert 0 <= offset_index(d, anchor, cycle) < cycle

    def test_before_anchor(self):
        anchor = ReferencePoint(date(2023, 10, 2), 0)
        assert offset_index(date(2023, 10, 1), anchor, 10) == 9
        assert offset_index(date(2023, 9, 20), anchor, 12) == 0

    def test_bad_cycle(self):
        anchor = ReferencePoint(date(2023, 10, 2), 0)
        with pytest.raises(CalculationError):
            offset_index("2023-10-02", anchor, 0)
        with pytest.raises(CalculationError):
            offset_index("2023-10-02", ReferencePoint(date(2023, 10, 2), 12), 12)

    def test_symbol_tables_complete(self):
        assert len(STEMS) == 10
        assert len(BRANCHES) == 12
