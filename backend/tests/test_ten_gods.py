"""
십성 / 궁합 점수 테스트
"""
import itertools

import pytest

from sajucal.errors import UnrepresentableSymbolError
from sajucal.services.compatibility import (
    CompatibilityScorer,
    ElementRelationKind,
    compatibility_rating,
    element_relation_kind,
)
from sajucal.services.ganji import Branch, Element, FourPillars, Pillar, Stem
from sajucal.services.ten_gods import (
    TenGod,
    TenGodCalculator,
    branch_relation_of,
    hidden_stem_relations,
    relation_of,
)
from sajucal.services.twelve_stages import TWELVE_FORTUNES, twelve_fortune_of, twelve_spirit_of


def four(*names):
    return FourPillars(*(Pillar.from_name(n) for n in names))


class TestTenGods:
    """십성 분류 (일간 甲 기준)"""

    @pytest.mark.parametrize("target,expected", [
        ("甲", "日主"),
        ("乙", "劫財"),
        ("丙", "食神"),
        ("丁", "傷官"),
        ("戊", "偏財"),
        ("己", "正財"),
        ("庚", "七殺"),
        ("辛", "正官"),
        ("壬", "偏印"),
        ("癸", "正印"),
    ])
    def test_stem_relation(self, target, expected):
        result = relation_of("甲", target)
        assert result.value == expected, f"甲→{target}: Expected {expected}, got {result.value}"

    def test_other_day_masters(self):
        assert relation_of("丙", "丙") == TenGod.SELF
        assert relation_of("庚", "壬") == TenGod.EATING_GOD

    @pytest.mark.parametrize("branch,expected", [
        ("子", "偏印"),
        ("亥", "正印"),
        ("午", "食神"),
        ("寅", "比肩"),
        ("丑", "正財"),
    ])
    def test_branch_relation(self, branch, expected):
        assert branch_relation_of("甲", branch).value == expected

    def test_hidden_stems(self):
        assert hidden_stem_relations("甲", "寅") == [TenGod.PEER, TenGod.EATING_GOD, TenGod.INDIRECT_WEALTH]

    @pytest.mark.parametrize("name", ["偏官", "칠살", "七殺", "편관"])
    def test_aliases(self, name):
        assert TenGod.from_name(name) == TenGod.SEVEN_KILLINGS

    def test_unknown_name(self):
        with pytest.raises(UnrepresentableSymbolError):
            TenGod.from_name("財星")

    def test_annotate(self):
        pillars = four("丙寅", "癸巳", "庚午", "辛巳")
        result = TenGodCalculator().annotate(pillars)

        assert result.day_master == Stem.GYEONG
        assert result.positions["day"].ten_god == TenGod.SELF
        assert result.positions["year"].ten_god == TenGod.SEVEN_KILLINGS
        assert result.positions["hour"].ten_god == TenGod.RIVAL
        assert result.element_count == {"木": 1, "火": 4, "土": 0, "金": 2, "水": 1}
        assert sum(result.yin_yang_count.values()) == 8
        assert "日主" not in result.ten_gods_count

    def test_annotate_without_hour(self):
        result = TenGodCalculator().annotate(four("癸卯", "壬戌", "丙午"))
        assert "hour" not in result.positions
        assert sum(result.element_count.values()) == 6


class TestTwelveStages:
    """십이운성 / 십이신살"""

    @pytest.mark.parametrize("day_master,branch,expected", [
        ("甲", "亥", "長生"),
        ("甲", "卯", "帝旺"),
        ("甲", "未", "墓"),
        ("乙", "午", "長生"),
        ("乙", "寅", "帝旺"),
        ("乙", "亥", "死"),
        ("丙", "午", "帝旺"),
        ("庚", "巳", "長生"),
        ("庚", "申", "臨官"),
        ("庚", "寅", "絶"),
        ("癸", "子", "臨官"),
    ])
    def test_twelve_fortune(self, day_master, branch, expected):
        result = twelve_fortune_of(day_master, branch)
        assert result == expected, f"{day_master}/{branch}: Expected {expected}, got {result}"

    @pytest.mark.parametrize("day_master", [s.value for s in Stem])
    def test_fortune_cycle_covers_all_stages(self, day_master):
        stages = [twelve_fortune_of(day_master, b) for b in Branch]
        assert sorted(stages) == sorted(TWELVE_FORTUNES)

    @pytest.mark.parametrize("year_branch,branch,expected", [
        ("子", "巳", "劫殺"),
        ("子", "酉", "年殺"),
        ("子", "子", "將星殺"),
        ("子", "寅", "驛馬殺"),
        ("子", "辰", "華蓋殺"),
        ("寅", "寅", "地殺"),
        ("寅", "申", "驛馬殺"),
        ("卯", "子", "年殺"),
        ("酉", "亥", "驛馬殺"),
    ])
    def test_twelve_spirit(self, year_branch, branch, expected):
        assert twelve_spirit_of(year_branch, branch) == expected

    def test_same_group_shares_cycle(self):
        """삼합 같은 연지는 같은 신살"""
        for branch in Branch:
            assert twelve_spirit_of("申", branch) == twelve_spirit_of("辰", branch)

    def test_annotate_attaches_stages(self):
        result = TenGodCalculator().annotate(four("丙寅", "癸巳", "庚午", "辛卯"))
        fortunes = {p: a.twelve_fortune for p, a in result.positions.items()}
        spirits = {p: a.twelve_spirit for p, a in result.positions.items()}

        assert fortunes == {"year": "絶", "month": "長生", "day": "沐浴", "hour": "胎"}
        assert spirits == {"year": "地殺", "month": "亡身殺", "day": "將星殺", "hour": "年殺"}
        assert result.positions["day"].to_dict()["twelve_fortune"] == "沐浴"


class TestCompatibility:
    """궁합 점수"""

    def test_element_relation_priority(self):
        assert element_relation_kind(Element.WOOD, Element.FIRE) == ElementRelationKind.USER_GENERATES
        assert element_relation_kind(Element.FIRE, Element.WOOD) == ElementRelationKind.OTHER_GENERATES
        assert element_relation_kind(Element.WOOD, Element.EARTH) == ElementRelationKind.USER_OVERCOMES
        assert element_relation_kind(Element.WOOD, Element.METAL) == ElementRelationKind.OTHER_OVERCOMES
        assert element_relation_kind(Element.WATER, Element.WATER) == ElementRelationKind.SAME

    @pytest.mark.parametrize("user,other,ten_god,branch,expected", [
        ("木", "火", "食神", "食神", 82),
        ("木", "金", "偏財", "偏財", 25),
        ("木", "木", "日主", "比肩", 62),
        ("水", "木", "正官", "偏官", 52),
        ("土", "火", "正印", "劫財", 68),
    ])
    def test_score(self, user, other, ten_god, branch, expected):
        score = CompatibilityScorer().score(user, other, ten_god, branch)
        assert score == expected, f"Expected {expected}, got {score}"

    def test_score_bounds(self):
        """모든 조합에서 0~100"""
        scorer = CompatibilityScorer()
        gods = list(TenGod)
        for a, b in itertools.product(Element, repeat=2):
            for t, bt in itertools.product(gods, repeat=2):
                assert 0 <= scorer.score(a, b, t, bt) <= 100

    def test_components(self):
        result = CompatibilityScorer().evaluate("木", "火", "食神", "食神")
        assert result.components == {"base": 50, "element": 10, "ten_god": 15, "branch_ten_god": 7}
        assert result.rating == "非常に良好"
        assert result.to_dict()["element_relation"] == "user_generates"

    @pytest.mark.parametrize("score,label", [
        (100, "非常に良好"), (80, "非常に良好"), (79, "良好"), (60, "良好"),
        (40, "中立"), (20, "要注意"), (19, "困難"), (0, "困難"),
    ])
    def test_rating(self, score, label):
        assert compatibility_rating(score) == label

    def test_compare(self):
        user = four("甲子", "丙寅", "甲子")
        other = four("乙丑", "丁卯", "丙午")
        result = CompatibilityScorer().compare(user, other)
        assert result.ten_god == TenGod.EATING_GOD
        assert result.branch_ten_god == TenGod.EATING_GOD
        assert result.score == 82

    def test_compare_many_sorted(self):
        user = four("甲子", "丙寅", "甲子")
        others = [
            ("metal", four("甲子", "丙寅", "庚申")),
            ("fire", four("甲子", "丙寅", "丙午")),
            ("wood", four("甲子", "丙寅", "甲寅")),
        ]
        results = CompatibilityScorer().compare_many(user, others)
        scores = [r.score for _, r in results]
        assert scores == sorted(scores, reverse=True)
        assert results[0][0] == "fire"
