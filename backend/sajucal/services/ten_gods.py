"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
십성(十星) 계산 모듈
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
일간(나) 기준으로 다른 천간/지지의 관계 분류
- 오행 상생/상극 + 음양 동일 여부 → 10개 십성
- 일간 자신 → 日主
사주 원국 주석: 위치별 십성과 지장간 십성, 십이운성/십이신살, 오행/음양 분포
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from sajucal.errors import UnrepresentableSymbolError
from sajucal.services.ganji import (
    Branch,
    Element,
    FourPillars,
    Pillar,
    Polarity,
    Stem,
)
from sajucal.services.twelve_stages import twelve_fortune_of, twelve_spirit_of

logger = logging.getLogger(__name__)


class TenGod(str, Enum):
    """십성 (日主 포함 11개)"""
    PEER = "比肩"              # 비견
    RIVAL = "劫財"             # 겁재
    EATING_GOD = "食神"        # 식신
    HURTING_OFFICER = "傷官"   # 상관
    INDIRECT_WEALTH = "偏財"   # 편재
    DIRECT_WEALTH = "正財"     # 정재
    SEVEN_KILLINGS = "七殺"    # 편관(칠살)
    DIRECT_OFFICER = "正官"    # 정관
    INDIRECT_RESOURCE = "偏印" # 편인
    DIRECT_RESOURCE = "正印"   # 정인
    SELF = "日主"              # 일간 자신

    @property
    def korean(self) -> str:
        return TEN_GOD_KOREAN[self]

    @classmethod
    def from_name(cls, name: str) -> "TenGod":
        """한자/한글/별칭(偏官) → TenGod"""
        if isinstance(name, TenGod):
            return name
        text = str(name).strip()
        for member in cls:
            if text == member.value or text == member.korean:
                return member
        alias = TEN_GOD_ALIASES.get(text)
        if alias is not None:
            return alias
        raise UnrepresentableSymbolError(name, "ten god")


TEN_GOD_KOREAN = {
    TenGod.PEER: "비견",
    TenGod.RIVAL: "겁재",
    TenGod.EATING_GOD: "식신",
    TenGod.HURTING_OFFICER: "상관",
    TenGod.INDIRECT_WEALTH: "편재",
    TenGod.DIRECT_WEALTH: "정재",
    TenGod.SEVEN_KILLINGS: "편관",
    TenGod.DIRECT_OFFICER: "정관",
    TenGod.INDIRECT_RESOURCE: "편인",
    TenGod.DIRECT_RESOURCE: "정인",
    TenGod.SELF: "일간",
}

TEN_GOD_ALIASES = {
    "偏官": TenGod.SEVEN_KILLINGS,
    "칠살": TenGod.SEVEN_KILLINGS,
}


class ElementRelation(str, Enum):
    """일간 기준 상대 오행 관계"""
    SAME = "same"
    I_GENERATE = "i_generate"       # 내가 생함
    I_CONQUER = "i_conquer"         # 내가 극함
    CONQUERS_ME = "conquers_me"     # 나를 극함
    GENERATES_ME = "generates_me"   # 나를 생함


# 십성(十星) 관계 - (음양 같음, 음양 다름)
TEN_GODS_RELATION: Dict[ElementRelation, Tuple[TenGod, TenGod]] = {
    ElementRelation.SAME: (TenGod.PEER, TenGod.RIVAL),
    ElementRelation.I_GENERATE: (TenGod.EATING_GOD, TenGod.HURTING_OFFICER),
    ElementRelation.I_CONQUER: (TenGod.INDIRECT_WEALTH, TenGod.DIRECT_WEALTH),
    ElementRelation.CONQUERS_ME: (TenGod.SEVEN_KILLINGS, TenGod.DIRECT_OFFICER),
    ElementRelation.GENERATES_ME: (TenGod.INDIRECT_RESOURCE, TenGod.DIRECT_RESOURCE),
}


def element_relation(me: Element, other: Element) -> ElementRelation:
    """오행 관계 (나 기준)"""
    if me == other:
        return ElementRelation.SAME
    if me.generates == other:
        return ElementRelation.I_GENERATE
    if other.generates == me:
        return ElementRelation.GENERATES_ME
    if me.overcomes == other:
        return ElementRelation.I_CONQUER
    return ElementRelation.CONQUERS_ME


def classify_ten_god(
    me_element: Element,
    me_polarity: Polarity,
    target_element: Element,
    target_polarity: Polarity,
) -> TenGod:
    same, diff = TEN_GODS_RELATION[element_relation(me_element, target_element)]
    return same if me_polarity == target_polarity else diff


def relation_of(day_master: Union[Stem, str], target: Union[Stem, str]) -> TenGod:
    """천간 십성"""
    day_master = Stem.from_symbol(day_master)
    target = Stem.from_symbol(target)
    if day_master == target:
        return TenGod.SELF
    return classify_ten_god(
        day_master.element, day_master.polarity, target.element, target.polarity
    )


def branch_relation_of(day_master: Union[Stem, str], branch: Union[Branch, str]) -> TenGod:
    """지지 십성 (지지 오행 + 인덱스 음양 기준)"""
    day_master = Stem.from_symbol(day_master)
    branch = Branch.from_symbol(branch)
    return classify_ten_god(
        day_master.element, day_master.polarity, branch.element, branch.polarity
    )


def hidden_stem_relations(day_master: Union[Stem, str], branch: Union[Branch, str]) -> List[TenGod]:
    """지장간 십성 (지장간 순서 유지, 일간과 같은 지장간은 比肩)"""
    day_master = Stem.from_symbol(day_master)
    branch = Branch.from_symbol(branch)
    return [
        classify_ten_god(day_master.element, day_master.polarity, s.element, s.polarity)
        for s in branch.hidden_stems
    ]


@dataclass(frozen=True)
class PillarAnnotation:
    """위치별 십성 정보"""
    position: str
    pillar: Pillar
    ten_god: TenGod
    branch_ten_god: TenGod
    hidden_stem_ten_gods: Tuple[TenGod, ...] = ()
    twelve_fortune: Optional[str] = None
    twelve_spirit: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        data = self.pillar.to_dict()
        data["ten_god"] = self.ten_god.value
        data["branch_ten_god"] = self.branch_ten_god.value
        data["hidden_stem_ten_gods"] = [t.value for t in self.hidden_stem_ten_gods]
        data["twelve_fortune"] = self.twelve_fortune
        data["twelve_spirit"] = self.twelve_spirit
        return data


@dataclass(frozen=True)
class SajuAnnotation:
    """사주 원국 주석"""
    pillars: FourPillars
    day_master: Stem
    positions: Dict[str, PillarAnnotation] = field(default_factory=dict)
    element_count: Dict[str, int] = field(default_factory=dict)
    yin_yang_count: Dict[str, int] = field(default_factory=dict)
    ten_gods_count: Dict[str, int] = field(default_factory=dict)


class TenGodCalculator:
    """
    십성 계산기

    Features:
    1. 위치별 천간/지지 십성
    2. 지장간 십성
    3. 십이운성 (일간 기준) / 십이신살 (연지 기준)
    4. 오행 분포 (천간 + 지지)
    5. 음양 분포
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def annotate(self, pillars: FourPillars) -> SajuAnnotation:
        day_master = pillars.day_master
        positions: Dict[str, PillarAnnotation] = {}

        for position, pillar in pillars.items():
            positions[position] = PillarAnnotation(
                position=position,
                pillar=pillar,
                ten_god=relation_of(day_master, pillar.stem),
                branch_ten_god=branch_relation_of(day_master, pillar.branch),
                hidden_stem_ten_gods=tuple(hidden_stem_relations(day_master, pillar.branch)),
                twelve_fortune=twelve_fortune_of(day_master, pillar.branch),
                twelve_spirit=twelve_spirit_of(pillars.year.branch, pillar.branch),
            )

        # 일간 자신(日主)은 분포에서 제외
        ten_gods_count = Counter()
        for annotation in positions.values():
            if annotation.ten_god != TenGod.SELF:
                ten_gods_count[annotation.ten_god.value] += 1
            ten_gods_count[annotation.branch_ten_god.value] += 1

        result = SajuAnnotation(
            pillars=pillars,
            day_master=day_master,
            positions=positions,
            element_count=self.count_elements(pillars),
            yin_yang_count=self.count_yin_yang(pillars),
            ten_gods_count=dict(ten_gods_count),
        )
        self.logger.debug(f"[TenGod] {pillars.names} 일간={day_master.value} {result.ten_gods_count}")
        return result

    @staticmethod
    def count_elements(pillars: FourPillars) -> Dict[str, int]:
        """오행별 개수 (천간 + 지지, 0개 포함)"""
        count = {e.value: 0 for e in Element}
        for _, pillar in pillars.items():
            count[pillar.stem.element.value] += 1
            count[pillar.branch.element.value] += 1
        return count

    @staticmethod
    def count_yin_yang(pillars: FourPillars) -> Dict[str, int]:
        count = {p.value: 0 for p in Polarity}
        for _, pillar in pillars.items():
            count[pillar.stem.polarity.value] += 1
            count[pillar.branch.polarity.value] += 1
        return count
