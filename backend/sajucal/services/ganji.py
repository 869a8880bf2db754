"""
천간·지지 분류 모듈
- 천간(10개) × 지지(12개) = 60갑자
- 오행(五行) / 음양(陰陽) 분류
- 지장간(地藏干)
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple, Union

from sajucal.errors import UnrepresentableSymbolError

# 천간 (10개)
CHEONGAN_HANJA = ["甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸"]
CHEONGAN = ["갑", "을", "병", "정", "무", "기", "경", "신", "임", "계"]

# 지지 (12개)
JIJI_HANJA = ["子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥"]
JIJI = ["자", "축", "인", "묘", "진", "사", "오", "미", "신", "유", "술", "해"]


class Element(str, Enum):
    """오행"""
    WOOD = "木"
    FIRE = "火"
    EARTH = "土"
    METAL = "金"
    WATER = "水"

    @property
    def korean(self) -> str:
        return ELEMENT_KOREAN[self]

    @property
    def generates(self) -> "Element":
        """상생: 목→화→토→금→수→목"""
        return GENERATING_CYCLE[self]

    @property
    def overcomes(self) -> "Element":
        """상극: 목→토→수→화→금→목"""
        return OVERCOMING_CYCLE[self]


class Polarity(str, Enum):
    """음양"""
    YANG = "陽"
    YIN = "陰"

    @classmethod
    def from_index(cls, index: int) -> "Polarity":
        # 짝수 인덱스 = 양
        return cls.YANG if index % 2 == 0 else cls.YIN


ELEMENT_KOREAN = {
    Element.WOOD: "목",
    Element.FIRE: "화",
    Element.EARTH: "토",
    Element.METAL: "금",
    Element.WATER: "수",
}

GENERATING_CYCLE = {
    Element.WOOD: Element.FIRE,
    Element.FIRE: Element.EARTH,
    Element.EARTH: Element.METAL,
    Element.METAL: Element.WATER,
    Element.WATER: Element.WOOD,
}

OVERCOMING_CYCLE = {
    Element.WOOD: Element.EARTH,
    Element.EARTH: Element.WATER,
    Element.WATER: Element.FIRE,
    Element.FIRE: Element.METAL,
    Element.METAL: Element.WOOD,
}


class Stem(Enum):
    """천간"""
    GAP = "甲"
    EUL = "乙"
    BYEONG = "丙"
    JEONG = "丁"
    MU = "戊"
    GI = "己"
    GYEONG = "庚"
    SIN = "辛"
    IM = "壬"
    GYE = "癸"

    @property
    def index(self) -> int:
        return CHEONGAN_HANJA.index(self.value)

    @property
    def korean(self) -> str:
        return CHEONGAN[self.index]

    @property
    def element(self) -> Element:
        return STEM_ELEMENTS[self.index]

    @property
    def polarity(self) -> Polarity:
        return Polarity.from_index(self.index)

    @classmethod
    def from_index(cls, index: int) -> "Stem":
        if not 0 <= index < 10:
            raise UnrepresentableSymbolError(index, "stem index")
        return STEMS[index]

    @classmethod
    def from_symbol(cls, symbol: str) -> "Stem":
        """한자(甲) 또는 한글(갑) → Stem"""
        if isinstance(symbol, Stem):
            return symbol
        text = str(symbol).strip()
        if text in CHEONGAN_HANJA:
            return STEMS[CHEONGAN_HANJA.index(text)]
        if text in CHEONGAN:
            return STEMS[CHEONGAN.index(text)]
        raise UnrepresentableSymbolError(symbol, "stem")


class Branch(Enum):
    """지지"""
    JA = "子"
    CHUK = "丑"
    IN = "寅"
    MYO = "卯"
    JIN = "辰"
    SA = "巳"
    O = "午"
    MI = "未"
    SIN = "申"
    YU = "酉"
    SUL = "戌"
    HAE = "亥"

    @property
    def index(self) -> int:
        return JIJI_HANJA.index(self.value)

    @property
    def korean(self) -> str:
        return JIJI[self.index]

    @property
    def element(self) -> Element:
        return BRANCH_ELEMENTS[self.index]

    @property
    def polarity(self) -> Polarity:
        return Polarity.from_index(self.index)

    @property
    def hidden_stems(self) -> Tuple[Stem, ...]:
        """지장간 (1~3개, 순서 유지)"""
        return HIDDEN_STEMS[self]

    @classmethod
    def from_index(cls, index: int) -> "Branch":
        if not 0 <= index < 12:
            raise UnrepresentableSymbolError(index, "branch index")
        return BRANCHES[index]

    @classmethod
    def from_symbol(cls, symbol: str) -> "Branch":
        """한자(子) 또는 한글(자) → Branch"""
        if isinstance(symbol, Branch):
            return symbol
        text = str(symbol).strip()
        if text in JIJI_HANJA:
            return BRANCHES[JIJI_HANJA.index(text)]
        if text in JIJI:
            return BRANCHES[JIJI.index(text)]
        raise UnrepresentableSymbolError(symbol, "branch")


STEMS: Tuple[Stem, ...] = tuple(Stem)
BRANCHES: Tuple[Branch, ...] = tuple(Branch)

# 천간-오행 (갑을=목, 병정=화, 무기=토, 경신=금, 임계=수)
STEM_ELEMENTS = [
    Element.WOOD, Element.WOOD,
    Element.FIRE, Element.FIRE,
    Element.EARTH, Element.EARTH,
    Element.METAL, Element.METAL,
    Element.WATER, Element.WATER,
]

# 지지-오행
BRANCH_ELEMENTS = [
    Element.WATER, Element.EARTH, Element.WOOD, Element.WOOD,
    Element.EARTH, Element.FIRE, Element.FIRE, Element.EARTH,
    Element.METAL, Element.METAL, Element.EARTH, Element.WATER,
]

# 지장간 (본기 순서는 전통 표기 기준)
HIDDEN_STEMS: Dict[Branch, Tuple[Stem, ...]] = {
    Branch.JA: (Stem.GYE,),
    Branch.CHUK: (Stem.GI, Stem.GYE, Stem.SIN),
    Branch.IN: (Stem.GAP, Stem.BYEONG, Stem.MU),
    Branch.MYO: (Stem.EUL,),
    Branch.JIN: (Stem.MU, Stem.EUL, Stem.GYE),
    Branch.SA: (Stem.BYEONG, Stem.GYEONG, Stem.MU),
    Branch.O: (Stem.JEONG, Stem.GI),
    Branch.MI: (Stem.GI, Stem.JEONG, Stem.EUL),
    Branch.SIN: (Stem.GYEONG, Stem.IM, Stem.MU),
    Branch.YU: (Stem.SIN,),
    Branch.SUL: (Stem.MU, Stem.SIN, Stem.JEONG),
    Branch.HAE: (Stem.IM, Stem.GAP),
}


@dataclass(frozen=True)
class Pillar:
    """간지 기둥 (년/월/일/시주) - 값 객체"""
    stem: Stem
    branch: Branch

    @property
    def name(self) -> str:
        return f"{self.stem.value}{self.branch.value}"

    @property
    def korean_name(self) -> str:
        return f"{self.stem.korean}{self.branch.korean}"

    @classmethod
    def from_indices(cls, stem_idx: int, branch_idx: int) -> "Pillar":
        return cls(Stem.from_index(stem_idx), Branch.from_index(branch_idx))

    @classmethod
    def from_name(cls, name: str) -> "Pillar":
        """'甲子' 또는 '갑자' → Pillar"""
        text = str(name).strip()
        if len(text) != 2:
            raise UnrepresentableSymbolError(name, "pillar")
        return cls(Stem.from_symbol(text[0]), Branch.from_symbol(text[1]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gan": self.stem.value,
            "ji": self.branch.value,
            "ganji": self.name,
            "ganji_korean": self.korean_name,
            "gan_element": self.stem.element.value,
            "ji_element": self.branch.element.value,
            "gan_yin_yang": self.stem.polarity.value,
            "ji_yin_yang": self.branch.polarity.value,
            "gan_index": self.stem.index,
            "ji_index": self.branch.index,
            "hidden_stems": [s.value for s in self.branch.hidden_stems],
        }

    def __str__(self) -> str:
        return self.name


PILLAR_POSITIONS = ("year", "month", "day", "hour")


@dataclass(frozen=True)
class FourPillars:
    """사주 원국 (시주는 시간 미입력시 None)"""
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Optional[Pillar] = None

    @property
    def day_master(self) -> Stem:
        """일간 (나)"""
        return self.day.stem

    def items(self) -> List[Tuple[str, Pillar]]:
        """(위치, 기둥) 목록 - 없는 시주 제외"""
        return [
            (position, getattr(self, position))
            for position in PILLAR_POSITIONS
            if getattr(self, position) is not None
        ]

    @property
    def names(self) -> str:
        return " ".join(p.name for _, p in self.items())

    def to_dict(self) -> Dict[str, Any]:
        return {
            f"{position}_pillar": (getattr(self, position).to_dict() if getattr(self, position) else None)
            for position in PILLAR_POSITIONS
        }


# 유틸리티 함수
def stem_name(index: int) -> str:
    return Stem.from_index(index).value


def stem_index(name: str) -> int:
    return Stem.from_symbol(name).index


def branch_name(index: int) -> str:
    return Branch.from_index(index).value


def branch_index(name: str) -> int:
    return Branch.from_symbol(name).index


def get_element(symbol: Union[Stem, Branch, str]) -> Element:
    """천간/지지의 오행 반환"""
    if isinstance(symbol, (Stem, Branch)):
        return symbol.element
    try:
        return Stem.from_symbol(symbol).element
    except UnrepresentableSymbolError:
        return Branch.from_symbol(symbol).element
