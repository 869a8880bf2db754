"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
궁합 점수 모듈 (0~100)
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
기본 50점
1. 오행 관계 (하나만 적용): 내가 생함 +10 / 나를 생함 +5 /
   내가 극함 -5 / 나를 극함 -10 / 같은 오행 +5
2. 천간 십성: 食神·偏印·比肩 +15 / 正財·正印 +10 / 傷官·劫財 +5 /
   七殺·正官 -5 / 偏財 -10
3. 지지 십성: 같은 분류로 절반 가중치 (+7 / +5 / +3 / -3 / -5)
4. 0~100 클램프
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from sajucal.services.ganji import Element, FourPillars
from sajucal.services.ten_gods import TenGod, branch_relation_of, relation_of

logger = logging.getLogger(__name__)

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100


class ElementRelationKind(str, Enum):
    """두 사람 오행 관계 (사용자 기준)"""
    USER_GENERATES = "user_generates"     # 상생+
    OTHER_GENERATES = "other_generates"   # 상생-
    USER_OVERCOMES = "user_overcomes"     # 상극+
    OTHER_OVERCOMES = "other_overcomes"   # 상극-
    SAME = "same"                         # 같은 오행

    @property
    def adjustment(self) -> int:
        return ELEMENT_ADJUSTMENT[self]


ELEMENT_ADJUSTMENT = {
    ElementRelationKind.USER_GENERATES: 10,
    ElementRelationKind.OTHER_GENERATES: 5,
    ElementRelationKind.USER_OVERCOMES: -5,
    ElementRelationKind.OTHER_OVERCOMES: -10,
    ElementRelationKind.SAME: 5,
}


class TenGodBucket(str, Enum):
    """십성 분류"""
    PRODUCTIVE = "productive"         # 생산적
    STABLE = "stable"                 # 안정
    TRANSFORMATIVE = "transformative" # 변화
    RESTRICTIVE = "restrictive"       # 제약
    UNSTABLE = "unstable"             # 불안정


TEN_GOD_BUCKETS: Dict[TenGod, TenGodBucket] = {
    TenGod.EATING_GOD: TenGodBucket.PRODUCTIVE,
    TenGod.INDIRECT_RESOURCE: TenGodBucket.PRODUCTIVE,
    TenGod.PEER: TenGodBucket.PRODUCTIVE,
    TenGod.DIRECT_WEALTH: TenGodBucket.STABLE,
    TenGod.DIRECT_RESOURCE: TenGodBucket.STABLE,
    TenGod.HURTING_OFFICER: TenGodBucket.TRANSFORMATIVE,
    TenGod.RIVAL: TenGodBucket.TRANSFORMATIVE,
    TenGod.SEVEN_KILLINGS: TenGodBucket.RESTRICTIVE,
    TenGod.DIRECT_OFFICER: TenGodBucket.RESTRICTIVE,
    TenGod.INDIRECT_WEALTH: TenGodBucket.UNSTABLE,
}

# (천간, 지지) 가중치
BUCKET_ADJUSTMENT: Dict[TenGodBucket, Tuple[int, int]] = {
    TenGodBucket.PRODUCTIVE: (15, 7),
    TenGodBucket.STABLE: (10, 5),
    TenGodBucket.TRANSFORMATIVE: (5, 3),
    TenGodBucket.RESTRICTIVE: (-5, -3),
    TenGodBucket.UNSTABLE: (-10, -5),
}

# 점수 구간 → 평가
RATING_BANDS: List[Tuple[int, str]] = [
    (80, "非常に良好"),
    (60, "良好"),
    (40, "中立"),
    (20, "要注意"),
    (0, "困難"),
]


def element_relation_kind(user: Element, other: Element) -> ElementRelationKind:
    """오행 관계 (우선순위: 상생+ > 상생- > 상극+ > 상극- > 같음)"""
    if user.generates == other:
        return ElementRelationKind.USER_GENERATES
    if other.generates == user:
        return ElementRelationKind.OTHER_GENERATES
    if user.overcomes == other:
        return ElementRelationKind.USER_OVERCOMES
    if other.overcomes == user:
        return ElementRelationKind.OTHER_OVERCOMES
    return ElementRelationKind.SAME


def stem_ten_god_adjustment(ten_god: TenGod) -> int:
    bucket = TEN_GOD_BUCKETS.get(ten_god)
    return BUCKET_ADJUSTMENT[bucket][0] if bucket else 0


def branch_ten_god_adjustment(ten_god: TenGod) -> int:
    bucket = TEN_GOD_BUCKETS.get(ten_god)
    return BUCKET_ADJUSTMENT[bucket][1] if bucket else 0


def compatibility_rating(score: int) -> str:
    for threshold, label in RATING_BANDS:
        if score >= threshold:
            return label
    return RATING_BANDS[-1][1]


@dataclass(frozen=True)
class CompatibilityResult:
    """궁합 결과 (저장하지 않음)"""
    score: int
    ten_god: TenGod
    branch_ten_god: TenGod
    element_relation: ElementRelationKind
    rating: str
    components: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["ten_god"] = self.ten_god.value
        data["branch_ten_god"] = self.branch_ten_god.value
        data["element_relation"] = self.element_relation.value
        return data


class CompatibilityScorer:
    """궁합 점수 계산기"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def score(
        self,
        user_element: Union[Element, str],
        other_element: Union[Element, str],
        ten_god: Union[TenGod, str],
        branch_ten_god: Union[TenGod, str],
    ) -> int:
        return self.evaluate(user_element, other_element, ten_god, branch_ten_god).score

    def evaluate(
        self,
        user_element: Union[Element, str],
        other_element: Union[Element, str],
        ten_god: Union[TenGod, str],
        branch_ten_god: Union[TenGod, str],
    ) -> CompatibilityResult:
        user_element = Element(user_element)
        other_element = Element(other_element)
        ten_god = TenGod.from_name(ten_god)
        branch_ten_god = TenGod.from_name(branch_ten_god)

        relation = element_relation_kind(user_element, other_element)
        components = {
            "base": BASE_SCORE,
            "element": relation.adjustment,
            "ten_god": stem_ten_god_adjustment(ten_god),
            "branch_ten_god": branch_ten_god_adjustment(branch_ten_god),
        }
        raw = sum(components.values())
        final = max(MIN_SCORE, min(MAX_SCORE, raw))

        self.logger.debug(
            f"[Compatibility] {user_element.value}→{other_element.value} "
            f"{ten_god.value}/{branch_ten_god.value} {components} raw={raw} final={final}"
        )
        return CompatibilityResult(
            score=final,
            ten_god=ten_god,
            branch_ten_god=branch_ten_god,
            element_relation=relation,
            rating=compatibility_rating(final),
            components=components,
        )

    def compare(self, user: FourPillars, other: FourPillars) -> CompatibilityResult:
        """
        두 사주 비교 (일주 기준)

        - 오행: 양쪽 일간 오행
        - 십성: 사용자 일간 기준 상대 일간 / 상대 일지
        """
        day_master = user.day_master
        return self.evaluate(
            day_master.element,
            other.day_master.element,
            relation_of(day_master, other.day.stem),
            branch_relation_of(day_master, other.day.branch),
        )

    def compare_many(
        self,
        user: FourPillars,
        others: Sequence[Tuple[str, FourPillars]],
    ) -> List[Tuple[str, CompatibilityResult]]:
        """여러 명 비교 (점수 내림차순, 동점은 입력 순서)"""
        results = [(name, self.compare(user, pillars)) for name, pillars in others]
        return sorted(results, key=lambda item: item[1].score, reverse=True)
