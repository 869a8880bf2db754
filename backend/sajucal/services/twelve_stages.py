"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
십이운성(十二運星) / 십이신살(十二神殺) 모듈
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
십이운성: 일간 기준, 각 기둥 지지의 생왕묘절 단계
- 양간: 장생 지지부터 순행
- 음간: 장생 지지부터 역행
십이신살: 연지 삼합(三合) 기준, 각 기둥 지지의 신살
- 삼합 묘(墓) 다음 지지가 겁살, 이후 순행
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
from typing import Dict, Tuple, Union

from sajucal.services.ganji import Branch, Polarity, Stem

# 십이운성 순서 (장생 → 양)
TWELVE_FORTUNES: Tuple[str, ...] = (
    "長生", "沐浴", "冠帯", "臨官", "帝旺", "衰",
    "病", "死", "墓", "絶", "胎", "養",
)

# 일간별 장생 지지
TWELVE_FORTUNE_START: Dict[str, str] = {
    "甲": "亥", "丙": "寅", "戊": "寅", "庚": "巳", "壬": "申",
    "乙": "午", "丁": "酉", "己": "酉", "辛": "子", "癸": "卯",
}

# 십이신살 순서 (겁살 → 화개)
TWELVE_SPIRITS: Tuple[str, ...] = (
    "劫殺", "災殺", "天殺", "地殺", "年殺", "月殺",
    "亡身殺", "將星殺", "攀鞍殺", "驛馬殺", "六害殺", "華蓋殺",
)

# 연지 삼합 → 겁살 지지
# 申子辰 → 巳, 寅午戌 → 亥, 巳酉丑 → 寅, 亥卯未 → 申
TWELVE_SPIRIT_START: Dict[str, str] = {
    "申": "巳", "子": "巳", "辰": "巳",
    "寅": "亥", "午": "亥", "戌": "亥",
    "巳": "寅", "酉": "寅", "丑": "寅",
    "亥": "申", "卯": "申", "未": "申",
}


def twelve_fortune_of(day_master: Union[Stem, str], branch: Union[Branch, str]) -> str:
    """일간 기준 지지의 십이운성"""
    day_master = Stem.from_symbol(day_master)
    branch = Branch.from_symbol(branch)
    start = Branch.from_symbol(TWELVE_FORTUNE_START[day_master.value]).index

    if day_master.polarity == Polarity.YANG:
        step = (branch.index - start) % 12
    else:
        step = (start - branch.index) % 12
    return TWELVE_FORTUNES[step]


def twelve_spirit_of(year_branch: Union[Branch, str], branch: Union[Branch, str]) -> str:
    """연지 기준 지지의 십이신살"""
    year_branch = Branch.from_symbol(year_branch)
    branch = Branch.from_symbol(branch)
    start = Branch.from_symbol(TWELVE_SPIRIT_START[year_branch.value]).index
    return TWELVE_SPIRITS[(branch.index - start) % 12]
