from __future__ import annotations
import re
from typing import Optional, Sequence

from exposure.models import PopularPost


EMPTY_FRESHNESS_SCORE = 5  # 인기글이 없으면 중간값
MAX_FRESHNESS_SCORE = 15
RECENT_DAYS = 7

_DAYS = re.compile(r"(\d+)일")
_WEEKS = re.compile(r"(\d+)주")
_MONTHS = re.compile(r"(\d+)개월")


def _leading_number(pattern: re.Pattern, text: str) -> int:
    m = pattern.search(text)
    return int(m.group(1)) if m else 0


def post_freshness(date: Optional[str]) -> int:
    """상대 날짜 1건의 신선도 점수. 먼저 매칭된 패턴 하나만 반영."""
    date = date or ""
    if "시간 전" in date or "분 전" in date:
        return 5
    if "일 전" in date:
        return max(0, 5 - _leading_number(_DAYS, date))
    if "주 전" in date:
        return max(0, 3 - _leading_number(_WEEKS, date))
    if "개월 전" in date:
        return max(0, 2 - _leading_number(_MONTHS, date))
    return 0


def calculate_freshness_score(posts: Sequence[PopularPost]) -> int:
    if not posts:
        return EMPTY_FRESHNESS_SCORE
    score = sum(post_freshness(p.date) for p in posts)
    return max(0, min(MAX_FRESHNESS_SCORE, score))


def is_recent_post(date: Optional[str]) -> bool:
    """'시간 전' 또는 ('일 전' 이면서 7일 이내). '분 전'은 포함하지 않음."""
    date = date or ""
    if "시간 전" in date:
        return True
    return "일 전" in date and _leading_number(_DAYS, date) <= RECENT_DAYS


def recent_post_count(posts: Sequence[PopularPost]) -> int:
    return sum(1 for p in posts if is_recent_post(p.date))
