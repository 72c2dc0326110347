from __future__ import annotations
import math
import re
from typing import Iterable


DEFAULT_AVG_TITLE_LENGTH = 25  # 인기글이 없을 때 기본값
DEFAULT_AVG_CONTENT_LENGTH = 150


def round_half_up(x: float) -> int:
    """0.5는 항상 올림 (round()의 은행가 반올림 사용 안 함)."""
    return int(math.floor(x + 0.5))


def count_occurrences(text: str, keyword: str) -> int:
    """대소문자 무시, 정규식 이스케이프된 키워드 등장 횟수."""
    if not keyword:
        return 0
    return len(re.findall(re.escape(keyword), text, flags=re.IGNORECASE))


def keyword_density(text: str, keyword: str) -> float:
    """키워드 등장 횟수 / 공백 기준 토큰 수 (0~1). 토큰이 없으면 0."""
    total_words = len(text.split())
    if total_words == 0:
        return 0.0
    # 한 토큰 안에 키워드가 여러 번 붙어 나오면 1을 넘을 수 있음
    return min(1.0, count_occurrences(text, keyword) / total_words)


def average_length(values: Iterable[str], fallback: int) -> int:
    lengths = [len(v) for v in values]
    if not lengths:
        return fallback
    return round_half_up(sum(lengths) / len(lengths))
