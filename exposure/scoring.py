from __future__ import annotations
from typing import Sequence

from exposure.freshness import calculate_freshness_score
from exposure.models import AlsoSearchedTerm, PopularPost, SmartBlockKeyword
from exposure.text_stats import keyword_density, round_half_up


# 인기글 키워드 밀도 점수는 조회 키워드가 아니라 이 고정 단어로 계산된다.
# TODO: 조회 키워드로 바꿀지 결정되면 calculate_c_rank_score에 keyword 인자 추가
REFERENCE_DENSITY_TERM = "사회복지사"

NO_POSTS_BASE_SCORE = 10.0
SMART_BLOCK_POINTS = 2.5
SMART_BLOCK_MAX = 25.0
ALSO_SEARCHED_POINTS = 1.5
ALSO_SEARCHED_MAX = 15.0

MAX_EXPOSURE_PROBABILITY = 0.95


def rank_points(index: int) -> int:
    """순위 감쇠: 15, 13, 11, 9, ..."""
    return max(0, 15 - index * 2)


def title_length_points(length: int) -> int:
    # 20~40자가 최적
    if 20 <= length <= 40:
        return 10
    if 15 <= length <= 50:
        return 7
    if 10 <= length <= 60:
        return 5
    return 3


def content_length_points(length: int) -> int:
    # 100~300자가 최적
    if 100 <= length <= 300:
        return 10
    if 50 <= length <= 500:
        return 7
    if 20 <= length <= 800:
        return 5
    return 3


def density_points(density: float) -> int:
    # 2~5%가 최적
    if 0.02 <= density <= 0.05:
        return 10
    if 0.01 <= density <= 0.08:
        return 7
    if 0.005 <= density <= 0.1:
        return 5
    return 3


def post_exposure_points(post: PopularPost, index: int) -> float:
    """인기글 1건의 노출 점수 (순위가 낮을수록 가중치 감소)."""
    density = keyword_density(f"{post.title} {post.content}", REFERENCE_DENSITY_TERM)
    subtotal = (
        rank_points(index)
        + title_length_points(len(post.title))
        + content_length_points(len(post.content))
        + density_points(density)
    )
    return subtotal * (1 - index * 0.1)


def popular_post_score(posts: Sequence[PopularPost]) -> float:
    if not posts:
        # 인기글이 없으면 기본 점수
        return NO_POSTS_BASE_SCORE
    return sum(post_exposure_points(p, i) for i, p in enumerate(posts))


def smart_block_score(smart_blocks: Sequence[SmartBlockKeyword]) -> float:
    count = sum(1 for b in smart_blocks if b.keyword)
    return min(SMART_BLOCK_MAX, count * SMART_BLOCK_POINTS)


def also_searched_score(also_searched: Sequence[AlsoSearchedTerm]) -> float:
    count = sum(1 for t in also_searched if t.title)
    return min(ALSO_SEARCHED_MAX, count * ALSO_SEARCHED_POINTS)


def calculate_c_rank_score(
    posts: Sequence[PopularPost],
    smart_blocks: Sequence[SmartBlockKeyword],
    also_searched: Sequence[AlsoSearchedTerm],
) -> int:
    """
    C-RANK 유사 노출 점수 0~100:
    - 인기글 노출 (순위/제목/내용/밀도, 없으면 10)
    - 스마트블록 연관성 0~25
    - 연관 검색어 0~15
    - 콘텐츠 신선도 0~15
    """
    score = (
        popular_post_score(posts)
        + smart_block_score(smart_blocks)
        + also_searched_score(also_searched)
        + calculate_freshness_score(posts)
    )
    return max(0, min(100, round_half_up(score)))


def calculate_exposure_probability(c_rank_score: float, total_results: int) -> float:
    base_probability = c_rank_score / 100
    competition_factor = max(0.1, 1 - total_results / 100)
    return max(0.0, min(MAX_EXPOSURE_PROBABILITY, base_probability * competition_factor))


def calculate_competition_level(total_results: int) -> str:
    if total_results < 10:
        return "낮음"
    if total_results < 30:
        return "보통"
    if total_results < 50:
        return "높음"
    return "매우 높음"


def calculate_search_volume(total_signals: int) -> str:
    if total_signals >= 20:
        return "높음"
    if total_signals >= 10:
        return "보통"
    if total_signals >= 5:
        return "낮음"
    return "매우 낮음"


def calculate_difficulty_level(total_signals: int) -> str:
    if total_signals == 0:
        return "쉬움"
    if total_signals < 10:
        return "보통"
    if total_signals < 20:
        return "어려움"
    return "매우 어려움"
