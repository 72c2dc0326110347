"""
SEO 인사이트 / 시장 동향 생성 엔진

규칙(조건 → 문구)을 정해진 순서대로 평가해 인사이트 목록을 만들고,
수집 신호 분포에 따라 시장 동향 문단 하나를 고릅니다.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Sequence

from exposure.freshness import recent_post_count
from exposure.models import PopularPost
from exposure.text_stats import keyword_density


TITLE_TOO_SHORT = 20
TITLE_TOO_LONG = 50
DENSITY_TOO_LOW = 0.01
DENSITY_TOO_HIGH = 0.05
RECENT_RATIO_MIN = 0.3
ACTIVE_MARKET_RATIO = 0.5
RICH_SMART_BLOCKS = 5
INTENSE_COMPETITION_POSTS = 10


@dataclass(frozen=True)
class InsightContext:
    keyword: str
    posts: Sequence[PopularPost]
    smart_blocks: Sequence[str]  # 빈 문자열 제거된 키워드
    also_searched: Sequence[str]

    @property
    def has_posts(self) -> bool:
        return len(self.posts) > 0

    @property
    def mean_title_length(self) -> float:
        return sum(len(p.title) for p in self.posts) / len(self.posts)

    @property
    def post_keyword_density(self) -> float:
        text = " ".join(f"{p.title} {p.content}" for p in self.posts)
        return keyword_density(text, self.keyword)

    @property
    def recent_posts(self) -> int:
        return recent_post_count(self.posts)

    @property
    def total_signals(self) -> int:
        return len(self.posts) + len(self.smart_blocks) + len(self.also_searched)


@dataclass(frozen=True)
class InsightRule:
    name: str
    applies: Callable[[InsightContext], bool]
    message: str

    def evaluate(self, ctx: InsightContext) -> List[str]:
        return [self.message] if self.applies(ctx) else []


INSIGHT_RULES: List[InsightRule] = [
    # 1. 인기글 없음 → 시장 선점 안내
    InsightRule(
        "no_posts_opportunity",
        lambda c: not c.has_posts,
        "이 키워드는 아직 인기글이 없습니다. 새로운 콘텐츠로 시장을 선점할 기회입니다.",
    ),
    InsightRule(
        "no_posts_differentiate",
        lambda c: not c.has_posts,
        "최신 정보와 실용적인 내용으로 차별화된 콘텐츠를 작성해보세요.",
    ),
    InsightRule(
        "no_posts_exposure_warning",
        lambda c: not c.has_posts,
        "인기글이 없으면 검색 결과 상위 노출이 어려울 수 있습니다.",
    ),
    # 2. 인기글 있음 → 제목 / 밀도 / 신선도
    InsightRule(
        "title_too_short",
        lambda c: c.has_posts and c.mean_title_length < TITLE_TOO_SHORT,
        "제목이 너무 짧습니다. 20-40자로 늘려보세요. (검색 노출 최적화)",
    ),
    InsightRule(
        "title_too_long",
        lambda c: c.has_posts and c.mean_title_length > TITLE_TOO_LONG,
        "제목이 너무 깁니다. 20-40자로 줄여보세요. (검색 노출 최적화)",
    ),
    InsightRule(
        "density_too_low",
        lambda c: c.has_posts and c.post_keyword_density < DENSITY_TOO_LOW,
        "키워드 밀도가 낮습니다. 자연스럽게 키워드를 더 포함해보세요. (노출 점수 향상)",
    ),
    InsightRule(
        "density_too_high",
        lambda c: c.has_posts and c.post_keyword_density > DENSITY_TOO_HIGH,
        "키워드 밀도가 너무 높습니다. 과도한 키워드 삽입을 피하세요. (스팸 방지)",
    ),
    InsightRule(
        "stale_content",
        lambda c: c.has_posts and c.recent_posts < len(c.posts) * RECENT_RATIO_MIN,
        "최신 콘텐츠가 부족합니다. 최근 1주일 내 콘텐츠를 더 작성해보세요. (신선도 점수 향상)",
    ),
    # 3. 연관 키워드
    InsightRule(
        "few_smart_blocks",
        lambda c: len(c.smart_blocks) < RICH_SMART_BLOCKS,
        "연관 키워드가 적습니다. 더 다양한 키워드로 콘텐츠를 확장해보세요. (노출 기회 증가)",
    ),
    InsightRule(
        "rich_smart_blocks",
        lambda c: len(c.smart_blocks) >= RICH_SMART_BLOCKS,
        "연관 키워드가 풍부합니다. 이 키워드들을 활용하여 콘텐츠를 확장해보세요.",
    ),
    # 4. 경쟁
    InsightRule(
        "intense_competition",
        lambda c: len(c.posts) > INTENSE_COMPETITION_POSTS,
        "경쟁이 치열합니다. 차별화된 콘텐츠로 차별점을 만들어보세요. (노출 점수 향상)",
    ),
    # 5. 함께 찾는 검색어
    InsightRule(
        "use_also_searched",
        lambda c: len(c.also_searched) > 0,
        "함께 많이 찾는 검색어를 활용하여 콘텐츠를 확장해보세요. (노출 기회 증가)",
    ),
]


def generate_seo_insights(ctx: InsightContext, rules: Sequence[InsightRule] = INSIGHT_RULES) -> List[str]:
    insights: List[str] = []
    for rule in rules:
        insights.extend(rule.evaluate(ctx))
    return insights


# ========================
# 시장 동향 템플릿
# ========================

MARKET_TREND_TEMPLATES = {
    "undiscovered": (
        '"{keyword}" 키워드는 아직 시장에서 활발하게 논의되지 않고 있습니다. '
        "이는 새로운 기회일 수 있으며, 선도적인 콘텐츠로 시장을 개척할 수 있는 좋은 타이밍입니다."
    ),
    "entry": (
        '"{keyword}" 키워드는 연관 키워드와 함께 많이 찾는 검색어가 있지만, 아직 인기글로 선정된 콘텐츠가 없습니다. '
        "이는 시장 진입의 좋은 기회이며, 최신 정보와 실용적인 내용으로 차별화된 콘텐츠를 제공하면 "
        "상위 노출이 가능할 것으로 예상됩니다."
    ),
    "active": (
        '"{keyword}" 키워드는 현재 매우 활발한 시장입니다. 최신 콘텐츠가 많이 생성되고 있으며, '
        "사용자들의 관심이 높습니다. 시의적절한 콘텐츠와 최신 정보 제공이 중요합니다."
    ),
    "stable": (
        '"{keyword}" 키워드는 안정적인 시장을 형성하고 있습니다. 연관 키워드와 함께 많이 찾는 검색어가 '
        "다양하게 존재하며, 지속적인 콘텐츠 업데이트와 품질 향상이 필요합니다."
    ),
}


def market_trend_kind(ctx: InsightContext) -> str:
    if ctx.total_signals == 0:
        return "undiscovered"
    if not ctx.has_posts:
        return "entry"
    if ctx.recent_posts > len(ctx.posts) * ACTIVE_MARKET_RATIO:
        return "active"
    return "stable"


def generate_market_trend(ctx: InsightContext) -> str:
    return MARKET_TREND_TEMPLATES[market_trend_kind(ctx)].format(keyword=ctx.keyword)
