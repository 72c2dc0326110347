from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Optional, Sequence

from exposure.freshness import calculate_freshness_score
from exposure.insights import InsightContext, generate_market_trend, generate_seo_insights
from exposure.keywords import build_keyword_corpus, extract_top_keywords
from exposure.models import (
    AlsoSearchedTerm,
    AnalysisInput,
    AnalysisResult,
    PopularPost,
    SmartBlockKeyword,
)
from exposure.naver_search import NaverSearchScraper
from exposure.scoring import (
    calculate_c_rank_score,
    calculate_competition_level,
    calculate_difficulty_level,
    calculate_exposure_probability,
    calculate_search_volume,
)
from exposure.text_stats import (
    DEFAULT_AVG_CONTENT_LENGTH,
    DEFAULT_AVG_TITLE_LENGTH,
    average_length,
    keyword_density,
)

logger = logging.getLogger(__name__)

ProgressCb = Callable[[dict], None]


def analyze(
    main_keyword: str,
    posts: Sequence[PopularPost],
    smart_blocks: Sequence[SmartBlockKeyword],
    also_searched: Sequence[AlsoSearchedTerm],
) -> AnalysisResult:
    """
    노출 분석 엔진 진입점.
    입력 순서 = 순위 순서. 빈 목록도 허용하며 예외를 던지지 않는다.
    """
    smart_block_keywords = [b.keyword for b in smart_blocks if b.keyword]
    also_searched_keywords = [t.title for t in also_searched if t.title]

    total_results = len(posts) + len(smart_block_keywords) + len(also_searched_keywords)
    # 검색량/난이도는 빈 항목까지 포함한 원본 수집 개수 기준
    total_signals = len(posts) + len(smart_blocks) + len(also_searched)

    top_keywords = extract_top_keywords(
        build_keyword_corpus(posts, smart_blocks, also_searched),
        main_keyword,
    )

    c_rank_score = calculate_c_rank_score(posts, smart_blocks, also_searched)

    post_text = " ".join(f"{p.title} {p.content}" for p in posts)
    ctx = InsightContext(
        keyword=main_keyword,
        posts=posts,
        smart_blocks=smart_block_keywords,
        also_searched=also_searched_keywords,
    )

    return AnalysisResult(
        total_results=total_results,
        avg_title_length=average_length((p.title for p in posts), DEFAULT_AVG_TITLE_LENGTH),
        avg_content_length=average_length((p.content for p in posts), DEFAULT_AVG_CONTENT_LENGTH),
        top_keywords=top_keywords,
        c_rank_score=c_rank_score,
        exposure_probability=calculate_exposure_probability(c_rank_score, total_results),
        keyword_density=keyword_density(post_text, main_keyword),
        content_freshness=calculate_freshness_score(posts),
        competition_level=calculate_competition_level(total_results),
        seo_insights=generate_seo_insights(ctx),
        market_trend=generate_market_trend(ctx),
        search_volume=calculate_search_volume(total_signals),
        difficulty_level=calculate_difficulty_level(total_signals),
    )


def analyze_input(data: AnalysisInput) -> AnalysisResult:
    return analyze(data.main_keyword, data.posts, data.smart_blocks, data.also_searched)


# ===========================
# 응답 직렬화
# ===========================

def post_to_dict(post: PopularPost) -> Dict[str, Any]:
    return {
        "title": post.title,
        "content": post.content,
        "author": post.author,
        "date": post.date,
        "link": post.link or "",
        "rank": post.rank,
    }


def smart_block_to_dict(block: SmartBlockKeyword) -> Dict[str, Any]:
    return {"keyword": block.keyword, "rank": block.rank}


def also_searched_to_dict(term: AlsoSearchedTerm) -> Dict[str, Any]:
    return {"title": term.title, "rank": term.rank}


def build_response(
    keyword: str,
    posts: Sequence[PopularPost],
    smart_blocks: Sequence[SmartBlockKeyword],
    also_searched: Sequence[AlsoSearchedTerm],
    result: AnalysisResult,
) -> Dict[str, Any]:
    return {
        "keyword": keyword,
        "popularPosts": [post_to_dict(p) for p in posts],
        "smartBlocks": [smart_block_to_dict(b) for b in smart_blocks],
        "alsoSearched": [also_searched_to_dict(t) for t in also_searched],
        "analysis": result.to_dict(),
    }


# ===========================
# 수집 + 분석 실행기
# ===========================

class KeywordAnalyzer:
    def __init__(
        self,
        scraper: NaverSearchScraper,
        keyword: str,
        progress_cb: Optional[ProgressCb] = None,
    ) -> None:
        self.scraper = scraper
        self.keyword = keyword
        self.progress_cb = progress_cb

    def _emit(self, stage: str, current: int, total: int, message: str) -> None:
        if self.progress_cb:
            self.progress_cb({
                "stage": stage,
                "current": current,
                "total": total,
                "message": message,
            })

    def run(self) -> Dict[str, Any]:
        logger.info("분석 시작: %s", self.keyword)

        self._emit("collect", 1, 2, "검색 결과 수집 중...")
        posts, smart_blocks, also_searched = self.scraper.collect(self.keyword)
        logger.info(
            "수집 완료: 인기글=%d, 스마트블록=%d, 함께 찾는 검색어=%d",
            len(posts), len(smart_blocks), len(also_searched),
        )

        self._emit("analyze", 2, 2, "노출 점수 계산 중...")
        result = analyze(self.keyword, posts, smart_blocks, also_searched)

        self._emit("done", 2, 2, "분석 완료")
        logger.info("분석 완료: %s (cRankScore=%d)", self.keyword, result.c_rank_score)
        return build_response(self.keyword, posts, smart_blocks, also_searched, result)
