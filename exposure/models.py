from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class PopularPost:
    title: str
    content: str  # 검색결과 스니펫
    author: str = ""
    date: str = ""  # "3일 전", "2시간 전" 등 상대 날짜
    rank: int = 0  # 1부터 시작, 수집 순서
    link: Optional[str] = None


@dataclass(frozen=True)
class SmartBlockKeyword:
    keyword: str
    rank: int = 0


@dataclass(frozen=True)
class AlsoSearchedTerm:
    title: str
    rank: int = 0
    image_url: Optional[str] = None


@dataclass(frozen=True)
class AnalysisInput:
    main_keyword: str
    posts: tuple[PopularPost, ...] = ()
    smart_blocks: tuple[SmartBlockKeyword, ...] = ()
    also_searched: tuple[AlsoSearchedTerm, ...] = ()


# 결과 필드 → API(camelCase) 키
_WIRE_NAMES = {
    "total_results": "totalResults",
    "avg_title_length": "avgTitleLength",
    "avg_content_length": "avgContentLength",
    "top_keywords": "topKeywords",
    "c_rank_score": "cRankScore",
    "exposure_probability": "exposureProbability",
    "keyword_density": "keywordDensity",
    "content_freshness": "contentFreshness",
    "competition_level": "competitionLevel",
    "seo_insights": "seoInsights",
    "market_trend": "marketTrend",
    "search_volume": "searchVolume",
    "difficulty_level": "difficultyLevel",
}


@dataclass
class AnalysisResult:
    total_results: int
    avg_title_length: int
    avg_content_length: int
    top_keywords: list[str]
    c_rank_score: int  # 0~100
    exposure_probability: float  # 0~0.95
    keyword_density: float  # 0~1
    content_freshness: float  # 0~15
    competition_level: str  # 낮음/보통/높음/매우 높음
    seo_insights: list[str]
    market_trend: str
    search_volume: str  # 매우 낮음/낮음/보통/높음
    difficulty_level: str  # 쉬움/보통/어려움/매우 어려움

    def to_dict(self) -> dict[str, Any]:
        return {_WIRE_NAMES[k]: v for k, v in asdict(self).items()}


# ===========================
# 단일 문서 분석
# ===========================

@dataclass
class DocumentAnalysis:
    keyword_density: float  # % 단위 (글자 수 대비)
    content_length: int
    has_h1: bool
    has_images: bool
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "keywordDensity": self.keyword_density,
            "contentLength": self.content_length,
            "hasH1": self.has_h1,
            "hasImages": self.has_images,
            "suggestions": list(self.suggestions),
        }


# ===========================
# 스마트블록 그룹 (블록 단위 수집)
# ===========================

@dataclass
class SmartBlockItem:
    title: str
    icon: str
    description: str
    category: str


@dataclass
class SmartBlock:
    id: str
    title: str
    icon: str
    type: str
    data: list[SmartBlockItem]
