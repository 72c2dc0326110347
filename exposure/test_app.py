"""
HTTP API 테스트
수집기를 가짜로 바꿔 끼우고 (dependency_overrides) 엔드포인트 응답 형식을 확인합니다.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from exposure.app import app, get_scraper
from exposure.models import (
    AlsoSearchedTerm,
    PopularPost,
    SmartBlock,
    SmartBlockItem,
    SmartBlockKeyword,
)


POSTS = [
    PopularPost(
        title="사회복지사 2급 취득 후기",
        content="학점은행제로 사회복지사 자격증을 취득했습니다",
        author="작성자A",
        date="2일 전",
        rank=1,
        link="https://blog.naver.com/a/1",
    ),
]
BLOCKS = [SmartBlockKeyword(keyword="사회복지사 연봉", rank=1)]
ALSO = [AlsoSearchedTerm(title="요양보호사", rank=1, image_url="https://search.pstatic.net/1.png")]
GROUPS = [
    SmartBlock(
        id="인기주제",
        title="인기주제",
        icon="💡",
        type="topics",
        data=[SmartBlockItem(title="사회복지사 연봉", icon="🔥", description="사회복지사 연봉 관련 정보", category="인기주제")],
    ),
]


class FakeScraper:
    def __init__(self):
        self.keywords = []

    def collect(self, keyword):
        self.keywords.append(keyword)
        return list(POSTS), list(BLOCKS), list(ALSO)

    def get_popular_posts(self, keyword):
        return list(POSTS)

    def get_smart_blocks(self, keyword):
        return list(BLOCKS)

    def get_smart_block_groups(self, keyword):
        return list(GROUPS)

    def get_also_searched(self, keyword):
        return list(ALSO)


class BrokenScraper(FakeScraper):
    def collect(self, keyword):
        raise RuntimeError("parser exploded")


@pytest.fixture
def scraper():
    fake = FakeScraper()
    app.dependency_overrides[get_scraper] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client(scraper):
    return TestClient(app)


# ==================== /api/analyze ====================

def test_analyze_requires_keyword(client):
    r = client.post("/api/analyze", json={"keyword": "  "})
    assert r.status_code == 400
    assert r.json()["detail"] == "키워드가 필요합니다."


def test_analyze_missing_body_field(client):
    assert client.post("/api/analyze", json={}).status_code == 400


def test_analyze_success(client, scraper):
    r = client.post("/api/analyze", json={"keyword": " 사회복지사 "})
    assert r.status_code == 200

    body = r.json()
    assert scraper.keywords == ["사회복지사"]
    assert body["keyword"] == "사회복지사"
    assert body["popularPosts"][0]["link"] == "https://blog.naver.com/a/1"
    assert body["smartBlocks"] == [{"keyword": "사회복지사 연봉", "rank": 1}]
    assert body["alsoSearched"] == [{"title": "요양보호사", "rank": 1}]
    assert body["analysis"]["totalResults"] == 3
    assert 0 <= body["analysis"]["cRankScore"] <= 100


def test_analyze_failure_returns_500():
    app.dependency_overrides[get_scraper] = BrokenScraper
    try:
        r = TestClient(app).post("/api/analyze", json={"keyword": "사회복지사"})
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    assert r.json()["detail"] == "분석 중 오류가 발생했습니다."


def test_analyze_stream(client):
    r = client.get("/api/analyze/stream", params={"keyword": "사회복지사"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/event-stream")

    text = r.text
    assert "event: progress" in text
    assert '"stage": "done"' in text
    assert "event: result" in text
    assert '"cRankScore"' in text


def test_analyze_stream_requires_keyword(client):
    assert client.get("/api/analyze/stream").status_code == 400


# ==================== 개별 신호 ====================

def test_popular_posts(client):
    body = client.post("/api/popular-posts", json={"keyword": "사회복지사"}).json()
    assert body["popularPosts"][0]["title"] == "사회복지사 2급 취득 후기"
    assert body["popularPosts"][0]["author"] == "작성자A"


def test_smartblock_keywords(client):
    body = client.post("/api/smartblock", json={"keyword": "사회복지사"}).json()
    assert body["keyword"] == "사회복지사"
    assert body["totalBlocks"] == 1
    assert body["smartBlocks"] == [{"keyword": "사회복지사 연봉", "rank": 1}]
    assert body["timestamp"]


def test_smart_block_groups(client):
    body = client.post("/api/smart-block", json={"keyword": "사회복지사"}).json()
    assert body["totalBlocks"] == 1
    block = body["smartBlocks"][0]
    assert block["id"] == "인기주제"
    assert block["data"][0] == {
        "title": "사회복지사 연봉",
        "icon": "🔥",
        "description": "사회복지사 연봉 관련 정보",
        "category": "인기주제",
    }


def test_related_searches(client):
    body = client.post("/api/related-searches", json={"keyword": "사회복지사"}).json()
    assert body["alsoSearched"] == [
        {"title": "요양보호사", "rank": 1, "imageUrl": "https://search.pstatic.net/1.png"},
    ]


def test_signal_endpoints_require_keyword(client):
    for path in ("/api/popular-posts", "/api/smartblock", "/api/smart-block", "/api/related-searches"):
        assert client.post(path, json={"keyword": ""}).status_code == 400


# ==================== /api/smart-block-analyzer ====================

def test_document_analyzer_requires_both_fields(client):
    r = client.post("/api/smart-block-analyzer", json={"content": "본문", "keyword": ""})
    assert r.status_code == 400
    assert r.json()["detail"] == "콘텐츠와 키워드가 필요합니다."
    assert client.post("/api/smart-block-analyzer", json={"keyword": "사회복지사"}).status_code == 400


def test_document_analyzer(client):
    content = "<h1>사회복지사 가이드</h1>" + "사회복지사 " * 5 + "나" * 466
    r = client.post("/api/smart-block-analyzer", json={"content": content, "keyword": "사회복지사"})
    assert r.status_code == 200
    body = r.json()
    assert body["contentLength"] == 514
    assert body["keywordDensity"] == 1.17
    assert body["hasH1"] is True
    assert body["hasImages"] is False
    assert len(body["suggestions"]) == 1
