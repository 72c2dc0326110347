from __future__ import annotations
import asyncio
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
import uvicorn

# .env 로드
load_dotenv(Path(__file__).parent / ".env")

from exposure.analyzer import KeywordAnalyzer, also_searched_to_dict, post_to_dict, smart_block_to_dict
from exposure.document_analyzer import analyze_single_document
from exposure.naver_search import NaverSearchScraper, get_env_scraper
from exposure.sse import sse_stream

logger = logging.getLogger("exposure")

app = FastAPI(title="네이버 키워드 상위노출 분석 API")

DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8001",
    "http://127.0.0.1:8001",
]
ALLOWED_ORIGINS = [
    o.strip() for o in os.environ.get("ALLOWED_ORIGINS", "").split(",") if o.strip()
] or DEFAULT_ORIGINS

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


def get_scraper() -> NaverSearchScraper:
    return get_env_scraper()


class KeywordRequest(BaseModel):
    keyword: Optional[str] = ""


class DocumentRequest(BaseModel):
    content: Optional[str] = ""
    keyword: Optional[str] = ""


def _require_keyword(keyword: Optional[str]) -> str:
    keyword = (keyword or "").strip()
    if not keyword:
        raise HTTPException(400, "키워드가 필요합니다.")
    return keyword


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


# ============================
# 키워드 노출 분석
# ============================
@app.post("/api/analyze")
def analyze_keyword(data: KeywordRequest, scraper: NaverSearchScraper = Depends(get_scraper)) -> Dict[str, Any]:
    keyword = _require_keyword(data.keyword)
    try:
        return KeywordAnalyzer(scraper, keyword).run()
    except Exception:
        logger.exception("분석 중 오류: %s", keyword)
        raise HTTPException(500, "분석 중 오류가 발생했습니다.")


@app.get("/api/analyze/stream")
async def analyze_keyword_stream(
    keyword: str = Query(""),
    scraper: NaverSearchScraper = Depends(get_scraper),
):
    """SSE 스트리밍 분석 (EventSource 호환 GET)"""
    keyword = _require_keyword(keyword)

    queue: asyncio.Queue[dict] = asyncio.Queue()
    loop = asyncio.get_running_loop()

    def progress_cb(msg: dict):
        loop.call_soon_threadsafe(queue.put_nowait, msg)

    task = loop.run_in_executor(None, KeywordAnalyzer(scraper, keyword, progress_cb).run)

    return StreamingResponse(
        sse_stream(queue, task),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


# ============================
# 개별 신호 조회
# ============================
@app.post("/api/popular-posts")
def popular_posts(data: KeywordRequest, scraper: NaverSearchScraper = Depends(get_scraper)):
    keyword = _require_keyword(data.keyword)
    posts = scraper.get_popular_posts(keyword)
    return {"popularPosts": [post_to_dict(p) for p in posts]}


@app.post("/api/smartblock")
def smart_block_keywords(data: KeywordRequest, scraper: NaverSearchScraper = Depends(get_scraper)):
    keyword = _require_keyword(data.keyword)
    blocks = scraper.get_smart_blocks(keyword)
    return {
        "keyword": keyword,
        "timestamp": _timestamp(),
        "smartBlocks": [smart_block_to_dict(b) for b in blocks],
        "totalBlocks": len(blocks),
    }


@app.post("/api/smart-block")
def smart_block_groups(data: KeywordRequest, scraper: NaverSearchScraper = Depends(get_scraper)):
    keyword = _require_keyword(data.keyword)
    blocks = scraper.get_smart_block_groups(keyword)
    logger.info("스마트블록 분석 완료: %s (%d개 블록)", keyword, len(blocks))
    return {
        "keyword": keyword,
        "timestamp": _timestamp(),
        "smartBlocks": [
            {
                "id": b.id,
                "title": b.title,
                "icon": b.icon,
                "type": b.type,
                "data": [vars(item) for item in b.data],
            }
            for b in blocks
        ],
        "totalBlocks": len(blocks),
    }


@app.post("/api/related-searches")
def related_searches(data: KeywordRequest, scraper: NaverSearchScraper = Depends(get_scraper)):
    keyword = _require_keyword(data.keyword)
    terms = scraper.get_also_searched(keyword)
    return {
        "alsoSearched": [
            {**also_searched_to_dict(t), "imageUrl": t.image_url}
            for t in terms
        ],
    }


# ============================
# 단일 문서 점검
# ============================
@app.post("/api/smart-block-analyzer")
def smart_block_analyzer(data: DocumentRequest):
    content = data.content or ""
    keyword = (data.keyword or "").strip()
    if not content or not keyword:
        raise HTTPException(400, "콘텐츠와 키워드가 필요합니다.")
    return analyze_single_document(content, keyword).to_dict()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8001))
    uvicorn.run("exposure.app:app", host="0.0.0.0", port=port, reload=True)
