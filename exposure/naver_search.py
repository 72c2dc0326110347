from __future__ import annotations
import logging
import os
import re
import time
from typing import List, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from exposure.models import (
    AlsoSearchedTerm,
    PopularPost,
    SmartBlock,
    SmartBlockItem,
    SmartBlockKeyword,
)

logger = logging.getLogger(__name__)

SEARCH_URL = "https://search.naver.com/search.naver"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# 재시도 대상 HTTP 상태 코드
_RETRYABLE_STATUS = {429, 500, 502, 503, 504}

# ── 인기글 ──
POPULAR_CONTAINER = 'div[data-meta-area="ugB_qpR"]'
POPULAR_ITEM_SELECTORS = [
    f"{POPULAR_CONTAINER} .fds-ugc-block-mod",
    f"{POPULAR_CONTAINER} .fds-article-simple-box",
]
AUTHOR_SELECTOR = "a.fds-info-inner-text"
DATE_SELECTOR = ".fds-info-sub-inner-text"
TITLE_SELECTORS = [
    "a.fds-comps-right-image-text-title",
    ".fds-comps-right-image-text-title",
    "a[data-cb-target]",
    'a[target="_blank"]',
    ".fds-comps-right-image-text-container a.fds-comps-right-image-text-title",
    ".fds-comps-right-image-text-container a[data-cb-target]",
    '.fds-comps-right-image-text-container a[data-cb-trigger="true"]',
    ".fds-comps-right-image-text-container a",
    ".fds-comps-right-image-text-container .fds-comps-text",
    ".fds-comps-right-image-text-container span",
]
CONTENT_SELECTORS = [
    "a.fds-comps-right-image-text-content",
    ".fds-comps-right-image-text-content",
    "a[data-cb-target]",
    ".fds-comps-right-image-text-container a.fds-comps-right-image-text-content",
    ".fds-comps-right-image-text-container a[data-cb-target]",
    '.fds-comps-right-image-text-container a[data-cb-trigger="true"]',
    ".fds-comps-right-image-text-container a",
    ".fds-comps-right-image-text-container .fds-comps-text",
    ".fds-comps-right-image-text-container span",
]
_KEEP_HOST = "keep.naver.com"  # 저장하기 링크는 제목 링크가 아님

# ── 스마트블록 ──
SMART_BLOCK_CONTAINERS = [
    ".sc_new_group",
    ".content_area",
    "div[data-block-type]",
    "section.api_group",
    "div.fds-ugc-body-popular-topic",
    ".search_inner",
]
SMART_BLOCK_TITLE = "h2.tit, .api_title_wrap h2"
SMART_BLOCK_CHIPS = (
    "a.fds-comps-keyword-chip span.fds-comps-keyword-chip-text, "
    ".keyword_list li a, "
    ".sp_keyword .list li a, "
    "a.mr4F_5Z21LbvwbpTRB1I span.fds-comps-text"
)
SMART_BLOCK_TITLE_HINTS = ("인기주제", "연관 검색어", "스마트블록")

# ── 함께 찾는 검색어 ──
ALSO_SEARCHED_ITEMS = (
    'div[data-template-id="itemKeywordGroup"][data-template-type="alsoSearch"] '
    'a[data-template-id="itemKeyword"]'
)
ALSO_SEARCHED_TITLE = "span.sds-comps-text.sds-comps-text-ellipsis-1"


def _text(nodes) -> str:
    """여러 노드 텍스트를 이어 붙여 trim (선택자 다중 매칭 대응)."""
    return "".join(n.get_text() for n in nodes).strip()


# ===========================
# 파서 (HTML → 신호, 순수 함수)
# ===========================

def _extract_title_and_link(elem, author: str) -> Tuple[str, str]:
    title, link = "", ""
    for selector in TITLE_SELECTORS:
        found = elem.select_one(selector)
        if found is None:
            continue
        title = found.get_text().strip()
        link = found.get("href") or ""
        if not title:
            mark = found.find("mark")
            if mark is not None:
                title = mark.get_text().strip()
        # 작성자 이름이 제목으로 잡힌 경우 제외
        if title == author:
            title = ""
            continue
        if title and link and _KEEP_HOST not in link:
            break
    return title, link


def _extract_content(elem) -> str:
    for selector in CONTENT_SELECTORS:
        found = elem.select_one(selector)
        if found is None:
            continue
        content = found.get_text().strip()
        if content:
            return content
    return ""


def parse_popular_posts(html: str) -> List[PopularPost]:
    soup = BeautifulSoup(html, "html.parser")
    if not soup.select(POPULAR_CONTAINER):
        logger.info("인기글 컨테이너를 찾을 수 없습니다.")
        return []

    elements = []
    for selector in POPULAR_ITEM_SELECTORS:
        elements = soup.select(selector)
        if elements:
            break
    logger.debug("인기글 요소 %d개", len(elements))

    posts: List[PopularPost] = []
    for elem in elements:
        author = _text(elem.select(AUTHOR_SELECTOR))
        date = _text(elem.select(DATE_SELECTOR))
        title, link = _extract_title_and_link(elem, author)
        content = _extract_content(elem)
        # 제목과 링크가 있는 경우만
        if not (title and link):
            continue
        posts.append(PopularPost(
            title=title,
            content=content,
            author=author,
            date=date,
            rank=len(posts) + 1,
            link=link,
        ))
    return posts


def _iter_smart_block_containers(soup: BeautifulSoup):
    """(블록 제목, 컨테이너). 인기주제/연관 검색어/스마트블록 또는 무제 블록만."""
    for selector in SMART_BLOCK_CONTAINERS:
        for container in soup.select(selector):
            block_title = _text(container.select(SMART_BLOCK_TITLE))
            if block_title == "" or any(h in block_title for h in SMART_BLOCK_TITLE_HINTS):
                yield block_title, container


def parse_smart_blocks(html: str) -> List[SmartBlockKeyword]:
    soup = BeautifulSoup(html, "html.parser")
    seen: set[str] = set()  # 호출 단위 중복 제거
    keywords: List[SmartBlockKeyword] = []
    for _, container in _iter_smart_block_containers(soup):
        for chip in container.select(SMART_BLOCK_CHIPS):
            text = chip.get_text().strip()
            if len(text) > 1 and text not in seen:
                seen.add(text)
                keywords.append(SmartBlockKeyword(keyword=text, rank=len(keywords) + 1))
    logger.debug("추출된 스마트블록 키워드: %d개", len(keywords))
    return keywords


def parse_smart_block_groups(html: str) -> List[SmartBlock]:
    soup = BeautifulSoup(html, "html.parser")
    seen: set[str] = set()
    blocks: List[SmartBlock] = []
    for block_title, container in _iter_smart_block_containers(soup):
        items: List[SmartBlockItem] = []
        for chip in container.select(SMART_BLOCK_CHIPS):
            text = chip.get_text().strip()
            if len(text) > 1 and text not in seen:
                seen.add(text)
                items.append(SmartBlockItem(
                    title=text,
                    icon="🔥",
                    description=f"{text} 관련 정보",
                    category=block_title or "Unknown Block",
                ))
        if items:
            block_id = re.sub(r"\s+", "_", block_title) or f"unknown_block_{len(blocks) + 1}"
            blocks.append(SmartBlock(
                id=block_id,
                title=block_title or "Smart Block (No Title)",
                icon="💡",
                type="topics",
                data=items,
            ))
    return blocks


def parse_also_searched(html: str) -> List[AlsoSearchedTerm]:
    soup = BeautifulSoup(html, "html.parser")
    terms: List[AlsoSearchedTerm] = []
    for elem in soup.select(ALSO_SEARCHED_ITEMS):
        title = _text(elem.select(ALSO_SEARCHED_TITLE))
        if not title:
            continue
        img = elem.find("img")
        terms.append(AlsoSearchedTerm(
            title=title,
            rank=len(terms) + 1,
            image_url=img.get("src") if img is not None else None,
        ))
    return terms


# ===========================
# 검색 결과 페이지 수집기
# ===========================

class NaverSearchScraper:
    """
    네이버 통합검색 결과 페이지 수집기
    429/5xx/타임아웃/연결 오류 시 지수 백오프 재시도 (기본 3회)
    """

    def __init__(
        self,
        timeout: float = 10.0,
        max_retries: int = 3,
        base_delay: float = 1.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.user_agent = user_agent

    def fetch_search_page(self, keyword: str) -> str:
        headers = {"User-Agent": self.user_agent}
        params = {"query": keyword}

        last_exc: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                r = requests.get(SEARCH_URL, headers=headers, params=params, timeout=self.timeout)

                if r.status_code in _RETRYABLE_STATUS and attempt < self.max_retries:
                    delay = self.base_delay * (2 ** attempt)
                    logger.warning(
                        "Naver search %d for '%s' (attempt %d/%d), retrying in %.1fs",
                        r.status_code, keyword, attempt + 1, self.max_retries, delay,
                    )
                    time.sleep(delay)
                    continue

                r.raise_for_status()
                return r.text

            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                last_exc = e
                if attempt < self.max_retries:
                    delay = self.base_delay * (2 ** attempt)
                    logger.warning(
                        "Naver search %s for '%s' (attempt %d/%d), retrying in %.1fs",
                        type(e).__name__, keyword, attempt + 1, self.max_retries, delay,
                    )
                    time.sleep(delay)
                    continue

        # 모든 재시도 소진
        if last_exc:
            raise last_exc
        return ""

    def _safe_fetch(self, keyword: str) -> Optional[str]:
        try:
            return self.fetch_search_page(keyword)
        except requests.RequestException as e:
            logger.warning("검색 페이지 수집 실패 (%s): %s", keyword, e)
            return None

    def collect(self, keyword: str) -> Tuple[List[PopularPost], List[SmartBlockKeyword], List[AlsoSearchedTerm]]:
        """한 번 받아온 페이지에서 세 가지 신호를 모두 추출. 실패 시 빈 목록."""
        html = self._safe_fetch(keyword)
        if html is None:
            return [], [], []
        return parse_popular_posts(html), parse_smart_blocks(html), parse_also_searched(html)

    def get_popular_posts(self, keyword: str) -> List[PopularPost]:
        html = self._safe_fetch(keyword)
        return parse_popular_posts(html) if html is not None else []

    def get_smart_blocks(self, keyword: str) -> List[SmartBlockKeyword]:
        html = self._safe_fetch(keyword)
        return parse_smart_blocks(html) if html is not None else []

    def get_smart_block_groups(self, keyword: str) -> List[SmartBlock]:
        html = self._safe_fetch(keyword)
        return parse_smart_block_groups(html) if html is not None else []

    def get_also_searched(self, keyword: str) -> List[AlsoSearchedTerm]:
        html = self._safe_fetch(keyword)
        return parse_also_searched(html) if html is not None else []


def get_env_scraper() -> NaverSearchScraper:
    return NaverSearchScraper(
        timeout=float(os.environ.get("SEARCH_TIMEOUT", "10")),
        max_retries=int(os.environ.get("SEARCH_MAX_RETRIES", "3")),
        user_agent=os.environ.get("SEARCH_USER_AGENT", "").strip() or DEFAULT_USER_AGENT,
    )

