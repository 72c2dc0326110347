"""
단일 문서 온페이지 점검

글 본문(HTML 포함 가능) 하나와 키워드로 스마트블록 노출 기본 요건을 확인.
메인 노출 분석 엔진과 상태를 공유하지 않는 독립 분석기.
"""
from __future__ import annotations
import re
from typing import List

from exposure.models import DocumentAnalysis
from exposure.text_stats import count_occurrences


DENSITY_MIN_PERCENT = 0.5
DENSITY_MAX_PERCENT = 3.0
MIN_CONTENT_LENGTH = 500

_H1_TAG = re.compile(r"<h1.*?>.*?</h1>", re.IGNORECASE)
_IMG_TAG = re.compile(r"<img.*?>", re.IGNORECASE)

MSG_DENSITY = "키워드 밀도를 0.5% ~ 3% 사이로 조절하는 것을 고려해보세요."
MSG_LENGTH = "콘텐츠 길이를 500자 이상으로 늘려 상세한 정보를 제공하는 것이 좋습니다."
MSG_H1 = "콘텐츠에 핵심 키워드를 포함한 <h1> 태그를 사용하는 것이 좋습니다."
MSG_OK = "현재 콘텐츠는 스마트블록 노출에 유리한 기본적인 요소를 잘 갖추고 있습니다!"


def analyze_single_document(content: str, keyword: str) -> DocumentAnalysis:
    content_length = len(content)
    # 글자 수 대비 % (토큰 기준인 메인 엔진 밀도와 단위가 다름)
    density = count_occurrences(content, keyword) / content_length * 100 if content_length > 0 else 0.0

    has_h1 = bool(_H1_TAG.search(content))
    has_images = bool(_IMG_TAG.search(content))

    suggestions: List[str] = []
    if density < DENSITY_MIN_PERCENT or density > DENSITY_MAX_PERCENT:
        suggestions.append(MSG_DENSITY)
    if content_length < MIN_CONTENT_LENGTH:
        suggestions.append(MSG_LENGTH)
    if not has_h1:
        suggestions.append(MSG_H1)
    if not suggestions:
        suggestions.append(MSG_OK)

    return DocumentAnalysis(
        keyword_density=round(density, 2),
        content_length=content_length,
        has_h1=has_h1,
        has_images=has_images,
        suggestions=suggestions,
    )
