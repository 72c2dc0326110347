"""
규칙 기반 형태소/키워드 추출기

실제 형태소 분석기 대신 한글 음절 덩어리 + 어미 패턴으로 품사를 추정하고,
품사/길이 가중치를 합산해 상위 키워드를 뽑습니다.
분류기는 `(word) -> category` 함수라서 실제 분석기로 바꿔 끼울 수 있습니다.
"""
from __future__ import annotations
import re
from typing import Callable, Dict, Iterable, List

from exposure.models import AlsoSearchedTerm, PopularPost, SmartBlockKeyword


# 품사 태그 (세종 태그셋 이름 차용)
COMMON_NOUN = "NNG"
PROPER_NOUN = "NNP"
VERB = "VV"
ADJECTIVE = "VA"
ADVERB = "MAG"  # 조사/부사류 어미 포함

WordClassifier = Callable[[str], str]

_HANGUL_RUN = re.compile(r"[가-힣]+")

_VERB_SUFFIX = re.compile(r"(하다|되다|있다|없다|보다)$")
_ADJECTIVE_SUFFIX = re.compile(r"(다|한)$")
_ADVERB_SUFFIX = re.compile(
    r"(게|히|이|로|에|에서|부터|까지|도|만|은|는|가|을|를|의|와|과|하고|며|고|지만|라도)$"
)

CATEGORY_WEIGHTS: Dict[str, float] = {
    COMMON_NOUN: 3.0,
    PROPER_NOUN: 3.0,
    VERB: 2.0,
    ADJECTIVE: 2.0,
    ADVERB: 1.5,
}
UNKNOWN_CATEGORY_WEIGHT = 0.5

TOP_KEYWORD_LIMIT = 10


def classify_word(word: str) -> str:
    """어미 패턴으로 품사 추정. 동사 → 형용사 → 조사/부사 → 명사 순."""
    if _VERB_SUFFIX.search(word):
        return VERB
    if _ADJECTIVE_SUFFIX.search(word):
        return ADJECTIVE
    if _ADVERB_SUFFIX.search(word):
        return ADVERB
    if len(word) >= 3:
        return PROPER_NOUN
    return COMMON_NOUN


def split_hangul_words(text: str) -> List[str]:
    """한글 음절 연속 구간만 후보로 (영문/숫자/기호는 무시)."""
    return _HANGUL_RUN.findall(text)


def word_weight(word: str, category: str) -> float:
    weight = CATEGORY_WEIGHTS.get(category, UNKNOWN_CATEGORY_WEIGHT)
    # 길이 보너스 (둘 다 적용 가능)
    if len(word) >= 3:
        weight *= 1.2
    if len(word) >= 4:
        weight *= 1.1
    return weight


def extract_top_keywords(
    text: str,
    main_keyword: str,
    limit: int = TOP_KEYWORD_LIMIT,
    classify: WordClassifier = classify_word,
) -> List[str]:
    scores: Dict[str, float] = {}
    for word in split_hangul_words(text):
        if word == main_keyword or len(word) <= 1:
            continue
        scores[word] = scores.get(word, 0.0) + word_weight(word, classify(word))

    # sorted는 안정 정렬 → 동점은 처음 등장한 순서 유지
    ranked = sorted(scores.items(), key=lambda kv: kv[1], reverse=True)
    return [word for word, _ in ranked[:limit]]


def build_keyword_corpus(
    posts: Iterable[PopularPost],
    smart_blocks: Iterable[SmartBlockKeyword],
    also_searched: Iterable[AlsoSearchedTerm],
) -> str:
    """인기글 제목+내용, 스마트블록 키워드, 함께 찾는 검색어를 한 덩어리로."""
    parts = [f"{p.title} {p.content}" for p in posts]
    parts += [b.keyword for b in smart_blocks if b.keyword]
    parts += [t.title for t in also_searched if t.title]
    return " ".join(parts)
