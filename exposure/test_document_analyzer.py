from __future__ import annotations

from exposure.document_analyzer import (
    MSG_DENSITY,
    MSG_H1,
    MSG_LENGTH,
    MSG_OK,
    analyze_single_document,
)


KEYWORD = "사회복지사"


def test_short_plain_text_gets_all_suggestions():
    result = analyze_single_document("짧은 글", KEYWORD)

    assert result.content_length == 4
    assert result.keyword_density == 0
    assert result.has_h1 is False
    assert result.has_images is False
    assert result.suggestions == [MSG_DENSITY, MSG_LENGTH, MSG_H1]


def test_well_formed_document():
    # 18 + 30 + 466 = 514자, 키워드 6회
    content = "<h1>사회복지사 가이드</h1>" + "사회복지사 " * 5 + "나" * 466
    result = analyze_single_document(content, KEYWORD)

    assert result.content_length == 514
    assert result.keyword_density == 1.17
    assert result.has_h1 is True
    assert result.suggestions == [MSG_OK]


def test_density_is_percent_of_characters():
    content = KEYWORD + "가" * 613
    result = analyze_single_document(content, KEYWORD)

    assert result.content_length == 618
    assert result.keyword_density == 0.16
    assert result.suggestions == [MSG_DENSITY, MSG_H1]


def test_detects_images_and_case_insensitive_tags():
    content = '<H1 class="title">사회복지사</H1><IMG src="a.png">'
    result = analyze_single_document(content, KEYWORD)

    assert result.has_h1 is True
    assert result.has_images is True


def test_to_dict_keys():
    body = analyze_single_document("짧은 글", KEYWORD).to_dict()
    assert set(body) == {"keywordDensity", "contentLength", "hasH1", "hasImages", "suggestions"}
