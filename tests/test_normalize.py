"""Tests for news normalization."""

import pytest

from ai_news_hub.processing.normalize import (
    UNKNOWN_SOURCE,
    dedupe_by_link,
    is_ai_related,
    normalize_news,
    sort_by_published,
    split_source_title,
)


class TestSplitSourceTitle:

    def test_title_and_source(self):
        assert split_source_title("ロボット新時代 - 日経新聞") == ("ロボット新時代", "日経新聞")

    def test_splits_on_last_separator(self):
        assert split_source_title("A - B - 東洋経済") == ("A - B", "東洋経済")

    def test_no_separator(self):
        assert split_source_title("見出しのみ") == ("見出しのみ", UNKNOWN_SOURCE)

    def test_missing_title(self):
        title, source = split_source_title(None)
        assert title == "Untitled"
        assert source == UNKNOWN_SOURCE


class TestIsAiRelated:

    def test_matches_title_or_snippet(self):
        keywords = ["AI", "機械学習"]
        assert is_ai_related("新しいAIサービス", "", keywords)
        assert is_ai_related("決算発表", "機械学習部門が好調", keywords)
        assert not is_ai_related("新型スマートフォンを発表", "カメラ性能が向上した。", keywords)

    def test_case_insensitive(self):
        assert is_ai_related("ChatGPT update", "", ["chatgpt"])


class TestDedupe:

    def test_keep_last_value_in_first_slot(self, make_news):
        first = make_news("https://example.com/a", title="first")
        other = make_news("https://example.com/b", title="other")
        last = make_news("https://example.com/a", title="last")

        result = dedupe_by_link([first, other, last])

        assert [item.title for item in result] == ["last", "other"]

    def test_keep_first(self, make_news):
        first = make_news("https://example.com/a", title="first")
        last = make_news("https://example.com/a", title="last")

        assert [item.title for item in dedupe_by_link([first, last], keep="first")] == ["first"]

    def test_unique_links(self, make_news):
        items = [make_news(f"https://example.com/{i}") for i in range(5)]
        items += items[:3]
        result = dedupe_by_link(items)
        assert len({item.link for item in result}) == len(result) == 5

    def test_unknown_policy(self, make_news):
        with pytest.raises(ValueError):
            dedupe_by_link([make_news("https://example.com/a")], keep="middle")


class TestSortByPublished:

    def test_newest_first(self, make_news):
        items = [
            make_news("https://example.com/old", hours_ago=10),
            make_news("https://example.com/new", hours_ago=1),
            make_news("https://example.com/mid", hours_ago=5),
        ]
        result = sort_by_published(items)
        assert [item.link for item in result] == [
            "https://example.com/new",
            "https://example.com/mid",
            "https://example.com/old",
        ]

    def test_ties_keep_input_order(self, make_news):
        items = [make_news(f"https://example.com/{i}", hours_ago=2) for i in range(4)]
        assert sort_by_published(items) == items


def test_normalize_news_merges_batches(make_news):
    search = [
        make_news("https://example.com/a", title="search copy", hours_ago=3),
        make_news("https://example.com/b", hours_ago=1),
    ]
    category = [make_news("https://example.com/a", title="category copy", hours_ago=3)]

    result = normalize_news([search, category])

    assert [item.link for item in result] == ["https://example.com/b", "https://example.com/a"]
    assert result[1].title == "category copy"
    for earlier, later in zip(result, result[1:]):
        assert earlier.published_at >= later.published_at
