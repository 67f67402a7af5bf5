"""Tests for threshold filtering and view assembly."""

import pytest

from ai_news_hub.processing.aggregate import (
    DashboardState,
    View,
    aggregate,
    interleave,
    validate_threshold,
)
from ai_news_hub.processing.scoring import RelevanceScorer


@pytest.fixture
def flat_scorer():
    """Scores every item 0 so nothing is filtered at threshold 0."""
    return RelevanceScorer(keywords=[], sentinels=[])


class TestInterleave:

    def test_longer_first(self):
        assert interleave(["n0", "n1", "n2"], ["s0"]) == ["n0", "s0", "n1", "n2"]

    def test_longer_second(self):
        assert interleave(["n0"], ["s0", "s1", "s2"]) == ["n0", "s0", "s1", "s2"]

    def test_equal_lengths(self):
        assert interleave([1, 3], [2, 4]) == [1, 2, 3, 4]

    def test_empty(self):
        assert interleave([], []) == []
        assert interleave([], ["s0"]) == ["s0"]

    def test_none_values_are_kept(self):
        assert interleave([None], [None, None]) == [None, None, None]


class TestAggregate:

    def test_all_view_interleaves(self, make_news, make_post, flat_scorer):
        news = [make_news(f"https://example.com/{i}") for i in range(3)]
        posts = [make_post("s0")]

        views = aggregate(news, posts, "AI", 0, flat_scorer)

        assert [s.key for s in views.all] == [
            "https://example.com/0", "s0", "https://example.com/1", "https://example.com/2",
        ]
        assert len(views.all) == len(views.news) + len(views.social)

    def test_views_preserve_input_order(self, make_news, make_post, flat_scorer):
        news = [make_news(f"https://example.com/{i}") for i in range(4)]
        posts = [make_post(str(i)) for i in range(2)]

        views = aggregate(news, posts, None, 0, flat_scorer)

        assert [s.item for s in views.news] == news
        assert [s.item for s in views.social] == posts
        assert [s.item for s in views.all if s.kind.value == "news"] == news

    def test_threshold_filters(self, make_news, make_post, scorer):
        news = [
            make_news("https://example.com/plain", title="決算発表"),
            make_news("https://example.com/ai", title="AIと機械学習"),
        ]
        posts = [make_post("1", content="ロボット"), make_post("2", content="天気")]

        views = aggregate(news, posts, "AI", 1, scorer)

        assert [s.key for s in views.news] == ["https://example.com/ai"]
        assert [s.key for s in views.social] == ["1"]
        assert all(s.score >= 1 for s in views.all)

    def test_threshold_monotonic(self, make_news, make_post, scorer):
        news = [
            make_news("https://example.com/0", title="決算発表"),
            make_news("https://example.com/1", title="AI"),
            make_news("https://example.com/2", title="AIと機械学習"),
            make_news("https://example.com/3", title="AIと機械学習とロボット"),
        ]
        posts = [make_post(str(i), content="ロボット" * i) for i in range(3)]

        previous = None
        for threshold in range(4):
            current = {s.key for s in aggregate(news, posts, "AI", threshold, scorer).all}
            if previous is not None:
                assert current <= previous
            previous = current

    def test_query_bonus_lifts_items(self, make_news, scorer):
        news = [make_news("https://example.com/x", title="掃除機の新製品")]
        assert aggregate(news, [], "掃除機", 2, scorer).news
        assert not aggregate(news, [], "冷蔵庫", 2, scorer).news

    def test_empty_inputs(self, scorer):
        views = aggregate([], [], "AI", 3, scorer)
        assert views.counts() == {"all": 0, "news": 0, "social": 0}

    @pytest.mark.parametrize("threshold", [-1, 4, 1.5, True])
    def test_invalid_threshold(self, scorer, threshold):
        with pytest.raises(ValueError):
            aggregate([], [], "AI", threshold, scorer)

    def test_select(self, make_news, make_post, flat_scorer):
        views = aggregate([make_news("https://example.com/n")], [make_post("p")], "AI", 0, flat_scorer)
        assert views.select(View.NEWS) == views.news
        assert views.select("social") == views.social
        assert views.counts() == {"all": 2, "news": 1, "social": 1}


class TestDashboardState:

    def test_defaults(self):
        state = DashboardState(query="AI")
        assert state.view is View.ALL
        assert state.threshold == 0

    def test_transitions_return_new_state(self):
        state = DashboardState(query="AI")
        updated = state.with_view("news").with_threshold(2).with_query("ロボット")

        assert updated == DashboardState(query="ロボット", view=View.NEWS, threshold=2)
        assert state.view is View.ALL

    def test_rejects_out_of_range_threshold(self):
        with pytest.raises(ValueError):
            DashboardState(query="AI", threshold=5)
        with pytest.raises(ValueError):
            DashboardState(query="AI").with_threshold(-1)

    def test_rejects_unknown_view(self):
        with pytest.raises(ValueError):
            DashboardState(query="AI", view="videos")

    def test_validate_threshold_returns_value(self):
        assert validate_threshold(3) == 3
