"""Threshold filtering and view assembly for the dashboard."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from itertools import zip_longest

from ..items import NewsItem, SocialPost
from .scoring import RelevanceScorer, ScoredItem

logger = logging.getLogger(__name__)

MIN_THRESHOLD = 0
MAX_THRESHOLD = 3


class View(Enum):
    """Dashboard view selector positions."""
    ALL = "all"
    NEWS = "news"
    SOCIAL = "social"


def validate_threshold(threshold: int) -> int:
    if isinstance(threshold, bool) or not isinstance(threshold, int):
        raise ValueError(f"Threshold must be an integer, got {threshold!r}")
    if not MIN_THRESHOLD <= threshold <= MAX_THRESHOLD:
        raise ValueError(f"Threshold must be between {MIN_THRESHOLD} and {MAX_THRESHOLD}")
    return threshold


def interleave(first: Sequence, second: Sequence) -> list:
    """Alternate items of two lists, appending the remainder of the longer one."""
    _missing = object()
    mixed = []
    for a, b in zip_longest(first, second, fillvalue=_missing):
        if a is not _missing:
            mixed.append(a)
        if b is not _missing:
            mixed.append(b)
    return mixed


@dataclass(frozen=True)
class FeedViews:
    """The three selectable dashboard views."""
    all: tuple[ScoredItem, ...]
    news: tuple[ScoredItem, ...]
    social: tuple[ScoredItem, ...]

    def select(self, view: View | str) -> tuple[ScoredItem, ...]:
        return getattr(self, View(view).value)

    def counts(self) -> dict[str, int]:
        return {view.value: len(self.select(view)) for view in View}


def aggregate(
    news: Sequence[NewsItem],
    posts: Sequence[SocialPost],
    query: str | None,
    threshold: int = 0,
    scorer: RelevanceScorer | None = None,
) -> FeedViews:
    """Score both lists, filter by threshold and assemble the views."""
    validate_threshold(threshold)
    scorer = scorer or RelevanceScorer()

    scored_news = scorer.score_items(news, query)
    scored_posts = scorer.score_items(posts, query)

    filtered_news = tuple(s for s in scored_news if s.score >= threshold)
    filtered_posts = tuple(s for s in scored_posts if s.score >= threshold)

    logger.info(
        f"Threshold {threshold}: kept {len(filtered_news)}/{len(scored_news)} news, "
        f"{len(filtered_posts)}/{len(scored_posts)} posts"
    )

    return FeedViews(
        all=tuple(interleave(filtered_news, filtered_posts)),
        news=filtered_news,
        social=filtered_posts,
    )


@dataclass(frozen=True)
class DashboardState:
    """Display controls owned by the presentation shell."""
    query: str
    view: View = View.ALL
    threshold: int = 0

    def __post_init__(self):
        validate_threshold(self.threshold)
        object.__setattr__(self, "view", View(self.view))

    def with_view(self, view: View | str) -> "DashboardState":
        return replace(self, view=View(view))

    def with_threshold(self, threshold: int) -> "DashboardState":
        return replace(self, threshold=validate_threshold(threshold))

    def with_query(self, query: str) -> "DashboardState":
        return replace(self, query=query)
