"""Content processing module."""

from .aggregate import DashboardState, FeedViews, View, aggregate, interleave
from .normalize import (
    dedupe_by_link,
    is_ai_related,
    normalize_news,
    sort_by_published,
    split_source_title,
)
from .scoring import RelevanceScorer, ScoredItem, score

__all__ = [
    'aggregate',
    'interleave',
    'DashboardState',
    'FeedViews',
    'View',
    'dedupe_by_link',
    'is_ai_related',
    'normalize_news',
    'sort_by_published',
    'split_source_title',
    'RelevanceScorer',
    'ScoredItem',
    'score',
]
