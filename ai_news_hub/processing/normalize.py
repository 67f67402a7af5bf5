"""
Normalization and filtering of raw news entries.

Covers the keyword inclusion rule for broad category feeds, title/source
splitting for search feeds that encode the publisher in the title, link-based
deduplication and the final newest-first ordering.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Literal

from ..items import NewsItem

logger = logging.getLogger(__name__)

SOURCE_SEPARATOR = " - "
UNKNOWN_SOURCE = "Unknown"
UNTITLED = "Untitled"

DedupePolicy = Literal["first", "last"]


def is_ai_related(title: str, snippet: str, keywords: Iterable[str]) -> bool:
    """Check whether title or snippet mention any of the keywords."""
    content = f"{title} {snippet}".casefold()
    return any(keyword.casefold() in content for keyword in keywords)


def split_source_title(raw_title: str | None) -> tuple[str, str]:
    """Split a ``"Title - Source"`` string on its last separator.

    Returns:
        ``(title, source)``
    """
    raw_title = raw_title or ""
    title, separator, source = raw_title.rpartition(SOURCE_SEPARATOR)
    if not separator:
        return raw_title or UNTITLED, UNKNOWN_SOURCE
    return title or UNTITLED, source or UNKNOWN_SOURCE


def dedupe_by_link(
    items: Iterable[NewsItem],
    keep: DedupePolicy = "last",
) -> list[NewsItem]:
    """Collapse items sharing a link.

    With ``keep="last"`` each link keeps the slot of its first occurrence but
    the value of its last one. With ``keep="first"`` later duplicates are
    dropped.
    """
    if keep not in ("first", "last"):
        raise ValueError(f"Unknown dedupe policy: {keep}")

    by_link: dict[str, NewsItem] = {}
    total = 0
    for item in items:
        total += 1
        if keep == "first" and item.link in by_link:
            continue
        by_link[item.link] = item

    if total != len(by_link):
        logger.debug(f"Removed {total - len(by_link)} duplicate links")
    return list(by_link.values())


def sort_by_published(items: Iterable[NewsItem]) -> list[NewsItem]:
    """Newest first; items with equal timestamps keep their relative order."""
    return sorted(items, key=lambda item: item.published_at, reverse=True)


def normalize_news(
    batches: Sequence[Sequence[NewsItem]],
    keep: DedupePolicy = "last",
) -> list[NewsItem]:
    """Merge per-feed batches in the given order, dedupe, then sort."""
    merged = [item for batch in batches for item in batch]
    unique = dedupe_by_link(merged, keep=keep)
    logger.info(f"Normalized {len(merged)} news entries into {len(unique)} items")
    return sort_by_published(unique)
