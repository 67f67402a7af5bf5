"""
Keyword relevance scoring for news items and social posts.

The score is an integer count of distinct vocabulary keywords found in an
item's text, plus a bonus when the active query itself appears in the text.
Default queries never earn the bonus since every item already matches them.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..config import get_vocabulary
from ..items import ItemKind, NewsItem, SocialPost

logger = logging.getLogger(__name__)

QUERY_MATCH_BONUS = 2


@dataclass(frozen=True)
class ScoredItem:
    """A feed item tagged with its variant and relevance score."""
    kind: ItemKind
    item: NewsItem | SocialPost
    score: int

    @property
    def key(self) -> str:
        """Stable identity key for list rendering."""
        if isinstance(self.item, NewsItem):
            return self.item.link
        return self.item.id

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "score": self.score, "data": self.item.to_dict()}


class RelevanceScorer:
    """Scores text against a fixed keyword vocabulary and the active query."""

    def __init__(
        self,
        keywords: Iterable[str] | None = None,
        sentinels: Iterable[str] | None = None,
        query_bonus: int = QUERY_MATCH_BONUS,
    ):
        if keywords is None or sentinels is None:
            vocabulary = get_vocabulary()
            keywords = vocabulary.ai_keywords if keywords is None else keywords
            sentinels = vocabulary.score_sentinels if sentinels is None else sentinels

        # Case-insensitive duplicates in the vocabulary would count twice
        self.keywords: tuple[str, ...] = tuple(dict.fromkeys(k.casefold() for k in keywords if k))
        self.sentinels = frozenset(sentinels)
        self.query_bonus = query_bonus

    def earns_query_bonus(self, query: str | None) -> bool:
        return bool(query) and query not in self.sentinels

    def score(self, text: str, query: str | None = None) -> int:
        """Score ``text`` for the given query."""
        lowered = text.casefold()
        total = sum(1 for keyword in self.keywords if keyword in lowered)

        if self.earns_query_bonus(query) and query.casefold() in lowered:
            total += self.query_bonus

        return total

    def score_item(self, item: NewsItem | SocialPost, query: str | None = None) -> ScoredItem:
        kind = ItemKind.NEWS if isinstance(item, NewsItem) else ItemKind.SOCIAL
        return ScoredItem(kind=kind, item=item, score=self.score(item.scoring_text, query))

    def score_items(
        self,
        items: Iterable[NewsItem | SocialPost],
        query: str | None = None,
    ) -> list[ScoredItem]:
        scored = [self.score_item(item, query) for item in items]
        if scored:
            logger.debug(f"Scored {len(scored)} items, top score {max(s.score for s in scored)}")
        return scored


def score(text: str, query: str | None = None, scorer: RelevanceScorer | None = None) -> int:
    """Convenience function for scoring a single text."""
    return (scorer or RelevanceScorer()).score(text, query)
