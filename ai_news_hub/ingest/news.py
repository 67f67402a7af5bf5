"""News feed adapter: search feed plus fixed category feeds."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import urlencode

import aiohttp
import feedparser

from ..config import Settings, VocabularyConfig, get_settings, get_vocabulary_config
from ..items import NewsItem
from ..logging import PerformanceLogger, get_logger, log_error, log_processing_stage
from ..processing.normalize import (
    UNTITLED,
    DedupePolicy,
    is_ai_related,
    normalize_news,
    split_source_title,
)
from ..utils import clean_text, parse_date_string, strip_html

logger = get_logger(__name__)

DEFAULT_NEWS_QUERY = "人工知能"


@dataclass(frozen=True)
class FeedSource:
    """One feed to fetch within a request."""
    name: str
    url: str
    is_search: bool
    source_label: str = "Unknown"


class NewsFeedAdapter:
    """Fetches and parses the search feed and the category feeds."""

    def __init__(
        self,
        settings: Settings | None = None,
        vocabulary_config: VocabularyConfig | None = None,
    ):
        self.settings = settings or get_settings()
        self.vocabulary_config = vocabulary_config or get_vocabulary_config()
        self.keywords = self.vocabulary_config.get_vocabulary().ai_keywords
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self):
        timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout)
        self.session = aiohttp.ClientSession(
            timeout=timeout,
            headers={
                'User-Agent': self.settings.user_agent,
                'Accept': 'application/rss+xml, application/atom+xml, application/xml, text/xml, */*',
            }
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.session = None

    def rewrite_query(self, query: str) -> str:
        """Broaden default queries before they reach the search feed."""
        return self.vocabulary_config.get_query_rewrites().get(query, query)

    def build_search_url(self, query: str) -> str:
        params = urlencode({
            'q': self.rewrite_query(query),
            'hl': self.settings.news_hl,
            'gl': self.settings.news_gl,
            'ceid': self.settings.news_ceid,
        })
        return f"{self.settings.news_search_url}?{params}"

    def feed_sources(self, query: str) -> list[FeedSource]:
        """Search feed first, then category feeds in configured order."""
        sources = [FeedSource(name="search", url=self.build_search_url(query), is_search=True)]
        for feed in self.vocabulary_config.get_category_feeds():
            sources.append(FeedSource(
                name=feed.name,
                url=str(feed.url),
                is_search=False,
                source_label=feed.source_label,
            ))
        return sources

    async def _fetch_url(self, url: str) -> str:
        """Fetch feed document text.

        Raises:
            aiohttp.ClientError: On connection errors or non-success status
        """
        if not self.session:
            raise RuntimeError("Session not initialized. Use async context manager.")

        async with self.session.get(url) as response:
            response.raise_for_status()
            content = await response.text()
            logger.debug(
                "Feed fetched",
                url=url,
                status=response.status,
                content_length=len(content)
            )
            return content

    async def fetch_parsed(self, source: FeedSource) -> feedparser.FeedParserDict:
        """Fetch one feed document and parse it, RSS or Atom.

        Raises:
            ValueError: If the document yields no entries and is malformed
        """
        document = await self._fetch_url(source.url)
        parsed = feedparser.parse(document)

        if parsed.bozo and not parsed.entries:
            raise ValueError(f"Feed parse error: {parsed.get('bozo_exception', 'invalid document')}")
        return parsed

    async def fetch_feed(self, source: FeedSource, fetched_at: datetime) -> list[NewsItem]:
        """Fetch one feed and parse its admitted entries."""
        return self.admit_entries(await self.fetch_parsed(source), source, fetched_at)

    def admit_entries(
        self,
        parsed: feedparser.FeedParserDict,
        source: FeedSource,
        fetched_at: datetime,
    ) -> list[NewsItem]:
        """Search feed entries are all kept; category entries must mention an AI keyword."""
        items = []
        for entry in parsed.entries:
            item = self.parse_entry(entry, source, fetched_at)
            if source.is_search or is_ai_related(item.title, item.snippet, self.keywords):
                items.append(item)

        logger.info(
            **log_processing_stage(
                stage=f"fetch_{source.name}",
                input_count=len(parsed.entries),
                output_count=len(items)
            )
        )
        return items

    def parse_entry(self, entry: Any, source: FeedSource, fetched_at: datetime) -> NewsItem:
        raw_title = clean_text(entry.get('title'))
        if source.is_search:
            title, source_label = split_source_title(raw_title)
        else:
            title, source_label = raw_title or UNTITLED, source.source_label

        return NewsItem(
            title=title,
            link=entry.get('link') or '#',
            published_at=_entry_published(entry) or fetched_at,
            source=source_label,
            snippet=_entry_snippet(entry),
            image_url=_entry_image(entry),
        )

    async def fetch_all(self, query: str, keep: DedupePolicy = "last") -> list[NewsItem]:
        """Fetch every feed concurrently and normalize the merged result."""
        sources = self.feed_sources(query)
        fetched_at = datetime.now(UTC)

        results = await asyncio.gather(
            *(self.fetch_feed(source, fetched_at) for source in sources),
            return_exceptions=True,
        )

        batches = []
        for source, result in zip(sources, results):
            if isinstance(result, BaseException):
                logger.warning(**log_error(result, context="feed_fetch", source=source.name, url=source.url))
                continue
            batches.append(result)

        if not batches:
            logger.error("All news feeds failed", feed_count=len(sources))
            return []

        return normalize_news(batches, keep=keep)


def _entry_published(entry: Any) -> datetime | None:
    for key in ('published', 'updated'):
        parsed = parse_date_string(entry.get(key))
        if parsed:
            return parsed
    for key in ('published_parsed', 'updated_parsed'):
        struct = entry.get(key)
        if struct:
            return datetime(*struct[:6], tzinfo=UTC)
    return None


def _entry_snippet(entry: Any) -> str:
    summary = entry.get('summary')
    if not summary:
        content = entry.get('content') or []
        summary = content[0].get('value') if content else ''
    return strip_html(summary)


def _entry_image(entry: Any) -> str | None:
    image = entry.get('image')
    if isinstance(image, str) and image:
        return image
    if isinstance(image, dict) and (image.get('href') or image.get('url')):
        return image.get('href') or image.get('url')

    for key in ('media_thumbnail', 'media_content'):
        for media in entry.get(key) or []:
            if media.get('url'):
                return media['url']

    for enclosure in entry.get('enclosures') or []:
        if enclosure.get('type', '').startswith('image/') and enclosure.get('href'):
            return enclosure['href']

    return None


async def fetch_news(
    query: str = DEFAULT_NEWS_QUERY,
    settings: Settings | None = None,
    keep: DedupePolicy = "last",
) -> list[NewsItem]:
    """Fetch news items for a query.

    Args:
        query: Topic query
        settings: Application settings
        keep: Which copy of a duplicate link survives

    Returns:
        Items newest first, empty if every feed failed
    """
    settings = settings or get_settings()
    if settings.mock:
        return _generate_mock_news()

    try:
        with PerformanceLogger("fetch_news", logger):
            async with NewsFeedAdapter(settings) as adapter:
                return await adapter.fetch_all(query, keep=keep)
    except Exception as e:
        logger.error(**log_error(e, context="fetch_news", query=query))
        return []


def _generate_mock_news() -> list[NewsItem]:
    """Generate sample news items for offline runs."""
    now = datetime.now(UTC)
    mock_items = [
        NewsItem(
            title="国内大手各社、生成AIの業務活用を本格化",
            link="https://example.com/news/generative-ai-enterprise",
            published_at=now - timedelta(hours=1),
            source="サンプル経済新聞",
            snippet="大規模言語モデルを社内業務に導入する企業が増えている。",
        ),
        NewsItem(
            title="自動運転バス、地方都市で実証実験を開始",
            link="https://example.com/news/autonomous-bus",
            published_at=now - timedelta(hours=4),
            source="サンプル日報",
            snippet="AIによる運行管理で人手不足の解消を目指す。",
        ),
        NewsItem(
            title="NVIDIA、次世代GPUの出荷計画を発表",
            link="https://example.com/news/nvidia-gpu",
            published_at=now - timedelta(hours=9),
            source="テックサンプル",
            snippet="機械学習向けの需要拡大に対応する。",
        ),
    ]
    return mock_items
