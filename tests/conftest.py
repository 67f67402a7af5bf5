"""Pytest configuration and fixtures."""

import os
from datetime import UTC, datetime, timedelta

import pytest

# Set test environment
os.environ.pop("X_API_KEY", None)
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["JSON_LOGGING"] = "false"

from ai_news_hub.config import Settings, get_settings  # noqa: E402
from ai_news_hub.items import NewsItem, SocialPost  # noqa: E402
from ai_news_hub.processing.scoring import RelevanceScorer  # noqa: E402

GOOGLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
<title>Google News</title>
<link>https://news.google.com</link>
<description>Google News</description>
<item>
<title>ロボット新時代の幕開け - 日経新聞</title>
<link>https://example.com/news/robot-era</link>
<pubDate>Mon, 05 Jan 2026 10:00:00 GMT</pubDate>
<description>&lt;a href="https://example.com/news/robot-era"&gt;ロボット新時代の幕開け&lt;/a&gt;&amp;nbsp;&lt;font&gt;日経新聞&lt;/font&gt;</description>
</item>
<item>
<title>産業用ロボット - 受注が過去最高 - 東洋経済</title>
<link>https://example.com/news/industrial-robot</link>
<pubDate>Mon, 05 Jan 2026 12:00:00 GMT</pubDate>
<description>産業用ロボットの受注が伸びた。</description>
</item>
<item>
<title>見出しのみのロボット記事</title>
<link>https://example.com/news/headline-only</link>
<pubDate>Sun, 04 Jan 2026 08:00:00 GMT</pubDate>
</item>
</channel>
</rss>
"""

YAHOO_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
<title>Yahoo!ニュース IT</title>
<link>https://news.yahoo.co.jp</link>
<description>IT</description>
<item>
<title>国産の大規模言語モデルを公開</title>
<link>https://example.com/news/domestic-llm</link>
<pubDate>Mon, 05 Jan 2026 11:00:00 GMT</pubDate>
<description>機械学習の研究チームが発表した。</description>
</item>
<item>
<title>新型スマートフォンを発表</title>
<link>https://example.com/news/smartphone</link>
<pubDate>Mon, 05 Jan 2026 09:00:00 GMT</pubDate>
<description>カメラ性能が向上した。</description>
</item>
<item>
<title>ロボット新時代の幕開け（詳報）</title>
<link>https://example.com/news/robot-era</link>
<pubDate>Mon, 05 Jan 2026 10:00:00 GMT</pubDate>
<description>ロボット産業の詳報。</description>
</item>
</channel>
</rss>
"""

ATOM_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xmlns:media="http://search.yahoo.com/mrss/">
<title>Search results</title>
<id>urn:example:search</id>
<updated>2026-01-05T18:00:00+09:00</updated>
<entry>
<title>AIチップ出荷 - 技術新報</title>
<id>urn:example:ai-chip</id>
<link rel="alternate" href="https://example.com/news/ai-chip"/>
<updated>2026-01-05T18:00:00+09:00</updated>
<content type="html">&lt;p&gt;生成&lt;b&gt;AI&lt;/b&gt;向け&lt;/p&gt;</content>
<media:thumbnail url="https://img.example.com/a.jpg"/>
</entry>
</feed>
"""


@pytest.fixture(autouse=True)
def reset_global_settings():
    """Undo CLI flags applied to the shared settings instance."""
    settings = get_settings()
    original_mock = settings.mock
    yield
    settings.mock = original_mock


@pytest.fixture
def atom_feed() -> str:
    """Atom search feed with an HTML content body and a media thumbnail."""
    return ATOM_FEED


@pytest.fixture
def settings() -> Settings:
    """Settings without credentials or env file."""
    return Settings(_env_file=None, x_api_key=None, mock=False)


@pytest.fixture
def live_settings() -> Settings:
    """Settings with a social API key configured."""
    return Settings(_env_file=None, x_api_key="test-key", mock=False)


@pytest.fixture
def scorer() -> RelevanceScorer:
    """Scorer with a small fixed vocabulary."""
    return RelevanceScorer(
        keywords=["AI", "機械学習", "ロボット"],
        sentinels=["Artificial Intelligence", "AI"],
    )


@pytest.fixture
def base_time() -> datetime:
    return datetime(2026, 1, 5, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_news(base_time):
    """Factory for news items published ``hours_ago`` before ``base_time``."""
    def _make(link: str, title: str = "記事", snippet: str = "", hours_ago: float = 0) -> NewsItem:
        return NewsItem(
            title=title,
            link=link,
            published_at=base_time - timedelta(hours=hours_ago),
            source="テスト新聞",
            snippet=snippet,
        )
    return _make


@pytest.fixture
def make_post():
    """Factory for social posts."""
    def _make(post_id: str, content: str = "投稿", user_name: str = "テストユーザー") -> SocialPost:
        return SocialPost(
            id=post_id,
            user_name=user_name,
            user_handle="@tester",
            user_image="",
            content=content,
            timestamp="1時間前",
            link=f"https://twitter.com/tester/status/{post_id}",
        )
    return _make


@pytest.fixture
def fake_feeds(monkeypatch):
    """Serve canned feed documents instead of hitting the network.

    Returns the mutable mapping of URL fragment to document or exception.
    """
    import aiohttp

    from ai_news_hub.ingest.news import NewsFeedAdapter

    documents: dict[str, object] = {
        "news.google.com": GOOGLE_RSS,
        "news.yahoo.co.jp": YAHOO_RSS,
    }

    async def fake_fetch_url(self, url: str) -> str:
        for fragment, document in documents.items():
            if fragment in url:
                if isinstance(document, Exception):
                    raise document
                return document
        raise aiohttp.ClientError(f"unexpected url {url}")

    monkeypatch.setattr(NewsFeedAdapter, "_fetch_url", fake_fetch_url)
    return documents
