"""Social search adapter with local sample fallback."""

import time
from datetime import UTC, datetime
from typing import Any

import httpx

from ..config import Settings, VocabularyConfig, get_settings, get_vocabulary_config
from ..items import SocialPost
from ..logging import get_logger, log_api_request, log_error
from ..utils import parse_date_string

logger = get_logger(__name__)

UNKNOWN_TIME = "不明"


class SocialAPIError(Exception):
    """Social search API returned an unusable response."""
    pass


def format_relative_time(created_at: str | None, now: datetime | None = None) -> str:
    """Bucket elapsed time since ``created_at`` into minutes, hours or days ago."""
    created = parse_date_string(created_at)
    if created is None:
        return UNKNOWN_TIME

    now = now or datetime.now(UTC)
    elapsed = max(0.0, (now - created).total_seconds())

    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)

    if minutes < 60:
        return f"{minutes}分前"
    if hours < 24:
        return f"{hours}時間前"
    return f"{days}日前"


def _count(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def normalize_post(raw: dict[str, Any], now: datetime | None = None) -> SocialPost:
    """Convert one API post object to a ``SocialPost``."""
    user = raw.get('user') or {}
    post_id = str(raw.get('id_str') or raw.get('id') or '')
    screen_name = user.get('screen_name')

    return SocialPost(
        id=post_id,
        user_name=user.get('name') or "Unknown",
        user_handle=f"@{screen_name}" if screen_name else "@unknown",
        user_image=user.get('profile_image_url_https') or "",
        content=raw.get('full_text') or raw.get('text') or "",
        timestamp=format_relative_time(raw.get('created_at'), now),
        link=f"https://twitter.com/{screen_name or 'i'}/status/{post_id}",
        likes=_count(raw.get('favorite_count')),
        reposts=_count(raw.get('retweet_count')),
        replies=_count(raw.get('reply_count')),
    )


class SocialSearchClient:
    """Client for the social search API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.transport = transport

    def build_search_query(self, query: str) -> str:
        return f"{query} lang:{self.settings.social_language} min_faves:{self.settings.social_min_faves}"

    async def search(self, query: str) -> list[SocialPost]:
        """Run a live search.

        Raises:
            SocialAPIError: If the API responds with a non-success status
            httpx.HTTPError: On transport failures
        """
        host = self.settings.x_api_host
        url = f"https://{host}/status/search"
        headers = {
            'x-rapidapi-key': self.settings.x_api_key or "",
            'x-rapidapi-host': host,
        }
        params = {'query': self.build_search_query(query), 'type': 'Top'}

        start_time = time.perf_counter()
        async with httpx.AsyncClient(
            timeout=self.settings.request_timeout,
            transport=self.transport,
        ) as client:
            response = await client.get(url, params=params, headers=headers)

        logger.debug(**log_api_request(
            "GET", url,
            status_code=response.status_code,
            response_time=time.perf_counter() - start_time,
        ))

        if not response.is_success:
            raise SocialAPIError(f"API responded with status: {response.status_code}")

        data = response.json()
        raw_posts = data.get('tweets') or data.get('results') or []
        now = datetime.now(UTC)
        return [normalize_post(raw, now) for raw in raw_posts]


def load_sample_posts(vocabulary_config: VocabularyConfig | None = None) -> list[SocialPost]:
    config = vocabulary_config or get_vocabulary_config()
    return [SocialPost(**raw) for raw in config.get_sample_posts()]


def filtered_samples(
    query: str,
    samples: list[SocialPost] | None = None,
    vocabulary_config: VocabularyConfig | None = None,
) -> list[SocialPost]:
    """Samples matching the query, or every sample if none match."""
    config = vocabulary_config or get_vocabulary_config()
    samples = load_sample_posts(config) if samples is None else samples
    sentinels = config.get_vocabulary().sample_sentinels

    if query in sentinels:
        return list(samples)

    needle = query.casefold()
    matched = [post for post in samples if needle in post.content.casefold()]
    return matched or list(samples)


async def fetch_trending_posts(
    query: str,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[SocialPost]:
    """Fetch posts for a query, falling back to samples on any failure.

    Args:
        query: Topic query
        settings: Application settings
        transport: Optional httpx transport

    Returns:
        Live posts, or filtered fallback samples
    """
    settings = settings or get_settings()

    if settings.mock or not settings.x_api_key:
        logger.info("X_API_KEY is not set, using sample posts", mock=settings.mock)
        return filtered_samples(query)

    try:
        posts = await SocialSearchClient(settings, transport).search(query)
    except Exception as e:
        logger.warning(**log_error(e, context="social_search", query=query))
        return filtered_samples(query)

    if not posts:
        logger.info("Social search returned no posts, using sample posts", query=query)
        return filtered_samples(query)

    return posts
