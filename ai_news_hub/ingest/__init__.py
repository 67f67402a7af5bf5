"""Source adapters for news feeds and social posts."""

from .news import NewsFeedAdapter, fetch_news
from .social import SocialSearchClient, fetch_trending_posts, filtered_samples

__all__ = [
    'NewsFeedAdapter',
    'fetch_news',
    'SocialSearchClient',
    'fetch_trending_posts',
    'filtered_samples',
]
