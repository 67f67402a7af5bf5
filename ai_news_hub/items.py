"""Feed item data structures."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .utils import format_datetime_iso


class ItemKind(Enum):
    """Source variant of a feed item."""
    NEWS = "news"
    SOCIAL = "social"


@dataclass(frozen=True)
class NewsItem:
    """A news article parsed from an RSS or Atom feed."""
    title: str
    link: str
    published_at: datetime
    source: str
    snippet: str = ""
    image_url: str | None = None

    @property
    def scoring_text(self) -> str:
        return f"{self.title} {self.snippet}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "published_at": format_datetime_iso(self.published_at),
            "source": self.source,
            "snippet": self.snippet,
            "image_url": self.image_url,
        }


@dataclass(frozen=True)
class SocialPost:
    """A post returned by the social search API or the fallback samples."""
    id: str
    user_name: str
    user_handle: str
    user_image: str
    content: str
    timestamp: str
    link: str
    likes: int = 0
    reposts: int = 0
    replies: int = 0

    def __post_init__(self):
        for field_name in ("likes", "reposts", "replies"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} must be non-negative")

    @property
    def scoring_text(self) -> str:
        return f"{self.user_name} {self.content}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_name": self.user_name,
            "user_handle": self.user_handle,
            "user_image": self.user_image,
            "content": self.content,
            "timestamp": self.timestamp,
            "link": self.link,
            "likes": self.likes,
            "reposts": self.reposts,
            "replies": self.replies,
        }
