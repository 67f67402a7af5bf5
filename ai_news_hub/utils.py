"""Utility functions for AI News Hub."""

import re
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from selectolax.parser import HTMLParser

from .logging import get_logger

logger = get_logger(__name__)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def parse_date_string(date_str: str | None) -> datetime | None:
    """Parse various date string formats.

    Args:
        date_str: Date string to parse

    Returns:
        Timezone-aware datetime or None if parsing fails
    """
    if not date_str:
        return None

    date_str = date_str.strip()

    # RFC 2822 first (common in RSS feeds)
    # Example: "Thu, 17 Jul 2025 23:17:14 GMT"
    try:
        return ensure_utc(parsedate_to_datetime(date_str))
    except (ValueError, TypeError, IndexError):
        pass

    try:
        return ensure_utc(datetime.fromisoformat(date_str.replace("Z", "+00:00")))
    except ValueError:
        pass

    formats = [
        # Twitter-style "Wed Oct 10 20:19:24 +0000 2018"
        "%a %b %d %H:%M:%S %z %Y",
        "%Y-%m-%d %H:%M:%S",
        "%Y/%m/%d %H:%M:%S",
        "%Y/%m/%d",
        "%B %d, %Y",
        "%b %d, %Y",
        "%d %B %Y",
        "%d %b %Y",
    ]

    for fmt in formats:
        try:
            return ensure_utc(datetime.strptime(date_str, fmt))
        except ValueError:
            continue

    logger.debug("Failed to parse date string", date_string=date_str)
    return None


def format_datetime_iso(dt: datetime) -> str:
    """Format datetime as ISO string.

    Args:
        dt: Datetime to format

    Returns:
        ISO formatted datetime string
    """
    return ensure_utc(dt).isoformat()


def clean_text(text: str | None) -> str:
    """Collapse whitespace in plain text."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text.strip())


def strip_html(html_text: str | None) -> str:
    """Convert an HTML fragment to plain text.

    Args:
        html_text: HTML or plain text

    Returns:
        Whitespace-normalized plain text
    """
    if not html_text:
        return ""
    if "<" not in html_text and "&" not in html_text:
        return clean_text(html_text)

    tree = HTMLParser(html_text)
    node = tree.body or tree.root
    text = node.text(separator=" ") if node else ""
    return clean_text(text)


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """Truncate text to maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)] + suffix
