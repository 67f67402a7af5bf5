"""Configuration management for AI News Hub."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VOCABULARY_PATH = Path(__file__).parent / "vocabulary.yaml"


class CategoryFeedConfig(BaseModel):
    """Fixed-URL category feed configuration."""
    name: str
    url: HttpUrl
    source_label: str = "Unknown"


class Vocabulary(BaseModel):
    """Immutable keyword and suggestion vocabularies."""
    ai_keywords: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    quick_topics: tuple[str, ...] = ()
    score_sentinels: tuple[str, ...] = ("Artificial Intelligence", "AI")
    sample_sentinels: tuple[str, ...] = ("Artificial Intelligence", "AI", "人工知能")

    model_config = {"frozen": True}


class Settings(BaseSettings):
    """Main application settings."""

    # ── Operational Mode ───────────────────────────────────────────────────
    mock: bool = Field(False, description="Use sample data instead of live sources")
    default_query: str = Field("Artificial Intelligence", description="Query used when none is given")

    # ── News Feeds ─────────────────────────────────────────────────────────
    news_search_url: str = Field(
        "https://news.google.com/rss/search", description="Primary search feed endpoint"
    )
    news_hl: str = Field("ja", description="Search feed interface language")
    news_gl: str = Field("JP", description="Search feed country")
    news_ceid: str = Field("JP:ja", description="Search feed edition id")

    # ── Social Search ──────────────────────────────────────────────────────
    x_api_key: str | None = Field(None, description="Social search API key (optional)")
    x_api_host: str = Field(
        "social-data-api.p.rapidapi.com", description="Social search API host"
    )
    social_language: str = Field("ja", description="Language filter appended to social queries")
    social_min_faves: int = Field(10, description="Minimum like count appended to social queries")

    # ── HTTP ───────────────────────────────────────────────────────────────
    request_timeout: float = Field(15.0, description="Per-request timeout in seconds")
    user_agent: str = Field(
        "AINewsHub/0.1 (+https://github.com/ai-news-hub/ai-news-hub)",
        description="User agent for feed requests"
    )

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = Field("INFO", description="Log level")
    json_logging: bool = Field(True, description="Enable JSON logging")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate request timeout is positive."""
        if v <= 0:
            raise ValueError("Request timeout must be positive")
        return v

    @field_validator("social_min_faves")
    @classmethod
    def validate_min_faves(cls, v: int) -> int:
        """Validate minimum engagement filter."""
        if v < 0:
            raise ValueError("Minimum likes filter must be non-negative")
        return v


class VocabularyConfig:
    """Vocabulary and feed list loader."""

    def __init__(self, config_path: str | Path = DEFAULT_VOCABULARY_PATH):
        self.config_path = Path(config_path)
        self._config: dict[str, Any] = {}
        self.load_config()

    def load_config(self) -> None:
        """Load vocabulary configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Vocabulary file not found: {self.config_path}")

        with open(self.config_path, encoding="utf-8") as f:
            self._config = yaml.safe_load(f) or {}

    def get_vocabulary(self) -> Vocabulary:
        """Get keyword, suggestion and sentinel vocabularies."""
        data = {
            key: tuple(self._config[key])
            for key in Vocabulary.model_fields
            if key in self._config
        }
        return Vocabulary(**data)

    def get_category_feeds(self) -> list[CategoryFeedConfig]:
        """Get fixed category feeds."""
        feeds_data = self._config.get("category_feeds", [])
        return [CategoryFeedConfig(**feed) for feed in feeds_data]

    def get_query_rewrites(self) -> dict[str, str]:
        """Get default-query rewrites for the primary news feed."""
        return dict(self._config.get("query_rewrites", {}))

    def get_sample_posts(self) -> list[dict[str, Any]]:
        """Get raw fallback social posts."""
        return list(self._config.get("sample_posts", []))


# Global instances
settings = Settings()
vocabulary_config = VocabularyConfig()


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def get_vocabulary_config() -> VocabularyConfig:
    """Get vocabulary configuration."""
    return vocabulary_config


def get_vocabulary() -> Vocabulary:
    """Get the configured vocabulary."""
    return vocabulary_config.get_vocabulary()


def validate_config(settings: Settings) -> bool:
    """Validate configuration completeness."""
    try:
        config = get_vocabulary_config()
        vocabulary = config.get_vocabulary()
        if not vocabulary.ai_keywords:
            raise ValueError("At least one AI keyword is required")
        if not config.get_sample_posts():
            raise ValueError("Fallback sample posts are required")
        config.get_category_feeds()

        if not settings.x_api_key and not settings.mock:
            print("Note: X_API_KEY is not set, social posts will use sample data")

        return True

    except Exception as e:
        print(f"Configuration validation failed: {e}")
        return False


if __name__ == "__main__":
    if validate_config(get_settings()):
        print("✅ Configuration is valid")
    else:
        print("❌ Configuration validation failed")
        exit(1)
