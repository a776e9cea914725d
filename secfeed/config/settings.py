"""
SecFeed Configuration System
============================

Configuration management with environment variables and Pydantic models.
Environment variables (prefix ``SECFEED_``, nested delimiter ``__``) override
Field defaults.
"""

from pathlib import Path
from typing import List, Optional
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode
from ..utils.validators import URLValidator


DEFAULT_FEED_URL = "https://feeds.feedburner.com/bugmohol"

DEFAULT_FALLBACK_IMAGES = [
    "https://images.pexels.com/photos/60504/security-protection-anti-virus-software-60504.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/1181244/pexels-photo-1181244.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/5380664/pexels-photo-5380664.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/5240547/pexels-photo-5240547.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/4164418/pexels-photo-4164418.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/6801648/pexels-photo-6801648.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/5483077/pexels-photo-5483077.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/8386440/pexels-photo-8386440.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/3861969/pexels-photo-3861969.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/5474028/pexels-photo-5474028.jpeg?auto=compress&cs=tinysrgb&w=800",
]

DEFAULT_CATEGORY = "সাইবার নিরাপত্তা"


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FeedSettings(BaseModel):
    """Remote feed endpoint and request configuration."""
    url: str = Field(default=DEFAULT_FEED_URL, description="RSS feed URL")
    request_timeout: float = Field(default=15.0, gt=0, le=300, description="Total request timeout in seconds")
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; BugMohol RSS Reader; +https://bugmohol.com)",
        description="User-Agent sent upstream",
    )
    accept: str = Field(
        default="application/rss+xml, application/xml, text/xml, */*",
        description="Accept header for feed requests",
    )
    accept_language: str = Field(default="bn,en;q=0.9", description="Accept-Language header")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Reject feed URLs that are not plain http(s)."""
        if not URLValidator.is_http_url(v):
            raise ValueError("feed url must be an absolute http(s) URL")
        return v.strip()


class CacheSettings(BaseModel):
    """Cache tier lifetimes."""
    memory_ttl_seconds: float = Field(default=300, ge=0, description="In-memory cache lifetime (5 minutes)")
    persisted_ttl_seconds: float = Field(default=3600, ge=0, description="Persisted cache lifetime (1 hour)")


class ParsingSettings(BaseModel):
    """Article normalization configuration."""
    description_max_length: int = Field(default=200, ge=1, description="Description characters kept before the ellipsis")
    ellipsis: str = Field(default="...", description="Marker appended to truncated descriptions")
    default_category: str = Field(default=DEFAULT_CATEGORY, min_length=1, description="Label used when no keyword matches")
    fallback_images: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FALLBACK_IMAGES),
        min_length=1,
        description="Rotating image pool for items without a content image",
    )


class DatabaseSettings(BaseModel):
    """Key-value store configuration."""
    path: str = Field(default="data/secfeed.db", description="SQLite database file path")
    pool_size: int = Field(default=2, ge=1, le=20, description="Connection pool size")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default="logs/secfeed.log", description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class SecFeedSettings(BaseSettings):
    """Main application settings."""

    feed: FeedSettings = Field(default_factory=FeedSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    parsing: ParsingSettings = Field(default_factory=ParsingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    app_name: str = Field(default="SecFeed", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "SECFEED_",
        "extra": "ignore",
    }

    def validate_configuration(self) -> None:
        """Validate complete configuration and prepare data directories."""
        errors = []

        try:
            db_path = Path(self.database.path)
            db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            errors.append(f"Invalid database path: {e}")

        if self.logging.file_path:
            try:
                log_path = Path(self.logging.file_path)
                log_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid log file path: {e}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> SecFeedSettings:
    """Load settings from environment variables and defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        settings = SecFeedSettings()
        settings.validate_configuration()
        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        ) from e


_settings: Optional[SecFeedSettings] = None


def get_settings(reload: bool = False) -> SecFeedSettings:
    """Get global settings instance (singleton pattern).

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
