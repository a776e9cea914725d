"""
SecFeed - Security News Feed Engine
===================================

RSS ingestion and normalization for a cybersecurity news feed.

Main Components:
- Ingestion: tolerant feed scanning, sanitizing, image resolution, categorization
- Processing: single-request fetch orchestration and the two-tier article cache
- Storage: SQLite key-value store with cache and saved-article repositories
- Configuration: environment variables with Pydantic validation
"""

__version__ = "1.0.0"
__author__ = "SecFeed Development Team"
__description__ = "Cybersecurity RSS ingestion and normalization engine"

# Core imports for easy access
from .config.settings import get_settings
from .database.models import Article
from .processing.news_service import NewsService
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import SecFeedError, FetchFailed

__all__ = [
    "get_settings",
    "Article",
    "NewsService",
    "configure_application_logging",
    "get_logger_for_component",
    "SecFeedError",
    "FetchFailed",
]
