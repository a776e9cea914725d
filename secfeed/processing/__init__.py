"""
SecFeed Processing Module
=========================

Feed fetch orchestration and the article cache service.
"""

from .feed_fetcher import FeedFetcher
from .news_service import NewsService

__all__ = [
    'FeedFetcher',
    'NewsService',
]
