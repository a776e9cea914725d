"""
News Service
============

Two-tier article cache in front of the feed fetcher.

- in-memory list: served without a network call while younger than the
  memory TTL (5 minutes by default) unless a refresh is forced
- persisted record: written after every successful fetch, readable on its
  own through ``get_cached()`` while younger than its TTL (1 hour)

A failed refresh falls back to the in-memory list when there is one. Refreshes
that overlap share one network call.
"""

import asyncio
import time
from typing import Callable, List, Optional

from ..config.settings import SecFeedSettings, get_settings
from ..database.connection import DatabaseConnection
from ..database.models import Article
from ..ingestion.feed_parser import FeedParser
from ..storage.cache_repository import CacheRepository
from ..storage.kv_store import KeyValueStore
from ..storage.saved_articles import SavedArticleRepository
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import FetchFailed, StoreError
from .feed_fetcher import FeedFetcher


class NewsService:
    """Article access for consumers; owns the in-memory cache tier."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        cache_repository: Optional[CacheRepository] = None,
        saved_articles: Optional[SavedArticleRepository] = None,
        memory_ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
        store: Optional[KeyValueStore] = None,
    ):
        """Initialize news service.

        Args:
            fetcher: Fetch orchestrator
            cache_repository: Persisted cache tier (optional)
            saved_articles: Saved-article list (optional)
            memory_ttl_seconds: Lifetime of the in-memory list
            clock: Monotonic time source in seconds
            store: Key-value store released by ``close()``
        """
        self.fetcher = fetcher
        self.cache_repository = cache_repository
        self.saved_articles = saved_articles
        self.memory_ttl_seconds = memory_ttl_seconds
        self.clock = clock
        self.store = store
        self.logger = get_logger_for_component("news_service")

        self._articles: List[Article] = []
        self._last_fetch_time: Optional[float] = None
        self._inflight: Optional[asyncio.Future] = None

    @classmethod
    def from_settings(cls, settings: Optional[SecFeedSettings] = None) -> "NewsService":
        """Build a service with its fetcher and SQLite-backed repositories."""
        settings = settings or get_settings()

        store = KeyValueStore(
            DatabaseConnection(settings.database.path, settings.database.pool_size)
        )
        fetcher = FeedFetcher(settings.feed, FeedParser(settings.parsing))

        return cls(
            fetcher=fetcher,
            cache_repository=CacheRepository(store, settings.cache.persisted_ttl_seconds),
            saved_articles=SavedArticleRepository(store),
            memory_ttl_seconds=settings.cache.memory_ttl_seconds,
            store=store,
        )

    async def __aenter__(self) -> "NewsService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Wait for an in-flight refresh and release the store."""
        if self._inflight is not None and not self._inflight.done():
            await asyncio.wait([self._inflight])
        if self.store is not None:
            self.store.close()

    @property
    def articles(self) -> List[Article]:
        """Snapshot of the in-memory list."""
        return list(self._articles)

    def is_fresh(self) -> bool:
        """True when the in-memory list can be served without a fetch."""
        if not self._articles or self._last_fetch_time is None:
            return False
        return (self.clock() - self._last_fetch_time) < self.memory_ttl_seconds

    async def fetch_articles(self, force_refresh: bool = False) -> List[Article]:
        """Return articles, fetching when the in-memory list is stale.

        Args:
            force_refresh: Skip the in-memory list and go to the network

        Returns:
            Fresh articles, or the previous list if the fetch failed

        Raises:
            FetchFailed: If the fetch failed and nothing is cached in memory
        """
        if not force_refresh and self.is_fresh():
            return self.articles

        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._refresh(force_refresh))
            self._inflight.add_done_callback(self._clear_inflight)
        else:
            self.logger.debug("Joining in-flight refresh")

        return list(await asyncio.shield(self._inflight))

    def _clear_inflight(self, future: asyncio.Future) -> None:
        if self._inflight is future:
            self._inflight = None

    async def _refresh(self, force_refresh: bool) -> List[Article]:
        started_at = self.clock()
        try:
            articles = await self.fetcher.fetch(force_refresh)
        except FetchFailed as e:
            if self._articles:
                self.logger.warning(
                    f"Refresh failed, serving {len(self._articles)} cached articles: "
                    f"{e.original_message}"
                )
                return self._articles
            raise

        self._articles = articles
        self._last_fetch_time = started_at
        self._persist(articles)
        return articles

    def _persist(self, articles: List[Article]) -> None:
        if self.cache_repository is None:
            return
        try:
            self.cache_repository.cache_articles(articles)
        except StoreError as e:
            self.logger.warning(f"Error caching articles: {e}")

    def get_article_by_id(self, article_id: str) -> Optional[Article]:
        """Look up an article in the in-memory list; never fetches."""
        for article in self._articles:
            if article.id == article_id:
                return article
        return None

    async def find_article(self, article_id: str) -> Optional[Article]:
        """Look up an article, fetching once if it is not in memory."""
        article = self.get_article_by_id(article_id)
        if article is not None:
            return article

        await self.fetch_articles()
        return self.get_article_by_id(article_id)

    def get_articles_by_category(self, category: str) -> List[Article]:
        return [a for a in self._articles if a.category == category]

    def search_articles(self, query: str) -> List[Article]:
        """Case-insensitive search over title, description and content."""
        return [a for a in self._articles if a.matches(query)]

    def get_cached(self) -> List[Article]:
        """Read the persisted tier; [] when absent or expired."""
        if self.cache_repository is None:
            return []
        return self.cache_repository.get_cached_articles()

    def clear_cache(self) -> None:
        """Remove the persisted tier; the in-memory list is untouched.

        Raises:
            StoreError: If the persisted record cannot be removed
        """
        if self.cache_repository is not None:
            self.cache_repository.clear_cache()
