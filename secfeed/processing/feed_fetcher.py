"""
RSS Feed Fetcher
================

Single-request feed retrieval: one GET per call, payload checks, parsing.
Every failure leaves this module as FetchFailed with the underlying message
kept verbatim.
"""

import asyncio
import ssl
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

import aiohttp
import certifi

from ..config.settings import FeedSettings, get_settings
from ..database.models import Article
from ..ingestion.feed_parser import FeedParser
from ..utils.logging import get_logger_for_component, PerformanceLogger
from ..utils.exceptions import (
    SecFeedError,
    HttpError,
    InvalidContentError,
    EmptyFeedError,
    FetchFailed,
    ErrorCode,
)
from ..utils.validators import URLValidator

FEED_MARKERS = ("<rss", "<feed")


class FeedFetcher:
    """Fetch orchestrator for the configured feed."""

    def __init__(
        self,
        settings: Optional[FeedSettings] = None,
        parser: Optional[FeedParser] = None,
    ):
        """Initialize feed fetcher.

        Args:
            settings: Feed endpoint settings (default from config)
            parser: Feed parser used on successful responses
        """
        self.settings = settings or get_settings().feed
        self.feed_url = URLValidator.validate_feed_url(self.settings.url)
        self.timeout = self.settings.request_timeout
        self.parser = parser or FeedParser()
        self.logger = get_logger_for_component("feed_fetcher", feed_url=self.feed_url)

        self.ssl_context = ssl.create_default_context(cafile=certifi.where())

    def build_headers(self, force_refresh: bool = False) -> Dict[str, str]:
        """Headers sent with a feed request."""
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": self.settings.accept,
            "Accept-Language": self.settings.accept_language,
            "Cache-Control": "no-cache" if force_refresh else "max-age=300",
        }

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[aiohttp.ClientSession]:
        """Get configured aiohttp session."""
        connector = aiohttp.TCPConnector(ssl=self.ssl_context, limit_per_host=2)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        async with aiohttp.ClientSession(
            connector=connector, timeout=timeout
        ) as session:
            yield session

    async def fetch(self, force_refresh: bool = False) -> List[Article]:
        """Fetch and parse the feed.

        Args:
            force_refresh: Ask intermediaries for a fresh copy

        Returns:
            Parsed articles in feed order

        Raises:
            FetchFailed: On any failure; ``original_message`` holds the
                underlying message and ``__cause__`` the underlying error
        """
        with PerformanceLogger(self.logger, "feed fetch", force_refresh=force_refresh):
            try:
                payload = await self._download(force_refresh)
                self._check_payload(payload)

                articles = self.parser.parse(payload)
                if not articles:
                    raise EmptyFeedError(feed_url=self.feed_url)

            except SecFeedError as e:
                raise FetchFailed(e.message, feed_url=self.feed_url) from e

            except asyncio.TimeoutError as e:
                raise FetchFailed(
                    f"Network request timed out after {self.timeout:g}s",
                    feed_url=self.feed_url,
                    context={"cause": ErrorCode.FEED_FETCH_TIMEOUT.value},
                ) from e

            except aiohttp.ClientError as e:
                raise FetchFailed(
                    f"Network connection failed: {e}",
                    feed_url=self.feed_url,
                    context={"cause": ErrorCode.FEED_NETWORK_ERROR.value},
                ) from e

            except Exception as e:
                self.logger.debug("Unexpected fetch error", exc_info=True)
                raise FetchFailed(str(e), feed_url=self.feed_url) from e

        self.logger.info(f"Fetched {len(articles)} articles")
        return articles

    async def _download(self, force_refresh: bool) -> str:
        headers = self.build_headers(force_refresh)

        async with self.get_session() as session:
            async with session.get(self.feed_url, headers=headers) as response:
                if not 200 <= response.status < 300:
                    raise HttpError(
                        response.status, response.reason, feed_url=self.feed_url
                    )
                return await response.text()

    def _check_payload(self, payload: str) -> None:
        if not payload or not any(marker in payload for marker in FEED_MARKERS):
            raise InvalidContentError(feed_url=self.feed_url)
