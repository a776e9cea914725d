"""
Cache Repository
================

Persisted (long-lived) tier of the article cache. One JSON-encoded
CacheRecord is kept under a single key; reads evict it once it is older than
the configured lifetime.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..database.models import Article, CacheRecord
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import StoreError
from .kv_store import KeyValueStore

CACHE_DATA_KEY = "cacheData"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CacheRepository:
    """Repository for the persisted article cache."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: float = 3600,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize cache repository.

        Args:
            store: Key-value store holding the record
            ttl_seconds: Lifetime of a persisted record
            clock: Source of the current UTC time
        """
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.clock = clock or _utc_now
        self.logger = get_logger_for_component("cache_repository")

    def cache_articles(self, articles: List[Article]) -> CacheRecord:
        """Replace the persisted record with ``articles`` stamped now.

        Raises:
            StoreError: If the record cannot be written
        """
        record = CacheRecord(articles=list(articles), timestamp=self.clock())
        self.store.set(CACHE_DATA_KEY, record.model_dump_json())
        self.logger.debug(f"Persisted {len(record.articles)} articles")
        return record

    def load_record(self) -> Optional[CacheRecord]:
        """Return the stored record regardless of age, or None if absent or unreadable."""
        try:
            raw = self.store.get(CACHE_DATA_KEY)
        except StoreError as e:
            self.logger.error(f"Error getting cached articles: {e}")
            return None

        if not raw:
            return None

        try:
            return CacheRecord.model_validate_json(raw)
        except PydanticValidationError as e:
            self.logger.warning(f"Discarding unreadable cache record: {e}")
            return None

    def get_cached_articles(self) -> List[Article]:
        """Return persisted articles, or [] if absent, unreadable or expired.

        An expired record is removed as part of the read.
        """
        record = self.load_record()
        if record is None:
            return []

        age = record.age_seconds(self.clock())
        if age > self.ttl_seconds:
            self.logger.info(f"Persisted cache expired ({age:.0f}s old), evicting")
            try:
                self.clear_cache()
            except StoreError as e:
                self.logger.error(f"Failed to evict expired cache: {e}")
            return []

        return list(record.articles)

    def clear_cache(self) -> None:
        """Remove the persisted record unconditionally.

        Raises:
            StoreError: If the delete fails
        """
        self.store.remove(CACHE_DATA_KEY)
        self.logger.info("Persisted article cache cleared")
