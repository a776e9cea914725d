"""
SecFeed Storage Layer
=====================

Repository implementations over the SQLite key-value store.

This module provides:
- Key-value store with scoped connections
- Persisted article cache repository
- Saved-article repository
"""

from .kv_store import KeyValueStore
from .cache_repository import CacheRepository
from .saved_articles import SavedArticleRepository

__all__ = [
    "KeyValueStore",
    "CacheRepository",
    "SavedArticleRepository",
]
