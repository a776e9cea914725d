"""
Saved Article Repository
========================

User's saved-article list, newest first, kept as a JSON array under its own
key in the key-value store.
"""

from typing import List

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from ..database.models import Article
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import StoreError
from .kv_store import KeyValueStore

SAVED_ARTICLES_KEY = "savedArticles"

_article_list = TypeAdapter(List[Article])


class SavedArticleRepository:
    """Repository for saved (bookmarked) articles."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.logger = get_logger_for_component("saved_articles")

    def get_saved_articles(self) -> List[Article]:
        """Return saved articles, newest first. Unreadable data yields []."""
        try:
            raw = self.store.get(SAVED_ARTICLES_KEY)
        except StoreError as e:
            self.logger.error(f"Error getting saved articles: {e}")
            return []

        if not raw:
            return []

        try:
            return _article_list.validate_json(raw)
        except PydanticValidationError as e:
            self.logger.error(f"Error decoding saved articles: {e}")
            return []

    def _write(self, articles: List[Article]) -> None:
        self.store.set(SAVED_ARTICLES_KEY, _article_list.dump_json(articles).decode())

    def save_article(self, article: Article) -> None:
        """Put article at the front of the list, replacing any copy with its id.

        Raises:
            StoreError: If the list cannot be written
        """
        saved = self.get_saved_articles()
        updated = [article] + [a for a in saved if a.id != article.id]
        self._write(updated)
        self.logger.debug(f"Saved article {article.id}")

    def remove_article(self, article_id: str) -> None:
        """Drop the article with article_id from the list.

        Raises:
            StoreError: If the list cannot be written
        """
        saved = self.get_saved_articles()
        self._write([a for a in saved if a.id != article_id])
        self.logger.debug(f"Removed saved article {article_id}")

    def is_article_saved(self, article_id: str) -> bool:
        return any(a.id == article_id for a in self.get_saved_articles())

    def clear_saved_articles(self) -> None:
        """Remove the whole saved list.

        Raises:
            StoreError: If the delete fails
        """
        self.store.remove(SAVED_ARTICLES_KEY)
        self.logger.info("Saved articles cleared")
