"""
SecFeed Data Models
===================

Pydantic models for normalized articles and cache records. Articles are
frozen once built; the cache record is what the persisted tier stores.
"""

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field


class Article(BaseModel):
    """Normalized feed article."""
    id: str = Field(..., min_length=1, description="Batch-unique article ID")
    title: str = Field(..., min_length=1, description="Plain-text title")
    description: str = Field(default="", description="Plain-text summary, truncated")
    content: str = Field(default="", description="Plain-text full body")
    link: str = Field(..., min_length=1, description="Source URL")
    pub_date: str = Field(..., description="ISO-8601 publication timestamp (UTC)")
    image_url: str = Field(..., min_length=1, description="Lead image URL")
    category: str = Field(..., min_length=1, description="Topical label")

    model_config = {"frozen": True}

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over title, description and content."""
        needle = query.lower()
        return (
            needle in self.title.lower()
            or needle in self.description.lower()
            or needle in self.content.lower()
        )

    def __str__(self) -> str:
        return f"Article({self.id}: {self.title[:50]})"


class CacheRecord(BaseModel):
    """Snapshot of one successful fetch."""
    articles: List[Article] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def age_seconds(self, now: datetime) -> float:
        """Seconds elapsed between the snapshot and ``now``."""
        timestamp = self.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return (now - timestamp).total_seconds()
