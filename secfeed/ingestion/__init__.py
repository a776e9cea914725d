"""
SecFeed Ingestion Module
========================

Feed payload parsing and article normalization.

This module handles:
- Tolerant element scanning of raw RSS text
- HTML/entity sanitizing and description truncation
- Lead image resolution and category classification
- Article ID derivation
"""

from .feed_parser import FeedParser, parse_feed

__all__ = ["FeedParser", "parse_feed"]
