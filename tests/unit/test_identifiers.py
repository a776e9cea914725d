"""
Unit Tests for Article Identifiers
==================================
"""

import re
from unittest.mock import patch

from secfeed.ingestion.identifiers import generate_id


class TestGenerateId:
    """Test generate_id() branches."""

    def test_guid_with_index(self):
        assert generate_id("12345", "https://x.com/post-42", 0) == "12345-0"

    def test_guid_unsafe_characters_removed(self):
        guid = "tag:blogger.com,1999:blog-77.post-901"
        assert generate_id(guid, None, 3) == "tagbloggercom1999blog-77post-901-3"

    def test_guid_truncated_to_fifty(self):
        assert generate_id("g" * 80, None, 1) == "g" * 50 + "-1"

    def test_permalink_guid_falls_through_to_link(self):
        guid = 'https://x.com/post-42 isPermaLink="true"'
        assert generate_id(guid, "https://x.com/post-42", 2) == "link-post-42-2"

    def test_blank_guid_uses_link(self):
        assert generate_id("   ", "https://x.com/a/b/story_1/", 4) == "link-story_1-4"

    def test_link_segment_cleaned_and_truncated(self):
        link = "https://x.com/" + "long-segment.html" * 3
        assert generate_id(None, link, 0) == "link-long-segmenthtmllong-segmentht-0"

    def test_link_without_usable_segment(self):
        with patch("secfeed.ingestion.identifiers._now_millis", return_value=1700000000000):
            assert generate_id(None, "https://%%%/???", 5) == "url-5-1700000000000"

    def test_no_guid_no_link(self):
        with patch("secfeed.ingestion.identifiers._now_millis", return_value=42):
            assert generate_id(None, None, 7) == "article-7-42"

    def test_deterministic_for_guid_and_link(self):
        assert generate_id("abc", None, 1) == generate_id("abc", None, 1)
        assert generate_id(None, "https://x.com/p", 1) == generate_id(None, "https://x.com/p", 1)

    def test_fallback_contains_timestamp(self):
        assert re.fullmatch(r"article-0-\d+", generate_id("", "", 0))
