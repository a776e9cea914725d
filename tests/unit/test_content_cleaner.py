"""
Unit Tests for Content Cleaner
==============================

Tests for markup stripping, entity decoding and description truncation.
"""

import time

import pytest

from secfeed.ingestion.content_cleaner import ContentCleaner, sanitize, truncate


class TestSanitize:
    """Test sanitize()."""

    def test_strips_tags(self):
        assert sanitize("<p>Hello <b>world</b></p>") == "Hello world"

    def test_decodes_supported_entities(self):
        raw = "Tom&nbsp;&amp;&nbsp;Jerry &quot;quoted&quot; &#39;single&#39;"
        assert sanitize(raw) == "Tom & Jerry \"quoted\" 'single'"

    def test_collapses_whitespace_and_trims(self):
        assert sanitize("  line one\n\n\t line   two  ") == "line one line two"

    @pytest.mark.parametrize("raw", [None, "", "   ", "<br/>"])
    def test_empty_input_yields_empty_string(self, raw):
        assert sanitize(raw) == ""

    def test_escaped_markup_is_removed(self):
        """Entity-encoded tags are decoded and then stripped."""
        assert sanitize("&lt;b&gt;Hack&lt;/b&gt; alert") == "Hack alert"

    def test_double_encoded_entities_fully_decoded(self):
        assert sanitize("R&amp;amp;D") == "R&D"

    def test_escaped_entity_chain_decodes_to_final_character(self):
        assert sanitize("a &amp;amp;quot;b&amp;amp;#39; c") == "a \"b' c"

    def test_deeply_escaped_ampersand_is_fast(self):
        started = time.perf_counter()
        result = sanitize("&" + "amp;" * 20000)
        elapsed = time.perf_counter() - started

        assert result == "&"
        assert elapsed < 1.0

    @pytest.mark.parametrize("raw", [
        "<div>Plain <i>text</i></div>",
        "&lt;script&gt;alert(1)&lt;/script&gt; done",
        "a &amp;lt;b&amp;gt; c",
        "  spaced &nbsp; out  ",
        "5 &lt; 6",
        "unmatched < bracket",
        "",
    ])
    def test_is_idempotent(self, raw):
        once = sanitize(raw)
        assert sanitize(once) == once

    def test_unknown_entities_left_alone(self):
        assert sanitize("&copy; 2024") == "&copy; 2024"

    def test_class_and_function_agree(self):
        raw = "<p>x &amp; y</p>"
        assert ContentCleaner.sanitize(raw) == sanitize(raw)


class TestTruncate:
    """Test truncate()."""

    def test_cuts_to_limit_and_appends_marker(self):
        text = "a" * 250
        result = truncate(text)
        assert result == "a" * 200 + "..."

    def test_marker_appended_to_short_text(self):
        assert truncate("short") == "short..."

    def test_custom_limit_and_marker(self):
        assert truncate("abcdef", limit=3, marker="…") == "abc…"
