"""
Unit Tests for Tag Scanner
==========================
"""

from secfeed.ingestion.tag_scanner import TagScanner


class TestBlocks:
    """Test TagScanner.blocks()."""

    def test_returns_items_in_order(self):
        payload = "<item><title>a</title></item><item><title>b</title></item>"
        assert TagScanner.blocks(payload, "item") == ["<title>a</title>", "<title>b</title>"]

    def test_attributes_allowed(self):
        payload = '<item rdf:about="x"><title>a</title></item>'
        assert TagScanner.blocks(payload, "item") == ["<title>a</title>"]

    def test_case_insensitive(self):
        assert TagScanner.blocks("<ITEM>x</Item>", "item") == ["x"]

    def test_self_closing_ignored(self):
        assert TagScanner.blocks("<item/><item />", "item") == []

    def test_similar_prefix_not_matched(self):
        assert TagScanner.blocks("<items>x</items>", "item") == []

    def test_unclosed_nesting_ends_at_first_close(self):
        payload = "<item>one<item>two</item>three</item>"
        assert TagScanner.blocks(payload, "item") == ["one<item>two"]

    def test_empty_payload(self):
        assert TagScanner.blocks("", "item") == []
        assert TagScanner.blocks(None, "item") == []


class TestField:
    """Test TagScanner.field()."""

    def test_trims_text(self):
        assert TagScanner.field("<title>\n  Hello  </title>", "title") == "Hello"

    def test_unwraps_cdata(self):
        block = "<title><![CDATA[<b>Bold</b> news]]></title>"
        assert TagScanner.field(block, "title") == "<b>Bold</b> news"

    def test_first_element_wins(self):
        block = "<link>https://a.example.com</link><link>https://b.example.com</link>"
        assert TagScanner.field(block, "link") == "https://a.example.com"

    def test_namespaced_tag(self):
        block = "<content:encoded><![CDATA[<p>Body</p>]]></content:encoded>"
        assert TagScanner.field(block, "content:encoded") == "<p>Body</p>"

    def test_absent_element(self):
        assert TagScanner.field("<title>x</title>", "guid") == ""

    def test_self_closing_link_ignored(self):
        block = '<atom:link href="https://a.example.com" rel="self"/><link>https://b.example.com</link>'
        assert TagScanner.field(block, "link") == "https://b.example.com"

    def test_unwrap_cdata_multiple_sections(self):
        assert TagScanner.unwrap_cdata("<![CDATA[a]]> and <![CDATA[b]]>") == "a and b"
