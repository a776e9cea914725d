"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for SecFeed tests.

- Settings point at a throwaway data/log directory
- Each test gets its own SQLite key-value store
- The HTTP session is replaced by in-process fakes; no test touches the network
"""

import pytest
import tempfile
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
_TEST_DIR = Path(tempfile.gettempdir()) / "secfeed_tests"
os.environ["SECFEED_DATABASE__PATH"] = str(_TEST_DIR / "secfeed_test.db")
os.environ["SECFEED_LOGGING__FILE_PATH"] = str(_TEST_DIR / "secfeed_test.log")
os.environ["SECFEED_LOGGING__CONSOLE_LOGGING"] = "false"
os.environ["SECFEED_FEED__URL"] = "https://feeds.example.com/security"


# ============================================================================
# Sample Payloads
# ============================================================================


@pytest.fixture
def sample_rss():
    """Two-item feed in the shape real Blogger feeds use."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Security Bulletin</title>
    <link>https://news.example.com</link>
    <item>
      <title><![CDATA[New <b>ransomware</b> strain spreads]]></title>
      <link>https://news.example.com/2024/09/ransomware-strain.html</link>
      <description>Attackers demand &amp; collect payment</description>
      <content:encoded><![CDATA[<p>Attackers encrypt files.</p><img src="http://example.blogspot.com/img/s320-c/lock.png" />]]></content:encoded>
      <pubDate>Thu, 05 Sep 2024 12:00:00 GMT</pubDate>
      <guid isPermaLink="false">tag:blogger.com,1999:blog-77.post-901</guid>
    </item>
    <item>
      <title>Weekly roundup</title>
      <link>https://news.example.com/2024/09/weekly-roundup/</link>
      <description>Patches and advisories from this week</description>
      <pubDate>Wed, 04 Sep 2024 15:30:00 +0600</pubDate>
    </item>
  </channel>
</rss>"""


@pytest.fixture
def scenario_rss():
    """Single item with guid, markup in the title and no image."""
    return """<rss version="2.0"><channel>
  <item>
    <title>&lt;b&gt;Hack&lt;/b&gt; alert</title>
    <link>https://x.com/post-42</link>
    <description>A phishing campaign hit users</description>
    <guid>12345</guid>
  </item>
</channel></rss>"""


@pytest.fixture
def empty_rss():
    """Well-formed channel without items."""
    return """<?xml version="1.0"?>
<rss version="2.0"><channel><title>Quiet feed</title></channel></rss>"""


# ============================================================================
# Model Fixtures
# ============================================================================


@pytest.fixture
def make_article():
    """Factory for valid Article instances."""
    from secfeed.database.models import Article

    def _make(index=0, **overrides):
        fields = {
            "id": f"article-{index}",
            "title": f"Security update {index}",
            "description": f"Summary {index}...",
            "content": f"Body of security update {index}",
            "link": f"https://news.example.com/posts/{index}",
            "pub_date": "2024-09-05T12:00:00.000Z",
            "image_url": f"https://images.example.com/{index}.jpg",
            "category": "সাইবার নিরাপত্তা",
        }
        fields.update(overrides)
        return Article(**fields)

    return _make


@pytest.fixture
def sample_articles(make_article):
    """Three distinct articles."""
    return [make_article(i) for i in range(3)]


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db_connection(tmp_path):
    """Connection manager on a per-test database file."""
    from secfeed.database.connection import DatabaseConnection

    connection = DatabaseConnection(str(tmp_path / "secfeed_test.db"), pool_size=2)
    yield connection

    # Cleanup connections
    connection.close_all_connections()


@pytest.fixture
def kv_store(db_connection):
    """Key-value store with its table created."""
    from secfeed.storage.kv_store import KeyValueStore

    return KeyValueStore(db_connection)


# ============================================================================
# HTTP Fakes
# ============================================================================


class FakeResponse:
    """Stand-in for an aiohttp response used as ``async with``."""

    def __init__(self, body="", status=200, reason="OK", error=None):
        self.body = body
        self.status = status
        self.reason = reason
        self.error = error

    async def text(self):
        if self.error is not None:
            raise self.error
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """Stand-in for aiohttp.ClientSession recording each GET."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []

    def get(self, url, headers=None):
        self.calls.append({"url": url, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def install_session():
    """Replace a fetcher's session factory with a FakeSession.

    Usage:
        session = install_session(fetcher, body=payload)
        session = install_session(fetcher, error=asyncio.TimeoutError())
    """

    def _install(fetcher, body="", status=200, reason="OK", error=None, read_error=None):
        session = FakeSession(
            FakeResponse(body=body, status=status, reason=reason, error=read_error),
            error=error,
        )

        @asynccontextmanager
        async def get_session():
            yield session

        fetcher.get_session = get_session
        return session

    return _install
