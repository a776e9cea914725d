"""
End-to-End Tests
================

Full flow from raw HTTP payload to consumers: fetcher, parser, both cache
tiers and the saved list on a real SQLite file. Only the HTTP session is
faked.
"""

from unittest.mock import Mock

import pytest
import pytest_asyncio

from secfeed.config.settings import SecFeedSettings, DatabaseSettings
from secfeed.ingestion.categorizer import DEFAULT_RULES
from secfeed.processing.news_service import NewsService

RANSOMWARE = DEFAULT_RULES[3].label


@pytest.fixture
def settings(tmp_path):
    return SecFeedSettings(database=DatabaseSettings(path=str(tmp_path / "e2e.db")))


@pytest.fixture
def clock():
    return Mock(return_value=0.0)


@pytest_asyncio.fixture
async def service(settings, clock):
    news_service = NewsService.from_settings(settings)
    news_service.clock = clock
    yield news_service
    await news_service.close()


class TestEndToEnd:
    """Fetch, cache, degrade, persist and save."""

    @pytest.mark.asyncio
    async def test_fetch_and_browse(self, service, install_session, sample_rss):
        session = install_session(service.fetcher, body=sample_rss)

        articles = await service.fetch_articles()

        assert [a.id for a in articles] == ["tagbloggercom1999blog-77post-901-0", "link-weekly-roundup-1"]
        assert len(session.calls) == 1
        assert service.get_articles_by_category(RANSOMWARE)[0].title == "New ransomware strain spreads"
        assert [a.id for a in service.search_articles("advisories")] == ["link-weekly-roundup-1"]
        assert service.get_cached() == articles

    @pytest.mark.asyncio
    async def test_memory_tier_avoids_network(self, service, install_session, sample_rss, clock):
        session = install_session(service.fetcher, body=sample_rss)

        await service.fetch_articles()
        clock.return_value = 200.0
        await service.fetch_articles()

        assert len(session.calls) == 1

    @pytest.mark.asyncio
    async def test_outage_after_success_degrades(self, service, install_session, sample_rss, clock):
        install_session(service.fetcher, body=sample_rss)
        first = await service.fetch_articles()

        session = install_session(service.fetcher, status=502, reason="Bad Gateway")
        clock.return_value = 600.0
        second = await service.fetch_articles()

        assert second == first
        assert len(session.calls) == 1

    @pytest.mark.asyncio
    async def test_empty_feed_on_cold_start_raises(self, service, install_session, empty_rss):
        from secfeed.utils.exceptions import FetchFailed

        install_session(service.fetcher, body=empty_rss)

        with pytest.raises(FetchFailed) as exc_info:
            await service.fetch_articles()

        assert exc_info.value.original_message == "No items found in RSS feed"
        assert service.get_cached() == []

    @pytest.mark.asyncio
    async def test_persisted_tier_survives_new_service(self, settings, install_session, sample_rss):
        async with NewsService.from_settings(settings) as first:
            install_session(first.fetcher, body=sample_rss)
            articles = await first.fetch_articles()

        async with NewsService.from_settings(settings) as second:
            assert second.get_cached() == articles
            second.clear_cache()
            assert second.get_cached() == []

    @pytest.mark.asyncio
    async def test_save_fetched_article(self, service, install_session, scenario_rss):
        install_session(service.fetcher, body=scenario_rss)

        article = await service.find_article("12345-0")
        service.saved_articles.save_article(article)
        service.clear_cache()

        assert service.saved_articles.get_saved_articles() == [article]
