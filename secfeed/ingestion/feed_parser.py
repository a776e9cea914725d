"""
Feed Parser
===========

Turns a raw RSS payload into normalized Article records.

Each ``<item>`` block is handled on its own: a broken item is logged and
skipped, the rest of the batch still comes through. Output keeps the order
of the blocks in the payload.
"""

from datetime import datetime, timezone, timedelta
from typing import List, Optional

from dateutil import parser as date_parser

from ..config.settings import ParsingSettings, get_settings
from ..database.models import Article
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import ContentValidationError, FeedFormatError
from .categorizer import CategoryClassifier
from .content_cleaner import ContentCleaner
from .identifiers import generate_id
from .image_resolver import ImageResolver
from .tag_scanner import TagScanner

# Timezone abbreviations seen in RFC 822 feed dates
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "Z": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
    "IST": timezone(timedelta(hours=5, minutes=30)),
    "BDT": timezone(timedelta(hours=6)),
}


def to_iso(moment: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_date(date_string: Optional[str]) -> str:
    """Parse a feed date into ISO-8601; unparsable or missing dates become now.

    Dates without a zone are taken as UTC.
    """
    if date_string and date_string.strip():
        try:
            return to_iso(date_parser.parse(date_string, tzinfos=TZINFOS))
        except (ValueError, OverflowError):
            pass

    return to_iso(datetime.now(timezone.utc))


class FeedParser:
    """RSS item extraction and normalization."""

    ITEM_TAG = "item"
    RICH_BODY_TAG = "content:encoded"

    def __init__(
        self,
        settings: Optional[ParsingSettings] = None,
        image_resolver: Optional[ImageResolver] = None,
        classifier: Optional[CategoryClassifier] = None,
    ):
        """Initialize feed parser.

        Args:
            settings: Normalization settings (default from config)
            image_resolver: Lead-image resolver
            classifier: Category classifier
        """
        self.settings = settings or get_settings().parsing
        self.image_resolver = image_resolver or ImageResolver()
        self.classifier = classifier or CategoryClassifier()
        self.logger = get_logger_for_component("feed_parser")

    def parse(self, payload: str) -> List[Article]:
        """Parse a raw feed payload.

        Args:
            payload: Raw RSS text

        Returns:
            Articles in item order; empty when items exist but none is usable

        Raises:
            FeedFormatError: If the payload contains no item blocks
        """
        items = TagScanner.blocks(payload, self.ITEM_TAG)
        if not items:
            self.logger.warning("No items found in RSS feed")
            raise FeedFormatError()

        articles = []
        for index, item in enumerate(items):
            try:
                articles.append(self._build_article(item, index))
            except ContentValidationError as e:
                self.logger.warning(
                    f"Skipping RSS item {index}: {e.message}",
                    extra={"item_index": index},
                )
            except Exception as e:
                self.logger.warning(
                    f"Error parsing RSS item {index}: {e}",
                    extra={"item_index": index},
                )

        self.logger.debug(f"Parsed {len(articles)}/{len(items)} RSS items")
        return articles

    def _build_article(self, item: str, index: int) -> Article:
        title = TagScanner.field(item, "title")
        description = TagScanner.field(item, "description")
        link = TagScanner.field(item, "link")
        pub_date = TagScanner.field(item, "pubDate")
        guid = TagScanner.field(item, "guid")

        body = TagScanner.field(item, self.RICH_BODY_TAG) or description

        image_url = self.image_resolver.resolve(body) or self._fallback_image(index)
        category = (
            self.classifier.classify(title, body) or self.settings.default_category
        )

        clean_title = ContentCleaner.sanitize(title)
        clean_description = ContentCleaner.truncate(
            ContentCleaner.sanitize(description),
            self.settings.description_max_length,
            self.settings.ellipsis,
        )
        clean_body = ContentCleaner.sanitize(body)

        if not clean_title:
            raise ContentValidationError("Article title is empty", field_name="title", item_index=index)
        if not link:
            raise ContentValidationError("Article link is empty", field_name="link", item_index=index)

        return Article(
            id=generate_id(guid, link, index),
            title=clean_title,
            description=clean_description,
            content=clean_body,
            link=link,
            pub_date=format_date(pub_date),
            image_url=image_url,
            category=category,
        )

    def _fallback_image(self, index: int) -> str:
        pool = self.settings.fallback_images
        return pool[index % len(pool)]


def parse_feed(payload: str) -> List[Article]:
    """Quick function to parse a payload with configured settings."""
    return FeedParser().parse(payload)
