"""
Image Resolver
==============

Finds a lead image for an item in its raw (still marked-up) body.

Candidates are gathered by four strategies, tried in order:
- ``<img src>`` attributes
- ``<a href>`` targets that point at an image file
- bare image URLs in the text
- blogger ``sNNN-c/<file>`` thumbnail path segments

The first candidate that survives the icon filter, blogger size upgrade,
https upgrade and URL validation is returned.
"""

import re
from typing import Callable, Iterator, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..utils.logging import get_logger_for_component
from ..utils.validators import URLValidator


_EXT = r"(?:jpg|jpeg|png|gif|webp)"


class ImageResolver:
    """Lead-image extraction from item content."""

    IMAGE_LINK_PATTERN = re.compile(rf"\.{_EXT}", re.IGNORECASE)
    BARE_URL_PATTERN = re.compile(
        rf"https?://[^\s<>\"]+\.{_EXT}(?:\?[^\s<>\"]*)?", re.IGNORECASE
    )
    BLOGGER_THUMBNAIL_PATTERN = re.compile(
        rf"s\d+-c/([^\"'\s]+\.{_EXT})", re.IGNORECASE
    )

    # Size markers of avatar/favicon-sized images
    ICON_MARKERS = ("s72-c", "s32-c", "favicon")

    BLOGGER_HOSTS = ("blogspot.com", "blogger.com", "blogger.googleusercontent.com")
    BLOGGER_CROP_SIZE = re.compile(r"s\d+-c")
    BLOGGER_PARAM_SIZE = re.compile(r"=s\d+")

    def __init__(self):
        self.logger = get_logger_for_component("image_resolver")
        self.parser = "html.parser"
        self.strategies: List[Callable[[str], Iterator[str]]] = [
            self._img_sources,
            self._image_links,
            self._bare_urls,
            self._blogger_thumbnails,
        ]

    def resolve(self, content: Optional[str]) -> Optional[str]:
        """Return the first usable image URL in content, or None.

        Args:
            content: Unsanitized item body (markup must be intact)
        """
        if not content:
            return None

        for strategy in self.strategies:
            for candidate in strategy(content):
                image_url = self._normalize(candidate)
                if image_url:
                    return image_url

        return None

    def _normalize(self, candidate: str) -> Optional[str]:
        url = candidate.strip()
        if not url:
            return None

        if any(marker in url for marker in self.ICON_MARKERS):
            return None

        if self._is_blogger_host(url):
            url = self.BLOGGER_CROP_SIZE.sub("s800-c", url)
            url = self.BLOGGER_PARAM_SIZE.sub("=s800", url)

        if url.lower().startswith("http://"):
            url = "https://" + url[len("http://"):]

        if not URLValidator.is_valid_image_url(url):
            return None

        return url

    def _is_blogger_host(self, url: str) -> bool:
        try:
            host = urlparse(url).netloc.lower()
        except ValueError:
            return False
        return any(host == h or host.endswith("." + h) for h in self.BLOGGER_HOSTS)

    def _soup(self, content: str) -> Optional[BeautifulSoup]:
        try:
            return BeautifulSoup(content, self.parser)
        except Exception as e:
            self.logger.warning(f"Failed to parse content markup: {e}")
            return None

    def _img_sources(self, content: str) -> Iterator[str]:
        soup = self._soup(content)
        if soup is None:
            return
        for img_tag in soup.find_all("img", src=True):
            yield img_tag.get("src", "")

    def _image_links(self, content: str) -> Iterator[str]:
        soup = self._soup(content)
        if soup is None:
            return
        for a_tag in soup.find_all("a", href=True):
            href = a_tag.get("href", "")
            if self.IMAGE_LINK_PATTERN.search(href):
                yield href

    def _bare_urls(self, content: str) -> Iterator[str]:
        for match in self.BARE_URL_PATTERN.finditer(content):
            yield match.group(0)

    def _blogger_thumbnails(self, content: str) -> Iterator[str]:
        for match in self.BLOGGER_THUMBNAIL_PATTERN.finditer(content):
            yield match.group(1)


def resolve_image(content: Optional[str]) -> Optional[str]:
    """Quick function to find a lead image in raw content."""
    return ImageResolver().resolve(content)
