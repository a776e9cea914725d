"""
SecFeed Input Validators
========================

URL validation utilities shared by configuration and image resolution.
"""

from urllib.parse import urlparse
from typing import Tuple

from .exceptions import ValidationError, ErrorCode


class URLValidator:
    """URL validation utilities."""

    ALLOWED_SCHEMES = {'http', 'https'}

    # Accepted image extensions, matched anywhere in the lower-cased path
    IMAGE_EXTENSIONS: Tuple[str, ...] = ('.jpg', '.jpeg', '.png', '.gif', '.webp')

    @classmethod
    def is_http_url(cls, url: str) -> bool:
        """Check that url is an absolute http(s) URL with a host."""
        if not url or not isinstance(url, str):
            return False

        try:
            parsed = urlparse(url.strip())
        except ValueError:
            return False

        return parsed.scheme.lower() in cls.ALLOWED_SCHEMES and bool(parsed.netloc)

    @classmethod
    def is_valid_image_url(cls, url: str) -> bool:
        """Check that url is an http(s) URL whose path names an image file.

        Args:
            url: Candidate image URL

        Returns:
            True if the URL parses, uses http/https, has a host and its path
            contains one of IMAGE_EXTENSIONS
        """
        if not cls.is_http_url(url):
            return False

        try:
            path = urlparse(url.strip()).path.lower()
        except ValueError:
            return False

        return any(ext in path for ext in cls.IMAGE_EXTENSIONS)

    @classmethod
    def validate_feed_url(cls, url: str) -> str:
        """Validate a feed URL.

        Raises:
            ValidationError: If URL is missing or not http(s)
        """
        if not url or not isinstance(url, str):
            raise ValidationError(
                "URL is required and must be a string",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="url"
            )

        url = url.strip()
        if not cls.is_http_url(url):
            raise ValidationError(
                f"URL scheme must be {' or '.join(sorted(cls.ALLOWED_SCHEMES))} and include a hostname",
                error_code=ErrorCode.VALIDATION_INVALID_FORMAT,
                field_name="url"
            )

        return url
