"""
Content Cleaner
===============

Markup stripping and entity decoding for feed text.

Only the six entities feeds commonly emit are decoded. A multiply-escaped
entity (``&amp;amp;lt;``) decodes to its final character in one step.
Decoding can still expose new markup (``&lt;b&gt;``), so cleaning is
repeated until the text stops changing; the result is therefore stable under
a second pass.
"""

import re
from typing import Optional


class ContentCleaner:
    """Plain-text extraction for titles, descriptions and bodies."""

    TAG_PATTERN = re.compile(r"<[^>]*>")
    WHITESPACE_PATTERN = re.compile(r"\s+")

    # Any run of &amp; prefixes collapses into the entity it finally spells.
    ENTITY_PATTERN = re.compile(r"&(?:amp;)*(nbsp|amp|lt|gt|quot|#39);")
    ENTITIES = {
        "nbsp": " ",
        "amp": "&",
        "lt": "<",
        "gt": ">",
        "quot": '"',
        "#39": "'",
    }

    @classmethod
    def _decode_entity(cls, match: re.Match) -> str:
        return cls.ENTITIES[match.group(1)]

    @classmethod
    def _clean_once(cls, text: str) -> str:
        text = cls.TAG_PATTERN.sub("", text)
        text = cls.ENTITY_PATTERN.sub(cls._decode_entity, text)
        text = cls.WHITESPACE_PATTERN.sub(" ", text)
        return text.strip()

    @classmethod
    def sanitize(cls, raw: Optional[str]) -> str:
        """Strip tags, decode entities, collapse whitespace, trim.

        Args:
            raw: Text possibly containing markup; None is treated as empty

        Returns:
            Plain text, "" for empty input
        """
        if not raw:
            return ""

        text = raw
        while True:
            cleaned = cls._clean_once(text)
            if cleaned == text:
                return cleaned
            text = cleaned

    @staticmethod
    def truncate(text: str, limit: int = 200, marker: str = "...") -> str:
        """Keep the first ``limit`` characters and append ``marker``."""
        return text[:limit] + marker


def sanitize(raw: Optional[str]) -> str:
    """Quick function to turn feed markup into plain text."""
    return ContentCleaner.sanitize(raw)


def truncate(text: str, limit: int = 200, marker: str = "...") -> str:
    """Quick function to cut text for descriptions."""
    return ContentCleaner.truncate(text, limit, marker)
