"""
Tag Scanner
===========

Tolerant, pattern-based extraction of elements from feed XML.

Real-world feeds are often not well-formed, so nothing here builds a tree.
An element is the text between ``<tag ...>`` and the next ``</tag>``:
- opening tags may carry attributes, self-closing tags are ignored
- tag names match case-insensitively and may contain a namespace prefix
- nesting is not tracked; the first closing tag ends the element
- CDATA sections inside the element are unwrapped
"""

import re
from functools import lru_cache
from typing import List, Pattern


CDATA_PATTERN = re.compile(r"<!\[CDATA\[([\s\S]*?)\]\]>")


@lru_cache(maxsize=64)
def _element_pattern(tag: str) -> Pattern[str]:
    name = re.escape(tag)
    return re.compile(
        rf"<{name}(?:\s[^>]*?)?(?<!/)>([\s\S]*?)</{name}\s*>",
        re.IGNORECASE,
    )


class TagScanner:
    """Element extraction over raw feed text."""

    @staticmethod
    def blocks(payload: str, tag: str) -> List[str]:
        """Return the raw inner text of every ``tag`` element, in order.

        Args:
            payload: Raw feed text
            tag: Element name, e.g. ``item`` or ``content:encoded``
        """
        if not payload:
            return []
        return [m.group(1) for m in _element_pattern(tag).finditer(payload)]

    @staticmethod
    def unwrap_cdata(text: str) -> str:
        """Replace every CDATA section with its contents."""
        return CDATA_PATTERN.sub(lambda m: m.group(1), text)

    @classmethod
    def field(cls, block: str, tag: str) -> str:
        """Return the trimmed text of the first ``tag`` element in block.

        CDATA is unwrapped; an absent element yields "".
        """
        if not block:
            return ""

        match = _element_pattern(tag).search(block)
        if not match:
            return ""

        return cls.unwrap_cdata(match.group(1)).strip()
