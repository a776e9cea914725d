"""
Article identifiers.

IDs come from the item's guid, else the last path segment of its link, and
always carry the item's position in the batch so they are unique per fetch.
Only the two last-resort branches embed a timestamp.
"""

import re
import time
from typing import Optional

PERMALINK_MARKER = "isPermaLink"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")

GUID_MAX_LENGTH = 50
LINK_SEGMENT_MAX_LENGTH = 30


def _now_millis() -> int:
    return int(time.time() * 1000)


def generate_id(guid: Optional[str], link: Optional[str], index: int) -> str:
    """Derive an article ID.

    Args:
        guid: Feed-provided unique marker, if any
        link: Item URL, if any
        index: Position of the item in the current batch

    Returns:
        ``<guid>-<index>``, ``link-<segment>-<index>``, or a timestamped
        ``url-``/``article-`` fallback
    """
    if guid and guid.strip() and PERMALINK_MARKER not in guid:
        clean_guid = _UNSAFE_CHARS.sub("", guid)[:GUID_MAX_LENGTH]
        return f"{clean_guid}-{index}"

    if link and link.strip():
        segments = [part for part in link.split("/") if part]
        last_segment = segments[-1] if segments else ""
        clean_segment = _UNSAFE_CHARS.sub("", last_segment)[:LINK_SEGMENT_MAX_LENGTH]
        if clean_segment:
            return f"link-{clean_segment}-{index}"
        return f"url-{index}-{_now_millis()}"

    return f"article-{index}-{_now_millis()}"
