"""
Pipeline - URL Parser

Extracts a Notion page ID from a bare ID or a notion.so URL.
"""

import re
from typing import Optional
from urllib.parse import urlparse


NOTION_HOSTS = {"notion.so", "www.notion.so"}

UUID_PATTERN = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
HEX_PATTERN = r"[0-9a-fA-F]{32}"

_PAGE_ID = re.compile(rf"^(?:{UUID_PATTERN}|{HEX_PATTERN})$")
_TRAILING_UUID = re.compile(rf"({UUID_PATTERN})$")
_TRAILING_HEX = re.compile(rf"({HEX_PATTERN})$")


def is_page_id(value: str) -> bool:
    return bool(_PAGE_ID.match(value))


def is_notion_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and parsed.hostname in NOTION_HOSTS


def extract_page_id(value: Optional[str]) -> Optional[str]:
    """
    Resolve free-form input to a page ID.

    Accepts:
        - a 32-character hex ID or a hyphenated UUID, returned as-is
        - https://www.notion.so/<id>
        - https://www.notion.so/<workspace>/Page-Title-<id>

    Returns:
        The page ID, or None if the input is not recognized
    """
    if not value or not isinstance(value, str):
        return None

    if is_page_id(value):
        return value

    if not is_notion_url(value):
        return None

    segments = [segment for segment in urlparse(value).path.split("/") if segment]
    if not segments:
        return None

    last = segments[-1]
    if is_page_id(last):
        return last

    for pattern in (_TRAILING_UUID, _TRAILING_HEX):
        match = pattern.search(last)
        if match:
            return match.group(1)

    return None
