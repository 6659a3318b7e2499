"""
Notion Export

Fetches a Notion page with its full block tree and exports it as JSON or
Markdown.
"""

from notion_export.schemas import Block, Page, Ok, Err, Result
from notion_export.services import FetchService, fetch_notion_page
from notion_export.pipeline import convert_page_to_markdown, extract_page_id

__version__ = "0.1.0"

__all__ = [
    "Block",
    "Page",
    "Ok",
    "Err",
    "Result",
    "FetchService",
    "fetch_notion_page",
    "convert_page_to_markdown",
    "extract_page_id",
]
