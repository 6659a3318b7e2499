"""
Pipeline Module - Page Export Pipeline

Handles the flow from the Notion API to an exported document:
Client → Retry → Fetch → Build Tree → Convert
"""

from notion_export.pipeline.client import NotionClient, NotionAPIError
from notion_export.pipeline.retry import RetryOptions, retry_on_rate_limit
from notion_export.pipeline.fetcher import PageFetcher, BlockFetcher
from notion_export.pipeline.builder import build_block_hierarchy
from notion_export.pipeline.markdown import MarkdownConverter, convert_page_to_markdown
from notion_export.pipeline.url_parser import extract_page_id

__all__ = [
    "NotionClient",
    "NotionAPIError",
    "RetryOptions",
    "retry_on_rate_limit",
    "PageFetcher",
    "BlockFetcher",
    "build_block_hierarchy",
    "MarkdownConverter",
    "convert_page_to_markdown",
    "extract_page_id",
]
