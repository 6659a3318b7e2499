"""
Pipeline - Node Fetchers

Page metadata and paginated block-children fetching, with rate-limit retry
and translation of API failures into NotionApiError records.
"""

import logging
from typing import Any, Dict, List, Optional

from notion_export.pipeline.client import NotionAPIError, NotionClient
from notion_export.pipeline.retry import RetryOptions, retry_on_rate_limit
from notion_export.schemas.errors import (
    ApiError,
    Err,
    NetworkError,
    NotionApiError,
    Ok,
    PageNotFound,
    RateLimited,
    Result,
    Unauthorized,
)


logger = logging.getLogger(__name__)

PAGE_SIZE = 100


def _map_known_code(error: NotionAPIError) -> Optional[NotionApiError]:
    """Errors whose code maps to the same kind for pages and blocks."""
    if error.code == "object_not_found":
        return PageNotFound(message=error.message)
    if error.code == "unauthorized":
        return Unauthorized(message=error.message)
    if error.code == "rate_limited":
        return RateLimited(message=error.message)
    return None


class PageFetcher:
    """Retrieves a single page's metadata."""

    def __init__(self, client: NotionClient, retry_options: Optional[RetryOptions] = None):
        self.client = client
        self.retry_options = retry_options

    async def fetch_page(self, page_id: str) -> Result[Dict[str, Any], NotionApiError]:
        """
        Fetch page metadata.

        Args:
            page_id: Notion page ID

        Returns:
            Ok(raw page object) or Err(NotionApiError)
        """
        try:
            page = await retry_on_rate_limit(
                lambda: self.client.retrieve_page(page_id),
                self.retry_options,
            )
        except Exception as e:
            logger.debug(f"Page fetch failed for {page_id}: {e!r}")
            return Err(self._handle_error(e))

        return Ok(page)

    @staticmethod
    def _handle_error(error: Exception) -> NotionApiError:
        if isinstance(error, NotionAPIError):
            mapped = _map_known_code(error)
            if mapped is not None:
                return mapped

        return NetworkError(message="Failed to fetch page", cause=error)


class BlockFetcher:
    """Retrieves every direct child of a block, following pagination."""

    def __init__(self, client: NotionClient, retry_options: Optional[RetryOptions] = None):
        self.client = client
        self.retry_options = retry_options

    async def fetch_blocks(self, block_id: str) -> Result[List[Dict[str, Any]], NotionApiError]:
        """
        Fetch all direct children of a block.

        Issues `blocks.children.list` calls of PAGE_SIZE until the API stops
        returning a `next_cursor`. Each call is retried on rate limits on its
        own budget. Any failing call aborts the whole listing.

        Args:
            block_id: Parent block or page ID

        Returns:
            Ok(raw block objects in listing order) or Err(NotionApiError)
        """
        blocks: List[Dict[str, Any]] = []
        cursor: Optional[str] = None

        try:
            while True:
                response = await retry_on_rate_limit(
                    lambda cursor=cursor: self.client.list_block_children(
                        block_id, page_size=PAGE_SIZE, start_cursor=cursor
                    ),
                    self.retry_options,
                )
                blocks.extend(response.get("results", []))
                cursor = response.get("next_cursor")
                if not cursor:
                    break
        except Exception as e:
            logger.debug(f"Block listing failed for {block_id}: {e!r}")
            return Err(self._handle_error(e))

        logger.debug(f"Fetched {len(blocks)} children of {block_id}")
        return Ok(blocks)

    @staticmethod
    def _handle_error(error: Exception) -> NotionApiError:
        if isinstance(error, NotionAPIError):
            mapped = _map_known_code(error)
            if mapped is not None:
                return mapped
            return ApiError(message=error.message, cause=error)

        return NetworkError(message="Failed to fetch blocks", cause=error)
