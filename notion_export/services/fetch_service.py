"""
Services - Fetch Service

Fetches a page plus its block tree and maps lower-layer failures into the
top-level error taxonomy.
"""

import logging
from typing import Optional

from notion_export.config import get_settings
from notion_export.pipeline.builder import build_block_hierarchy
from notion_export.pipeline.client import NotionClient
from notion_export.pipeline.fetcher import BlockFetcher, PageFetcher
from notion_export.pipeline.retry import RetryOptions
from notion_export.schemas.errors import (
    ApiKeyMissing,
    Err,
    ExportError,
    FetchFailed,
    FetchNotionPageError,
    MaxDepthExceeded,
    NetworkError,
    Ok,
    PageNotFound,
    RateLimited,
    Result,
    Unauthorized,
    UnknownError,
)
from notion_export.schemas.page import Page, parse_page


logger = logging.getLogger(__name__)


def map_api_error(error: ExportError, page_id: str) -> FetchNotionPageError:
    """
    Map a fetcher error onto the top-level taxonomy.

    `page_not_found` always reports the requested page, not whichever block
    listing failed.
    """
    if isinstance(error, PageNotFound):
        return PageNotFound(page_id=page_id, message=error.message)
    if isinstance(error, (Unauthorized, RateLimited, NetworkError)):
        return error
    return UnknownError(message=error.message, cause=error)


def map_build_error(error: ExportError, page_id: str) -> FetchNotionPageError:
    """Unwrap one level of `fetch_failed` and map its cause."""
    if isinstance(error, MaxDepthExceeded):
        return error
    if isinstance(error, FetchFailed):
        if isinstance(error.cause, ExportError):
            mapped = map_api_error(error.cause, page_id)
            if isinstance(mapped, UnknownError):
                return UnknownError(message=error.message, cause=error.cause)
            return mapped
        return UnknownError(message=error.message, cause=error.cause)
    return UnknownError(message=error.message, cause=error)


class FetchService:
    """Builds a complete Page (metadata + block tree) from a page ID."""

    def __init__(self, settings=None, client: Optional[NotionClient] = None):
        self.settings = settings or get_settings()
        self.client = client

    async def fetch_page(
        self,
        page_id: str,
        api_key: Optional[str] = None,
        max_depth: Optional[int] = None,
        max_retries: Optional[int] = None,
    ) -> Result[Page, FetchNotionPageError]:
        """
        Fetch a page and every block beneath it up to `max_depth` levels.

        Inputs are validated before any request is made.

        Args:
            page_id: Notion page ID
            api_key: Integration token (default: NOTION_API_KEY)
            max_depth: Block levels to materialize, at least 1 (default: 10)
            max_retries: Rate-limit retries per request (default: 3)

        Returns:
            Ok(Page with children) or Err(FetchNotionPageError)
        """
        if api_key is None:
            api_key = self.settings.notion.api_key
        if max_depth is None:
            max_depth = self.settings.export.max_depth
        if max_retries is None:
            max_retries = self.settings.export.max_retries

        if not api_key or not api_key.strip():
            return Err(ApiKeyMissing(message="API key is required but not provided"))

        if max_depth < 1:
            return Err(MaxDepthExceeded(
                depth=max_depth,
                message="Max depth must be at least 1",
            ))

        retry_options = RetryOptions(
            max_retries=max_retries,
            default_retry_delay=self.settings.export.default_retry_delay,
        )

        try:
            if self.client is not None:
                return await self._fetch(self.client, page_id, max_depth, retry_options)

            async with NotionClient(api_key, self.settings) as client:
                return await self._fetch(client, page_id, max_depth, retry_options)
        except Exception as e:
            logger.exception(f"Unexpected error exporting page {page_id}")
            return Err(UnknownError(message="An unexpected error occurred", cause=e))

    async def _fetch(
        self,
        client: NotionClient,
        page_id: str,
        max_depth: int,
        retry_options: RetryOptions,
    ) -> Result[Page, FetchNotionPageError]:
        page_fetcher = PageFetcher(client, retry_options)
        block_fetcher = BlockFetcher(client, retry_options)

        logger.info(f"Fetching page {page_id}")
        page_result = await page_fetcher.fetch_page(page_id)
        if isinstance(page_result, Err):
            return Err(map_api_error(page_result.error, page_id))

        logger.info(f"Building block tree for {page_id} (max depth {max_depth})")
        build_result = await build_block_hierarchy(page_id, block_fetcher, max_depth)
        if isinstance(build_result, Err):
            return Err(map_build_error(build_result.error, page_id))

        page = parse_page(page_result.value)
        page.children = build_result.value
        return Ok(page)


async def fetch_notion_page(
    page_id: str,
    api_key: str,
    max_depth: int = 10,
    max_retries: int = 3,
    client: Optional[NotionClient] = None,
    settings=None,
) -> Result[Page, FetchNotionPageError]:
    """
    Fetch a Notion page with its full block tree.

    Convenience wrapper around FetchService for library callers.
    """
    service = FetchService(settings, client=client)
    return await service.fetch_page(
        page_id,
        api_key=api_key,
        max_depth=max_depth,
        max_retries=max_retries,
    )
