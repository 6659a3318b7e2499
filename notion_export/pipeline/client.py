"""
Pipeline - Notion API Client

Thin async REST client for the two read endpoints the exporter needs.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from notion_export.config import get_settings


logger = logging.getLogger(__name__)


class NotionAPIError(Exception):
    """Error response from the Notion API, carrying its machine-readable code."""

    def __init__(
        self,
        code: str,
        message: str,
        status: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status
        self.headers = headers if headers is not None else {}

    def __repr__(self) -> str:
        return f"NotionAPIError(code={self.code!r}, status={self.status!r}, message={self.message!r})"


class NotionClient:
    """Fetches pages and block children from the Notion REST API."""

    def __init__(
        self,
        api_key: str,
        settings=None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.notion.base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=self.settings.notion.timeout_seconds,
        )
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Notion-Version": self.settings.notion.version,
        }

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        """
        Retrieve page metadata.

        Args:
            page_id: Notion page ID (32-hex or hyphenated UUID)

        Returns:
            Raw page object
        """
        return await self._get(f"/pages/{page_id}")

    async def list_block_children(
        self,
        block_id: str,
        page_size: int = 100,
        start_cursor: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        List one page of a block's direct children.

        Args:
            block_id: Parent block or page ID
            page_size: Results per call (API maximum is 100)
            start_cursor: Cursor returned as `next_cursor` by the previous call

        Returns:
            Raw list object with `results`, `has_more` and `next_cursor`
        """
        params: Dict[str, Any] = {"page_size": page_size}
        if start_cursor:
            params["start_cursor"] = start_cursor
        return await self._get(f"/blocks/{block_id}/children", params=params)

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {path} {params or ''}")
        response = await self._client.get(url, params=params, headers=self._headers)

        if response.is_error:
            raise self._to_api_error(response)

        return response.json()

    @staticmethod
    def _to_api_error(response: httpx.Response) -> NotionAPIError:
        """Build a NotionAPIError from an error response body."""
        try:
            body = response.json()
        except ValueError:
            body = {}

        if not isinstance(body, dict):
            body = {}

        code = body.get("code") or "response_error"
        message = body.get("message") or f"Request failed with status {response.status_code}"
        return NotionAPIError(
            code=code,
            message=message,
            status=response.status_code,
            headers=response.headers,
        )
