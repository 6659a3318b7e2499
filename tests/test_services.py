"""
Unit Tests for Services
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from notion_export.schemas.errors import (
    ApiError,
    ApiKeyMissing,
    FetchFailed,
    MaxDepthExceeded,
    NetworkError,
    Ok,
    PageNotFound,
    RateLimited,
    Unauthorized,
    UnknownError,
)
from notion_export.services.fetch_service import (
    FetchService,
    fetch_notion_page,
    map_build_error,
)

from tests.factories import api_error, listing, make_block, make_page, rate_limit_error


def mock_client(page=None, listings=None, page_error=None):
    """Client whose listings are keyed by block id."""
    client = MagicMock()
    client.retrieve_page = AsyncMock(
        side_effect=page_error if page_error else None,
        return_value=page,
    )

    async def list_block_children(block_id, page_size=100, start_cursor=None):
        value = (listings or {}).get(block_id, listing([]))
        if isinstance(value, Exception):
            raise value
        return value

    client.list_block_children = AsyncMock(side_effect=list_block_children)
    return client


class TestFetchServiceValidation:
    """Input validation happens before any request."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("api_key", ["", "   "])
    async def test_blank_api_key(self, settings, api_key):
        """Test a blank key fails with api_key_missing."""
        client = mock_client(page=make_page())

        result = await FetchService(settings, client=client).fetch_page("page-1", api_key=api_key)

        assert isinstance(result.error, ApiKeyMissing)
        client.retrieve_page.assert_not_awaited()
        client.list_block_children.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_api_key_in_settings(self, settings):
        """Test falling back to an unset NOTION_API_KEY."""
        result = await FetchService(settings, client=mock_client()).fetch_page("page-1")

        assert isinstance(result.error, ApiKeyMissing)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_depth", [0, -1])
    async def test_depth_below_one(self, settings, max_depth):
        """Test max_depth < 1 fails with max_depth_exceeded."""
        client = mock_client(page=make_page())

        result = await FetchService(settings, client=client).fetch_page(
            "page-1", api_key="secret", max_depth=max_depth
        )

        assert isinstance(result.error, MaxDepthExceeded)
        assert result.error.depth == max_depth
        client.retrieve_page.assert_not_awaited()
        client.list_block_children.assert_not_awaited()


class TestFetchService:
    """Tests for FetchService.fetch_page."""

    @pytest.mark.asyncio
    async def test_page_with_children(self, settings):
        """Test a successful export combines page and tree."""
        client = mock_client(
            page=make_page("page-1", "Hello"),
            listings={
                "page-1": listing([make_block("b1", has_children=True), make_block("b2")]),
                "b1": listing([make_block("b1-1")]),
            },
        )

        result = await fetch_notion_page("page-1", api_key="secret", client=client, settings=settings)

        assert isinstance(result, Ok)
        page = result.value
        assert page.title == "Hello"
        assert [block.id for block in page.children] == ["b1", "b2"]
        assert page.children[0].children[0].id == "b1-1"

        data = page.to_dict()
        assert data["id"] == "page-1"
        assert data["properties"]["title"]["type"] == "title"
        assert data["children"][0]["children"][0]["id"] == "b1-1"
        assert "children" not in data["children"][1]

    @pytest.mark.asyncio
    async def test_page_without_blocks(self, settings):
        """Test an empty page still carries an empty children list."""
        client = mock_client(page=make_page())

        result = await FetchService(settings, client=client).fetch_page("page-1", api_key="secret")

        assert result.value.children == []

    @pytest.mark.asyncio
    async def test_page_not_found_gets_page_id(self, settings):
        """Test page_not_found from retrieval reports the requested page."""
        client = mock_client(page_error=api_error("object_not_found", "Could not find page", 404))

        result = await FetchService(settings, client=client).fetch_page("page-1", api_key="secret")

        assert result.error == PageNotFound(page_id="page-1", message="Could not find page")
        client.list_block_children.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "code, expected",
        [("unauthorized", Unauthorized), ("rate_limited", RateLimited)],
    )
    async def test_page_errors_map_one_to_one(self, settings, code, expected):
        """Test retrieval failures keep their kind."""
        client = mock_client(page_error=api_error(code, "denied"))

        result = await FetchService(settings, client=client).fetch_page(
            "page-1", api_key="secret", max_retries=0
        )

        assert isinstance(result.error, expected)
        assert result.error.message == "denied"

    @pytest.mark.asyncio
    async def test_page_network_error(self, settings):
        """Test transport failures surface as network_error."""
        client = mock_client(page_error=api_error("service_unavailable", "down", 503))

        result = await FetchService(settings, client=client).fetch_page("page-1", api_key="secret")

        assert isinstance(result.error, NetworkError)
        assert result.error.cause.code == "service_unavailable"

    @pytest.mark.asyncio
    async def test_nested_not_found_reports_requested_page(self, settings):
        """Test a missing sub-block maps to page_not_found for the requested page."""
        client = mock_client(
            page=make_page("page-1"),
            listings={
                "page-1": listing([make_block("b1", has_children=True)]),
                "b1": api_error("object_not_found", "Could not find block", 404),
            },
        )

        result = await FetchService(settings, client=client).fetch_page("page-1", api_key="secret")

        assert isinstance(result.error, PageNotFound)
        assert result.error.page_id == "page-1"
        assert result.error.message == "Could not find block"

    @pytest.mark.asyncio
    async def test_nested_rate_limit_exhausted(self, settings):
        """Test exhausted retries in a listing surface as rate_limited."""
        client = mock_client(
            page=make_page("page-1"),
            listings={"page-1": rate_limit_error()},
        )

        result = await FetchService(settings, client=client).fetch_page(
            "page-1", api_key="secret", max_retries=1
        )

        assert isinstance(result.error, RateLimited)
        assert client.list_block_children.await_count == 2

    @pytest.mark.asyncio
    async def test_nested_api_error_becomes_unknown(self, settings):
        """Test api_error causes fold into unknown with the cause kept."""
        client = mock_client(
            page=make_page("page-1"),
            listings={"page-1": api_error("validation_error", "bad")},
        )

        result = await FetchService(settings, client=client).fetch_page("page-1", api_key="secret")

        assert isinstance(result.error, UnknownError)
        assert isinstance(result.error.cause, ApiError)

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_unknown(self, settings):
        """Test exceptions escaping the pipeline are folded into unknown."""
        client = mock_client(page={"object": "page"})  # no id, fails validation

        result = await FetchService(settings, client=client).fetch_page("page-1", api_key="secret")

        assert isinstance(result.error, UnknownError)
        assert result.error.message == "An unexpected error occurred"

    @pytest.mark.asyncio
    async def test_creates_and_closes_client(self, settings):
        """Test a client is built from the key when none is injected."""
        client = mock_client(page=make_page())
        client.__aenter__ = AsyncMock(return_value=client)
        client.__aexit__ = AsyncMock(return_value=None)

        with patch(
            "notion_export.services.fetch_service.NotionClient", return_value=client
        ) as client_cls:
            result = await FetchService(settings).fetch_page("page-1", api_key="secret")

        assert isinstance(result, Ok)
        client_cls.assert_called_once_with("secret", settings)
        client.__aexit__.assert_awaited_once()


class TestMapBuildError:
    """Tests for build error translation."""

    def test_max_depth_passes_through(self):
        """Test max_depth_exceeded is returned unchanged."""
        error = MaxDepthExceeded(depth=3, message="too deep")

        assert map_build_error(error, "page-1") is error

    def test_fetch_failed_with_network_cause(self):
        """Test a fetch failure surfaces its network cause."""
        cause = NetworkError(message="Failed to fetch blocks")
        error = FetchFailed(block_id="b9", message="Failed to fetch blocks", cause=cause)

        assert map_build_error(error, "page-1") is cause

    def test_fetch_failed_with_unstructured_cause(self):
        """Test a cause outside the taxonomy becomes unknown."""
        cause = ValueError("weird")
        error = FetchFailed(block_id="b9", message="Failed to fetch blocks", cause=cause)

        mapped = map_build_error(error, "page-1")

        assert isinstance(mapped, UnknownError)
        assert mapped.cause is cause

    def test_other_build_errors_become_unknown(self):
        """Test remaining build errors fold into unknown."""
        error = ApiError(message="Unexpected block shape")

        mapped = map_build_error(error, "page-1")

        assert isinstance(mapped, UnknownError)
        assert mapped.cause is error

    def test_error_payload_is_serializable(self):
        """Test the mapped error serializes with its cause described."""
        cause = ValueError("weird")
        mapped = map_build_error(
            FetchFailed(block_id="b9", message="Failed", cause=cause), "page-1"
        )

        assert mapped.to_dict() == {
            "kind": "unknown",
            "message": "Failed",
            "cause": {"type": "ValueError", "message": "weird"},
        }
