"""
Schemas Module - Data Models

Pydantic models for pages, blocks and rich text, plus the error taxonomy.
"""

from notion_export.schemas.rich_text import Annotations, Mention, RichText
from notion_export.schemas.block import Block, BLOCK_TYPES, UnsupportedBlock, parse_block
from notion_export.schemas.page import Page, parse_page
from notion_export.schemas.errors import (
    Ok,
    Err,
    Result,
    ExportError,
    ApiKeyMissing,
    MaxDepthExceeded,
    PageNotFound,
    Unauthorized,
    RateLimited,
    NetworkError,
    ApiError,
    FetchFailed,
    UnknownError,
    NotionApiError,
    BuildError,
    FetchNotionPageError,
)

__all__ = [
    "Annotations",
    "Mention",
    "RichText",
    "Block",
    "BLOCK_TYPES",
    "UnsupportedBlock",
    "parse_block",
    "Page",
    "parse_page",
    "Ok",
    "Err",
    "Result",
    "ExportError",
    "ApiKeyMissing",
    "MaxDepthExceeded",
    "PageNotFound",
    "Unauthorized",
    "RateLimited",
    "NetworkError",
    "ApiError",
    "FetchFailed",
    "UnknownError",
    "NotionApiError",
    "BuildError",
    "FetchNotionPageError",
]
