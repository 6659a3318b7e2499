"""
Services Module - Business Logic Layer

Provides the page export service.
"""

from notion_export.services.fetch_service import FetchService, fetch_notion_page

__all__ = [
    "FetchService",
    "fetch_notion_page",
]
