"""
Shared pytest fixtures.
"""

import pytest

from notion_export.config import Settings


@pytest.fixture
def settings(monkeypatch) -> Settings:
    """Settings isolated from the developer's environment."""
    for name in (
        "NOTION_API_KEY",
        "EXPORT_MAX_DEPTH",
        "EXPORT_MAX_RETRIES",
        "EXPORT_FORMAT",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("EXPORT_DEFAULT_RETRY_DELAY", "0.01")
    return Settings()
