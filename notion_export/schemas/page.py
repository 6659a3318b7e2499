"""
Schemas - Page Models

Pydantic model for a Notion page and its block tree.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any

from notion_export.schemas.block import Block


class Page(BaseModel):
    """Root document record with its top-level blocks attached."""
    object: str = "page"
    id: str
    url: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)
    children: Optional[List[Block]] = None

    model_config = {"extra": "allow"}

    @property
    def title(self) -> Optional[str]:
        """Plain text of the title-typed property, if the page has one."""
        for prop in self.properties.values():
            if isinstance(prop, dict) and prop.get("type") == "title" and prop.get("title"):
                return "".join(item.get("plain_text", "") for item in prop["title"])
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json", exclude={"children"}, exclude_unset=True)
        if self.children is not None:
            data["children"] = [block.to_dict() for block in self.children]
        return data


def parse_page(data: Dict[str, Any]) -> Page:
    """Validate a raw page record returned by pages.retrieve."""
    return Page.model_validate(data)
