"""
Schemas - Rich Text

Pydantic models for Notion formatted text spans.
"""

from pydantic import BaseModel, Field
from typing import Optional


class Annotations(BaseModel):
    """Style flags applied to a span."""
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"

    model_config = {"extra": "allow"}


class LinkMention(BaseModel):
    """Payload of an external-link mention."""
    href: Optional[str] = None
    title: Optional[str] = None

    model_config = {"extra": "allow"}


class Mention(BaseModel):
    """Reference to a user, date, page, database or link."""
    type: str
    link_mention: Optional[LinkMention] = None

    model_config = {"extra": "allow"}


class RichText(BaseModel):
    """A single formatted text run."""
    type: str = "text"
    plain_text: str = ""
    href: Optional[str] = None
    annotations: Annotations = Field(default_factory=Annotations)
    mention: Optional[Mention] = None

    model_config = {"extra": "allow"}
