"""
Schemas - Block Models

One pydantic model per Notion block kind. Each variant carries only its own
payload, stored under a field named after the kind (as the API returns it).
Fields the models don't declare are kept, so a dumped tree is lossless.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional, Type

from notion_export.schemas.rich_text import RichText


class Content(BaseModel):
    """Base for kind-specific payloads."""
    model_config = {"extra": "allow"}


class TextContent(Content):
    rich_text: List[RichText] = []
    color: str = "default"


class HeadingContent(TextContent):
    is_toggleable: bool = False


class ToDoContent(TextContent):
    checked: bool = False


class CalloutContent(TextContent):
    icon: Optional[Dict[str, Any]] = None

    @property
    def emoji(self) -> str:
        if self.icon and self.icon.get("type", "emoji") == "emoji":
            return self.icon.get("emoji") or ""
        return ""


class CodeContent(Content):
    rich_text: List[RichText] = []
    caption: List[RichText] = []
    language: str = ""


class FileRef(Content):
    url: str = ""


class FileContent(Content):
    """Payload shared by image, video, audio, file and pdf blocks."""
    type: str = ""
    external: Optional[FileRef] = None
    file: Optional[FileRef] = None
    caption: List[RichText] = []
    name: Optional[str] = None

    @property
    def url(self) -> str:
        # An external link wins over a Notion-hosted file.
        if self.external and self.external.url:
            return self.external.url
        if self.file and self.file.url:
            return self.file.url
        return ""


class TableContent(Content):
    table_width: int = 0
    has_column_header: bool = False
    has_row_header: bool = False


class TableRowContent(Content):
    cells: List[List[RichText]] = []


class LinkContent(Content):
    url: str = ""
    caption: List[RichText] = []


class TitleContent(Content):
    title: str = ""


class SyncedFrom(Content):
    block_id: str
    type: str = "block_id"


class SyncedBlockContent(Content):
    synced_from: Optional[SyncedFrom] = None


class EquationContent(Content):
    expression: str = ""


class Block(BaseModel):
    """A Notion block with an optional list of attached children."""
    object: str = "block"
    id: str
    type: str
    has_children: bool = False
    children: Optional[List["Block"]] = None

    model_config = {"extra": "allow"}

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict; `children` only appears once it was attached."""
        data = self.model_dump(mode="json", exclude={"children"}, exclude_unset=True)
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        return data


class ParagraphBlock(Block):
    type: Literal["paragraph"] = "paragraph"
    paragraph: TextContent = Field(default_factory=TextContent)


class Heading1Block(Block):
    type: Literal["heading_1"] = "heading_1"
    heading_1: HeadingContent = Field(default_factory=HeadingContent)


class Heading2Block(Block):
    type: Literal["heading_2"] = "heading_2"
    heading_2: HeadingContent = Field(default_factory=HeadingContent)


class Heading3Block(Block):
    type: Literal["heading_3"] = "heading_3"
    heading_3: HeadingContent = Field(default_factory=HeadingContent)


class BulletedListItemBlock(Block):
    type: Literal["bulleted_list_item"] = "bulleted_list_item"
    bulleted_list_item: TextContent = Field(default_factory=TextContent)


class NumberedListItemBlock(Block):
    type: Literal["numbered_list_item"] = "numbered_list_item"
    numbered_list_item: TextContent = Field(default_factory=TextContent)


class ToDoBlock(Block):
    type: Literal["to_do"] = "to_do"
    to_do: ToDoContent = Field(default_factory=ToDoContent)


class ToggleBlock(Block):
    type: Literal["toggle"] = "toggle"
    toggle: TextContent = Field(default_factory=TextContent)


class QuoteBlock(Block):
    type: Literal["quote"] = "quote"
    quote: TextContent = Field(default_factory=TextContent)


class CalloutBlock(Block):
    type: Literal["callout"] = "callout"
    callout: CalloutContent = Field(default_factory=CalloutContent)


class CodeBlock(Block):
    type: Literal["code"] = "code"
    code: CodeContent = Field(default_factory=CodeContent)


class DividerBlock(Block):
    type: Literal["divider"] = "divider"
    divider: Content = Field(default_factory=Content)


class ImageBlock(Block):
    type: Literal["image"] = "image"
    image: FileContent = Field(default_factory=FileContent)


class VideoBlock(Block):
    type: Literal["video"] = "video"
    video: FileContent = Field(default_factory=FileContent)


class AudioBlock(Block):
    type: Literal["audio"] = "audio"
    audio: FileContent = Field(default_factory=FileContent)


class FileBlock(Block):
    type: Literal["file"] = "file"
    file: FileContent = Field(default_factory=FileContent)


class PdfBlock(Block):
    type: Literal["pdf"] = "pdf"
    pdf: FileContent = Field(default_factory=FileContent)


class TableBlock(Block):
    type: Literal["table"] = "table"
    table: TableContent = Field(default_factory=TableContent)


class TableRowBlock(Block):
    type: Literal["table_row"] = "table_row"
    table_row: TableRowContent = Field(default_factory=TableRowContent)


class BookmarkBlock(Block):
    type: Literal["bookmark"] = "bookmark"
    bookmark: LinkContent = Field(default_factory=LinkContent)


class EmbedBlock(Block):
    type: Literal["embed"] = "embed"
    embed: LinkContent = Field(default_factory=LinkContent)


class LinkPreviewBlock(Block):
    type: Literal["link_preview"] = "link_preview"
    link_preview: LinkContent = Field(default_factory=LinkContent)


class ChildPageBlock(Block):
    type: Literal["child_page"] = "child_page"
    child_page: TitleContent = Field(default_factory=TitleContent)


class ChildDatabaseBlock(Block):
    type: Literal["child_database"] = "child_database"
    child_database: TitleContent = Field(default_factory=TitleContent)


class ColumnListBlock(Block):
    type: Literal["column_list"] = "column_list"
    column_list: Content = Field(default_factory=Content)


class ColumnBlock(Block):
    type: Literal["column"] = "column"
    column: Content = Field(default_factory=Content)


class SyncedBlock(Block):
    type: Literal["synced_block"] = "synced_block"
    synced_block: SyncedBlockContent = Field(default_factory=SyncedBlockContent)


class EquationBlock(Block):
    type: Literal["equation"] = "equation"
    equation: EquationContent = Field(default_factory=EquationContent)


class BreadcrumbBlock(Block):
    type: Literal["breadcrumb"] = "breadcrumb"
    breadcrumb: Content = Field(default_factory=Content)


class TableOfContentsBlock(Block):
    type: Literal["table_of_contents"] = "table_of_contents"
    table_of_contents: Content = Field(default_factory=Content)


class TemplateBlock(Block):
    type: Literal["template"] = "template"
    template: TextContent = Field(default_factory=TextContent)


class UnsupportedBlock(Block):
    """Any kind not modelled above; kept in the tree, rendered as nothing."""


Block.model_rebuild()


BLOCK_TYPES: Dict[str, Type[Block]] = {
    model.model_fields["type"].default: model
    for model in (
        ParagraphBlock,
        Heading1Block,
        Heading2Block,
        Heading3Block,
        BulletedListItemBlock,
        NumberedListItemBlock,
        ToDoBlock,
        ToggleBlock,
        QuoteBlock,
        CalloutBlock,
        CodeBlock,
        DividerBlock,
        ImageBlock,
        VideoBlock,
        AudioBlock,
        FileBlock,
        PdfBlock,
        TableBlock,
        TableRowBlock,
        BookmarkBlock,
        EmbedBlock,
        LinkPreviewBlock,
        ChildPageBlock,
        ChildDatabaseBlock,
        ColumnListBlock,
        ColumnBlock,
        SyncedBlock,
        EquationBlock,
        BreadcrumbBlock,
        TableOfContentsBlock,
        TemplateBlock,
    )
}

LIST_ITEM_TYPES = frozenset({"bulleted_list_item", "numbered_list_item", "to_do"})


def parse_block(data: Dict[str, Any]) -> Block:
    """
    Validate a raw block record into its variant model.

    Args:
        data: Block object as returned by the children listing

    Returns:
        The matching Block subclass, or UnsupportedBlock for unknown kinds
    """
    model = BLOCK_TYPES.get(data.get("type", ""), UnsupportedBlock)
    return model.model_validate(data)
