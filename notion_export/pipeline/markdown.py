"""
Pipeline - Markdown Converter

Block tree → Markdown conversion. Pure, no I/O.
"""

from typing import List, Optional

from notion_export.schemas.block import Block, FileContent, LIST_ITEM_TYPES
from notion_export.schemas.page import Page
from notion_export.schemas.rich_text import RichText


# Kinds that render their own children.
SELF_RENDERING_TYPES = frozenset({"table", "column_list", "synced_block"})

INDENT = "  "


def extract_rich_text(rich_text: List[RichText]) -> str:
    """Concatenate spans into inline Markdown."""
    return "".join(format_span(span) for span in rich_text)


def format_span(span: RichText) -> str:
    """
    Render one span.

    Mentions get an `@` prefix, except link previews (bare text) and link
    mentions (the link's own title). The hyperlink is applied before the
    style flags, which always nest as bold, italic, strikethrough,
    underline, code, color.
    """
    text = span.plain_text or ""

    if span.type == "mention" and span.mention:
        mention_type = span.mention.type
        if mention_type == "link_mention":
            link = span.mention.link_mention
            text = (link.title if link else None) or text
        elif mention_type != "link_preview":
            text = f"@{text}"

    if span.href:
        text = f"[{text}]({span.href})"

    annotations = span.annotations
    if annotations.bold:
        text = f"**{text}**"
    if annotations.italic:
        text = f"*{text}*"
    if annotations.strikethrough:
        text = f"~~{text}~~"
    if annotations.underline:
        text = f"<u>{text}</u>"
    if annotations.code:
        text = f"`{text}`"
    if annotations.color and annotations.color != "default":
        color = annotations.color.replace("_background", "")
        text = f'<span style="color: {color}">{text}</span>'

    return text


class MarkdownConverter:
    """Converts a page's block tree to Markdown."""

    def convert_page(self, page: Page) -> str:
        """
        Render a page and its attached block tree.

        Args:
            page: Page with `children` attached by the tree builder

        Returns:
            Markdown text, starting with the page title as an H1
        """
        parts: List[str] = []

        title = page.title
        if title:
            parts.append(f"# {title}\n")

        if page.children:
            body = self.convert_blocks(page.children)
            if body.strip():
                parts.append(body)

        return "\n".join(parts)

    def convert_blocks(self, blocks: List[Block], depth: int = 0, separator: str = "\n\n") -> str:
        """Render siblings, dropping the ones that render to nothing."""
        rendered = [
            self.convert_block(block, depth, index)
            for index, block in enumerate(blocks)
        ]
        return separator.join(markdown for markdown in rendered if markdown.strip())

    def convert_block(self, block: Block, depth: int = 0, index: int = 0) -> str:
        """
        Render one block, including its attached children.

        Args:
            block: Block to render
            depth: Nesting level (two spaces of indent per level)
            index: Position among siblings; numbered items count from it

        Returns:
            Markdown text, possibly empty
        """
        render = getattr(self, f"_render_{block.type}", None)
        markdown = render(block, depth, index) if render else ""

        if block.type in SELF_RENDERING_TYPES:
            return markdown

        separator = "\n" if block.type in LIST_ITEM_TYPES else "\n\n"
        children = ""
        if block.children:
            children = self.convert_blocks(block.children, depth + 1, separator)

        if block.type == "toggle":
            if children.strip():
                return f"{markdown}\n{children}\n</details>"
            return f"{markdown}</details>"

        if not children.strip():
            return markdown

        return f"{markdown}{separator}{children}" if markdown else children

    # Text blocks

    def _render_paragraph(self, block: Block, depth: int, index: int) -> str:
        return f"{INDENT * depth}{extract_rich_text(block.paragraph.rich_text)}"

    def _render_heading_1(self, block: Block, depth: int, index: int) -> str:
        return f"# {extract_rich_text(block.heading_1.rich_text)}"

    def _render_heading_2(self, block: Block, depth: int, index: int) -> str:
        return f"## {extract_rich_text(block.heading_2.rich_text)}"

    def _render_heading_3(self, block: Block, depth: int, index: int) -> str:
        return f"### {extract_rich_text(block.heading_3.rich_text)}"

    def _render_bulleted_list_item(self, block: Block, depth: int, index: int) -> str:
        return f"{INDENT * depth}- {extract_rich_text(block.bulleted_list_item.rich_text)}"

    def _render_numbered_list_item(self, block: Block, depth: int, index: int) -> str:
        return f"{INDENT * depth}{index + 1}. {extract_rich_text(block.numbered_list_item.rich_text)}"

    def _render_to_do(self, block: Block, depth: int, index: int) -> str:
        checked = "x" if block.to_do.checked else " "
        return f"{INDENT * depth}- [{checked}] {extract_rich_text(block.to_do.rich_text)}"

    def _render_quote(self, block: Block, depth: int, index: int) -> str:
        return f"> {extract_rich_text(block.quote.rich_text)}"

    def _render_callout(self, block: Block, depth: int, index: int) -> str:
        text = extract_rich_text(block.callout.rich_text)
        emoji = block.callout.emoji
        return f"> {emoji} {text}" if emoji else f"> {text}"

    def _render_code(self, block: Block, depth: int, index: int) -> str:
        text = extract_rich_text(block.code.rich_text)
        return f"```{block.code.language}\n{text}\n```"

    def _render_toggle(self, block: Block, depth: int, index: int) -> str:
        # convert_block appends the children and the closing tag
        return f"<details>\n<summary>{extract_rich_text(block.toggle.rich_text)}</summary>\n"

    def _render_divider(self, block: Block, depth: int, index: int) -> str:
        return "---"

    def _render_equation(self, block: Block, depth: int, index: int) -> str:
        expression = block.equation.expression
        return f"$${expression}$$" if expression else ""

    def _render_template(self, block: Block, depth: int, index: int) -> str:
        return f"<!-- Template: {extract_rich_text(block.template.rich_text)} -->"

    def _render_breadcrumb(self, block: Block, depth: int, index: int) -> str:
        return "<!-- Breadcrumb -->"

    def _render_table_of_contents(self, block: Block, depth: int, index: int) -> str:
        return "<!-- Table of Contents -->"

    # Media and links

    def _render_image(self, block: Block, depth: int, index: int) -> str:
        caption = extract_rich_text(block.image.caption)
        return f"![{caption}]({block.image.url})"

    def _render_video(self, block: Block, depth: int, index: int) -> str:
        return self._file_link(block.video, "Video")

    def _render_audio(self, block: Block, depth: int, index: int) -> str:
        return self._file_link(block.audio, "Audio")

    def _render_file(self, block: Block, depth: int, index: int) -> str:
        return self._file_link(block.file, "File")

    def _render_pdf(self, block: Block, depth: int, index: int) -> str:
        return self._file_link(block.pdf, "PDF")

    def _file_link(self, content: FileContent, fallback: str) -> str:
        caption = extract_rich_text(content.caption) or fallback
        return f"[{caption}]({content.url})"

    def _render_bookmark(self, block: Block, depth: int, index: int) -> str:
        if not block.bookmark.url:
            return ""
        caption = extract_rich_text(block.bookmark.caption) or "Bookmark"
        return f"[🔖 {caption}]({block.bookmark.url})"

    def _render_embed(self, block: Block, depth: int, index: int) -> str:
        return f"[🔗 Embed]({block.embed.url})" if block.embed.url else ""

    def _render_link_preview(self, block: Block, depth: int, index: int) -> str:
        url = block.link_preview.url
        return f"[{url}]({url})"

    def _render_child_page(self, block: Block, depth: int, index: int) -> str:
        return f'<page id="{block.id}" title="{block.child_page.title}" />'

    def _render_child_database(self, block: Block, depth: int, index: int) -> str:
        return f'<database id="{block.id}" title="{block.child_database.title}" />'

    # Structural blocks

    def _render_table(self, block: Block, depth: int, index: int) -> str:
        if not block.children:
            return ""

        rows = [child for child in block.children if child.type == "table_row"]
        lines: List[str] = []
        for row_index, row in enumerate(rows):
            cells = [
                extract_rich_text(cell).replace("|", "\\|")
                for cell in row.table_row.cells
            ]
            lines.append(f"| {' | '.join(cells)} |")

            # Header separator only after the first row
            if row_index == 0 and block.table.has_column_header:
                lines.append(f"| {' | '.join('---' for _ in cells)} |")

        return "\n".join(lines)

    def _render_column_list(self, block: Block, depth: int, index: int) -> str:
        if not block.children:
            return ""

        columns = [child for child in block.children if child.type == "column"]
        rendered: List[str] = []
        for number, column in enumerate(columns, start=1):
            content = self.convert_blocks(column.children or [])
            if content.strip():
                rendered.append(f"<!-- Column {number} -->\n\n{content}")

        return "\n\n".join(rendered)

    def _render_synced_block(self, block: Block, depth: int, index: int) -> str:
        synced_from = block.synced_block.synced_from
        if synced_from is not None:
            return f"<!-- Synced Block (Reference to: {synced_from.block_id}) -->"

        parts = ["<!-- Synced Block (Original) -->"]
        if block.children:
            content = self.convert_blocks(block.children, depth)
            if content.strip():
                parts.append(content)
        return "\n\n".join(parts)


def convert_page_to_markdown(page: Page, converter: Optional[MarkdownConverter] = None) -> str:
    """Render a page with the default converter."""
    return (converter or MarkdownConverter()).convert_page(page)
