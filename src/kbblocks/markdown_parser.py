"""Parse Markdown into blocks.

This module converts Markdown text into a tuple of Block objects using
the mistletoe library for parsing. Inline formatting is kept as Markdown
inside the text payloads, which is how paragraphs, quotes and list items
store their content.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from mistletoe import Document
from mistletoe.block_token import (
    BlockCode,
    CodeFence,
    Heading,
    List,
    ListItem,
    Paragraph,
    Quote,
    SetextHeading,
    Table,
    ThematicBreak,
)
from mistletoe.span_token import (
    AutoLink,
    Emphasis,
    EscapeSequence,
    Image,
    InlineCode,
    LineBreak,
    Link,
    RawText,
    Strikethrough,
    Strong,
)

from .defaults import new_block
from .ids import DEFAULT_ID_GENERATOR, IdGenerator
from .models import Block, BlockType

logger = logging.getLogger(__name__)

_CALLOUT_MARKER = re.compile(r"^\[!(\w+)\]\s*(.*)$", re.DOTALL)
_EQUATION = re.compile(r"^\$\$\s*(.*?)\s*\$\$$", re.DOTALL)


def parse_markdown(markdown: str, ids: IdGenerator = DEFAULT_ID_GENERATOR) -> tuple[Block, ...]:
    """Parse Markdown text into blocks.

    Args:
        markdown: The Markdown text to parse.
        ids: Generator for the new block ids.

    Returns:
        Top-level blocks in document order.
    """
    doc = Document(markdown)
    blocks = []
    for token in doc.children:
        block = _convert_token(token, ids)
        if block is not None:
            blocks.append(block)
    logger.debug("parsed %d blocks from markdown", len(blocks))
    return tuple(blocks)


def _convert_token(token: Any, ids: IdGenerator) -> Block | None:
    """Convert a mistletoe block token to a Block."""
    if isinstance(token, (Heading, SetextHeading)):
        return _convert_heading(token, ids)
    elif isinstance(token, Paragraph):
        return _convert_paragraph(token, ids)
    elif isinstance(token, (BlockCode, CodeFence)):
        return _convert_code(token, ids)
    elif isinstance(token, List):
        return _convert_list(token, ids)
    elif isinstance(token, Quote):
        return _convert_quote(token, ids)
    elif isinstance(token, Table):
        return _convert_table(token, ids)
    elif isinstance(token, ThematicBreak):
        return new_block(BlockType.DIVIDER, ids)
    else:
        # Unknown token type - keep whatever text it carries
        text = _extract_text(token).strip()
        if text:
            return new_block(BlockType.PARAGRAPH, ids, content=text)
    return None


def _convert_heading(token: Heading | SetextHeading, ids: IdGenerator) -> Block:
    """Convert a heading token; levels below 3 collapse into heading_3."""
    if token.level == 1:
        block_type = BlockType.HEADING_1
    elif token.level == 2:
        block_type = BlockType.HEADING_2
    else:
        block_type = BlockType.HEADING_3
    return new_block(block_type, ids, content=_inline(token.children).strip())


def _convert_paragraph(token: Paragraph, ids: IdGenerator) -> Block:
    """Convert a paragraph; a lone image or a $$ formula gets its own kind."""
    children = list(token.children)
    if len(children) == 1 and isinstance(children[0], Image):
        image = children[0]
        return new_block(
            BlockType.IMAGE,
            ids,
            content={"url": image.src, "alt": _extract_text(image), "caption": ""},
        )

    text = _inline(children).strip()
    equation = _EQUATION.match(text)
    if equation:
        return new_block(
            BlockType.EQUATION, ids, content={"latex": equation.group(1), "displayMode": True}
        )
    return new_block(BlockType.PARAGRAPH, ids, content=text)


def _convert_code(token: BlockCode | CodeFence, ids: IdGenerator) -> Block:
    """Convert a code block token."""
    language = ""
    if isinstance(token, CodeFence) and token.language:
        language = token.language

    code = _extract_text(token).rstrip("\n") if token.children else ""
    return new_block(
        BlockType.CODE,
        ids,
        content={"code": code, "language": language},
        properties={"language": language} if language else {},
    )


def _convert_list(token: List, ids: IdGenerator) -> Block:
    """Convert a list token into one list block with one line per item."""
    is_ordered = token.start is not None
    lines = []
    for item in token.children:
        if isinstance(item, ListItem):
            lines.extend(_list_item_lines(item))
    block_type = BlockType.NUMBERED_LIST if is_ordered else BlockType.BULLETED_LIST
    return new_block(block_type, ids, content="\n".join(lines))


def _list_item_lines(item: ListItem) -> list[str]:
    """Text of a list item; nested list items follow as their own lines."""
    lines = []
    for child in item.children:
        if isinstance(child, List):
            for nested in child.children:
                if isinstance(nested, ListItem):
                    lines.extend(_list_item_lines(nested))
        elif hasattr(child, "children"):
            text = _inline(child.children).strip()
            if text:
                lines.append(text)
    return lines or [""]


def _convert_quote(token: Quote, ids: IdGenerator) -> Block:
    """Convert a block quote; ``> [!VARIANT]`` quotes become callouts."""
    paragraphs = [
        _inline(child.children).strip()
        for child in token.children
        if hasattr(child, "children")
    ]
    text = "\n\n".join(p for p in paragraphs if p)

    callout = _CALLOUT_MARKER.match(text)
    if callout:
        return new_block(
            BlockType.CALLOUT,
            ids,
            content={"text": callout.group(2).strip()},
            properties={"variant": callout.group(1).lower()},
        )
    return new_block(BlockType.QUOTE, ids, content=text)


def _convert_table(token: Table, ids: IdGenerator) -> Block:
    """Convert a GFM table into headers plus rows of cell text."""
    header = getattr(token, "header", None)
    headers = [_inline(cell.children).strip() for cell in header.children] if header else []
    rows = [
        [_inline(cell.children).strip() for cell in row.children]
        for row in token.children
    ]
    if not headers and rows:
        headers, rows = rows[0], rows[1:]
    return new_block(BlockType.TABLE, ids, content={"headers": headers, "rows": rows})


# =============================================================================
# Inline content
# =============================================================================


def _inline(tokens: Any) -> str:
    """Render inline tokens back to Markdown source."""
    return "".join(_inline_token(token) for token in tokens)


def _inline_token(token: Any) -> str:
    """Render a single inline token."""
    if isinstance(token, RawText):
        return token.content
    elif isinstance(token, Strong):
        return f"**{_inline(token.children)}**"
    elif isinstance(token, Emphasis):
        return f"*{_inline(token.children)}*"
    elif isinstance(token, Strikethrough):
        return f"~~{_inline(token.children)}~~"
    elif isinstance(token, InlineCode):
        return f"`{token.children[0].content if token.children else ''}`"
    elif isinstance(token, Image):
        return f"![{_extract_text(token)}]({token.src})"
    elif isinstance(token, AutoLink):
        return f"<{token.target}>"
    elif isinstance(token, Link):
        return f"[{_inline(token.children)}]({token.target})"
    elif isinstance(token, LineBreak):
        return "\n"
    elif isinstance(token, EscapeSequence):
        return "\\" + (token.children[0].content if token.children else "")
    elif hasattr(token, "children") and token.children is not None:
        return _inline(token.children)
    return getattr(token, "content", "")


def _extract_text(token: Any) -> str:
    """Extract plain text from a token."""
    if isinstance(token, RawText):
        return token.content
    elif hasattr(token, "children") and token.children is not None:
        return "".join(_extract_text(child) for child in token.children)
    return ""
