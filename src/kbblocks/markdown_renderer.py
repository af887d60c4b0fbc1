"""Render blocks to Markdown.

This module converts a block tree back to Markdown text for export.
Containers are flattened: columns are written one after another, a
collapsible section becomes a ``##`` heading followed by its blocks, and
each entry of an expandable list becomes a ``###`` heading in the order
the list is displayed.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from .collapsible import display_title
from .expandable import view_entries
from .models import (
    Block,
    BlockType,
    CollapsibleContent,
    ColumnsContent,
    ExpandableListContent,
)

_LIST_MARKER = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")


def render_markdown(blocks: Sequence[Block]) -> str:
    """Render a list of blocks to Markdown.

    Args:
        blocks: Blocks to render, containers included.

    Returns:
        Markdown text.
    """
    parts = [_render_block(block) for block in blocks]
    return "\n\n".join(p for p in parts if p)


def _render_block(block: Block) -> str:
    """Render a single block to Markdown."""
    match block.type:
        case BlockType.PARAGRAPH:
            return _text(block.content)
        case BlockType.HEADING_1:
            return f"# {_text(block.content)}"
        case BlockType.HEADING_2:
            return f"## {_text(block.content)}"
        case BlockType.HEADING_3:
            return f"### {_text(block.content)}"
        case BlockType.BULLETED_LIST:
            return _render_list(block, ordered=False)
        case BlockType.NUMBERED_LIST:
            return _render_list(block, ordered=True)
        case BlockType.QUOTE:
            return _quote(_text(block.content))
        case BlockType.CALLOUT:
            return _render_callout(block)
        case BlockType.TOGGLE:
            return _render_toggle(block)
        case BlockType.CODE:
            return _render_code(block)
        case BlockType.DIVIDER:
            return "---"
        case BlockType.TABLE:
            return _render_table(block)
        case BlockType.IMAGE:
            return _render_image(block)
        case BlockType.EQUATION:
            return _render_equation(block)
        case BlockType.VIDEO | BlockType.AUDIO | BlockType.FILE | BlockType.PDF | BlockType.EMBED | BlockType.BOOKMARK:
            return _render_link(block)
        case BlockType.BUTTON:
            return _render_button(block)
        case BlockType.COLUMNS:
            return _render_columns(block)
        case BlockType.COLLAPSIBLE_HEADING:
            return _render_section(block)
        case BlockType.EXPANDABLE_CONTENT_LIST:
            return _render_entries(block)
        case _:
            # Table of contents, breadcrumbs and synced blocks are resolved
            # by the host page and have no static Markdown form.
            return ""


# =============================================================================
# Leaf blocks
# =============================================================================


def _text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, dict):
        return str(content.get("text", ""))
    return ""


def _field(content: Any, key: str, default: str = "") -> str:
    if isinstance(content, dict):
        value = content.get(key)
        return default if value is None else str(value)
    return default


def _quote(text: str) -> str:
    return "\n".join(f"> {line}" if line else ">" for line in text.split("\n"))


def _render_list(block: Block, ordered: bool) -> str:
    items = [_LIST_MARKER.sub("", line) for line in _text(block.content).split("\n") if line.strip()]
    if ordered:
        return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))
    return "\n".join(f"- {item}" for item in items)


def _render_callout(block: Block) -> str:
    """Render a callout as a blockquote tagged with its variant."""
    variant = str(block.properties.get("variant", "info")).upper()
    text = _text(block.content)
    return _quote(f"[!{variant}]\n{text}" if text else f"[!{variant}]")


def _render_toggle(block: Block) -> str:
    title = _field(block.content, "title", _text(block.content))
    body = _field(block.content, "body")
    lines = [f"**{title or 'Toggle'}**"]
    if body:
        lines.append("")
        lines.append(body)
    return "\n".join(lines)


def _render_code(block: Block) -> str:
    """Render a code block."""
    if isinstance(block.content, dict):
        code = str(block.content.get("code", ""))
        language = str(block.content.get("language") or block.properties.get("language", ""))
    else:
        code = _text(block.content)
        language = str(block.properties.get("language", ""))
    return f"```{language}\n{code}\n```"


def _render_table(block: Block) -> str:
    headers = block.content.get("headers") if isinstance(block.content, dict) else None
    if not headers:
        return ""
    rows = block.content.get("rows") or []

    def row_line(cells: Sequence[Any]) -> str:
        padded = [str(c).replace("|", "\\|") for c in cells] + [""] * (len(headers) - len(cells))
        return "| " + " | ".join(padded[: len(headers)]) + " |"

    lines = [row_line(headers), "| " + " | ".join("---" for _ in headers) + " |"]
    lines.extend(row_line(row) for row in rows)
    return "\n".join(lines)


def _render_image(block: Block) -> str:
    url = _field(block.content, "url", _text(block.content))
    if not url:
        return ""
    line = f"![{_field(block.content, 'alt')}]({url})"
    caption = _field(block.content, "caption")
    return f"{line}\n*{caption}*" if caption else line


def _render_equation(block: Block) -> str:
    latex = _field(block.content, "latex", _text(block.content))
    return f"$$\n{latex}\n$$" if latex else ""


def _render_link(block: Block) -> str:
    url = _field(block.content, "url", _text(block.content))
    if not url:
        return ""
    label = (
        _field(block.content, "title")
        or _field(block.content, "name")
        or _field(block.content, "caption")
        or url
    )
    return f"[{label}]({url})"


def _render_button(block: Block) -> str:
    label = _field(block.content, "label", "Button")
    url = _field(block.content, "url")
    return f"[{label}]({url})" if url else f"**{label}**"


# =============================================================================
# Containers
# =============================================================================


def _render_columns(block: Block) -> str:
    content = block.content
    if not isinstance(content, ColumnsContent):
        return ""
    return render_markdown([b for col in content.columns for b in col.blocks])


def _render_section(block: Block) -> str:
    content = block.content
    if not isinstance(content, CollapsibleContent):
        return ""
    body = render_markdown(content.blocks)
    heading = f"## {display_title(content)}"
    return f"{heading}\n\n{body}" if body else heading


def _render_entries(block: Block) -> str:
    content = block.content
    if not isinstance(content, ExpandableListContent):
        return ""
    parts = []
    for entry in view_entries(content):
        body = render_markdown(entry.blocks)
        heading = f"### {entry.title or 'Untitled'}"
        parts.append(f"{heading}\n\n{body}" if body else heading)
    return "\n\n".join(parts)


# =============================================================================
# Block to Dict Rendering (for API responses)
# =============================================================================


def blocks_to_markdown_dict(blocks: Sequence[Block]) -> dict[str, Any]:
    """Convert blocks to a dict with markdown and metadata.

    Args:
        blocks: List of blocks to render.

    Returns:
        Dict with 'markdown' text and 'block_count'.
    """
    return {
        "markdown": render_markdown(blocks),
        "block_count": len(blocks),
    }
