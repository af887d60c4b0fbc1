"""Default payloads for newly created blocks."""

from __future__ import annotations

from typing import Any

from .ids import DEFAULT_ID_GENERATOR, IdGenerator
from .models import (
    Block,
    BlockType,
    CollapsibleContent,
    Column,
    ColumnsContent,
    ExpandableListContent,
)
from .settings import settings

# Kinds offered by inner editors (sections, entries). An entry list cannot be
# nested inside another inner editor.
INNER_BLOCK_TYPES = frozenset(t for t in BlockType if t != BlockType.EXPANDABLE_CONTENT_LIST)

# Kinds offered inside a column
COLUMN_BLOCK_TYPES = frozenset({
    BlockType.PARAGRAPH,
    BlockType.HEADING_1,
    BlockType.HEADING_2,
    BlockType.BULLETED_LIST,
    BlockType.NUMBERED_LIST,
    BlockType.TOGGLE,
    BlockType.CALLOUT,
    BlockType.QUOTE,
    BlockType.DIVIDER,
    BlockType.CODE,
    BlockType.IMAGE,
    BlockType.VIDEO,
    BlockType.AUDIO,
    BlockType.FILE,
    BlockType.BOOKMARK,
    BlockType.TABLE,
    BlockType.BUTTON,
    BlockType.PDF,
})


def default_content(block_type: BlockType, ids: IdGenerator = DEFAULT_ID_GENERATOR) -> Any:
    """Return the empty payload for a block kind."""
    match BlockType(block_type):
        case BlockType.TABLE:
            return {"headers": ["Column 1", "Column 2"], "rows": [["", ""]]}
        case BlockType.TOGGLE:
            return {"title": "", "body": ""}
        case BlockType.CALLOUT:
            return {"text": ""}
        case BlockType.CODE:
            return {"code": "", "language": "javascript"}
        case BlockType.IMAGE:
            return {"url": "", "alt": "", "caption": ""}
        case BlockType.VIDEO:
            return {"url": "", "caption": ""}
        case BlockType.AUDIO:
            return {"url": "", "title": "", "caption": ""}
        case BlockType.FILE:
            return {"url": "", "name": "", "size": "", "type": ""}
        case BlockType.PDF:
            return {"url": "", "title": "", "height": 600}
        case BlockType.EMBED:
            return {"url": "", "height": 400, "caption": ""}
        case BlockType.BOOKMARK:
            return {"url": "", "title": "", "description": "", "image": ""}
        case BlockType.EQUATION:
            return {"latex": "", "displayMode": True}
        case BlockType.BUTTON:
            return {"label": "Click me", "action": "link", "url": "", "style": "primary"}
        case BlockType.TABLE_OF_CONTENTS:
            return {"title": "Table of Contents", "maxDepth": 3, "showNumbers": False}
        case BlockType.BREADCRUMBS:
            return {}
        case BlockType.SYNCED_BLOCK:
            return {"sourcePageId": "", "sourceBlockId": ""}
        case BlockType.COLUMNS:
            return ColumnsContent(columns=(
                Column(id=ids.new_id("col"), width=50),
                Column(id=ids.new_id("col"), width=50),
            ))
        case BlockType.COLLAPSIBLE_HEADING:
            return CollapsibleContent()
        case BlockType.EXPANDABLE_CONTENT_LIST:
            return ExpandableListContent()
        case (
            BlockType.PARAGRAPH
            | BlockType.HEADING_1
            | BlockType.HEADING_2
            | BlockType.HEADING_3
            | BlockType.BULLETED_LIST
            | BlockType.NUMBERED_LIST
            | BlockType.QUOTE
            | BlockType.DIVIDER
        ):
            return ""


def default_properties(block_type: BlockType) -> dict[str, Any]:
    match BlockType(block_type):
        case BlockType.CALLOUT:
            return {"variant": "info"}
        case BlockType.CODE:
            return {"language": "javascript"}
        case _:
            return {}


def new_block(
    block_type: BlockType | str,
    ids: IdGenerator = DEFAULT_ID_GENERATOR,
    *,
    content: Any = None,
    properties: dict[str, Any] | None = None,
) -> Block:
    """Create a block with a fresh id and default payload.

    Args:
        block_type: Kind of block to create.
        ids: Generator that owns id uniqueness for the document.
        content: Payload to use instead of the kind's default.
        properties: Properties to use instead of the kind's default.

    Returns:
        The new block.
    """
    block_type = BlockType(block_type)
    return Block(
        id=ids.new_id(settings.id_prefix),
        type=block_type,
        content=default_content(block_type, ids) if content is None else content,
        properties=default_properties(block_type) if properties is None else dict(properties),
    )
