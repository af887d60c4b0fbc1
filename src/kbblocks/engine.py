"""Generic structural edit operations over a single child list.

Every function here is pure: it takes a sequence of blocks and returns a
new tuple, never touching its input. Callers write the result back into
the right slot of the tree (see kbblocks.document).

All operations are total. An id that is not in the list turns the call
into a no-op that returns the input unchanged; nothing here raises for an
unresolvable reference.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from .models import (
    Block,
    BlockType,
    CollapsibleContent,
    ColumnsContent,
    ContainerContent,
    ExpandableListContent,
)

logger = logging.getLogger(__name__)


def find_index(blocks: Sequence[Block], block_id: str) -> int:
    """Position of ``block_id`` in the list, or -1 if absent."""
    for i, block in enumerate(blocks):
        if block.id == block_id:
            return i
    return -1


def insert(blocks: Sequence[Block], new_block: Block, after_index: int) -> tuple[Block, ...]:
    """Insert ``new_block`` immediately after position ``after_index``.

    ``-1`` inserts at the start; an index past the end appends. The new
    block's id must be fresh for the whole document (the caller's id
    generator guarantees that).

    Args:
        blocks: The child list.
        new_block: Block to insert.
        after_index: Position the new block follows.

    Returns:
        New list, one element longer.
    """
    position = max(0, min(after_index + 1, len(blocks)))
    return (*blocks[:position], new_block, *blocks[position:])


def append(blocks: Sequence[Block], new_block: Block) -> tuple[Block, ...]:
    return insert(blocks, new_block, len(blocks) - 1)


def move(blocks: Sequence[Block], from_id: str, to_id: str) -> tuple[Block, ...]:
    """Relocate ``from_id`` to the slot immediately before ``to_id``.

    Matches the drop contract of a drag gesture: the dragged element lands
    in front of the element it was dropped on.

    Returns:
        New list with the same ids; unchanged if the ids are equal or
        either is absent.
    """
    if from_id == to_id:
        return tuple(blocks)
    from_index = find_index(blocks, from_id)
    if from_index == -1 or find_index(blocks, to_id) == -1:
        logger.debug("move ignored: %s -> %s not both present", from_id, to_id)
        return tuple(blocks)

    moving = blocks[from_index]
    remaining = [b for b in blocks if b.id != from_id]
    target = find_index(remaining, to_id)
    remaining.insert(target, moving)
    return tuple(remaining)


def delete(blocks: Sequence[Block], block_id: str) -> tuple[Block, ...]:
    """Remove ``block_id``; its whole subtree goes with it."""
    if find_index(blocks, block_id) == -1:
        logger.debug("delete ignored: %s not present", block_id)
        return tuple(blocks)
    return tuple(b for b in blocks if b.id != block_id)


def replace_block(blocks: Sequence[Block], block_id: str, new_block: Block) -> tuple[Block, ...]:
    """Swap the element with ``block_id`` for ``new_block`` in place."""
    index = find_index(blocks, block_id)
    if index == -1:
        logger.debug("replace ignored: %s not present", block_id)
        return tuple(blocks)
    return (*blocks[:index], new_block, *blocks[index + 1:])


# Content class each container kind must keep
_CONTAINER_CONTENT: dict[BlockType, type[ContainerContent]] = {
    BlockType.COLUMNS: ColumnsContent,
    BlockType.COLLAPSIBLE_HEADING: CollapsibleContent,
    BlockType.EXPANDABLE_CONTENT_LIST: ExpandableListContent,
}


def accepts_content(block: Block, content: Any) -> bool:
    """Check whether ``content`` keeps ``block`` well-formed.

    Container kinds only take content of their own class, and Columns
    content must satisfy the width and cardinality invariants. Leaves
    never take container content.
    """
    expected = _CONTAINER_CONTENT.get(block.type)
    if expected is None:
        return not isinstance(content, ContainerContent)
    if not isinstance(content, expected):
        return False
    if isinstance(content, ColumnsContent):
        # kbblocks.columns imports this module
        from .columns import is_valid_columns

        return is_valid_columns(content)
    return True


def update_content(blocks: Sequence[Block], block_id: str, content: Any) -> tuple[Block, ...]:
    """Replace the content of ``block_id``; identity and position kept.

    Content that would leave the block malformed (see accepts_content)
    turns the call into a no-op.
    """
    index = find_index(blocks, block_id)
    if index == -1:
        logger.debug("update_content ignored: %s not present", block_id)
        return tuple(blocks)
    if not accepts_content(blocks[index], content):
        logger.debug(
            "update_content ignored: content rejected for %s block %s", blocks[index].type.value, block_id
        )
        return tuple(blocks)
    return replace_block(blocks, block_id, replace(blocks[index], content=content))


def update_properties(
    blocks: Sequence[Block],
    block_id: str,
    properties: dict[str, Any],
) -> tuple[Block, ...]:
    """Merge ``properties`` into the properties of ``block_id``."""
    index = find_index(blocks, block_id)
    if index == -1:
        logger.debug("update_properties ignored: %s not present", block_id)
        return tuple(blocks)
    block = blocks[index]
    merged = {**block.properties, **properties}
    return replace_block(blocks, block_id, replace(block, properties=merged))


def splice(
    blocks: Sequence[Block],
    block_id: str,
    replacement: Sequence[Block],
) -> tuple[Block, ...]:
    """Replace ``block_id`` with zero or more blocks, in order."""
    index = find_index(blocks, block_id)
    if index == -1:
        logger.debug("splice ignored: %s not present", block_id)
        return tuple(blocks)
    return (*blocks[:index], *replacement, *blocks[index + 1:])
