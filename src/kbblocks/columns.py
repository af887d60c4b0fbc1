"""Columns policy: width renormalization and shape-changing operations.

Two invariants hold for every ColumnsContent produced here:
- column widths sum to exactly 100
- there are between 2 and 5 columns

Content-level operations (add_column, set_column_width,
apply_layout_preset) map a ColumnsContent to a new ColumnsContent.

Operations that may move blocks out of the container or replace it
altogether (remove_column, extract_block, delete_from_columns,
dissolve_columns) work on the child list that holds the Columns block and
return a new version of that list.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from .config import COLUMN_LIMITS
from .engine import find_index, splice
from .ids import DEFAULT_ID_GENERATOR, IdGenerator
from .models import Block, Column, ColumnsContent

logger = logging.getLogger(__name__)


# =============================================================================
# Renormalization
# =============================================================================


def even_widths(count: int) -> list[int]:
    """Split 100 into ``count`` integer widths; the remainder goes first."""
    if count <= 0:
        return []
    base = COLUMN_LIMITS.TOTAL_WIDTH // count
    remainder = COLUMN_LIMITS.TOTAL_WIDTH - base * count
    return [base + (remainder if i == 0 else 0) for i in range(count)]


def renormalize(columns: Sequence[Column]) -> tuple[Column, ...]:
    """Reset every column to an even share of 100."""
    return tuple(
        replace(col, width=width)
        for col, width in zip(columns, even_widths(len(columns)))
    )


def is_valid_columns(content: ColumnsContent) -> bool:
    """Check the width and cardinality invariants."""
    count = len(content.columns)
    if not COLUMN_LIMITS.MIN_COLUMNS <= count <= COLUMN_LIMITS.MAX_COLUMNS:
        return False
    if any(not 0 <= c.width <= COLUMN_LIMITS.TOTAL_WIDTH for c in content.columns):
        return False
    return sum(content.widths) == COLUMN_LIMITS.TOTAL_WIDTH


def new_columns_content(ids: IdGenerator = DEFAULT_ID_GENERATOR, count: int = 2) -> ColumnsContent:
    """Create ``count`` empty, equally wide columns (clamped to 2..5)."""
    count = max(COLUMN_LIMITS.MIN_COLUMNS, min(count, COLUMN_LIMITS.MAX_COLUMNS))
    return ColumnsContent(columns=renormalize(
        [Column(id=ids.new_id("col"), width=0) for _ in range(count)]
    ))


def column_index_of(content: ColumnsContent, block_id: str) -> int:
    """Index of the column holding ``block_id``, or -1."""
    for i, col in enumerate(content.columns):
        if find_index(col.blocks, block_id) != -1:
            return i
    return -1


# =============================================================================
# Content-level operations
# =============================================================================


def add_column(content: ColumnsContent, ids: IdGenerator = DEFAULT_ID_GENERATOR) -> ColumnsContent:
    """Append an empty column and renormalize; no-op at the maximum."""
    if len(content.columns) >= COLUMN_LIMITS.MAX_COLUMNS:
        logger.debug("add_column ignored: already %d columns", len(content.columns))
        return content
    columns = (*content.columns, Column(id=ids.new_id("col"), width=0))
    return replace(content, columns=renormalize(columns))


def set_column_width(content: ColumnsContent, col_index: int, new_width: int) -> ColumnsContent:
    """Resize one column, compensating with its neighbour.

    The neighbour is the next column, or the previous one when the target
    is last. The requested width is clamped to 15..85 and the neighbour
    never drops below 15; the target only receives what the neighbour can
    give up, so the sum stays at 100.

    Args:
        content: Columns content to adjust.
        col_index: Column being resized.
        new_width: Requested width in percent.

    Returns:
        Adjusted content, or the input if the index is out of range.
    """
    columns = list(content.columns)
    if not 0 <= col_index < len(columns) or len(columns) < COLUMN_LIMITS.MIN_COLUMNS:
        logger.debug("set_column_width ignored: index %s of %d", col_index, len(columns))
        return content

    target = columns[col_index]
    adj_index = col_index + 1 if col_index < len(columns) - 1 else col_index - 1
    neighbour = columns[adj_index]

    requested = max(COLUMN_LIMITS.MIN_WIDTH, min(int(new_width), COLUMN_LIMITS.MAX_WIDTH))
    delta = requested - target.width
    floor = min(COLUMN_LIMITS.MIN_WIDTH, neighbour.width)
    neighbour_width = max(floor, neighbour.width - delta)
    applied = neighbour.width - neighbour_width
    if applied == 0:
        return content

    columns[col_index] = replace(target, width=target.width + applied)
    columns[adj_index] = replace(neighbour, width=neighbour_width)
    return replace(content, columns=tuple(columns))


def apply_layout_preset(
    content: ColumnsContent,
    widths: Sequence[int],
    ids: IdGenerator = DEFAULT_ID_GENERATOR,
) -> ColumnsContent:
    """Replace all widths at once, keeping blocks by column position.

    Extra preset slots get new empty columns. When the preset has fewer
    slots than there are columns, the blocks of the surplus columns are
    appended to the preset's last column.

    Presets that break the invariants (count outside 2..5, a non-positive
    width, or a sum other than 100) are ignored.
    """
    widths = [int(w) for w in widths]
    if (
        not COLUMN_LIMITS.MIN_COLUMNS <= len(widths) <= COLUMN_LIMITS.MAX_COLUMNS
        or any(w <= 0 for w in widths)
        or sum(widths) != COLUMN_LIMITS.TOTAL_WIDTH
    ):
        logger.debug("apply_layout_preset ignored: invalid widths %s", widths)
        return content

    existing = content.columns
    columns = []
    for i, width in enumerate(widths):
        if i < len(existing):
            columns.append(replace(existing[i], width=width))
        else:
            columns.append(Column(id=ids.new_id("col"), width=width))

    overflow = tuple(b for col in existing[len(widths):] for b in col.blocks)
    if overflow:
        last = columns[-1]
        columns[-1] = replace(last, blocks=(*last.blocks, *overflow))
    return replace(content, columns=tuple(columns))


# =============================================================================
# List-level operations
# =============================================================================


def _locate(blocks: Sequence[Block], columns_id: str) -> Block | None:
    index = find_index(blocks, columns_id)
    if index == -1:
        logger.debug("columns block %s not in list", columns_id)
        return None
    block = blocks[index]
    if not isinstance(block.content, ColumnsContent):
        logger.debug("block %s is not a columns block", columns_id)
        return None
    return block


def _collapse(
    blocks: Sequence[Block],
    columns_block: Block,
    columns: Sequence[Column],
    trailing: Sequence[Block],
) -> tuple[Block, ...]:
    """Write back ``columns``, unwrapping the container if it degenerates.

    0 non-empty columns: the container is replaced by ``trailing``.
    1 non-empty column: replaced by that column's blocks, then ``trailing``.
    2 or more: kept (empty columns dropped only when it had more than two),
    renormalized, followed by ``trailing``.
    """
    non_empty = [c for c in columns if c.blocks]
    if not non_empty:
        return splice(blocks, columns_block.id, trailing)
    if len(non_empty) == 1:
        return splice(blocks, columns_block.id, (*non_empty[0].blocks, *trailing))

    kept = columns
    if len(columns) > COLUMN_LIMITS.MIN_COLUMNS and len(non_empty) < len(columns):
        kept = non_empty
    content = replace(columns_block.content, columns=renormalize(kept))
    return splice(blocks, columns_block.id, (replace(columns_block, content=content), *trailing))


def remove_column(blocks: Sequence[Block], columns_id: str, col_index: int) -> tuple[Block, ...]:
    """Drop one column; its blocks follow the Columns block in order.

    No-op at the minimum column count or for an out-of-range index.
    """
    block = _locate(blocks, columns_id)
    if block is None:
        return tuple(blocks)
    columns = block.content.columns
    if len(columns) <= COLUMN_LIMITS.MIN_COLUMNS or not 0 <= col_index < len(columns):
        logger.debug("remove_column ignored: index %s of %d", col_index, len(columns))
        return tuple(blocks)

    removed = columns[col_index]
    remaining = renormalize([c for i, c in enumerate(columns) if i != col_index])
    updated = replace(block, content=replace(block.content, columns=remaining))
    return splice(blocks, columns_id, (updated, *removed.blocks))


def _without_child(columns: Sequence[Column], child_id: str) -> tuple[Block | None, list[Column]]:
    found = None
    updated = []
    for col in columns:
        index = find_index(col.blocks, child_id)
        if index != -1:
            found = col.blocks[index]
            col = replace(col, blocks=tuple(b for b in col.blocks if b.id != child_id))
        updated.append(col)
    return found, updated


def extract_block(blocks: Sequence[Block], columns_id: str, child_id: str) -> tuple[Block, ...]:
    """Pull ``child_id`` out of its column and place it after the container.

    The container collapses when fewer than two non-empty columns remain,
    so the document never shows a 0- or 1-column layout.
    """
    block = _locate(blocks, columns_id)
    if block is None:
        return tuple(blocks)
    extracted, columns = _without_child(block.content.columns, child_id)
    if extracted is None:
        logger.debug("extract ignored: %s not in columns %s", child_id, columns_id)
        return tuple(blocks)
    return _collapse(blocks, block, columns, (extracted,))


def delete_from_columns(blocks: Sequence[Block], columns_id: str, child_id: str) -> tuple[Block, ...]:
    """Delete ``child_id`` from its column, collapsing like extract_block."""
    block = _locate(blocks, columns_id)
    if block is None:
        return tuple(blocks)
    removed, columns = _without_child(block.content.columns, child_id)
    if removed is None:
        logger.debug("delete ignored: %s not in columns %s", child_id, columns_id)
        return tuple(blocks)
    return _collapse(blocks, block, columns, ())


def dissolve_columns(blocks: Sequence[Block], columns_id: str) -> tuple[Block, ...]:
    """Replace the Columns block with all of its blocks, column by column."""
    block = _locate(blocks, columns_id)
    if block is None:
        return tuple(blocks)
    children = tuple(b for col in block.content.columns for b in col.blocks)
    return splice(blocks, columns_id, children)
