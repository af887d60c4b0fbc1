"""Document-level operations on a block tree.

A tree is the top-level tuple of blocks. Every function takes a tree and
returns a new tree; the argument is never modified. Edits are addressed by
a ListPath naming the child list to work on, after which the flat-list
engine (kbblocks.engine) or a container policy does the actual work.

Unresolvable paths, absent ids and container ids that name the wrong kind
of block leave the tree unchanged.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace
from typing import Any

from . import collapsible, columns, engine, expandable
from .ids import DEFAULT_ID_GENERATOR, IdGenerator
from .models import (
    Block,
    CollapsibleContent,
    ColumnsContent,
    ExpandableListContent,
    SortMode,
    iter_tree,
)
from .paths import ListPath, PathStep, Slot

logger = logging.getLogger(__name__)

Tree = tuple[Block, ...]


# =============================================================================
# Path Resolution
# =============================================================================


def _slot_list(block: Block, slot: Slot) -> tuple[Block, ...] | None:
    """The child list of ``block`` selected by ``slot``."""
    content = block.content
    if isinstance(content, ColumnsContent):
        if isinstance(slot, int) and not isinstance(slot, bool) and 0 <= slot < len(content.columns):
            return content.columns[slot].blocks
        return None
    if isinstance(content, CollapsibleContent):
        return content.blocks if slot is None else None
    if isinstance(content, ExpandableListContent):
        if isinstance(slot, str):
            index = expandable.find_entry(content, slot)
            if index != -1:
                return content.entries[index].blocks
        return None
    return None


def _with_slot_list(block: Block, slot: Slot, blocks: tuple[Block, ...]) -> Block:
    content = block.content
    if isinstance(content, ColumnsContent):
        cols = list(content.columns)
        cols[slot] = replace(cols[slot], blocks=blocks)
        return replace(block, content=replace(content, columns=tuple(cols)))
    if isinstance(content, CollapsibleContent):
        return replace(block, content=collapsible.set_blocks(content, blocks))
    return replace(block, content=expandable.set_entry_blocks(content, slot, blocks))


def get_child_list(tree: Sequence[Block], path: ListPath) -> tuple[Block, ...] | None:
    """Resolve ``path`` to the list it addresses, or None."""
    current: tuple[Block, ...] | None = tuple(tree)
    for step in path:
        index = engine.find_index(current, step.block_id)
        if index == -1:
            return None
        current = _slot_list(current[index], step.slot)
        if current is None:
            return None
    return current


def _replace_at(blocks: tuple[Block, ...], steps: tuple[PathStep, ...], new_list: tuple[Block, ...]) -> Tree | None:
    if not steps:
        return new_list
    step, rest = steps[0], steps[1:]
    index = engine.find_index(blocks, step.block_id)
    if index == -1:
        return None
    block = blocks[index]
    inner = _slot_list(block, step.slot)
    if inner is None:
        return None
    updated_inner = _replace_at(inner, rest, new_list)
    if updated_inner is None:
        return None
    return engine.replace_block(blocks, block.id, _with_slot_list(block, step.slot, updated_inner))


def replace_child_list(tree: Sequence[Block], path: ListPath, blocks: Sequence[Block]) -> Tree:
    """Write ``blocks`` into the list addressed by ``path``.

    Returns the tree unchanged if the path does not resolve.
    """
    result = _replace_at(tuple(tree), path.steps, tuple(blocks))
    if result is None:
        logger.debug("replace_child_list ignored: path %s does not resolve", path)
        return tuple(tree)
    return result


def edit_child_list(
    tree: Sequence[Block],
    path: ListPath,
    edit: Callable[[tuple[Block, ...]], Sequence[Block]],
) -> Tree:
    """Apply a list transform to the list addressed by ``path``."""
    current = get_child_list(tree, path)
    if current is None:
        logger.debug("edit ignored: path %s does not resolve", path)
        return tuple(tree)
    return replace_child_list(tree, path, edit(current))


def _edit_container(
    tree: Sequence[Block],
    parent_path: ListPath,
    container_id: str,
    content_type: type,
    edit: Callable[[Any], Any],
) -> Tree:
    def apply(blocks: tuple[Block, ...]) -> tuple[Block, ...]:
        index = engine.find_index(blocks, container_id)
        if index == -1 or not isinstance(blocks[index].content, content_type):
            logger.debug("container %s not found as %s", container_id, content_type.__name__)
            return blocks
        block = blocks[index]
        return engine.update_content(blocks, container_id, edit(block.content))

    return edit_child_list(tree, parent_path, apply)


# =============================================================================
# Generic Edits
# =============================================================================


def apply_insert(tree: Sequence[Block], parent_path: ListPath, block: Block, after_index: int) -> Tree:
    return edit_child_list(tree, parent_path, lambda blocks: engine.insert(blocks, block, after_index))


def apply_move(tree: Sequence[Block], parent_path: ListPath, from_id: str, to_id: str) -> Tree:
    return edit_child_list(tree, parent_path, lambda blocks: engine.move(blocks, from_id, to_id))


def apply_delete(tree: Sequence[Block], parent_path: ListPath, block_id: str) -> Tree:
    return edit_child_list(tree, parent_path, lambda blocks: engine.delete(blocks, block_id))


def apply_update_content(tree: Sequence[Block], parent_path: ListPath, block_id: str, content: Any) -> Tree:
    return edit_child_list(
        tree, parent_path, lambda blocks: engine.update_content(blocks, block_id, content)
    )


def apply_update_properties(
    tree: Sequence[Block],
    parent_path: ListPath,
    block_id: str,
    properties: dict[str, Any],
) -> Tree:
    return edit_child_list(
        tree, parent_path, lambda blocks: engine.update_properties(blocks, block_id, properties)
    )


# =============================================================================
# Columns
# =============================================================================


def add_column(
    tree: Sequence[Block],
    parent_path: ListPath,
    columns_id: str,
    ids: IdGenerator = DEFAULT_ID_GENERATOR,
) -> Tree:
    return _edit_container(
        tree, parent_path, columns_id, ColumnsContent, lambda c: columns.add_column(c, ids)
    )


def set_column_width(
    tree: Sequence[Block],
    parent_path: ListPath,
    columns_id: str,
    col_index: int,
    width: int,
) -> Tree:
    return _edit_container(
        tree, parent_path, columns_id, ColumnsContent,
        lambda c: columns.set_column_width(c, col_index, width),
    )


def apply_layout_preset(
    tree: Sequence[Block],
    parent_path: ListPath,
    columns_id: str,
    widths: Sequence[int],
    ids: IdGenerator = DEFAULT_ID_GENERATOR,
) -> Tree:
    return _edit_container(
        tree, parent_path, columns_id, ColumnsContent,
        lambda c: columns.apply_layout_preset(c, widths, ids),
    )


def remove_column(tree: Sequence[Block], parent_path: ListPath, columns_id: str, col_index: int) -> Tree:
    return edit_child_list(
        tree, parent_path, lambda blocks: columns.remove_column(blocks, columns_id, col_index)
    )


def extract_from_columns(tree: Sequence[Block], parent_path: ListPath, columns_id: str, child_id: str) -> Tree:
    return edit_child_list(
        tree, parent_path, lambda blocks: columns.extract_block(blocks, columns_id, child_id)
    )


def delete_from_columns(tree: Sequence[Block], parent_path: ListPath, columns_id: str, child_id: str) -> Tree:
    return edit_child_list(
        tree, parent_path, lambda blocks: columns.delete_from_columns(blocks, columns_id, child_id)
    )


def dissolve_columns(tree: Sequence[Block], parent_path: ListPath, columns_id: str) -> Tree:
    return edit_child_list(
        tree, parent_path, lambda blocks: columns.dissolve_columns(blocks, columns_id)
    )


# =============================================================================
# Collapsible Sections
# =============================================================================


def set_section_title(tree: Sequence[Block], parent_path: ListPath, section_id: str, title: str) -> Tree:
    return _edit_container(
        tree, parent_path, section_id, CollapsibleContent,
        lambda c: collapsible.set_title(c, title),
    )


# =============================================================================
# Expandable Entry Lists
# =============================================================================


def add_entry(
    tree: Sequence[Block],
    parent_path: ListPath,
    list_id: str,
    ids: IdGenerator = DEFAULT_ID_GENERATOR,
    title: str = "",
) -> Tree:
    return _edit_container(
        tree, parent_path, list_id, ExpandableListContent,
        lambda c: expandable.add_entry(c, ids, title),
    )


def remove_entry(tree: Sequence[Block], parent_path: ListPath, list_id: str, entry_id: str) -> Tree:
    return _edit_container(
        tree, parent_path, list_id, ExpandableListContent,
        lambda c: expandable.remove_entry(c, entry_id),
    )


def rename_entry(tree: Sequence[Block], parent_path: ListPath, list_id: str, entry_id: str, title: str) -> Tree:
    return _edit_container(
        tree, parent_path, list_id, ExpandableListContent,
        lambda c: expandable.rename_entry(c, entry_id, title),
    )


def move_entry(tree: Sequence[Block], parent_path: ListPath, list_id: str, entry_id: str, direction: int) -> Tree:
    return _edit_container(
        tree, parent_path, list_id, ExpandableListContent,
        lambda c: expandable.move_entry(c, entry_id, direction),
    )


def set_sort_mode(tree: Sequence[Block], parent_path: ListPath, list_id: str, mode: SortMode | str) -> Tree:
    return _edit_container(
        tree, parent_path, list_id, ExpandableListContent,
        lambda c: expandable.set_sort_mode(c, mode),
    )


# =============================================================================
# Tree Traversal Utilities
# =============================================================================


def iter_blocks(tree: Sequence[Block]) -> Iterator[Block]:
    """Every block in the tree, depth-first, in document order."""
    return iter_tree(tree)


def flatten_tree(tree: Sequence[Block]) -> list[Block]:
    return list(iter_tree(tree))


def collect_ids(tree: Sequence[Block]) -> list[str]:
    return [b.id for b in iter_tree(tree)]


def collect_node_ids(tree: Sequence[Block]) -> list[str]:
    """Block ids plus the ids of every column and entry."""
    found = []
    for block in iter_tree(tree):
        found.append(block.id)
        if isinstance(block.content, ColumnsContent):
            found.extend(c.id for c in block.content.columns)
        elif isinstance(block.content, ExpandableListContent):
            found.extend(e.id for e in block.content.entries)
    return found


def find_block(tree: Sequence[Block], block_id: str) -> Block | None:
    for block in iter_tree(tree):
        if block.id == block_id:
            return block
    return None


def _child_paths(block: Block, path: ListPath) -> Iterator[tuple[ListPath, tuple[Block, ...]]]:
    content = block.content
    if isinstance(content, ColumnsContent):
        for i, col in enumerate(content.columns):
            yield path.child(block.id, i), col.blocks
    elif isinstance(content, CollapsibleContent):
        yield path.child(block.id), content.blocks
    elif isinstance(content, ExpandableListContent):
        for entry in content.entries:
            yield path.child(block.id, entry.id), entry.blocks


def find_parent_path(tree: Sequence[Block], block_id: str) -> ListPath | None:
    """Path of the list that holds ``block_id``, or None if absent."""
    pending: list[tuple[ListPath, tuple[Block, ...]]] = [(ListPath.root(), tuple(tree))]
    while pending:
        path, blocks = pending.pop()
        for block in blocks:
            if block.id == block_id:
                return path
            pending.extend(_child_paths(block, path))
    return None


def block_depth(tree: Sequence[Block], block_id: str) -> int | None:
    """Number of containers above ``block_id`` (0 for top-level blocks)."""
    path = find_parent_path(tree, block_id)
    return None if path is None else path.depth


# =============================================================================
# Validation
# =============================================================================


def validate_tree(tree: Sequence[Block]) -> list[str]:
    """Report structural problems; an empty list means the tree is valid.

    Checks global block id uniqueness, the columns width/cardinality
    invariants, and id uniqueness of columns and entries within their
    container.
    """
    problems = []
    counts = Counter(collect_ids(tree))
    for block_id, count in sorted(counts.items()):
        if count > 1:
            problems.append(f"duplicate block id {block_id!r} ({count} occurrences)")

    for block in iter_tree(tree):
        content = block.content
        if isinstance(content, ColumnsContent):
            if not columns.is_valid_columns(content):
                problems.append(
                    f"columns block {block.id!r} has invalid layout {content.widths}"
                )
            slot_ids = [c.id for c in content.columns]
        elif isinstance(content, ExpandableListContent):
            slot_ids = [e.id for e in content.entries]
        else:
            continue
        if len(set(slot_ids)) != len(slot_ids):
            problems.append(f"container {block.id!r} has duplicate column or entry ids")
    return problems
