"""Reusable child-list editor.

One ChildListEditor manages a single child list (the top-level document,
a collapsible section or one entry of an expandable list) together with
the transient UI state an editor needs on top of it:
- which child is currently in edit mode
- which child is being dragged

Structural changes go through kbblocks.engine / kbblocks.columns, so the
editor never mutates a list in place. Every new list is handed to the
``on_change`` callback, which is where the host writes it back into the
document (usually via kbblocks.document.replace_child_list).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from . import columns, engine
from .defaults import INNER_BLOCK_TYPES, new_block
from .errors import ValidationError
from .ids import DEFAULT_ID_GENERATOR, IdGenerator
from .models import Block, BlockType

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[tuple[Block, ...]], None]


class ChildListEditor:
    """Insert, reorder, delete and edit-mode toggling for one child list."""

    def __init__(
        self,
        blocks: Sequence[Block] = (),
        ids: IdGenerator = DEFAULT_ID_GENERATOR,
        allowed_types: Iterable[BlockType] = INNER_BLOCK_TYPES,
        on_change: ChangeCallback | None = None,
    ) -> None:
        self._blocks: tuple[Block, ...] = tuple(blocks)
        self._ids = ids
        self._allowed = frozenset(BlockType(t) for t in allowed_types)
        self._on_change = on_change
        self.editing_id: str | None = None
        self.active_drag_id: str | None = None

    @property
    def blocks(self) -> tuple[Block, ...]:
        return self._blocks

    @property
    def allowed_types(self) -> frozenset[BlockType]:
        return self._allowed

    def _commit(self, blocks: tuple[Block, ...]) -> tuple[Block, ...]:
        if blocks is self._blocks or blocks == self._blocks:
            return self._blocks
        self._blocks = blocks
        if self._on_change is not None:
            self._on_change(blocks)
        return blocks

    def _create(self, block_type: BlockType | str) -> Block:
        try:
            kind = BlockType(block_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown block type: {block_type}", field="type", value=block_type
            ) from e
        if kind not in self._allowed:
            raise ValidationError(
                f"Block type {kind.value} is not allowed here",
                field="type",
                value=kind.value,
                constraint="allowed_types",
            )
        return new_block(kind, self._ids)

    # -------------------------------------------------------------------------
    # Insert / update / delete
    # -------------------------------------------------------------------------

    def add_block_at(self, block_type: BlockType | str, after_index: int) -> Block:
        """Insert a default block after ``after_index`` and start editing it.

        Raises:
            ValidationError: If the type is unknown or not allowed here.
        """
        block = self._create(block_type)
        self._commit(engine.insert(self._blocks, block, after_index))
        self.editing_id = block.id
        return block

    def add_block_at_end(self, block_type: BlockType | str) -> Block:
        return self.add_block_at(block_type, len(self._blocks) - 1)

    def update_block(self, block_id: str, content: Any) -> tuple[Block, ...]:
        return self._commit(engine.update_content(self._blocks, block_id, content))

    def delete_block(self, block_id: str) -> tuple[Block, ...]:
        result = self._commit(engine.delete(self._blocks, block_id))
        if self.editing_id == block_id:
            self.editing_id = None
        return result

    def toggle_editing(self, block_id: str) -> str | None:
        """Enter edit mode for ``block_id``, or leave it if already active."""
        self.editing_id = None if self.editing_id == block_id else block_id
        return self.editing_id

    def is_editing(self, block_id: str) -> bool:
        return self.editing_id == block_id

    # -------------------------------------------------------------------------
    # Drag and drop
    # -------------------------------------------------------------------------

    def begin_drag(self, block_id: str) -> None:
        if engine.find_index(self._blocks, block_id) == -1:
            logger.debug("begin_drag ignored: %s not present", block_id)
            return
        self.active_drag_id = block_id

    def drop(self, over_id: str | None) -> tuple[Block, ...]:
        """Finish a drag over ``over_id``; commits at most one move."""
        dragged, self.active_drag_id = self.active_drag_id, None
        if dragged is None or over_id is None or dragged == over_id:
            return self._blocks
        return self._commit(engine.move(self._blocks, dragged, over_id))

    def cancel_drag(self) -> None:
        self.active_drag_id = None

    # -------------------------------------------------------------------------
    # Columns blocks inside this list
    # -------------------------------------------------------------------------

    def extract_from_columns(self, columns_id: str, child_id: str) -> tuple[Block, ...]:
        return self._commit(columns.extract_block(self._blocks, columns_id, child_id))

    def delete_from_columns(self, columns_id: str, child_id: str) -> tuple[Block, ...]:
        return self._commit(columns.delete_from_columns(self._blocks, columns_id, child_id))

    def dissolve_columns(self, columns_id: str) -> tuple[Block, ...]:
        result = self._commit(columns.dissolve_columns(self._blocks, columns_id))
        if self.editing_id == columns_id:
            self.editing_id = None
        return result

    def remove_column(self, columns_id: str, col_index: int) -> tuple[Block, ...]:
        return self._commit(columns.remove_column(self._blocks, columns_id, col_index))
