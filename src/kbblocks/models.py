"""Data models for the block-tree document.

This module defines the core data structures of the knowledge-base editor:
blocks, the three container contents (columns, collapsible sections and
expandable entry lists) and their JSON representation.

All models are frozen. Child lists are tuples, so a document snapshot can
never be changed in place; edit operations build new snapshots instead.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .errors import SerializationError

logger = logging.getLogger(__name__)


class BlockType(str, Enum):
    """Closed set of block kinds."""

    # Text blocks
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST = "bulleted_list"
    NUMBERED_LIST = "numbered_list"
    TOGGLE = "toggle"
    CALLOUT = "callout"
    QUOTE = "quote"
    DIVIDER = "divider"
    CODE = "code"

    # Media blocks
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"
    PDF = "pdf"
    EMBED = "embed"
    BOOKMARK = "bookmark"

    # Structured leaves
    TABLE = "table"
    EQUATION = "equation"
    BUTTON = "button"
    TABLE_OF_CONTENTS = "table_of_contents"
    BREADCRUMBS = "breadcrumbs"
    SYNCED_BLOCK = "synced_block"

    # Containers
    COLUMNS = "columns"
    COLLAPSIBLE_HEADING = "collapsible_heading"
    EXPANDABLE_CONTENT_LIST = "expandable_content_list"


# Block types whose content holds child lists
CONTAINER_TYPES = frozenset({
    BlockType.COLUMNS,
    BlockType.COLLAPSIBLE_HEADING,
    BlockType.EXPANDABLE_CONTENT_LIST,
})


class SortMode(str, Enum):
    """Render order of an expandable entry list."""

    MANUAL = "manual"
    ALPHABETICAL = "alphabetical"


def _as_tuple(items: Sequence[Any] | None) -> tuple[Any, ...]:
    if items is None:
        return ()
    return tuple(items)


def _require_object(data: Any, what: str, source: str | None = None) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise SerializationError(f"{what} must be an object, got {type(data).__name__}", source=source)
    return data


def _require_list(value: Any, what: str, source: str | None = None) -> Sequence[Any]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise SerializationError(f"{what} must be a list, got {type(value).__name__}", source=source)
    return value


# =============================================================================
# Block
# =============================================================================


@dataclass(frozen=True)
class Block:
    """A content block.

    Leaf blocks carry opaque, JSON-shaped content (a string or a dict).
    Container blocks carry one of ColumnsContent, CollapsibleContent or
    ExpandableListContent, each owning its child lists exclusively.
    """

    id: str
    type: BlockType
    content: Any = ""
    properties: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.type, BlockType):
            object.__setattr__(self, "type", BlockType(self.type))

    def is_container(self) -> bool:
        """Check whether this block's content holds child lists."""
        return isinstance(self.content, ContainerContent)

    def child_lists(self) -> tuple[tuple[Block, ...], ...]:
        """Every child list owned by this block, in stored order."""
        if isinstance(self.content, ContainerContent):
            return self.content.child_lists()
        return ()

    def with_content(self, content: Any) -> Block:
        return replace(self, content=content)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if isinstance(self.content, ContainerContent):
            content = self.content.to_dict()
        else:
            content = self.content
        return {
            "id": self.id,
            "type": self.type.value,
            "content": content,
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Block:
        """Create from dictionary.

        Accepts the legacy ``defaultContent`` key in place of ``content``.

        Raises:
            SerializationError: If the id or type is missing or unknown, or the
                content or properties are not shaped as the type requires.
        """
        if not isinstance(data, dict):
            raise SerializationError(f"Block must be an object, got {type(data).__name__}")
        block_id = data.get("id")
        if not block_id:
            raise SerializationError("Block is missing an id")
        try:
            block_type = BlockType(data.get("type"))
        except ValueError as e:
            raise SerializationError(
                f"Unknown block type: {data.get('type')!r}", source=str(block_id)
            ) from e

        raw = data["content"] if "content" in data else data.get("defaultContent")
        return cls(
            id=str(block_id),
            type=block_type,
            content=_content_from_data(block_type, raw, str(block_id)),
            properties=dict(_require_object(data.get("properties") or {}, "Block properties", str(block_id))),
        )


# =============================================================================
# Container Contents
# =============================================================================


class ContainerContent:
    """Marker base for contents that own child lists."""

    def child_lists(self) -> tuple[tuple[Block, ...], ...]:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class Column:
    """One column of a Columns block; width is an integer percentage."""

    id: str
    width: int
    blocks: tuple[Block, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", _as_tuple(self.blocks))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "width": self.width,
            "blocks": [b.to_dict() for b in self.blocks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], fallback_id: str, owner_id: str | None = None) -> Column:
        """Create from dictionary.

        Raises:
            SerializationError: If the column is not an object or its width
                is not an integer.
        """
        data = _require_object(data, "Column", owner_id)
        raw_width = data.get("width", 0)
        try:
            width = int(raw_width)
        except (TypeError, ValueError, OverflowError) as e:
            raise SerializationError(f"Invalid column width: {raw_width!r}", source=owner_id) from e
        return cls(
            id=str(data.get("id") or fallback_id),
            width=width,
            blocks=tuple(Block.from_dict(b) for b in _require_list(data.get("blocks"), "Column blocks", owner_id)),
        )


@dataclass(frozen=True)
class ColumnsContent(ContainerContent):
    """Side-by-side columns.

    Invariant: widths sum to exactly 100 and there are 2..5 columns. The
    operations in kbblocks.columns preserve it by construction.
    """

    columns: tuple[Column, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", _as_tuple(self.columns))

    @property
    def widths(self) -> list[int]:
        return [c.width for c in self.columns]

    def child_lists(self) -> tuple[tuple[Block, ...], ...]:
        return tuple(c.blocks for c in self.columns)

    def to_dict(self) -> dict[str, Any]:
        return {"columns": [c.to_dict() for c in self.columns]}

    @classmethod
    def from_dict(cls, data: dict[str, Any], owner_id: str = "columns") -> ColumnsContent:
        return cls(columns=tuple(
            Column.from_dict(col, fallback_id=f"{owner_id}-col{i + 1}", owner_id=owner_id)
            for i, col in enumerate(_require_list(data.get("columns"), "Columns", owner_id))
        ))


@dataclass(frozen=True)
class CollapsibleContent(ContainerContent):
    """A titled section with a single child list."""

    title: str = ""
    blocks: tuple[Block, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", _as_tuple(self.blocks))

    def child_lists(self) -> tuple[tuple[Block, ...], ...]:
        return (self.blocks,)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "blocks": [b.to_dict() for b in self.blocks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], owner_id: str | None = None) -> CollapsibleContent:
        return cls(
            title=str(data.get("title") or ""),
            blocks=tuple(Block.from_dict(b) for b in _require_list(data.get("blocks"), "Section blocks", owner_id)),
        )


@dataclass(frozen=True)
class Entry:
    """A named entry of an expandable list, with its own child list."""

    id: str
    title: str = ""
    blocks: tuple[Block, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", _as_tuple(self.blocks))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "blocks": [b.to_dict() for b in self.blocks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], owner_id: str | None = None) -> Entry:
        data = _require_object(data, "Entry", owner_id)
        entry_id = data.get("id")
        if not entry_id:
            raise SerializationError("Entry is missing an id", source=owner_id)
        return cls(
            id=str(entry_id),
            title=str(data.get("title") or ""),
            blocks=tuple(Block.from_dict(b) for b in _require_list(data.get("blocks"), "Entry blocks", owner_id)),
        )


@dataclass(frozen=True)
class ExpandableListContent(ContainerContent):
    """An ordered list of entries.

    ``entries`` is always the authored order; alphabetical mode only
    changes how the list is presented.
    """

    entries: tuple[Entry, ...] = ()
    sort_mode: SortMode = SortMode.MANUAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", _as_tuple(self.entries))
        if not isinstance(self.sort_mode, SortMode):
            object.__setattr__(self, "sort_mode", SortMode(self.sort_mode))

    def child_lists(self) -> tuple[tuple[Block, ...], ...]:
        return tuple(e.blocks for e in self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [e.to_dict() for e in self.entries],
            "sortMode": self.sort_mode.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], owner_id: str | None = None) -> ExpandableListContent:
        raw_mode = data.get("sortMode", data.get("sort_mode")) or SortMode.MANUAL.value
        try:
            sort_mode = SortMode(raw_mode)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Unknown sort mode: {raw_mode!r}", source=owner_id) from e
        return cls(
            entries=tuple(
                Entry.from_dict(e, owner_id=owner_id)
                for e in _require_list(data.get("entries"), "Entries", owner_id)
            ),
            sort_mode=sort_mode,
        )


def _content_from_data(block_type: BlockType, raw: Any, block_id: str) -> Any:
    """Decode a block payload, filling in defaults for container kinds."""
    if block_type == BlockType.COLUMNS:
        if isinstance(raw, dict) and raw.get("columns"):
            return ColumnsContent.from_dict(raw, owner_id=block_id)
        logger.debug("Columns block %s has no payload, using default layout", block_id)
        return ColumnsContent(columns=(
            Column(id=f"{block_id}-col1", width=50),
            Column(id=f"{block_id}-col2", width=50),
        ))
    if block_type == BlockType.COLLAPSIBLE_HEADING:
        if isinstance(raw, dict):
            return CollapsibleContent.from_dict(raw, owner_id=block_id)
        return CollapsibleContent(title=str(raw or ""))
    if block_type == BlockType.EXPANDABLE_CONTENT_LIST:
        if isinstance(raw, dict):
            return ExpandableListContent.from_dict(raw, owner_id=block_id)
        return ExpandableListContent()
    return "" if raw is None else raw


# =============================================================================
# Document (top-level list) serialization
# =============================================================================


def iter_tree(blocks: Sequence[Block]) -> Iterator[Block]:
    """Yield every block of a list and its descendants, depth-first."""
    for block in blocks:
        yield block
        for child_list in block.child_lists():
            yield from iter_tree(child_list)


def document_to_data(blocks: Sequence[Block]) -> list[dict[str, Any]]:
    return [b.to_dict() for b in blocks]


def document_from_data(data: Any) -> tuple[Block, ...]:
    """Decode a top-level block list.

    Accepts either a bare list or an object with a ``blocks`` list.
    """
    if isinstance(data, dict) and "blocks" in data:
        data = data["blocks"]
    if not isinstance(data, list):
        raise SerializationError("Document must be a list of blocks")
    return tuple(Block.from_dict(item) for item in data)


def dumps_document(blocks: Sequence[Block], indent: int | None = 2) -> str:
    """Serialize a top-level block list to JSON text."""
    return json.dumps(document_to_data(blocks), indent=indent, ensure_ascii=False)


def loads_document(text: str) -> tuple[Block, ...]:
    """Parse JSON text into a top-level block list.

    Raises:
        SerializationError: If the text is not valid JSON or not block-shaped.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON: {e}") from e
    return document_from_data(data)
