"""Block-tree document model for a knowledge-base editor.

A document is an ordered tuple of blocks. Three container kinds nest
further child lists: side-by-side columns, collapsible sections and
expandable entry lists. Every edit is a pure transform from one immutable
tree snapshot to the next.

Key components:
- models: Block, BlockType and the container content dataclasses
- engine: Insert/move/delete/update on a single child list
- columns, collapsible, expandable: Container policies
- paths, document: Path-addressed edits on a whole tree
- operations: JSON-shaped operation dispatch
- editing: Child-list editor with edit-mode and drag state
- markdown_parser / markdown_renderer: Markdown import and export
"""

from .document import (
    add_column,
    add_entry,
    apply_delete,
    apply_insert,
    apply_layout_preset,
    apply_move,
    apply_update_content,
    dissolve_columns,
    extract_from_columns,
    find_block,
    get_child_list,
    move_entry,
    remove_column,
    remove_entry,
    rename_entry,
    set_column_width,
    set_sort_mode,
    validate_tree,
)
from .editing import ChildListEditor
from .errors import KBBlocksError, OperationError, SerializationError, ValidationError
from .ids import IdGenerator, SequentialIdGenerator, UuidIdGenerator
from .markdown_parser import parse_markdown
from .markdown_renderer import render_markdown
from .models import (
    Block,
    BlockType,
    CollapsibleContent,
    Column,
    ColumnsContent,
    Entry,
    ExpandableListContent,
    SortMode,
    dumps_document,
    loads_document,
)
from .operations import apply_operation, apply_operations
from .paths import ListPath, PathStep

__all__ = [
    "Block",
    "BlockType",
    "CollapsibleContent",
    "Column",
    "ColumnsContent",
    "Entry",
    "ExpandableListContent",
    "SortMode",
    "dumps_document",
    "loads_document",
    "IdGenerator",
    "SequentialIdGenerator",
    "UuidIdGenerator",
    "ListPath",
    "PathStep",
    "get_child_list",
    "apply_insert",
    "apply_move",
    "apply_delete",
    "apply_update_content",
    "add_column",
    "remove_column",
    "set_column_width",
    "apply_layout_preset",
    "extract_from_columns",
    "dissolve_columns",
    "add_entry",
    "remove_entry",
    "rename_entry",
    "move_entry",
    "set_sort_mode",
    "find_block",
    "validate_tree",
    "apply_operation",
    "apply_operations",
    "ChildListEditor",
    "parse_markdown",
    "render_markdown",
    "KBBlocksError",
    "ValidationError",
    "OperationError",
    "SerializationError",
]

__version__ = "0.1.0"
