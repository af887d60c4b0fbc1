"""Operation dispatch - the single ``(tree, op) -> tree`` entry point.

Editors describe each user intent as a JSON-shaped request:

    {"op": "columns.extract", "path": [...], "columns_id": "...", "child_id": "..."}

apply_operation() validates the request, resolves it to one pure transform
from kbblocks.document and returns the new tree.

Malformed requests (unknown op, missing parameters, unknown block type)
are caller errors and raise OperationError / ValidationError. Well-formed
requests that name absent ids are silent no-ops, like the engine itself.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from functools import wraps
from typing import Any

from . import document
from .config import get_preset
from .defaults import new_block
from .errors import KBBlocksError, OperationError, ValidationError
from .ids import DEFAULT_ID_GENERATOR, IdGenerator
from .models import Block, SortMode
from .paths import ListPath

logger = logging.getLogger(__name__)

Handler = Callable[..., tuple[Block, ...]]

_HANDLERS: dict[str, Handler] = {}


def operation(name: str, *required: str) -> Callable[[Handler], Handler]:
    """Register a handler under ``name`` and check its required params.

    Usage:
        @operation("delete", "block_id")
        def _delete(tree, path, ids, *, block_id, **_):
            ...
    """

    def decorator(func: Handler) -> Handler:
        @wraps(func)
        def wrapper(tree: Sequence[Block], path: ListPath, ids: IdGenerator, **params: Any):
            missing = [p for p in required if params.get(p) is None]
            if missing:
                raise OperationError(
                    f"Missing required parameters for {name}: {', '.join(missing)}",
                    op=name,
                    missing=missing,
                )
            return func(tree, path, ids, **params)

        _HANDLERS[name] = wrapper
        return wrapper

    return decorator


def list_operations() -> list[str]:
    return sorted(_HANDLERS)


# =============================================================================
# Generic Edits
# =============================================================================


@operation("insert")
def _insert(tree, path, ids, *, block=None, type=None, after_index=None, **_):
    if block is not None:
        new = block if isinstance(block, Block) else Block.from_dict(block)
    elif type is not None:
        try:
            new = new_block(type, ids)
        except ValueError as e:
            raise ValidationError(f"Unknown block type: {type}", field="type", value=type) from e
    else:
        raise OperationError("insert needs either 'block' or 'type'", op="insert", missing=["block"])
    if after_index is None:
        current = document.get_child_list(tree, path)
        after_index = len(current) - 1 if current is not None else -1
    return document.apply_insert(tree, path, new, int(after_index))


@operation("move", "from_id", "to_id")
def _move(tree, path, ids, *, from_id, to_id, **_):
    return document.apply_move(tree, path, from_id, to_id)


@operation("delete", "block_id")
def _delete(tree, path, ids, *, block_id, **_):
    return document.apply_delete(tree, path, block_id)


@operation("update_content", "block_id")
def _update_content(tree, path, ids, *, block_id, content=None, **_):
    current = document.get_child_list(tree, path) or ()
    target = next((b for b in current if b.id == block_id), None)
    if target is not None and target.is_container() and isinstance(content, dict):
        # Container payloads arrive JSON-shaped; decode through the model.
        content = Block.from_dict({"id": block_id, "type": target.type.value, "content": content}).content
    return document.apply_update_content(tree, path, block_id, content)


@operation("update_properties", "block_id", "properties")
def _update_properties(tree, path, ids, *, block_id, properties, **_):
    return document.apply_update_properties(tree, path, block_id, dict(properties))


# =============================================================================
# Columns
# =============================================================================


@operation("columns.add", "columns_id")
def _columns_add(tree, path, ids, *, columns_id, **_):
    return document.add_column(tree, path, columns_id, ids)


@operation("columns.remove", "columns_id", "col_index")
def _columns_remove(tree, path, ids, *, columns_id, col_index, **_):
    return document.remove_column(tree, path, columns_id, int(col_index))


@operation("columns.set_width", "columns_id", "col_index", "width")
def _columns_set_width(tree, path, ids, *, columns_id, col_index, width, **_):
    return document.set_column_width(tree, path, columns_id, int(col_index), int(width))


@operation("columns.apply_preset", "columns_id")
def _columns_apply_preset(tree, path, ids, *, columns_id, widths=None, preset=None, **_):
    if preset is not None:
        found = get_preset(str(preset))
        if found is None:
            raise ValidationError(
                f"Unknown layout preset: {preset}",
                field="preset",
                value=preset,
                constraint="layout_presets",
            )
        widths = found.widths
    elif widths is None:
        raise OperationError(
            "columns.apply_preset needs either 'widths' or 'preset'",
            op="columns.apply_preset",
            missing=["widths"],
        )
    return document.apply_layout_preset(tree, path, columns_id, list(widths), ids)


@operation("columns.extract", "columns_id", "child_id")
def _columns_extract(tree, path, ids, *, columns_id, child_id, **_):
    return document.extract_from_columns(tree, path, columns_id, child_id)


@operation("columns.delete_child", "columns_id", "child_id")
def _columns_delete_child(tree, path, ids, *, columns_id, child_id, **_):
    return document.delete_from_columns(tree, path, columns_id, child_id)


@operation("columns.dissolve", "columns_id")
def _columns_dissolve(tree, path, ids, *, columns_id, **_):
    return document.dissolve_columns(tree, path, columns_id)


# =============================================================================
# Sections and Entry Lists
# =============================================================================


@operation("section.set_title", "section_id", "title")
def _section_set_title(tree, path, ids, *, section_id, title, **_):
    return document.set_section_title(tree, path, section_id, str(title))


@operation("entries.add", "list_id")
def _entries_add(tree, path, ids, *, list_id, title="", **_):
    return document.add_entry(tree, path, list_id, ids, str(title or ""))


@operation("entries.remove", "list_id", "entry_id")
def _entries_remove(tree, path, ids, *, list_id, entry_id, **_):
    return document.remove_entry(tree, path, list_id, entry_id)


@operation("entries.rename", "list_id", "entry_id", "title")
def _entries_rename(tree, path, ids, *, list_id, entry_id, title, **_):
    return document.rename_entry(tree, path, list_id, entry_id, str(title))


@operation("entries.move", "list_id", "entry_id", "direction")
def _entries_move(tree, path, ids, *, list_id, entry_id, direction, **_):
    return document.move_entry(tree, path, list_id, entry_id, int(direction))


@operation("entries.set_sort_mode", "list_id", "mode")
def _entries_set_sort_mode(tree, path, ids, *, list_id, mode, **_):
    try:
        sort_mode = SortMode(mode)
    except ValueError as e:
        raise ValidationError(f"Unknown sort mode: {mode}", field="mode", value=mode) from e
    return document.set_sort_mode(tree, path, list_id, sort_mode)


# =============================================================================
# Entry Points
# =============================================================================


def apply_operation(
    tree: Sequence[Block],
    op: dict[str, Any],
    ids: IdGenerator | None = None,
) -> tuple[Block, ...]:
    """Apply one operation request to a tree.

    Args:
        tree: Current top-level block list.
        op: Request with an ``op`` name, an optional ``path`` and parameters.
        ids: Generator for any nodes the operation creates.

    Returns:
        The new tree.

    Raises:
        OperationError: If the request is malformed.
        ValidationError: If a parameter has an invalid value.
    """
    if not isinstance(op, dict):
        raise OperationError("Operation must be an object")
    name = op.get("op")
    handler = _HANDLERS.get(name) if isinstance(name, str) else None
    if handler is None:
        raise OperationError(f"Unknown operation: {name}", op=name)

    params = {k: v for k, v in op.items() if k not in ("op", "path")}
    path = ListPath.from_list(op.get("path"))
    logger.debug("apply %s at %s", name, path or "<root>")
    try:
        return handler(tuple(tree), path, ids or DEFAULT_ID_GENERATOR, **params)
    except KBBlocksError:
        raise
    except (TypeError, ValueError) as e:
        raise OperationError(f"Invalid parameters for {name}: {e}", op=name) from e


def apply_operations(
    tree: Sequence[Block],
    ops: Iterable[dict[str, Any]],
    ids: IdGenerator | None = None,
) -> tuple[Block, ...]:
    """Apply a batch of operations in order."""
    result = tuple(tree)
    for op in ops:
        result = apply_operation(result, op, ids)
    return result
