"""Tests for editing.py - ChildListEditor."""

from __future__ import annotations

import pytest

from conftest import columns_block, ids_of, paragraph
from kbblocks.defaults import COLUMN_BLOCK_TYPES
from kbblocks.editing import ChildListEditor
from kbblocks.errors import ValidationError
from kbblocks.models import BlockType


@pytest.fixture
def changes() -> list:
    return []


@pytest.fixture
def editor(ids, changes) -> ChildListEditor:
    return ChildListEditor(
        [paragraph("a"), paragraph("b"), paragraph("c")],
        ids,
        on_change=changes.append,
    )


class TestInsert:
    """New blocks land where asked and enter edit mode."""

    def test_add_block_at_marks_editing(self, editor, changes) -> None:
        block = editor.add_block_at(BlockType.HEADING_2, 0)
        assert ids_of(editor.blocks) == ["a", block.id, "b", "c"]
        assert editor.editing_id == block.id
        assert editor.is_editing(block.id)
        assert len(changes) == 1

    def test_add_block_at_end(self, editor) -> None:
        block = editor.add_block_at_end("paragraph")
        assert editor.blocks[-1] is block
        assert editor.editing_id == block.id

    def test_disallowed_type_raises(self, editor, changes) -> None:
        with pytest.raises(ValidationError) as exc_info:
            editor.add_block_at_end(BlockType.EXPANDABLE_CONTENT_LIST)
        assert exc_info.value.field == "type"
        assert changes == []

    def test_unknown_type_raises(self, editor) -> None:
        with pytest.raises(ValidationError):
            editor.add_block_at_end("marquee")

    def test_column_editor_restricts_types(self, ids) -> None:
        editor = ChildListEditor(ids=ids, allowed_types=COLUMN_BLOCK_TYPES)
        with pytest.raises(ValidationError):
            editor.add_block_at_end(BlockType.COLUMNS)
        editor.add_block_at_end(BlockType.PARAGRAPH)
        assert len(editor.blocks) == 1


class TestUpdateAndDelete:
    """Update, delete and the edit-mode marker."""

    def test_update_block(self, editor, changes) -> None:
        editor.update_block("b", "new")
        assert editor.blocks[1].content == "new"
        assert changes[-1] == editor.blocks

    def test_update_absent_does_not_notify(self, editor, changes) -> None:
        editor.update_block("zz", "new")
        assert changes == []

    def test_delete_editing_block_clears_marker(self, editor) -> None:
        editor.toggle_editing("b")
        editor.delete_block("b")
        assert ids_of(editor.blocks) == ["a", "c"]
        assert editor.editing_id is None

    def test_delete_other_block_keeps_marker(self, editor) -> None:
        editor.toggle_editing("b")
        editor.delete_block("a")
        assert editor.editing_id == "b"

    def test_toggle_editing(self, editor) -> None:
        assert editor.toggle_editing("a") == "a"
        assert editor.toggle_editing("b") == "b"
        assert editor.toggle_editing("b") is None


class TestDrag:
    """A drag commits exactly one move when it is dropped."""

    def test_drop_commits_single_move(self, editor, changes) -> None:
        editor.begin_drag("c")
        assert editor.active_drag_id == "c"
        assert changes == []

        editor.drop("a")
        assert ids_of(editor.blocks) == ["c", "a", "b"]
        assert editor.active_drag_id is None
        assert len(changes) == 1

    def test_drop_on_itself_is_noop(self, editor, changes) -> None:
        editor.begin_drag("b")
        editor.drop("b")
        assert ids_of(editor.blocks) == ["a", "b", "c"]
        assert changes == []

    def test_drop_without_drag_is_noop(self, editor) -> None:
        editor.drop("a")
        assert ids_of(editor.blocks) == ["a", "b", "c"]

    def test_cancel_drag(self, editor, changes) -> None:
        editor.begin_drag("a")
        editor.cancel_drag()
        editor.drop("c")
        assert changes == []

    def test_begin_drag_unknown_block(self, editor) -> None:
        editor.begin_drag("zz")
        assert editor.active_drag_id is None


class TestColumnsInList:
    """Columns management from the enclosing list."""

    def test_extract_and_dissolve(self, ids) -> None:
        editor = ChildListEditor([columns_block("cols", [["a", "b"], ["c"]])], ids)
        editor.extract_from_columns("cols", "a")
        assert ids_of(editor.blocks) == ["cols", "a"]
        editor.dissolve_columns("cols")
        assert ids_of(editor.blocks) == ["b", "c", "a"]

    def test_delete_from_columns_and_remove_column(self, ids) -> None:
        editor = ChildListEditor([columns_block("cols", [["a"], ["b"], ["c"]])], ids)
        editor.remove_column("cols", 0)
        assert ids_of(editor.blocks) == ["cols", "a"]
        editor.delete_from_columns("cols", "b")
        assert ids_of(editor.blocks) == ["c", "a"]
