"""Tests for paths.py and document.py - path-addressed tree edits.

Tests:
- ListPath construction and JSON shape
- Resolving paths through every container kind
- apply_* operations on nested lists
- Container operations addressed by parent path
- Traversal helpers and validate_tree
"""

from __future__ import annotations

import pytest

from conftest import columns_block, ids_of, paragraph
from kbblocks import document
from kbblocks.errors import ValidationError
from kbblocks.models import SortMode
from kbblocks.paths import ListPath, PathStep

ROOT = ListPath.root()


# =============================================================================
# ListPath
# =============================================================================


class TestListPath:
    """Test path construction and conversion."""

    def test_root(self) -> None:
        assert ROOT.is_root
        assert ROOT.depth == 0
        assert str(ROOT) == ""

    def test_child_and_parent(self) -> None:
        path = ROOT.child("cols-1", 0).child("section-7")
        assert str(path) == "cols-1[0]/section-7"
        assert path.depth == 2
        assert path.parent == ListPath.of(("cols-1", 0))

    def test_list_round_trip(self) -> None:
        path = ListPath.of(("cols", 1), "section", ("faq", "e1"))
        data = path.to_list()
        assert data == [
            {"block": "cols", "slot": 1},
            {"block": "section", "slot": None},
            {"block": "faq", "slot": "e1"},
        ]
        assert ListPath.from_list(data) == path

    def test_from_list_accepts_pairs_and_ids(self) -> None:
        path = ListPath.from_list([["cols", 0], "section"])
        assert path.steps == (PathStep("cols", 0), PathStep("section"))

    def test_from_list_none_is_root(self) -> None:
        assert ListPath.from_list(None) == ROOT

    @pytest.mark.parametrize("data", ["cols", [42], [{"slot": 1}], 7])
    def test_from_list_rejects_garbage(self, data) -> None:
        with pytest.raises(ValidationError):
            ListPath.from_list(data)


# =============================================================================
# Resolution
# =============================================================================


class TestGetChildList:
    """Test resolving a path to a child list."""

    def test_root_is_top_level(self, sample_tree) -> None:
        assert document.get_child_list(sample_tree, ROOT) == sample_tree

    def test_column_slots(self, sample_tree) -> None:
        assert ids_of(document.get_child_list(sample_tree, ListPath.of(("cols", 0)))) == ["a", "b"]
        assert ids_of(document.get_child_list(sample_tree, ListPath.of(("cols", 1)))) == ["c"]

    def test_section_and_nested_columns(self, sample_tree) -> None:
        assert ids_of(document.get_child_list(sample_tree, ListPath.of("section"))) == ["s1", "inner-cols"]
        path = ListPath.of("section", ("inner-cols", 1))
        assert ids_of(document.get_child_list(sample_tree, path)) == ["y"]

    def test_entry_slot(self, sample_tree) -> None:
        assert ids_of(document.get_child_list(sample_tree, ListPath.of(("faq", "e2")))) == ["q2"]

    @pytest.mark.parametrize(
        "path",
        [
            ListPath.of(("cols", 2)),
            ListPath.of(("cols", "0")),
            ListPath.of("cols"),
            ListPath.of(("section", 0)),
            ListPath.of(("faq", "nope")),
            ListPath.of("intro"),
            ListPath.of("missing"),
        ],
    )
    def test_unresolvable(self, sample_tree, path: ListPath) -> None:
        assert document.get_child_list(sample_tree, path) is None


# =============================================================================
# Generic edits
# =============================================================================


class TestApplyGeneric:
    """Test apply_insert / move / delete / update on nested lists."""

    def test_insert_into_nested_column(self, sample_tree) -> None:
        path = ListPath.of("section", ("inner-cols", 0))
        result = document.apply_insert(sample_tree, path, paragraph("n"), 0)

        assert ids_of(document.get_child_list(result, path)) == ["x", "n"]
        assert result[0] is sample_tree[0]
        assert ids_of(document.get_child_list(sample_tree, path)) == ["x"]

    def test_insert_at_root(self, sample_tree) -> None:
        result = document.apply_insert(sample_tree, ROOT, paragraph("n"), -1)
        assert ids_of(result)[0] == "n"

    def test_insert_unresolvable_path_is_noop(self, sample_tree) -> None:
        result = document.apply_insert(sample_tree, ListPath.of("missing"), paragraph("n"), 0)
        assert result == sample_tree

    def test_move_inside_column(self, sample_tree) -> None:
        path = ListPath.of(("cols", 0))
        result = document.apply_move(sample_tree, path, "b", "a")
        assert ids_of(document.get_child_list(result, path)) == ["b", "a"]

    def test_delete_cascades(self, sample_tree) -> None:
        result = document.apply_delete(sample_tree, ROOT, "section")
        remaining = document.collect_ids(result)
        for gone in ("section", "s1", "inner-cols", "x", "y"):
            assert gone not in remaining

    def test_update_content_in_entry(self, sample_tree) -> None:
        path = ListPath.of(("faq", "e2"))
        result = document.apply_update_content(sample_tree, path, "q2", "answer")
        assert document.find_block(result, "q2").content == "answer"

    def test_update_properties(self, sample_tree) -> None:
        result = document.apply_update_properties(sample_tree, ROOT, "intro", {"color": "blue"})
        assert document.find_block(result, "intro").properties == {"color": "blue"}

    def test_replace_child_list(self, sample_tree) -> None:
        path = ListPath.of("section")
        result = document.replace_child_list(sample_tree, path, [paragraph("only")])
        assert ids_of(document.get_child_list(result, path)) == ["only"]


# =============================================================================
# Container operations
# =============================================================================


class TestColumnsAtPath:
    """Columns operations addressed by the list holding the container."""

    def test_add_column(self, sample_tree, ids) -> None:
        result = document.add_column(sample_tree, ROOT, "cols", ids)
        content = document.find_block(result, "cols").content
        assert content.widths == [34, 33, 33]
        assert content.columns[-1].id == "col-1"

    def test_set_column_width_nested(self, sample_tree) -> None:
        result = document.set_column_width(sample_tree, ListPath.of("section"), "inner-cols", 0, 60)
        assert document.find_block(result, "inner-cols").content.widths == [60, 40]

    def test_apply_layout_preset(self, sample_tree, ids) -> None:
        result = document.apply_layout_preset(sample_tree, ROOT, "cols", [25, 25, 25, 25], ids)
        assert document.find_block(result, "cols").content.widths == [25, 25, 25, 25]

    def test_remove_column_at_minimum_is_noop(self, sample_tree) -> None:
        assert document.remove_column(sample_tree, ROOT, "cols", 0) == sample_tree

    def test_extract_from_nested_columns(self, sample_tree) -> None:
        result = document.extract_from_columns(sample_tree, ListPath.of("section"), "inner-cols", "x")
        assert ids_of(document.get_child_list(result, ListPath.of("section"))) == ["s1", "y", "x"]

    def test_delete_from_columns(self, sample_tree) -> None:
        result = document.delete_from_columns(sample_tree, ROOT, "cols", "c")
        assert ids_of(result) == ["intro", "a", "b", "section", "faq", "outro"]

    def test_dissolve_columns(self, sample_tree) -> None:
        result = document.dissolve_columns(sample_tree, ROOT, "cols")
        assert ids_of(result) == ["intro", "a", "b", "c", "section", "faq", "outro"]

    def test_wrong_container_kind_is_noop(self, sample_tree, ids) -> None:
        assert document.add_column(sample_tree, ROOT, "section", ids) == sample_tree
        assert document.add_entry(sample_tree, ROOT, "cols", ids) == sample_tree


class TestSectionsAndEntriesAtPath:
    """Section titles and entry lists addressed by parent path."""

    def test_set_section_title(self, sample_tree) -> None:
        result = document.set_section_title(sample_tree, ROOT, "section", "More")
        assert document.find_block(result, "section").content.title == "More"

    def test_entry_lifecycle(self, sample_tree, ids) -> None:
        tree = document.add_entry(sample_tree, ROOT, "faq", ids, "Gamma")
        tree = document.rename_entry(tree, ROOT, "faq", "e1", "Delta")
        tree = document.move_entry(tree, ROOT, "faq", "entry-1", -1)
        tree = document.remove_entry(tree, ROOT, "faq", "e2")
        tree = document.set_sort_mode(tree, ROOT, "faq", SortMode.ALPHABETICAL)

        content = document.find_block(tree, "faq").content
        assert [(e.id, e.title) for e in content.entries] == [("e1", "Delta"), ("entry-1", "Gamma")]
        assert content.sort_mode == SortMode.ALPHABETICAL

    def test_insert_into_new_entry(self, sample_tree, ids) -> None:
        tree = document.add_entry(sample_tree, ROOT, "faq", ids)
        path = ListPath.of(("faq", "entry-1"))
        tree = document.apply_insert(tree, path, paragraph("n"), -1)
        assert ids_of(document.get_child_list(tree, path)) == ["n"]


# =============================================================================
# Traversal and validation
# =============================================================================


class TestTraversal:
    """Test iteration, lookup and depth helpers."""

    def test_collect_ids_depth_first(self, sample_tree) -> None:
        assert document.collect_ids(sample_tree) == [
            "intro", "cols", "a", "b", "c",
            "section", "s1", "inner-cols", "x", "y",
            "faq", "q1", "q2", "outro",
        ]

    def test_flatten_matches_iter(self, sample_tree) -> None:
        assert document.flatten_tree(sample_tree) == list(document.iter_blocks(sample_tree))

    def test_collect_node_ids_includes_columns_and_entries(self, sample_tree) -> None:
        node_ids = document.collect_node_ids(sample_tree)
        assert "cols-c0" in node_ids
        assert "inner-cols-c1" in node_ids
        assert "e2" in node_ids

    def test_find_parent_path(self, sample_tree) -> None:
        assert document.find_parent_path(sample_tree, "y") == ListPath.of("section", ("inner-cols", 1))
        assert document.find_parent_path(sample_tree, "q1") == ListPath.of(("faq", "e1"))
        assert document.find_parent_path(sample_tree, "intro") == ROOT
        assert document.find_parent_path(sample_tree, "missing") is None

    def test_block_depth(self, sample_tree) -> None:
        assert document.block_depth(sample_tree, "intro") == 0
        assert document.block_depth(sample_tree, "q1") == 1
        assert document.block_depth(sample_tree, "y") == 2
        assert document.block_depth(sample_tree, "missing") is None

    def test_find_block(self, sample_tree) -> None:
        assert document.find_block(sample_tree, "x").content == "x"
        assert document.find_block(sample_tree, "missing") is None


class TestValidateTree:
    """Test structural validation."""

    def test_sample_tree_is_valid(self, sample_tree) -> None:
        assert document.validate_tree(sample_tree) == []

    def test_duplicate_block_ids(self, sample_tree) -> None:
        problems = document.validate_tree((*sample_tree, paragraph("a")))
        assert len(problems) == 1
        assert "'a'" in problems[0]

    def test_invalid_column_widths(self) -> None:
        problems = document.validate_tree((columns_block("cols", [["a"], ["b"]], widths=[60, 60]),))
        assert problems == ["columns block 'cols' has invalid layout [60, 60]"]
