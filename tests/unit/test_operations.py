"""Tests for outline_map.operations — structural edits on copies of the tree."""

import pytest

from outline_map.errors import InvalidMoveError, NodeNotFoundError
from outline_map.ir.tree import OutlineNode, find_node, iter_preorder, tree_shape
from outline_map.operations import (
    add_child,
    add_sibling_after,
    add_sibling_before,
    delete,
    delete_many,
    filter_redundant,
    move,
    recalculate_line_numbers,
    rename,
)
from outline_map.types import MarkerKind


def make_tree() -> list[OutlineNode]:
    """Root(r) -> [A(a) -> [A1(a1)], B(b)]; Other(o)."""
    a1 = OutlineNode(id="a1", text="A1", depth=2)
    a = OutlineNode(id="a", text="A", depth=1, children=[a1])
    b = OutlineNode(id="b", text="B", depth=1, marker=MarkerKind.Ordered)
    return [
        OutlineNode(id="r", text="Root", depth=0, children=[a, b]),
        OutlineNode(id="o", text="Other", depth=0),
    ]


def _ids(tree):
    return [n.id for n in iter_preorder(tree)]


class TestAdd:
    def test_add_child_appends_last(self):
        tree = make_tree()
        new_tree, new_id = add_child(tree, "r", "C")
        root = new_tree[0]
        assert [c.text for c in root.children] == ["A", "B", "C"]
        assert root.children[-1].id == new_id
        assert root.children[-1].depth == 1

    def test_add_child_does_not_mutate_input(self):
        tree = make_tree()
        before = tree_shape(tree)
        add_child(tree, "a", "X")
        assert tree_shape(tree) == before

    def test_add_child_inherits_parent_marker(self):
        new_tree, new_id = add_child(make_tree(), "b")
        assert find_node(new_tree, new_id).marker is MarkerKind.Ordered

    def test_add_sibling_after(self):
        new_tree, new_id = add_sibling_after(make_tree(), "a", "X")
        assert [c.id for c in new_tree[0].children] == ["a", new_id, "b"]
        assert find_node(new_tree, new_id).depth == 1

    def test_add_sibling_before(self):
        new_tree, new_id = add_sibling_before(make_tree(), "a", "X")
        assert [c.id for c in new_tree[0].children] == [new_id, "a", "b"]

    def test_add_sibling_of_root(self):
        new_tree, new_id = add_sibling_after(make_tree(), "r")
        assert [n.id for n in new_tree] == ["r", new_id, "o"]
        assert new_tree[1].depth == 0

    def test_new_id_is_unique(self):
        new_tree, new_id = add_child(make_tree(), "r")
        assert _ids(new_tree).count(new_id) == 1

    @pytest.mark.parametrize("op", [add_child, add_sibling_after, add_sibling_before])
    def test_unknown_target_raises(self, op):
        with pytest.raises(NodeNotFoundError) as excinfo:
            op(make_tree(), "missing")
        assert excinfo.value.node_id == "missing"


class TestDelete:
    def test_delete_removes_subtree(self):
        new_tree = delete(make_tree(), "a")
        assert _ids(new_tree) == ["r", "b", "o"]

    def test_delete_root(self):
        assert _ids(delete(make_tree(), "r")) == ["o"]

    def test_delete_unknown_raises_and_leaves_input(self):
        tree = make_tree()
        with pytest.raises(NodeNotFoundError):
            delete(tree, "missing")
        assert _ids(tree) == ["r", "a", "a1", "b", "o"]

    def test_filter_redundant_drops_descendants(self):
        assert filter_redundant(make_tree(), ["a1", "a", "o"]) == ["a", "o"]

    def test_filter_redundant_drops_unknown(self):
        assert filter_redundant(make_tree(), ["missing", "b"]) == ["b"]

    def test_delete_many(self):
        new_tree = delete_many(make_tree(), ["a1", "b", "o"])
        assert _ids(new_tree) == ["r", "a"]

    def test_delete_many_ancestor_and_descendant(self):
        new_tree = delete_many(make_tree(), ["r", "a1"])
        assert _ids(new_tree) == ["o"]

    def test_delete_many_does_not_mutate_input(self):
        tree = make_tree()
        delete_many(tree, ["a"])
        assert _ids(tree) == ["r", "a", "a1", "b", "o"]


class TestRename:
    def test_rename(self):
        new_tree = rename(make_tree(), "a1", "Renamed")
        assert find_node(new_tree, "a1").text == "Renamed"

    def test_rename_unknown_raises(self):
        with pytest.raises(NodeNotFoundError):
            rename(make_tree(), "missing", "X")


class TestMove:
    def test_move_under_other_parent_updates_depths(self):
        new_tree = move(make_tree(), "a", "o")
        other = new_tree[1]
        assert [c.id for c in other.children] == ["a"]
        assert other.children[0].depth == 1
        assert other.children[0].children[0].depth == 2

    def test_move_to_root(self):
        new_tree = move(make_tree(), "a1", None)
        assert [n.id for n in new_tree] == ["r", "o", "a1"]
        assert new_tree[-1].depth == 0

    def test_move_deeper(self):
        new_tree = move(make_tree(), "b", "a1")
        b = find_node(new_tree, "b")
        assert b.depth == 3

    def test_move_root_under_other_root(self):
        new_tree = move(make_tree(), "r", "o")
        assert [n.id for n in new_tree] == ["o"]
        assert _ids(new_tree) == ["o", "r", "a", "a1", "b"]
        assert [n.depth for n in iter_preorder(new_tree)] == [0, 1, 2, 3, 2]

    def test_move_leaves_input_untouched(self):
        tree = make_tree()
        move(tree, "b", "o")
        assert _ids(tree) == ["r", "a", "a1", "b", "o"]
        assert tree[1].children == []

    def test_move_unknown_parent_reports_parent_id(self):
        with pytest.raises(NodeNotFoundError) as excinfo:
            move(make_tree(), "a", "missing")
        assert excinfo.value.node_id == "missing"

    def test_move_unknown_node_raises(self):
        with pytest.raises(NodeNotFoundError):
            move(make_tree(), "missing", "r")

    def test_move_unknown_parent_raises(self):
        with pytest.raises(NodeNotFoundError):
            move(make_tree(), "a", "missing")

    def test_move_under_own_descendant_raises(self):
        with pytest.raises(InvalidMoveError):
            move(make_tree(), "r", "a1")

    def test_move_under_itself_raises(self):
        with pytest.raises(InvalidMoveError):
            move(make_tree(), "a", "a")


def test_recalculate_line_numbers():
    new_tree = recalculate_line_numbers(make_tree())
    assert [n.source_line for n in iter_preorder(new_tree)] == [1, 2, 3, 4, 5]
