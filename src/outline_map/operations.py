"""Structural tree operations.

Every operation works on a deep copy of the tree and returns the copy; the
caller's tree is never mutated. An operation that references an unknown id
raises before anything is committed, so a failed call leaves the caller's
state untouched.
"""

from __future__ import annotations

from collections.abc import Iterable

from outline_map.errors import InvalidMoveError, NodeNotFoundError
from outline_map.ir.index import TreeIndex
from outline_map.ir.tree import OutlineNode, Tree, all_node_ids, clone_tree, find_node
from outline_map.parsers.identity import generate_id
from outline_map.types import MarkerKind

DEFAULT_NODE_TEXT = "New node"


def _locate(tree: Tree, node_id: str) -> tuple[list[OutlineNode], int] | None:
    """Return the sibling list holding ``node_id`` and the node's index in it."""
    for position, node in enumerate(tree):
        if node.id == node_id:
            return tree, position
        found = _locate(node.children, node_id)
        if found is not None:
            return found
    return None


def _new_node(tree: Tree, text: str, depth: int, marker: MarkerKind) -> OutlineNode:
    return OutlineNode.new(generate_id(set(all_node_ids(tree))), text, depth, marker)


def _set_depths(node: OutlineNode, depth: int) -> None:
    node.depth = depth
    for child in node.children:
        _set_depths(child, depth + 1)


def add_child(tree: Tree, parent_id: str, text: str = DEFAULT_NODE_TEXT) -> tuple[Tree, str]:
    """Append a new last child under ``parent_id``. Returns (tree, new node id)."""
    new_tree = clone_tree(tree)
    parent = find_node(new_tree, parent_id)
    if parent is None:
        raise NodeNotFoundError(parent_id, "parent node")
    node = _new_node(new_tree, text, parent.depth + 1, parent.marker)
    parent.children.append(node)
    return new_tree, node.id


def _add_sibling(tree: Tree, sibling_id: str, text: str, offset: int) -> tuple[Tree, str]:
    new_tree = clone_tree(tree)
    found = _locate(new_tree, sibling_id)
    if found is None:
        raise NodeNotFoundError(sibling_id, "sibling node")
    siblings, position = found
    sibling = siblings[position]
    node = _new_node(new_tree, text, sibling.depth, sibling.marker)
    siblings.insert(position + offset, node)
    return new_tree, node.id


def add_sibling_after(tree: Tree, sibling_id: str, text: str = DEFAULT_NODE_TEXT) -> tuple[Tree, str]:
    return _add_sibling(tree, sibling_id, text, offset=1)


def add_sibling_before(tree: Tree, sibling_id: str, text: str = DEFAULT_NODE_TEXT) -> tuple[Tree, str]:
    return _add_sibling(tree, sibling_id, text, offset=0)


def delete(tree: Tree, node_id: str) -> Tree:
    """Remove a node together with its whole subtree."""
    new_tree = clone_tree(tree)
    found = _locate(new_tree, node_id)
    if found is None:
        raise NodeNotFoundError(node_id)
    siblings, position = found
    del siblings[position]
    return new_tree


def filter_redundant(tree: Tree, node_ids: Iterable[str]) -> list[str]:
    """Drop ids whose ancestor is also selected, and ids not in the tree."""
    index = TreeIndex.from_tree(tree)
    selected = list(dict.fromkeys(node_ids))
    chosen = set(selected)
    return [node_id for node_id in selected if node_id in index and not (index.ancestors(node_id) & chosen)]


def delete_many(tree: Tree, node_ids: Iterable[str]) -> Tree:
    """Remove several subtrees at once. Unknown ids are ignored."""
    targets = set(filter_redundant(tree, node_ids))

    def prune(nodes: Tree) -> Tree:
        kept: Tree = []
        for node in nodes:
            if node.id in targets:
                continue
            copy = node.clone()
            copy.children = prune(node.children)
            kept.append(copy)
        return kept

    return prune(tree)


def rename(tree: Tree, node_id: str, text: str) -> Tree:
    new_tree = clone_tree(tree)
    node = find_node(new_tree, node_id)
    if node is None:
        raise NodeNotFoundError(node_id)
    node.text = text
    return new_tree


def move(tree: Tree, node_id: str, new_parent_id: str | None) -> Tree:
    """Reparent a node as the last child of ``new_parent_id`` (None for a new root)."""
    new_tree = clone_tree(tree)
    index = TreeIndex.from_tree(new_tree)

    parent: OutlineNode | None = None
    if new_parent_id is not None:
        parent = index.node(new_parent_id)
        if parent is None:
            raise NodeNotFoundError(new_parent_id, "new parent node")
        if new_parent_id == node_id or node_id in index.ancestors(new_parent_id):
            raise InvalidMoveError(node_id, new_parent_id)

    node = index.node(node_id)
    if node is None:
        raise NodeNotFoundError(node_id)
    old_parent = index.parent(node_id)
    siblings = new_tree if old_parent is None else old_parent.children
    del siblings[index.sibling_index(node_id)]

    if parent is None:
        _set_depths(node, 0)
        new_tree.append(node)
    else:
        _set_depths(node, parent.depth + 1)
        parent.children.append(node)
    return new_tree


def recalculate_line_numbers(tree: Tree) -> Tree:
    """Number nodes 1..n in reading order, as in freshly serialized text."""
    new_tree = clone_tree(tree)
    line = 1

    def walk(nodes: Tree) -> None:
        nonlocal line
        for node in nodes:
            node.source_line = line
            line += 1
            walk(node.children)

    walk(new_tree)
    return new_tree
