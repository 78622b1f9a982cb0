"""Outline tree data structures.

An outline is an ordered forest: a list of root-level OutlineNode values, each
owning its children exclusively. Child order is the reading order.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from outline_map.types import MarkerKind


@dataclass
class OutlineNode:
    id: str
    text: str
    depth: int = 0
    marker: MarkerKind = field(default_factory=MarkerKind.default)
    children: list[OutlineNode] = field(default_factory=list)
    source_line: int = 0  # 1-based; 0 when the node was not parsed from text

    @classmethod
    def new(cls, id: str, text: str, depth: int, marker: MarkerKind = MarkerKind.Unordered) -> OutlineNode:
        return cls(id=id, text=text, depth=depth, marker=marker)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def clone(self) -> OutlineNode:
        return OutlineNode(
            id=self.id,
            text=self.text,
            depth=self.depth,
            marker=self.marker,
            children=[child.clone() for child in self.children],
            source_line=self.source_line,
        )


Tree = list[OutlineNode]


def clone_tree(tree: Tree) -> Tree:
    return [node.clone() for node in tree]


def iter_preorder(tree: Tree) -> Iterator[OutlineNode]:
    """Yield every node in reading order (parent before children)."""
    for node in tree:
        yield node
        yield from iter_preorder(node.children)


def find_node(tree: Tree, node_id: str) -> OutlineNode | None:
    return next((node for node in iter_preorder(tree) if node.id == node_id), None)


def all_node_ids(tree: Tree) -> list[str]:
    return [node.id for node in iter_preorder(tree)]


def content_map(tree: Tree) -> dict[str, str]:
    """Map each node id to its display text (feeds height estimation)."""
    return {node.id: node.text for node in iter_preorder(tree)}


def tree_shape(tree: Tree) -> list[tuple[str, int]]:
    """Return (text, depth) pairs in reading order, ignoring identity."""
    return [(node.text, node.depth) for node in iter_preorder(tree)]
