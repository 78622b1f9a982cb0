"""Intermediate representation: outline tree and its graph index."""

from outline_map.ir.index import TreeIndex
from outline_map.ir.tree import (
    OutlineNode,
    Tree,
    all_node_ids,
    clone_tree,
    content_map,
    find_node,
    iter_preorder,
    tree_shape,
)

__all__ = [
    "OutlineNode",
    "Tree",
    "TreeIndex",
    "all_node_ids",
    "clone_tree",
    "content_map",
    "find_node",
    "iter_preorder",
    "tree_shape",
]
