"""Tree index — wraps an outline forest in a networkx DiGraph.

Parent, sibling and descendant queries are answered from the graph instead of
walking the tree, which keeps drag and structural-edit paths cheap. The index
is a read-only view built from a Tree snapshot; rebuild it after any change.
"""

from __future__ import annotations

import networkx as nx

from outline_map.ir.tree import OutlineNode, Tree


class TreeIndex:
    """Graph view of an outline forest, edges point from parent to child."""

    def __init__(self, digraph: nx.DiGraph, roots: list[str]) -> None:
        self.digraph = digraph
        self.roots = roots

    @classmethod
    def from_tree(cls, tree: Tree) -> TreeIndex:
        """Build a TreeIndex from a Tree."""
        digraph: nx.DiGraph = nx.DiGraph()
        roots: list[str] = []
        for position, node in enumerate(tree):
            roots.append(node.id)
            _add_subtree(digraph, node, parent_id=None, sibling_index=position)
        return cls(digraph=digraph, roots=roots)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.digraph

    def __len__(self) -> int:
        return self.digraph.number_of_nodes()

    def node(self, node_id: str) -> OutlineNode | None:
        if node_id not in self.digraph:
            return None
        return self.digraph.nodes[node_id]["data"]

    def parent(self, node_id: str) -> OutlineNode | None:
        if node_id not in self.digraph:
            return None
        preds = list(self.digraph.predecessors(node_id))
        return self.digraph.nodes[preds[0]]["data"] if preds else None

    def depth(self, node_id: str) -> int | None:
        if node_id not in self.digraph:
            return None
        return self.digraph.nodes[node_id]["depth"]

    def sibling_index(self, node_id: str) -> int | None:
        if node_id not in self.digraph:
            return None
        return self.digraph.nodes[node_id]["sibling_index"]

    def ancestors(self, node_id: str) -> set[str]:
        if node_id not in self.digraph:
            return set()
        return nx.ancestors(self.digraph, node_id)

    def subtree_ids(self, node_id: str) -> list[str]:
        """The node and all of its descendants, in reading order."""
        if node_id not in self.digraph:
            return []
        return list(nx.dfs_preorder_nodes(self.digraph, node_id))


def _add_subtree(
    digraph: nx.DiGraph,
    node: OutlineNode,
    parent_id: str | None,
    sibling_index: int,
) -> None:
    depth = 0 if parent_id is None else digraph.nodes[parent_id]["depth"] + 1
    digraph.add_node(node.id, data=node, depth=depth, sibling_index=sibling_index)
    if parent_id is not None:
        digraph.add_edge(parent_id, node.id)
    for position, child in enumerate(node.children):
        _add_subtree(digraph, child, parent_id=node.id, sibling_index=position)
