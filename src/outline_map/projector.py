"""Diagram projector — visible nodes and edges for a tree and its layout.

Collapsed nodes are emitted but their subtrees are not. Each edge is tagged
with the handles a renderer should connect so the connector leaves the parent
on the side its child sits on.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from outline_map.ir.tree import OutlineNode, Tree
from outline_map.layout.types import NodeMetadata, Point
from outline_map.types import Side


@dataclass
class DiagramNode:
    id: str
    label: str
    depth: int
    position: Point
    side: Side | None  # None for roots
    has_children: bool
    expanded: bool
    source_line: int = 0


@dataclass
class DiagramEdge:
    id: str
    source: str
    target: str
    source_handle: str
    target_handle: str


@dataclass
class Diagram:
    nodes: list[DiagramNode] = field(default_factory=list)
    edges: list[DiagramEdge] = field(default_factory=list)

    def node(self, node_id: str) -> DiagramNode | None:
        return next((n for n in self.nodes if n.id == node_id), None)


def _edge(parent_id: str, child_id: str, side: Side) -> DiagramEdge:
    facing = Side.Left if side is Side.Right else Side.Right
    return DiagramEdge(
        id=f"edge-{parent_id}-{child_id}",
        source=parent_id,
        target=child_id,
        source_handle=side.value,
        target_handle=facing.value,
    )


def project(tree: Tree, layout_map: Mapping[str, NodeMetadata]) -> Diagram:
    """Derive the visible diagram. Missing metadata means expanded, at the origin."""
    diagram = Diagram()

    def visit(node: OutlineNode, parent_id: str | None, inherited: Side) -> None:
        meta = layout_map.get(node.id)
        expanded = meta.expanded if meta is not None else True
        side = inherited
        if node.depth == 1 and meta is not None and meta.side is not None:
            side = meta.side

        diagram.nodes.append(
            DiagramNode(
                id=node.id,
                label=node.text,
                depth=node.depth,
                position=meta.position if meta is not None else Point.origin(),
                side=side if node.depth > 0 else None,
                has_children=node.has_children,
                expanded=expanded,
                source_line=node.source_line,
            )
        )
        if parent_id is not None:
            diagram.edges.append(_edge(parent_id, node.id, side))

        if expanded:
            for child in node.children:
                visit(child, node.id, side)

    for root in tree:
        visit(root, None, Side.default())
    return diagram
