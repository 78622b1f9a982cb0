"""Bidirectional tree layout engine.

Roots sit in column x=0. Every depth-1 branch opens to the right or to the
left of its root and all of its descendants follow it, one column per depth.

Phases:
  1. Depth-first placement: children first, then the parent centred on its
     first and last child, each node snapped down to the nearest free slot.
     Nodes that already have a position keep it verbatim.
  2. Overlap resolution: per side, push colliding same-column nodes apart
     until nothing moves or the iteration cap is hit.

Both phases are bounded; hitting a cap logs a warning and returns the
best-effort layout.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping
from dataclasses import replace

from outline_map.config import DEFAULT_CONFIG, LayoutConfig
from outline_map.ir.index import TreeIndex
from outline_map.ir.tree import OutlineNode, Tree, content_map, iter_preorder
from outline_map.layout.sizing import column_x, estimate_node_height, node_box
from outline_map.layout.types import Box, LayoutMap, NodeMetadata, Point
from outline_map.types import Side

logger = logging.getLogger(__name__)


# ─── Depth-first Placement ───────────────────────────────────────────────────


class TreeLayout:
    """One placement run over a forest, merging with an existing layout map."""

    def __init__(
        self,
        existing: Mapping[str, NodeMetadata],
        overrides: Mapping[str, Side] | None = None,
        config: LayoutConfig = DEFAULT_CONFIG,
    ) -> None:
        self.existing = existing
        self.overrides = overrides or {}
        self.config = config
        self.result: LayoutMap = {}
        self.pinned: set[str] = set()
        self._placed: list[Box] = []
        self._heights: dict[str, float] = {}

    def height(self, node: OutlineNode) -> float:
        if node.id not in self._heights:
            self._heights[node.id] = estimate_node_height(node.text, self.config)
        return self._heights[node.id]

    def subtree_height(self, node: OutlineNode) -> float:
        own = self.height(node)
        if not node.children:
            return own
        gap = self.config.vertical_gap
        children = sum(self.subtree_height(child) for child in node.children) + gap * (len(node.children) - 1)
        return max(own, children)

    def child_side(self, child: OutlineNode, parent_depth: int, inherited: Side) -> Side:
        """Side for a child: depth-1 nodes resolve their own, deeper ones inherit."""
        if parent_depth > 0:
            return inherited
        if child.id in self.overrides:
            return self.overrides[child.id]
        stored = self.existing.get(child.id)
        if stored is not None and stored.side is not None:
            return stored.side
        return Side.default()

    def find_free_y(self, x: float, preferred_y: float, height: float) -> float:
        """Lowest y at or below ``preferred_y`` that clears every placed box."""
        y = preferred_y
        for _ in range(self.config.placement_iterations):
            box = Box(x=x, y=y, width=self.config.node_width, height=height)
            blocker = next((p for p in self._placed if box.overlaps(p, self.config.min_vertical_gap)), None)
            if blocker is None:
                return y
            y = blocker.bottom + self.config.vertical_gap
        logger.warning("placement at x=%s stopped after %d attempts; node may overlap", x, self.config.placement_iterations)
        return y

    def _commit(self, node: OutlineNode, meta: NodeMetadata) -> None:
        self.result[node.id] = meta
        self._placed.append(node_box(meta.position, self.height(node), self.config))

    def _place_children(self, node: OutlineNode, depth: int, start_y: float, side: Side) -> float:
        """Place the children top to bottom; returns the y after the last one."""
        child_y = start_y
        for child in node.children:
            used = self.place(child, depth + 1, child_y, self.child_side(child, depth, side))
            child_y += used + self.config.vertical_gap
        return child_y

    def place(self, node: OutlineNode, depth: int, start_y: float, side: Side) -> float:
        """Lay out ``node`` and its subtree from ``start_y``; returns the height used."""
        stored = self.existing.get(node.id)
        if stored is not None:
            meta = stored
            if depth == 1 and stored.side is None:
                meta = replace(stored, side=side)
            self._commit(node, meta)
            self.pinned.add(node.id)
            branch_side = meta.side if depth == 1 and meta.side is not None else side
            self._place_children(node, depth, start_y, branch_side)
            return self.subtree_height(node)

        x = column_x(depth, side, self.config)
        height = self.height(node)
        node_side = side if depth == 1 else None

        if not node.children:
            y = self.find_free_y(x, start_y, height)
            self._commit(node, NodeMetadata(position=Point(x, y), side=node_side))
            return height

        next_y = self._place_children(node, depth, start_y, side)
        first = self.result[node.children[0].id].position.y
        last = self.result[node.children[-1].id].position.y
        y = self.find_free_y(x, (first + last) / 2, height)
        self._commit(node, NodeMetadata(position=Point(x, y), side=node_side))
        return max(height, next_y - start_y - self.config.vertical_gap)

    def run(self, tree: Tree) -> LayoutMap:
        current_y = 0.0
        for root in tree:
            used = self.place(root, 0, current_y, Side.default())
            current_y += used + self.config.vertical_gap * 2
        return self.result


def layout(
    tree: Tree,
    existing: Mapping[str, NodeMetadata] | None = None,
    overrides: Mapping[str, Side] | None = None,
    config: LayoutConfig | None = None,
) -> LayoutMap:
    """Compute metadata for every node of ``tree``.

    Args:
        tree: The outline forest.
        existing: Sparse previous layout. Entries for nodes of the tree are
            kept verbatim; entries for ids no longer in the tree are carried
            over untouched.
        overrides: Side to use for depth-1 nodes, ahead of their stored side.
        config: Layout geometry.

    Returns:
        A new layout map with an entry for every node in the tree.
    """
    config = config or DEFAULT_CONFIG
    existing = existing or {}
    engine = TreeLayout(existing, overrides, config)
    placed = engine.run(tree)
    resolved = resolve_overlaps(placed, content_map(tree), config, fixed=engine.pinned)

    orphans = {node_id: meta for node_id, meta in existing.items() if node_id not in resolved}
    return {**orphans, **resolved}


# ─── Overlap Resolution ──────────────────────────────────────────────────────


def _resolve_side(
    result: LayoutMap,
    ids: list[str],
    heights: Mapping[str, float],
    fixed: Collection[str],
    config: LayoutConfig,
    separate_fixed: bool = False,
) -> bool:
    """Push apart colliding nodes of one side in place. Returns False if capped."""
    for _ in range(config.resolve_iterations):
        changed = False
        for i, a_id in enumerate(ids):
            for b_id in ids[i + 1 :]:
                a, b = result[a_id].position, result[b_id].position
                # Box.overlaps also checks x, so pairs offset by node_width plus the margin never collide.
                if abs(a.x - b.x) >= config.column_width:
                    continue
                box_a = node_box(a, heights[a_id], config)
                box_b = node_box(b, heights[b_id], config)
                if not box_a.overlaps(box_b, config.min_vertical_gap):
                    continue

                upper, lower = (a_id, b_id) if a.y <= b.y else (b_id, a_id)
                if lower in fixed:
                    if upper in fixed:
                        if not separate_fixed:
                            continue
                    else:
                        upper, lower = lower, upper

                anchor = result[upper].position
                moved = result[lower]
                new_y = anchor.y + heights[upper] + config.vertical_gap
                result[lower] = replace(moved, position=Point(moved.position.x, new_y))
                changed = True
        if not changed:
            return True
    return False


def resolve_overlaps(
    layout_map: Mapping[str, NodeMetadata],
    contents: Mapping[str, str] | None = None,
    config: LayoutConfig | None = None,
    fixed: Iterable[str] = (),
    separate_fixed: bool = False,
) -> LayoutMap:
    """Separate vertically colliding nodes of the same column.

    Left (x < 0) and right (x >= 0) nodes are resolved independently. Of two
    colliding nodes the lower one is moved just below the upper one; nodes in
    ``fixed`` are never moved for the sake of a node outside ``fixed``.

    Args:
        layout_map: Layout to adjust; not mutated.
        contents: Node id to text, used for height estimation. Missing ids
            get the minimum node height.
        config: Layout geometry.
        fixed: Ids held in place against every other node.
        separate_fixed: Still push apart two colliding ``fixed`` nodes, the
            lower one moving as usual.

    Returns:
        A new layout map.
    """
    config = config or DEFAULT_CONFIG
    contents = contents or {}
    result: LayoutMap = dict(layout_map)
    heights = {node_id: estimate_node_height(contents.get(node_id, ""), config) for node_id in result}
    frozen = frozenset(fixed)

    left = [node_id for node_id, meta in result.items() if meta.position.x < 0]
    right = [node_id for node_id, meta in result.items() if meta.position.x >= 0]
    for name, ids in (("left", left), ("right", right)):
        if not _resolve_side(result, ids, heights, frozen, config, separate_fixed):
            logger.warning(
                "overlap resolution on the %s side stopped after %d iterations; some nodes may overlap",
                name,
                config.resolve_iterations,
            )
    return result


# ─── Subtree Relayout and Moves ──────────────────────────────────────────────


def relayout_subtree(
    node_id: str,
    side: Side,
    tree: Tree,
    layout_map: Mapping[str, NodeMetadata],
    config: LayoutConfig | None = None,
) -> LayoutMap:
    """Lay a depth-1 branch out again on ``side``.

    The node and its descendants lose their metadata and are placed afresh;
    every other entry of ``layout_map`` is returned unchanged. An unknown id
    returns a copy of the input.
    """
    index = TreeIndex.from_tree(tree)
    if node_id not in index:
        logger.debug("relayout of unknown node %s ignored", node_id)
        return dict(layout_map)

    subtree = set(index.subtree_ids(node_id))
    remaining = {key: meta for key, meta in layout_map.items() if key not in subtree}
    return layout(tree, remaining, {node_id: side}, config)


def move_nodes(
    tree: Tree,
    layout_map: Mapping[str, NodeMetadata],
    moves: Mapping[str, Point],
    config: LayoutConfig | None = None,
) -> LayoutMap:
    """Apply several dropped positions at once (multi-select drag).

    A moved depth-1 node takes the side its new x falls on. When that flips
    its side, its descendants are laid out again on the new side, and the
    dropped position itself is kept. Finally one overlap pass runs over the
    whole map. Moved nodes hold their drop points against the rest of the
    map; two moved nodes dropped onto each other are still pushed apart.
    """
    config = config or DEFAULT_CONFIG
    index = TreeIndex.from_tree(tree)
    result: LayoutMap = dict(layout_map)
    flipped: dict[str, Side] = {}

    for node_id, position in moves.items():
        if node_id not in index:
            logger.debug("move of unknown node %s ignored", node_id)
            continue
        current = result.get(node_id)
        meta = replace(current, position=position) if current else NodeMetadata(position=position)
        if index.depth(node_id) == 1:
            new_side = Side.for_x(position.x)
            if new_side is not (meta.side or Side.default()):
                flipped[node_id] = new_side
            meta = replace(meta, side=new_side)
        result[node_id] = meta

    if flipped:
        for node_id in flipped:
            for descendant in index.subtree_ids(node_id)[1:]:
                if descendant not in moves:
                    result.pop(descendant, None)
        result = layout(tree, result, flipped, config)

    live = {node_id: meta for node_id, meta in result.items() if node_id in index}
    moved = [node_id for node_id in moves if node_id in index]
    resolved = resolve_overlaps(live, content_map(tree), config, fixed=moved, separate_fixed=True)
    return {**result, **resolved}


def move_node(
    tree: Tree,
    layout_map: Mapping[str, NodeMetadata],
    node_id: str,
    position: Point,
    config: LayoutConfig | None = None,
) -> LayoutMap:
    return move_nodes(tree, layout_map, {node_id: position}, config)


# ─── Housekeeping ────────────────────────────────────────────────────────────


def toggle_expanded(layout_map: Mapping[str, NodeMetadata], node_id: str) -> LayoutMap:
    """Flip a node's expanded flag; a node without metadata starts at the origin."""
    result: LayoutMap = dict(layout_map)
    current = result.get(node_id) or NodeMetadata(position=Point.origin())
    result[node_id] = replace(current, expanded=not current.expanded)
    return result


def prune_orphans(tree: Tree, layout_map: Mapping[str, NodeMetadata]) -> LayoutMap:
    """Drop entries whose ids are no longer in the tree."""
    live = {node.id for node in iter_preorder(tree)}
    return {node_id: meta for node_id, meta in layout_map.items() if node_id in live}
