"""Layout engine public API."""

from __future__ import annotations

from outline_map.layout.engine import (
    TreeLayout,
    layout,
    move_node,
    move_nodes,
    prune_orphans,
    relayout_subtree,
    resolve_overlaps,
    toggle_expanded,
)
from outline_map.layout.sizing import column_x, estimate_node_height, is_wide, node_box, text_width
from outline_map.layout.types import Box, LayoutMap, NodeMetadata, Point

__all__ = [
    "Box",
    "LayoutMap",
    "NodeMetadata",
    "Point",
    "TreeLayout",
    "column_x",
    "estimate_node_height",
    "is_wide",
    "layout",
    "move_node",
    "move_nodes",
    "node_box",
    "prune_orphans",
    "relayout_subtree",
    "resolve_overlaps",
    "text_width",
    "toggle_expanded",
]
