"""outline-map: indented outline text to a bidirectional tree diagram."""

from outline_map.config import LayoutConfig
from outline_map.document import OutlineDocument
from outline_map.ir.tree import OutlineNode, Tree
from outline_map.layout import (
    LayoutMap,
    NodeMetadata,
    Point,
    layout,
    move_nodes,
    relayout_subtree,
    resolve_overlaps,
)
from outline_map.operations import (
    add_child,
    add_sibling_after,
    add_sibling_before,
    delete,
    delete_many,
    move,
    rename,
)
from outline_map.parsers import parse
from outline_map.projector import Diagram, project
from outline_map.reconcile import ReconcileResult, reconcile
from outline_map.serializer import serialize
from outline_map.types import MarkerKind, Side

__all__ = [
    "Diagram",
    "LayoutConfig",
    "LayoutMap",
    "MarkerKind",
    "NodeMetadata",
    "OutlineDocument",
    "OutlineNode",
    "Point",
    "ReconcileResult",
    "Side",
    "Tree",
    "add_child",
    "add_sibling_after",
    "add_sibling_before",
    "delete",
    "delete_many",
    "layout",
    "move",
    "move_nodes",
    "parse",
    "project",
    "reconcile",
    "relayout_subtree",
    "rename",
    "resolve_overlaps",
    "serialize",
    "sync_outline",
]


def sync_outline(text: str, previous: OutlineDocument | None = None) -> OutlineDocument:
    """Apply edited outline text to ``previous`` (or start a new document).

    Args:
        text: Outline text, in display or internal (annotated) form.
        previous: The document the edit was made against; None for a new one.

    Returns:
        The updated document, with stable ids and a complete layout.
    """
    return (previous or OutlineDocument()).set_text(text)
