"""Caret position to node lookup, for centring the diagram on the edited line."""

from __future__ import annotations

from outline_map.ir.tree import Tree, iter_preorder


def line_at_offset(text: str, offset: int) -> int:
    """1-based line number holding character ``offset`` of ``text``."""
    offset = max(0, min(offset, len(text)))
    return text.count("\n", 0, offset) + 1


def node_id_at_offset(text: str, offset: int, tree: Tree) -> str | None:
    """Id of the node parsed from the caret's line, or None for non-list lines."""
    line = line_at_offset(text, offset)
    return next((node.id for node in iter_preorder(tree) if node.source_line == line), None)
