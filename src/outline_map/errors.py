"""Exceptions raised by outline-map."""

from __future__ import annotations


class NodeNotFoundError(LookupError):
    """A structural operation referenced a node id that is not in the tree."""

    def __init__(self, node_id: str, role: str = "node") -> None:
        super().__init__(f"{role} not found: {node_id}")
        self.node_id = node_id
        self.role = role


class InvalidMoveError(ValueError):
    """A node cannot be reparented under itself or one of its descendants."""

    def __init__(self, node_id: str, new_parent_id: str) -> None:
        super().__init__(f"cannot move {node_id} under its own descendant {new_parent_id}")
        self.node_id = node_id
        self.new_parent_id = new_parent_id


class SnapshotError(ValueError):
    """A persisted snapshot is malformed or has an unsupported format version."""
