"""Layout types shared by the layout engine, projector, and snapshots."""

from __future__ import annotations

from dataclasses import dataclass

from outline_map.types import Side


@dataclass(frozen=True)
class Point:
    """A 2D point in diagram coordinates (y grows downward)."""

    x: float
    y: float

    @classmethod
    def origin(cls) -> Point:
        return cls(0.0, 0.0)


@dataclass(frozen=True)
class NodeMetadata:
    """Per-node layout state. ``side`` is only set on depth-1 nodes."""

    position: Point
    expanded: bool = True
    side: Side | None = None


@dataclass(frozen=True)
class Box:
    """Height-aware bounding box of a placed node."""

    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps(self, other: Box, margin: float = 0) -> bool:
        """True when the boxes are closer than ``margin`` on both axes."""
        return not (
            self.x + self.width + margin <= other.x
            or other.x + other.width + margin <= self.x
            or self.y + self.height + margin <= other.y
            or other.y + other.height + margin <= self.y
        )


LayoutMap = dict[str, NodeMetadata]
