"""Shared type definitions for outline-map.

Enums and small types used across the parser, IR, layout, and projector.
"""

from __future__ import annotations

from enum import Enum, auto


class MarkerKind(Enum):
    Unordered = auto()  # -, *, +
    Ordered = auto()  # 1.

    @classmethod
    def default(cls) -> MarkerKind:
        return cls.Unordered


class Side(Enum):
    """Half-plane occupied by a depth-1 branch and all of its descendants."""

    Left = "left"
    Right = "right"

    @classmethod
    def default(cls) -> Side:
        return cls.Right

    @property
    def sign(self) -> int:
        return -1 if self is Side.Left else 1

    @classmethod
    def for_x(cls, x: float) -> Side:
        return cls.Left if x < 0 else cls.Right
