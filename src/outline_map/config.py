"""Centralized configuration for outline-map."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry used by the layout engine, in diagram pixels."""

    node_width: float = 250
    node_height: float = 40  # minimum height of a node
    horizontal_gap: float = 30
    vertical_gap: float = 4
    min_vertical_gap: float = 4
    chrome_width: float = 100  # padding and buttons inside a node
    wide_char_width: float = 14
    narrow_char_width: float = 8
    line_height: float = 24
    padding_y: float = 16
    placement_iterations: int = 100
    resolve_iterations: int = 50

    @property
    def column_width(self) -> float:
        return self.node_width + self.horizontal_gap

    @property
    def text_width(self) -> float:
        return self.node_width - self.chrome_width


DEFAULT_CONFIG = LayoutConfig()
