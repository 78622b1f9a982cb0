"""Node size estimation from text.

Heights are estimated, not measured: wide (CJK and full-width) characters
count as wider than the rest, and the total width is wrapped into lines of the
node's usable text width.
"""

from __future__ import annotations

import math

from outline_map.config import DEFAULT_CONFIG, LayoutConfig
from outline_map.layout.types import Box, Point
from outline_map.types import Side

_WIDE_RANGES: tuple[tuple[int, int], ...] = (
    (0x3000, 0x9FFF),  # CJK symbols, kana, unified ideographs
    (0xFF00, 0xFFEF),  # half/full-width forms
)


def is_wide(char: str) -> bool:
    code = ord(char)
    return any(lo <= code <= hi for lo, hi in _WIDE_RANGES)


def text_width(text: str, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    return sum(config.wide_char_width if is_wide(ch) else config.narrow_char_width for ch in text)


def estimate_node_height(text: str, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    lines = math.ceil(text_width(text, config) / config.text_width)
    return max(config.node_height, lines * config.line_height + config.padding_y)


def column_x(depth: int, side: Side, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    if depth == 0:
        return 0.0
    return float(side.sign * depth * config.column_width)


def node_box(position: Point, height: float, config: LayoutConfig = DEFAULT_CONFIG) -> Box:
    return Box(x=position.x, y=position.y, width=config.node_width, height=height)
