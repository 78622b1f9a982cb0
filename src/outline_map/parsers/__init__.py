"""Outline parsing and identity annotations."""

from __future__ import annotations

from outline_map.ir.tree import Tree
from outline_map.parsers.identity import (
    embed_id,
    extract_id,
    generate_id,
    has_identity_annotations,
    strip_id,
)
from outline_map.parsers.outline import OutlineParser, tokenize

__all__ = [
    "OutlineParser",
    "embed_id",
    "extract_id",
    "generate_id",
    "has_identity_annotations",
    "parse",
    "strip_id",
    "tokenize",
]


def parse(src: str) -> Tree:
    """Parse outline text into a Tree. Never raises; non-list lines are skipped."""
    return OutlineParser().parse(src)
