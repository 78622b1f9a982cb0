"""Outline parser — indented list text into an OutlineNode forest.

Each line of the form ``<indent><marker> <content>`` becomes a node. Lines
that do not match are skipped, so a round trip through the tree drops
non-list content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from outline_map.ir.tree import OutlineNode, Tree
from outline_map.parsers.identity import extract_id, generate_id, strip_id
from outline_map.types import MarkerKind

LIST_ITEM_RE = re.compile(r"^([ \t]*)([-*+]|\d+\.)[ \t]+(.+)$")
_ORDERED_RE = re.compile(r"\d+\.")

TAB_WIDTH = 4
INDENT_UNIT = 2


@dataclass
class ListLine:
    """A single matched list line, before tree building."""

    line_number: int  # 1-based
    indent: str
    marker: str
    content: str  # raw content, annotation included

    @property
    def level(self) -> int:
        return indent_level(self.indent)

    @property
    def kind(self) -> MarkerKind:
        return MarkerKind.Ordered if _ORDERED_RE.fullmatch(self.marker) else MarkerKind.Unordered

    @property
    def text(self) -> str:
        return strip_id(self.content)

    @property
    def annotated_id(self) -> str | None:
        return extract_id(self.content)


def indent_level(indent: str) -> int:
    return len(indent.replace("\t", " " * TAB_WIDTH)) // INDENT_UNIT


def match_line(line: str) -> re.Match[str] | None:
    return LIST_ITEM_RE.match(line.rstrip("\r"))


def tokenize(text: str) -> list[ListLine]:
    """Return the list lines of ``text`` in order."""
    items: list[ListLine] = []
    for number, line in enumerate(text.split("\n"), start=1):
        m = match_line(line)
        if m:
            indent, marker, content = m.groups()
            items.append(ListLine(line_number=number, indent=indent, marker=marker, content=content))
    return items


def build_tree(lines: list[ListLine], ids: list[str]) -> Tree:
    """Nest ``lines`` by indent, giving the i-th line the id ``ids[i]``.

    The stored depth is always ``parent.depth + 1``, even where a line is
    indented by more than one unit past its parent.
    """
    roots: Tree = []
    stack: list[tuple[OutlineNode, int]] = []

    for raw, node_id in zip(lines, ids):
        level = raw.level
        while stack and stack[-1][1] >= level:
            stack.pop()

        parent = stack[-1][0] if stack else None
        node = OutlineNode(
            id=node_id,
            text=raw.text,
            depth=0 if parent is None else parent.depth + 1,
            marker=raw.kind,
            source_line=raw.line_number,
        )
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
        stack.append((node, level))

    return roots


def assign_annotated_ids(lines: list[ListLine]) -> list[str]:
    """Take ids from annotations; unannotated or duplicate lines get fresh ids."""
    taken = {raw.annotated_id for raw in lines if raw.annotated_id}
    seen: set[str] = set()
    ids: list[str] = []
    for raw in lines:
        node_id = raw.annotated_id
        if node_id is None or node_id in seen:
            node_id = generate_id(taken)
            taken.add(node_id)
        seen.add(node_id)
        ids.append(node_id)
    return ids


class OutlineParser:
    """Indented list outline parser."""

    def parse(self, src: str) -> Tree:
        lines = tokenize(src)
        return build_tree(lines, assign_annotated_ids(lines))
