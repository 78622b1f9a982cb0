"""Outline serializer — Tree back to indented list text.

Two forms exist: the internal form carries an identity annotation on every
line and is what gets persisted; the display form carries none and is what
the user edits.
"""

from __future__ import annotations

from outline_map.ir.tree import OutlineNode, Tree, iter_preorder
from outline_map.parsers.identity import embed_id, extract_id, strip_id
from outline_map.parsers.outline import assign_annotated_ids, build_tree, match_line, tokenize
from outline_map.types import MarkerKind

DEFAULT_INDENT = "  "
DEFAULT_MARKER = "-"
ORDERED_MARKER = "1."


def node_line(node: OutlineNode, depth: int, embed_identity: bool, indent: str, marker: str) -> str:
    bullet = ORDERED_MARKER if node.marker is MarkerKind.Ordered else marker
    text = embed_id(node.text, node.id) if embed_identity else node.text
    return f"{indent * depth}{bullet} {text}"


def _tree_lines(tree: Tree, depth: int, embed_identity: bool, indent: str, marker: str) -> list[str]:
    lines: list[str] = []
    for node in tree:
        lines.append(node_line(node, depth, embed_identity, indent, marker))
        lines.extend(_tree_lines(node.children, depth + 1, embed_identity, indent, marker))
    return lines


def serialize(
    tree: Tree,
    embed_identity: bool = False,
    indent: str = DEFAULT_INDENT,
    marker: str = DEFAULT_MARKER,
) -> str:
    """Render a Tree as outline text, one line per node."""
    return "\n".join(_tree_lines(tree, 0, embed_identity, indent, marker))


def internal_text(tree: Tree) -> str:
    return serialize(tree, embed_identity=True)


def display_text(tree: Tree) -> str:
    return serialize(tree, embed_identity=False)


def annotate_text(text: str, tree: Tree) -> tuple[str, bool]:
    """Embed the ids of ``tree`` into the list lines of ``text``.

    ``tree`` must have been built from ``text``: the n-th list line receives
    the id of the n-th node in reading order. Non-list lines and lines that
    already carry the right annotation are kept verbatim.

    Returns:
        The annotated text and whether any line changed.
    """
    nodes = iter(iter_preorder(tree))
    out: list[str] = []
    changed = False
    for line in text.split("\n"):
        m = match_line(line)
        node = next(nodes, None) if m else None
        if m is None or node is None:
            out.append(line)
            continue
        indent, marker, content = m.groups()
        if extract_id(content) == node.id:
            out.append(line)
            continue
        out.append(f"{indent}{marker} {embed_id(strip_id(content), node.id)}")
        changed = True
    return "\n".join(out), changed


def replace_node_text(text: str, node_id: str, new_text: str) -> str:
    """Rewrite the content of the annotated line carrying ``node_id``.

    Indent and marker are kept; text without that annotation is returned
    unchanged.
    """
    lines = text.split("\n")
    for raw in tokenize(text):
        if raw.annotated_id == node_id:
            lines[raw.line_number - 1] = f"{raw.indent}{raw.marker} {new_text} <!-- id:{node_id} -->"
            break
    return "\n".join(lines)


def ensure_identities(text: str) -> tuple[Tree, str, bool]:
    """Parse ``text`` and annotate every list line that lacks its id.

    Returns:
        The tree, the annotated text and whether the text changed.
    """
    lines = tokenize(text)
    tree = build_tree(lines, assign_annotated_ids(lines))
    annotated, changed = annotate_text(text, tree)
    return tree, annotated, changed
