"""Identity reconciliation — keep node ids stable across display-text edits.

The display text carries no identity annotations, so after every edit the
freshly parsed nodes are matched against the previous tree with three greedy
passes, each stricter key tried first:

  1. text + parent text + sibling index
  2. text + parent text (sibling moved)
  3. text + depth (reparented)

Within a pass the first unconsumed old node in reading order wins. Nodes left
unmatched get fresh ids. This is a deterministic heuristic, not a minimum
edit-distance matcher.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from outline_map.ir.tree import Tree, all_node_ids
from outline_map.parsers.identity import generate_id, has_identity_annotations
from outline_map.parsers.outline import build_tree, tokenize
from outline_map.serializer import annotate_text, ensure_identities

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchEntry:
    """A node flattened to the fields the matching passes compare."""

    text: str
    depth: int
    parent_text: str | None
    sibling_index: int
    node_id: str | None = None


@dataclass
class ReconcileResult:
    tree: Tree
    internal_text: str


MatchKey = Callable[[MatchEntry], tuple]

_PASSES: list[tuple[str, MatchKey]] = [
    ("position", lambda e: (e.text, e.parent_text, e.sibling_index)),
    ("parent", lambda e: (e.text, e.parent_text)),
    ("depth", lambda e: (e.text, e.depth)),
]


def flatten(tree: Tree) -> list[MatchEntry]:
    """Flatten a tree to match entries in reading order."""
    entries: list[MatchEntry] = []

    def walk(nodes: Tree, parent_text: str | None) -> None:
        for position, node in enumerate(nodes):
            entries.append(
                MatchEntry(
                    text=node.text,
                    depth=node.depth,
                    parent_text=parent_text,
                    sibling_index=position,
                    node_id=node.id,
                )
            )
            walk(node.children, node.text)

    walk(tree, None)
    return entries


def match_nodes(old_tree: Tree, new_tree: Tree) -> dict[int, str]:
    """Match new nodes to old ones.

    Returns:
        Mapping from a new node's reading-order index to the old node id it
        takes over. Unmatched new nodes are absent from the mapping.
    """
    old_entries = flatten(old_tree)
    new_entries = flatten(new_tree)
    pool: list[int] = list(range(len(old_entries)))
    mapping: dict[int, str] = {}

    for name, key in _PASSES:
        matched = 0
        for new_index, entry in enumerate(new_entries):
            if new_index in mapping:
                continue
            wanted = key(entry)
            for slot, old_index in enumerate(pool):
                if key(old_entries[old_index]) == wanted:
                    mapping[new_index] = old_entries[old_index].node_id
                    del pool[slot]
                    matched += 1
                    break
        logger.debug("reconcile pass %s matched %d node(s)", name, matched)

    return mapping


def reconcile(new_text: str, previous_tree: Tree | None) -> ReconcileResult:
    """Parse ``new_text`` and give its nodes ids stable against ``previous_tree``.

    Text that carries identity annotations is trusted as-is: annotated lines
    keep their ids and the rest get fresh ones, without matching. Never raises.
    """
    if has_identity_annotations(new_text):
        tree, text, _ = ensure_identities(new_text)
        return ReconcileResult(tree=tree, internal_text=text)

    lines = tokenize(new_text)
    if not previous_tree:
        taken: set[str] = set()
        ids = []
        for _ in lines:
            ids.append(generate_id(taken))
            taken.add(ids[-1])
        tree = build_tree(lines, ids)
    else:
        # Build once with placeholder ids so the matcher sees the new shape.
        shape = build_tree(lines, [""] * len(lines))
        mapping = match_nodes(previous_tree, shape)
        taken = set(all_node_ids(previous_tree))
        ids = []
        for index in range(len(lines)):
            node_id = mapping.get(index)
            if node_id is None:
                node_id = generate_id(taken)
                taken.add(node_id)
            ids.append(node_id)
        tree = build_tree(lines, ids)
        logger.debug("reconciled %d of %d node(s) against previous tree", len(mapping), len(lines))

    text, _ = annotate_text(new_text, tree)
    return ReconcileResult(tree=tree, internal_text=text)
