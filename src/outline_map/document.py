"""Outline document — the tree and layout pair threaded through the core.

An OutlineDocument is an immutable value. Every edit returns a new document;
a structural edit that fails (unknown id, invalid move) is logged and returns
the document unchanged, so callers can treat failures as no-ops.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace

from outline_map import operations
from outline_map.config import DEFAULT_CONFIG, LayoutConfig
from outline_map.errors import InvalidMoveError, NodeNotFoundError
from outline_map.ir.index import TreeIndex
from outline_map.ir.tree import Tree, content_map
from outline_map.layout import engine
from outline_map.layout.types import LayoutMap, Point
from outline_map.parsers.identity import has_identity_annotations
from outline_map.projector import Diagram, project
from outline_map.reconcile import reconcile
from outline_map.serializer import display_text, internal_text
from outline_map.snapshot import Snapshot, now_ms
from outline_map.types import Side

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlineDocument:
    tree: Tree = field(default_factory=list)
    layout: LayoutMap = field(default_factory=dict)
    text: str = ""  # internal (annotated) form
    last_modified: int = 0
    config: LayoutConfig = DEFAULT_CONFIG

    # ─── Text edits ──────────────────────────────────────────────────────

    @classmethod
    def from_text(cls, text: str, config: LayoutConfig = DEFAULT_CONFIG) -> OutlineDocument:
        return cls(config=config).set_text(text)

    def set_text(self, text: str) -> OutlineDocument:
        """Replace the outline with edited text, keeping ids and positions where possible."""
        annotated = has_identity_annotations(text)
        result = reconcile(text, self.tree)

        fresh = not annotated and not self.layout
        existing: LayoutMap = {} if fresh else self.layout
        overrides = {} if fresh else {node_id: meta.side for node_id, meta in self.layout.items() if meta.side}
        new_layout = engine.layout(result.tree, existing, overrides, self.config)
        return replace(self, tree=result.tree, layout=new_layout, text=result.internal_text, last_modified=now_ms())

    # ─── Structural edits ────────────────────────────────────────────────

    def _regenerate(self, tree: Tree, preserve_positions: bool) -> OutlineDocument:
        if preserve_positions:
            new_layout = engine.resolve_overlaps(
                engine.layout(tree, self.layout, config=self.config), content_map(tree), self.config
            )
        else:
            new_layout = engine.layout(tree, {}, config=self.config)
        return replace(self, tree=tree, layout=new_layout, text=internal_text(tree), last_modified=now_ms())

    def _apply(self, description: str, change: Callable[[Tree], Tree], preserve_positions: bool) -> OutlineDocument:
        try:
            tree = change(self.tree)
        except (NodeNotFoundError, InvalidMoveError) as e:
            logger.info("%s ignored: %s", description, e)
            return self
        return self._regenerate(tree, preserve_positions)

    def _add(self, description: str, add: Callable[[Tree], tuple[Tree, str]]) -> tuple[OutlineDocument, str | None]:
        try:
            tree, new_id = add(self.tree)
        except NodeNotFoundError as e:
            logger.info("%s ignored: %s", description, e)
            return self, None
        return self._regenerate(tree, preserve_positions=False), new_id

    def add_child(self, parent_id: str, text: str = operations.DEFAULT_NODE_TEXT) -> tuple[OutlineDocument, str | None]:
        return self._add("add child", lambda tree: operations.add_child(tree, parent_id, text))

    def add_sibling_after(
        self, sibling_id: str, text: str = operations.DEFAULT_NODE_TEXT
    ) -> tuple[OutlineDocument, str | None]:
        return self._add("add sibling", lambda tree: operations.add_sibling_after(tree, sibling_id, text))

    def add_sibling_before(
        self, sibling_id: str, text: str = operations.DEFAULT_NODE_TEXT
    ) -> tuple[OutlineDocument, str | None]:
        return self._add("add sibling before", lambda tree: operations.add_sibling_before(tree, sibling_id, text))

    def delete(self, node_id: str) -> OutlineDocument:
        return self._apply("delete", lambda tree: operations.delete(tree, node_id), preserve_positions=True)

    def delete_many(self, node_ids: Iterable[str]) -> OutlineDocument:
        ids = list(node_ids)
        if not ids:
            return self
        return self._apply("delete nodes", lambda tree: operations.delete_many(tree, ids), preserve_positions=True)

    def rename(self, node_id: str, text: str) -> OutlineDocument:
        return self._apply("rename", lambda tree: operations.rename(tree, node_id, text), preserve_positions=True)

    def move(self, node_id: str, new_parent_id: str | None) -> OutlineDocument:
        """Reparent a node; the moved subtree is laid out afresh."""
        try:
            tree = operations.move(self.tree, node_id, new_parent_id)
        except (NodeNotFoundError, InvalidMoveError) as e:
            logger.info("move ignored: %s", e)
            return self
        moved = set(TreeIndex.from_tree(tree).subtree_ids(node_id))
        kept = {key: meta for key, meta in self.layout.items() if key not in moved}
        new_layout = engine.layout(tree, kept, config=self.config)
        return replace(self, tree=tree, layout=new_layout, text=internal_text(tree), last_modified=now_ms())

    # ─── Layout edits ────────────────────────────────────────────────────

    def move_nodes(self, moves: Mapping[str, Point]) -> OutlineDocument:
        new_layout = engine.move_nodes(self.tree, self.layout, moves, self.config)
        return replace(self, layout=new_layout, last_modified=now_ms())

    def move_node(self, node_id: str, position: Point) -> OutlineDocument:
        return self.move_nodes({node_id: position})

    def set_side(self, node_id: str, side: Side) -> OutlineDocument:
        new_layout = engine.relayout_subtree(node_id, side, self.tree, self.layout, self.config)
        return replace(self, layout=new_layout, last_modified=now_ms())

    def toggle_expanded(self, node_id: str) -> OutlineDocument:
        return replace(self, layout=engine.toggle_expanded(self.layout, node_id), last_modified=now_ms())

    def recalculate_layout(self) -> OutlineDocument:
        """Discard every position and lay the whole tree out from scratch."""
        return replace(self, layout=engine.layout(self.tree, {}, config=self.config), last_modified=now_ms())

    def prune(self) -> OutlineDocument:
        return replace(self, layout=engine.prune_orphans(self.tree, self.layout))

    # ─── Views ───────────────────────────────────────────────────────────

    @property
    def display_text(self) -> str:
        return display_text(self.tree)

    def diagram(self) -> Diagram:
        return project(self.tree, self.layout)

    def to_snapshot(self) -> Snapshot:
        return Snapshot(outline_text=self.text, layout=dict(self.layout), last_modified=self.last_modified)

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, config: LayoutConfig = DEFAULT_CONFIG) -> OutlineDocument:
        """Restore a document; the stored layout is kept for every annotated node."""
        result = reconcile(snapshot.outline_text, None)
        new_layout = engine.layout(result.tree, snapshot.layout, config=config)
        return cls(
            tree=result.tree,
            layout=new_layout,
            text=result.internal_text,
            last_modified=snapshot.last_modified,
            config=config,
        )

