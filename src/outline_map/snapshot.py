"""Snapshot (de)serialization.

A snapshot is what the persistence layer stores for one document::

    {
      "outlineText": "- Root <!-- id:abc12345 -->",
      "layout": {"abc12345": {"position": {"x": 0, "y": 0}, "expanded": true}},
      "formatVersion": 1,
      "lastModified": 1700000000000
    }

Storage itself is the caller's job.
"""

from __future__ import annotations

import json
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from outline_map.errors import SnapshotError
from outline_map.layout.types import LayoutMap, NodeMetadata, Point
from outline_map.types import Side

FORMAT_VERSION = 1


def now_ms() -> int:
    return int(time.time() * 1000)


def metadata_to_dict(meta: NodeMetadata) -> dict[str, Any]:
    data: dict[str, Any] = {
        "position": {"x": meta.position.x, "y": meta.position.y},
        "expanded": meta.expanded,
    }
    if meta.side is not None:
        data["direction"] = meta.side.value
    return data


def metadata_from_dict(node_id: str, data: Mapping[str, Any]) -> NodeMetadata:
    try:
        position = data["position"]
        point = Point(float(position["x"]), float(position["y"]))
        direction = data.get("direction")
        side = Side(direction) if direction is not None else None
        return NodeMetadata(position=point, expanded=bool(data.get("expanded", True)), side=side)
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"invalid layout entry for node {node_id!r}: {e}") from e


@dataclass
class Snapshot:
    outline_text: str
    layout: LayoutMap = field(default_factory=dict)
    format_version: int = FORMAT_VERSION
    last_modified: int = field(default_factory=now_ms)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outlineText": self.outline_text,
            "layout": {node_id: metadata_to_dict(meta) for node_id, meta in self.layout.items()},
            "formatVersion": self.format_version,
            "lastModified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Snapshot:
        if not isinstance(data, Mapping):
            raise SnapshotError("snapshot must be a JSON object")
        version = data.get("formatVersion", FORMAT_VERSION)
        if isinstance(version, bool) or version != FORMAT_VERSION:
            raise SnapshotError(f"unsupported snapshot format version: {version}")
        text = data.get("outlineText")
        if not isinstance(text, str):
            raise SnapshotError("snapshot is missing 'outlineText'")
        raw_layout = data.get("layout") or {}
        if not isinstance(raw_layout, Mapping):
            raise SnapshotError("snapshot 'layout' must be an object")
        try:
            last_modified = int(data.get("lastModified") or 0)
        except (TypeError, ValueError, OverflowError) as e:
            raise SnapshotError(f"snapshot 'lastModified' must be a number: {e}") from e
        return cls(
            outline_text=text,
            layout={node_id: metadata_from_dict(node_id, entry) for node_id, entry in raw_layout.items()},
            format_version=version,
            last_modified=last_modified,
        )

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> Snapshot:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"snapshot is not valid JSON: {e}") from e
        return cls.from_dict(data)
