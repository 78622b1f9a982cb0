"""Tests for outline_map.snapshot — JSON shape and validation."""

import json

import pytest

from outline_map.errors import SnapshotError
from outline_map.layout import NodeMetadata, Point
from outline_map.snapshot import FORMAT_VERSION, Snapshot
from outline_map.types import Side


def _snapshot():
    return Snapshot(
        outline_text="- A <!-- id:aaaa0001 -->\n  - B <!-- id:bbbb0002 -->",
        layout={
            "aaaa0001": NodeMetadata(position=Point(0, 22)),
            "bbbb0002": NodeMetadata(position=Point(-280, 0), expanded=False, side=Side.Left),
        },
        last_modified=1_700_000_000_000,
    )


def test_to_dict_shape():
    data = _snapshot().to_dict()
    assert data["outlineText"].startswith("- A")
    assert data["formatVersion"] == FORMAT_VERSION
    assert data["lastModified"] == 1_700_000_000_000
    assert data["layout"]["aaaa0001"] == {"position": {"x": 0, "y": 22}, "expanded": True}
    assert data["layout"]["bbbb0002"]["direction"] == "left"
    assert data["layout"]["bbbb0002"]["expanded"] is False


def test_json_restores_equal_snapshot():
    original = _snapshot()
    restored = Snapshot.from_json(original.to_json())
    assert restored == original


def test_missing_optional_fields_default():
    restored = Snapshot.from_dict({"outlineText": "- A", "layout": {"x": {"position": {"x": 1, "y": 2}}}})
    assert restored.layout["x"] == NodeMetadata(position=Point(1, 2))
    assert restored.format_version == FORMAT_VERSION


def test_invalid_json():
    with pytest.raises(SnapshotError):
        Snapshot.from_json("{not json")


def test_not_an_object():
    with pytest.raises(SnapshotError):
        Snapshot.from_json(json.dumps([1, 2]))


def test_missing_outline_text():
    with pytest.raises(SnapshotError):
        Snapshot.from_dict({"layout": {}})


def test_unsupported_version():
    with pytest.raises(SnapshotError, match="version"):
        Snapshot.from_dict({"outlineText": "", "formatVersion": 99})


def test_bad_layout_entry():
    with pytest.raises(SnapshotError, match="abc"):
        Snapshot.from_dict({"outlineText": "", "layout": {"abc": {"position": {"x": "nope"}}}})


@pytest.mark.parametrize("value", ["yesterday", [1], {"ms": 1}])
def test_bad_last_modified(value):
    with pytest.raises(SnapshotError, match="lastModified"):
        Snapshot.from_dict({"outlineText": "", "layout": {}, "lastModified": value})


@pytest.mark.parametrize("value", ["1", True, None])
def test_bad_format_version(value):
    with pytest.raises(SnapshotError, match="version"):
        Snapshot.from_dict({"outlineText": "", "formatVersion": value})


def test_bad_direction():
    with pytest.raises(SnapshotError):
        Snapshot.from_dict({"outlineText": "", "layout": {"abc": {"position": {"x": 0, "y": 0}, "direction": "up"}}})
