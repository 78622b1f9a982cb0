"""Smoke tests: imports work, CLI produces snapshots, display text and diagrams."""

import json

from click.testing import CliRunner

from outline_map.__main__ import main


def test_import():
    import outline_map

    assert outline_map is not None


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "bidirectional tree diagram" in result.output


def test_cli_snapshot_from_stdin():
    runner = CliRunner()
    result = runner.invoke(main, [], input="- A\n  - B\n")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["formatVersion"] == 1
    assert "<!-- id:" in data["outlineText"]
    assert len(data["layout"]) == 2


def test_cli_display_format():
    runner = CliRunner()
    result = runner.invoke(main, ["--format", "display"], input="- A\n  * B\nprose\n")
    assert result.exit_code == 0
    assert result.output == "- A\n  - B\n"


def test_cli_diagram_format():
    runner = CliRunner()
    result = runner.invoke(main, ["-f", "diagram"], input="- A\n  - B\n")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [n["label"] for n in data["nodes"]] == ["A", "B"]
    assert data["edges"][0]["sourceHandle"] == "right"


def test_cli_previous_snapshot_keeps_ids(tmp_path):
    runner = CliRunner()
    first = runner.invoke(main, [], input="- A\n  - B\n")
    snapshot_file = tmp_path / "doc.json"
    snapshot_file.write_text(first.output)
    first_data = json.loads(first.output)

    second = runner.invoke(main, ["--previous", str(snapshot_file)], input="- A\n  - B\n  - C\n")
    assert second.exit_code == 0
    second_data = json.loads(second.output)
    for node_id, entry in first_data["layout"].items():
        assert second_data["layout"][node_id] == entry
    assert len(second_data["layout"]) == 3


def test_cli_bad_snapshot(tmp_path):
    snapshot_file = tmp_path / "bad.json"
    snapshot_file.write_text("{nope")
    runner = CliRunner()
    result = runner.invoke(main, ["--previous", str(snapshot_file)], input="- A\n")
    assert result.exit_code == 1
    assert "snapshot error" in result.output


def test_cli_output_file(tmp_path):
    out = tmp_path / "out.txt"
    runner = CliRunner()
    result = runner.invoke(main, ["-f", "display", "-o", str(out)], input="- A\n")
    assert result.exit_code == 0
    assert out.read_text() == "- A\n"


def test_cli_snapshot_with_bad_timestamp(tmp_path):
    snapshot_file = tmp_path / "bad.json"
    snapshot_file.write_text('{"outlineText": "- A", "layout": {}, "formatVersion": 1, "lastModified": "yesterday"}')
    runner = CliRunner()
    result = runner.invoke(main, ["--previous", str(snapshot_file)], input="- A\n")
    assert result.exit_code == 1
    assert "snapshot error" in result.output
    assert isinstance(result.exception, SystemExit)
