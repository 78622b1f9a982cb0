"""CLI entry point for outline-map."""

import json
import logging
import sys

import click

from outline_map.document import OutlineDocument
from outline_map.errors import SnapshotError
from outline_map.projector import Diagram
from outline_map.snapshot import Snapshot


def _diagram_json(diagram: Diagram) -> str:
    data = {
        "nodes": [
            {
                "id": n.id,
                "label": n.label,
                "depth": n.depth,
                "position": {"x": n.position.x, "y": n.position.y},
                "direction": n.side.value if n.side is not None else None,
                "hasChildren": n.has_children,
                "expanded": n.expanded,
                "line": n.source_line,
            }
            for n in diagram.nodes
        ],
        "edges": [
            {
                "id": e.id,
                "source": e.source,
                "target": e.target,
                "sourceHandle": e.source_handle,
                "targetHandle": e.target_handle,
            }
            for e in diagram.edges
        ],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--previous", "-p", "previous", type=click.Path(exists=True), default=None, help="Snapshot JSON the edit was made against")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["snapshot", "display", "diagram"]),
    default="snapshot",
    help="What to print: snapshot JSON, display outline text, or diagram JSON",
)
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--verbose", "-v", is_flag=True, help="Log layout and reconciliation diagnostics to stderr")
def main(input: str | None, previous: str | None, fmt: str, output: str | None, verbose: bool) -> None:
    """Outline text to a laid-out bidirectional tree diagram."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if input:
        try:
            with open(input, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    document = OutlineDocument()
    if previous:
        try:
            with open(previous, encoding="utf-8") as f:
                document = OutlineDocument.from_snapshot(Snapshot.from_json(f.read()))
        except OSError as e:
            click.echo(f"error: cannot read '{previous}': {e}", err=True)
            sys.exit(1)
        except SnapshotError as e:
            click.echo(f"snapshot error: {e}", err=True)
            sys.exit(1)

    document = document.set_text(text)

    if fmt == "display":
        rendered = document.display_text + "\n"
    elif fmt == "diagram":
        rendered = _diagram_json(document.diagram()) + "\n"
    else:
        rendered = document.to_snapshot().to_json() + "\n"

    if output:
        try:
            with open(output, "w", encoding="utf-8") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    main()
