"""``replicaview status`` and ``replicaview validate`` — one-shot views.

``status`` renders the aligned matrix once, either from the live status
server or from a saved ``/status`` JSON document.  ``validate`` checks a
saved document and lists every structural problem it finds.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from replicaview.config import config
from replicaview.matrix.engine import MatrixEngine
from replicaview.matrix.expansion import DetailExpansionController, ExpansionState
from replicaview.matrix.validation import SnapshotValidationError, parse_status
from replicaview.models.schema import get_profile
from replicaview.models.snapshot import NodeSnapshot
from replicaview.monitor.renderer import MatrixRenderer
from replicaview.provider.status import StatusProvider, StatusProviderError

console = Console()


def _print_issues(exc: SnapshotValidationError) -> None:
    console.print(f"[bold red]Malformed status document ({len(exc.issues)} issue(s)):[/bold red]")
    for issue in exc.issues:
        console.print(f"  [red]-[/red] {issue}")


def load_nodes(url: str | None, file: Path | None) -> list[NodeSnapshot]:
    """Read node snapshots from *file* when given, otherwise poll *url*.

    Exits with code 1 after printing the problem on any failure.
    """
    try:
        if file is not None:
            if not file.exists():
                console.print(f"[bold red]File not found:[/bold red] {file}")
                raise typer.Exit(code=1)
            return parse_status(file.read_text(encoding="utf-8"))
        provider = StatusProvider(url or config.status_url, timeout=config.request_timeout_seconds)
        return provider.poll() or []
    except SnapshotValidationError as exc:
        _print_issues(exc)
        raise typer.Exit(code=1) from exc
    except StatusProviderError as exc:
        console.print(f"[bold red]Status unavailable:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc


def status_cmd(
    url: Optional[str] = typer.Option(
        None, "--url", "-u", help="Status server root URL (defaults to REPLICAVIEW_STATUS_URL)."
    ),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Render a saved /status JSON document instead of polling."
    ),
    expand: Optional[list[int]] = typer.Option(
        None, "--expand", "-e", help="Node id whose peer detail rows to show (repeatable)."
    ),
    expand_all: bool = typer.Option(False, "--expand-all", help="Show peer detail for every node."),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Schema profile (v1, v2). Defaults to configuration."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the aligned matrix as JSON."),
) -> None:
    """Render the aligned sequence matrix once."""
    try:
        schema = get_profile(profile) if profile else config.profile
    except KeyError as exc:
        console.print(f"[bold red]{exc.args[0]}[/bold red]")
        raise typer.Exit(code=2) from exc

    nodes = load_nodes(url, file)
    controller = DetailExpansionController(ExpansionState.of(expand or []))
    if expand_all:
        controller.expand_all(n.id for n in nodes)
    expansion = controller.state
    matrix = MatrixEngine(schema).render(nodes, expansion)

    if as_json:
        console.print_json(json.dumps(matrix.model_dump(mode="json")))
        return
    MatrixRenderer(console=console).print_snapshot(nodes, matrix)


def validate_cmd(
    file: Path = typer.Argument(..., help="A saved /status JSON document."),
) -> None:
    """Validate a saved status document and list every problem found."""
    nodes = load_nodes(None, file)
    console.print(f"[green]Status document is valid:[/green] {len(nodes)} node(s).")
