"""``replicaview watch`` — continuously poll and render the status matrix.

With automatic processing enabled, nodes reporting outstanding actions are
sent a process command after the configured delay, like the dashboard's
automatic processing modes.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from replicaview.config import config
from replicaview.matrix.engine import MatrixEngine
from replicaview.matrix.expansion import ExpansionState
from replicaview.models.schema import get_profile
from replicaview.monitor.renderer import MatrixRenderer
from replicaview.provider.commands import CommandDispatcher
from replicaview.provider.status import StatusProvider

console = Console()


def watch_cmd(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Status server root URL."),
    refresh_hz: Optional[float] = typer.Option(
        None, "--refresh", "-r", help="Refresh rate in Hz (defaults to 1 / poll interval)."
    ),
    expand: Optional[list[int]] = typer.Option(
        None, "--expand", "-e", help="Node id whose peer detail rows to show (repeatable)."
    ),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Schema profile."),
    auto_process: bool = typer.Option(
        False,
        "--auto-process",
        "-A",
        help="Process outstanding actions automatically (delay from REPLICAVIEW_PROCESS_MODE).",
    ),
) -> None:
    """Live view of the replicas.  Press Ctrl+C to exit."""
    try:
        schema = get_profile(profile) if profile else config.profile
    except KeyError as exc:
        console.print(f"[bold red]{exc.args[0]}[/bold red]")
        raise typer.Exit(code=2) from exc

    base_url = url or config.status_url
    provider = StatusProvider(base_url, timeout=config.request_timeout_seconds)

    dispatcher = None
    delay = None
    if auto_process:
        delay = config.process_delay_seconds
        if delay is None:
            console.print("[yellow]REPLICAVIEW_PROCESS_MODE is manual; not auto-processing.[/yellow]")
        else:
            dispatcher = CommandDispatcher(
                base_url, timeout=config.request_timeout_seconds, on_complete=provider.poll
            )

    hz = refresh_hz or 1.0 / max(config.poll_interval_seconds, 0.01)
    console.print(f"[dim]Watching {base_url} at {hz:.1f} Hz. Press Ctrl+C to exit.[/dim]")
    try:
        MatrixRenderer(console=console).render_live(
            provider,
            MatrixEngine(schema),
            expansion=ExpansionState.of(expand or []),
            refresh_hz=hz,
            dispatcher=dispatcher,
            process_delay=delay,
        )
    finally:
        if dispatcher is not None:
            dispatcher.close()
