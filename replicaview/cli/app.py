"""Main Typer application — imports and registers all CLI commands.

Entry point: ``replicaview`` (configured via pyproject.toml [project.scripts]).

Commands: status, validate, watch, process, propose, tick, ui.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from replicaview.cli.commands.node_cmd import process_cmd, propose_cmd, tick_cmd
from replicaview.cli.commands.status_cmd import status_cmd, validate_cmd
from replicaview.cli.commands.watch_cmd import watch_cmd
from replicaview.config import config

app = typer.Typer(
    name="replicaview",
    help="replicaview: aligned watermark and sequence status of protocol replicas.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (defaults to REPLICAVIEW_LOG_LEVEL)."
    ),
) -> None:
    """Install a Rich log handler at the configured level."""
    level = (log_level or ("DEBUG" if config.debug else config.log_level)).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


# Register subcommands
app.command(name="status", help="Render the aligned sequence matrix once.")(status_cmd)
app.command(name="validate", help="Validate a saved /status document.")(validate_cmd)
app.command(name="watch", help="Continuously poll and render the matrix.")(watch_cmd)
app.command(name="process", help="Process a node's outstanding actions.")(process_cmd)
app.command(name="propose", help="Propose a request through a node.")(propose_cmd)
app.command(name="tick", help="Advance a node's logical clock.")(tick_cmd)


@app.command(name="ui", help="Launch the Streamlit dashboard.")
def ui_cmd(
    status_url: Optional[str] = typer.Option(None, "--url", "-u", help="Status server root URL."),
    port: int = typer.Option(config.port, help="Dashboard port."),
) -> None:
    """Launch the replicaview dashboard (Streamlit)."""
    from replicaview.dashboard import app as dashboard_app

    if not dashboard_app.HAS_STREAMLIT:
        Console().print("[bold red]Streamlit is required for the dashboard.[/bold red]")
        Console().print("[dim]Install with: pip install replicaview[dashboard][/dim]")
        raise typer.Exit(code=1)

    env = dict(os.environ)
    if status_url:
        env["REPLICAVIEW_STATUS_URL"] = status_url
    script = Path(dashboard_app.__file__)
    result = subprocess.run(
        [
            sys.executable, "-m", "streamlit", "run", str(script),
            "--server.address", config.host,
            "--server.port", str(port),
        ],
        env=env,
        check=False,
    )
    raise typer.Exit(code=result.returncode)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
