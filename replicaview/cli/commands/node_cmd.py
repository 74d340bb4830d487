"""``replicaview process|propose|tick NODE_ID`` — per-node commands."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from replicaview.config import config
from replicaview.provider.commands import CommandDispatchError, CommandDispatcher, NodeCommand

console = Console()


def _run(command: NodeCommand, node_id: int, url: str | None, payload: str | None = None) -> None:
    dispatcher = CommandDispatcher(url or config.status_url, timeout=config.request_timeout_seconds)
    try:
        if command is NodeCommand.PROPOSE:
            dispatcher.propose(node_id, payload)
        else:
            getattr(dispatcher, command.value)(node_id)
    except CommandDispatchError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc
    console.print(f"[green]{command.value}[/green] sent to node {node_id}.")


def process_cmd(
    node_id: int = typer.Argument(..., help="Node to process."),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Status server root URL."),
) -> None:
    """Process a node's outstanding actions."""
    _run(NodeCommand.PROCESS, node_id, url)


def propose_cmd(
    node_id: int = typer.Argument(..., help="Node to propose through."),
    payload: Optional[str] = typer.Option(
        None, "--payload", help="Request body (a random value when omitted)."
    ),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Status server root URL."),
) -> None:
    """Propose a request through a node."""
    _run(NodeCommand.PROPOSE, node_id, url, payload)


def tick_cmd(
    node_id: int = typer.Argument(..., help="Node to tick."),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Status server root URL."),
) -> None:
    """Advance a node's logical clock."""
    _run(NodeCommand.TICK, node_id, url)
