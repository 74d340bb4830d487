"""Rich terminal renderer for the replica status matrix.

Turns an ``AlignedMatrix`` (plus the node snapshots it came from) into Rich
renderables, with color-coded sequence states and an optional continuous
``Rich.Live`` mode driven by a ``StatusProvider``.

Color scheme
------------
- yellow    : sequence in progress (queued, digested, validated, prepared, ...)
- red       : invalid
- green     : committed / checkpoint agreed
- magenta   : unknown state code
- grey      : offset and padding filler
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import Future
from functools import partial
from typing import TYPE_CHECKING

from rich.columns import Columns
from rich.console import Console, Group
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from replicaview.matrix.expansion import COLLAPSED, ExpansionState
from replicaview.matrix.validation import SnapshotValidationError
from replicaview.models.matrix import (
    AlignedMatrix,
    Cell,
    CheckpointRow,
    CheckpointStatus,
    NodeRowGroup,
)
from replicaview.provider.commands import NodeCommand
from replicaview.provider.status import StatusProviderError

if TYPE_CHECKING:
    from replicaview.matrix.engine import MatrixEngine
    from replicaview.models.snapshot import NodeSnapshot
    from replicaview.provider.commands import CommandDispatcher
    from replicaview.provider.status import StatusProvider

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Color class -> Rich style mapping
# ---------------------------------------------------------------------------

_CELL_STYLES: dict[str, str] = {
    "empty": "",
    "in-progress": "black on yellow",
    "invalid": "bold white on red",
    "committed": "black on green",
    "checkpoint": "bold cyan",
    "unknown": "bold magenta",
    "offset": "on grey15",
    "padding": "on grey35",
}

_CHECKPOINT_STYLES: dict[CheckpointStatus, str] = {
    CheckpointStatus.AGREED: "bold green",
    CheckpointStatus.NETWORK_QUORUM_ONLY: "bold yellow",
    CheckpointStatus.LOCAL_ONLY: "cyan",
    CheckpointStatus.PENDING: "dim",
}

_SPAN_FILL = "─"


def _cell_text(cell: Cell) -> Text:
    return Text(cell.text or " ", style=_CELL_STYLES.get(cell.color_class, ""))


def _log_failure(node_id: int, future: Future[None]) -> None:
    exc = future.exception()
    if exc is not None:
        logger.warning("Automatic processing of node %d failed: %s", node_id, exc)


class MatrixRenderer:
    """Renders ``AlignedMatrix`` as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._pending: dict[int, Future[None]] = {}

    # ------------------------------------------------------------------
    # Single snapshot render
    # ------------------------------------------------------------------

    def render_snapshot(
        self,
        nodes: Sequence[NodeSnapshot],
        matrix: AlignedMatrix,
        *,
        error: str | None = None,
    ) -> Panel:
        """Render action counters and the aligned matrix as one Panel."""
        parts: list = []
        if nodes:
            parts.append(Columns([self._build_actions_table(n) for n in nodes]))
            parts.append(Text(""))

        if matrix.is_empty:
            parts.append(Text.from_markup("[dim]Nothing to render yet.[/dim]"))
        else:
            parts.append(self.build_matrix_table(matrix))

        summary_parts: list[str] = [f"[bold]Nodes:[/bold] {len(nodes)}"]
        if not matrix.is_empty:
            summary_parts.append(
                f"[bold]Window:[/bold] [{matrix.global_low}, {matrix.global_high}]"
            )
            expanded = [str(g.node_id) for g in matrix.groups if g.expanded]
            if expanded:
                summary_parts.append(f"[bold]Expanded:[/bold] {', '.join(expanded)}")
        if error:
            summary_parts.append(f"[bold red]Stale:[/bold red] {escape(error)}")
        parts.append(Text(""))
        parts.append(Text.from_markup("  |  ".join(summary_parts)))

        return Panel(
            Group(*parts),
            title="[bold]Replica Status[/bold]",
            subtitle=f"Last updated: {time.strftime('%H:%M:%S')}",
            border_style="blue",
            padding=(1, 2),
        )

    def build_matrix_table(self, matrix: AlignedMatrix) -> Table:
        """Build the aligned Rich Table: label columns plus one per sequence."""
        table = Table(
            show_header=True,
            header_style="bold cyan",
            show_lines=False,
            pad_edge=False,
            padding=(0, 0),
        )
        table.add_column("", no_wrap=True)
        table.add_column("", no_wrap=True)
        for seq in matrix.columns:
            table.add_column(str(seq), justify="center", min_width=2, no_wrap=True)

        for group in matrix.groups:
            self._add_group(table, group, matrix.width)
            table.add_section()
        return table

    def _add_group(self, table: Table, group: NodeRowGroup, width: int) -> None:
        for row in group.bucket_rows:
            header = ""
            if row.header is not None:
                marker = "-" if group.expanded else "+"
                header = f"[bold]{marker} {row.header.label}[/bold]"
            label = f"[bold]{row.label}*[/bold]" if row.leader else row.label
            table.add_row(header, label, *(_cell_text(c) for c in row.cells))

        table.add_row(
            "",
            f"[dim]{group.checkpoint_row.label}[/dim]",
            *self._checkpoint_cells(group.checkpoint_row, width),
        )

        for block in group.peer_blocks:
            for index, peer_row in enumerate(block.rows):
                table.add_row(
                    f"  {block.label}" if index == 0 else "",
                    peer_row.label,
                    *(_cell_text(c) for c in peer_row.cells),
                )

    @staticmethod
    def _checkpoint_cells(row: CheckpointRow, width: int) -> list[Text]:
        """Expand spanning cells into per-column Text.

        Absorbed columns show a span line; the checkpoint's own column shows
        its label.  Columns after the last checkpoint stay blank.
        """
        texts: list[Text] = []
        for cell in row.cells:
            style = _CHECKPOINT_STYLES.get(cell.status, "")
            texts.extend(Text(_SPAN_FILL, style="dim") for _ in range(cell.col_span - 1))
            texts.append(Text(cell.text, style=style))
        texts.extend(Text("") for _ in range(width - len(texts)))
        return texts

    @staticmethod
    def _build_actions_table(node: NodeSnapshot) -> Table:
        table = Table(title=f"Node {node.id}", show_header=True, header_style="bold")
        table.add_column("Action")
        table.add_column("Outstanding", justify="right")
        for name, value in node.actions.as_rows():
            table.add_row(name, str(value) if value else f"[dim]{value}[/dim]")
        table.add_row("[bold]Total[/bold]", f"[bold]{node.actions.total}[/bold]")
        return table

    # ------------------------------------------------------------------
    # Continuous live rendering
    # ------------------------------------------------------------------

    def render_live(
        self,
        provider: StatusProvider,
        engine: MatrixEngine,
        *,
        expansion: ExpansionState = COLLAPSED,
        refresh_hz: float = 1.0,
        dispatcher: CommandDispatcher | None = None,
        process_delay: float | None = None,
    ) -> None:
        """Continuously poll and render until Ctrl+C.

        A failed poll keeps the last good snapshot on screen and reports
        the failure in the summary line.  When *dispatcher* and
        *process_delay* are given, nodes with outstanding actions are
        processed automatically after the delay.
        """
        interval = 1.0 / max(refresh_hz, 0.1)

        with Live(
            console=self.console,
            refresh_per_second=max(refresh_hz, 0.1),
            transient=False,
        ) as live:
            try:
                while True:
                    live.update(self._poll_and_render(provider, engine, expansion))
                    if dispatcher is not None and process_delay is not None:
                        self._auto_process(provider.last_good, dispatcher, process_delay)
                    time.sleep(interval)
            except KeyboardInterrupt:
                live.update(self._poll_and_render(provider, engine, expansion))

    def _poll_and_render(
        self,
        provider: StatusProvider,
        engine: MatrixEngine,
        expansion: ExpansionState,
    ) -> Panel:
        error: str | None = None
        try:
            provider.poll()
        except (StatusProviderError, SnapshotValidationError) as exc:
            error = str(exc)
        nodes = provider.last_good
        return self.render_snapshot(nodes, engine.render(nodes, expansion), error=error)

    def _auto_process(
        self,
        nodes: Sequence[NodeSnapshot],
        dispatcher: CommandDispatcher,
        delay: float,
    ) -> list[Future[None]]:
        """Submit a background process command for each busy node.

        A node whose previous command is still running is skipped.
        """
        busy = [
            node.id
            for node in nodes
            if node.actions.total > 0
            and (node.id not in self._pending or self._pending[node.id].done())
        ]
        if busy and delay:
            time.sleep(delay)

        submitted: list[Future[None]] = []
        for node_id in busy:
            future = dispatcher.submit(NodeCommand.PROCESS, node_id)
            future.add_done_callback(partial(_log_failure, node_id))
            self._pending[node_id] = future
            submitted.append(future)
        return submitted

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_snapshot(self, nodes: Sequence[NodeSnapshot], matrix: AlignedMatrix) -> None:
        """Print a single snapshot to the console."""
        self.console.print(self.render_snapshot(nodes, matrix))
