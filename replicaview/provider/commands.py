"""CommandDispatcher — per-node process/propose/tick requests.

Commands are fire-and-forget from the engine's point of view: the only
contract is that a completed command triggers a fresh status poll.
Commands for the same node are not deduplicated.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Any

import requests

logger = logging.getLogger(__name__)


class NodeCommand(str, Enum):
    """Actions the status server accepts for a node."""

    PROCESS = "process"
    PROPOSE = "propose"
    TICK = "tick"


class CommandDispatchError(RuntimeError):
    """Raised when a node command fails."""


class CommandDispatcher:
    """Sends node commands and requests a refresh when each completes.

    Parameters
    ----------
    base_url:
        Root URL of the status server.
    timeout:
        Per-request timeout in seconds.
    session:
        A ``requests.Session`` (or compatible object).
    on_complete:
        Called with no arguments after every successful command, usually
        ``StatusProvider.poll``.
    max_workers:
        Thread pool size for ``submit``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        session: requests.Session | None = None,
        on_complete: Callable[[], Any] | None = None,
        max_workers: int = 4,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._on_complete = on_complete
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def process(self, node_id: int) -> None:
        """Ask *node_id* to process its outstanding actions."""
        self._send(NodeCommand.PROCESS, node_id)

    def propose(self, node_id: int, payload: bytes | str | None = None) -> None:
        """Propose *payload* through *node_id*.  Defaults to a random value."""
        if payload is None:
            payload = str(random.random())
        self._send(NodeCommand.PROPOSE, node_id, payload)

    def tick(self, node_id: int) -> None:
        """Advance *node_id*'s logical clock by one tick."""
        self._send(NodeCommand.TICK, node_id)

    def submit(
        self, command: NodeCommand, node_id: int, payload: bytes | str | None = None
    ) -> Future[None]:
        """Run a command on the background pool and return its future."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="replicaview-cmd"
            )
        if command is NodeCommand.PROPOSE:
            return self._executor.submit(self.propose, node_id, payload)
        return self._executor.submit(getattr(self, command.value), node_id)

    def close(self) -> None:
        """Wait for submitted commands and release the pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _send(
        self, command: NodeCommand, node_id: int, payload: bytes | str | None = None
    ) -> None:
        url = f"{self.base_url}/node/{node_id}/{command.value}"
        method = "POST" if command is NodeCommand.PROPOSE else "GET"
        logger.info("Sending %s to node %d", command.value, node_id)
        try:
            response = self._session.request(
                method, url, data=payload, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("%s for node %d failed: %s", command.value, node_id, exc)
            raise CommandDispatchError(
                f"{command.value} for node {node_id} failed: {exc}"
            ) from exc

        if self._on_complete is not None:
            self._on_complete()
