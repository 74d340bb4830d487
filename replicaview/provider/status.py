"""StatusProvider — single-flight polling of the replicas' ``/status`` endpoint.

At most one poll is outstanding at any time.  The provider moves through an
explicit ``PollState`` machine (IDLE -> POLLING -> IDLE); a poll requested
while another is in flight is skipped, not queued.  A successful poll
replaces ``last_good`` wholesale; a failed one leaves it untouched so the
display stays stale-but-valid.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum

import requests

from replicaview.matrix.validation import SnapshotValidationError, parse_status
from replicaview.models.snapshot import NodeSnapshot

logger = logging.getLogger(__name__)


class PollState(str, Enum):
    """Lifecycle of the single outstanding poll."""

    IDLE = "idle"
    POLLING = "polling"


class StatusProviderError(RuntimeError):
    """Raised when the status endpoint cannot be reached or read."""


class StatusProvider:
    """Fetches and validates node snapshots from a status server.

    Parameters
    ----------
    base_url:
        Root URL of the status server (``/status`` is appended).
    timeout:
        Per-request timeout in seconds.
    session:
        A ``requests.Session`` (or compatible object).  A new one is created
        if not provided.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._state = PollState.IDLE
        self._last_good: list[NodeSnapshot] = []
        self.last_error: str | None = None

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def last_good(self) -> list[NodeSnapshot]:
        """The most recent successfully validated node list."""
        return self._last_good

    def _begin(self) -> bool:
        with self._lock:
            if self._state is PollState.POLLING:
                return False
            self._state = PollState.POLLING
            return True

    def _end(self) -> None:
        with self._lock:
            self._state = PollState.IDLE

    def poll(self) -> list[NodeSnapshot] | None:
        """Issue one status request.

        Returns the new node list, or ``None`` if a poll was already in
        flight and this request was skipped.

        Raises
        ------
        StatusProviderError
            On transport failure, a non-2xx response, or a non-JSON body.
        SnapshotValidationError
            If the document parses but is malformed.
        """
        if not self._begin():
            logger.debug("Poll already in flight; skipping")
            return None

        url = f"{self.base_url}/status"
        try:
            logger.debug("GET %s", url)
            try:
                response = self._session.get(url, timeout=self.timeout)
                response.raise_for_status()
                payload = response.json()
            except (requests.RequestException, ValueError) as exc:
                self.last_error = f"Status request failed: {exc}"
                logger.warning("Status request to %s failed: %s", url, exc)
                raise StatusProviderError(self.last_error) from exc

            try:
                nodes = parse_status(payload)
            except SnapshotValidationError as exc:
                self.last_error = str(exc)
                raise
        finally:
            self._end()

        self._last_good = nodes
        self.last_error = None
        logger.debug("Poll returned %d node(s)", len(nodes))
        return nodes
