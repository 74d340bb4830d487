"""Collaborators around the matrix engine: status polling and node commands."""

from replicaview.provider.commands import (
    CommandDispatchError,
    CommandDispatcher,
    NodeCommand,
)
from replicaview.provider.status import PollState, StatusProvider, StatusProviderError

__all__ = [
    "CommandDispatchError",
    "CommandDispatcher",
    "NodeCommand",
    "PollState",
    "StatusProvider",
    "StatusProviderError",
]
