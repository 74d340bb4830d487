"""replicaview CLI — Typer-based command-line interface.

Provides the ``replicaview`` command with subcommands for rendering the
status matrix once or live, validating saved status documents, sending
per-node commands and launching the dashboard.

All output uses Rich for formatted terminal display.
"""
