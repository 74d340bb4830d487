"""replicaview: aligned watermark and sequence-state view of protocol replicas.

Polls a set of replicas, aligns their watermark windows into one matrix of
per-bucket sequence states with collapsed checkpoint-quorum rows, and
renders it in the terminal (Rich) or a browser dashboard (Streamlit).
"""

__version__ = "0.1.0"
__description__ = "Watermark alignment and sequence-matrix view of protocol replicas"

from replicaview.matrix.engine import MatrixEngine, render_model
from replicaview.matrix.expansion import DetailExpansionController, ExpansionState
from replicaview.cli.app import app as cli

__all__ = [
    "DetailExpansionController",
    "ExpansionState",
    "MatrixEngine",
    "cli",
    "render_model",
    "__version__",
]
