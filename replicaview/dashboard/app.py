"""replicaview dashboard -- Streamlit UI over the status server.

A projection of the replicas' ``/status`` document: per-node action
counters with Process/Propose/Tick controls, and the aligned sequence
matrix with per-node expandable peer detail.

Usage:
    streamlit run replicaview/dashboard/app.py
    # or via CLI:
    replicaview ui
"""

from __future__ import annotations

import logging
import time

try:
    import streamlit as st

    HAS_STREAMLIT = True
except ImportError:
    HAS_STREAMLIT = False

from replicaview.config import MANUAL, PROCESS_DELAYS_MS, ViewerConfig
from replicaview.dashboard.html import matrix_to_html
from replicaview.matrix.engine import MatrixEngine
from replicaview.matrix.expansion import DetailExpansionController
from replicaview.matrix.validation import SnapshotValidationError
from replicaview.models.schema import SCHEMA_PROFILES, get_profile
from replicaview.models.snapshot import NodeSnapshot
from replicaview.provider.commands import CommandDispatchError, CommandDispatcher
from replicaview.provider.status import StatusProvider, StatusProviderError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def create_dashboard(cfg: ViewerConfig | None = None) -> None:
    """Launch the replicaview dashboard inside a Streamlit script run."""
    if not HAS_STREAMLIT:
        print("Streamlit is required for the dashboard.")
        print("Install with: pip install replicaview[dashboard]")
        return

    _run_dashboard(cfg or ViewerConfig())


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


def _session_objects(status_url: str, timeout: float) -> tuple[StatusProvider, CommandDispatcher]:
    """Provider and dispatcher survive reruns; rebuilt when the URL changes."""
    if st.session_state.get("status_url") != status_url:
        provider = StatusProvider(status_url, timeout=timeout)
        st.session_state["status_url"] = status_url
        st.session_state["provider"] = provider
        st.session_state["dispatcher"] = CommandDispatcher(
            status_url, timeout=timeout, on_complete=provider.poll
        )
    return st.session_state["provider"], st.session_state["dispatcher"]


def _expansion() -> DetailExpansionController:
    if "expansion" not in st.session_state:
        st.session_state["expansion"] = DetailExpansionController()
    return st.session_state["expansion"]


# ---------------------------------------------------------------------------
# Internal dashboard runner
# ---------------------------------------------------------------------------


def _run_dashboard(cfg: ViewerConfig) -> None:
    """Internal dashboard runner -- requires Streamlit."""
    st.set_page_config(page_title="Replica Status", layout="wide")

    st.sidebar.title("replicaview")
    status_url = st.sidebar.text_input("Status server", value=cfg.status_url)
    profile_name = st.sidebar.selectbox(
        "Schema profile",
        sorted(SCHEMA_PROFILES),
        index=sorted(SCHEMA_PROFILES).index(cfg.schema_profile),
    )
    mode_options = [str(d) for d in PROCESS_DELAYS_MS] + [MANUAL]
    process_mode = st.sidebar.selectbox(
        "Processing",
        mode_options,
        index=mode_options.index(cfg.process_mode),
        format_func=lambda m: "Manual" if m == MANUAL else f"Automatic ({m}ms delay)",
    )
    auto_refresh = st.sidebar.checkbox(
        f"Auto-refresh ({cfg.poll_interval_seconds}s)", value=True
    )

    provider, dispatcher = _session_objects(status_url, cfg.request_timeout_seconds)
    expansion = _expansion()
    engine = MatrixEngine(get_profile(profile_name))

    try:
        provider.poll()
    except (StatusProviderError, SnapshotValidationError) as exc:
        st.error(f"{exc} -- showing last good snapshot")

    nodes = provider.last_good

    st.title("Replica Status")
    if nodes:
        _render_node_controls(nodes, dispatcher, expansion)

    matrix = engine.render(nodes, expansion.state)
    if matrix.is_empty:
        st.info("Nothing to render yet -- no node has advanced its watermarks.")
    else:
        st.markdown(matrix_to_html(matrix), unsafe_allow_html=True)

    if process_mode != MANUAL:
        _auto_process(nodes, dispatcher, int(process_mode) / 1000.0)

    if auto_refresh:
        time.sleep(cfg.poll_interval_seconds)
        st.rerun()


def _render_node_controls(
    nodes: list[NodeSnapshot],
    dispatcher: CommandDispatcher,
    expansion: DetailExpansionController,
) -> None:
    for col, node in zip(st.columns(len(nodes)), nodes):
        with col:
            st.subheader(f"Node {node.id}")
            rows = [{"Action": name, "Outstanding": value} for name, value in node.actions.as_rows()]
            rows.append({"Action": "Total", "Outstanding": node.actions.total})
            st.dataframe(rows, use_container_width=True, hide_index=True)
            if node.log is not None:
                st.caption(f"Committed bytes: {node.log.total_bytes}")

            try:
                if st.button("Process", key=f"process-{node.id}", disabled=node.actions.total == 0):
                    dispatcher.process(node.id)
                if st.button("Propose", key=f"propose-{node.id}"):
                    dispatcher.propose(node.id)
                if st.button("Tick", key=f"tick-{node.id}"):
                    dispatcher.tick(node.id)
            except (CommandDispatchError, StatusProviderError, SnapshotValidationError) as exc:
                st.error(str(exc))

            label = "Hide peers" if expansion.state.is_expanded(node.id) else "Show peers"
            if st.button(label, key=f"expand-{node.id}"):
                expansion.toggle(node.id)
                st.rerun()


def _auto_process(nodes: list[NodeSnapshot], dispatcher: CommandDispatcher, delay: float) -> None:
    for node in nodes:
        if node.actions.total <= 0:
            continue
        if delay:
            time.sleep(delay)
        try:
            dispatcher.process(node.id)
        except (CommandDispatchError, StatusProviderError, SnapshotValidationError) as exc:
            logger.warning("Automatic processing of node %d failed: %s", node.id, exc)
            st.error(str(exc))


if __name__ == "__main__":
    create_dashboard()
