"""replicaview dashboard -- Streamlit UI and HTML matrix rendering.

The dashboard never computes truth; it displays the latest status poll
through the matrix engine.
"""

from replicaview.dashboard.html import matrix_to_html

__all__ = ["matrix_to_html"]
