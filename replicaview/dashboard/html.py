"""HTML table rendering of an ``AlignedMatrix``.

Unlike the terminal renderer, HTML supports real ``rowspan``/``colspan``,
so node headers span their bucket rows and checkpoint cells span the
positions they absorbed.
"""

from __future__ import annotations

from html import escape

from replicaview.models.matrix import AlignedMatrix, Cell, NodeRowGroup

MATRIX_CSS = """
<style>
table.rv-matrix { border-collapse: collapse; font-family: monospace; font-size: 12px; }
table.rv-matrix th, table.rv-matrix td { border: 1px solid #444; padding: 1px 4px; text-align: center; }
table.rv-matrix tbody { border: solid black 3px; }
.rv-in-progress { background: yellow; color: black; }
.rv-invalid { background: red; color: white; }
.rv-committed { background: green; color: white; }
.rv-unknown { background: magenta; color: white; }
.rv-offset { background: black; }
.rv-padding { background: gray; }
.rv-checkpoint { font-weight: bold; }
.rv-leader { font-weight: bold; text-decoration: underline; }
.rv-cp-agreed { background: #00d26a; }
.rv-cp-network-quorum-only { background: #e6db74; }
.rv-cp-local-only { background: #66d9ef; }
.rv-cp-pending { color: #75715e; }
</style>
"""


def _td(cell: Cell) -> str:
    css = f' class="rv-{cell.color_class}"' if cell.color_class and cell.color_class != "empty" else ""
    return f"<td{css}>{escape(cell.text)}</td>"


def _group_html(group: NodeRowGroup) -> list[str]:
    out: list[str] = ["<tbody>"]
    for row in group.bucket_rows:
        tds: list[str] = []
        if row.header is not None:
            tds.append(
                f'<td rowspan="{row.header.row_span}" style="vertical-align:middle">'
                f"{escape(row.header.label)}</td>"
            )
        if row.leader:
            tds.append(f'<td class="rv-leader" title="leader">{escape(row.label)}</td>')
        else:
            tds.append(f"<td>{escape(row.label)}</td>")
        tds.extend(_td(c) for c in row.cells)
        out.append("<tr>" + "".join(tds) + "</tr>")

    cp = group.checkpoint_row
    tds = [f'<td colspan="2">{escape(cp.label)}</td>']
    for cell in cp.cells:
        span = f' colspan="{cell.col_span}"' if cell.col_span > 1 else ""
        tds.append(
            f'<td{span} class="rv-cp-{cell.status.value}" title="seq {cell.seq_no}">'
            f"{escape(cell.text)}</td>"
        )
    out.append("<tr>" + "".join(tds) + "</tr>")
    out.append("</tbody>")

    for block in group.peer_blocks:
        out.append("<tbody>")
        for index, peer_row in enumerate(block.rows):
            tds = []
            if index == 0:
                tds.append(f'<td rowspan="{len(block.rows)}">{escape(block.label)}</td>')
            tds.append(f"<td>{escape(peer_row.label)}</td>")
            tds.extend(_td(c) for c in peer_row.cells)
            out.append("<tr>" + "".join(tds) + "</tr>")
        out.append("</tbody>")
    return out


def matrix_to_html(matrix: AlignedMatrix, *, include_css: bool = True) -> str:
    """Render *matrix* as an HTML ``<table>``.  Empty matrices render as ``""``."""
    if matrix.is_empty:
        return ""
    parts: list[str] = [MATRIX_CSS] if include_css else []
    parts.append('<table class="rv-matrix">')
    parts.append(
        '<thead><tr><th colspan="2"></th>'
        + "".join(f"<th>{seq}</th>" for seq in matrix.columns)
        + "</tr></thead>"
    )
    for group in matrix.groups:
        parts.extend(_group_html(group))
    parts.append("</table>")
    return "\n".join(parts)
