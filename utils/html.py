"""
Utility to render a ``TableView`` output tree into an HTML <table> string.
"""

from __future__ import annotations

from typing import List

from dto.view import CellKind, CellView, SectionKind, TableView

_SECTION_TAGS = {
    SectionKind.HEADER: "thead",
    SectionKind.BODY: "tbody",
}

_CELL_TAGS = {
    CellKind.HEADER_CELL: "th",
    CellKind.PLAIN_CELL: "td",
}


def _escape_html(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _render_cell(cell: CellView) -> str:
    tag = _CELL_TAGS[cell.kind]
    attrs = ""
    if cell.rowspan > 1:
        attrs += f' rowspan="{cell.rowspan}"'
    if cell.colspan > 1:
        attrs += f' colspan="{cell.colspan}"'
    val = _escape_html(cell.content or "")
    return f"<{tag}{attrs}>{val}</{tag}>"


def render_table_html(view: TableView) -> str:
    """
    Render the header / body sections of *view* into an HTML ``<table>``
    string.  Empty sections are skipped.
    """
    parts: List[str] = ['<table border="1" cellpadding="5" cellspacing="0">']

    for section in view.sections:
        if not section.rows:
            continue

        tag = _SECTION_TAGS[section.kind]
        parts.append(f"  <{tag}>")
        for row in section.rows:
            parts.append("    <tr>")
            for cell in row.cells:
                parts.append(f"      {_render_cell(cell)}")
            parts.append("    </tr>")
        parts.append(f"  </{tag}>")

    parts.append("</table>")
    return "\n".join(parts)
