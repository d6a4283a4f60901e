"""
Conversion between openpyxl worksheets and table source trees.

Merged ranges become ``rowspan``/``colspan`` on the top-left cell; the
other cells of a merged range are covered and get no ``TableCell``, which
is exactly the sparse row layout the grid walker expects.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Set, Tuple

from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from dto.nodes import Table, TableCell, TableRow
from grid.classifier import is_header_cell
from grid.walker import iterate_table

logger = logging.getLogger(__name__)

# (row, col) of the top-left cell -> (rowspan, colspan)
MergeSpans = Dict[Tuple[int, int], Tuple[int, int]]


def _coord(col: int, row: int) -> str:
    """Return an A1-style coordinate from 1-based col/row indices."""
    return f"{get_column_letter(col)}{row}"


def _build_merge_spans(
    ws: Worksheet,
    min_row: int,
    min_col: int,
    max_row: int,
    max_col: int,
) -> Tuple[MergeSpans, Set[Tuple[int, int]]]:
    """
    Collect merged ranges inside the given bounds.

    Returns the spans keyed by top-left cell and the set of covered
    (non top-left) cells.  Ranges sticking out of the bounds are clipped.
    """
    spans: MergeSpans = {}
    covered: Set[Tuple[int, int]] = set()

    for merged_range in ws.merged_cells.ranges:
        top = max(merged_range.min_row, min_row)
        left = max(merged_range.min_col, min_col)
        bottom = min(merged_range.max_row, max_row)
        right = min(merged_range.max_col, max_col)
        if top > bottom or left > right:
            continue

        if (top, left) != (merged_range.min_row, merged_range.min_col) or (
            bottom,
            right,
        ) != (merged_range.max_row, merged_range.max_col):
            logger.warning(
                "Merged range %s crosses the table bounds; clipped to %s:%s",
                merged_range.coord,
                _coord(left, top),
                _coord(right, bottom),
            )

        spans[(top, left)] = (bottom - top + 1, right - left + 1)
        for row in range(top, bottom + 1):
            for col in range(left, right + 1):
                if (row, col) != (top, left):
                    covered.add((row, col))

    return spans, covered


def table_from_worksheet(
    ws: Worksheet,
    heading_rows: int = 0,
    heading_columns: int = 0,
    min_row: Optional[int] = None,
    min_col: Optional[int] = None,
    max_row: Optional[int] = None,
    max_col: Optional[int] = None,
) -> Table:
    """
    Build a detached ``Table`` from a rectangular range of *ws*.

    The range defaults to the worksheet's used range.  Heading counts
    larger than the range are clamped.
    """
    min_row = min_row or ws.min_row
    min_col = min_col or ws.min_column
    max_row = max_row or ws.max_row
    max_col = max_col or ws.max_column

    if max_row < min_row or max_col < min_col:
        raise ValueError(
            f"Empty range {_coord(min_col, min_row)}:{_coord(max_col, max_row)}"
        )

    spans, covered = _build_merge_spans(ws, min_row, min_col, max_row, max_col)

    rows = []
    for row in range(min_row, max_row + 1):
        table_row = TableRow()
        for col in range(min_col, max_col + 1):
            if (row, col) in covered:
                continue

            value = ws.cell(row=row, column=col).value
            rowspan, colspan = spans.get((row, col), (1, 1))
            table_row.children.append(
                TableCell(
                    rowspan=rowspan,
                    colspan=colspan,
                    content=str(value) if value is not None else None,
                )
            )
        rows.append(table_row)

    table = Table(
        heading_rows=min(heading_rows, len(rows)),
        heading_columns=min(heading_columns, max_col - min_col + 1),
        children=rows,
    )
    logger.info(
        "Read table %s:%s from '%s' (%d merged range(s))",
        _coord(min_col, min_row),
        _coord(max_col, max_row),
        ws.title,
        len(spans),
    )
    return table


def table_to_worksheet(
    table: Table,
    ws: Worksheet,
    origin_row: int = 1,
    origin_col: int = 1,
) -> None:
    """
    Write *table* into *ws* with its top-left cell at (*origin_row*,
    *origin_col*).  Spanning cells become merged ranges and header cells
    are written in bold.
    """
    for slot in iterate_table(table):
        row = origin_row + slot.row
        col = origin_col + slot.column

        ws_cell = ws.cell(row=row, column=col, value=slot.cell.content)
        if is_header_cell(slot.row, slot.column, table.heading_rows, table.heading_columns):
            ws_cell.font = Font(bold=True)

        if slot.rowspan > 1 or slot.colspan > 1:
            ws.merge_cells(
                start_row=row,
                start_column=col,
                end_row=row + slot.rowspan - 1,
                end_column=col + slot.colspan - 1,
            )
