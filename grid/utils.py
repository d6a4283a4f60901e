"""
Table geometry helpers shared by the commands and the synchronizer.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from dto.nodes import Table, TableCell, TableRow
from grid.walker import iterate_row


def index_of(items: Sequence[Any], item: Any) -> int:
    """Identity-based ``list.index``; returns -1 when *item* is absent."""
    for index, candidate in enumerate(items):
        if candidate is item:
            return index
    return -1


def get_rows(table: Table) -> int:
    return len(table.children)


def get_columns(table: Table) -> int:
    """
    Width of the grid.  Only the first row is summed: every row of a
    well-formed table covers the same number of columns.
    """
    if not table.children:
        return 0
    return sum(cell.colspan for cell in table.children[0].children)


def get_cell_location(table: Table, cell: TableCell) -> Optional[Tuple[int, int]]:
    """Return the ``(row, column)`` anchor of *cell*, or None if it is not in *table*."""
    for row_index, table_row in enumerate(table.children):
        if index_of(table_row.children, cell) == -1:
            continue
        for slot in iterate_row(table, row_index):
            if slot.cell is cell:
                return slot.row, slot.column
    return None


def create_table(
    rows: int = 2,
    columns: int = 2,
    heading_rows: int = 0,
    heading_columns: int = 0,
) -> Table:
    """
    Build a detached ``rows`` x ``columns`` table of empty 1x1 cells.

    Heading counts larger than the table are clamped to its size.
    """
    if rows < 0 or columns < 0:
        raise ValueError(f"Table size must not be negative, got {rows}x{columns}")

    return Table(
        heading_rows=min(heading_rows, rows),
        heading_columns=min(heading_columns, columns),
        children=[
            TableRow(children=[TableCell() for _ in range(columns)])
            for _ in range(rows)
        ],
    )
