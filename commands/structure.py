"""
Cell splitting helpers shared by the heading and split commands.

A heading boundary may not cut through a cell: before ``heading_rows`` or
``heading_columns`` moves, every cell that straddles the new boundary is
split in two along it.  The split commands share a spanned cell out
evenly with ``break_span_evenly``.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from dto.nodes import Table, TableCell
from dto.slot import TableSlot
from grid.walker import TableWalker, iterate_row, iterate_table
from model.writer import Writer

logger = logging.getLogger(__name__)


def get_vertically_overlapping_cells(table: Table, overlap_row: int) -> List[TableSlot]:
    """
    Anchors of cells that start above *overlap_row* and reach into it.

    For the table below and ``overlap_row == 2`` the result holds "b"
    (rows 0-2) and "d" (rows 1-2):

        +---+---+---+
        | a | b | c |
        +---+   +---+
        | d |   | e |
        +   +   +---+
        |   |   | f |
        +---+---+---+
    """
    cells: List[TableSlot] = []
    if overlap_row <= 0:
        return cells

    for slot in TableWalker(table, end_row=overlap_row - 1):
        if slot.row < overlap_row <= slot.last_row:
            cells.append(slot)
    return cells


def get_horizontally_overlapping_cells(table: Table, overlap_column: int) -> List[TableSlot]:
    """Anchors of cells that start left of *overlap_column* and reach into it."""
    return [
        slot
        for slot in iterate_table(table)
        if slot.column < overlap_column <= slot.last_column
    ]


def split_horizontally(slot: TableSlot, split_row: int, table: Table, writer: Writer) -> TableCell:
    """
    Cut the cell of *slot* at *split_row*.

    The cell keeps the rows above the cut.  A new empty cell with the same
    ``colspan`` takes over the rows from *split_row* down and is anchored in
    row *split_row* at the cell's column.
    """
    cell = slot.cell
    kept_rowspan = split_row - slot.row
    new_cell = TableCell(rowspan=cell.rowspan - kept_rowspan, colspan=cell.colspan)

    # Source index of the cell's column inside the target row
    index = sum(1 for anchor in iterate_row(table, split_row) if anchor.column < slot.column)

    writer.set_attribute("rowspan", kept_rowspan, cell)
    writer.insert(new_cell, table.children[split_row], index)

    logger.debug(
        "Split cell at (%d, %d) horizontally at row %d", slot.row, slot.column, split_row
    )
    return new_cell


def split_vertically(slot: TableSlot, split_column: int, table: Table, writer: Writer) -> TableCell:
    """
    Cut the cell of *slot* at *split_column*.

    The new cell keeps the ``rowspan`` and is placed right after the cell in
    its row.
    """
    cell = slot.cell
    kept_colspan = split_column - slot.column
    new_cell = TableCell(rowspan=cell.rowspan, colspan=cell.colspan - kept_colspan)

    writer.set_attribute("colspan", kept_colspan, cell)
    writer.insert(new_cell, table.children[slot.row], slot.cell_index + 1)

    logger.debug(
        "Split cell at (%d, %d) vertically at column %d", slot.row, slot.column, split_column
    )
    return new_cell


def break_span_evenly(span: int, number_of_cells: int) -> Tuple[int, int]:
    """
    Share *span* between *number_of_cells* cells.

    Returns ``(new_cells_span, updated_span)``: the span of every added cell
    and the span left to the original cell, which also takes the remainder.
    A span of 7 broken into 3 gives ``(2, 3)``.  A span smaller than the
    number of cells gives ``(1, 1)``.
    """
    if span < number_of_cells:
        return 1, 1

    new_cells_span = span // number_of_cells
    updated_span = span - new_cells_span * number_of_cells + new_cells_span
    return new_cells_span, updated_span
