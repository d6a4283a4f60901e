"""
Cell split commands.

A split turns one cell into ``number_of_cells`` cells.  When the cell
already spans enough columns (or rows) its span is shared out between the
pieces.  Otherwise the missing columns (or rows) are added to the grid and
every other cell crossing the cell's column (or row) grows over them.
"""

from __future__ import annotations

import logging

from commands.base import TableCommand
from commands.structure import break_span_evenly
from dto.nodes import Table, TableCell, TableRow
from dto.slot import TableSlot
from grid.utils import index_of
from grid.walker import TableWalker, iterate_row, iterate_table

logger = logging.getLogger(__name__)


def _find_slot(table: Table, cell: TableCell) -> TableSlot:
    for slot in iterate_table(table):
        if slot.cell is cell:
            return slot
    raise ValueError(f"Cell {cell.node_id} is not part of table {table.node_id}")


def _require_number_of_cells(number_of_cells: int) -> None:
    if number_of_cells < 1:
        raise ValueError(f"number_of_cells must be at least 1, got {number_of_cells}")


class SplitCellVerticallyCommand(TableCommand):
    """
    Split *cell* into *number_of_cells* cells placed side by side.

        +---+---+---+        +---+---+---+
        | a         |        | a     |   |
        +---+---+---+   ->   +---+---+---+
        | b | c | d |        | b | c | d |
        +---+---+---+        +---+---+---+

    The new cells keep the ``rowspan`` of *cell*.  Heading columns grow when
    columns are added inside them.
    """

    def execute(self, table: Table, cell: TableCell, number_of_cells: int = 2) -> None:
        self._require_attached(table)
        _require_number_of_cells(number_of_cells)

        slot = _find_slot(table, cell)
        rowspan = cell.rowspan
        colspan = cell.colspan
        row = table.children[slot.row]

        with self.document.change() as writer:
            if colspan > 1:
                new_cells_span, updated_span = break_span_evenly(colspan, number_of_cells)
                writer.set_attribute("colspan", updated_span, cell)

                cells_to_insert = number_of_cells - 1 if colspan > number_of_cells else colspan - 1
                for _ in range(cells_to_insert):
                    new_cell = TableCell(rowspan=rowspan, colspan=new_cells_span)
                    writer.insert(new_cell, row, index_of(row.children, cell) + 1)

            if colspan < number_of_cells:
                cells_to_insert = number_of_cells - colspan

                # Everything else crossing the cell's column widens over the new columns
                for other in list(iterate_table(table)):
                    if other.cell is cell:
                        continue
                    if other.column == slot.column or other.column < slot.column <= other.last_column:
                        writer.set_attribute("colspan", other.colspan + cells_to_insert, other.cell)

                for _ in range(cells_to_insert):
                    writer.insert(TableCell(rowspan=rowspan), row, index_of(row.children, cell) + 1)

                if table.heading_columns > slot.column:
                    writer.set_attribute(
                        "heading_columns", table.heading_columns + cells_to_insert, table
                    )

        logger.debug(
            "Split cell at (%d, %d) of table %s into %d column(s)",
            slot.row,
            slot.column,
            table.node_id,
            number_of_cells,
        )


class SplitCellHorizontallyCommand(TableCommand):
    """
    Split *cell* into *number_of_cells* cells stacked on top of each other.

    A cell spanning ``rowspan`` rows keeps the first share of them and the
    new cells start every ``new_cells_span`` rows below it.  A cell too short
    for the split gets new single-cell rows right below its row; the other
    cells crossing that row grow over them.  The new cells keep the
    ``colspan`` of *cell*.  Heading rows grow when rows are added inside them.
    """

    def execute(self, table: Table, cell: TableCell, number_of_cells: int = 2) -> None:
        self._require_attached(table)
        _require_number_of_cells(number_of_cells)

        slot = _find_slot(table, cell)
        rowspan = cell.rowspan
        colspan = cell.colspan
        split_row = slot.row

        with self.document.change() as writer:
            if rowspan > 1:
                new_cells_span, updated_span = break_span_evenly(rowspan, number_of_cells)

                # Source index of the cell's column in every row that gets a new cell
                targets = [
                    (
                        row_index,
                        sum(1 for anchor in iterate_row(table, row_index) if anchor.column < slot.column),
                    )
                    for row_index in range(split_row + updated_span, split_row + rowspan, new_cells_span)
                ]

                writer.set_attribute("rowspan", updated_span, cell)
                for row_index, index in targets:
                    new_cell = TableCell(rowspan=new_cells_span, colspan=colspan)
                    writer.insert(new_cell, table.children[row_index], index)

            if rowspan < number_of_cells:
                cells_to_insert = number_of_cells - rowspan

                for other in list(TableWalker(table, end_row=split_row)):
                    if other.cell is not cell and other.last_row >= split_row:
                        writer.set_attribute("rowspan", other.rowspan + cells_to_insert, other.cell)

                for _ in range(cells_to_insert):
                    writer.insert(
                        TableRow(children=[TableCell(colspan=colspan)]), table, split_row + 1
                    )

                if table.heading_rows > split_row:
                    writer.set_attribute("heading_rows", table.heading_rows + cells_to_insert, table)

        logger.debug(
            "Split cell at (%d, %d) of table %s into %d row(s)",
            slot.row,
            slot.column,
            table.node_id,
            number_of_cells,
        )
