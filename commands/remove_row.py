from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from commands.base import TableCommand
from dto.nodes import Table, TableCell
from grid.utils import get_rows
from grid.walker import TableWalker, iterate_row
from model.writer import Writer

logger = logging.getLogger(__name__)


class RemoveRowCommand(TableCommand):
    """
    Remove ``count`` rows starting at row *at*.

    Cells reaching into the removed rows from above lose the removed part of
    their ``rowspan``.  Cells anchored in the removed rows that reach below
    them are moved into the first row after the removed block, keeping their
    column, with the remaining ``rowspan``.  Removing every row also resets
    ``heading_columns``.
    """

    def execute(self, table: Table, at: int, count: int = 1) -> None:
        self._require_attached(table)
        self._require_count(count)

        rows = get_rows(table)
        if at < 0 or at + count > rows:
            raise ValueError(f"Cannot remove rows {at}..{at + count - 1} from a table of {rows} row(s)")
        if count == 0:
            return

        first = at
        last = at + count - 1

        with self.document.change() as writer:
            cells_to_move: Dict[int, Tuple[TableCell, int]] = {}
            cells_to_trim: List[Tuple[TableCell, int]] = []

            for slot in list(TableWalker(table, end_row=last)):
                if first <= slot.row <= last < slot.last_row:
                    # Rows of the cell that survive below the removed block
                    cells_to_move[slot.column] = (slot.cell, slot.last_row - last)

                if slot.row < first <= slot.last_row:
                    if slot.last_row >= last:
                        trimmed = count
                    else:
                        trimmed = slot.last_row - first + 1
                    cells_to_trim.append((slot.cell, slot.rowspan - trimmed))

            if cells_to_move:
                self._move_cells_to_row(table, last + 1, cells_to_move, writer)

            for row_index in range(last, first - 1, -1):
                writer.remove(table.children[row_index])

            for cell, rowspan in cells_to_trim:
                writer.set_attribute("rowspan", rowspan, cell)

            self._update_heading_rows(table, first, last, writer)

            # No rows leave a zero-width grid
            if not table.children:
                writer.set_attribute("heading_columns", 0, table)

        logger.debug("Removed %d row(s) at %d from table %s", count, at, table.node_id)

    @staticmethod
    def _move_cells_to_row(
        table: Table,
        target_row: int,
        cells_to_move: Dict[int, Tuple[TableCell, int]],
        writer: Writer,
    ) -> None:
        anchors = list(iterate_row(table, target_row))
        row = table.children[target_row]

        for moved, column in enumerate(sorted(cells_to_move)):
            cell, rowspan = cells_to_move[column]
            index = sum(1 for anchor in anchors if anchor.column < column) + moved
            writer.move(cell, row, index)
            writer.set_attribute("rowspan", rowspan, cell)

    @staticmethod
    def _update_heading_rows(table: Table, first: int, last: int, writer: Writer) -> None:
        heading_rows = table.heading_rows
        if first >= heading_rows:
            return

        if last < heading_rows:
            new_heading_rows = heading_rows - (last - first + 1)
        else:
            new_heading_rows = first
        writer.set_attribute("heading_rows", new_heading_rows, table)
