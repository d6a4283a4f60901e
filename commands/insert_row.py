from __future__ import annotations

import logging
from typing import List, Optional

from commands.base import TableCommand
from dto.nodes import Table, TableCell, TableRow
from grid.utils import get_columns, get_rows
from grid.walker import TableWalker

logger = logging.getLogger(__name__)


class InsertRowCommand(TableCommand):
    """
    Insert ``count`` empty rows so that the first of them becomes row *at*.

    Cells spanning across the insertion point grow by ``count`` rows and the
    new rows get no cell in the columns those spans hold.  Every other column
    gets a fresh 1x1 cell.  Inserting inside the heading rows makes the new
    rows heading rows too.

    With *copy_structure_from_above* set, the new rows copy the ``colspan``
    layout of a reference row instead: the row above *at* when True, the row
    currently at *at* when False.  Left as None, nothing is copied.
    """

    def execute(
        self,
        table: Table,
        at: int,
        count: int = 1,
        copy_structure_from_above: Optional[bool] = None,
    ) -> None:
        self._require_attached(table)
        self._require_count(count)

        rows = get_rows(table)
        if not 0 <= at <= rows:
            raise ValueError(f"Row index {at} outside 0..{rows}")
        if count == 0:
            return

        copy_structure = copy_structure_from_above is not None
        reference_row = at - 1 if copy_structure_from_above else at

        with self.document.change() as writer:
            if at < table.heading_rows:
                writer.set_attribute("heading_rows", table.heading_rows + count, table)

            # Width of every grid column in the new rows; negative widths
            # mark columns held by a span growing over the new rows.
            column_spans: List[int] = [1] * get_columns(table)

            end_row = max(at, reference_row) if copy_structure else at - 1
            for slot in list(TableWalker(table, end_row=end_row)):
                if slot.row < at <= slot.last_row:
                    writer.set_attribute("rowspan", slot.rowspan + count, slot.cell)
                    column_spans[slot.column] = -slot.colspan
                elif copy_structure and slot.row <= reference_row <= slot.last_row:
                    column_spans[slot.column] = slot.colspan

            for offset in range(count):
                row = TableRow()
                column = 0
                while column < len(column_spans):
                    span = column_spans[column]
                    if span > 0:
                        row.children.append(TableCell(colspan=span))
                    column += abs(span)
                writer.insert(row, table, at + offset)

        logger.debug("Inserted %d row(s) at %d into table %s", count, at, table.node_id)
