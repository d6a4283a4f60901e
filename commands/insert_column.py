from __future__ import annotations

import logging
from typing import Set

from commands.base import TableCommand
from dto.nodes import Table, TableCell
from grid.utils import get_columns
from grid.walker import iterate_table

logger = logging.getLogger(__name__)


class InsertColumnCommand(TableCommand):
    """
    Insert ``count`` empty columns so that the first of them becomes column *at*.

    Cells spanning across the insertion point grow by ``count`` columns; the
    rows they cover need no new cells.  Every other row gets ``count`` 1x1
    cells at the source position of grid column *at*.
    """

    def execute(self, table: Table, at: int, count: int = 1) -> None:
        self._require_attached(table)
        self._require_count(count)

        columns = get_columns(table)
        if not 0 <= at <= columns:
            raise ValueError(f"Column index {at} outside 0..{columns}")
        if count == 0:
            return

        with self.document.change() as writer:
            if at < table.heading_columns:
                writer.set_attribute("heading_columns", table.heading_columns + count, table)

            slots = list(iterate_table(table))

            covered_rows: Set[int] = set()
            for slot in slots:
                if slot.column < at <= slot.last_column:
                    writer.set_attribute("colspan", slot.colspan + count, slot.cell)
                    covered_rows.update(range(slot.row, slot.last_row + 1))

            for row_index, row in enumerate(table.children):
                if row_index in covered_rows:
                    continue

                index = sum(1 for slot in slots if slot.row == row_index and slot.column < at)
                for _ in range(count):
                    writer.insert(TableCell(), row, index)

        logger.debug("Inserted %d column(s) at %d into table %s", count, at, table.node_id)
