from __future__ import annotations

import logging

from commands.base import TableCommand
from dto.nodes import Table
from grid.utils import get_columns
from grid.walker import iterate_table
from model.writer import Writer

logger = logging.getLogger(__name__)


class RemoveColumnCommand(TableCommand):
    """
    Remove ``count`` columns starting at column *at*.

    Columns are removed one at a time from the last to the first: cells
    spanning over a removed column lose one column of ``colspan``, 1-wide
    cells anchored in it are removed.
    """

    def execute(self, table: Table, at: int, count: int = 1) -> None:
        self._require_attached(table)
        self._require_count(count)

        columns = get_columns(table)
        if at < 0 or at + count > columns:
            raise ValueError(
                f"Cannot remove columns {at}..{at + count - 1} from a table of {columns} column(s)"
            )
        if 0 < count == columns:
            raise ValueError("Cannot remove every column of a table; remove the table instead")
        if count == 0:
            return

        first = at
        last = at + count - 1

        with self.document.change() as writer:
            self._update_heading_columns(table, first, last, writer)

            for removed_column in range(last, first - 1, -1):
                for slot in list(iterate_table(table)):
                    if slot.colspan > 1 and slot.column <= removed_column <= slot.last_column:
                        writer.set_attribute("colspan", slot.colspan - 1, slot.cell)
                    elif slot.column == removed_column:
                        writer.remove(slot.cell)

        logger.debug("Removed %d column(s) at %d from table %s", count, at, table.node_id)

    @staticmethod
    def _update_heading_columns(table: Table, first: int, last: int, writer: Writer) -> None:
        heading_columns = table.heading_columns
        if first >= heading_columns:
            return

        removed = min(heading_columns - 1, last) - first + 1
        writer.set_attribute("heading_columns", heading_columns - removed, table)
