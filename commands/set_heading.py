"""
Heading bound commands.

Changing ``heading_rows`` or ``heading_columns`` first splits every cell
that the new boundary would cut through, so that each cell lies entirely
inside or entirely outside the heading area.
"""

from __future__ import annotations

import logging

from commands.base import TableCommand
from commands.structure import (
    get_horizontally_overlapping_cells,
    get_vertically_overlapping_cells,
    split_horizontally,
    split_vertically,
)
from dto.nodes import Table
from grid.utils import get_columns, get_rows

logger = logging.getLogger(__name__)


class SetHeadingRowsCommand(TableCommand):

    def execute(self, table: Table, value: int) -> None:
        self._require_attached(table)

        rows = get_rows(table)
        if not 0 <= value <= rows:
            raise ValueError(f"heading_rows must be within 0..{rows}, got {value}")

        with self.document.change() as writer:
            for slot in get_vertically_overlapping_cells(table, value):
                split_horizontally(slot, value, table, writer)
            writer.set_attribute("heading_rows", value, table)

        logger.debug("Table %s now has %d heading row(s)", table.node_id, value)


class SetHeadingColumnsCommand(TableCommand):

    def execute(self, table: Table, value: int) -> None:
        self._require_attached(table)

        columns = get_columns(table)
        if not 0 <= value <= columns:
            raise ValueError(f"heading_columns must be within 0..{columns}, got {value}")

        with self.document.change() as writer:
            for slot in get_horizontally_overlapping_cells(table, value):
                split_vertically(slot, value, table, writer)
            writer.set_attribute("heading_columns", value, table)

        logger.debug("Table %s now has %d heading column(s)", table.node_id, value)
