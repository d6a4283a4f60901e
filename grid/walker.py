"""
Grid walker: turns the sparse row/cell tree into anchored grid positions.

Rows are visited in order and, within a row, cells in source order.  Every
cell is placed at the first column not already held by a span coming from
above, which is exactly how a renderer lays out ``rowspan``/``colspan``.
"""

from __future__ import annotations

from typing import Iterator, Optional

from dto.nodes import Table
from dto.slot import TableSlot
from grid.span_tracker import SpanTracker


class TableWalker:
    """
    Restartable iterator over the anchors of *table*.

    Args:
        table: The table to walk.
        row: Only yield anchors of this grid row.
        end_row: Stop after this grid row (inclusive).

    Each ``iter()`` starts from row 0 with a fresh ``SpanTracker``; spans of
    earlier rows are always replayed because they decide column placement in
    later rows.
    """

    def __init__(
        self,
        table: Table,
        row: Optional[int] = None,
        end_row: Optional[int] = None,
    ) -> None:
        self._table = table
        self._start_row = row if row is not None else 0
        self._end_row = row if row is not None else end_row

    def __iter__(self) -> Iterator[TableSlot]:
        tracker = SpanTracker()

        for row_index, table_row in enumerate(self._table.children):
            if self._end_row is not None and row_index > self._end_row:
                return

            column = 0
            for cell_index, cell in enumerate(table_row.children):
                column = tracker.adjust(row_index, column)
                # Built from already validated nodes
                slot = TableSlot.model_construct(
                    row=row_index,
                    column=column,
                    cell=cell,
                    rowspan=cell.rowspan,
                    colspan=cell.colspan,
                    cell_index=cell_index,
                )
                tracker.record(row_index, column, cell.rowspan, cell.colspan)

                if row_index >= self._start_row:
                    yield slot

                column += cell.colspan


def iterate_table(table: Table) -> Iterator[TableSlot]:
    return iter(TableWalker(table))


def iterate_row(table: Table, row: int) -> Iterator[TableSlot]:
    """Yield the anchors of grid row *row* only."""
    return iter(TableWalker(table, row=row))
