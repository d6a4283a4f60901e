"""
TableEditor: one-stop facade over a ``Document``, its ``TableSynchronizer``
and the editing commands.

    editor = TableEditor()
    table = editor.create_table(rows=3, columns=3, heading_rows=1)
    editor.insert_rows(table, at=1)
    html = editor.render_html(table)
"""

from __future__ import annotations

import logging
from typing import Optional

from commands import (
    InsertColumnCommand,
    InsertRowCommand,
    RemoveColumnCommand,
    RemoveRowCommand,
    SetHeadingColumnsCommand,
    SetHeadingRowsCommand,
    SplitCellHorizontallyCommand,
    SplitCellVerticallyCommand,
)
from conversion import TableSynchronizer
from dto.nodes import Table, TableCell
from dto.view import TableView
from grid.utils import create_table
from model import Document
from utils.html import render_table_html

logger = logging.getLogger(__name__)


class TableEditor:

    def __init__(self, document: Optional[Document] = None) -> None:
        self.document = document if document is not None else Document()
        self.synchronizer = TableSynchronizer(self.document)

        self._insert_row = InsertRowCommand(self.document)
        self._insert_column = InsertColumnCommand(self.document)
        self._remove_row = RemoveRowCommand(self.document)
        self._remove_column = RemoveColumnCommand(self.document)
        self._set_heading_rows = SetHeadingRowsCommand(self.document)
        self._set_heading_columns = SetHeadingColumnsCommand(self.document)
        self._split_cell_vertically = SplitCellVerticallyCommand(self.document)
        self._split_cell_horizontally = SplitCellHorizontallyCommand(self.document)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def create_table(
        self,
        rows: int = 2,
        columns: int = 2,
        heading_rows: int = 0,
        heading_columns: int = 0,
    ) -> Table:
        """Create an empty table and append it to the document."""
        table = create_table(rows, columns, heading_rows, heading_columns)
        return self.insert_table(table)

    def insert_table(self, table: Table, index: Optional[int] = None) -> Table:
        with self.document.change() as writer:
            writer.insert_table(table, index)
        logger.debug(
            "Added table %s (%d row(s), %d heading row(s))",
            table.node_id,
            len(table.children),
            table.heading_rows,
        )
        return table

    def remove_table(self, table: Table) -> None:
        with self.document.change() as writer:
            writer.remove(table)

    # ------------------------------------------------------------------
    # Structure edits
    # ------------------------------------------------------------------

    def insert_rows(
        self,
        table: Table,
        at: int,
        count: int = 1,
        copy_structure_from_above: Optional[bool] = None,
    ) -> None:
        self._insert_row.execute(table, at, count, copy_structure_from_above)

    def insert_columns(self, table: Table, at: int, count: int = 1) -> None:
        self._insert_column.execute(table, at, count)

    def remove_rows(self, table: Table, at: int, count: int = 1) -> None:
        self._remove_row.execute(table, at, count)

    def remove_columns(self, table: Table, at: int, count: int = 1) -> None:
        self._remove_column.execute(table, at, count)

    def set_heading_rows(self, table: Table, value: int) -> None:
        self._set_heading_rows.execute(table, value)

    def set_heading_columns(self, table: Table, value: int) -> None:
        self._set_heading_columns.execute(table, value)

    def split_cell_vertically(self, table: Table, cell: TableCell, number_of_cells: int = 2) -> None:
        self._split_cell_vertically.execute(table, cell, number_of_cells)

    def split_cell_horizontally(self, table: Table, cell: TableCell, number_of_cells: int = 2) -> None:
        self._split_cell_horizontally.execute(table, cell, number_of_cells)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def view_of(self, table: Table) -> TableView:
        view = self.synchronizer.view_for(table)
        if view is None:
            raise ValueError(f"Table {table.node_id} has no view; insert it into the document first")
        return view

    def render_html(self, table: Table) -> str:
        return render_table_html(self.view_of(table))
