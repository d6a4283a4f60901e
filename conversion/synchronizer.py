"""
Structural synchronizer: keeps ``TableView`` output trees in step with the
source tables of a ``Document``.

The synchronizer listens to the document's change stream and updates the
views incrementally:

  - a new table is converted in one walk,
  - new rows and cells get fresh view nodes placed after the view of their
    nearest already-converted sibling,
  - heading changes move row views between sections and flip cell kinds in
    place,
  - span changes are copied onto the cell views,
  - removals drop view nodes and their bindings.

Only the section a row view lives in and the kind of a cell view are ever
changed in place.  Everything else is created once and reused.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from dto.events import (
    AttributeChanged,
    CellInserted,
    CellRemoved,
    ChangeEvent,
    RowInserted,
    RowRemoved,
    TableInserted,
    TableRemoved,
)
from dto.nodes import HEADING_KEYS, SPAN_KEYS, Table, TableCell, TableRow
from dto.slot import TableSlot
from dto.view import CellView, RowView, SectionKind, SectionView, TableView
from grid.classifier import cell_kind_of, section_of
from grid.utils import index_of
from grid.walker import iterate_row, iterate_table
from model.document import Document

logger = logging.getLogger(__name__)


class TableSynchronizer:
    """
    Owns the output trees of every table in *document*.

    Bindings are kept by source ``node_id``: one ``TableView`` per table,
    one ``RowView`` per row and one ``CellView`` per cell.
    """

    def __init__(self, document: Document) -> None:
        self._document = document
        self._tables: Dict[str, TableView] = {}
        self._rows: Dict[str, RowView] = {}
        self._cells: Dict[str, CellView] = {}

        document.add_listener(self.handle_event)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def view_for(self, table: Table) -> Optional[TableView]:
        return self._tables.get(table.node_id)

    def row_view_for(self, row: TableRow) -> Optional[RowView]:
        return self._rows.get(row.node_id)

    def cell_view_for(self, cell: TableCell) -> Optional[CellView]:
        return self._cells.get(cell.node_id)

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def handle_event(self, event: ChangeEvent) -> None:
        if isinstance(event, TableInserted):
            self.on_table_inserted(event.table)
        elif isinstance(event, TableRemoved):
            self.on_table_removed(event.table)
        elif event.table.node_id not in self._tables:
            # Table was never converted (listener attached late): build it
            # from its current state, which already includes this change.
            if self._document.table_of(event.table) is not None:
                logger.debug("Converting table %s on first change", event.table.node_id)
                self.on_table_inserted(event.table)
        elif isinstance(event, RowInserted):
            self.on_row_inserted(event.row, event.table)
        elif isinstance(event, CellInserted):
            self.on_cell_inserted(event.cell, event.row, event.table)
        elif isinstance(event, RowRemoved):
            self.on_row_removed(event.row, event.table)
        elif isinstance(event, CellRemoved):
            self.on_cell_removed(event.cell, event.row, event.table)
        elif isinstance(event, AttributeChanged):
            if event.key in HEADING_KEYS:
                self.on_heading_bounds_changed(
                    event.table, event.key, event.old_value, event.new_value
                )
            elif event.key in SPAN_KEYS:
                self.on_cell_span_changed(event.node, event.key, event.table)
            else:
                logger.warning("Ignoring change of unknown attribute %r", event.key)

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def on_table_inserted(self, table: Table) -> TableView:
        """Build the full output tree of *table* in a single walk."""
        existing = self._tables.get(table.node_id)
        if existing is not None:
            return existing

        view = TableView(source_id=table.node_id)
        self._tables[table.node_id] = view

        for slot in iterate_table(table):
            row_view = self._get_or_create_row_view(table, view, slot.row)
            self._insert_cell_view(table, row_view, slot)

        # Rows fully covered by spans from above have no anchors of their own
        for row_index in range(len(table.children)):
            self._get_or_create_row_view(table, view, row_index)

        logger.debug(
            "Converted table %s: %d row(s) in %d section(s)",
            table.node_id,
            len(table.children),
            len(view.sections),
        )
        return view

    def on_row_inserted(self, row: TableRow, table: Table) -> None:
        view = self._tables.get(table.node_id)
        if view is None:
            return

        row_index = index_of(table.children, row)
        if row_index == -1:
            logger.warning("Row %s is not part of table %s", row.node_id, table.node_id)
            return

        row_view = self._get_or_create_row_view(table, view, row_index)
        for slot in iterate_row(table, row_index):
            if slot.cell.node_id not in self._cells:
                self._insert_cell_view(table, row_view, slot)

        # Rows below moved down and may have left the heading rows
        self._reconcile(table, view)

    def on_cell_inserted(self, cell: TableCell, row: TableRow, table: Table) -> None:
        view = self._tables.get(table.node_id)
        if view is None or cell.node_id in self._cells:
            return

        row_view = self._rows.get(row.node_id)
        if row_view is None:
            self.on_row_inserted(row, table)
            return

        row_index = index_of(table.children, row)
        for slot in iterate_row(table, row_index):
            if slot.cell is cell:
                self._insert_cell_view(table, row_view, slot)
                break

        # Later cells of the row, and of rows below, may sit in new columns
        self._refresh_cell_kinds(table)

    # ------------------------------------------------------------------
    # Attribute changes
    # ------------------------------------------------------------------

    def on_heading_bounds_changed(
        self,
        table: Table,
        key: str,
        old_value: Optional[int],
        new_value: Optional[int],
    ) -> None:
        view = self._tables.get(table.node_id)
        if view is None:
            return

        logger.debug(
            "Table %s: %s changed %s -> %s", table.node_id, key, old_value, new_value
        )
        self._reconcile(table, view)

    def on_cell_span_changed(self, cell: TableCell, key: str, table: Table) -> None:
        cell_view = self._cells.get(cell.node_id)
        if cell_view is not None:
            setattr(cell_view, key, getattr(cell, key))

        # A span change can move the anchors of later cells
        self._refresh_cell_kinds(table)

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def on_table_removed(self, table: Table) -> None:
        view = self._tables.pop(table.node_id, None)
        if view is None:
            return

        for row_view in view.rows:
            self._unbind_row(row_view)
        logger.debug("Dropped view of table %s", table.node_id)

    def on_row_removed(self, row: TableRow, table: Table) -> None:
        row_view = self._rows.get(row.node_id)
        view = self._tables.get(table.node_id)
        if row_view is None or view is None:
            return

        for section in view.sections:
            position = index_of(section.rows, row_view)
            if position != -1:
                del section.rows[position]
                break
        self._unbind_row(row_view)

        # Rows below moved up; keep sections and kinds in line with the grid
        self._reconcile(table, view)

    def on_cell_removed(self, cell: TableCell, row: TableRow, table: Table) -> None:
        cell_view = self._cells.pop(cell.node_id, None)
        if cell_view is None:
            return

        row_view = self._rows.get(row.node_id)
        if row_view is not None:
            position = index_of(row_view.cells, cell_view)
            if position != -1:
                del row_view.cells[position]

        self._refresh_cell_kinds(table)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_or_create_row_view(self, table: Table, view: TableView, row_index: int) -> RowView:
        row = table.children[row_index]
        row_view = self._rows.get(row.node_id)
        if row_view is not None:
            return row_view

        kind = section_of(row_index, table.heading_rows)
        row_view = RowView(source_id=row.node_id, kind=kind)
        section = view.get_or_create_section(kind)
        section.rows.insert(self._row_position(table, section, row_index), row_view)
        self._rows[row.node_id] = row_view
        return row_view

    def _row_position(self, table: Table, section: SectionView, row_index: int) -> int:
        """
        Index in *section* right after the view of the closest earlier row
        that is already converted, or 0 when that row sits in the other
        section (or there is none).
        """
        for previous in range(row_index - 1, -1, -1):
            previous_view = self._rows.get(table.children[previous].node_id)
            if previous_view is None:
                continue
            position = index_of(section.rows, previous_view)
            return position + 1 if position != -1 else 0
        return 0

    def _insert_cell_view(self, table: Table, row_view: RowView, slot: TableSlot) -> CellView:
        cell = slot.cell
        cell_view = CellView(
            source_id=cell.node_id,
            kind=cell_kind_of(slot.row, slot.column, table.heading_rows, table.heading_columns),
            rowspan=cell.rowspan,
            colspan=cell.colspan,
            content=cell.content,
        )

        # Source order within the row decides the position, not the column
        position = 0
        row = table.children[slot.row]
        for sibling in reversed(row.children[: slot.cell_index]):
            sibling_view = self._cells.get(sibling.node_id)
            if sibling_view is None:
                continue
            sibling_position = index_of(row_view.cells, sibling_view)
            if sibling_position != -1:
                position = sibling_position + 1
                break

        row_view.cells.insert(position, cell_view)
        self._cells[cell.node_id] = cell_view
        return cell_view

    def _reconcile(self, table: Table, view: TableView) -> None:
        self._align_row_sections(table, view)
        self._refresh_cell_kinds(table)
        self._drop_empty_sections(view)

    def _align_row_sections(self, table: Table, view: TableView) -> None:
        """
        Put every bound row view into the section ``heading_rows`` assigns
        it, in ascending grid order.  Row and section views are reused;
        sections left without rows are dropped by the caller.
        """
        placed: Dict[SectionKind, List[RowView]] = {kind: [] for kind in SectionKind}

        for row_index, row in enumerate(table.children):
            row_view = self._rows.get(row.node_id)
            if row_view is None:
                continue

            kind = section_of(row_index, table.heading_rows)
            if row_view.kind != kind:
                row_view.kind = kind
                logger.debug("Moved row %d of table %s to %s", row_index, table.node_id, kind.value)
            placed[kind].append(row_view)

        for kind, row_views in placed.items():
            section = view.get_section(kind) if not row_views else view.get_or_create_section(kind)
            if section is None:
                continue
            if [r.source_id for r in section.rows] != [r.source_id for r in row_views]:
                section.rows[:] = row_views

    def _refresh_cell_kinds(self, table: Table) -> None:
        heading_rows = table.heading_rows
        heading_columns = table.heading_columns

        for slot in iterate_table(table):
            cell_view = self._cells.get(slot.cell.node_id)
            if cell_view is None:
                continue

            kind = cell_kind_of(slot.row, slot.column, heading_rows, heading_columns)
            if cell_view.kind != kind:
                cell_view.kind = kind

    def _drop_empty_sections(self, view: TableView) -> List[SectionKind]:
        removed = view.remove_empty_sections()
        for kind in removed:
            logger.debug("Removed empty %s section of table %s", kind.value, view.source_id)
        return removed

    def _unbind_row(self, row_view: RowView) -> None:
        self._rows.pop(row_view.source_id, None)
        for cell_view in row_view.cells:
            self._cells.pop(cell_view.source_id, None)
