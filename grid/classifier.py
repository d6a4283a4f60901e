"""
Header / body classification of grid positions.

A row is part of the header section when it is one of the first
``heading_rows`` rows.  A cell is a header cell when its anchor lies in a
heading row or in one of the first ``heading_columns`` columns.
"""

from dto.view import CellKind, SectionKind


def section_of(row: int, heading_rows: int) -> SectionKind:
    return SectionKind.HEADER if row < heading_rows else SectionKind.BODY


def is_header_cell(row: int, column: int, heading_rows: int, heading_columns: int) -> bool:
    return row < heading_rows or column < heading_columns


def cell_kind_of(row: int, column: int, heading_rows: int, heading_columns: int) -> CellKind:
    if is_header_cell(row, column, heading_rows, heading_columns):
        return CellKind.HEADER_CELL
    return CellKind.PLAIN_CELL
