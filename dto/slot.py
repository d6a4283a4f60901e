from pydantic import BaseModel

from dto.nodes import TableCell


class TableSlot(BaseModel):
    """A cell anchor produced by the grid walker."""

    row: int
    column: int
    cell: TableCell
    rowspan: int = 1
    colspan: int = 1

    # Position of the cell inside its source row's children
    cell_index: int = 0

    @property
    def last_row(self) -> int:
        return self.row + self.rowspan - 1

    @property
    def last_column(self) -> int:
        return self.column + self.colspan - 1
