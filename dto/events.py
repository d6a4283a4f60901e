"""
Change notifications emitted by the document once a change block closes.

Each event carries the table it belongs to so a listener can re-walk the
grid without asking the document for ancestors.  Removal events carry the
parent the node had at the moment it was detached.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel

from dto.nodes import Table, TableCell, TableNode, TableRow


class TableInserted(BaseModel):
    event_type: Literal["table_inserted"] = "table_inserted"
    table: Table


class RowInserted(BaseModel):
    event_type: Literal["row_inserted"] = "row_inserted"
    row: TableRow
    table: Table


class CellInserted(BaseModel):
    event_type: Literal["cell_inserted"] = "cell_inserted"
    cell: TableCell
    row: TableRow
    table: Table


class AttributeChanged(BaseModel):
    event_type: Literal["attribute_changed"] = "attribute_changed"
    node: TableNode
    key: str
    old_value: Optional[int] = None
    new_value: Optional[int] = None
    table: Table


class TableRemoved(BaseModel):
    event_type: Literal["table_removed"] = "table_removed"
    table: Table


class RowRemoved(BaseModel):
    event_type: Literal["row_removed"] = "row_removed"
    row: TableRow
    table: Table


class CellRemoved(BaseModel):
    event_type: Literal["cell_removed"] = "cell_removed"
    cell: TableCell
    row: TableRow
    table: Table


ChangeEvent = Union[
    TableInserted,
    RowInserted,
    CellInserted,
    AttributeChanged,
    TableRemoved,
    RowRemoved,
    CellRemoved,
]
