"""
Source-tree DTOs for a table.

    Table
      └─ children: List[TableRow]        (grid row order)
           └─ children: List[TableCell]  (cells anchored in that row only)

A row never repeats a cell that spans down into it from a row above; such
cells are implicit and only show up once the grid is walked.
"""

from __future__ import annotations

import uuid
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field


def _new_node_id() -> str:
    return uuid.uuid4().hex


class TableCell(BaseModel):
    # node_id stays the first field so equality checks fail fast
    node_id: str = Field(default_factory=_new_node_id)
    rowspan: int = Field(default=1, ge=1)
    colspan: int = Field(default=1, ge=1)
    content: Optional[str] = None


class TableRow(BaseModel):
    node_id: str = Field(default_factory=_new_node_id)
    children: List[TableCell] = []


class Table(BaseModel):
    node_id: str = Field(default_factory=_new_node_id)
    heading_rows: int = Field(default=0, ge=0)
    heading_columns: int = Field(default=0, ge=0)
    children: List[TableRow] = []


TableNode = Union[Table, TableRow, TableCell]


# Attribute keys each node type accepts, with their minimum value.
ATTRIBUTE_MINIMUMS: Dict[type, Dict[str, int]] = {
    Table: {"heading_rows": 0, "heading_columns": 0},
    TableCell: {"rowspan": 1, "colspan": 1},
}

HEADING_KEYS: Tuple[str, ...] = ("heading_rows", "heading_columns")
SPAN_KEYS: Tuple[str, ...] = ("rowspan", "colspan")
