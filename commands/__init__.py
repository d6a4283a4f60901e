"""
Table editing commands.

Every command takes the ``Document`` at construction and edits one of its
tables per ``execute`` call inside a single change block:
  1. InsertRowCommand / InsertColumnCommand  grow spans across the insertion
  2. RemoveRowCommand / RemoveColumnCommand  trim or relocate spanning cells
  3. SetHeadingRowsCommand / SetHeadingColumnsCommand  split cells cut by
     the new heading boundary
  4. SplitCellVerticallyCommand / SplitCellHorizontallyCommand  turn one
     cell into several
"""

from commands.base import TableCommand
from commands.insert_column import InsertColumnCommand
from commands.insert_row import InsertRowCommand
from commands.remove_column import RemoveColumnCommand
from commands.remove_row import RemoveRowCommand
from commands.set_heading import SetHeadingColumnsCommand, SetHeadingRowsCommand
from commands.split_cell import SplitCellHorizontallyCommand, SplitCellVerticallyCommand

__all__ = [
    "TableCommand",
    "InsertRowCommand",
    "InsertColumnCommand",
    "RemoveRowCommand",
    "RemoveColumnCommand",
    "SetHeadingRowsCommand",
    "SetHeadingColumnsCommand",
    "SplitCellVerticallyCommand",
    "SplitCellHorizontallyCommand",
]
