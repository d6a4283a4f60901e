"""
Grid model of a table.

The grid is never stored: every consumer re-derives it from the source
tree with ``TableWalker``, which replays row spans through a fresh
``SpanTracker`` on each walk.
"""

from grid.classifier import cell_kind_of, is_header_cell, section_of
from grid.span_tracker import SpanTracker
from grid.utils import create_table, get_cell_location, get_columns, get_rows, index_of
from grid.walker import TableWalker, iterate_row, iterate_table

__all__ = [
    "SpanTracker",
    "TableWalker",
    "iterate_table",
    "iterate_row",
    "section_of",
    "is_header_cell",
    "cell_kind_of",
    "create_table",
    "get_cell_location",
    "get_columns",
    "get_rows",
    "index_of",
]
