"""
Writer: the only way to mutate tables owned by a ``Document``.

A writer is handed out by ``Document.change()`` and records every mutation
on the document so the matching change events can be emitted when the
change block closes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from dto.nodes import ATTRIBUTE_MINIMUMS, Table, TableCell, TableNode, TableRow
from grid.utils import index_of

if TYPE_CHECKING:
    from model.document import Document

logger = logging.getLogger(__name__)


class Writer:

    def __init__(self, document: "Document") -> None:
        self._document = document

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def insert_table(self, table: Table, index: Optional[int] = None) -> None:
        """Attach a (possibly pre-populated) table to the document."""
        if index_of(self._document.tables, table) != -1:
            raise ValueError(f"Table {table.node_id} is already in the document")

        position = len(self._document.tables) if index is None else index
        self._document.tables.insert(position, table)
        self._document._register_subtree(table, None)
        self._document._record_insert(table)

    def insert(self, node: TableNode, parent: TableNode, index: Optional[int] = None) -> None:
        """
        Insert a row into a table or a cell into a row.

        *index* is the position among the parent's children; ``None``
        appends.
        """
        if isinstance(node, TableRow):
            if not isinstance(parent, Table):
                raise TypeError("A table row can only be inserted into a table")
        elif isinstance(node, TableCell):
            if not isinstance(parent, TableRow):
                raise TypeError("A table cell can only be inserted into a table row")
        else:
            raise TypeError(f"Cannot insert {type(node).__name__}; use insert_table()")

        if self._document.parent_of(node) is not None:
            raise ValueError(f"Node {node.node_id} is already attached; remove or move it first")

        children = parent.children
        position = len(children) if index is None else index
        if not 0 <= position <= len(children):
            raise ValueError(f"Insert position {position} outside 0..{len(children)}")

        children.insert(position, node)
        self._document._register_subtree(node, parent)
        self._document._record_insert(node)

    def remove(self, node: TableNode) -> None:
        if isinstance(node, Table):
            position = index_of(self._document.tables, node)
            if position == -1:
                raise ValueError(f"Table {node.node_id} is not in the document")
            self._document._record_remove(node, None)
            del self._document.tables[position]
            self._document._unregister_subtree(node)
            return

        parent = self._document.parent_of(node)
        if parent is None:
            raise ValueError(f"Node {node.node_id} is not attached")

        self._document._record_remove(node, parent)
        del parent.children[index_of(parent.children, node)]
        self._document._unregister_subtree(node)

    def move(self, node: TableNode, parent: TableNode, index: Optional[int] = None) -> None:
        """Detach *node* and insert it under *parent* at *index*."""
        self.remove(node)
        self.insert(node, parent, index)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def set_attribute(self, key: str, value: int, node: TableNode) -> None:
        minimums = ATTRIBUTE_MINIMUMS.get(type(node), {})
        if key not in minimums:
            raise ValueError(f"{type(node).__name__} has no attribute {key!r}")
        if value < minimums[key]:
            raise ValueError(f"{key} must be >= {minimums[key]}, got {value}")

        old_value = getattr(node, key)
        if old_value == value:
            return

        setattr(node, key, value)
        self._document._record_attribute(node, key, old_value, value)

    def remove_attribute(self, key: str, node: TableNode) -> None:
        """Reset *key* to its default (0 for headings, 1 for spans)."""
        minimums = ATTRIBUTE_MINIMUMS.get(type(node), {})
        if key not in minimums:
            raise ValueError(f"{type(node).__name__} has no attribute {key!r}")
        self.set_attribute(key, minimums[key], node)
