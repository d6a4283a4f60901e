"""
Document: owner of the table source trees and of the change block.

All mutations happen inside ``with document.change() as writer:``.  The
writer records what it does; when the outermost block exits the recorded
mutations are folded into change events and delivered to every listener:

  1. removals, in the order they happened,
  2. insertions, skipping nodes that are no longer attached and nodes whose
     ancestor was inserted in the same block (the ancestor covers them),
  3. attribute changes, coalesced per ``(node, key)``, skipping unchanged
     values and nodes inserted in the same block.

Listeners therefore always see the final state of the block.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Set, Tuple

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
from dto.nodes import ATTRIBUTE_MINIMUMS, Table, TableCell, TableNode, TableRow
from grid.utils import index_of
from grid.validation import assert_table_consistent
from model.constants import invariant_checks_enabled
from model.writer import Writer

logger = logging.getLogger(__name__)

Listener = Callable[[ChangeEvent], None]


class Document:
    """A flat list of tables plus the change-notification stream over them."""

    def __init__(self, check_invariants: Optional[bool] = None) -> None:
        self.tables: List[Table] = []
        self._check_invariants = (
            invariant_checks_enabled() if check_invariants is None else check_invariants
        )
        self._listeners: List[Listener] = []
        self._parents: Dict[str, TableNode] = {}
        self._writer: Optional[Writer] = None

        # Pending mutations of the open change block
        self._inserted: List[TableNode] = []
        self._removed: List[Tuple[TableNode, Optional[TableNode], Optional[Table]]] = []
        self._attributes: Dict[Tuple[str, str], List[Any]] = {}

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners = [registered for registered in self._listeners if registered != listener]

    # ------------------------------------------------------------------
    # Change block
    # ------------------------------------------------------------------

    @contextmanager
    def change(self) -> Iterator[Writer]:
        """
        Open a change block.  Nested calls join the enclosing block, so a
        command may open its own block and still be batched with its caller.
        """
        if self._writer is not None:
            yield self._writer
            return

        self._writer = Writer(self)
        try:
            yield self._writer
        except Exception:
            logger.exception(
                "Change block failed; dropping %d pending mutation(s)",
                len(self._inserted) + len(self._removed) + len(self._attributes),
            )
            self._clear_pending()
            raise
        finally:
            self._writer = None

        self._flush()

    @property
    def in_change_block(self) -> bool:
        return self._writer is not None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def parent_of(self, node: TableNode) -> Optional[TableNode]:
        return self._parents.get(node.node_id)

    def children_of(self, node: TableNode) -> List[TableNode]:
        if isinstance(node, TableCell):
            return []
        return list(node.children)

    def get_attribute(self, node: TableNode, key: str) -> int:
        if key not in ATTRIBUTE_MINIMUMS.get(type(node), {}):
            raise ValueError(f"{type(node).__name__} has no attribute {key!r}")
        return getattr(node, key)

    def table_of(self, node: TableNode) -> Optional[Table]:
        """Return the document table that contains *node*, if it is attached."""
        current: Optional[TableNode] = node
        while current is not None and not isinstance(current, Table):
            current = self.parent_of(current)
        if current is None or index_of(self.tables, current) == -1:
            return None
        return current

    # ------------------------------------------------------------------
    # Bookkeeping used by the writer
    # ------------------------------------------------------------------

    def _register_subtree(self, node: TableNode, parent: Optional[TableNode]) -> None:
        if parent is not None:
            self._parents[node.node_id] = parent
        for child in self.children_of(node):
            self._register_subtree(child, node)

    def _unregister_subtree(self, node: TableNode) -> None:
        self._parents.pop(node.node_id, None)
        for child in self.children_of(node):
            self._unregister_subtree(child)

    def _record_insert(self, node: TableNode) -> None:
        self._inserted.append(node)

    def _record_remove(self, node: TableNode, parent: Optional[TableNode]) -> None:
        table = node if isinstance(node, Table) else self.table_of(node)
        self._removed.append((node, parent, table))

    def _record_attribute(self, node: TableNode, key: str, old_value: int, new_value: int) -> None:
        entry = self._attributes.get((node.node_id, key))
        if entry is None:
            self._attributes[(node.node_id, key)] = [node, key, old_value, new_value]
        else:
            entry[3] = new_value

    def _clear_pending(self) -> None:
        self._inserted = []
        self._removed = []
        self._attributes = {}

    # ------------------------------------------------------------------
    # Flushing
    # ------------------------------------------------------------------

    def _flush(self) -> None:
        events = self._collect_events()
        self._clear_pending()

        if not events:
            return

        if self._check_invariants:
            for table in self.tables:
                assert_table_consistent(table)

        logger.debug("Dispatching %d change event(s)", len(events))
        for event in events:
            for listener in list(self._listeners):
                listener(event)

    def _collect_events(self) -> List[ChangeEvent]:
        events: List[ChangeEvent] = []

        seen_removed: Set[str] = set()
        for node, parent, table in self._removed:
            if table is None or node.node_id in seen_removed:
                continue
            seen_removed.add(node.node_id)
            if isinstance(node, Table):
                events.append(TableRemoved(table=node))
            elif isinstance(node, TableRow):
                events.append(RowRemoved(row=node, table=table))
            else:
                events.append(CellRemoved(cell=node, row=parent, table=table))

        inserted_ids = {node.node_id for node in self._inserted}
        seen_inserted: Set[str] = set()
        for node in self._inserted:
            if node.node_id in seen_inserted:
                continue
            seen_inserted.add(node.node_id)

            table = self.table_of(node)
            if table is None or self._has_inserted_ancestor(node, inserted_ids):
                continue

            if isinstance(node, Table):
                events.append(TableInserted(table=node))
            elif isinstance(node, TableRow):
                events.append(RowInserted(row=node, table=table))
            else:
                events.append(CellInserted(cell=node, row=self.parent_of(node), table=table))

        for node, key, old_value, new_value in self._attributes.values():
            if old_value == new_value:
                continue
            table = self.table_of(node)
            if table is None:
                continue
            if node.node_id in inserted_ids or self._has_inserted_ancestor(node, inserted_ids):
                continue
            events.append(
                AttributeChanged(
                    node=node,
                    key=key,
                    old_value=old_value,
                    new_value=new_value,
                    table=table,
                )
            )

        return events

    def _has_inserted_ancestor(self, node: TableNode, inserted_ids: Set[str]) -> bool:
        parent = self.parent_of(node)
        while parent is not None:
            if parent.node_id in inserted_ids:
                return True
            parent = self.parent_of(parent)
        return False
