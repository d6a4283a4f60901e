"""
Base class for table editing commands.

A command mutates one table of a ``Document`` inside a single change block
so the synchronizer sees the whole edit as one batch of events.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from dto.nodes import Table
from model.document import Document


class TableCommand(ABC):
    """Interface that every table editing command implements."""

    def __init__(self, document: Document) -> None:
        self.document = document

    @abstractmethod
    def execute(self, table: Table, *args, **kwargs) -> None:
        """Apply the edit to *table*."""
        ...

    # ------------------------------------------------------------------
    # Argument checks shared by the commands
    # ------------------------------------------------------------------

    def _require_attached(self, table: Table) -> None:
        if self.document.table_of(table) is None:
            raise ValueError(f"Table {table.node_id} is not part of the document")

    @staticmethod
    def _require_count(count: int) -> None:
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
