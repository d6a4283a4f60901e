"""
Output-tree DTOs consumed by rendering.

    TableView
      └─ sections: List[SectionView]     header first, then body
           └─ rows: List[RowView]        ascending grid row
                └─ cells: List[CellView] source order

Every view node keeps the ``node_id`` of the source node it mirrors in
``source_id``.  The kind of a row or cell is a plain enum field so it can be
flipped in place without rebuilding the node.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class SectionKind(str, Enum):
    HEADER = "header"
    BODY = "body"


class CellKind(str, Enum):
    HEADER_CELL = "header_cell"
    PLAIN_CELL = "plain_cell"


class CellView(BaseModel):
    source_id: str
    kind: CellKind = CellKind.PLAIN_CELL
    rowspan: int = 1
    colspan: int = 1
    content: Optional[str] = None


class RowView(BaseModel):
    source_id: str
    kind: SectionKind = SectionKind.BODY
    cells: List[CellView] = []


class SectionView(BaseModel):
    kind: SectionKind
    rows: List[RowView] = []


class TableView(BaseModel):
    source_id: str
    sections: List[SectionView] = []

    # ------------------------------------------------------------------
    # Section lookup
    # ------------------------------------------------------------------

    def get_section(self, kind: SectionKind) -> Optional[SectionView]:
        for section in self.sections:
            if section.kind == kind:
                return section
        return None

    def get_or_create_section(self, kind: SectionKind) -> SectionView:
        """Return the section of *kind*, creating it at its fixed place."""
        section = self.get_section(kind)
        if section is not None:
            return section

        section = SectionView(kind=kind)
        if kind == SectionKind.HEADER:
            self.sections.insert(0, section)
        else:
            self.sections.append(section)
        return section

    def remove_empty_sections(self) -> List[SectionKind]:
        """Drop sections without rows and return the kinds removed."""
        removed = [s.kind for s in self.sections if not s.rows]
        if removed:
            self.sections = [s for s in self.sections if s.rows]
        return removed

    @property
    def rows(self) -> List[RowView]:
        return [row for section in self.sections for row in section.rows]
