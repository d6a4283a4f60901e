"""
Consistency checks for a table's grid.

The checks rebuild the dense grid as an occupancy matrix (how many cells
cover each slot) and look for the three ways a table can be broken:

  - two cells covering the same slot,
  - slots nobody covers, or cells reaching outside the ``rows x W`` grid,
  - heading counts outside the table.

Violations are programmer errors.  Nothing here is meant to be caught.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

from dto.nodes import Table
from grid.utils import get_columns, get_rows
from grid.walker import iterate_table

logger = logging.getLogger(__name__)

# Upper bound on the number of slot coordinates listed per message.
_MAX_REPORTED_SLOTS = 5


def build_occupancy(table: Table) -> np.ndarray:
    """
    Return an ``int`` matrix with one entry per grid slot counting the cells
    that cover it.  The matrix grows past ``rows x W`` when spans overshoot.
    """
    slots = list(iterate_table(table))
    height = max([get_rows(table)] + [s.row + s.rowspan for s in slots])
    width = max([get_columns(table)] + [s.column + s.colspan for s in slots])

    occupancy = np.zeros((height, width), dtype=np.int64)
    for slot in slots:
        occupancy[slot.row : slot.row + slot.rowspan, slot.column : slot.column + slot.colspan] += 1
    return occupancy


def _format_slots(coords: np.ndarray) -> str:
    listed = ", ".join(f"({r}, {c})" for r, c in coords[:_MAX_REPORTED_SLOTS].tolist())
    if len(coords) > _MAX_REPORTED_SLOTS:
        listed += f" and {len(coords) - _MAX_REPORTED_SLOTS} more"
    return listed


def find_invariant_violations(table: Table) -> List[str]:
    """Return a human readable description of every broken invariant."""
    violations: List[str] = []

    rows = get_rows(table)
    width = get_columns(table)
    occupancy = build_occupancy(table)

    overlapping = np.argwhere(occupancy > 1)
    if len(overlapping):
        violations.append(f"overlapping cells at {_format_slots(overlapping)}")

    inside = occupancy[:rows, :width]
    uncovered = np.argwhere(inside == 0)
    if len(uncovered):
        violations.append(f"uncovered slots at {_format_slots(uncovered)}")

    if occupancy.shape[0] > rows:
        violations.append(
            f"cells span down to row {occupancy.shape[0] - 1} of a {rows}-row table"
        )
    if occupancy.shape[1] > width:
        violations.append(
            f"cells span right to column {occupancy.shape[1] - 1} of a {width}-column table"
        )

    if not 0 <= table.heading_rows <= rows:
        violations.append(f"heading_rows={table.heading_rows} outside [0, {rows}]")
    if not 0 <= table.heading_columns <= width:
        violations.append(f"heading_columns={table.heading_columns} outside [0, {width}]")

    return violations


def assert_table_consistent(table: Table) -> None:
    violations = find_invariant_violations(table)
    if violations:
        logger.error("Table %s is inconsistent: %s", table.node_id, "; ".join(violations))
        raise AssertionError(f"Table {table.node_id} is inconsistent: " + "; ".join(violations))
