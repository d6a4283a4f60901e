"""
Per-walk bookkeeping of cells that span down into later rows.

The tracker only ever looks forward: when a cell anchored in row ``r`` has a
rowspan greater than one, each row in ``(r, r + rowspan)`` learns that the
columns starting at the cell's column are taken for ``colspan`` slots.
"""

from __future__ import annotations

from typing import Dict


class SpanTracker:
    """Records row-spanned column ranges discovered during a single walk."""

    def __init__(self) -> None:
        # future_row -> {column_start: span_width}
        self._spans: Dict[int, Dict[int, int]] = {}

    def adjust(self, row: int, column: int) -> int:
        """
        Return the first column at or after *column* in *row* that is not
        held by a span from an earlier row.  Adjacent spans are skipped one
        after another.
        """
        row_spans = self._spans.get(row)
        if not row_spans:
            return column

        while column in row_spans:
            column += row_spans[column]
        return column

    def record(self, row: int, column: int, height: int, width: int) -> None:
        """Reserve ``width`` columns at *column* in the ``height - 1`` rows below *row*."""
        if height <= 1:
            return

        for future_row in range(row + 1, row + height):
            self._spans.setdefault(future_row, {})[column] = width

    def spans_at(self, row: int) -> Dict[int, int]:
        return dict(self._spans.get(row, {}))
