"""Tests for the structural synchronizer that maintains table output trees."""

from __future__ import annotations

import random

import pytest

from conversion.synchronizer import TableSynchronizer
from dto.nodes import TableCell, TableRow
from dto.view import CellKind, SectionKind
from grid.utils import create_table, get_columns, get_rows
from grid.validation import find_invariant_violations
from grid.walker import iterate_table
from model.document import Document
from tests.table_fixtures import (
    assert_view_mirrors,
    cell,
    cell_kinds,
    make_table,
    new_editor,
    view_layout,
)


@pytest.fixture
def editor():
    return new_editor()


@pytest.mark.smoke
class TestConversion:

    def test_plain_table_goes_to_body(self, editor):
        table = editor.insert_table(make_table([["a", "b"], ["c", "d"]]))
        view = editor.view_of(table)

        assert view_layout(view) == [("body", [["a", "b"], ["c", "d"]])]
        assert set(cell_kinds(view).values()) == {"plain_cell"}

    def test_heading_rows_and_columns(self, editor):
        table = editor.insert_table(
            make_table([["a", "b"], ["c", "d"], ["e", "f"]], heading_rows=1, heading_columns=1)
        )
        view = editor.view_of(table)

        assert view_layout(view) == [
            ("header", [["a", "b"]]),
            ("body", [["c", "d"], ["e", "f"]]),
        ]
        assert cell_kinds(view) == {
            "a": "header_cell",
            "b": "header_cell",
            "c": "header_cell",
            "d": "plain_cell",
            "e": "header_cell",
            "f": "plain_cell",
        }
        assert_view_mirrors(table, view)

    def test_kind_follows_anchor_column(self, editor):
        table = editor.insert_table(
            make_table([[cell("a", colspan=2), "b", "c"]], heading_columns=3)
        )
        assert cell_kinds(editor.view_of(table)) == {
            "a": "header_cell",
            "b": "header_cell",
            "c": "plain_cell",
        }

    def test_spans_are_copied(self, editor):
        table = editor.insert_table(make_table([[cell("a", rowspan=2, colspan=2), "b"], ["c"]]))
        first = editor.view_of(table).rows[0].cells[0]

        assert (first.rowspan, first.colspan) == (2, 2)

    def test_row_covered_by_spans_still_gets_a_container(self, editor):
        table = editor.insert_table(
            make_table([[cell("a", rowspan=3), cell("b", rowspan=2)], [], ["c"]])
        )
        view = editor.view_of(table)

        assert view_layout(view) == [("body", [["a", "b"], [], ["c"]])]
        assert_view_mirrors(table, view)

    def test_conversion_is_idempotent(self, editor):
        table = editor.insert_table(make_table([["a"]]))
        view = editor.view_of(table)

        assert editor.synchronizer.on_table_inserted(table) is view
        assert view_layout(view) == [("body", [["a"]])]

    def test_late_listener_converts_on_first_change(self):
        document = Document(check_invariants=True)
        table = make_table([["a", "b"]])
        with document.change() as writer:
            writer.insert_table(table)

        synchronizer = TableSynchronizer(document)
        assert synchronizer.view_for(table) is None

        with document.change() as writer:
            writer.insert(TableRow(children=[cell("c"), cell("d")]), table)

        view = synchronizer.view_for(table)
        assert view_layout(view) == [("body", [["a", "b"], ["c", "d"]])]


@pytest.mark.smoke
class TestHeadingChanges:

    def test_header_section_removed_when_emptied(self, editor):
        table = editor.insert_table(make_table([["a"], ["b"]], heading_rows=1))
        view = editor.view_of(table)
        row_view = view.rows[0]

        editor.set_heading_rows(table, 0)

        assert [s.kind for s in view.sections] == [SectionKind.BODY]
        assert view_layout(view) == [("body", [["a"], ["b"]])]
        assert view.rows[0] is row_view
        assert row_view.cells[0].kind == CellKind.PLAIN_CELL

    def test_rows_move_into_header(self, editor):
        table = editor.insert_table(
            make_table([["a"], ["b"], ["c"], ["d"]], heading_rows=1)
        )
        view = editor.view_of(table)

        editor.set_heading_rows(table, 3)

        assert view_layout(view) == [
            ("header", [["a"], ["b"], ["c"]]),
            ("body", [["d"]]),
        ]
        assert_view_mirrors(table, view)

    def test_rows_move_back_to_body(self, editor):
        table = editor.insert_table(
            make_table([["a"], ["b"], ["c"], ["d"]], heading_rows=3)
        )
        view = editor.view_of(table)

        editor.set_heading_rows(table, 1)

        assert view_layout(view) == [
            ("header", [["a"]]),
            ("body", [["b"], ["c"], ["d"]]),
        ]
        assert_view_mirrors(table, view)

    def test_header_section_created_in_front(self, editor):
        table = editor.insert_table(make_table([["a"], ["b"]]))
        view = editor.view_of(table)

        editor.set_heading_rows(table, 2)

        assert view_layout(view) == [("header", [["a"], ["b"]])]

    def test_heading_columns_retype_cells_in_place(self, editor):
        table = editor.insert_table(make_table([["a", "b", "c"]]))
        view = editor.view_of(table)
        before = list(view.rows[0].cells)

        editor.set_heading_columns(table, 2)

        assert all(a is b for a, b in zip(before, view.rows[0].cells))
        assert cell_kinds(view) == {
            "a": "header_cell",
            "b": "header_cell",
            "c": "plain_cell",
        }


@pytest.mark.smoke
class TestIncrementalUpdates:

    def test_row_inserted_in_the_middle(self, editor):
        table = editor.insert_table(make_table([["a"], ["c"]], heading_rows=1))
        view = editor.view_of(table)

        with editor.document.change() as writer:
            writer.insert(TableRow(children=[cell("b")]), table, 1)

        assert view_layout(view) == [("header", [["a"]]), ("body", [["b"], ["c"]])]
        assert_view_mirrors(table, view)

    def test_several_siblings_in_one_block(self, editor):
        table = editor.insert_table(make_table([["a", "d"]]))
        view = editor.view_of(table)
        row = table.children[0]

        with editor.document.change() as writer:
            writer.insert(cell("b"), row, 1)
            writer.insert(cell("c"), row, 2)
            writer.insert(TableRow(children=[cell("e"), cell("f"), cell("g"), cell("h")]), table)

        assert view_layout(view) == [("body", [["a", "b", "c", "d"], ["e", "f", "g", "h"]])]
        assert_view_mirrors(table, view)

    def test_span_change_updates_view(self, editor):
        table = editor.insert_table(make_table([["a", "b"], ["c", "d"]]))
        view = editor.view_of(table)
        first = table.children[0].children[0]

        with editor.document.change() as writer:
            writer.remove(table.children[1].children[0])
            writer.set_attribute("rowspan", 2, first)

        assert view.rows[0].cells[0].rowspan == 2
        assert view_layout(view) == [("body", [["a", "b"], ["d"]])]
        assert_view_mirrors(table, view)

    def test_cell_removal_drops_view(self, editor):
        table = editor.insert_table(make_table([["a", "b"], ["c", "d"]]))
        removed = table.children[0].children[1]

        with editor.document.change() as writer:
            writer.remove(removed)
            writer.set_attribute("colspan", 2, table.children[0].children[0])

        assert editor.synchronizer.cell_view_for(removed) is None
        assert view_layout(editor.view_of(table)) == [("body", [["a"], ["c", "d"]])]

    def test_table_removal_unbinds_everything(self, editor):
        table = editor.insert_table(make_table([["a"]]))
        row = table.children[0]

        editor.remove_table(table)

        assert editor.synchronizer.view_for(table) is None
        assert editor.synchronizer.row_view_for(row) is None
        assert editor.synchronizer.cell_view_for(row.children[0]) is None


@pytest.mark.smoke
class TestShiftedRowsAndCells:

    def test_row_inserted_above_heading_row_pushes_it_to_body(self, editor):
        table = editor.insert_table(make_table([["a"], ["b"]], heading_rows=1))
        view = editor.view_of(table)

        with editor.document.change() as writer:
            writer.insert(TableRow(children=[cell("new")]), table, 0)

        assert view_layout(view) == [("header", [["new"]]), ("body", [["a"], ["b"]])]
        assert_view_mirrors(table, view)

    def test_cell_inserted_before_heading_cell_retypes_it(self, editor):
        table = editor.insert_table(make_table([["a", "b"]], heading_columns=1))

        with editor.document.change() as writer:
            writer.insert(cell("new"), table.children[0], 0)

        assert cell_kinds(editor.view_of(table)) == {
            "new": "header_cell",
            "a": "plain_cell",
            "b": "plain_cell",
        }

    def test_heading_rows_back_to_their_old_value_in_one_block(self, editor):
        table = editor.insert_table(make_table([["a"], ["b"], ["c"]], heading_rows=2))
        view = editor.view_of(table)

        with editor.document.change():
            editor.set_heading_rows(table, 1)
            editor.insert_rows(table, at=0)

        assert table.heading_rows == 2
        assert view_layout(view) == [("header", [[None], ["a"]]), ("body", [["b"], ["c"]])]
        assert_view_mirrors(table, view)

    def test_heading_columns_back_to_their_old_value_in_one_block(self, editor):
        table = editor.insert_table(make_table([["a", "b"]], heading_columns=1))

        with editor.document.change():
            editor.set_heading_columns(table, 0)
            editor.insert_columns(table, at=0)
            editor.set_heading_columns(table, 1)

        assert cell_kinds(editor.view_of(table)) == {
            None: "header_cell",
            "a": "plain_cell",
            "b": "plain_cell",
        }
        assert_view_mirrors(table, editor.view_of(table))

    def test_removing_every_row_with_headings(self, editor):
        table = editor.insert_table(
            make_table([["a", "b"], ["c", "d"]], heading_rows=1, heading_columns=1)
        )

        editor.remove_rows(table, at=0, count=2)

        assert (table.heading_rows, table.heading_columns) == (0, 0)
        assert editor.view_of(table).sections == []
        assert find_invariant_violations(table) == []


def _random_edit(editor, table, rng: random.Random) -> None:
    rows = get_rows(table)
    columns = get_columns(table)
    edit = rng.choice(
        [
            "insert_rows",
            "insert_columns",
            "remove_rows",
            "remove_columns",
            "heading_rows",
            "heading_columns",
            "split_vertically",
            "split_horizontally",
            "row_on_top",
        ]
    )

    if edit == "insert_rows":
        editor.insert_rows(
            table,
            at=rng.randint(0, rows),
            count=rng.randint(1, 2),
            copy_structure_from_above=rng.choice([None, True, False]),
        )
    elif edit == "insert_columns":
        editor.insert_columns(table, at=rng.randint(0, columns), count=rng.randint(1, 2))
    elif edit == "remove_rows" and rows > 1:
        count = rng.randint(1, min(2, rows - 1))
        editor.remove_rows(table, at=rng.randint(0, rows - count), count=count)
    elif edit == "remove_columns" and columns > 1:
        count = rng.randint(1, min(2, columns - 1))
        editor.remove_columns(table, at=rng.randint(0, columns - count), count=count)
    elif edit == "heading_rows":
        editor.set_heading_rows(table, rng.randint(0, rows))
    elif edit == "heading_columns":
        editor.set_heading_columns(table, rng.randint(0, columns))
    elif edit == "split_vertically":
        target = rng.choice(list(iterate_table(table))).cell
        editor.split_cell_vertically(table, target, rng.randint(2, 3))
    elif edit == "split_horizontally":
        target = rng.choice(list(iterate_table(table))).cell
        editor.split_cell_horizontally(table, target, rng.randint(2, 3))
    elif edit == "row_on_top":
        # Plain writer insert: no command adjusts the heading rows
        with editor.document.change() as writer:
            writer.insert(TableRow(children=[TableCell() for _ in range(columns)]), table, 0)


@pytest.mark.integration
class TestEditSequences:

    @pytest.mark.parametrize("seed", range(60))
    def test_batched_edits_keep_view_in_step(self, editor, seed):
        rng = random.Random(seed)
        table = editor.insert_table(create_table(3, 3, heading_rows=1, heading_columns=1))
        view = editor.view_of(table)

        for _ in range(6):
            with editor.document.change():
                for _ in range(rng.randint(1, 4)):
                    _random_edit(editor, table, rng)

            assert find_invariant_violations(table) == []
            assert editor.view_of(table) is view
            assert_view_mirrors(table, view)

    @pytest.mark.parametrize("seed", range(20))
    def test_single_edits_keep_view_in_step(self, editor, seed):
        rng = random.Random(seed)
        table = editor.insert_table(create_table(2, 4, heading_rows=1))

        for _ in range(12):
            _random_edit(editor, table, rng)

            assert find_invariant_violations(table) == []
            assert_view_mirrors(table, editor.view_of(table))
