"""Tests for the row and column insertion commands."""

from __future__ import annotations

import pytest

from grid.utils import get_columns, get_rows
from tests.table_fixtures import (
    assert_view_mirrors,
    cell,
    grid_layout,
    make_table,
    new_editor,
    view_layout,
)


@pytest.fixture
def editor():
    return new_editor()


@pytest.mark.smoke
class TestInsertRows:

    def test_span_over_insertion_point_grows(self, editor):
        spanning = cell("a", rowspan=3)
        table = editor.insert_table(make_table([[spanning, "b"], ["c"], ["d"]]))

        editor.insert_rows(table, at=1)

        assert spanning.rowspan == 4
        assert get_rows(table) == 4
        # The new row only has a cell in the column not held by the span
        assert len(table.children[1].children) == 1
        assert grid_layout(table) == [
            ["a", "b"],
            ["a", None],
            ["a", "c"],
            ["a", "d"],
        ]
        assert_view_mirrors(table, editor.view_of(table))

    def test_cell_anchored_at_insertion_point_is_not_grown(self, editor):
        table = editor.insert_table(make_table([["a", "b"], [cell("c", rowspan=2), "d"], ["e"]]))

        editor.insert_rows(table, at=1)

        assert table.children[2].children[0].rowspan == 2
        assert grid_layout(table) == [
            ["a", "b"],
            [None, None],
            ["c", "d"],
            ["c", "e"],
        ]

    def test_span_ending_before_insertion_point_is_untouched(self, editor):
        spanning = cell("a", rowspan=2)
        table = editor.insert_table(make_table([[spanning, "b"], ["c"], ["d", "e"]]))

        editor.insert_rows(table, at=2)

        assert spanning.rowspan == 2
        assert len(table.children[2].children) == 2

    def test_wide_span_leaves_gap_of_its_width(self, editor):
        spanning = cell("a", rowspan=2, colspan=2)
        table = editor.insert_table(make_table([[spanning, "b"], ["c"]]))

        editor.insert_rows(table, at=1, count=2)

        assert spanning.rowspan == 4
        assert [len(row.children) for row in table.children] == [2, 1, 1, 1]
        assert grid_layout(table)[1] == ["a", "a", None]

    def test_insert_inside_heading_rows_grows_heading(self, editor):
        table = editor.insert_table(make_table([["a"], ["b"]], heading_rows=1))

        editor.insert_rows(table, at=0, count=2)

        assert table.heading_rows == 3
        assert view_layout(editor.view_of(table)) == [
            ("header", [[None], [None], ["a"]]),
            ("body", [["b"]]),
        ]

    def test_insert_right_after_heading_rows_goes_to_body(self, editor):
        table = editor.insert_table(make_table([["a"], ["b"]], heading_rows=1))

        editor.insert_rows(table, at=1)

        assert table.heading_rows == 1
        assert view_layout(editor.view_of(table)) == [
            ("header", [["a"]]),
            ("body", [[None], ["b"]]),
        ]

    def test_append(self, editor):
        table = editor.insert_table(make_table([[cell("a", colspan=2)], ["b", "c"]]))

        editor.insert_rows(table, at=2)

        assert grid_layout(table)[2] == [None, None]
        assert_view_mirrors(table, editor.view_of(table))

    def test_copy_structure_from_row_above(self, editor):
        table = editor.insert_table(make_table([[cell("a", colspan=2), "b"], ["c", "d", "e"]]))

        editor.insert_rows(table, at=1, count=2, copy_structure_from_above=True)

        assert [[c.colspan for c in row.children] for row in table.children[1:3]] == [[2, 1], [2, 1]]
        assert_view_mirrors(table, editor.view_of(table))

    def test_copy_structure_from_row_below(self, editor):
        table = editor.insert_table(make_table([[cell("a", colspan=2), "b"], ["c", "d", "e"]]))

        editor.insert_rows(table, at=1, copy_structure_from_above=False)

        assert [c.colspan for c in table.children[1].children] == [1, 1, 1]

    def test_copied_structure_skips_growing_spans(self, editor):
        spanning = cell("a", rowspan=2)
        table = editor.insert_table(make_table([[spanning, cell("b", colspan=2)], ["c", "d"]]))

        editor.insert_rows(table, at=1, copy_structure_from_above=True)

        assert spanning.rowspan == 3
        assert [c.colspan for c in table.children[1].children] == [2]
        assert grid_layout(table) == [
            ["a", "b", "b"],
            ["a", None, None],
            ["a", "c", "d"],
        ]

    def test_copy_from_above_at_top_uses_single_cells(self, editor):
        table = editor.insert_table(make_table([[cell("a", colspan=2)]]))

        editor.insert_rows(table, at=0, copy_structure_from_above=True)

        assert [c.colspan for c in table.children[0].children] == [1, 1]

    def test_zero_count_is_noop(self, editor):
        table = editor.insert_table(make_table([["a"]]))
        editor.insert_rows(table, at=1, count=0)
        assert get_rows(table) == 1

    @pytest.mark.parametrize("at", [-1, 3])
    def test_out_of_range(self, editor, at):
        table = editor.insert_table(make_table([["a"], ["b"]]))
        with pytest.raises(ValueError):
            editor.insert_rows(table, at=at)

    def test_negative_count(self, editor):
        table = editor.insert_table(make_table([["a"]]))
        with pytest.raises(ValueError):
            editor.insert_rows(table, at=0, count=-1)

    def test_detached_table_is_rejected(self, editor):
        with pytest.raises(ValueError):
            editor.insert_rows(make_table([["a"]]), at=0)


@pytest.mark.smoke
class TestInsertColumns:

    def test_spanning_cells_grow_and_other_rows_get_cells(self, editor):
        a = cell("a", rowspan=2, colspan=2)
        i = cell("i", colspan=3)
        table = editor.insert_table(
            make_table(
                [
                    [a, "b"],
                    ["c"],
                    ["d", cell("e", rowspan=2), "f"],
                    ["g", "h"],
                    [i],
                ]
            )
        )

        editor.insert_columns(table, at=1, count=2)

        assert (a.colspan, i.colspan) == (4, 5)
        assert get_columns(table) == 5
        assert grid_layout(table) == [
            ["a", "a", "a", "a", "b"],
            ["a", "a", "a", "a", "c"],
            ["d", None, None, "e", "f"],
            ["g", None, None, "e", "h"],
            ["i", "i", "i", "i", "i"],
        ]
        assert_view_mirrors(table, editor.view_of(table))

    def test_cell_anchored_at_insertion_point_is_shifted(self, editor):
        target = cell("b", colspan=2)
        table = editor.insert_table(make_table([["a", target], ["c", "d", "e"]]))

        editor.insert_columns(table, at=1)

        assert target.colspan == 2
        assert grid_layout(table) == [
            ["a", None, "b", "b"],
            ["c", None, "d", "e"],
        ]

    def test_prepend_and_append(self, editor):
        table = editor.insert_table(make_table([["a", "b"], ["c", "d"]]))

        editor.insert_columns(table, at=0)
        editor.insert_columns(table, at=3)

        assert grid_layout(table) == [
            [None, "a", "b", None],
            [None, "c", "d", None],
        ]

    def test_column_under_row_span(self, editor):
        table = editor.insert_table(make_table([[cell("a", rowspan=2), "b"], ["c"]]))

        editor.insert_columns(table, at=1)

        assert grid_layout(table) == [
            ["a", None, "b"],
            ["a", None, "c"],
        ]
        assert_view_mirrors(table, editor.view_of(table))

    def test_insert_inside_heading_columns_grows_heading(self, editor):
        table = editor.insert_table(make_table([["a", "b"]], heading_columns=1))

        editor.insert_columns(table, at=0)
        assert table.heading_columns == 2

        editor.insert_columns(table, at=2)
        assert table.heading_columns == 2

    def test_new_heading_cells_are_typed(self, editor):
        table = editor.insert_table(make_table([["a", "b"]], heading_columns=1))

        editor.insert_columns(table, at=0)

        kinds = [c.kind.value for c in editor.view_of(table).rows[0].cells]
        assert kinds == ["header_cell", "header_cell", "plain_cell"]

    def test_zero_count_is_noop(self, editor):
        table = editor.insert_table(make_table([["a"]]))
        editor.insert_columns(table, at=0, count=0)
        assert get_columns(table) == 1

    def test_out_of_range(self, editor):
        table = editor.insert_table(make_table([["a", "b"]]))
        with pytest.raises(ValueError):
            editor.insert_columns(table, at=3)
