"""
Table renderer: CLI entry point.

Usage:
    python render_table.py <excel_file> [--sheet <sheet_name>] [--range A1:D10]
        [--heading-rows N] [--heading-columns N]
        [--insert-row AT[:COUNT]] [--insert-column AT[:COUNT]]
        [--remove-row AT[:COUNT]] [--remove-column AT[:COUNT]]
        [--format html|json] [--output <file>] [--save-xlsx <file>]

Loads one worksheet range as a table (merged ranges become spans), applies
the requested heading and structure edits in command-line order, and writes
the synchronized output tree as HTML or JSON.  With --save-xlsx the edited
table is also written back to a new workbook.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional, Tuple

import dotenv
import openpyxl
from openpyxl.utils import range_boundaries

from dto.nodes import Table
from editor import TableEditor
from grid.utils import get_columns, get_rows
from utils.xlsx import table_from_worksheet, table_to_worksheet

dotenv.load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger(__name__)

# (editor method name, at, count)
Operation = Tuple[str, int, int]


# -------------------------------------------------------------------
# Argument parsing helpers
# -------------------------------------------------------------------


def _operation(method: str) -> Callable[[str], Operation]:
    """Build an argparse ``type`` that parses ``AT[:COUNT]`` for *method*."""

    def parse(text: str) -> Operation:
        at_text, _, count_text = text.partition(":")
        try:
            at = int(at_text)
            count = int(count_text) if count_text else 1
        except ValueError:
            raise argparse.ArgumentTypeError(f"expected AT[:COUNT], got {text!r}")
        return method, at, count

    return parse


# -------------------------------------------------------------------
# Main pipeline
# -------------------------------------------------------------------


def load_table(
    file_path: str,
    sheet_name: Optional[str] = None,
    cell_range: Optional[str] = None,
) -> Tuple[Table, str]:
    """
    Read a table from *file_path* and return it with the worksheet title.

    Uses the active sheet when *sheet_name* is not given and the used range
    when *cell_range* is not given.
    """
    logger.info("Loading workbook: %s", file_path)
    workbook = openpyxl.load_workbook(file_path, data_only=True)

    if sheet_name and sheet_name not in workbook.sheetnames:
        logger.error(
            "Worksheet '%s' not found. Available sheets: %s",
            sheet_name,
            workbook.sheetnames,
        )
        raise ValueError(f"Worksheet '{sheet_name}' not found in workbook")

    ws = workbook[sheet_name] if sheet_name else workbook.active

    bounds = {}
    if cell_range:
        min_col, min_row, max_col, max_row = range_boundaries(cell_range)
        bounds = dict(min_row=min_row, min_col=min_col, max_row=max_row, max_col=max_col)

    table = table_from_worksheet(ws, **bounds)
    title = ws.title
    workbook.close()
    return table, title


def run(
    editor: TableEditor,
    table: Table,
    heading_rows: int = 0,
    heading_columns: int = 0,
    operations: Optional[list[Operation]] = None,
) -> None:
    """Attach *table* to *editor* and apply headings, then *operations* in order."""
    editor.insert_table(table)

    if heading_rows:
        editor.set_heading_rows(table, min(heading_rows, get_rows(table)))
    if heading_columns:
        editor.set_heading_columns(table, min(heading_columns, get_columns(table)))

    for method, at, count in operations or []:
        logger.info("Applying %s(at=%d, count=%d)", method, at, count)
        getattr(editor, method)(table, at, count)

    logger.info(
        "  -> table is %d x %d with %d heading row(s) and %d heading column(s)",
        get_rows(table),
        get_columns(table),
        table.heading_rows,
        table.heading_columns,
    )


# -------------------------------------------------------------------
# CLI
# -------------------------------------------------------------------


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render a worksheet range as an HTML table, optionally editing it first.",
    )
    parser.add_argument(
        "excel_file",
        help="Path to the .xlsx file to read",
    )
    parser.add_argument(
        "-s",
        "--sheet",
        default=None,
        help="Name of the worksheet to read (default: active sheet)",
    )
    parser.add_argument(
        "-r",
        "--range",
        dest="cell_range",
        default=None,
        help="Cell range to read, e.g. A1:D10 (default: used range)",
    )
    parser.add_argument("--heading-rows", type=int, default=0)
    parser.add_argument("--heading-columns", type=int, default=0)
    for flag, method in (
        ("--insert-row", "insert_rows"),
        ("--insert-column", "insert_columns"),
        ("--remove-row", "remove_rows"),
        ("--remove-column", "remove_columns"),
    ):
        parser.add_argument(
            flag,
            dest="operations",
            action="append",
            type=_operation(method),
            metavar="AT[:COUNT]",
            help=f"{method.replace('_', ' ').capitalize()} (repeatable, applied in order)",
        )
    parser.add_argument(
        "-f",
        "--format",
        choices=("html", "json"),
        default="html",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file path (default: <input_name>_table.<format>)",
    )
    parser.add_argument(
        "--save-xlsx",
        default=None,
        help="Also write the edited table to this .xlsx file",
    )
    args = parser.parse_args()

    excel_path = args.excel_file
    if not os.path.isfile(excel_path):
        logger.error("File not found: %s", excel_path)
        sys.exit(1)

    # Determine output path
    if args.output:
        output_path = args.output
    else:
        stem = Path(excel_path).stem
        output_path = f"{stem}_table.{args.format}"

    # Run pipeline
    table, sheet_title = load_table(excel_path, args.sheet, args.cell_range)
    editor = TableEditor()
    try:
        run(editor, table, args.heading_rows, args.heading_columns, args.operations)
    except ValueError as exc:
        logger.error("Cannot apply edit: %s", exc)
        sys.exit(2)

    if args.format == "json":
        text = editor.view_of(table).model_dump_json(indent=2, exclude_none=True)
    else:
        text = editor.render_html(table)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(text)

    logger.info("Output written to %s", output_path)

    if args.save_xlsx:
        workbook = openpyxl.Workbook()
        ws = workbook.active
        ws.title = sheet_title
        table_to_worksheet(table, ws)
        workbook.save(args.save_xlsx)
        logger.info("Edited sheet written to %s", args.save_xlsx)


if __name__ == "__main__":
    main()
