"""
ppa/read.py

Record loader: reads a fixed rectangular range of a workbook into a wide
table of raw PPA records.

Responsibilities
----------------
- Translate an A1-style range (e.g. "A1:M300") into row/column bounds.
- Slice that range out of a header-less sheet grid, using its first row as
  the header.
- Check the column count against the expected layout: date, capacity,
  price, then one column per region.
- Apply initial type coercion: datetime cells become timestamps, every other
  column becomes float.

Conventions
-----------
- The returned frame is indexed by 1-based spreadsheet row number so later
  stages can point at the offending row in error messages.
- Fully blank rows inside the range (e.g. trailing padding) are dropped.
- Date cells that are not already datetimes are left as-is; parsing strings
  and rejecting garbage is the normalizer's job.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.cell import range_boundaries

from .errors import SchemaMismatch, SourceError

logger = logging.getLogger(__name__)

# Leading non-region columns: execution date, capacity, price.
ID_COLUMN_COUNT = 3


def parse_range(cell_range: str) -> tuple[int, int, int, int]:
    """Return ``(min_col, min_row, max_col, max_row)`` for an A1 range.

    Bounds are 1-based and inclusive, as in the spreadsheet.

    Raises:
        SchemaMismatch: If the range is not a closed rectangle such as
            "B2:N120".
    """
    try:
        bounds = range_boundaries(cell_range.strip().upper())
    except (TypeError, ValueError) as exc:
        raise SchemaMismatch(f"invalid cell range {cell_range!r}") from exc
    if any(b is None for b in bounds):
        raise SchemaMismatch(f"cell range {cell_range!r} must name both corners")
    return bounds


def _coerce_timestamp(v):
    if isinstance(v, (datetime, date)) and not pd.isna(v):
        return pd.Timestamp(v)
    return v


def frame_from_range(
    grid: pd.DataFrame, cell_range: str, regions: list[str]
) -> pd.DataFrame:
    """Slice ``cell_range`` out of a header-less sheet grid.

    Args:
        grid: Sheet contents with positional (0-based) rows and columns, as
            returned by ``pandas.read_excel(..., header=None)``.
        cell_range: A1-style range whose first row holds the headers.
        regions: Expected region columns; only their count is enforced.

    Returns:
        pd.DataFrame: Wide raw records indexed by spreadsheet row number.

    Raises:
        SchemaMismatch: If the range holds a different number of columns
            than ``3 + len(regions)`` or has no header row.
    """
    min_col, min_row, max_col, max_row = parse_range(cell_range)
    block = grid.iloc[min_row - 1 : max_row, min_col - 1 : max_col]

    expected = ID_COLUMN_COUNT + len(regions)
    if block.shape[1] != expected:
        raise SchemaMismatch(
            f"range {cell_range} holds {block.shape[1]} columns, expected {expected} "
            f"(date, capacity, price and {len(regions)} regions)"
        )
    if block.empty:
        raise SchemaMismatch(f"range {cell_range} has no header row")

    headers = [str(h).strip() for h in block.iloc[0]]
    raw = block.iloc[1:].copy()
    raw.columns = headers
    # Row labels become spreadsheet row numbers (header is min_row).
    raw.index = range(min_row + 1, min_row + 1 + len(raw))
    raw = raw.dropna(how="all").copy()

    date_col = headers[0]
    raw[date_col] = raw[date_col].map(_coerce_timestamp)
    for col in headers[1:]:
        raw[col] = pd.to_numeric(raw[col], errors="coerce").astype(float)

    logger.info("Loaded %d raw rows from %s", len(raw), cell_range)
    return raw


def sheet_name(value):
    """Interpret a configured sheet reference; digit strings are indexes."""
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value


def read_sheet(path, sheet, cell_range: str, regions: list[str]) -> pd.DataFrame:
    """Read ``cell_range`` from ``sheet`` of the workbook at ``path``.

    Args:
        path: Workbook path.
        sheet: Sheet name or 0-based index (digit strings are accepted).
        cell_range: A1-style range including the header row.
        regions: Expected region columns.

    Returns:
        pd.DataFrame: See :func:`frame_from_range`.

    Raises:
        SourceError: If the workbook is missing or unreadable, or the sheet
            does not exist.
    """
    try:
        grid = pd.read_excel(path, sheet_name=sheet_name(sheet), header=None, engine="openpyxl")
    except FileNotFoundError as exc:
        raise SourceError(f"source workbook not found: {path}") from exc
    except (ValueError, IndexError, KeyError, BadZipFile) as exc:
        # Unknown sheet names or indexes, and files that are not workbooks.
        raise SourceError(f"cannot read sheet {sheet!r} of {path}: {exc}") from exc
    return frame_from_range(grid, cell_range, regions)
