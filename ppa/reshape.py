"""
ppa/reshape.py

Wide-to-long reshape of raw PPA records.

Each raw row carries its capacity in the column of the region it belongs
to. Melting those region columns yields one long record per non-empty
region cell; empty cells are dropped, so a row with no region value simply
disappears and a row with several produces one record per region.

The leading columns are identified by position, not by header text: the
first becomes ``execution_date``, the third ``price``, and the region cell
value becomes ``capacity_mw``. Output columns, in order: execution_date,
capacity_mw, price, region. The index is inherited from the raw frame
(spreadsheet row numbers), so it may repeat for rows with several region
values.
"""

from __future__ import annotations

import logging

import pandas as pd

from .read import ID_COLUMN_COUNT

logger = logging.getLogger(__name__)

LONG_FIELDS = ["execution_date", "capacity_mw", "price", "region"]


def region_columns(raw: pd.DataFrame) -> list[str]:
    """Return the region column headers of a raw frame, in sheet order."""
    return list(raw.columns[ID_COLUMN_COUNT:])


def count_region_values(raw: pd.DataFrame) -> int:
    """Number of non-null region cells, i.e. the long record count."""
    return int(raw[region_columns(raw)].notna().sum().sum())


def to_long(raw: pd.DataFrame) -> pd.DataFrame:
    """Melt region columns into ``(region, capacity_mw)`` rows.

    The raw capacity column is replaced by the region cell value, which is
    the capacity attributed to that region.

    Args:
        raw: Wide frame as produced by :func:`ppa.read.frame_from_range`.

    Returns:
        pd.DataFrame: Long frame ordered by source row, then by region
        column order.
    """
    date_col, capacity_col, price_col = raw.columns[:ID_COLUMN_COUNT]
    regions = region_columns(raw)

    per_row = raw[regions].notna().sum(axis=1)
    ambiguous = int((per_row > 1).sum())
    if ambiguous:
        logger.warning(
            "%d raw rows have more than one region value; emitting one record per region",
            ambiguous,
        )
    excluded = int((per_row == 0).sum())
    if excluded:
        logger.info("%d raw rows have no region value and were excluded", excluded)

    shared = raw.drop(columns=[capacity_col]).rename(
        columns={date_col: "execution_date", price_col: "price"}
    )
    long = shared.melt(
        id_vars=["execution_date", "price"],
        value_vars=regions,
        var_name="region",
        value_name="capacity_mw",
        ignore_index=False,
    )
    long = long.dropna(subset=["capacity_mw"])
    # melt stacks region by region; restore source-row order. The sort is
    # stable, so regions keep their column order within a row.
    long = long.sort_index(kind="mergesort")
    long["region"] = long["region"].astype(str)

    logger.info("Reshaped %d raw rows into %d long records", len(raw), len(long))
    return long[LONG_FIELDS]
