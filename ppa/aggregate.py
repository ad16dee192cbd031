"""
ppa/aggregate.py

Grouped capacity totals feeding the charts.

Responsibilities
----------------
- `yearly_by_region`: capacity summed per (region, year), for the stacked bar.
- `yearly_totals`: capacity summed per year, with a display label and the
  representative region that carries it.
- `region_totals`: capacity summed per region, for the pie and its labels.
- `label_yearly`: join the yearly totals back onto the per-(region, year)
  table so each year's label sits on exactly one row.

Conventions
-----------
- Grouping is by the plain `region` string; the region order never enters.
- Yearly labels are truncated toward zero before formatting
  (12,345.9 -> "12,345"); region totals are rounded half-to-even.
- The representative region of a year is the first row after a stable sort
  by (year, region) ascending, i.e. the alphabetically first region with
  capacity that year.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import pandas as pd

from .transform import LongTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Aggregates:
    """All aggregate tables for one run."""

    yearly_by_region: pd.DataFrame
    yearly_totals: pd.DataFrame
    region_totals: pd.DataFrame
    labelled: pd.DataFrame


def format_thousands(value: int) -> str:
    return f"{value:,}"


def yearly_by_region(frame: pd.DataFrame) -> pd.DataFrame:
    """Columns: region, year, capacity_mw. Sorted by (year, region)."""
    out = frame.groupby(["region", "year"], as_index=False, sort=False)["capacity_mw"].sum()
    return out.sort_values(["year", "region"], kind="mergesort").reset_index(drop=True)


def representative_regions(frame: pd.DataFrame) -> pd.DataFrame:
    """First region per year after a stable (year, region) ascending sort.

    Returns:
        pd.DataFrame: Columns year, region; one row per year.
    """
    ordered = frame.sort_values(["year", "region"], kind="mergesort")
    first = ordered.drop_duplicates(subset="year", keep="first")
    return first[["year", "region"]].reset_index(drop=True)


def yearly_totals(frame: pd.DataFrame) -> pd.DataFrame:
    """Capacity per year across all regions.

    Returns:
        pd.DataFrame: Columns year, region (representative), total_mw,
        label. Sorted by year.
    """
    totals = frame.groupby("year", as_index=False)["capacity_mw"].sum()
    totals = totals.rename(columns={"capacity_mw": "total_mw"})
    totals["label"] = totals["total_mw"].map(lambda v: format_thousands(math.trunc(v)))
    out = representative_regions(frame).merge(totals, on="year", how="left", validate="1:1")
    return out[["year", "region", "total_mw", "label"]]


def region_totals(frame: pd.DataFrame) -> pd.DataFrame:
    """Capacity per region.

    Returns:
        pd.DataFrame: Columns region, capacity_mw (unrounded sum),
        capacity_mw_rounded (int), label. Sorted by region.
    """
    out = frame.groupby("region", as_index=False)["capacity_mw"].sum()
    # numpy rounds half to even.
    out["capacity_mw_rounded"] = out["capacity_mw"].round().astype(int)
    out["label"] = out["capacity_mw_rounded"].map(format_thousands)
    return out


def label_yearly(by_region: pd.DataFrame, totals: pd.DataFrame) -> pd.DataFrame:
    """Left-join yearly totals onto (region, year) rows.

    Only the row whose region is the year's representative gets non-null
    `total_mw` and `label`; every other row of that year gets NaN.
    """
    joined = by_region.merge(
        totals[["year", "region", "total_mw", "label"]],
        on=["year", "region"],
        how="left",
        validate="1:1",
    )
    return joined


def aggregate(table: LongTable) -> Aggregates:
    """Compute every aggregate table from a normalized long table."""
    frame = table.frame
    by_region = yearly_by_region(frame)
    totals = yearly_totals(frame)
    aggs = Aggregates(
        yearly_by_region=by_region,
        yearly_totals=totals,
        region_totals=region_totals(frame),
        labelled=label_yearly(by_region, totals),
    )
    logger.info(
        "Aggregated %d (region, year) groups over %d years",
        len(by_region),
        len(totals),
    )
    return aggs
