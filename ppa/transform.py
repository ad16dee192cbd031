"""
ppa/transform.py

Field normalizer for long PPA records.

Responsibilities
----------------
- Rewrite column identifiers into lowercase snake_case and map known
  variants onto the canonical field names via `MAP_KEYS`. Frames coming
  from `reshape.to_long` already carry canonical names, assigned by column
  position, so header wording in the sheet never matters here.
- Coerce execution dates to calendar dates and derive the year.
- Compute the region order (distinct regions, sorted lexicographically),
  kept beside the table as rendering metadata.

Notes
-----
- Grouping downstream is by the plain `region` string. The region order
  only drives palette assignment and drawing order.
- Cardinality is preserved: one output row per input row.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

import pandas as pd

from .errors import SchemaMismatch
from .validate import validate_long

logger = logging.getLogger(__name__)

# Canonical long-table fields, in export order.
LONG_COLUMNS = ["execution_date", "capacity_mw", "price", "region", "year"]

# Mapping from normalized spreadsheet headers to canonical field names.
MAP_KEYS = {
    # Execution date
    "execution_date": "execution_date",
    "ppa_execution_date": "execution_date",
    "date": "execution_date",
    # Capacity (MW)
    "capacity_mw": "capacity_mw",
    "capacity_mw_ac": "capacity_mw",
    "capacity": "capacity_mw",
    "contract_capacity_mw": "capacity_mw",
    # Price
    "price": "price",
    "ppa_price": "price",
    "levelized_ppa_price": "price",
    "levelized_ppa_price_mwh": "price",
    "price_mwh": "price",
    # Region (produced by the reshape)
    "region": "region",
}

_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def normalize_identifier(name) -> str:
    """Return ``name`` as lowercase snake_case.

    >>> normalize_identifier("Capacity (MW-AC)")
    'capacity_mw_ac'
    """
    return _NON_ALNUM.sub("_", str(name).strip().lower()).strip("_")


def canonical_name(name) -> str:
    """Normalize ``name`` and resolve it through `MAP_KEYS`."""
    ident = normalize_identifier(name)
    return MAP_KEYS.get(ident, ident)


@dataclass(frozen=True)
class LongTable:
    """Normalized long records plus the rendering-only region order."""

    frame: pd.DataFrame
    region_order: list[str] = field(default_factory=list)


def normalize(long: pd.DataFrame) -> LongTable:
    """Normalize identifiers and types of a reshaped frame.

    Args:
        long: Output of :func:`ppa.reshape.to_long`.

    Returns:
        LongTable: Frame with columns `LONG_COLUMNS` and a fresh 0..n-1
        index, plus the sorted distinct regions.

    Raises:
        SchemaMismatch: If a canonical field cannot be found among the
            headers, or two headers map to the same field.
        DateParseError: If an execution date cannot be parsed; the error
            names the source row.
    """
    renamed = long.rename(columns=canonical_name)
    if renamed.columns.duplicated().any():
        dupes = sorted(set(renamed.columns[renamed.columns.duplicated()]))
        raise SchemaMismatch(f"several headers normalize to {dupes}")
    missing = [c for c in LONG_COLUMNS if c != "year" and c not in renamed.columns]
    if missing:
        raise SchemaMismatch(
            f"cannot find fields {missing} among headers {list(long.columns)}"
        )

    rows = []
    for label, rec in zip(renamed.index, renamed.to_dict("records")):
        rows.append(validate_long(rec, row=label).model_dump())

    frame = pd.DataFrame(rows, columns=LONG_COLUMNS)
    frame["capacity_mw"] = frame["capacity_mw"].astype(float)
    frame["price"] = frame["price"].astype(float)
    frame["year"] = frame["year"].astype(int)
    region_order = sorted(frame["region"].unique().tolist())

    logger.info("Normalized %d records across %d regions", len(frame), len(region_order))
    return LongTable(frame=frame, region_order=region_order)
