"""
ppa/validate.py

Validation and typing layer for long PPA records.

Responsibilities
----------------
- Define a `LongRecord` model that captures one (agreement, region)
  observation:
  * `execution_date`: calendar date the PPA was executed.
  * `capacity_mw`: capacity attributed to the region (MW).
  * `price`: PPA price, or None when the sheet leaves it blank.
  * `region`: region name as written in the sheet header.
  * `year`: calendar year of `execution_date`.
- Provide `coerce_date` to turn sheet cells into calendar dates, failing
  loudly with `DateParseError` instead of substituting a default.

Conventions
-----------
- Timestamps with a time-of-day are truncated to their date. This is lossy
  and intended: only the calendar date is meaningful downstream.
- Strings are parsed with `dateutil`, so "2015-06-01", "6/1/2015" and
  "June 1, 2015" are all accepted.
- Blank and NaN prices are normalized to None.
"""

from __future__ import annotations

import math
from datetime import date, datetime

import pandas as pd
from dateutil import parser as dtp
from pydantic import BaseModel, field_validator

from .errors import DateParseError


class LongRecord(BaseModel):
    """Validated long record passed to the aggregation stage."""

    execution_date: date
    capacity_mw: float
    price: float | None = None
    region: str
    year: int

    @field_validator("price", mode="before")
    @classmethod
    def blank_price(cls, v):
        """Map blanks and NaN to None so missing prices stay missing."""
        if v is None or v == "":
            return None
        if isinstance(v, float) and math.isnan(v):
            return None
        return v

    @field_validator("region", mode="before")
    @classmethod
    def strip_region(cls, v):
        return str(v).strip()


def coerce_date(value, row=None) -> date:
    """Convert a sheet cell into a calendar date.

    Args:
        value: A datetime/Timestamp, date, or string.
        row: Label of the record being converted, used in the error.

    Returns:
        date: The calendar date, time-of-day discarded.

    Raises:
        DateParseError: If the value is missing or cannot be parsed.
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        raise DateParseError(row, value)
    # datetime is a subclass of date, so check it first.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return dtp.parse(value.strip()).date()
        except (ValueError, OverflowError) as exc:
            raise DateParseError(row, value) from exc
    raise DateParseError(row, value)


def validate_long(rec: dict, row=None) -> LongRecord:
    """Validate a canonical-keyed long row into a `LongRecord`.

    The year is derived from the coerced execution date.

    Raises:
        DateParseError: If the execution date cannot be parsed.
        KeyError: If a canonical field is missing from ``rec``.
    """
    day = coerce_date(rec["execution_date"], row=row)
    return LongRecord(
        execution_date=day,
        capacity_mw=rec["capacity_mw"],
        price=rec["price"],
        region=rec["region"],
        year=day.year,
    )
