"""
ppa/export.py

Delimited-text export of the normalized long table.

The file is the hand-off point for other implementations of the same
pipeline, so its layout is fixed:

- comma-delimited with a header row;
- fields in `transform.LONG_COLUMNS` order:
  execution_date, capacity_mw, price, region, year;
- dates as ISO calendar dates (YYYY-MM-DD);
- missing prices as empty fields;
- "\\n" line endings, UTF-8.

Identical input produces byte-identical output.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .transform import LONG_COLUMNS

logger = logging.getLogger(__name__)


def to_csv_text(frame: pd.DataFrame) -> str:
    """Render the long table as CSV text in the fixed export layout."""
    out = frame[LONG_COLUMNS].copy()
    out["execution_date"] = pd.to_datetime(out["execution_date"]).dt.strftime("%Y-%m-%d")
    return out.to_csv(index=False, lineterminator="\n")


def write_long_table(frame: pd.DataFrame, path) -> Path:
    """Write the long table to ``path``, creating parent directories.

    Returns:
        Path: The written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps the explicit "\n" terminators on every platform.
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(to_csv_text(frame))
    logger.info("Wrote %d long records to %s", len(frame), path)
    return path
