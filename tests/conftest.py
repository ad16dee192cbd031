"""Pytest configuration shared across the test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest

# Ensure the project root is on sys.path so ``import ppa`` works when running
# the test suite without installing the package.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ppa import config  # noqa: E402
from ppa.read import frame_from_range  # noqa: E402

HEADERS = ["Execution Date", "Capacity (MW)", "Price ($/MWh)"]

# (execution date, capacity, price, {region: value})
EXAMPLE_ROWS = [
    (pd.Timestamp("2015-06-01"), 10, 50.0, {"CAISO": 5}),
    (pd.Timestamp("2015-07-01"), 20, 45.0, {"CAISO": 7}),
    (pd.Timestamp("2016-01-01"), 15, None, {"Hawaii": 9}),
]


def make_grid(rows, regions=None) -> pd.DataFrame:
    """Build a header-less sheet grid like ``read_excel(header=None)`` returns."""
    regions = config.REGIONS if regions is None else regions
    body = [
        [date, capacity, price] + [values.get(r) for r in regions]
        for date, capacity, price, values in rows
    ]
    return pd.DataFrame([HEADERS + list(regions)] + body)


@pytest.fixture
def example_grid():
    return make_grid(EXAMPLE_ROWS)


@pytest.fixture
def example_raw(example_grid):
    return frame_from_range(example_grid, "A1:M4", config.REGIONS)
