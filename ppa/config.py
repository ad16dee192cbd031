"""
ppa/config.py

Runtime settings and static chart configuration for the PPA pipeline.

Environment Variables
---------------------
PPA_SOURCE_PATH
    Path to the source workbook (.xlsx). No default; the CLI fails fast if
    neither this nor ``--source`` is given.
PPA_SHEET
    Worksheet name or 0-based index. Defaults to the first sheet.
PPA_RANGE
    A1-style cell range holding the table, header row included.
PPA_OUTPUT_DIR
    Directory for the exported long table and the rendered figure.

Notes
-----
- The palette, region list and pie annotations are configuration data, not
  logic. Rendering code looks them up here instead of inlining literals.
- Region names must match the spreadsheet headers exactly; they are used as
  plain string identities throughout.
"""

from __future__ import annotations

import os
from typing import NamedTuple

from dotenv import load_dotenv

# Load `.env` for local development so shells do not need to export
# environment variables manually.
load_dotenv()

SOURCE_PATH = os.getenv("PPA_SOURCE_PATH")
SHEET = os.getenv("PPA_SHEET", "0")
CELL_RANGE = os.getenv("PPA_RANGE", "A1:M300")
OUTPUT_DIR = os.getenv("PPA_OUTPUT_DIR", "output")

# Output file names inside OUTPUT_DIR.
LONG_TABLE_FILE = "ppa_long.csv"
FIGURE_FILE = "ppa_dashboard.png"

# Region columns expected after the date, capacity and price columns, in
# spreadsheet order.
REGIONS = [
    "CAISO",
    "ERCOT",
    "Hawaii",
    "ISO-NE",
    "MISO",
    "Non-ISO West",
    "PJM",
    "SPP",
    "Southeast",
    "Southwest",
]

# Ordered palette; the i-th region in lexicographic order takes the i-th colour.
PALETTE = [
    "steelblue",
    "darkorange",
    "forestgreen",
    "firebrick",
    "mediumpurple",
    "sienna",
    "orchid",
    "gray",
    "olive",
    "darkturquoise",
]


class PieLabel(NamedTuple):
    """Fixed annotation placed on the pie chart.

    ``text`` may contain ``{total}``, replaced by the region's formatted
    cumulative capacity. ``theta`` is in degrees counter-clockwise from
    3 o'clock; ``radius`` is in pie radii (1.0 is the rim).
    """

    region: str
    text: str
    theta: float
    radius: float


PIE_LABELS = [
    PieLabel("CAISO", "CAISO\n{total} MW", 35.0, 0.62),
    PieLabel("Non-ISO West", "Non-ISO West\n{total} MW", 150.0, 0.62),
    PieLabel("Southwest", "Southwest\n{total} MW", 205.0, 0.66),
    PieLabel("Southeast", "Southeast\n{total} MW", 240.0, 0.70),
    PieLabel("ERCOT", "ERCOT\n{total} MW", 285.0, 0.72),
]

# Bubble area (points^2) per MW of capacity.
BUBBLE_SCALE = 1.5

FIGURE_SIZE = (16, 10)
FIGURE_DPI = 150
