"""
ppa/charts.py

Chart assembler: maps the long table and aggregates onto three matplotlib
charts and composes them into one dashboard figure.

Layout
------
Left column (2/3 of the width): bubble scatter of price against execution
date on top, stacked yearly capacity bar below. Right column (1/3): pie of
cumulative capacity by region, spanning both rows.

Colours come from `config.PALETTE`, assigned by position in the region
order so a region keeps its colour across all three charts.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.gridspec import GridSpec

from . import config
from .aggregate import Aggregates
from .transform import LongTable

logger = logging.getLogger(__name__)


def region_colors(region_order: list[str], palette: list[str] | None = None) -> dict[str, str]:
    """Map each region to a palette colour by its position in ``region_order``."""
    palette = palette or config.PALETTE
    if len(region_order) > len(palette):
        logger.warning(
            "%d regions but only %d palette colours; colours will repeat",
            len(region_order),
            len(palette),
        )
    return {region: palette[i % len(palette)] for i, region in enumerate(region_order)}


def plot_bubble(ax, frame, colors: dict[str, str], scale: float | None = None):
    """Scatter price against execution date, bubble area by capacity."""
    scale = config.BUBBLE_SCALE if scale is None else scale
    priced = frame.dropna(subset=["price"])
    for region, color in colors.items():
        sub = priced[priced["region"] == region]
        if sub.empty:
            continue
        ax.scatter(
            pd.to_datetime(sub["execution_date"]),
            sub["price"],
            s=sub["capacity_mw"] * scale,
            color=color,
            alpha=0.6,
            edgecolors="white",
            linewidths=0.5,
            label=region,
        )
    ax.set_xlabel("PPA execution date")
    ax.set_ylabel("Levelized PPA price ($/MWh)")
    ax.set_title("PPA prices by execution date (bubble size = capacity)")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper right", fontsize=8, markerscale=0.5, ncol=2)


def plot_stacked_bar(ax, aggregates: Aggregates, region_order: list[str], colors: dict[str, str]):
    """Stack yearly capacity by region and print each year's total on top."""
    pivot = aggregates.yearly_by_region.pivot(index="year", columns="region", values="capacity_mw")
    pivot = pivot.reindex(columns=[r for r in region_order if r in pivot.columns]).fillna(0.0)
    years = list(pivot.index)

    bottom = [0.0] * len(years)
    for region in pivot.columns:
        heights = pivot[region].tolist()
        ax.bar(years, heights, bottom=bottom, color=colors[region], label=region, width=0.8)
        bottom = [b + h for b, h in zip(bottom, heights)]

    # One labelled row per year, so each total is written exactly once.
    labelled = aggregates.labelled.dropna(subset=["label"])
    for _, row in labelled.iterrows():
        ax.text(
            row["year"],
            row["total_mw"],
            row["label"],
            ha="center",
            va="bottom",
            fontsize=8,
        )

    ax.set_xticks(years)
    ax.set_xlabel("Year")
    ax.set_ylabel("Capacity (MW)")
    ax.set_title("Contracted capacity by year and region")
    ax.legend(loc="upper left", fontsize=8, ncol=2)


def plot_pie(ax, region_totals, region_order: list[str], colors: dict[str, str], labels=None):
    """Pie of cumulative capacity by region with fixed annotations.

    Wedges are drawn in reverse region order, clockwise from 12 o'clock.
    Only regions listed in ``labels`` (default `config.PIE_LABELS`) are
    annotated.
    """
    labels = config.PIE_LABELS if labels is None else labels
    totals = region_totals.set_index("region")
    ordered = [r for r in reversed(region_order) if r in totals.index]

    ax.pie(
        [totals.loc[r, "capacity_mw"] for r in ordered],
        colors=[colors[r] for r in ordered],
        startangle=90,
        counterclock=False,
        wedgeprops={"edgecolor": "white", "linewidth": 1},
    )

    for spec in labels:
        if spec.region not in totals.index:
            logger.warning("No capacity for pie label region %s; skipping", spec.region)
            continue
        theta = math.radians(spec.theta)
        ax.text(
            spec.radius * math.cos(theta),
            spec.radius * math.sin(theta),
            spec.text.format(total=totals.loc[spec.region, "label"]),
            ha="center",
            va="center",
            fontsize=9,
            color="white",
            fontweight="bold",
        )

    ax.set_title("Cumulative contracted capacity by region")
    ax.set_aspect("equal")


def compose(table: LongTable, aggregates: Aggregates):
    """Build the three-chart dashboard figure.

    Returns:
        matplotlib.figure.Figure: Figure with bubble, bar and pie axes (in
        that order in ``fig.axes``).
    """
    colors = region_colors(table.region_order)

    fig = plt.figure(figsize=config.FIGURE_SIZE)
    grid = GridSpec(2, 2, figure=fig, width_ratios=[2, 1])
    ax_bubble = fig.add_subplot(grid[0, 0])
    ax_bar = fig.add_subplot(grid[1, 0])
    ax_pie = fig.add_subplot(grid[:, 1])

    plot_bubble(ax_bubble, table.frame, colors)
    plot_stacked_bar(ax_bar, aggregates, table.region_order, colors)
    plot_pie(ax_pie, aggregates.region_totals, table.region_order, colors)

    fig.tight_layout()
    return fig


def save_figure(fig, output_path: Path) -> Path:
    """Write ``fig`` as PNG and close it."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=config.FIGURE_DPI, bbox_inches="tight")
    plt.close(fig)
    logger.info("Saved dashboard figure to %s", output_path)
    return output_path
