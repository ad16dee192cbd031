"""
ppa/run.py

End-to-end orchestrator for the utility-scale solar PPA dashboard.

Responsibilities
----------------
- Read the configured workbook range into raw wide records.
- Reshape to long format, normalize fields and aggregate capacity.
- Optionally export the long table as CSV and render the dashboard figure.
- Expose a CLI for ad-hoc runs.

Conventions
-----------
- The run is single-pass and deterministic: re-running on the same workbook
  produces the same export and figure.
- Any `PipelineError` aborts the run; there is no partial output mode.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .aggregate import aggregate
from .errors import PipelineError
from .export import write_long_table
from .read import read_sheet
from .reshape import to_long
from .transform import normalize

logger = logging.getLogger(__name__)


def build(source, sheet=config.SHEET, cell_range: str = config.CELL_RANGE, regions=None):
    """Run the load/reshape/normalize/aggregate stages.

    Returns:
        tuple: ``(raw, table, aggregates)``, the wide frame, the
        normalized `LongTable` and the `Aggregates` bundle.
    """
    regions = config.REGIONS if regions is None else regions
    raw = read_sheet(source, sheet, cell_range, regions)
    table = normalize(to_long(raw))
    return raw, table, aggregate(table)


def run(
    source,
    sheet=config.SHEET,
    cell_range: str = config.CELL_RANGE,
    output_dir=config.OUTPUT_DIR,
    export: bool = True,
    render: bool = True,
) -> dict[str, int]:
    """Execute one pipeline pass over ``source``.

    Args:
        source: Path to the workbook.
        sheet: Sheet name or 0-based index.
        cell_range: A1-style range holding the table, header included.
        output_dir: Directory receiving the CSV export and the figure.
        export: Write the long table CSV.
        render: Render and save the dashboard figure.

    Returns:
        dict[str, int]: Stats with raw row, long record, region and year
        counts.
    """
    raw, table, aggs = build(source, sheet, cell_range)
    output_dir = Path(output_dir)

    if export:
        write_long_table(table.frame, output_dir / config.LONG_TABLE_FILE)

    if render:
        if table.frame.empty:
            logger.warning("No long records; skipping figure")
        else:
            # matplotlib is only loaded when a figure is actually drawn.
            from .charts import compose, save_figure

            save_figure(compose(table, aggs), output_dir / config.FIGURE_FILE)

    return {
        "raw": len(raw),
        "long": len(table.frame),
        "regions": len(table.region_order),
        "years": len(aggs.yearly_totals),
    }


def main(argv=None):
    """CLI entry point for running the pipeline.

    Args:
        argv: Optional list of CLI arguments (useful for testing).

    Returns:
        int: Exit code (0 on success, 1 on a pipeline error).
    """
    parser = argparse.ArgumentParser(description="Build the utility-scale solar PPA dashboard")
    parser.add_argument("--source", default=config.SOURCE_PATH, help="Workbook path")
    parser.add_argument("--sheet", default=config.SHEET, help="Sheet name or 0-based index")
    parser.add_argument("--range", dest="cell_range", default=config.CELL_RANGE)
    parser.add_argument("--output-dir", default=config.OUTPUT_DIR)
    parser.add_argument("--no-export", action="store_true", help="Skip the CSV export")
    parser.add_argument("--no-figure", action="store_true", help="Skip rendering the figure")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.source:
        # Fail fast with a clear error to help local setup.
        print("ERROR: no source workbook; set PPA_SOURCE_PATH or pass --source", file=sys.stderr)
        sys.exit(2)
    if not Path(args.source).exists():
        print(f"ERROR: source workbook not found: {args.source}", file=sys.stderr)
        sys.exit(2)

    try:
        stats = run(
            args.source,
            sheet=args.sheet,
            cell_range=args.cell_range,
            output_dir=args.output_dir,
            export=not args.no_export,
            render=not args.no_figure,
        )
    except PipelineError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(f"Done. Stats: {stats}")
    return 0


if __name__ == "__main__":
    # Convert the `main()` return value into a process exit status.
    raise SystemExit(main())
