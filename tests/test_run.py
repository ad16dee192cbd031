"""Tests covering the pipeline orchestrator and CLI."""

from __future__ import annotations

import subprocess
import sys

import pytest

from ppa import config, run
from ppa.errors import SchemaMismatch
from ppa.read import frame_from_range

from .conftest import EXAMPLE_ROWS, ROOT, make_grid


def test_run_happy_path(monkeypatch, example_raw, tmp_path):
    """The orchestrated run should export the long table and render the figure."""

    captured = []

    def fake_read_sheet(source, sheet, cell_range, regions):
        captured.append((source, sheet, cell_range, regions))
        return example_raw

    monkeypatch.setattr(run, "read_sheet", fake_read_sheet)

    stats = run.run("ppa.xlsx", sheet="0", cell_range="A1:M4", output_dir=tmp_path)

    assert stats == {"raw": 3, "long": 3, "regions": 2, "years": 2}
    assert captured == [("ppa.xlsx", "0", "A1:M4", config.REGIONS)]
    assert (tmp_path / config.LONG_TABLE_FILE).read_text().startswith("execution_date,")
    assert (tmp_path / config.FIGURE_FILE).exists()


def test_run_without_outputs(monkeypatch, example_raw, tmp_path):
    monkeypatch.setattr(run, "read_sheet", lambda *args: example_raw)

    stats = run.run("ppa.xlsx", output_dir=tmp_path, export=False, render=False)

    assert stats["long"] == 3
    assert list(tmp_path.iterdir()) == []


def test_run_reads_real_workbook(example_grid, tmp_path):
    """End to end through an actual .xlsx file."""

    source = tmp_path / "ppa.xlsx"
    example_grid.to_excel(source, header=False, index=False)

    stats = run.run(source, sheet=0, cell_range="A1:M4", output_dir=tmp_path / "out", render=False)

    assert stats == {"raw": 3, "long": 3, "regions": 2, "years": 2}
    lines = (tmp_path / "out" / config.LONG_TABLE_FILE).read_text().splitlines()
    assert lines[1] == "2015-06-01,5.0,50.0,CAISO,2015"


def test_main_invokes_run(monkeypatch, capsys, tmp_path):
    """The CLI wrapper should invoke `run` and surface summary stats."""

    calls = []

    def fake_run(source, **kwargs):
        calls.append((source, kwargs))
        return {"raw": 1}

    source = tmp_path / "ppa.xlsx"
    source.touch()
    monkeypatch.setattr(run, "run", fake_run)

    code = run.main(["--source", str(source), "--range", "B2:N50", "--no-figure"])

    assert code == 0
    assert calls[0][0] == str(source)
    assert calls[0][1]["cell_range"] == "B2:N50"
    assert calls[0][1]["render"] is False
    assert calls[0][1]["export"] is True
    assert "Done. Stats" in capsys.readouterr().out


def test_main_missing_source(monkeypatch, capsys):
    """Without a source workbook the CLI should exit with status 2."""

    monkeypatch.setattr(run.config, "SOURCE_PATH", None)

    with pytest.raises(SystemExit) as exc:
        run.main([])

    assert exc.value.code == 2
    assert "ERROR: no source workbook" in capsys.readouterr().err


def test_main_reports_pipeline_errors(monkeypatch, capsys, tmp_path):
    def fake_run(source, **kwargs):
        raise SchemaMismatch("range A1:B2 holds 2 columns, expected 13")

    source = tmp_path / "ppa.xlsx"
    source.touch()
    monkeypatch.setattr(run, "run", fake_run)

    code = run.main(["--source", str(source)])

    assert code == 1
    assert "ERROR: range A1:B2" in capsys.readouterr().err


def test_main_source_not_found(capsys, tmp_path):
    """A source path that does not exist should exit with status 2."""

    missing = tmp_path / "missing.xlsx"

    with pytest.raises(SystemExit) as exc:
        run.main(["--source", str(missing)])

    assert exc.value.code == 2
    assert f"ERROR: source workbook not found: {missing}" in capsys.readouterr().err


def test_main_unknown_sheet(capsys, example_grid, tmp_path):
    """An unknown sheet name is reported as an error, not a traceback."""

    source = tmp_path / "ppa.xlsx"
    example_grid.to_excel(source, header=False, index=False)

    code = run.main(["--source", str(source), "--sheet", "Deals", "--output-dir", str(tmp_path)])

    assert code == 1
    assert "ERROR: cannot read sheet 'Deals'" in capsys.readouterr().err


@pytest.mark.parametrize(
    "grid, cell_range",
    [
        (make_grid([]), "A1:M1"),
        (make_grid([(EXAMPLE_ROWS[0][0], 8, 41.0, {}), (EXAMPLE_ROWS[1][0], 9, None, {})]), "A1:M3"),
    ],
    ids=["header-only", "no-region-values"],
)
def test_run_with_no_surviving_records(monkeypatch, tmp_path, grid, cell_range):
    """With no long records the CSV holds only its header and no figure is drawn."""

    raw = frame_from_range(grid, cell_range, config.REGIONS)
    monkeypatch.setattr(run, "read_sheet", lambda *args: raw)

    stats = run.run("ppa.xlsx", cell_range=cell_range, output_dir=tmp_path)

    assert stats["long"] == 0
    assert stats["regions"] == 0
    assert stats["years"] == 0
    assert (tmp_path / config.LONG_TABLE_FILE).read_text() == (
        "execution_date,capacity_mw,price,region,year\n"
    )
    assert not (tmp_path / config.FIGURE_FILE).exists()


def test_import_does_not_load_matplotlib():
    """Importing the package and the orchestrator leaves matplotlib unloaded."""

    result = subprocess.run(
        [
            sys.executable,
            "-c",
            "import sys, ppa, ppa.aggregate, ppa.read, ppa.run; "
            "print('matplotlib' in sys.modules)",
        ],
        cwd=ROOT,
        capture_output=True,
        text=True,
        check=True,
    )

    assert result.stdout.strip() == "False"
