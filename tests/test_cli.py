from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from index_explorer.cli import CSV_ENVVAR, app
from index_explorer.config import load_config
from index_explorer.pipeline.load import load_dataset

CSV_TEXT = (
    "Index_Name,Index_Date,Open_Index_Value,High_Index_Value,Low_Index_Value,"
    "Closing_Index_Value,Volume,PE_Ratio,PB_Ratio,Div_Yield\n"
    "Nifty 50,2021-01-04,100,105,99,104,1000,20,3,1.2\n"
    "Nifty 50,05/01/2021,104,106,101,102,1500,21,3.1,0\n"
    "Nifty 50,2021-01-06,102,103,97,98,,,,\n"
    "Nifty Bank,2021-01-04,300,310,295,305,500,15,2,0.8\n"
    "Nifty Bank,bad-date,300,310,295,305,500,15,2,0.8\n"
)


@pytest.fixture
def csv_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv(CSV_ENVVAR, raising=False)
    path = tmp_path / "indices.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "series" in result.output
    assert "view" in result.output
    assert "export" in result.output


def test_series_command_lists_and_searches(csv_path: Path) -> None:
    runner = CliRunner()

    listed = runner.invoke(app, ["series", "--csv", str(csv_path)])
    searched = runner.invoke(app, ["series", "--csv", str(csv_path), "--search", "BANK"])

    assert listed.exit_code == 0
    assert "Loaded 4 valid rows. Filtered out 1 rows with invalid data." in listed.output
    assert "Series: 2 of 2" in listed.output
    assert "- Nifty 50" in listed.output
    assert searched.exit_code == 0
    assert "Series: 1 of 2" in searched.output
    assert "- Nifty 50" not in searched.output


def test_series_command_reads_csv_from_environment(
    csv_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(CSV_ENVVAR, str(csv_path))
    runner = CliRunner()

    result = runner.invoke(app, ["series"])

    assert result.exit_code == 0
    assert "Series: 2 of 2" in result.output


def test_view_command_prints_summary_and_writes_outputs(csv_path: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "view",
            "--csv",
            str(csv_path),
            "--series",
            "Nifty 50",
            "--page-size",
            "2",
            "--chart-type",
            "candlestick",
            "--out",
            str(out_dir),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Series: Nifty 50" in result.output
    assert "Price: 100.0% (complete)" in result.output
    assert "P/E Ratio: 66.7% (partial)" in result.output
    assert "Date Range: Jan 4, 2021 to Jan 6, 2021" in result.output
    assert "Showing 1 to 2 of 3 entries (page 1 of 2)" in result.output
    assert "Pages: next: --page 2" in result.output
    assert "previous:" not in result.output
    assert (out_dir / "figures" / "price.png").exists()
    assert (out_dir / "figures" / "volume.png").exists()
    assert (out_dir / "figures" / "metrics.png").exists()
    assert (out_dir / "tables" / "records.csv").exists()
    assert (out_dir / "summary" / "summary.json").exists()


def test_view_command_reports_empty_range(csv_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["view", "--csv", str(csv_path), "--series", "Nifty Bank", "--start", "2022-01-01"],
    )

    assert result.exit_code == 1
    assert "No data found for Nifty Bank in the selected date range" in result.output


def test_view_command_rejects_bad_date(csv_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app, ["view", "--csv", str(csv_path), "--series", "Nifty 50", "--end", "someday"]
    )

    assert result.exit_code == 2


def test_export_command_writes_sanitized_file(csv_path: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "exports"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "export",
            "--csv",
            str(csv_path),
            "--series",
            "Nifty 50",
            "--start",
            "2021-01-05",
            "--out",
            str(out_dir),
        ],
    )

    assert result.exit_code == 0, result.output
    export_path = out_dir / "nifty_50_data.csv"
    assert "Exported 2 records to:" in result.output
    lines = export_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert lines[1].startswith("Nifty 50,2021-01-05,")


def test_cli_reports_missing_headers(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CSV_ENVVAR, raising=False)
    csv_path = tmp_path / "broken.csv"
    csv_path.write_text("name,date\nA,2021-01-01\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["series", "--csv", str(csv_path)])

    assert result.exit_code == 1
    assert "Missing required CSV headers: index_name, index_date, closing_index_value" in result.output


def test_cli_uses_config_column_mapping(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CSV_ENVVAR, raising=False)
    (tmp_path / "dump.csv").write_text("Company|Day|Last\nAcme|2021-01-01|5\n", encoding="utf-8")
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "columns:\n  series_name: company\n  date: day\n  close: last\n"
        "input:\n  delimiter: '|'\n  source_file: dump.csv\n",
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(app, ["series", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "Successfully loaded 1 rows of data." in result.output
    assert "- Acme" in result.output


def test_export_reloads_under_custom_column_mapping(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv(CSV_ENVVAR, raising=False)
    csv_path = tmp_path / "dump.csv"
    csv_path.write_text(
        "Name;Date;Close;PE\nNifty 50;2021-01-04;104.5;20\nNifty 50;2021-01-05;0;\n",
        encoding="utf-8",
    )
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "columns:\n  series_name: Name\n  date: Date\n  close: Close\n  pe_ratio: PE\n"
        "input:\n  delimiter: ';'\n",
        encoding="utf-8",
    )
    out_dir = tmp_path / "exports"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "export",
            "--csv",
            str(csv_path),
            "--config",
            str(config_path),
            "--series",
            "Nifty 50",
            "--out",
            str(out_dir),
        ],
    )

    assert result.exit_code == 0, result.output
    export_path = out_dir / "nifty_50_data.csv"
    assert export_path.read_text(encoding="utf-8").splitlines()[0].startswith("Name;Date;")
    config = load_config(config_path)
    original = load_dataset(csv_path, config)
    reloaded = load_dataset(export_path, config)
    assert reloaded.dropped_count == 0
    assert list(reloaded.dataset.records()) == list(original.dataset.records())
