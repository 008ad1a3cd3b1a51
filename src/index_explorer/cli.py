from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer
from pydantic import ValidationError

from index_explorer.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from index_explorer.errors import EmptyDatasetError, EmptySeriesSelection, SchemaError
from index_explorer.io.write import export_filename, export_records
from index_explorer.logging import configure_logging
from index_explorer.models import ViewState
from index_explorer.pipeline.load import load_dataset
from index_explorer.pipeline.outputs import write_series_outputs
from index_explorer.pipeline.view import SeriesView, build_series_view
from index_explorer.preprocess.normalize import NormalizationResult
from index_explorer.series import build_series_catalog, search_series
from index_explorer.table import format_date, format_number, format_table_rows

app = typer.Typer(no_args_is_help=True, add_completion=False)

CSV_ENVVAR = "INDEX_EXPLORER_CSV"


class ChartKind(str, Enum):
    line = "line"
    candlestick = "candlestick"


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is None:
        if DEFAULT_CONFIG_PATH.is_file():
            return load_config(DEFAULT_CONFIG_PATH)
        return AppConfig()
    return load_config(config_path)


def _require_csv(csv: Path | None, cfg: AppConfig) -> Path:
    if csv is not None:
        return csv
    if cfg.input.source_file:
        return Path(cfg.input.source_file)
    raise typer.BadParameter(
        f"Missing --csv. Pass the input file, set {CSV_ENVVAR}, or set input.source_file in config."
    )


def _load_or_exit(csv_path: Path, cfg: AppConfig) -> NormalizationResult:
    try:
        result = load_dataset(csv_path, cfg)
    except (SchemaError, EmptyDatasetError) as error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1) from error

    if result.dropped_count:
        typer.echo(
            f"Loaded {result.valid_count} valid rows. "
            f"Filtered out {result.dropped_count} rows with invalid data."
        )
    else:
        typer.echo(f"Successfully loaded {result.valid_count} rows of data.")
    if result.missing_optional_fields:
        typer.echo(
            "Warning: some optional data fields are missing: "
            f"{', '.join(result.missing_optional_fields)}. Some views may be incomplete."
        )
    return result


def _build_view_state(**values: object) -> ViewState:
    try:
        return ViewState.model_validate(values)
    except ValidationError as error:
        raise typer.BadParameter(str(error)) from error


def _build_view_or_exit(result: NormalizationResult, state: ViewState) -> SeriesView:
    try:
        return build_series_view(result.dataset, state)
    except EmptySeriesSelection as error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1) from error


def _echo_view(view: SeriesView) -> None:
    typer.echo(f"Series: {view.state.series}")
    completeness = " | ".join(
        f"{label}: {item.percent_valid:.1f}% ({item.tier})"
        for label, item in view.completeness.items()
    )
    typer.echo(f"Data Completeness: {completeness}")

    summary = view.summary
    if summary is None:
        typer.echo("Data Summary: no valid closing values")
    else:
        date_range = (
            f"{format_date(summary.date_range_start)} to {format_date(summary.date_range_end)}"
            if summary.has_date_range
            else "N/A"
        )
        typer.echo(
            f"Data Summary: {summary.count} data points ({summary.valid_count} with close) | "
            f"Date Range: {date_range} | "
            f"Price Range: {format_number(summary.min)} - {format_number(summary.max)} | "
            f"Avg: {format_number(summary.mean)} | "
            f"Std Dev: {format_number(summary.std_dev)}"
        )

    for label, item in view.metrics.items():
        typer.echo(
            f"- {label}: average {format_number(item.average)}, latest {format_number(item.latest)}"
        )

    typer.echo(format_table_rows(view.page.rows).to_string(index=False))
    typer.echo(view.page.describe())
    navigation = []
    if view.page.has_previous:
        navigation.append(f"previous: --page {view.page.page - 1}")
    if view.page.has_next:
        navigation.append(f"next: --page {view.page.page + 1}")
    if navigation:
        typer.echo(f"Pages: {', '.join(navigation)}")


@app.command()
def series(
    csv: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, envvar=CSV_ENVVAR
    ),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    search: str = typer.Option("", help="Case-insensitive substring filter on series names."),
    log_level: str = typer.Option("WARNING", help="Logging level."),
) -> None:
    """List the series available in the input file."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    result = _load_or_exit(_require_csv(csv, cfg), cfg)
    catalog = build_series_catalog(result.dataset)
    matches = search_series(catalog, search)
    typer.echo(f"Series: {len(matches)} of {len(catalog)}")
    for name in matches:
        typer.echo(f"- {name}")


@app.command()
def view(
    series_name: str = typer.Option(..., "--series", help="Series to display (exact name)."),
    csv: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, envvar=CSV_ENVVAR
    ),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    start: str | None = typer.Option(None, help="Inclusive start date."),
    end: str | None = typer.Option(None, help="Inclusive end date."),
    page: int = typer.Option(1, min=1),
    page_size: int | None = typer.Option(None, min=1, help="Defaults to view.page_size."),
    max_points: int | None = typer.Option(None, min=2, help="Defaults to view.max_points."),
    chart_type: ChartKind = typer.Option(ChartKind.line),
    out: Path | None = typer.Option(
        None, resolve_path=True, help="Write charts, table and summary here."
    ),
    log_level: str = typer.Option("WARNING", help="Logging level."),
) -> None:
    """Show completeness, summary statistics and one table page for a series."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    state = _build_view_state(
        series=series_name,
        start=start,
        end=end,
        page=page,
        page_size=page_size or cfg.view.page_size,
        max_points=max_points or cfg.view.max_points,
    )
    result = _load_or_exit(_require_csv(csv, cfg), cfg)
    series_view = _build_view_or_exit(result, state)
    _echo_view(series_view)

    if out is not None:
        written = write_series_outputs(series_view, out, cfg, chart_type=chart_type.value)
        typer.echo(f"Outputs written to: {out}")
        for name, path in written.items():
            typer.echo(f"- {name}: {path}")


@app.command()
def export(
    series_name: str = typer.Option(..., "--series", help="Series to export (exact name)."),
    csv: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, envvar=CSV_ENVVAR
    ),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    start: str | None = typer.Option(None, help="Inclusive start date."),
    end: str | None = typer.Option(None, help="Inclusive end date."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    log_level: str = typer.Option("WARNING", help="Logging level."),
) -> None:
    """Export the filtered records of one series as CSV."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    state = _build_view_state(series=series_name, start=start, end=end)
    result = _load_or_exit(_require_csv(csv, cfg), cfg)
    series_view = _build_view_or_exit(result, state)

    path = export_records(
        series_view.records,
        out / export_filename(series_name),
        cfg.columns,
        delimiter=cfg.input.delimiter,
    )
    typer.echo(f"Exported {len(series_view.records)} records to: {path}")


if __name__ == "__main__":
    app()
