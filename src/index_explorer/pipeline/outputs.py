from __future__ import annotations

import logging
from pathlib import Path

from index_explorer.config import AppConfig
from index_explorer.io.write import write_summary, write_table
from index_explorer.paths import build_output_paths
from index_explorer.pipeline.view import SeriesView
from index_explorer.viz.metrics import plot_metrics_chart
from index_explorer.viz.time_series import ChartType, plot_price_chart, plot_volume_chart

LOGGER = logging.getLogger(__name__)


def write_series_outputs(
    view: SeriesView,
    out_dir: Path,
    config: AppConfig,
    *,
    chart_type: ChartType = "line",
) -> dict[str, Path]:
    """Render charts, the filtered table and a JSON summary for one selection."""
    paths = build_output_paths(out_dir)
    figure_suffix = str(config.outputs.figures_format or "").strip().lstrip(".") or "png"
    table_format = config.outputs.tables_format

    written = {
        "price_chart": plot_price_chart(
            view.sampled,
            paths.figures / f"price.{figure_suffix}",
            chart_type=chart_type,
        ),
        "volume_chart": plot_volume_chart(view.sampled, paths.figures / f"volume.{figure_suffix}"),
        "metrics_chart": plot_metrics_chart(
            view.metrics, paths.figures / f"metrics.{figure_suffix}"
        ),
        "records": write_table(
            view.records,
            paths.tables / f"records.{table_format}",
            fmt=table_format,
        ),
        "summary": write_summary(view.to_summary(), paths.summary / "summary.json"),
    }
    LOGGER.info("Wrote %d outputs for %s under %s", len(written), view.state.series, paths.root)
    return written
