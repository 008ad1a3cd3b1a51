from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import pandas as pd

from index_explorer.analysis.completeness import CompletenessReport, analyze_completeness
from index_explorer.analysis.metrics import MetricSnapshot, metric_snapshot
from index_explorer.analysis.summary import SummaryStats, summarize
from index_explorer.errors import EmptySeriesSelection
from index_explorer.models import Dataset, ViewState
from index_explorer.sampling import lttb_sample
from index_explorer.series import filter_date_range, select_series
from index_explorer.table import TablePage, paginate

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesView:
    state: ViewState
    records: pd.DataFrame
    sampled: pd.DataFrame
    completeness: CompletenessReport
    summary: SummaryStats | None
    metrics: dict[str, MetricSnapshot]
    page: TablePage

    def to_summary(self) -> dict[str, Any]:
        return {
            "series": self.state.series,
            "start": self.state.start.isoformat() if self.state.start else None,
            "end": self.state.end.isoformat() if self.state.end else None,
            "records": len(self.records),
            "sampled_points": len(self.sampled),
            "completeness": {
                label: {
                    "field": item.field,
                    "percent_valid": round(item.percent_valid, 1),
                    "tier": item.tier,
                }
                for label, item in self.completeness.items()
            },
            "summary": self.summary.to_dict() if self.summary is not None else None,
            "metrics": {
                label: {
                    "field": item.field,
                    "average": item.average,
                    "latest": item.latest,
                    "valid_count": item.valid_count,
                }
                for label, item in self.metrics.items()
            },
        }


def build_series_view(dataset: Dataset, state: ViewState) -> SeriesView:
    """Derive every view of one series selection from the dataset.

    Raises ``EmptySeriesSelection`` when the series is unknown or the date
    range leaves nothing; the dataset itself is never modified.
    """
    series_records = select_series(dataset, state.series)
    if series_records.empty:
        raise EmptySeriesSelection(state.series)

    records = filter_date_range(series_records, start=state.start, end=state.end)
    if records.empty:
        raise EmptySeriesSelection(state.series, state.start, state.end)

    sampled = lttb_sample(records, state.max_points)
    LOGGER.debug(
        "Series %s: %d records in range, %d after sampling",
        state.series,
        len(records),
        len(sampled),
    )
    return SeriesView(
        state=state,
        records=records,
        sampled=sampled,
        completeness=analyze_completeness(records),
        summary=summarize(records),
        metrics=metric_snapshot(records),
        page=paginate(records, page=state.page, page_size=state.page_size),
    )
