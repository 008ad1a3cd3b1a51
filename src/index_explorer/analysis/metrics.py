from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from index_explorer.io.schema import FIELD_COLUMNS
from index_explorer.models import DATE_COLUMN
from index_explorer.preprocess.dates import parse_dates
from index_explorer.preprocess.numeric import coerce_numeric

SNAPSHOT_METRICS: tuple[tuple[str, str], ...] = (
    ("P/E Ratio", FIELD_COLUMNS["pe_ratio"]),
    ("P/B Ratio", FIELD_COLUMNS["pb_ratio"]),
    ("Dividend Yield (%)", FIELD_COLUMNS["div_yield"]),
)


@dataclass(frozen=True)
class MetricSnapshot:
    field: str
    average: float
    latest: float
    valid_count: int


def metric_snapshot(frame: pd.DataFrame) -> dict[str, MetricSnapshot]:
    """Average and most recent valid value of each valuation metric.

    Zero is averaged like any other value. Metrics without a single valid
    value are left out.
    """
    if DATE_COLUMN in frame.columns:
        dates = parse_dates(frame[DATE_COLUMN])
    else:
        dates = pd.Series(pd.NaT, index=frame.index, dtype="datetime64[ns]")

    snapshot: dict[str, MetricSnapshot] = {}
    for label, column in SNAPSHOT_METRICS:
        if column not in frame.columns:
            continue
        values = coerce_numeric(frame[column])
        valid = values.notna()
        if not valid.any():
            continue

        valid_values = values[valid]
        valid_dates = dates[valid]
        if valid_dates.notna().any():
            newest = valid_dates.max()
            latest = float(valid_values[valid_dates == newest].iloc[0])
        else:
            latest = float(valid_values.iloc[-1])

        snapshot[label] = MetricSnapshot(
            field=column,
            average=float(valid_values.mean()),
            latest=latest,
            valid_count=int(valid.sum()),
        )
    return snapshot
