from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import pandas as pd

from index_explorer.io.schema import FIELD_COLUMNS
from index_explorer.preprocess.numeric import coerce_numeric

CompletenessTier = Literal["missing", "partial", "complete"]

COMPLETE_THRESHOLD_PERCENT = 90.0

TRACKED_METRICS: tuple[tuple[str, str], ...] = (
    ("Price", FIELD_COLUMNS["close"]),
    ("Volume", FIELD_COLUMNS["volume"]),
    ("P/E Ratio", FIELD_COLUMNS["pe_ratio"]),
    ("P/B Ratio", FIELD_COLUMNS["pb_ratio"]),
    ("Div Yield", FIELD_COLUMNS["div_yield"]),
)


@dataclass(frozen=True)
class MetricCompleteness:
    field: str
    percent_valid: float
    tier: CompletenessTier


CompletenessReport = dict[str, MetricCompleteness]


def classify_completeness(percent_valid: float) -> CompletenessTier:
    if percent_valid == 0:
        return "missing"
    if percent_valid < COMPLETE_THRESHOLD_PERCENT:
        return "partial"
    return "complete"


def analyze_completeness(frame: pd.DataFrame) -> CompletenessReport:
    """Share of numerically valid values per tracked metric."""
    total = len(frame)
    if total == 0:
        raise ValueError("Completeness analysis requires at least one record")

    report: CompletenessReport = {}
    for label, column in TRACKED_METRICS:
        valid = int(coerce_numeric(frame[column]).notna().sum()) if column in frame.columns else 0
        percent_valid = 100.0 * valid / total
        report[label] = MetricCompleteness(
            field=column,
            percent_valid=percent_valid,
            tier=classify_completeness(percent_valid),
        )
    return report
