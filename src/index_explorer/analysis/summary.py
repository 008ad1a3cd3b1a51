from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from index_explorer.models import CLOSE_COLUMN, DATE_COLUMN
from index_explorer.preprocess.dates import parse_dates
from index_explorer.preprocess.numeric import coerce_numeric


@dataclass(frozen=True)
class SummaryStats:
    # count covers every record; valid_count is the base for min/max/mean/std_dev
    count: int
    valid_count: int
    date_range_start: pd.Timestamp | None
    date_range_end: pd.Timestamp | None
    min: float
    max: float
    mean: float
    std_dev: float

    @property
    def has_date_range(self) -> bool:
        return self.date_range_start is not None and self.date_range_end is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "valid_count": self.valid_count,
            "date_range_start": (
                self.date_range_start.isoformat() if self.date_range_start is not None else None
            ),
            "date_range_end": (
                self.date_range_end.isoformat() if self.date_range_end is not None else None
            ),
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "std_dev": self.std_dev,
        }


def summarize(frame: pd.DataFrame) -> SummaryStats | None:
    """Close-value statistics, or None when no record has a valid close."""
    if CLOSE_COLUMN not in frame.columns:
        return None
    closes = coerce_numeric(frame[CLOSE_COLUMN]).dropna().to_numpy(dtype=float)
    if closes.size == 0:
        return None

    date_range_start: pd.Timestamp | None = None
    date_range_end: pd.Timestamp | None = None
    if DATE_COLUMN in frame.columns:
        dates = parse_dates(frame[DATE_COLUMN]).dropna()
        if len(dates) >= 2:
            date_range_start = dates.min()
            date_range_end = dates.max()

    return SummaryStats(
        count=len(frame),
        valid_count=int(closes.size),
        date_range_start=date_range_start,
        date_range_end=date_range_end,
        min=float(np.min(closes)),
        max=float(np.max(closes)),
        mean=float(np.mean(closes)),
        std_dev=float(np.std(closes)),
    )
