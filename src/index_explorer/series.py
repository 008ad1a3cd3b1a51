from __future__ import annotations

from datetime import date
from typing import Sequence

import numpy as np
import pandas as pd

from index_explorer.models import DATE_COLUMN, SERIES_COLUMN, Dataset
from index_explorer.preprocess.dates import parse_date, parse_dates

DateBound = date | str | None


def build_series_catalog(dataset: Dataset) -> list[str]:
    """Sorted, de-duplicated series names; casing is significant."""
    names = dataset.column(SERIES_COLUMN).dropna()
    return sorted({str(name) for name in names if str(name)})


def search_series(catalog: Sequence[str], term: str) -> list[str]:
    needle = term.strip().lower()
    if not needle:
        return list(catalog)
    return [name for name in catalog if needle in name.lower()]


def select_series(dataset: Dataset, name: str) -> pd.DataFrame:
    frame = dataset.to_frame()
    return frame.loc[frame[SERIES_COLUMN] == name].reset_index(drop=True)


def _coerce_bound(value: DateBound) -> pd.Timestamp | None:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Unrecognized date bound: {value!r}")
    return parsed


def filter_date_range(
    frame: pd.DataFrame,
    start: DateBound = None,
    end: DateBound = None,
) -> pd.DataFrame:
    """Inclusive date filter followed by a stable ascending sort.

    Rows whose date cannot be parsed fail any supplied bound; without bounds
    they are kept and sorted after every dated row.
    """
    lower = _coerce_bound(start)
    upper = _coerce_bound(end)
    dates = parse_dates(frame[DATE_COLUMN])

    mask = np.ones(len(frame), dtype=bool)
    if lower is not None:
        mask &= (dates >= lower).to_numpy(dtype=bool)
    if upper is not None:
        mask &= (dates <= upper).to_numpy(dtype=bool)

    working = frame.loc[mask].copy()
    working[DATE_COLUMN] = dates.loc[mask]
    working = working.sort_values(DATE_COLUMN, kind="stable", na_position="last")
    return working.reset_index(drop=True)
