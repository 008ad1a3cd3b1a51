from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterator

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

from index_explorer.config import DEFAULT_MAX_POINTS, DEFAULT_PAGE_SIZE
from index_explorer.io.schema import CANONICAL_COLUMNS, FIELD_COLUMNS, NUMERIC_COLUMNS
from index_explorer.preprocess.dates import parse_date, parse_dates
from index_explorer.preprocess.numeric import coerce_numeric

SERIES_COLUMN = FIELD_COLUMNS["series_name"]
DATE_COLUMN = FIELD_COLUMNS["date"]
CLOSE_COLUMN = FIELD_COLUMNS["close"]


@dataclass(frozen=True)
class NormalizedRecord:
    series_name: str
    date: pd.Timestamp
    open: float | None
    high: float | None
    low: float | None
    close: float
    points_change: float | None
    change_percent: float | None
    volume: float | None
    turnover: float | None
    pe_ratio: float | None
    pb_ratio: float | None
    div_yield: float | None


def _nullable(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    return value


def conform_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with exactly the canonical columns and canonical dtypes."""
    working = frame.reindex(columns=CANONICAL_COLUMNS).reset_index(drop=True)
    working[SERIES_COLUMN] = working[SERIES_COLUMN].astype(object)
    working[DATE_COLUMN] = parse_dates(working[DATE_COLUMN])
    for column in NUMERIC_COLUMNS:
        working[column] = coerce_numeric(working[column])
    return working


class Dataset:
    """Insertion-ordered, replace-only collection of normalized records."""

    __slots__ = ("_frame",)

    def __init__(self, frame: pd.DataFrame) -> None:
        self._frame = conform_frame(frame)

    def __len__(self) -> int:
        return len(self._frame)

    def __repr__(self) -> str:
        return f"Dataset(records={len(self._frame)})"

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()

    def column(self, name: str) -> pd.Series:
        return self._frame[name].copy()

    def records(self) -> Iterator[NormalizedRecord]:
        for row in self._frame.itertuples(index=False, name=None):
            values = dict(zip(CANONICAL_COLUMNS, row))
            yield NormalizedRecord(
                **{name: _nullable(values[column]) for name, column in FIELD_COLUMNS.items()}
            )


class ViewState(BaseModel):
    """Selection and display parameters supplied by the presentation layer."""

    model_config = ConfigDict(frozen=True)

    series: str = Field(min_length=1)
    start: date | None = None
    end: date | None = None
    max_points: int = Field(default=DEFAULT_MAX_POINTS, ge=2)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_bound(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str):
            if not value.strip():
                return None
            parsed = parse_date(value)
            if parsed is None:
                raise ValueError(f"unrecognized date: {value!r}")
            return parsed.date()
        return value
