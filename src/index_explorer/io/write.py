from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import pandas as pd

from index_explorer.config import ColumnsConfig
from index_explorer.io.schema import CANONICAL_COLUMNS, FIELD_COLUMNS
from index_explorer.preprocess.dates import parse_dates

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def write_table(df: pd.DataFrame, path: Path, fmt: str = "csv", sep: str = ",") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "parquet":
        df.to_parquet(path, index=False)
        return path
    if fmt == "csv":
        df.to_csv(path, index=False, sep=sep)
        return path
    raise ValueError(f"Unsupported table format: {fmt}")


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True, default=str), encoding="utf-8")
    return path


def export_filename(series_name: str) -> str:
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', series_name).lower()}_data.csv"


def _format_export_dates(values: pd.Series) -> pd.Series:
    dates = parse_dates(values)
    present = dates.dropna()
    if (present == present.dt.normalize()).all():
        return dates.dt.strftime("%Y-%m-%d")
    return dates.dt.strftime("%Y-%m-%dT%H:%M:%S")


def export_records(
    frame: pd.DataFrame,
    path: Path,
    columns: ColumnsConfig | None = None,
    delimiter: str = ",",
) -> Path:
    """Write records under the configured source headers; nulls become empty cells.

    Reading the file back with the same ``columns`` mapping and delimiter
    reproduces the records.
    """
    columns = columns or ColumnsConfig()
    date_column = FIELD_COLUMNS["date"]
    working = frame.reindex(columns=CANONICAL_COLUMNS).copy()
    working[date_column] = _format_export_dates(working[date_column])
    headers = {column: getattr(columns, name) for name, column in FIELD_COLUMNS.items()}
    return write_table(working.rename(columns=headers), path, fmt="csv", sep=delimiter)
