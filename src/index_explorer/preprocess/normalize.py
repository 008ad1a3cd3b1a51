from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd

from index_explorer.config import ColumnsConfig
from index_explorer.errors import EmptyDatasetError, RowValidationFailure
from index_explorer.io.schema import FIELD_COLUMNS, NUMERIC_FIELDS, resolve_headers
from index_explorer.models import Dataset
from index_explorer.preprocess.dates import parse_dates
from index_explorer.preprocess.numeric import coerce_numeric

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizationResult:
    dataset: Dataset
    dropped_count: int
    missing_optional_fields: list[str]
    failures: list[RowValidationFailure] = field(default_factory=list)

    @property
    def valid_count(self) -> int:
        return len(self.dataset)

    def drop_reasons(self) -> dict[str, int]:
        return dict(Counter(failure.reason for failure in self.failures))


def normalize_records(
    raw: pd.DataFrame,
    columns: ColumnsConfig | None = None,
    *,
    headers: Sequence[object] | None = None,
    require_ohlc: bool = False,
) -> NormalizationResult:
    """Turn raw parsed rows into a canonical ``Dataset``.

    Raises ``SchemaError`` when a required header is absent and
    ``EmptyDatasetError`` when no row passes validation. Rows with an empty
    series name, an unparseable date or a non-numeric close are dropped and
    reported through ``failures``.
    """
    columns = columns or ColumnsConfig()
    header_list = list(raw.columns) if headers is None else list(headers)
    resolution = resolve_headers(header_list, columns, require_ohlc=require_ohlc)
    source = resolution.source_columns
    if resolution.missing_optional_fields:
        LOGGER.warning(
            "Some optional data fields are missing: %s. Some visualizations may be incomplete.",
            ", ".join(resolution.missing_optional_fields),
        )

    working = raw.reset_index(drop=True)
    # names are kept verbatim; only an absent or empty cell is invalid
    series_name = working[source["series_name"]].astype("string").fillna("")
    dates = parse_dates(working[source["date"]])

    frame = pd.DataFrame(
        {
            FIELD_COLUMNS["series_name"]: series_name.astype(object),
            FIELD_COLUMNS["date"]: dates,
        }
    )
    for name in NUMERIC_FIELDS:
        if name in source:
            frame[FIELD_COLUMNS[name]] = coerce_numeric(working[source[name]])
        else:
            frame[FIELD_COLUMNS[name]] = np.nan

    has_name = series_name.ne("").to_numpy(dtype=bool)
    has_date = dates.notna().to_numpy(dtype=bool)
    has_close = frame[FIELD_COLUMNS["close"]].notna().to_numpy(dtype=bool)
    keep = has_name & has_date & has_close

    reasons = np.select(
        [~has_name, ~has_date, ~has_close],
        ["missing_series_name", "invalid_date", "invalid_close"],
        default="",
    )
    failures = [
        RowValidationFailure(row_number=int(position) + 1, reason=str(reasons[position]))
        for position in np.flatnonzero(~keep)
    ]

    if not keep.any():
        raise EmptyDatasetError(dropped_count=len(failures))

    dataset = Dataset(frame.loc[keep])
    result = NormalizationResult(
        dataset=dataset,
        dropped_count=len(failures),
        missing_optional_fields=resolution.missing_optional_fields,
        failures=failures,
    )
    LOGGER.info(
        "Loaded %d valid rows. Filtered out %d rows with invalid data.",
        result.valid_count,
        result.dropped_count,
    )
    if failures:
        LOGGER.debug("Dropped rows by reason: %s", result.drop_reasons())
    return result
