from __future__ import annotations

import numpy as np
import pandas as pd

from index_explorer.io.schema import CANONICAL_COLUMNS
from index_explorer.models import Dataset, NormalizedRecord


def _record(close: float, pe_ratio: float | None) -> NormalizedRecord:
    return NormalizedRecord(
        series_name="Nifty 50",
        date=pd.Timestamp("2021-01-04"),
        open=None,
        high=None,
        low=None,
        close=close,
        points_change=None,
        change_percent=None,
        volume=None,
        turnover=None,
        pe_ratio=pe_ratio,
        pb_ratio=None,
        div_yield=None,
    )


def _frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "pe_ratio": [np.nan, 0.0],
            "closing_index_value": [10.0, 0.0],
            "index_date": ["2021-01-04", "04/01/2021"],
            "index_name": ["Nifty 50", "Nifty 50"],
        }
    )


def test_dataset_conforms_columns_and_keeps_nulls() -> None:
    dataset = Dataset(_frame())

    assert len(dataset) == 2
    assert repr(dataset) == "Dataset(records=2)"
    assert list(dataset.to_frame().columns) == CANONICAL_COLUMNS
    assert list(dataset.records()) == [_record(10.0, None), _record(0.0, 0.0)]


def test_dataset_frame_copies_do_not_leak_mutations() -> None:
    dataset = Dataset(_frame())

    frame = dataset.to_frame()
    frame.loc[0, "closing_index_value"] = -1.0
    column = dataset.column("pe_ratio")
    column.iloc[1] = -1.0

    records = list(dataset.records())
    assert records[0].close == 10.0
    assert records[1].pe_ratio == 0.0
