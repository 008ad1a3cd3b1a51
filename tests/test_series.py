from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from index_explorer.models import Dataset
from index_explorer.series import (
    build_series_catalog,
    filter_date_range,
    search_series,
    select_series,
)


def _dataset(rows: list[tuple[str, str, float]]) -> Dataset:
    return Dataset(
        pd.DataFrame(
            rows,
            columns=["index_name", "index_date", "closing_index_value"],
        )
    )


def test_catalog_is_sorted_deduplicated_and_case_sensitive() -> None:
    dataset = _dataset(
        [
            ("Nifty Bank", "2021-01-01", 1.0),
            ("Nifty 50", "2021-01-01", 2.0),
            ("nifty 50", "2021-01-01", 3.0),
            ("Nifty Bank", "2021-01-02", 4.0),
        ]
    )

    assert build_series_catalog(dataset) == ["Nifty 50", "Nifty Bank", "nifty 50"]


def test_search_series_matches_substring_case_insensitively() -> None:
    catalog = ["Nifty 50", "Nifty Bank", "Sensex"]

    assert search_series(catalog, "BANK") == ["Nifty Bank"]
    assert search_series(catalog, "nifty") == ["Nifty 50", "Nifty Bank"]
    assert search_series(catalog, "  ") == catalog
    assert search_series(catalog, "midcap") == []


def test_select_series_uses_exact_name() -> None:
    dataset = _dataset(
        [
            ("Nifty 50", "2021-01-01", 1.0),
            ("nifty 50", "2021-01-02", 2.0),
            ("Nifty 50", "2021-01-03", 3.0),
        ]
    )

    selected = select_series(dataset, "Nifty 50")

    assert selected["closing_index_value"].tolist() == [1.0, 3.0]
    assert list(selected.index) == [0, 1]
    assert select_series(dataset, "Sensex").empty


def test_filter_date_range_bounds_are_inclusive() -> None:
    frame = pd.DataFrame(
        {
            "index_date": ["2021-01-04", "2021-01-05", "2021-01-06"],
            "closing_index_value": [1.0, 2.0, 3.0],
        }
    )

    filtered = filter_date_range(frame, start="2021-01-05", end=date(2021, 1, 5))

    assert filtered["closing_index_value"].tolist() == [2.0]
    assert filtered["index_date"].tolist() == [pd.Timestamp("2021-01-05")]


def test_filter_date_range_returns_empty_when_start_after_all_dates() -> None:
    frame = pd.DataFrame({"index_date": ["2021-01-04"], "closing_index_value": [1.0]})

    assert filter_date_range(frame, start="2022-01-01").empty


def test_filter_date_range_sorts_ascending_with_stable_ties() -> None:
    frame = pd.DataFrame(
        {
            "index_date": ["2021-01-03", "2021-01-01", "garbage", "2021-01-03", "02/01/2021"],
            "closing_index_value": [30.0, 10.0, 99.0, 31.0, 20.0],
        }
    )

    unbounded = filter_date_range(frame)
    bounded = filter_date_range(frame, start="2021-01-01")

    assert unbounded["closing_index_value"].tolist() == [10.0, 20.0, 30.0, 31.0, 99.0]
    assert pd.isna(unbounded["index_date"].iloc[-1])
    assert bounded["closing_index_value"].tolist() == [10.0, 20.0, 30.0, 31.0]


def test_filter_date_range_rejects_unparseable_bound() -> None:
    frame = pd.DataFrame({"index_date": ["2021-01-04"], "closing_index_value": [1.0]})

    with pytest.raises(ValueError, match="Unrecognized date bound"):
        filter_date_range(frame, end="someday")


def test_filter_date_range_does_not_mutate_input() -> None:
    frame = pd.DataFrame({"index_date": ["2021-01-02", "2021-01-01"], "closing_index_value": [2.0, 1.0]})

    filter_date_range(frame)

    assert frame["index_date"].tolist() == ["2021-01-02", "2021-01-01"]
