from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from index_explorer.analysis.completeness import analyze_completeness, classify_completeness


def _frame(close: list[float], pe: list[float | None]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "index_date": pd.date_range("2021-01-01", periods=len(close)),
            "closing_index_value": close,
            "pe_ratio": pe,
        }
    )


@pytest.mark.parametrize(
    ("percent", "tier"),
    [
        (0.0, "missing"),
        (10.0, "partial"),
        (50.0, "partial"),
        (89.99, "partial"),
        (90.0, "complete"),
        (100.0, "complete"),
    ],
)
def test_classify_completeness_tiers(percent: float, tier: str) -> None:
    assert classify_completeness(percent) == tier


def test_analyze_completeness_counts_zero_as_valid() -> None:
    closes = [float(value) for value in range(10)]
    pe = [0.0] * 9 + [np.nan]

    report = analyze_completeness(_frame(closes, pe))

    assert report["Price"].percent_valid == 100.0
    assert report["Price"].tier == "complete"
    assert report["P/E Ratio"].percent_valid == 90.0
    assert report["P/E Ratio"].tier == "complete"


def test_analyze_completeness_partial_and_missing() -> None:
    closes = [1.0] * 10
    pe = [1.0] * 5 + [None] * 5

    report = analyze_completeness(_frame(closes, pe))

    assert report["P/E Ratio"].percent_valid == 50.0
    assert report["P/E Ratio"].tier == "partial"
    # absent columns count as fully missing
    assert report["Volume"].percent_valid == 0.0
    assert report["Volume"].tier == "missing"
    assert list(report) == ["Price", "Volume", "P/E Ratio", "P/B Ratio", "Div Yield"]
    assert report["Div Yield"].field == "div_yield"


def test_analyze_completeness_rejects_empty_input() -> None:
    with pytest.raises(ValueError, match="at least one record"):
        analyze_completeness(_frame([], []))
