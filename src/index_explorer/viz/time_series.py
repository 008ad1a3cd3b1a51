from __future__ import annotations

from pathlib import Path
from typing import Literal

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from index_explorer.io.schema import FIELD_COLUMNS
from index_explorer.preprocess.numeric import coerce_numeric
from index_explorer.viz.common import plot_placeholder, save_figure

ChartType = Literal["line", "candlestick"]

RISING_COLOR = "#28a745"
FALLING_COLOR = "#dc3545"


def _numeric(frame: pd.DataFrame, field: str) -> pd.Series:
    column = FIELD_COLUMNS[field]
    if column not in frame.columns:
        return pd.Series(np.nan, index=frame.index, dtype="float64")
    return coerce_numeric(frame[column])


def _bar_width(positions: np.ndarray, fraction: float) -> float:
    if positions.size < 2:
        return fraction
    return float(np.median(np.diff(positions))) * fraction


def _plot_line(frame: pd.DataFrame, closes: pd.Series, output_path: Path) -> Path:
    fig, ax = plt.subplots(figsize=(12, 4))
    dates = frame[FIELD_COLUMNS["date"]]
    ax.plot(dates, closes, linewidth=1.5, color="#3498db", label="Closing Price")
    ax.fill_between(dates, closes, closes.min(), color="#3498db", alpha=0.1)
    ax.set_title("Closing price")
    ax.set_xlabel("Date")
    ax.set_ylabel("Index value")
    ax.legend(loc="upper left")
    return save_figure(output_path)


def _plot_candlestick(frame: pd.DataFrame, ohlc: pd.DataFrame, output_path: Path) -> Path:
    fig, ax = plt.subplots(figsize=(12, 4))
    positions = mdates.date2num(frame.loc[ohlc.index, FIELD_COLUMNS["date"]])
    rising = (ohlc["close"] >= ohlc["open"]).to_numpy()
    colors = np.where(rising, RISING_COLOR, FALLING_COLOR)

    ax.bar(
        positions,
        (ohlc["high"] - ohlc["low"]).to_numpy(),
        bottom=ohlc["low"].to_numpy(),
        width=_bar_width(positions, 0.2),
        color=colors,
        alpha=0.5,
    )
    body_low = np.minimum(ohlc["open"], ohlc["close"]).to_numpy()
    body_high = np.maximum(ohlc["open"], ohlc["close"]).to_numpy()
    ax.bar(
        positions,
        body_high - body_low,
        bottom=body_low,
        width=_bar_width(positions, 0.7),
        color=colors,
    )
    ax.xaxis_date()
    ax.set_title("Price range (high/low, open/close)")
    ax.set_xlabel("Date")
    ax.set_ylabel("Index value")
    return save_figure(output_path)


def plot_price_chart(
    sampled: pd.DataFrame,
    output_path: Path,
    chart_type: ChartType = "line",
) -> Path:
    """Price chart of sampled records; candlestick falls back to line without OHLC data."""
    closes = _numeric(sampled, "close")
    if not closes.notna().any():
        return plot_placeholder("No price data available for this company", output_path)

    if chart_type == "candlestick":
        ohlc = pd.DataFrame(
            {field: _numeric(sampled, field) for field in ("open", "high", "low", "close")}
        ).dropna()
        if not ohlc.empty:
            return _plot_candlestick(sampled, ohlc, output_path)
    return _plot_line(sampled, closes, output_path)


def plot_volume_chart(sampled: pd.DataFrame, output_path: Path) -> Path:
    volume = _numeric(sampled, "volume")
    valid = volume.notna()
    if not valid.any():
        return plot_placeholder("No volume data available for this company", output_path)

    fig, ax = plt.subplots(figsize=(12, 3))
    positions = mdates.date2num(sampled.loc[valid, FIELD_COLUMNS["date"]])
    ax.bar(
        positions,
        volume[valid].to_numpy(),
        width=_bar_width(positions, 0.8),
        color="#9b59b6",
        alpha=0.5,
        label="Volume",
    )
    ax.xaxis_date()
    ax.set_ylim(bottom=0)
    ax.set_title("Volume")
    ax.set_xlabel("Date")
    ax.legend(loc="upper left")
    return save_figure(output_path)
