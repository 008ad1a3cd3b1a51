from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import pandas as pd

from index_explorer.config import DEFAULT_PAGE_SIZE
from index_explorer.io.schema import FIELD_COLUMNS
from index_explorer.preprocess.dates import parse_date
from index_explorer.preprocess.numeric import parse_number

DISPLAY_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Date", FIELD_COLUMNS["date"]),
    ("Open", FIELD_COLUMNS["open"]),
    ("High", FIELD_COLUMNS["high"]),
    ("Low", FIELD_COLUMNS["low"]),
    ("Close", FIELD_COLUMNS["close"]),
    ("Change %", FIELD_COLUMNS["change_percent"]),
    ("Volume", FIELD_COLUMNS["volume"]),
    ("P/E", FIELD_COLUMNS["pe_ratio"]),
    ("P/B", FIELD_COLUMNS["pb_ratio"]),
    ("Div Yield", FIELD_COLUMNS["div_yield"]),
)


@dataclass(frozen=True)
class TablePage:
    rows: pd.DataFrame
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def first_item(self) -> int:
        if self.total_items == 0:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last_item(self) -> int:
        return min(self.page * self.page_size, self.total_items)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def describe(self) -> str:
        return (
            f"Showing {self.first_item} to {self.last_item} of {self.total_items} entries "
            f"(page {self.page} of {self.total_pages})"
        )


def paginate(frame: pd.DataFrame, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> TablePage:
    """Slice one page of rows; out-of-range pages clamp to the nearest valid page."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    total_items = len(frame)
    total_pages = max(1, math.ceil(total_items / page_size))
    current = max(1, min(page, total_pages))
    offset = (current - 1) * page_size
    return TablePage(
        rows=frame.iloc[offset : offset + page_size],
        page=current,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )


def format_number(value: Any, decimals: int = 2) -> str:
    number = parse_number(value)
    if number is None:
        return "-"
    return f"{number:.{decimals}f}"


def format_large_number(value: Any) -> str:
    number = parse_number(value)
    if number is None:
        return "-"
    if number >= 1_000_000:
        return f"{number / 1_000_000:.2f}M"
    if number >= 1_000:
        return f"{number / 1_000:.2f}K"
    return str(int(number)) if number.is_integer() else str(number)


def format_date(value: Any) -> str:
    if value is None or pd.isna(value) or not str(value).strip():
        return ""
    stamp = parse_date(value)
    if stamp is None:
        return str(value)
    return f"{stamp:%b} {stamp.day}, {stamp.year}"


def _format_percent(value: Any) -> str:
    text = format_number(value)
    return text if text == "-" else f"{text}%"


def format_table_rows(frame: pd.DataFrame) -> pd.DataFrame:
    """Display strings for the record table, one column per ``DISPLAY_COLUMNS`` entry."""
    formatters = {
        "Date": format_date,
        "Change %": _format_percent,
        "Volume": format_large_number,
        "Div Yield": _format_percent,
    }
    display: dict[str, list[str]] = {}
    for label, column in DISPLAY_COLUMNS:
        formatter = formatters.get(label, format_number)
        source = frame[column] if column in frame.columns else pd.Series([None] * len(frame))
        display[label] = [formatter(value) for value in source]
    return pd.DataFrame(display, columns=[label for label, _ in DISPLAY_COLUMNS])
