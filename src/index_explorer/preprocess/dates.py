from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Sequence

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class DateParser:
    """One date-format strategy; returns NaT where it does not apply."""

    name: str

    def parse(self, values: pd.Series) -> pd.Series:
        raise NotImplementedError


@dataclass(frozen=True)
class IsoDateParser(DateParser):
    def parse(self, values: pd.Series) -> pd.Series:
        # Offsets collapse to UTC wall time; naive values keep their wall time.
        parsed = pd.to_datetime(values, format="ISO8601", errors="coerce", utc=True)
        return parsed.dt.tz_localize(None)


@dataclass(frozen=True)
class PatternDateParser(DateParser):
    """Regex with ``year``/``month``/``day`` groups rewritten to ISO before validation."""

    pattern: str

    def parse(self, values: pd.Series) -> pd.Series:
        parts = values.str.extract(self.pattern)
        iso = parts["year"] + "-" + parts["month"] + "-" + parts["day"]
        return pd.to_datetime(iso, format="%Y-%m-%d", errors="coerce")


# Tried in order; first strategy that yields a valid date wins.
DATE_PARSERS: tuple[DateParser, ...] = (
    IsoDateParser(name="iso"),
    PatternDateParser(
        name="day_first_slash",
        pattern=r"^(?P<day>\d{2})/(?P<month>\d{2})/(?P<year>\d{4})$",
    ),
    PatternDateParser(
        name="month_first_dash",
        pattern=r"^(?P<month>\d{2})-(?P<day>\d{2})-(?P<year>\d{4})$",
    ),
)


def _strip_timezone(values: pd.Series) -> pd.Series:
    if getattr(values.dt, "tz", None) is not None:
        return values.dt.tz_convert("UTC").dt.tz_localize(None)
    return values


def parse_dates(
    values: pd.Series,
    parsers: Sequence[DateParser] = DATE_PARSERS,
) -> pd.Series:
    """Parse a column of raw date cells into naive timestamps (NaT when invalid)."""
    if pd.api.types.is_datetime64_any_dtype(values):
        return _strip_timezone(values)

    text = values.reset_index(drop=True).astype("string").str.strip()
    result = pd.Series(pd.NaT, index=text.index, dtype="datetime64[ns]")
    pending = text.fillna("").ne("").to_numpy(dtype=bool)
    for parser in parsers:
        if not pending.any():
            break
        parsed = parser.parse(text[pending])
        matched = parsed.notna().to_numpy(dtype=bool)
        if matched.any():
            result.loc[parsed.index[matched]] = parsed[matched]
        pending &= result.isna().to_numpy(dtype=bool)

    result.index = values.index
    return result


def parse_date(value: Any, parsers: Sequence[DateParser] = DATE_PARSERS) -> pd.Timestamp | None:
    """Scalar form of ``parse_dates``."""
    if value is None:
        return None
    if isinstance(value, (datetime, date, np.datetime64)):
        stamp = pd.Timestamp(value)
        if pd.isna(stamp):
            return None
        if stamp.tzinfo is not None:
            stamp = stamp.tz_convert("UTC").tz_localize(None)
        return stamp
    parsed = parse_dates(pd.Series([value], dtype=object), parsers).iloc[0]
    return None if pd.isna(parsed) else parsed
