from __future__ import annotations

import math
import re
from typing import Any

import numpy as np
import pandas as pd

# Plain decimal literal: no hex, no thousands separators, no nan/inf spellings.
DECIMAL_PATTERN = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
_DECIMAL_RE = re.compile(DECIMAL_PATTERN)


def parse_number(value: Any) -> float | None:
    """Return the finite float held by ``value`` or None when there is none.

    Zero is a value like any other; only absent or unparseable cells map to None.
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
        return number if math.isfinite(number) else None
    text = str(value).strip()
    if not _DECIMAL_RE.fullmatch(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


def is_valid_number(value: Any) -> bool:
    return parse_number(value) is not None


def coerce_numeric(values: pd.Series) -> pd.Series:
    """Vectorized ``parse_number``: invalid cells become NaN, never 0."""
    if pd.api.types.is_bool_dtype(values):
        return pd.Series(np.nan, index=values.index, dtype="float64")
    if pd.api.types.is_numeric_dtype(values):
        numbers = values.to_numpy(dtype="float64", na_value=np.nan, copy=True)
        numbers[~np.isfinite(numbers)] = np.nan
        return pd.Series(numbers, index=values.index, dtype="float64")

    text = values.astype("string").str.strip()
    mask = text.str.fullmatch(DECIMAL_PATTERN).fillna(False).to_numpy(dtype=bool)
    numbers = np.full(len(values), np.nan, dtype="float64")
    if mask.any():
        numbers[mask] = text[mask].astype(str).astype("float64").to_numpy()
    numbers[~np.isfinite(numbers)] = np.nan
    return pd.Series(numbers, index=values.index, dtype="float64")
