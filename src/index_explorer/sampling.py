from __future__ import annotations

import numpy as np
import pandas as pd

from index_explorer.models import CLOSE_COLUMN, DATE_COLUMN
from index_explorer.preprocess.dates import parse_dates
from index_explorer.preprocess.numeric import coerce_numeric

SECONDS_PER_DAY = 86_400.0
_EPOCH = pd.Timestamp("1970-01-01")


def lttb_indices(x: np.ndarray, y: np.ndarray, max_points: int) -> np.ndarray:
    """Largest-Triangle-Three-Buckets selection over parallel ``x``/``y`` arrays.

    Returns ascending positions: always the first and last point plus one
    point per interior bucket, ``min(len(x), max_points)`` in total. Points
    with a non-finite coordinate never win a bucket by area; a bucket with no
    usable candidate falls back to its first position.
    """
    if max_points < 2:
        raise ValueError("max_points must be >= 2")
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.shape != y.shape:
        raise ValueError("x and y must have the same length")

    n = x.size
    if n <= max_points:
        return np.arange(n)
    if max_points == 2:
        return np.array([0, n - 1])

    n_buckets = max_points - 2
    bucket_size = (n - 2) / n_buckets
    edges = np.floor(np.arange(n_buckets + 1) * bucket_size).astype(int) + 1
    edges[-1] = n - 1
    usable = np.isfinite(x) & np.isfinite(y)

    selected = np.empty(max_points, dtype=int)
    selected[0] = 0
    a = 0
    for bucket in range(n_buckets):
        start, stop = int(edges[bucket]), int(edges[bucket + 1])
        # first position of the next bucket; the last row for the final bucket
        c = min(stop, n - 1)
        chosen = start
        if usable[a] and usable[c]:
            candidates = np.arange(start, stop)[usable[start:stop]]
            if candidates.size:
                area = np.abs(
                    (x[a] - x[c]) * (y[candidates] - y[a])
                    - (x[a] - x[candidates]) * (y[c] - y[a])
                )
                chosen = int(candidates[np.argmax(area)])
        selected[bucket + 1] = chosen
        a = chosen
    selected[-1] = n - 1
    return selected


def date_axis(dates: pd.Series) -> np.ndarray:
    """Dates as fractional days since the epoch; NaN where unparseable."""
    parsed = parse_dates(dates)
    return ((parsed - _EPOCH).dt.total_seconds() / SECONDS_PER_DAY).to_numpy(dtype=float)


def lttb_sample(frame: pd.DataFrame, max_points: int) -> pd.DataFrame:
    """Downsample date-ordered records to at most ``max_points`` rows by close value.

    Frames already within the cap come back unchanged. Selected rows keep
    their original index labels.
    """
    if max_points < 2:
        raise ValueError("max_points must be >= 2")
    if len(frame) <= max_points:
        return frame.copy()

    x = date_axis(frame[DATE_COLUMN])
    y = coerce_numeric(frame[CLOSE_COLUMN]).to_numpy(dtype=float)
    return frame.iloc[lttb_indices(x, y, max_points)].copy()
