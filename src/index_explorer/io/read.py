from __future__ import annotations

from pathlib import Path

import pandas as pd

from index_explorer.config import InputConfig


def read_raw_table(csv_path: Path, config: InputConfig | None = None) -> pd.DataFrame:
    """Read every cell as text so validation sees exactly what the file holds.

    A file without a header row yields an empty frame; the normalizer then
    reports the missing required headers.
    """
    config = config or InputConfig()
    try:
        # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
        return pd.read_csv(
            csv_path,
            sep=config.delimiter,
            encoding=config.encoding,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
