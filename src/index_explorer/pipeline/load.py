from __future__ import annotations

import logging
from pathlib import Path

from index_explorer.config import AppConfig
from index_explorer.io.read import read_raw_table
from index_explorer.preprocess.normalize import NormalizationResult, normalize_records

LOGGER = logging.getLogger(__name__)


def load_dataset(csv_path: Path, config: AppConfig) -> NormalizationResult:
    """Read and normalize one input file; fatal schema/empty errors propagate."""
    LOGGER.info("Reading %s", csv_path)
    raw = read_raw_table(csv_path, config.input)
    return normalize_records(
        raw,
        config.columns,
        require_ohlc=config.input.require_ohlc_headers,
    )
