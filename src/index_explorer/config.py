from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_POINTS = 150
DEFAULT_PAGE_SIZE = 50


class ColumnsConfig(BaseModel):
    """Source header for each logical field, matched case-insensitively."""

    series_name: str = "index_name"
    date: str = "index_date"
    open: str = "open_index_value"
    high: str = "high_index_value"
    low: str = "low_index_value"
    close: str = "closing_index_value"
    points_change: str = "points_change"
    change_percent: str = "change_percent"
    volume: str = "volume"
    turnover: str = "turnover_rs_cr"
    pe_ratio: str = "pe_ratio"
    pb_ratio: str = "pb_ratio"
    div_yield: str = "div_yield"


class InputConfig(BaseModel):
    delimiter: str = Field(default=",", min_length=1)
    encoding: str = "utf-8-sig"
    require_ohlc_headers: bool = False
    source_file: str | None = None


class ViewConfig(BaseModel):
    max_points: int = Field(default=DEFAULT_MAX_POINTS, ge=2)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"
    figures_format: str = "png"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    view: ViewConfig = Field(default_factory=ViewConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.input.source_file = _resolve_optional_path(config.input.source_file, base_dir)
    return config
