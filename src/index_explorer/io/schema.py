from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from index_explorer.config import ColumnsConfig
from index_explorer.errors import SchemaError


# logical field -> canonical column, in export order; the canonical header is
# the ColumnsConfig default
FIELD_COLUMNS: dict[str, str] = {
    name: str(field.default) for name, field in ColumnsConfig.model_fields.items()
}
CANONICAL_COLUMNS: list[str] = list(FIELD_COLUMNS.values())

REQUIRED_FIELDS = ("series_name", "date", "close")
OHLC_FIELDS = ("open", "high", "low")
NUMERIC_FIELDS = tuple(
    name for name in FIELD_COLUMNS if name not in ("series_name", "date")
)
OPTIONAL_FIELDS = tuple(name for name in NUMERIC_FIELDS if name != "close")
NUMERIC_COLUMNS = [FIELD_COLUMNS[name] for name in NUMERIC_FIELDS]


@dataclass(frozen=True)
class HeaderResolution:
    # logical field -> header as it appears in the file
    source_columns: dict[str, str]
    missing_optional_fields: list[str]


def build_header_lookup(headers: Sequence[object]) -> dict[str, str]:
    """Map lower-cased headers to their first spelling in the file."""
    lookup: dict[str, str] = {}
    for header in headers:
        text = str(header)
        lookup.setdefault(text.strip().lower(), text)
    return lookup


def resolve_headers(
    headers: Sequence[object],
    columns: ColumnsConfig,
    *,
    require_ohlc: bool = False,
) -> HeaderResolution:
    """Locate every logical field in the file header, case-insensitively."""
    lookup = build_header_lookup(headers)
    required = list(REQUIRED_FIELDS)
    if require_ohlc:
        required.extend(OHLC_FIELDS)

    configured = {name: getattr(columns, name) for name in FIELD_COLUMNS}
    source_columns = {
        name: lookup[header.strip().lower()]
        for name, header in configured.items()
        if header.strip().lower() in lookup
    }

    missing_required = [configured[name] for name in required if name not in source_columns]
    if missing_required:
        raise SchemaError(
            missing=missing_required,
            expected=[configured[name] for name in required],
        )

    missing_optional = [
        configured[name] for name in OPTIONAL_FIELDS if name not in source_columns
    ]
    return HeaderResolution(
        source_columns=source_columns,
        missing_optional_fields=missing_optional,
    )
