from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal, Sequence

DropReason = Literal["missing_series_name", "invalid_date", "invalid_close"]


class SchemaError(ValueError):
    """Raised when the input lacks a required logical column."""

    def __init__(self, missing: Sequence[str], expected: Sequence[str]) -> None:
        self.missing = list(missing)
        self.expected = list(expected)
        super().__init__(
            f"Missing required CSV headers: {', '.join(self.missing)}. "
            f"Expected headers: {', '.join(self.expected)}"
        )


class EmptyDatasetError(ValueError):
    """Raised when no row survives validation."""

    def __init__(self, dropped_count: int) -> None:
        self.dropped_count = dropped_count
        super().__init__(
            f"No valid data found in CSV file after validation ({dropped_count} rows dropped)"
        )


class EmptySeriesSelection(ValueError):
    """Raised when a series selection yields no records."""

    def __init__(
        self,
        series: str,
        start: date | None = None,
        end: date | None = None,
    ) -> None:
        self.series = series
        self.start = start
        self.end = end
        if start is None and end is None:
            message = f"No data found for {series}."
        else:
            lower = start.isoformat() if start is not None else "-"
            upper = end.isoformat() if end is not None else "-"
            message = f"No data found for {series} in the selected date range ({lower} to {upper})."
        super().__init__(message)


@dataclass(frozen=True)
class RowValidationFailure:
    # 1-based position among data rows, header excluded
    row_number: int
    reason: DropReason
