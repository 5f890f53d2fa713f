from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from prouni.aggregate.record_filter import state_mask, year_series
from prouni.aggregate.records import Records, as_frame, is_missing
from prouni.normalize.states import normalize_state_code

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TimeSeriesPoint:
    year: int
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"year": self.year, "count": self.count}


def yearly_counts(
    records: Records,
    state: str | None,
    *,
    state_column: str = "state",
    year_column: str = "year",
) -> list[TimeSeriesPoint]:
    """Awards per year for one state, ascending by year."""

    state_code = normalize_state_code(state)
    if state_code is None:
        return []

    df = as_frame(records)
    if df.empty:
        return []

    years = year_series(df, year_column)[state_mask(df, state_code, state_column)]
    invalid = int(years.isna().sum())
    if invalid:
        logger.debug("Dropped %d %s rows without a numeric year.", invalid, state_code)
    counts = years.dropna().astype(int).value_counts().sort_index()
    return [TimeSeriesPoint(year=int(year), count=int(count)) for year, count in counts.items()]


def count_by_state(
    records: Records,
    year: int | None = None,
    *,
    state_column: str = "state",
    year_column: str = "year",
) -> dict[str, int]:
    """Awards per state code for one year (all years when ``year`` is None)."""

    df = as_frame(records)
    if df.empty or state_column not in df.columns:
        return {}

    states = df[state_column].map(lambda value: None if is_missing(value) else str(value))
    if year is not None:
        states = states[year_series(df, year_column).eq(int(year)).fillna(False).astype(bool)]
    counts = states.dropna().value_counts().sort_index()
    return {str(state): int(count) for state, count in counts.items()}
