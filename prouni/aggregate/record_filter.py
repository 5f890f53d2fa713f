from __future__ import annotations

from typing import Any

import pandas as pd

from prouni.aggregate.records import Records, as_frame
from prouni.normalize.schema import coerce_year
from prouni.normalize.states import normalize_state_code


def resolve_year(year: Any) -> int | None:
    """Coerce a control value to an integer year; blank means unconstrained."""

    if year is None or (isinstance(year, str) and not year.strip()):
        return None
    resolved = coerce_year(year)
    if resolved is None:
        raise ValueError(f"Year must be an integer, received {year!r}.")
    return resolved


def year_series(df: pd.DataFrame, column: str = "year") -> pd.Series:
    if column not in df.columns:
        return pd.Series([pd.NA] * len(df), index=df.index, dtype="Int64")
    return pd.to_numeric(df[column].map(coerce_year), errors="coerce").astype("Int64")


def state_mask(df: pd.DataFrame, state_code: str, column: str = "state") -> pd.Series:
    if column not in df.columns:
        return pd.Series(False, index=df.index)
    # Stored codes compare exactly; only the control value is normalised.
    return df[column].eq(state_code).fillna(False).astype(bool)


def filter_records(
    records: Records,
    state: str | None,
    year: Any = None,
    *,
    state_column: str = "state",
    year_column: str = "year",
) -> pd.DataFrame | None:
    """Select awards for one state and, when given, one year.

    Returns ``None`` when no state is selected so callers can tell "nothing
    selected" apart from "selected, but zero matching awards" (an empty frame).
    """

    state_code = normalize_state_code(state)
    if state_code is None:
        return None

    df = as_frame(records)
    resolved_year = resolve_year(year)
    if df.empty:
        return df.copy()

    mask = state_mask(df, state_code, state_column)
    if resolved_year is not None:
        mask &= year_series(df, year_column).eq(resolved_year).fillna(False).astype(bool)
    return df[mask].reset_index(drop=True)
