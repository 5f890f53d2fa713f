from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

import pandas as pd

Records = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]


def as_frame(records: Records | None) -> pd.DataFrame:
    if records is None:
        return pd.DataFrame()
    if isinstance(records, pd.DataFrame):
        return records
    return pd.DataFrame(list(records))


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
