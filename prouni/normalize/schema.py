from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd

from prouni.normalize.field_mapping import LOGICAL_FIELDS, FieldMapping
from prouni.normalize.states import normalize_state_code

CANONICAL_COLUMNS = list(LOGICAL_FIELDS)
CATEGORY_COLUMNS = ("turno", "tipo_bolsa", "sexo", "raca", "ies")


@dataclass(slots=True)
class BolsaRecord:
    """One scholarship award after column mapping."""

    state: str
    year: Optional[int]
    turno: Optional[str] = None
    tipo_bolsa: Optional[str] = None
    sexo: Optional[str] = None
    raca: Optional[str] = None
    ies: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {column: getattr(self, column) for column in CANONICAL_COLUMNS}


def coerce_year(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    try:
        numeric = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if pd.isna(numeric) or not numeric.is_integer():
        return None
    return int(numeric)


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def normalize_records(raw_df: pd.DataFrame, mapping: FieldMapping) -> pd.DataFrame:
    """Rename mapped columns to canonical names and coerce state/year values."""

    if raw_df.empty:
        return pd.DataFrame(columns=CANONICAL_COLUMNS)

    df = pd.DataFrame(index=raw_df.index)
    for field_name in CANONICAL_COLUMNS:
        column = getattr(mapping, field_name)
        if column in raw_df.columns:
            df[field_name] = raw_df[column]
        else:
            df[field_name] = None

    df["state"] = df["state"].map(normalize_state_code)
    df["year"] = pd.to_numeric(df["year"].map(coerce_year), errors="coerce").astype("Int64")
    for column in CATEGORY_COLUMNS:
        df[column] = df[column].map(_clean_text)

    return df[CANONICAL_COLUMNS].reset_index(drop=True)
