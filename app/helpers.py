from __future__ import annotations

from typing import Any, Sequence

import pandas as pd

from prouni.aggregate.top_n import TopEntry
from prouni.normalize.states import normalize_state_code


def has_geometry(geojson: dict[str, Any]) -> bool:
    return any((feature or {}).get("geometry") for feature in geojson.get("features") or [])


def state_options(geojson: dict[str, Any], dataset: pd.DataFrame) -> list[str]:
    """Empty choice first, then every state code seen in the map or the data."""

    codes: set[str] = set()
    for feature in geojson.get("features") or []:
        code = str(((feature or {}).get("properties") or {}).get("sigla") or "").strip().upper()
        if code:
            codes.add(code)
    if "state" in dataset.columns:
        codes.update(str(code) for code in dataset["state"].dropna().unique() if str(code).strip())
    return ["", *sorted(codes)]


def clicked_state(event: Any, options: Sequence[str]) -> str | None:
    """State code of the first clicked map point that is also a dropdown option."""

    selection = (event or {}).get("selection") or {}
    for point in selection.get("points") or []:
        code = normalize_state_code((point or {}).get("location"))
        if code and code in options:
            return code
    return None


def year_options(dataset: pd.DataFrame) -> list[int]:
    if "year" not in dataset.columns:
        return []
    years = pd.to_numeric(dataset["year"], errors="coerce").dropna().astype(int).unique()
    return sorted(int(year) for year in years)


def default_year_index(years: Sequence[int], preferred: int) -> int:
    if not years:
        return 0
    if preferred in years:
        return list(years).index(preferred)
    return len(years) - 1


def format_state_option(code: str, names: dict[str, str]) -> str:
    if not code:
        return "Nenhum selecionado"
    name = names.get(code)
    return f"{name} ({code})" if name else code


def format_top_institutions(entries: Sequence[TopEntry]) -> list[str]:
    if not entries:
        return ["Sem dados disponíveis"]
    return [f"{entry.name}: {entry.count:,} bolsas".replace(",", ".") for entry in entries]
