from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import pandas as pd

from prouni.aggregate.record_filter import resolve_year
from prouni.normalize.states import normalize_state_code, state_display_name


class SelectionState(str, Enum):
    NO_STATE_SELECTED = "no-state-selected"
    STATE_SELECTED_NO_DATA = "state-selected-no-data"
    STATE_SELECTED_WITH_DATA = "state-selected-with-data"


@dataclass(frozen=True, slots=True)
class Selection:
    """Current filter context; rebuilt by the UI on every control change."""

    state: str | None = None
    year: int | None = None
    category: str = "turno"

    @classmethod
    def from_controls(cls, state: Any, year: Any, category: Any = "turno") -> Selection:
        return cls(
            state=normalize_state_code(state),
            year=resolve_year(year),
            category=str(category or "turno"),
        )

    @property
    def has_state(self) -> bool:
        return self.state is not None

    def to_dict(self) -> dict[str, Any]:
        return {"state": self.state, "year": self.year, "category": self.category}


def classify_selection(selection: Selection, filtered: pd.DataFrame | None) -> SelectionState:
    if not selection.has_state or filtered is None:
        return SelectionState.NO_STATE_SELECTED
    if filtered.empty:
        return SelectionState.STATE_SELECTED_NO_DATA
    return SelectionState.STATE_SELECTED_WITH_DATA


def placeholder_message(state: SelectionState, selection: Selection) -> str | None:
    if state is SelectionState.NO_STATE_SELECTED:
        return "Selecione um estado para visualizar os dados."
    if state is SelectionState.STATE_SELECTED_NO_DATA:
        period = f" em {selection.year}" if selection.year is not None else ""
        return f"Sem dados para {state_display_name(selection.state)}{period}."
    return None
