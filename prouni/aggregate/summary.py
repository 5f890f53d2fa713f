from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from prouni.aggregate.aggregator import AggregationEntry, aggregate_by_category
from prouni.aggregate.record_filter import filter_records
from prouni.aggregate.selection import (
    Selection,
    SelectionState,
    classify_selection,
    placeholder_message,
)
from prouni.aggregate.time_series import TimeSeriesPoint, count_by_state, yearly_counts
from prouni.aggregate.top_n import TopEntry, top_n
from prouni.config import DashboardConfig

PIE_FIELDS = ("tipo_bolsa", "sexo", "raca")


@dataclass(slots=True)
class DashboardSummary:
    selection: Selection
    selection_state: SelectionState
    total_awards: int
    turno: list[AggregationEntry] = field(default_factory=list)
    pies: dict[str, list[AggregationEntry]] = field(default_factory=dict)
    category: list[AggregationEntry] = field(default_factory=list)
    top_institutions: list[TopEntry] = field(default_factory=list)
    yearly: list[TimeSeriesPoint] = field(default_factory=list)
    state_counts: dict[str, int] = field(default_factory=dict)

    @property
    def message(self) -> str | None:
        return placeholder_message(self.selection_state, self.selection)

    def to_dict(self) -> dict[str, Any]:
        return {
            "selection": self.selection.to_dict(),
            "selection_state": self.selection_state.value,
            "message": self.message,
            "total_awards": self.total_awards,
            "turno": [entry.to_dict() for entry in self.turno],
            "pies": {name: [entry.to_dict() for entry in entries] for name, entries in self.pies.items()},
            "category": [entry.to_dict() for entry in self.category],
            "top_institutions": [entry.to_dict() for entry in self.top_institutions],
            "yearly": [point.to_dict() for point in self.yearly],
            "state_counts": dict(self.state_counts),
        }


def build_dashboard_summary(
    dataset: pd.DataFrame,
    selection: Selection,
    config: DashboardConfig | None = None,
) -> DashboardSummary:
    cfg = config or DashboardConfig.defaults()
    state_counts = count_by_state(dataset, selection.year)
    filtered = filter_records(dataset, selection.state, selection.year)
    selection_state = classify_selection(selection, filtered)

    if filtered is None:
        return DashboardSummary(
            selection=selection,
            selection_state=selection_state,
            total_awards=0,
            state_counts=state_counts,
        )

    pies = {
        name: aggregate_by_category(
            filtered,
            name,
            default_label=cfg.missing_label,
            decimals=cfg.pie_decimals,
            max_categories=cfg.max_pie_categories,
            other_label=cfg.other_label,
        )
        for name in PIE_FIELDS
    }
    return DashboardSummary(
        selection=selection,
        selection_state=selection_state,
        total_awards=int(len(filtered)),
        turno=aggregate_by_category(
            filtered,
            "turno",
            default_label=cfg.missing_label,
            decimals=cfg.bar_decimals,
        ),
        pies=pies,
        category=aggregate_by_category(
            filtered,
            selection.category,
            default_label=cfg.missing_label,
            decimals=cfg.pie_decimals,
            max_categories=cfg.max_pie_categories,
            other_label=cfg.other_label,
        ),
        top_institutions=top_n(filtered, "ies", n=cfg.top_n),
        yearly=yearly_counts(dataset, selection.state),
        state_counts=state_counts,
    )
