from __future__ import annotations

import pandas as pd

from prouni.aggregate.record_filter import filter_records
from prouni.aggregate.selection import (
    Selection,
    SelectionState,
    classify_selection,
    placeholder_message,
)


def _dataset() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"state": "SP", "year": 2015, "turno": "Integral"},
            {"state": "RJ", "year": 2016, "turno": "Noturno"},
        ]
    )


def test_from_controls_normalizes_string_inputs() -> None:
    selection = Selection.from_controls(" sp ", "2015", "raca")

    assert selection == Selection(state="SP", year=2015, category="raca")
    assert selection.has_state


def test_from_controls_treats_blank_state_as_no_selection() -> None:
    selection = Selection.from_controls("", "2015", None)

    assert selection.state is None
    assert not selection.has_state
    assert selection.category == "turno"


def test_state_transitions_follow_filter_output() -> None:
    dataset = _dataset()

    none_selected = Selection.from_controls("", 2015)
    no_data = Selection.from_controls("SP", 2016)
    with_data = Selection.from_controls("SP", 2015)

    assert (
        classify_selection(none_selected, filter_records(dataset, none_selected.state, none_selected.year))
        is SelectionState.NO_STATE_SELECTED
    )
    assert (
        classify_selection(no_data, filter_records(dataset, no_data.state, no_data.year))
        is SelectionState.STATE_SELECTED_NO_DATA
    )
    assert (
        classify_selection(with_data, filter_records(dataset, with_data.state, with_data.year))
        is SelectionState.STATE_SELECTED_WITH_DATA
    )


def test_placeholder_messages_differ_per_state() -> None:
    selection = Selection(state="SP", year=2016)

    prompt = placeholder_message(SelectionState.NO_STATE_SELECTED, Selection())
    no_data = placeholder_message(SelectionState.STATE_SELECTED_NO_DATA, selection)

    assert prompt == "Selecione um estado para visualizar os dados."
    assert no_data == "Sem dados para São Paulo em 2016."
    assert placeholder_message(SelectionState.STATE_SELECTED_WITH_DATA, selection) is None
