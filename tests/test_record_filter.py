from __future__ import annotations

import pandas as pd
import pytest

from prouni.aggregate.record_filter import filter_records, resolve_year


def _dataset() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"state": "SP", "year": 2015, "turno": "Integral"},
            {"state": "SP", "year": 2015, "turno": "Integral"},
            {"state": "SP", "year": 2015, "turno": "Noturno"},
            {"state": "SP", "year": 2016, "turno": "Noturno"},
            {"state": "RJ", "year": 2015, "turno": "Matutino"},
        ]
    )


def test_filter_matches_state_and_year() -> None:
    filtered = filter_records(_dataset(), "SP", 2015)

    assert filtered is not None
    assert len(filtered) == 3
    assert set(filtered["state"]) == {"SP"}
    assert filtered["turno"].tolist() == ["Integral", "Integral", "Noturno"]


def test_filter_compares_years_numerically_when_controls_send_strings() -> None:
    records = [
        {"state": "SP", "year": "2015", "turno": "Integral"},
        {"state": "SP", "year": 2015.0, "turno": "Noturno"},
        {"state": "SP", "year": "2016", "turno": "Noturno"},
    ]

    filtered = filter_records(records, "SP", " 2015 ")

    assert filtered is not None
    assert len(filtered) == 2


def test_empty_state_is_no_selection_not_zero_matches() -> None:
    assert filter_records(_dataset(), "", 2015) is None
    assert filter_records(_dataset(), None, 2015) is None
    assert filter_records(_dataset(), "   ", "2015") is None


def test_unknown_state_returns_empty_frame_without_error() -> None:
    filtered = filter_records(_dataset(), "XX", 2015)

    assert filtered is not None
    assert filtered.empty


def test_missing_year_means_any_year() -> None:
    filtered = filter_records(_dataset(), "sp", None)

    assert filtered is not None
    assert len(filtered) == 4


def test_filter_on_empty_dataset_returns_empty_frame() -> None:
    filtered = filter_records(pd.DataFrame(columns=["state", "year"]), "SP", 2015)

    assert filtered is not None
    assert filtered.empty


def test_resolve_year_rejects_non_numeric_values() -> None:
    assert resolve_year("2018") == 2018
    assert resolve_year("") is None
    with pytest.raises(ValueError):
        resolve_year("abc")
    with pytest.raises(ValueError):
        filter_records(_dataset(), "SP", "twenty")


def test_stored_state_codes_match_exactly() -> None:
    records = [
        {"state": "SP", "year": 2015},
        {"state": "sp ", "year": 2015},
        {"state": None, "year": 2015},
    ]

    filtered = filter_records(records, " sp", 2015)

    assert filtered is not None
    assert len(filtered) == 1


def test_missing_state_values_never_match_a_selection() -> None:
    df = pd.DataFrame(
        {
            "state": pd.array(["SP", pd.NA, "SP"], dtype="string"),
            "year": [2015, 2015, 2015],
        }
    )

    assert len(filter_records(df, "SP", 2015)) == 2
    assert filter_records(df, "<NA>", 2015).empty
    assert filter_records(df, pd.NA, 2015) is None
