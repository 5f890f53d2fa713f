from __future__ import annotations

import pandas as pd

from prouni.aggregate.time_series import TimeSeriesPoint, count_by_state, yearly_counts


def test_yearly_counts_are_ascending_and_skip_absent_years() -> None:
    records = [
        {"state": "TO", "year": 2018},
        {"state": "TO", "year": "2016"},
        {"state": "TO", "year": 2015},
        {"state": "TO", "year": 2016},
        {"state": "SP", "year": 2017},
    ]

    result = yearly_counts(records, "TO")

    assert result == [
        TimeSeriesPoint(year=2015, count=1),
        TimeSeriesPoint(year=2016, count=2),
        TimeSeriesPoint(year=2018, count=1),
    ]
    assert [point.to_dict() for point in result] == [
        {"year": 2015, "count": 1},
        {"year": 2016, "count": 2},
        {"year": 2018, "count": 1},
    ]


def test_yearly_counts_empty_state_returns_empty_list() -> None:
    records = [{"state": "SP", "year": 2015}]

    assert yearly_counts(records, "") == []
    assert yearly_counts(records, None) == []


def test_yearly_counts_drop_rows_without_numeric_year() -> None:
    records = [
        {"state": "BA", "year": "n/a"},
        {"state": "BA", "year": 2019},
        {"state": "BA", "year": None},
    ]

    assert yearly_counts(records, "BA") == [TimeSeriesPoint(year=2019, count=1)]


def test_yearly_counts_unknown_state_is_empty() -> None:
    assert yearly_counts([{"state": "SP", "year": 2015}], "XX") == []


def test_count_by_state_for_a_year() -> None:
    df = pd.DataFrame(
        [
            {"state": "SP", "year": 2015},
            {"state": "SP", "year": 2015},
            {"state": "RJ", "year": 2015},
            {"state": "RJ", "year": 2016},
            {"state": "AC", "year": 2016},
        ]
    )

    assert count_by_state(df, 2015) == {"RJ": 1, "SP": 2}
    assert count_by_state(df) == {"AC": 1, "RJ": 2, "SP": 2}
    assert count_by_state(pd.DataFrame()) == {}


def test_count_by_state_skips_missing_state_values() -> None:
    df = pd.DataFrame(
        {
            "state": pd.array(["SP", pd.NA, "SP", ""], dtype="string"),
            "year": [2015, 2015, 2015, 2015],
        }
    )

    assert count_by_state(df, 2015) == {"SP": 2}
    assert yearly_counts(df, "SP") == [TimeSeriesPoint(year=2015, count=2)]
