from __future__ import annotations

import pandas as pd
import pytest

from prouni.normalize.states import BRAZIL_STATES
from prouni.synthetic import generate_synthetic_dataset, synthetic_state_collection


def test_synthetic_dataset_covers_every_state_and_year() -> None:
    df = generate_synthetic_dataset(years=(2015, 2017), records_per_state_year=3, seed=1)

    assert len(df) == len(BRAZIL_STATES) * 3 * 3
    assert set(df["state"]) == set(BRAZIL_STATES)
    assert sorted(df["year"].unique().tolist()) == [2015, 2016, 2017]
    assert df[["turno", "tipo_bolsa", "sexo", "raca", "ies"]].notna().all().all()


def test_synthetic_dataset_is_deterministic_for_a_seed() -> None:
    first = generate_synthetic_dataset(states=["SP", "RJ"], seed=7)
    second = generate_synthetic_dataset(states=["SP", "RJ"], seed=7)
    other = generate_synthetic_dataset(states=["SP", "RJ"], seed=8)

    pd.testing.assert_frame_equal(first, second)
    assert not first.equals(other)


def test_synthetic_dataset_rejects_bad_arguments() -> None:
    with pytest.raises(ValueError):
        generate_synthetic_dataset(years=(2019, 2015))
    with pytest.raises(ValueError):
        generate_synthetic_dataset(records_per_state_year=0)


def test_synthetic_state_collection_lists_all_states_without_geometry() -> None:
    collection = synthetic_state_collection()

    assert collection["type"] == "FeatureCollection"
    assert len(collection["features"]) == len(BRAZIL_STATES)
    assert all(feature["geometry"] is None for feature in collection["features"])
    assert collection["features"][0]["properties"] == {"sigla": "AC", "nome": "Acre"}
