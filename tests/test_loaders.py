from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from prouni.config import DashboardConfig
from prouni.ingest import loaders
from prouni.ingest.loaders import (
    load_dashboard_inputs,
    load_records_csv,
    load_state_geojson,
    parse_records_csv,
    state_names,
    validate_state_collection,
)
from prouni.normalize.field_mapping import FieldMapping
from prouni.normalize.states import BRAZIL_STATES

RESOURCES = Path(__file__).resolve().parent / "resources"
CSV_PATH = RESOURCES / "prouni_sample.csv"
GEOJSON_PATH = RESOURCES / "brazil_states_sample.geojson"


def test_load_records_csv_reads_semicolon_prouni_export() -> None:
    df, mapping = load_records_csv(CSV_PATH)

    assert mapping == FieldMapping.default()
    assert len(df) == 7
    assert df["state"].tolist().count("SP") == 5
    assert df["year"].tolist()[:3] == [2015, 2015, 2015]
    assert pd.isna(df.loc[4, "raca"])


def test_parse_records_csv_with_comma_delimiter_and_detected_columns() -> None:
    text = "SG_UF,NU_ANO_PROGRAMA,NO_IES\nBA,2019,UFBA\nBA,2020,UNIFACS\n"

    df, mapping = parse_records_csv(text)

    assert mapping.state == "SG_UF"
    assert mapping.year == "NU_ANO_PROGRAMA"
    assert df["ies"].tolist() == ["UFBA", "UNIFACS"]
    assert df["year"].tolist() == [2019, 2020]


def test_parse_records_csv_rejects_empty_input() -> None:
    with pytest.raises(ValueError):
        parse_records_csv("   ")


def test_latin1_csv_is_decoded(tmp_path: Path) -> None:
    path = tmp_path / "latin1.csv"
    path.write_bytes("UF;ANO;RACA\nPA;2017;Indígena\n".encode("latin-1"))

    df, _ = load_records_csv(path, mapping={"state": "UF", "year": "ANO", "raca": "RACA"})

    assert df.loc[0, "raca"] == "Indígena"


def test_missing_csv_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_records_csv(tmp_path / "missing.csv")


def test_load_state_geojson_and_names() -> None:
    geojson = load_state_geojson(GEOJSON_PATH)

    assert state_names(geojson) == {"RJ": "Rio de Janeiro", "SP": "São Paulo", "TO": "Tocantins"}


def test_validate_state_collection_requires_sigla_and_nome() -> None:
    with pytest.raises(ValueError):
        validate_state_collection({"type": "Feature"})
    with pytest.raises(ValueError):
        validate_state_collection({"type": "FeatureCollection", "features": []})
    with pytest.raises(ValueError, match="sigla"):
        validate_state_collection(
            {"type": "FeatureCollection", "features": [{"type": "Feature", "properties": {"nome": "Bahia"}}]}
        )


def test_load_dashboard_inputs_uses_real_files() -> None:
    config = DashboardConfig(csv_source=str(CSV_PATH), geojson_source=str(GEOJSON_PATH))

    result = load_dashboard_inputs(config)

    assert not result.is_synthetic
    assert result.errors == {}
    assert len(result.dataset) == 7
    assert len(result.geojson["features"]) == 3
    assert result.field_mapping == FieldMapping.default()


def test_load_dashboard_inputs_falls_back_when_both_sources_fail(tmp_path: Path) -> None:
    bad_geojson = tmp_path / "states.geojson"
    bad_geojson.write_text(json.dumps({"type": "FeatureCollection", "features": []}), encoding="utf-8")
    config = DashboardConfig(
        csv_source=str(tmp_path / "missing.csv"),
        geojson_source=str(bad_geojson),
        synthetic_years=(2015, 2016),
        synthetic_records_per_state_year=2,
    )

    result = load_dashboard_inputs(config)

    assert result.dataset_is_synthetic
    assert result.geojson_is_synthetic
    assert result.errors["csv"].startswith("FileNotFoundError")
    assert result.errors["geojson"].startswith("ValueError")
    assert len(result.dataset) == len(BRAZIL_STATES) * 2 * 2
    assert result.field_mapping is None
    assert set(state_names(result.geojson)) == set(BRAZIL_STATES)


def test_load_dashboard_inputs_fetches_urls_through_http_client(monkeypatch: pytest.MonkeyPatch) -> None:
    payloads = {
        "https://example.org/data.csv": CSV_PATH.read_bytes(),
        "https://example.org/states.geojson": GEOJSON_PATH.read_bytes(),
    }
    requested: list[str] = []

    def _fake_get_bytes(self, url: str) -> bytes:  # noqa: ANN001
        requested.append(url)
        return payloads[url]

    monkeypatch.setattr(loaders.DatasetHttpClient, "get_bytes", _fake_get_bytes)
    config = DashboardConfig(
        csv_source="https://example.org/data.csv",
        geojson_source="https://example.org/states.geojson",
    )

    result = load_dashboard_inputs(config)

    assert sorted(requested) == sorted(payloads)
    assert not result.is_synthetic
    assert len(result.dataset) == 7
