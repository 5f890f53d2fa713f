from __future__ import annotations

import concurrent.futures
import io
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import pandas as pd

from prouni.config import DashboardConfig
from prouni.ingest.http import DatasetHttpClient
from prouni.normalize.field_mapping import FieldMapping, resolve_field_mapping
from prouni.normalize.schema import normalize_records
from prouni.synthetic import generate_synthetic_dataset, synthetic_state_collection

logger = logging.getLogger(__name__)

_CSV_DELIMITERS = (";", ",")


@dataclass(slots=True)
class LoadResult:
    dataset: pd.DataFrame
    geojson: dict[str, Any]
    field_mapping: FieldMapping | None
    dataset_is_synthetic: bool = False
    geojson_is_synthetic: bool = False
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_synthetic(self) -> bool:
        return self.dataset_is_synthetic or self.geojson_is_synthetic


def is_url(source: str | Path) -> bool:
    return urlparse(str(source)).scheme in {"http", "https"}


def read_source_bytes(source: str | Path, *, http_client: DatasetHttpClient | None = None) -> bytes:
    if is_url(source):
        if http_client is not None:
            return http_client.get_bytes(str(source))
        with DatasetHttpClient() as client:
            return client.get_bytes(str(source))

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return path.read_bytes()


def _decode(payload: bytes) -> str:
    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Government CSV exports are frequently latin-1.
        return payload.decode("latin-1")


def _sniff_delimiter(text: str) -> str:
    header = text.split("\n", 1)[0]
    return max(_CSV_DELIMITERS, key=header.count)


def parse_records_csv(
    text: str,
    *,
    mapping: FieldMapping | dict[str, Any] | None = None,
) -> tuple[pd.DataFrame, FieldMapping]:
    if not text.strip():
        raise ValueError("CSV input is empty.")
    raw_df = pd.read_csv(
        io.StringIO(text),
        sep=_sniff_delimiter(text),
        dtype=str,
        keep_default_na=False,
    )
    raw_df.columns = [str(column).strip() for column in raw_df.columns]
    resolved = resolve_field_mapping(raw_df.columns, mapping)
    return normalize_records(raw_df, resolved), resolved


def load_records_csv(
    source: str | Path,
    *,
    mapping: FieldMapping | dict[str, Any] | None = None,
    http_client: DatasetHttpClient | None = None,
) -> tuple[pd.DataFrame, FieldMapping]:
    text = _decode(read_source_bytes(source, http_client=http_client))
    df, resolved = parse_records_csv(text, mapping=mapping)
    logger.info("Loaded %d scholarship records from %s", len(df), source)
    return df, resolved


def validate_state_collection(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
        raise ValueError("GeoJSON input must be a FeatureCollection.")
    features = payload.get("features")
    if not isinstance(features, list) or not features:
        raise ValueError("GeoJSON FeatureCollection has no features.")
    for index, feature in enumerate(features):
        properties = feature.get("properties") if isinstance(feature, dict) else None
        if not isinstance(properties, dict):
            raise ValueError(f"GeoJSON feature {index} has no properties.")
        for key in ("sigla", "nome"):
            if not str(properties.get(key) or "").strip():
                raise ValueError(f"GeoJSON feature {index} is missing property '{key}'.")
    return payload


def load_state_geojson(
    source: str | Path,
    *,
    http_client: DatasetHttpClient | None = None,
) -> dict[str, Any]:
    payload = json.loads(_decode(read_source_bytes(source, http_client=http_client)))
    collection = validate_state_collection(payload)
    logger.info("Loaded %d state features from %s", len(collection["features"]), source)
    return collection


def state_names(geojson: dict[str, Any]) -> dict[str, str]:
    names: dict[str, str] = {}
    for feature in geojson.get("features") or []:
        properties = feature.get("properties") or {}
        code = str(properties.get("sigla") or "").strip().upper()
        if code:
            names[code] = str(properties.get("nome") or code)
    return dict(sorted(names.items()))


def _exception_summary(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"


def load_dashboard_inputs(config: DashboardConfig | None = None) -> LoadResult:
    """Load the CSV and GeoJSON concurrently, substituting synthetic data on failure."""

    cfg = config or DashboardConfig.defaults()
    errors: dict[str, str] = {}

    with DatasetHttpClient(timeout_seconds=cfg.request_timeout_seconds) as http_client:
        with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
            csv_future = executor.submit(
                load_records_csv,
                cfg.csv_source,
                mapping=cfg.field_mapping,
                http_client=http_client,
            )
            geo_future = executor.submit(
                load_state_geojson,
                cfg.geojson_source,
                http_client=http_client,
            )
            concurrent.futures.wait([csv_future, geo_future])

        try:
            dataset, field_mapping = csv_future.result()
            dataset_is_synthetic = False
        except Exception as exc:
            logger.exception("Failed to load scholarship CSV from %s; using synthetic data.", cfg.csv_source)
            errors["csv"] = _exception_summary(exc)
            dataset = generate_synthetic_dataset(
                years=cfg.synthetic_years,
                records_per_state_year=cfg.synthetic_records_per_state_year,
                seed=cfg.synthetic_seed,
            )
            field_mapping = None
            dataset_is_synthetic = True

        try:
            geojson = geo_future.result()
            geojson_is_synthetic = False
        except Exception as exc:
            logger.exception("Failed to load state GeoJSON from %s; map will be unavailable.", cfg.geojson_source)
            errors["geojson"] = _exception_summary(exc)
            geojson = synthetic_state_collection()
            geojson_is_synthetic = True

    return LoadResult(
        dataset=dataset,
        geojson=geojson,
        field_mapping=field_mapping,
        dataset_is_synthetic=dataset_is_synthetic,
        geojson_is_synthetic=geojson_is_synthetic,
        errors=errors,
    )
