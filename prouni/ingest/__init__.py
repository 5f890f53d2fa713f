from __future__ import annotations

from .http import DatasetHttpClient
from .loaders import (
    LoadResult,
    load_dashboard_inputs,
    load_records_csv,
    load_state_geojson,
    state_names,
)

__all__ = [
    "DatasetHttpClient",
    "LoadResult",
    "load_dashboard_inputs",
    "load_records_csv",
    "load_state_geojson",
    "state_names",
]
