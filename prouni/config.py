from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from prouni.normalize.field_mapping import FieldMapping

ROOT_DIR = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = ROOT_DIR / "config" / "dashboard.json"
DEFAULT_CSV_SOURCE = str(ROOT_DIR / "data" / "data.csv")
DEFAULT_GEOJSON_SOURCE = str(ROOT_DIR / "data" / "brazil-states.geojson")

CATEGORY_LABELS: dict[str, str] = {
    "turno": "Turno do curso",
    "tipo_bolsa": "Tipo de bolsa",
    "sexo": "Sexo",
    "raca": "Raça/cor",
}


@dataclass(frozen=True, slots=True)
class DashboardConfig:
    csv_source: str = DEFAULT_CSV_SOURCE
    geojson_source: str = DEFAULT_GEOJSON_SOURCE
    field_mapping: FieldMapping | None = None
    default_year: int = 2015
    default_category: str = "turno"
    top_n: int = 5
    max_pie_categories: int = 5
    bar_decimals: int = 2
    pie_decimals: int = 1
    missing_label: str = "Não informado"
    other_label: str = "Outros"
    synthetic_years: tuple[int, int] = (2015, 2019)
    synthetic_records_per_state_year: int = 40
    synthetic_seed: int = 0
    request_timeout_seconds: float = 20.0

    def __post_init__(self) -> None:
        if self.default_category not in CATEGORY_LABELS:
            raise ValueError(
                f"default_category must be one of {', '.join(CATEGORY_LABELS)} "
                f"(received '{self.default_category}')."
            )
        if self.top_n < 1:
            raise ValueError("top_n must be at least 1.")
        if self.max_pie_categories < 2:
            raise ValueError("max_pie_categories must be at least 2.")
        for field_name in ("bar_decimals", "pie_decimals"):
            value = getattr(self, field_name)
            if value < 0 or value > 4:
                raise ValueError(f"{field_name} must be between 0 and 4.")
        start_year, end_year = self.synthetic_years
        if start_year > end_year:
            raise ValueError("synthetic_years must be an ascending (start, end) pair.")
        if self.synthetic_records_per_state_year < 1:
            raise ValueError("synthetic_records_per_state_year must be at least 1.")
        if self.request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be positive.")
        if not self.missing_label.strip() or not self.other_label.strip():
            raise ValueError("missing_label and other_label must be non-empty.")

    @classmethod
    def defaults(cls) -> DashboardConfig:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> DashboardConfig:
        values = dict(payload or {})
        baseline = cls.defaults()
        mapping_payload = values.pop("field_mapping", None)
        years = values.pop("synthetic_years", baseline.synthetic_years)
        known = {
            "csv_source": str,
            "geojson_source": str,
            "default_year": int,
            "default_category": str,
            "top_n": int,
            "max_pie_categories": int,
            "bar_decimals": int,
            "pie_decimals": int,
            "missing_label": str,
            "other_label": str,
            "synthetic_records_per_state_year": int,
            "synthetic_seed": int,
            "request_timeout_seconds": float,
        }
        kwargs: dict[str, Any] = {
            name: caster(values.pop(name)) for name, caster in known.items() if name in values
        }
        if values:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(values))}")
        if len(years) != 2:
            raise ValueError("synthetic_years must contain exactly two years.")
        return cls(
            field_mapping=FieldMapping.from_mapping(mapping_payload) if mapping_payload else None,
            synthetic_years=(int(years[0]), int(years[1])),
            **kwargs,
        )

    @classmethod
    def from_json_file(cls, path: Path) -> DashboardConfig:
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Config file {path.name} must contain a JSON object.")
        return cls.from_mapping(payload)

    def to_dict(self) -> dict[str, Any]:
        return {
            "csv_source": self.csv_source,
            "geojson_source": self.geojson_source,
            "field_mapping": self.field_mapping.to_dict() if self.field_mapping else None,
            "default_year": self.default_year,
            "default_category": self.default_category,
            "top_n": self.top_n,
            "max_pie_categories": self.max_pie_categories,
            "bar_decimals": self.bar_decimals,
            "pie_decimals": self.pie_decimals,
            "missing_label": self.missing_label,
            "other_label": self.other_label,
            "synthetic_years": list(self.synthetic_years),
            "synthetic_records_per_state_year": self.synthetic_records_per_state_year,
            "synthetic_seed": self.synthetic_seed,
            "request_timeout_seconds": self.request_timeout_seconds,
        }


def load_config(path: Path | None = None) -> DashboardConfig:
    resolved = path or DEFAULT_CONFIG_PATH
    if path is None and not resolved.exists():
        return DashboardConfig.defaults()
    return DashboardConfig.from_json_file(resolved)
