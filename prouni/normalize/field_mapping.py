from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

LOGICAL_FIELDS = ("state", "year", "turno", "tipo_bolsa", "sexo", "raca", "ies")
REQUIRED_FIELDS = ("state", "year")

# Case-insensitive substrings tried in header order when no mapping fits.
_DETECTION_HINTS: dict[str, tuple[str, ...]] = {
    "state": ("uf",),
    "year": ("ano",),
    "turno": ("turno",),
    "tipo_bolsa": ("tipo_bolsa", "tipo"),
    "sexo": ("sexo", "genero"),
    "raca": ("raca", "raça", "etnia"),
    "ies": ("ies", "instituicao"),
}


@dataclass(frozen=True, slots=True)
class FieldMapping:
    """Logical field name -> CSV column name."""

    state: str = "UF_BENEFICIARIO_BOLSA"
    year: str = "ANO_CONCESSAO_BOLSA"
    turno: str = "NOME_TURNO_CURSO_BOLSA"
    tipo_bolsa: str = "TIPO_BOLSA"
    sexo: str = "SEXO_BENEFICIARIO_BOLSA"
    raca: str = "RACA_BENEFICIARIO_BOLSA"
    ies: str = "NOME_IES_BOLSA"

    def __post_init__(self) -> None:
        seen: dict[str, str] = {}
        for field_name in LOGICAL_FIELDS:
            column = getattr(self, field_name)
            if not isinstance(column, str) or not column.strip():
                raise ValueError(f"Field mapping '{field_name}' must be a non-empty column name.")
            if column in seen:
                raise ValueError(
                    f"Column '{column}' is mapped to both '{seen[column]}' and '{field_name}'."
                )
            seen[column] = field_name

    @classmethod
    def default(cls) -> FieldMapping:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> FieldMapping:
        values = payload or {}
        unknown = sorted(set(values) - set(LOGICAL_FIELDS))
        if unknown:
            raise ValueError(f"Unknown logical fields in mapping: {', '.join(unknown)}")
        baseline = cls.default()
        return cls(**{name: str(values.get(name, getattr(baseline, name))) for name in LOGICAL_FIELDS})

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in LOGICAL_FIELDS}

    def missing_columns(self, columns: Iterable[str], fields: Iterable[str] = LOGICAL_FIELDS) -> list[str]:
        available = set(columns)
        return [name for name in fields if getattr(self, name) not in available]


def detect_field_mapping(columns: Iterable[str]) -> FieldMapping:
    header = [str(column) for column in columns]
    baseline = FieldMapping.default()
    assigned: dict[str, str] = {}
    used: set[str] = set()

    for field_name in LOGICAL_FIELDS:
        default_column = getattr(baseline, field_name)
        if default_column in header and default_column not in used:
            assigned[field_name] = default_column
            used.add(default_column)
            continue
        for hint in _DETECTION_HINTS[field_name]:
            match = next(
                (column for column in header if column not in used and hint in column.lower()),
                None,
            )
            if match is not None:
                assigned[field_name] = match
                used.add(match)
                break

    missing_required = [name for name in REQUIRED_FIELDS if name not in assigned]
    if missing_required:
        raise ValueError(
            "Could not detect columns for "
            f"{', '.join(missing_required)} in header: {', '.join(header)}"
        )

    # Undetected optional fields keep the default name and load as empty columns.
    for field_name in LOGICAL_FIELDS:
        if field_name not in assigned:
            candidate = getattr(baseline, field_name)
            assigned[field_name] = candidate if candidate not in used else f"__missing_{field_name}"

    return FieldMapping(**assigned)


def resolve_field_mapping(
    columns: Iterable[str],
    explicit: FieldMapping | Mapping[str, Any] | None = None,
) -> FieldMapping:
    header = [str(column) for column in columns]

    if explicit is not None:
        mapping = explicit if isinstance(explicit, FieldMapping) else FieldMapping.from_mapping(explicit)
        missing_required = mapping.missing_columns(header, REQUIRED_FIELDS)
        if missing_required:
            raise ValueError(
                "Configured field mapping references missing columns: "
                + ", ".join(f"{name}={getattr(mapping, name)!r}" for name in missing_required)
            )
        missing_optional = mapping.missing_columns(header)
        if missing_optional:
            logger.warning(
                "Optional columns not found, values will be reported as missing: %s",
                ", ".join(missing_optional),
            )
        return mapping

    baseline = FieldMapping.default()
    if not baseline.missing_columns(header, REQUIRED_FIELDS):
        return baseline

    detected = detect_field_mapping(header)
    logger.warning(
        "No field mapping configured and default columns absent; detected %s",
        detected.to_dict(),
    )
    return detected
