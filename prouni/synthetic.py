from __future__ import annotations

from typing import Any, Iterable

import numpy as np
import pandas as pd

from prouni.normalize.schema import CANONICAL_COLUMNS, BolsaRecord
from prouni.normalize.states import BRAZIL_STATES

TURNOS = ("Noturno", "Integral", "Matutino", "Vespertino", "Curso a distância")
TIPOS_BOLSA = ("BOLSA INTEGRAL", "BOLSA PARCIAL 50%")
SEXOS = ("F", "M")
RACAS = ("Branca", "Parda", "Preta", "Amarela", "Indígena", "Não Informada")
INSTITUTION_TEMPLATES = (
    "Universidade Paulista",
    "Centro Universitário",
    "Faculdade Estácio",
    "Universidade Católica",
    "Faculdade Anhanguera",
    "Centro Universitário UNINOVE",
    "Universidade Pitágoras",
)

# Sampling weights roughly follow the national ProUni distribution.
_TURNO_WEIGHTS = np.array([0.45, 0.15, 0.15, 0.05, 0.20])
_TIPO_WEIGHTS = np.array([0.7, 0.3])
_RACA_WEIGHTS = np.array([0.35, 0.38, 0.15, 0.02, 0.01, 0.09])


def _institutions_for_state(state: str) -> list[str]:
    return [f"{template} - {state}" for template in INSTITUTION_TEMPLATES]


def generate_synthetic_dataset(
    states: Iterable[str] | None = None,
    years: tuple[int, int] = (2015, 2019),
    records_per_state_year: int = 40,
    seed: int = 0,
) -> pd.DataFrame:
    """Seeded stand-in dataset covering every state and year in ``years``.

    Used when the scholarship CSV cannot be loaded, so every aggregation still
    receives a well-typed frame. The same arguments always produce the same rows.
    """

    start_year, end_year = years
    if start_year > end_year:
        raise ValueError("years must be an ascending (start, end) pair.")
    if records_per_state_year < 1:
        raise ValueError("records_per_state_year must be at least 1.")

    state_codes = sorted(states) if states is not None else sorted(BRAZIL_STATES)
    rng = np.random.RandomState(seed)
    records: list[dict[str, Any]] = []

    for state in state_codes:
        institutions = _institutions_for_state(state)
        for year in range(start_year, end_year + 1):
            n = records_per_state_year
            turnos = rng.choice(len(TURNOS), size=n, p=_TURNO_WEIGHTS)
            tipos = rng.choice(len(TIPOS_BOLSA), size=n, p=_TIPO_WEIGHTS)
            sexos = rng.randint(0, len(SEXOS), size=n)
            racas = rng.choice(len(RACAS), size=n, p=_RACA_WEIGHTS)
            ies = rng.randint(0, len(institutions), size=n)
            for index in range(n):
                record = BolsaRecord(
                    state=state,
                    year=year,
                    turno=TURNOS[int(turnos[index])],
                    tipo_bolsa=TIPOS_BOLSA[int(tipos[index])],
                    sexo=SEXOS[int(sexos[index])],
                    raca=RACAS[int(racas[index])],
                    ies=institutions[int(ies[index])],
                )
                records.append(record.to_dict())

    df = pd.DataFrame(records, columns=CANONICAL_COLUMNS)
    df["year"] = df["year"].astype("Int64")
    return df


def synthetic_state_collection(states: dict[str, str] | None = None) -> dict[str, Any]:
    """Geometry-less FeatureCollection listing each state's sigla and nome."""

    names = states or BRAZIL_STATES
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"sigla": code, "nome": name},
                "geometry": None,
            }
            for code, name in sorted(names.items())
        ],
    }
