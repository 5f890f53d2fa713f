from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import streamlit as st

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.charts import bar_chart, choropleth_map, line_chart, pie_chart
from app.helpers import (
    clicked_state,
    default_year_index,
    format_state_option,
    format_top_institutions,
    has_geometry,
    state_options,
    year_options,
)
from prouni.aggregate.selection import Selection, SelectionState
from prouni.aggregate.summary import DashboardSummary, build_dashboard_summary
from prouni.config import CATEGORY_LABELS, DashboardConfig, load_config
from prouni.ingest.loaders import LoadResult, load_dashboard_inputs, state_names

logger = logging.getLogger(__name__)

MAP_KEY = "state_map"
LAST_MAP_CLICK_KEY = "last_map_click"

PIE_TITLES = {
    "tipo_bolsa": "Tipo de bolsa",
    "sexo": "Sexo",
    "raca": "Raça/cor",
}


@st.cache_resource(show_spinner=False)
def _load_config_cached() -> DashboardConfig:
    return load_config()


@st.cache_data(show_spinner="Carregando dados...")
def _load_inputs_cached(config_payload: dict[str, Any]) -> LoadResult:
    return load_dashboard_inputs(DashboardConfig.from_mapping(config_payload))


def _render_placeholder(summary: DashboardSummary) -> None:
    if summary.selection_state is SelectionState.NO_STATE_SELECTED:
        st.info(summary.message)
    else:
        st.warning(summary.message)


def _render_state_info(summary: DashboardSummary, names: dict[str, str]) -> None:
    st.subheader("Estado selecionado")
    state = summary.selection.state
    st.write(format_state_option(state or "", names))
    st.metric("Total de bolsas", f"{summary.total_awards:,}".replace(",", "."))
    st.markdown("**Top instituições**")
    if summary.selection_state is SelectionState.NO_STATE_SELECTED:
        st.caption("Selecione um estado.")
        return
    for line in format_top_institutions(summary.top_institutions):
        st.write(f"- {line}")


def _render_map(inputs: LoadResult, summary: DashboardSummary) -> None:
    st.subheader("Bolsas por estado")
    if not has_geometry(inputs.geojson):
        st.info("Mapa indisponível: não foi possível carregar os limites dos estados.")
        return
    fig = choropleth_map(
        inputs.geojson,
        summary.state_counts,
        selected_state=summary.selection.state,
    )
    st.plotly_chart(
        fig,
        use_container_width=True,
        on_select="rerun",
        selection_mode="points",
        key=MAP_KEY,
    )


def _apply_map_click(options: list[str]) -> None:
    # A new click on the map overrides the dropdown; a stale one does not.
    code = clicked_state(st.session_state.get(MAP_KEY), options)
    if code and code != st.session_state.get(LAST_MAP_CLICK_KEY):
        st.session_state["selected_state"] = code
    st.session_state[LAST_MAP_CLICK_KEY] = code


def _render_breakdowns(summary: DashboardSummary) -> None:
    if summary.selection_state is not SelectionState.STATE_SELECTED_WITH_DATA:
        _render_placeholder(summary)
        return

    st.plotly_chart(
        bar_chart(summary.turno, title="Bolsas por turno do curso"),
        use_container_width=True,
    )

    columns = st.columns(len(PIE_TITLES))
    for column, (field_name, title) in zip(columns, PIE_TITLES.items()):
        entries = summary.pies.get(field_name) or []
        with column:
            if entries:
                st.plotly_chart(pie_chart(entries, title=title), use_container_width=True)
            else:
                st.caption(f"{title}: sem dados para esta categoria.")

    category_label = CATEGORY_LABELS.get(summary.selection.category, summary.selection.category)
    st.plotly_chart(
        pie_chart(summary.category, title=f"Distribuição por {category_label.lower()}", height=320),
        use_container_width=True,
    )


def _render_trend(summary: DashboardSummary, names: dict[str, str]) -> None:
    st.subheader("Evolução anual")
    if summary.selection_state is SelectionState.NO_STATE_SELECTED:
        st.info("Selecione um estado para visualizar os dados.")
        return
    if not summary.yearly:
        st.warning(f"Sem dados para {format_state_option(summary.selection.state or '', names)}.")
        return
    st.plotly_chart(
        line_chart(summary.yearly, title=f"Bolsas por ano em {summary.selection.state}"),
        use_container_width=True,
    )


def main() -> None:
    st.set_page_config(page_title="Bolsas ProUni por Estado", layout="wide")
    st.title("Bolsas ProUni por Estado")
    st.caption("Filtro por estado e ano -> agregação por categoria -> gráficos")

    try:
        config = _load_config_cached()
    except (ValueError, FileNotFoundError) as exc:
        st.error(f"Configuração inválida: {exc}. Usando valores padrão.")
        config = DashboardConfig.defaults()

    inputs = _load_inputs_cached(config.to_dict())
    if inputs.dataset_is_synthetic:
        st.warning(
            "Não foi possível carregar o CSV de bolsas; exibindo dados sintéticos. "
            f"Detalhe: {inputs.errors.get('csv', 'desconhecido')}"
        )
    if inputs.geojson_is_synthetic:
        st.warning(f"GeoJSON indisponível: {inputs.errors.get('geojson', 'desconhecido')}")

    names = state_names(inputs.geojson)
    years = year_options(inputs.dataset)
    categories = list(CATEGORY_LABELS)
    states = state_options(inputs.geojson, inputs.dataset)
    _apply_map_click(states)

    with st.sidebar:
        st.header("Filtros")
        state = st.selectbox(
            "Estado",
            options=states,
            format_func=lambda code: format_state_option(code, names),
            key="selected_state",
        )
        year = st.selectbox(
            "Ano",
            options=years,
            index=default_year_index(years, config.default_year),
            key="selected_year",
        )
        category = st.selectbox(
            "Categoria",
            options=categories,
            index=categories.index(config.default_category),
            format_func=lambda name: CATEGORY_LABELS[name],
            key="selected_category",
        )

    selection = Selection.from_controls(state, year, category)
    summary = build_dashboard_summary(inputs.dataset, selection, config)
    logger.debug("Selection %s -> %s", selection.to_dict(), summary.selection_state.value)

    map_col, info_col = st.columns([2, 1])
    with map_col:
        _render_map(inputs, summary)
    with info_col:
        _render_state_info(summary, names)

    st.header(f"Distribuição das bolsas em {year}")
    _render_breakdowns(summary)
    _render_trend(summary, names)


if __name__ == "__main__":
    main()
