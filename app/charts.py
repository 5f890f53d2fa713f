from __future__ import annotations

from typing import Any, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from prouni.aggregate.aggregator import AggregationEntry
from prouni.aggregate.time_series import TimeSeriesPoint

CHART_COLORS = ["#4e79a7", "#f28e2c", "#e15759", "#76b7b2", "#59a14f", "#edc949", "#af7aa1", "#ff9da7"]
HIGHLIGHT_COLOR = "orange"


def _outer_rings(geometry: dict[str, Any] | None) -> list[list[list[float]]]:
    geometry = geometry or {}
    coordinates = geometry.get("coordinates") or []
    if geometry.get("type") == "Polygon":
        return coordinates[:1]
    if geometry.get("type") == "MultiPolygon":
        return [polygon[0] for polygon in coordinates if polygon]
    return []


def label_position(geometry: dict[str, Any] | None) -> tuple[float, float] | None:
    """Mean vertex of the largest outer ring, as (lon, lat)."""

    rings = [ring for ring in _outer_rings(geometry) if ring]
    if not rings:
        return None
    ring = max(rings, key=len)
    return (
        sum(point[0] for point in ring) / len(ring),
        sum(point[1] for point in ring) / len(ring),
    )


def entries_to_frame(entries: Sequence[AggregationEntry]) -> pd.DataFrame:
    return pd.DataFrame(
        [entry.to_dict() for entry in entries],
        columns=["category", "count", "percentage"],
    )


def bar_chart(entries: Sequence[AggregationEntry], *, title: str, height: int = 320) -> go.Figure:
    df = entries_to_frame(entries)
    fig = px.bar(
        df,
        x="category",
        y="percentage",
        color="category",
        color_discrete_sequence=CHART_COLORS,
        hover_data={"count": True, "percentage": ":.2f", "category": False},
        labels={"category": "", "percentage": "Porcentagem (%)", "count": "Bolsas"},
        title=title,
        height=height,
    )
    fig.update_layout(showlegend=False, margin=dict(l=10, r=10, t=50, b=10))
    fig.update_yaxes(ticksuffix="%")
    return fig


def pie_chart(entries: Sequence[AggregationEntry], *, title: str, height: int = 260) -> go.Figure:
    df = entries_to_frame(entries)
    fig = px.pie(
        df,
        names="category",
        values="count",
        color_discrete_sequence=CHART_COLORS,
        title=title,
        height=height,
    )
    # Aggregated percentages are already rounded; show them instead of plotly's own.
    fig.update_traces(
        sort=False,
        text=[f"{value:g}%" for value in df["percentage"]],
        textinfo="text",
        hovertemplate="%{label}<br>%{value} bolsas<extra></extra>",
    )
    fig.update_layout(margin=dict(l=10, r=10, t=50, b=10), legend=dict(font=dict(size=10)))
    return fig


def line_chart(points: Sequence[TimeSeriesPoint], *, title: str, height: int = 300) -> go.Figure:
    df = pd.DataFrame([point.to_dict() for point in points], columns=["year", "count"])
    fig = px.line(
        df,
        x="year",
        y="count",
        markers=True,
        labels={"year": "Ano", "count": "Bolsas"},
        title=title,
        height=height,
    )
    fig.update_traces(line_color="#69b3a2")
    fig.update_xaxes(tickformat="d", dtick=1)
    fig.update_layout(margin=dict(l=10, r=10, t=50, b=10))
    return fig


def choropleth_map(
    geojson: dict[str, Any],
    state_counts: dict[str, int],
    *,
    selected_state: str | None = None,
    height: int = 420,
) -> go.Figure:
    rows = []
    for feature in geojson.get("features") or []:
        properties = feature.get("properties") or {}
        code = str(properties.get("sigla") or "")
        rows.append(
            {
                "sigla": code,
                "nome": str(properties.get("nome") or code),
                "bolsas": int(state_counts.get(code, 0)),
            }
        )
    df = pd.DataFrame(rows, columns=["sigla", "nome", "bolsas"])

    fig = px.choropleth(
        df,
        geojson=geojson,
        locations="sigla",
        featureidkey="properties.sigla",
        color="bolsas",
        color_continuous_scale="Blues",
        hover_name="nome",
        hover_data={"sigla": False, "bolsas": True},
        height=height,
    )
    if selected_state and selected_state in set(df["sigla"]):
        fig.add_trace(
            go.Choropleth(
                geojson=geojson,
                locations=[selected_state],
                featureidkey="properties.sigla",
                z=[1],
                colorscale=[[0, HIGHLIGHT_COLOR], [1, HIGHLIGHT_COLOR]],
                showscale=False,
                hoverinfo="skip",
                marker_line_color="black",
                marker_line_width=1.5,
            )
        )
    labels = []
    for feature in geojson.get("features") or []:
        code = str((feature.get("properties") or {}).get("sigla") or "")
        position = label_position(feature.get("geometry"))
        if code and position:
            labels.append((code, position))
    if labels:
        fig.add_trace(
            go.Scattergeo(
                lon=[position[0] for _, position in labels],
                lat=[position[1] for _, position in labels],
                text=[code for code, _ in labels],
                mode="text",
                textfont=dict(size=10, color="black"),
                hoverinfo="skip",
                showlegend=False,
            )
        )
    fig.update_geos(fitbounds="locations", visible=False)
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        coloraxis_colorbar=dict(title="Bolsas"),
    )
    return fig
