"""
src/callbacks/performance.py
─────────────────────────────
Performance page callbacks.
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from dash import Input, Output, html

from config.site import METHOD_CONFIG
from src.data.models import PerformanceSeries, SeriesPoint, VolumeStats
from src.layout.components.kpi_card import format_number, kpi_card
from src.services import reports

CARD_BG = "#161b22"
GRID_CLR = "#30363d"
MUTED = "#8b949e"
PLOTLY_TMPL = "plotly_dark"

_SERIES_COLORS = ["#58a6ff", "#2ea44f", "#e8a020", "#f0883e", "#a371f7", "#da3633"]


def _layout(height: int = 280) -> dict:
    return {
        "template": PLOTLY_TMPL,
        "paper_bgcolor": CARD_BG,
        "plot_bgcolor": CARD_BG,
        "margin": {"l": 10, "r": 10, "t": 10, "b": 10},
        "font": {"color": "#c9d1d9", "size": 11},
        "xaxis": {"gridcolor": GRID_CLR},
        "yaxis": {"gridcolor": GRID_CLR},
        "legend": {"bgcolor": "rgba(0,0,0,0)", "font": {"size": 10}},
        "height": height,
        "showlegend": True,
    }


def _group_color(group: str | None, index: int) -> str:
    if group in METHOD_CONFIG:
        return METHOD_CONFIG[group]["color"]
    return _SERIES_COLORS[index % len(_SERIES_COLORS)]


def _split_series(points: list[SeriesPoint]) -> dict[str | None, list[SeriesPoint]]:
    groups: dict[str | None, list[SeriesPoint]] = {}
    for point in points:
        groups.setdefault(point.group, []).append(point)
    return groups


def series_figure(result: PerformanceSeries, metric: str) -> go.Figure:
    fig = go.Figure()
    for i, (group, points) in enumerate(_split_series(result.series).items()):
        fig.add_trace(go.Scatter(
            x=[p.date for p in points],
            y=[getattr(p, metric) for p in points],
            mode="lines+markers",
            name=group or "Total",
            line={"color": _group_color(group, i), "width": 1.5},
            marker={"size": 4},
        ))
    fig.update_layout(**_layout())
    return fig


def volume_figure(stats: VolumeStats) -> go.Figure:
    fig = go.Figure()
    for i, (group, points) in enumerate(_split_series(stats.series).items()):
        fig.add_trace(go.Bar(
            x=[p.date for p in points],
            y=[p.volume for p in points],
            name=group or "Total",
            marker_color=_group_color(group, i),
        ))
    fig.update_layout(**_layout(), barmode="stack")
    return fig


def methods_figure(stats: VolumeStats) -> go.Figure:
    fig = go.Figure(go.Pie(
        labels=[t.key for t in stats.by_method],
        values=[t.volume for t in stats.by_method],
        marker={"colors": [_group_color(t.key, i) for i, t in enumerate(stats.by_method)]},
        hole=0.55,
        textinfo="percent",
    ))
    fig.update_layout(**_layout())
    return fig


def _recent_table(recent) -> html.Div:
    if not recent:
        return html.Div("Aucune opération enregistrée.", style={"color": MUTED, "padding": "12px"})
    headers = ["Date", "Poste", "Méthode", "Machine", "Panneau", "Volume (m³)", "Métrage (m)", "Rendement", "Dispo."]
    rows = [
        html.Tr([
            html.Td(op.date.isoformat(), style={"fontSize": ".72rem", "color": MUTED}),
            html.Td(op.poste),
            html.Td(html.Span(op.methode, style={"color": METHOD_CONFIG.get(op.methode, {}).get("color", MUTED)})),
            html.Td(op.machine),
            html.Td(op.panneau),
            html.Td(format_number(op.volume_saute, decimals=1)),
            html.Td(format_number(op.metrage or 0)),
            html.Td(format_number(op.rendement or 0)),
            html.Td(f"{op.disponibilite or 0:.0f}%"),
        ])
        for op in recent
    ]
    return html.Table(
        [html.Thead(html.Tr([html.Th(h) for h in headers],
                            style={"color": MUTED, "fontSize": ".65rem", "textTransform": "uppercase"})),
         html.Tbody(rows)],
        style={"width": "100%", "borderCollapse": "collapse", "fontSize": ".8rem"},
    )


def register(app) -> None:

    @app.callback(
        [
            Output("perf-kpi-strip", "children"),
            Output("perf-chart-rendement", "figure"),
            Output("perf-chart-disponibilite", "figure"),
            Output("perf-chart-volume", "figure"),
            Output("perf-chart-methods", "figure"),
            Output("perf-recent-table", "children"),
        ],
        [
            Input("filter-time-range", "value"),
            Input("filter-group-by", "value"),
            Input("filter-methode", "value"),
            Input("interval-live", "n_intervals"),
        ],
    )
    def update_performance(time_range: str, group_by: str, methode: str, n_intervals: int):
        result = reports.get_performance_series(time_range, group_by, methode)
        volume = reports.get_volume_stats(time_range)
        overview = reports.get_overview_stats()
        summary = result.summary

        kpis = dbc.Row(
            [
                dbc.Col(kpi_card("Rendement moyen", format_number(summary.avg_rendement, "m/h", 1), "#58a6ff"), xs=6, md=3),
                dbc.Col(kpi_card("Disponibilité moyenne", f"{summary.avg_disponibilite:.1f}%", "#2ea44f"), xs=6, md=3),
                dbc.Col(kpi_card("Volume sauté", format_number(summary.total_volume, "m³"), "#e8a020"), xs=6, md=3),
                dbc.Col(
                    kpi_card(
                        "Métrage",
                        format_number(summary.total_metrage, "m"),
                        "#c9d1d9",
                        sub_label=f"{summary.operation_count} postes",
                    ),
                    xs=6,
                    md=3,
                ),
            ],
            className="g-3",
        )

        return (
            kpis,
            series_figure(result, "rendement"),
            series_figure(result, "disponibilite"),
            volume_figure(volume),
            methods_figure(volume),
            _recent_table(overview.recent),
        )
