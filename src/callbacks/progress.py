"""
src/callbacks/progress.py
──────────────────────────
Zone progress page callbacks.
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from dash import Input, Output, html

from config.site import PROGRESS_COLORS
from src.data.models import ProgressReport
from src.layout.components.kpi_card import format_number, kpi_card
from src.layout.components.progress_gauge import progress_gauge
from src.layout.components.status_badge import progress_badge
from src.services import reports

CARD_BG = "#161b22"
GRID_CLR = "#30363d"
MUTED = "#8b949e"


def volume_vs_target_figure(report: ProgressReport) -> go.Figure:
    zones = [z.zone for z in report.zones]
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=zones,
        y=[z.volume_target for z in report.zones],
        name="Objectif",
        marker_color="rgba(139,148,158,0.35)",
    ))
    fig.add_trace(go.Bar(
        x=zones,
        y=[z.volume for z in report.zones],
        name="Réalisé",
        marker_color=[PROGRESS_COLORS[z.status] for z in report.zones],
    ))
    fig.update_layout(
        template="plotly_dark",
        paper_bgcolor=CARD_BG,
        plot_bgcolor=CARD_BG,
        margin={"l": 10, "r": 10, "t": 10, "b": 10},
        font={"color": "#c9d1d9", "size": 11},
        xaxis={"gridcolor": GRID_CLR},
        yaxis={"gridcolor": GRID_CLR},
        legend={"bgcolor": "rgba(0,0,0,0)", "font": {"size": 10}},
        barmode="overlay",
        height=320,
    )
    return fig


def _zone_table(report: ProgressReport) -> html.Table:
    headers = ["Zone", "Volume", "Métrage", "Avancement", "Statut"]
    rows = [
        html.Tr([
            html.Td(z.zone, style={"fontWeight": "600"}),
            html.Td(f"{format_number(z.volume)} / {format_number(z.volume_target)}"),
            html.Td(f"{format_number(z.metrage)} / {format_number(z.metrage_target)}"),
            html.Td(f"{z.percent_complete:.1f}%"),
            html.Td(progress_badge(z.status)),
        ])
        for z in report.zones
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
            Output("progress-kpi-strip", "children"),
            Output("progress-gauges", "children"),
            Output("progress-chart-volume", "figure"),
            Output("progress-table", "children"),
        ],
        Input("interval-live", "n_intervals"),
    )
    def update_progress(n_intervals: int):
        report = reports.get_zone_progress()
        overall = report.overall
        done = sum(1 for z in report.zones if z.status == "complete")

        kpis = dbc.Row(
            [
                dbc.Col(kpi_card("Avancement volume", f"{overall.percent_volume_complete:.1f}%", "#58a6ff"), xs=6, md=3),
                dbc.Col(kpi_card("Avancement métrage", f"{overall.percent_metrage_complete:.1f}%", "#2ea44f"), xs=6, md=3),
                dbc.Col(
                    kpi_card(
                        "Volume cumulé",
                        format_number(overall.total_volume, "m³"),
                        sub_label=f"objectif {format_number(overall.total_volume_target, 'm³')}",
                    ),
                    xs=6,
                    md=3,
                ),
                dbc.Col(kpi_card("Zones terminées", f"{done} / {len(report.zones)}", PROGRESS_COLORS["complete"]), xs=6, md=3),
            ],
            className="g-3",
        )

        gauges = [
            dbc.Col(html.Div(progress_gauge(z.percent_complete, z.zone, height=180), className="chart-card"), xs=6, md=2)
            for z in report.zones
        ]

        return kpis, gauges, volume_vs_target_figure(report), _zone_table(report)
