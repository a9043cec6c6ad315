"""
src/callbacks/safety.py
────────────────────────
Safety page callbacks.
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from dash import Input, Output, html

from config.safety import SEVERITY_COLORS, SEVERITY_ORDER, STATUS_COLORS, TYPE_LABELS_FR
from src.data import store
from src.data.models import SafetyIncident
from src.layout.components.kpi_card import kpi_card
from src.layout.components.status_badge import severity_badge, status_badge
from src.services import reports

CARD_BG = "#161b22"
MUTED = "#8b949e"


def counts_figure(counts: dict[str, int], colors: dict[str, str] | None = None) -> go.Figure:
    colors = colors or {}
    keys = list(counts)
    fig = go.Figure(go.Bar(
        x=keys,
        y=[counts[k] for k in keys],
        marker_color=[colors.get(k, "#58a6ff") for k in keys],
    ))
    fig.update_layout(
        template="plotly_dark",
        paper_bgcolor=CARD_BG,
        plot_bgcolor=CARD_BG,
        margin={"l": 10, "r": 10, "t": 10, "b": 10},
        font={"color": "#c9d1d9", "size": 11},
        yaxis={"gridcolor": "#30363d"},
        height=220,
        showlegend=False,
    )
    return fig


def _incident_table(incidents: list[SafetyIncident]) -> html.Div:
    if not incidents:
        return html.Div("Aucun incident pour ces filtres.", style={"color": MUTED, "padding": "12px"})
    headers = ["N°", "Date", "Type", "Gravité", "Lieu", "Description", "Statut"]
    rows = [
        html.Tr([
            html.Td(i.incident_id, style={"fontSize": ".72rem", "color": "#58a6ff"}),
            html.Td(i.date.isoformat(), style={"fontSize": ".72rem", "color": MUTED}),
            html.Td(i.type, title=TYPE_LABELS_FR.get(i.type, i.type)),
            html.Td(severity_badge(i.severity)),
            html.Td(i.location),
            html.Td(i.description[:60] + "…" if len(i.description) > 60 else i.description,
                    style={"fontSize": ".70rem", "color": MUTED}),
            html.Td(status_badge(i.status)),
        ])
        for i in incidents
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
            Output("safety-kpi-strip", "children"),
            Output("safety-chart-status", "figure"),
            Output("safety-chart-type", "figure"),
            Output("safety-chart-severity", "figure"),
        ],
        Input("interval-live", "n_intervals"),
    )
    def update_safety_stats(n_intervals: int):
        stats = reports.get_safety_stats()
        by_status = stats.counts.by_status
        open_count = by_status.get("Ouvert", 0) + by_status.get("En cours", 0)

        kpis = dbc.Row(
            [
                dbc.Col(kpi_card("Incidents", str(stats.total), "#58a6ff"), xs=6, md=3),
                dbc.Col(kpi_card("Non résolus", str(open_count), "#da3633" if open_count else "#2ea44f"), xs=6, md=3),
                dbc.Col(kpi_card("Résolus", str(by_status.get("Résolu", 0)), "#2ea44f"), xs=6, md=3),
                dbc.Col(
                    kpi_card(
                        "Délai moyen de résolution",
                        f"{stats.avg_resolution_days:.1f} j",
                        "#e8a020",
                        sub_label=f"{stats.excluded_from_resolution} exclus (dates incohérentes)"
                        if stats.excluded_from_resolution else "",
                    ),
                    xs=6,
                    md=3,
                ),
            ],
            className="g-3",
        )

        severity_counts = dict(
            sorted(stats.counts.by_severity.items(), key=lambda kv: SEVERITY_ORDER.get(kv[0], 0))
        )
        return (
            kpis,
            counts_figure(by_status, STATUS_COLORS),
            counts_figure(stats.counts.by_type),
            counts_figure(severity_counts, SEVERITY_COLORS),
        )

    @app.callback(
        Output("safety-table", "children"),
        [
            Input("safety-filter-type", "value"),
            Input("safety-filter-severity", "value"),
            Input("safety-filter-status", "value"),
            Input("interval-live", "n_intervals"),
        ],
    )
    def update_incident_table(type_: str, severity: str, status: str, n_intervals: int):
        incidents = store.list_safety_incidents(type=type_, severity=severity, status=status)
        return _incident_table(incidents)
