"""
src/pages/safety.py
────────────────────
Safety incidents page: counts, resolution time, filtered incident list.
"""
import dash_bootstrap_components as dbc
from dash import dcc, html

from config.safety import IncidentSeverity, IncidentStatus, IncidentType

MUTED = "#8b949e"


def _filter(label: str, component_id: str, values: list[str]) -> dbc.Col:
    return dbc.Col(
        [
            html.Label(label, style={"fontSize": ".72rem", "color": MUTED, "textTransform": "uppercase"}),
            dcc.Dropdown(
                id=component_id,
                options=[{"label": "Tous", "value": "all"}] + [{"label": v, "value": v} for v in values],
                value="all",
                clearable=False,
                className="dark-dropdown",
            ),
        ],
        md=3,
    )


def layout() -> html.Div:
    return html.Div(
        [
            html.Div(
                [
                    html.H2("Sécurité", className="page-title"),
                    html.P("Incidents HSE et techniques · délai moyen de résolution", className="page-subtitle"),
                ],
                className="page-header",
            ),

            html.Div(id="safety-kpi-strip", className="mb-3"),

            dbc.Row(
                [
                    dbc.Col(html.Div([html.Div("Par statut", className="chart-title"), dcc.Graph(id="safety-chart-status", config={"displayModeBar": False})], className="chart-card"), md=4),
                    dbc.Col(html.Div([html.Div("Par type", className="chart-title"), dcc.Graph(id="safety-chart-type", config={"displayModeBar": False})], className="chart-card"), md=4),
                    dbc.Col(html.Div([html.Div("Par gravité", className="chart-title"), dcc.Graph(id="safety-chart-severity", config={"displayModeBar": False})], className="chart-card"), md=4),
                ],
                className="g-3 mb-3",
            ),

            # ── Filters ────────────────────────────────────────────────────────
            dbc.Row(
                [
                    _filter("Type", "safety-filter-type", [t.value for t in IncidentType]),
                    _filter("Gravité", "safety-filter-severity", [s.value for s in IncidentSeverity]),
                    _filter("Statut", "safety-filter-status", [s.value for s in IncidentStatus]),
                ],
                className="g-3 mb-3",
            ),

            html.Div(
                [
                    html.Div("Incidents", className="chart-title"),
                    html.Div(id="safety-table"),
                ],
                className="chart-card",
            ),
        ],
        style={"padding": "1.5rem"},
    )
