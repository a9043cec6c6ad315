"""
src/pages/progress.py
──────────────────────
Zone (panneau) progress page.
"""
import dash_bootstrap_components as dbc
from dash import dcc, html


def layout() -> html.Div:
    return html.Div(
        [
            html.Div(
                [
                    html.H2("Avancement par Panneau", className="page-title"),
                    html.P("Volume et métrage cumulés par rapport aux objectifs de campagne", className="page-subtitle"),
                ],
                className="page-header",
            ),

            html.Div(id="progress-kpi-strip", className="mb-3"),

            dbc.Row(id="progress-gauges", className="g-3 mb-3"),

            dbc.Row(
                [
                    dbc.Col(html.Div([html.Div("Volume vs objectif (m³)", className="chart-title"), dcc.Graph(id="progress-chart-volume", config={"displayModeBar": False})], className="chart-card"), md=7),
                    dbc.Col(html.Div([html.Div("Détail des zones", className="chart-title"), html.Div(id="progress-table")], className="chart-card"), md=5),
                ],
                className="g-3",
            ),
        ],
        style={"padding": "1.5rem"},
    )
