"""
src/pages/performance.py
─────────────────────────
Performance page: rendement / disponibilité series, volume by method.

Layout: filter sidebar + KPI strip + charts + recent shifts.
"""
import dash_bootstrap_components as dbc
from dash import dcc, html

from src.layout.sidebar import create_sidebar


def layout() -> html.Div:
    return html.Div(
        [
            html.Div(
                [
                    html.H2("Performance Décapage", className="page-title"),
                    html.P("Rendement, disponibilité et volumes sautés par poste", className="page-subtitle"),
                ],
                className="page-header",
            ),

            dbc.Row(
                [
                    # ── Filters ───────────────────────────────────────────────
                    dbc.Col(create_sidebar(), md=2),

                    # ── Main panel ────────────────────────────────────────────
                    dbc.Col(
                        [
                            html.Div(id="perf-kpi-strip", className="mb-3"),

                            dbc.Row(
                                [
                                    dbc.Col(html.Div([html.Div("Rendement (m/h)", className="chart-title"), dcc.Graph(id="perf-chart-rendement", config={"displayModeBar": False})], className="chart-card"), md=6),
                                    dbc.Col(html.Div([html.Div("Disponibilité (%)", className="chart-title"), dcc.Graph(id="perf-chart-disponibilite", config={"displayModeBar": False})], className="chart-card"), md=6),
                                ],
                                className="g-3 mb-3",
                            ),

                            dbc.Row(
                                [
                                    dbc.Col(html.Div([html.Div("Volume sauté par méthode (m³)", className="chart-title"), dcc.Graph(id="perf-chart-volume", config={"displayModeBar": False})], className="chart-card"), md=8),
                                    dbc.Col(html.Div([html.Div("Répartition par méthode", className="chart-title"), dcc.Graph(id="perf-chart-methods", config={"displayModeBar": False})], className="chart-card"), md=4),
                                ],
                                className="g-3 mb-3",
                            ),

                            html.Div(
                                [
                                    html.Div("Derniers postes saisis", className="chart-title"),
                                    html.Div(id="perf-recent-table"),
                                ],
                                className="chart-card",
                            ),
                        ],
                        md=10,
                    ),
                ],
                className="g-3",
            ),
        ],
        style={"padding": "1.5rem"},
    )
