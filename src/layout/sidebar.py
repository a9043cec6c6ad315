"""
src/layout/sidebar.py
──────────────────────
Report filter panel (time range, grouping, method) shown on the performance page.
"""
import dash_bootstrap_components as dbc
from dash import dcc, html

from config.site import METHOD_CONFIG
from src.analytics.time_window import DEFAULT_TIME_RANGE, TIME_RANGES

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"

TIME_RANGE_LABELS = {
    "7d": "7 jours",
    "30d": "30 jours",
    "90d": "90 jours",
    "365d": "1 an",
    "all": "Tout",
}

GROUP_LABELS = {
    "none": "Aucun",
    "method": "Méthode",
    "panel": "Panneau",
}


def _heading(text: str) -> html.Div:
    return html.Div(
        text,
        style={
            "fontSize": ".68rem",
            "color": MUTED,
            "textTransform": "uppercase",
            "letterSpacing": ".08em",
            "marginBottom": "8px",
            "marginTop": "10px",
        },
    )


def create_sidebar() -> html.Div:
    """Filter controls feeding the performance callbacks."""
    method_options = [{"label": "Toutes", "value": "all"}] + [
        {
            "label": html.Span(m["name"], style={"color": m["color"], "fontWeight": "600"}),
            "value": m_id,
        }
        for m_id, m in METHOD_CONFIG.items()
    ]

    return html.Div(
        [
            _heading("Période"),
            dbc.RadioItems(
                id="filter-time-range",
                options=[{"label": TIME_RANGE_LABELS[t], "value": t} for t in TIME_RANGES],
                value=DEFAULT_TIME_RANGE,
                inputStyle={"marginRight": "8px"},
                labelStyle={"cursor": "pointer", "marginBottom": "4px"},
            ),
            _heading("Regroupement"),
            dbc.RadioItems(
                id="filter-group-by",
                options=[{"label": label, "value": key} for key, label in GROUP_LABELS.items()],
                value="none",
                inputStyle={"marginRight": "8px"},
                labelStyle={"cursor": "pointer", "marginBottom": "4px"},
            ),
            _heading("Méthode"),
            dcc.Dropdown(
                id="filter-methode",
                options=method_options,
                value="all",
                clearable=False,
                className="dark-dropdown",
            ),
        ],
        style={
            "backgroundColor": CARD_BG,
            "border": f"1px solid {BORDER}",
            "borderRadius": "8px",
            "padding": "14px",
            "minWidth": "160px",
        },
    )
