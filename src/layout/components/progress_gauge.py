"""
src/layout/components/progress_gauge.py
────────────────────────────────────────
Zone completion gauge using Plotly indicator chart.
"""
from __future__ import annotations

import plotly.graph_objects as go
from dash import dcc

from config.site import PROGRESS_BANDS, PROGRESS_COLORS
from src.analytics.progress import classify_progress

CARD_BG = "#161b22"


def _faded(hex_color: str, alpha: float = 0.12) -> str:
    r, g, b = (int(hex_color[i : i + 2], 16) for i in (1, 3, 5))
    return f"rgba({r},{g},{b},{alpha})"


def _band_steps() -> list[dict]:
    # PROGRESS_BANDS is highest first; gauge steps go low → high
    steps = []
    upper = 100.0
    for minimum, band in PROGRESS_BANDS:
        if minimum >= upper:
            continue
        steps.append({"range": [minimum, upper], "color": _faded(PROGRESS_COLORS[band])})
        upper = minimum
    return list(reversed(steps))


def progress_gauge(
    percent_complete: float,
    zone: str,
    height: int = 200,
) -> dcc.Graph:
    """
    Plotly gauge indicator for a zone's volume completion.

    Args:
        percent_complete: 0–100 value
        zone: Label shown above gauge
        height: Figure height in px
    """
    color = PROGRESS_COLORS[classify_progress(percent_complete)]

    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=percent_complete,
        number={"suffix": "%", "font": {"color": color, "size": 26}, "valueformat": ".1f"},
        title={"text": zone, "font": {"color": "#8b949e", "size": 12}},
        gauge={
            "axis": {
                "range": [0, 100],
                "tickwidth": 1,
                "tickcolor": "#30363d",
                "tickfont": {"color": "#8b949e", "size": 9},
            },
            "bar": {"color": color, "thickness": 0.25},
            "bgcolor": "rgba(0,0,0,0)",
            "borderwidth": 0,
            "steps": _band_steps(),
        },
    ))

    fig.update_layout(
        paper_bgcolor=CARD_BG,
        plot_bgcolor=CARD_BG,
        margin=dict(l=20, r=20, t=40, b=20),
        height=height,
        font=dict(color="#c9d1d9"),
    )

    return dcc.Graph(
        figure=fig,
        config={"displayModeBar": False},
        style={"height": f"{height}px"},
    )
