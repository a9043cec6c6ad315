"""
src/layout/components/status_badge.py
──────────────────────────────────────
Coloured inline badges for incident status / severity and zone progress.
"""

from dash import html

from config.safety import SEVERITY_COLORS, STATUS_COLORS
from config.site import PROGRESS_COLORS, PROGRESS_LABELS_FR

MUTED = "#8b949e"


def _badge(label: str, color: str) -> html.Span:
    return html.Span(
        label,
        style={
            "fontSize": ".65rem",
            "fontWeight": "700",
            "color": color,
            "border": f"1px solid {color}",
            "borderRadius": "4px",
            "padding": "1px 7px",
            "whiteSpace": "nowrap",
        },
    )


def status_badge(status: str) -> html.Span:
    """Incident status (Ouvert / En cours / Résolu)."""
    status = getattr(status, "value", status)
    return _badge(status, STATUS_COLORS.get(status, MUTED))


def severity_badge(severity: str) -> html.Span:
    return _badge(severity, SEVERITY_COLORS.get(severity, MUTED))


def progress_badge(band: str) -> html.Span:
    """Zone progress band, labelled in French."""
    return _badge(PROGRESS_LABELS_FR.get(band, band), PROGRESS_COLORS.get(band, MUTED))
