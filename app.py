"""
app.py
──────
Décapage Operations Monitor: Application Entry Point.

Startup sequence:
  1. Configure logging and initialize the SQLite DB (seeded with simulated shifts)
  2. Create Dash app with DARKLY bootstrap theme
  3. Register all callbacks
  4. Run dev server (or expose `server` for gunicorn in production)
"""
import logging

import dash
import dash_bootstrap_components as dbc

from config.settings import settings
from src.data.store import initialize_db
from src.layout.main import create_layout

# ── 1. Logging + database ─────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

logger.info("Initializing database and seeding simulation data...")
initialize_db()
logger.info("Database ready.")

# ── 2. Dash app ───────────────────────────────────────────────────────────────
app = dash.Dash(
    __name__,
    external_stylesheets=[dbc.themes.DARKLY],
    suppress_callback_exceptions=True,
    meta_tags=[{"name": "viewport", "content": "width=device-width, initial-scale=1"}],
    title="Décapage Monitor",
)

server = app.server  # gunicorn entry point
app.layout = create_layout()

# ── 3. Register callbacks ─────────────────────────────────────────────────────
from src.callbacks import navigation, performance, progress, safety

navigation.register(app)
performance.register(app)
progress.register(app)
safety.register(app)

# ── 4. Run ────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    app.run(
        debug=settings.DEBUG,
        host=settings.HOST,
        port=settings.PORT,
    )
